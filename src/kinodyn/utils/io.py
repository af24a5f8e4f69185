# src/kinodyn/utils/io.py
import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

import numpy as np
import pandas as pd

from kinodyn.core.leapfrog import Trajectory
from kinodyn.core.options import LeapfrogOptions, SpectralOptions, parse_options

logger = logging.getLogger(__name__)

OPTION_KINDS = {
    "spectral": SpectralOptions,
    "leapfrog": LeapfrogOptions,
}


def trajectory_frame(trajectory: Trajectory) -> pd.DataFrame:
    """
    Tabulate a trajectory as one row per time step.

    Columns are ``t``, ``x_0 .. x_{n-1}`` and ``v_0 .. v_{n-1}``.
    """
    t, x, v = trajectory
    x = np.asarray(x).reshape(len(t), -1)
    v = np.asarray(v).reshape(len(t), -1)

    data: Dict[str, Any] = {"t": np.asarray(t)}
    for i in range(x.shape[1]):
        data[f"x_{i}"] = x[:, i]
    for i in range(v.shape[1]):
        data[f"v_{i}"] = v[:, i]
    return pd.DataFrame(data)


def save_trajectory(trajectory: Trajectory, filepath: Union[str, Path]) -> Path:
    """
    Saves a trajectory to a CSV file.

    Args:
        trajectory: Result of ``leapfrog`` (or any ``(t, x, v)`` triple).
        filepath: Destination path (e.g., 'results/run1.csv')

    Returns:
        The path written to.
    """
    t, _, _ = trajectory
    if len(t) == 0:
        raise ValueError("Trajectory is empty. Nothing to save.")

    path = Path(filepath)
    # Ensure the directory exists
    path.parent.mkdir(parents=True, exist_ok=True)

    trajectory_frame(trajectory).to_csv(path, index=False)
    logger.info("Trajectory saved to %s", path.absolute())
    return path


def load_solver_options(filepath: Union[str, Path], kind: str):
    """
    Load solver options from a JSON file.

    Args:
        filepath: JSON file holding an object of option overrides,
            e.g. ``{"Nodes": 29}``.
        kind: ``"spectral"`` or ``"leapfrog"``.

    Returns:
        ``SpectralOptions`` or ``LeapfrogOptions`` with the overrides applied.
    """
    if kind not in OPTION_KINDS:
        raise ValueError(f"Unknown options kind '{kind}'. Valid kinds: {sorted(OPTION_KINDS)}")

    with open(filepath, "r", encoding="utf-8") as f:
        overrides = json.load(f)

    if not isinstance(overrides, dict):
        raise ValueError(f"Options file {filepath} must contain a JSON object")

    return parse_options(OPTION_KINDS[kind], overrides)
