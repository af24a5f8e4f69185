"""
Logging for kinodyn.

Two concerns live here:

- Diagnostic messages go through the standard ``logging`` module under the
  ``kinodyn`` namespace. :func:`setup_logging` attaches console and optional
  file handlers.
- Trajectory data is written by :class:`TrajectoryLogger`, a buffered CSV
  writer that can be plugged into :func:`kinodyn.core.leapfrog.leapfrog`
  as ``output_fcn``.
"""
from __future__ import annotations

import csv
import logging
import sys
from pathlib import Path
from typing import Any, TextIO

import numpy as np
from numpy.typing import ArrayLike


def setup_logging(level: int = logging.INFO, log_file: str | Path | None = None) -> logging.Logger:
    """
    Configure the logger for the 'kinodyn' namespace.

    Parameters
    ----------
    level : int
        Logging level (e.g. logging.DEBUG, logging.INFO)
    log_file : str | Path | None
        Optional path to save logs to a file.

    Returns
    -------
    logging.Logger
        The configured package logger.
    """
    logger = logging.getLogger("kinodyn")
    logger.setLevel(level)

    # Avoid duplicate handlers when called again
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


class TrajectoryLogger:
    """
    Buffered CSV logger for integrator output.

    Parameters
    ----------
    filepath : str | Path
        Output CSV file path
    buffer_size : int
        Number of rows to buffer before writing. Higher = fewer writes but more memory.

    Attributes
    ----------
    filepath : Path
        Path to output CSV file
    buffer_size : int
        Number of rows buffered before flush
    rows_written : int
        Number of data rows handed to the CSV writer so far

    Notes
    -----
    The header ``t, x_0, ..., x_{n-1}, v_0, ..., v_{n-1}`` is derived from the
    first logged state.

    Examples
    --------
    >>> with TrajectoryLogger("oscillator.csv") as log:
    ...     leapfrog(rhs, grid, x0, v0, {"output_fcn": log.log_state})
    """

    def __init__(self, filepath: str | Path, buffer_size: int = 1000) -> None:
        if buffer_size < 1:
            raise ValueError(f"buffer_size must be at least 1, got {buffer_size}")

        self.filepath = Path(filepath)
        self.buffer_size = int(buffer_size)
        self.rows_written = 0

        self._buffer: list[list[str]] = []
        self._file: TextIO | None = None
        self._writer: Any = None  # csv.writer is a function, not a type
        self._ndof: int | None = None
        self._closed = False

        self.filepath.parent.mkdir(parents=True, exist_ok=True)

    def __enter__(self) -> TrajectoryLogger:
        """Open file for writing. A closed logger cannot be reopened."""
        if self._closed:
            raise ValueError(f"TrajectoryLogger for {self.filepath} is closed")
        self._file = open(self.filepath, "w", newline="", encoding="utf-8")
        self._writer = csv.writer(self._file)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close file, flushing any remaining data."""
        self.close()

    def _write_header(self, ndof: int) -> None:
        hdr = ["t"]
        hdr.extend(f"x_{i}" for i in range(ndof))
        hdr.extend(f"v_{i}" for i in range(ndof))
        self._writer.writerow(hdr)
        self._file.flush()
        self._ndof = ndof

    def log_state(self, t: float, x: ArrayLike, v: ArrayLike) -> None:
        """
        Log one ``(t, x, v)`` sample to the buffer.

        Opens the file on first call if not used as context manager.
        Writes to disk when the buffer is full.

        Raises
        ------
        ValueError
            If the state size changes between calls, or the logger is closed
        """
        if self._file is None:
            self.__enter__()

        x = np.asarray(x, dtype=np.float64).ravel()
        v = np.asarray(v, dtype=np.float64).ravel()

        if self._ndof is None:
            self._write_header(x.size)
        if x.size != self._ndof or v.size != self._ndof:
            raise ValueError(
                f"State size changed: expected {self._ndof} DOF, got x={x.size}, v={v.size}"
            )

        row = [f"{t:.10f}"]
        row.extend(f"{val:.10e}" for val in x)
        row.extend(f"{val:.10e}" for val in v)
        self._buffer.append(row)

        if len(self._buffer) >= self.buffer_size:
            self.flush()

    def flush(self) -> None:
        """Write buffered data to disk and clear buffer."""
        if self._writer and self._buffer:
            self._writer.writerows(self._buffer)
            self.rows_written += len(self._buffer)
            if self._file:
                self._file.flush()
            self._buffer.clear()

    def close(self) -> None:
        """Flush remaining data and close file."""
        self.flush()
        if self._file:
            self._file.close()
            self._file = None
            self._writer = None
            self._ndof = None
        self._closed = True
