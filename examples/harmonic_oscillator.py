"""
Harmonic oscillator: the same spring-mass integrated with every mass mode.

Demonstrates:
- Leapfrog with no mass, constant mass, M(t) and M(t, x, v)
- Streaming the trajectory to CSV through output_fcn
- Exporting a finished trajectory with pandas
"""
import logging
import time
from pathlib import Path
import sys

import numpy as np

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from kinodyn import TrajectoryLogger, leapfrog, setup_logging, tspan
from kinodyn.utils.io import save_trajectory


def main():
    """Run the oscillator with all mass modes."""
    setup_logging(logging.INFO)
    output = Path("output") / "harmonic_oscillator"

    print("=" * 60)
    print("Harmonic Oscillator")
    print("=" * 60)

    m = 10.0
    k = 40.0
    omega = np.sqrt(k / m)
    grid = tspan(0.0, 20.0, 1e-2)
    x0, v0 = 1.0, 0.0

    def spring(t, x, v):
        return -k * x

    cases = {
        "no mass": (lambda t, x, v: spring(t, x, v) / m, None),
        "constant": (spring, {"Mass": m}),
        "M(t)": (spring, {"Mass": lambda t: m, "MStateDependence": "none"}),
        "M(t,x,v)": (spring, {"Mass": lambda t, x, v: m, "MStateDependence": "weak"}),
    }

    print(f"\n  omega = {omega:.3f} rad/s, {grid.size - 1} steps of {grid[1] - grid[0]:.3g} s")
    print(f"\n  {'mode':<10} {'x(T)':>12} {'error':>12} {'time [ms]':>10}")

    x_exact = x0 * np.cos(omega * grid[-1])
    for name, (rhs, options) in cases.items():
        start = time.time()
        traj = leapfrog(rhs, grid, x0, v0, options)
        elapsed = 1e3 * (time.time() - start)
        err = abs(traj.x[-1, 0] - x_exact)
        print(f"  {name:<10} {traj.x[-1, 0]:>12.8f} {err:>12.3e} {elapsed:>10.1f}")

    # Stream the state of each step while integrating
    with TrajectoryLogger(output / "stream.csv", buffer_size=500) as log:
        leapfrog(spring, grid, x0, v0, {"Mass": m, "OutputFcn": log.log_state})
    print(f"\n  Streamed {log.rows_written} rows to {log.filepath}")

    # Or export the finished trajectory in one go
    traj = leapfrog(spring, [0.0, 20.0], x0, v0, {"Mass": m, "step": 1e-2})
    path = save_trajectory(traj, output / "trajectory.csv")
    print(f"  Saved trajectory to {path}")
    print("=" * 60)


if __name__ == "__main__":
    main()
