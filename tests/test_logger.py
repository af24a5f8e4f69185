import csv
import logging

import numpy as np
import pytest

from kinodyn.core.leapfrog import leapfrog
from kinodyn.logger import TrajectoryLogger, setup_logging
from kinodyn.utils.timegrid import tspan


def _read_rows(path):
    with open(path, "r", newline="") as f:
        return list(csv.reader(f))


def test_logger_basic_io(tmp_path):
    """Logger creates the file and writes header + data."""
    log_path = tmp_path / "basic.csv"

    with TrajectoryLogger(log_path, buffer_size=1) as log:
        log.log_state(0.0, [1.0, 2.0], [0.1, 0.2])

    rows = _read_rows(log_path)
    assert rows[0] == ["t", "x_0", "x_1", "v_0", "v_1"]
    assert len(rows) == 2
    assert float(rows[1][0]) == 0.0
    np.testing.assert_allclose([float(s) for s in rows[1][1:]], [1.0, 2.0, 0.1, 0.2])


def test_logger_buffering(tmp_path):
    """Rows are held back until the buffer fills or the logger is closed."""
    log_path = tmp_path / "buffer.csv"
    buffer_size = 5

    log = TrajectoryLogger(log_path, buffer_size=buffer_size)
    for i in range(buffer_size - 1):
        log.log_state(float(i), [float(i)], [0.0])

    # Header only
    assert len(_read_rows(log_path)) == 1
    assert log.rows_written == 0

    log.log_state(float(buffer_size), [0.0], [0.0])
    assert len(_read_rows(log_path)) == 1 + buffer_size
    assert log.rows_written == buffer_size

    log.log_state(99.0, [0.0], [0.0])
    log.close()
    assert len(_read_rows(log_path)) == 2 + buffer_size


def test_logger_state_size_change(tmp_path):
    with TrajectoryLogger(tmp_path / "size.csv") as log:
        log.log_state(0.0, [1.0, 2.0], [0.0, 0.0])
        with pytest.raises(ValueError):
            log.log_state(0.1, [1.0], [0.0])
        with pytest.raises(ValueError):
            log.log_state(0.1, [1.0, 2.0], [0.0])


def test_logger_closed_keeps_rows(tmp_path):
    """Logging after close raises instead of truncating the written file."""
    log_path = tmp_path / "closed.csv"

    with TrajectoryLogger(log_path) as log:
        log.log_state(0.0, [1.0], [0.0])
        log.log_state(0.1, [0.9], [-1.0])

    with pytest.raises(ValueError, match="closed"):
        log.log_state(0.2, [0.8], [-1.0])
    with pytest.raises(ValueError, match="closed"):
        log.__enter__()

    rows = _read_rows(log_path)
    assert len(rows) == 3
    assert log.rows_written == 2


def test_logger_invalid_buffer(tmp_path):
    with pytest.raises(ValueError):
        TrajectoryLogger(tmp_path / "x.csv", buffer_size=0)


def test_logger_creates_directories(tmp_path):
    log_path = tmp_path / "nested" / "dir" / "run.csv"
    with TrajectoryLogger(log_path) as log:
        log.log_state(0.0, [0.0], [0.0])
    assert log_path.exists()


def test_logger_as_output_fcn(tmp_path):
    """Leapfrog feeds every step into the CSV logger."""
    log_path = tmp_path / "oscillator.csv"
    grid = tspan(0.0, 2.0, 0.01)

    with TrajectoryLogger(log_path, buffer_size=64) as log:
        traj = leapfrog(lambda t, x, v: -x, grid, [1.0, 0.5], [0.0, 0.0],
                        {"output_fcn": log.log_state})

    rows = _read_rows(log_path)
    assert len(rows) == 1 + grid.size

    data = np.array(rows[1:], dtype=float)
    np.testing.assert_allclose(data[:, 0], traj.t, atol=1e-10)
    np.testing.assert_allclose(data[:, 1:3], traj.x, rtol=1e-9)
    np.testing.assert_allclose(data[:, 3:], traj.v, rtol=1e-9, atol=1e-12)


class TestSetupLogging:

    @pytest.fixture(autouse=True)
    def _restore(self):
        yield
        logger = logging.getLogger("kinodyn")
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)

    def test_console_handler(self):
        logger = setup_logging(logging.DEBUG)
        assert logger.name == "kinodyn"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_repeated_setup_does_not_duplicate(self):
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "run.log"
        logger = setup_logging(logging.INFO, log_file)
        assert len(logger.handlers) == 2

        logging.getLogger("kinodyn.core.leapfrog").info("step done")
        for handler in logger.handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "kinodyn.core.leapfrog - INFO - step done" in text
