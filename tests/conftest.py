import pytest

from bellman_ford_sim import logger


@pytest.fixture(autouse=True)
def isolated_logs(tmp_path, monkeypatch):
    log_dir = tmp_path / "logs"
    saved = dict(logger._settings)
    monkeypatch.setenv("BFS_LOG_DIR", str(log_dir))
    logger.configure(log_dir=str(log_dir), stdout=True)
    yield log_dir
    logger._settings.clear()
    logger._settings.update(saved)
