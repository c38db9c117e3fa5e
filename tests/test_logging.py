# tests/test_logging.py
import logging

import pytest

from travel_exporter.infra import logging as infra_logging
from travel_exporter.infra.logging import get_current_log_path, get_logger, init_logging


@pytest.fixture(autouse=True)
def restore_root(monkeypatch):
    monkeypatch.delenv("WAZE_LOG_LEVEL", raising=False)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    infra_logging._current_log_file = None


def test_stdout_only_has_no_log_file():
    init_logging(level="INFO")
    assert get_current_log_path() is None
    assert logging.getLogger().level == logging.INFO


def test_explicit_log_file_receives_records(tmp_path):
    target = tmp_path / "nested" / "run.log"
    init_logging(level="DEBUG", log_file=target)
    get_logger("travel_exporter.test").warning("route A -> B failed")
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert get_current_log_path() == target.resolve()
    line = target.read_text(encoding="utf-8").strip().splitlines()[-1]
    assert line.endswith("[WARNING][travel_exporter.test] route A -> B failed")


def test_write_output_creates_per_run_file(tmp_path):
    init_logging(write_output=True, logs_dir=tmp_path)
    path = get_current_log_path()
    assert path is not None and path.parent == tmp_path.resolve()
    assert path.name.startswith("waze_exporter__")


def test_environment_overrides_level(monkeypatch):
    monkeypatch.setenv("WAZE_LOG_LEVEL", "ERROR")
    init_logging(level="DEBUG")
    assert logging.getLogger().level == logging.ERROR
