import json
import logging

import pytest

from go2ts import logging as go2ts_logging


def test_get_logger_namespace():
    assert go2ts_logging.get_logger().name == "go2ts"
    assert go2ts_logging.get_logger("go2ts.generator").name == "go2ts.generator"
    assert go2ts_logging.get_logger("plugin").name == "go2ts.plugin"


def test_configure_console_only(config):
    state = go2ts_logging.configure_logging(config, console_level_override="debug", disable_color=True)
    assert state.log_dir is None
    assert state.text_log_path is None
    assert state.console_level == logging.DEBUG

    logger = go2ts_logging.get_logger()
    assert len(logger.handlers) == 2
    assert not logger.propagate

    # a second call keeps the existing handlers
    assert go2ts_logging.configure_logging(config) is state


def test_configure_file_logging(config, tmp_path):
    state = go2ts_logging.configure_logging(
        config,
        log_dir_override=str(tmp_path),
        enable_jsonl_override=True,
        disable_color=True,
        force_reconfigure=True,
    )
    assert state.log_dir == str(tmp_path)
    assert state.jsonl_enabled

    go2ts_logging.get_logger("go2ts.test").info("parsed %d files", 3)
    for handler in go2ts_logging.get_logger().handlers:
        handler.flush()

    with open(state.text_log_path, encoding="utf-8") as f:
        assert "parsed 3 files" in f.read()
    assert state.text_log_path.endswith(".log")
    assert state.jsonl_log_path.endswith(".jsonl")
    with open(state.jsonl_log_path, encoding="utf-8") as f:
        record = json.loads(f.read().splitlines()[-1])
    assert record["message"] == "parsed 3 files"
    assert record["logger"] == "go2ts.test"
    assert record["level"] == "INFO"

    for handler in go2ts_logging.get_logger().handlers:
        handler.close()


def test_unknown_level(config):
    with pytest.raises(ValueError):
        go2ts_logging.configure_logging(config, console_level_override="LOUD")
