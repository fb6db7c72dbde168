import os

import pytest

from go2ts.utils import load_default_config

TESTS_DIR = os.path.dirname(os.path.abspath(__file__))
GO_EXAMPLES_DIR = os.path.join(TESTS_DIR, "go_examples")


@pytest.fixture
def config():
    return load_default_config()


@pytest.fixture
def model_dir():
    return os.path.join(GO_EXAMPLES_DIR, "model")


@pytest.fixture
def broken_dir():
    return os.path.join(GO_EXAMPLES_DIR, "broken")


@pytest.fixture(autouse=True)
def reset_go2ts_logging():
    yield
    from go2ts import logging as go2ts_logging

    logger = go2ts_logging.get_logger()
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel("NOTSET")
    go2ts_logging._state = None
