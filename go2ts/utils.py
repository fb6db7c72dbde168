import os
import subprocess
import tempfile
from pathlib import Path
from typing import List

import tomli as toml

from go2ts import logging as go2ts_logging

logger = go2ts_logging.get_logger(__name__)

CONFIG_ENV_VAR = "GO2TS_CONFIG"
CONFIG_FILE_NAME = "go2ts.toml"


######## Config Helpers ########
def _merge_configs(config, default_config):
    """Recursively overlay ``config`` on ``default_config``; tables merge, values replace."""
    merged = dict(default_config)
    for key, value in config.items():
        default_value = default_config.get(key)
        value_is_table = isinstance(value, dict)
        default_is_table = isinstance(default_value, dict)
        if key in default_config and value_is_table != default_is_table:
            raise TypeError(f"Type mismatch for key '{key}': "
                            f"config has {type(value)}, default_config has {type(default_value)}")
        if value_is_table and default_is_table:
            merged[key] = _merge_configs(value, default_value)
        else:
            merged[key] = value
    return merged


def _read_toml(path: Path) -> dict:
    with open(path, "rb") as f:
        return toml.load(f)


def load_default_config():
    """Load the bundled default configuration from packaged resources."""
    candidate = Path(__file__).resolve().parent / "_resources" / "go2ts.default.toml"
    if not candidate.is_file():
        raise FileNotFoundError(f"Could not load {candidate}")
    return _read_toml(candidate)


def _find_user_config(config_file=None) -> Path | None:
    if config_file:
        candidate = Path(config_file).expanduser()
        if not candidate.is_file():
            raise FileNotFoundError(f"Could not find config file {candidate}")
        return candidate

    env_value = os.environ.get(CONFIG_ENV_VAR)
    if env_value:
        candidate = Path(env_value).expanduser()
        if not candidate.is_file():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR}={env_value} does not point to a readable file")
        return candidate

    # working directory first, then a development checkout
    for directory in (Path.cwd(), Path(__file__).resolve().parent.parent):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def try_load_config(config_file=None):
    """Load user configuration merged with defaults.

    Resolution order: explicit ``config_file``, the ``GO2TS_CONFIG``
    environment variable, ``./go2ts.toml``, then ``go2ts.toml`` next to the
    package in a source checkout. Without any of them the defaults are
    returned as they are.
    """
    default_config = load_default_config()
    user_path = _find_user_config(config_file)
    if user_path is None:
        logger.debug("No user config found; using the default configuration")
        return default_config
    logger.debug("Loading config from %s", user_path)
    return _merge_configs(_read_toml(user_path), default_config)


######## File Helpers ########
def read_file_bytes(path: str) -> bytes:
    if not os.path.exists(path):
        raise FileNotFoundError(f"Could not find file {path}")
    with open(path, "rb") as f:
        return f.read()


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def write_text(path: str, text: str, atomic: bool = True) -> None:
    """Write ``text`` as UTF-8. The parent directory must already exist."""
    if not atomic:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return

    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(
        prefix=f".{os.path.basename(path)}.", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        # mkstemp creates 0600 files; match what a plain open() would produce
        os.chmod(tmp_path, 0o666 & ~_current_umask())
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def run_command(command: List[str], capture_output: bool = True, timeout: float | None = None):
    logger.debug("Running command: %s", " ".join(command))
    return subprocess.run(
        command,
        capture_output=capture_output,
        text=True,
        timeout=timeout,
    )
