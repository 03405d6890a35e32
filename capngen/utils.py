import hashlib
import os
import subprocess
from collections import namedtuple
from pathlib import Path
from typing import Sequence

import tomli as toml

from capngen import logging as capngen_logging

logger = capngen_logging.get_logger(__name__)

ProcessResult = namedtuple("ProcessResult", ["stdout", "stderr", "returncode"])


def _merge_configs(config, default_config):
    config_out = {}

    for key, default_value in default_config.items():
        if key in config:
            if isinstance(config[key], dict) and isinstance(default_value, dict):
                config_out[key] = _merge_configs(config[key], default_value)
            elif isinstance(config[key], dict) or isinstance(default_value, dict):
                raise TypeError(f"Type mismatch for key '{key}': "
                                f"config has {type(config[key])}, default_config has {type(default_value)}")
            else:
                config_out[key] = config[key]
        else:
            config_out[key] = default_value

    for key, value in config.items():
        if key not in default_config:
            config_out[key] = value

    return config_out


def load_default_config():
    """Load the bundled default configuration from packaged resources."""
    candidate = Path(__file__).resolve().parent / "_resources" / "capngen.default.toml"
    if candidate.is_file():
        with open(candidate, "rb") as f:
            return toml.load(f)

    raise FileNotFoundError("Could not load _resources/capngen.default.toml")


def try_load_config(config_file=None):
    """Load user configuration merged with defaults.

    Resolution order:
    1. Explicit `config_file` argument.
    2. `CAPNGEN_CONFIG` environment variable.
    3. `./capngen.toml` relative to current working directory.
    4. `capngen.toml` inside the repository checkout (development mode).
    If none are found, return the default config alone.
    """
    default_config = load_default_config()

    def _load_user_config(path: Path) -> dict:
        with open(path, "rb") as f:
            return toml.load(f)

    if config_file:
        candidate = Path(config_file).expanduser()
        if not candidate.is_file():
            raise FileNotFoundError(f"Could not find config file {candidate}")
        return _merge_configs(_load_user_config(candidate), default_config)

    env_candidate = os.environ.get("CAPNGEN_CONFIG")
    if env_candidate:
        env_path = Path(env_candidate).expanduser()
        if not env_path.is_file():
            raise FileNotFoundError(f"CAPNGEN_CONFIG={env_candidate} does not point to a readable file")
        return _merge_configs(_load_user_config(env_path), default_config)

    cwd_candidate = Path.cwd() / "capngen.toml"
    if cwd_candidate.is_file():
        return _merge_configs(_load_user_config(cwd_candidate), default_config)

    repo_candidate = Path(__file__).resolve().parent.parent / "capngen.toml"
    if repo_candidate.is_file():
        return _merge_configs(_load_user_config(repo_candidate), default_config)

    logger.debug("No user config found; falling back to default configuration only")
    return default_config


def derive_schema_id(package: str) -> int:
    """Stable 64-bit Cap'n Proto file id for ``package``; capnp requires the top bit set."""
    digest = hashlib.sha256(package.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big") | (1 << 63)


def read_file(path: str) -> str:
    if not os.path.exists(path):
        raise FileNotFoundError(f"Could not find file {path}")
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def save_code(path, code):
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(code)


def run_command(
    cmd: Sequence[str | os.PathLike[str]],
    *,
    capture_output: bool = True,
    text: bool = True,
    timeout: float | None = None,
    env: dict[str, str] | None = None,
    cwd: str | os.PathLike[str] | None = None,
    check: bool = False,
    input_data: str | bytes | None = None,
) -> ProcessResult:
    """Run ``cmd`` and return its output and exit status."""
    completed = subprocess.run(
        cmd,
        stdout=subprocess.PIPE if capture_output else None,
        stderr=subprocess.PIPE if capture_output else None,
        env=env,
        cwd=cwd,
        text=text,
        timeout=timeout,
        check=False,
        input=input_data,
    )
    stdout = completed.stdout if capture_output and completed.stdout is not None else ""
    stderr = completed.stderr if capture_output and completed.stderr is not None else ""
    result = ProcessResult(stdout, stderr, completed.returncode)
    if check and result.returncode != 0:
        raise subprocess.CalledProcessError(result.returncode, cmd, stdout, stderr)
    return result
