"""
Runtime settings for kcm.

Each setting is resolved from, in order: an explicit argument, the
environment, the JSON settings file (~/.kube/kcm.json), and a default.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .constants import DEFAULT_KUBECTL, DEFAULT_TIMEOUT, KUBECONFIG_FILE, SETTINGS_FILE


def load_settings_file(path: Path = SETTINGS_FILE) -> dict:
    """Load kcm settings from the settings file, or {} if absent or unreadable."""
    if path.exists():
        try:
            with open(path) as f:
                data = json.load(f)
            if isinstance(data, dict):
                return data
        except (json.JSONDecodeError, OSError):
            pass
    return {}


def _file_value(file_settings: dict, key: str) -> Optional[str]:
    """A settings-file string value, or None when absent, empty or not a string."""
    value = file_settings.get(key)
    if isinstance(value, str) and value.strip():
        return value
    return None


def _first_kubeconfig(value: str) -> Optional[str]:
    """KUBECONFIG may list several files; kcm manages the first one."""
    for entry in value.split(os.pathsep):
        if entry.strip():
            return entry.strip()
    return None


def get_kubeconfig_path(arg_path: Optional[str] = None, file_settings: Optional[dict] = None) -> Path:
    """Get kubeconfig path from args, env, settings file, or default."""
    if arg_path:
        return Path(arg_path).expanduser()
    env_path = _first_kubeconfig(os.environ.get("KUBECONFIG", ""))
    if env_path:
        return Path(env_path).expanduser()
    file_settings = load_settings_file() if file_settings is None else file_settings
    if _file_value(file_settings, "kubeconfig"):
        return Path(file_settings["kubeconfig"]).expanduser()
    return KUBECONFIG_FILE


def get_kubectl(arg_kubectl: Optional[str] = None, file_settings: Optional[dict] = None) -> str:
    """Get kubectl binary from args, env, settings file, or default."""
    if arg_kubectl:
        return arg_kubectl
    if os.environ.get("KCM_KUBECTL"):
        return os.environ["KCM_KUBECTL"]
    file_settings = load_settings_file() if file_settings is None else file_settings
    if _file_value(file_settings, "kubectl"):
        return file_settings["kubectl"]
    return DEFAULT_KUBECTL


def _positive_int(value) -> Optional[int]:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def get_timeout(arg_timeout: Optional[int] = None, file_settings: Optional[dict] = None) -> int:
    """Get kubectl timeout (seconds) from args, env, settings file, or default."""
    if _positive_int(arg_timeout):
        return int(arg_timeout)
    if _positive_int(os.environ.get("KCM_TIMEOUT")):
        return int(os.environ["KCM_TIMEOUT"])
    file_settings = load_settings_file() if file_settings is None else file_settings
    if _positive_int(file_settings.get("timeout")):
        return int(file_settings["timeout"])
    return DEFAULT_TIMEOUT


def get_temp_dir(arg_dir: Optional[str] = None, file_settings: Optional[dict] = None) -> Optional[Path]:
    """Get scratch directory; None means the system temp directory."""
    if arg_dir:
        return Path(arg_dir).expanduser()
    if os.environ.get("KCM_TEMP_DIR"):
        return Path(os.environ["KCM_TEMP_DIR"]).expanduser()
    file_settings = load_settings_file() if file_settings is None else file_settings
    if _file_value(file_settings, "temp_dir"):
        return Path(file_settings["temp_dir"]).expanduser()
    return None


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings passed explicitly to the store and applier."""
    kubeconfig: Path
    kubectl: str = DEFAULT_KUBECTL
    timeout: int = DEFAULT_TIMEOUT
    temp_dir: Optional[Path] = None

    @classmethod
    def resolve(
        cls,
        kubeconfig: Optional[str] = None,
        kubectl: Optional[str] = None,
        timeout: Optional[int] = None,
        temp_dir: Optional[str] = None,
        settings_file: Path = SETTINGS_FILE,
    ) -> "Settings":
        file_settings = load_settings_file(settings_file)
        return cls(
            kubeconfig=get_kubeconfig_path(kubeconfig, file_settings),
            kubectl=get_kubectl(kubectl, file_settings),
            timeout=get_timeout(timeout, file_settings),
            temp_dir=get_temp_dir(temp_dir, file_settings),
        )
