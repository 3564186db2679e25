"""
Configuration constants for kcm.

Paths and default values used across the configuration system.
"""

from pathlib import Path


# Kubeconfig and settings paths
KUBE_DIR = Path.home() / ".kube"
KUBECONFIG_FILE = KUBE_DIR / "config"
SETTINGS_FILE = KUBE_DIR / "kcm.json"
HISTORY_FILE = Path.home() / ".kcm_history"

# Apply collaborator defaults
DEFAULT_KUBECTL = "kubectl"
DEFAULT_TIMEOUT = 30

# Backups are siblings of the kubeconfig: <name>_backup_<timestamp>
BACKUP_INFIX = "_backup_"

# Top-level key order used by kubectl when it writes a kubeconfig
TOP_LEVEL_ORDER = (
    "apiVersion",
    "clusters",
    "contexts",
    "current-context",
    "kind",
    "preferences",
    "users",
)
