"""
kcm_lib.config - Kubeconfig document model and storage for kcm.

This package contains:
- dataclasses: Document structures (KubeConfig, Context, Cluster, User)
- serialization: YAML parse/serialize functions
- store: ConfigStore with atomic save, backups and scratch files
- registry: Read-only context queries and integrity checks
- transform: Pure document transformations (prefixing, delete plans)
- settings: Runtime settings resolution
- constants: Default paths and values
"""

from .constants import (
    KUBECONFIG_FILE,
    SETTINGS_FILE,
    DEFAULT_KUBECTL,
    DEFAULT_TIMEOUT,
)

from .dataclasses import (
    Cluster,
    User,
    Context,
    KubeConfig,
)

from .serialization import (
    parse,
    serialize,
    to_dict,
)

from .store import ConfigStore

from .registry import (
    ContextEntry,
    list_contexts,
    current_context,
    find_context,
    find_cluster,
    find_user,
    count_references,
    check_integrity,
)

from .transform import (
    Collision,
    DeletePlan,
    apply_prefix,
    find_collisions,
    plan_delete,
)

from .settings import Settings

__all__ = [
    # Constants
    'KUBECONFIG_FILE',
    'SETTINGS_FILE',
    'DEFAULT_KUBECTL',
    'DEFAULT_TIMEOUT',
    # Dataclasses
    'Cluster',
    'User',
    'Context',
    'KubeConfig',
    # Serialization
    'parse',
    'serialize',
    'to_dict',
    # Store
    'ConfigStore',
    # Registry
    'ContextEntry',
    'list_contexts',
    'current_context',
    'find_context',
    'find_cluster',
    'find_user',
    'count_references',
    'check_integrity',
    # Transform
    'Collision',
    'DeletePlan',
    'apply_prefix',
    'find_collisions',
    'plan_delete',
    # Settings
    'Settings',
]
