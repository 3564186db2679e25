"""
Kubeconfig dataclasses for kcm.

These define the structure of a kubeconfig document as stored in
~/.kube/config. Only names and context references are modelled; every
other key is carried through untouched.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class Cluster:
    """A named endpoint definition."""
    name: str
    fields: dict[str, Any] = field(default_factory=dict)  # usually {"cluster": {"server": ...}}

    @property
    def server(self) -> Optional[str]:
        cluster = self.fields.get('cluster')
        if isinstance(cluster, dict):
            return cluster.get('server')
        return None


@dataclass
class User:
    """A named credential definition."""
    name: str
    fields: dict[str, Any] = field(default_factory=dict)  # usually {"user": {...}}


@dataclass
class Context:
    """A named association between a cluster and a user."""
    name: str
    cluster: str = ""  # weak reference to Cluster.name
    user: str = ""  # weak reference to User.name
    extra: dict[str, Any] = field(default_factory=dict)  # other keys under "context" (namespace, ...)
    entry_extra: dict[str, Any] = field(default_factory=dict)  # other keys beside "name"/"context"

    @property
    def namespace(self) -> Optional[str]:
        return self.extra.get('namespace')


@dataclass
class KubeConfig:
    """A complete kubeconfig document."""
    contexts: list[Context] = field(default_factory=list)
    clusters: list[Cluster] = field(default_factory=list)
    users: list[User] = field(default_factory=list)
    current_context: str = ""
    extra: dict[str, Any] = field(default_factory=dict)  # apiVersion, kind, preferences, ...

    def context_names(self) -> list[str]:
        return [c.name for c in self.contexts]

    def cluster_names(self) -> list[str]:
        return [c.name for c in self.clusters]

    def user_names(self) -> list[str]:
        return [u.name for u in self.users]
