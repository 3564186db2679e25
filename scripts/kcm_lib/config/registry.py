"""
Read-only queries over a KubeConfig.

Nothing in this module mutates or persists a document.
"""

from dataclasses import dataclass
from typing import Optional

from kcm_lib.errors import NotFound

from .dataclasses import Cluster, Context, KubeConfig, User


@dataclass(frozen=True)
class ContextEntry:
    """One row of the context listing."""
    name: str
    cluster: str
    user: str
    current: bool = False


def list_contexts(config: KubeConfig) -> list[ContextEntry]:
    """List contexts in document order."""
    return [
        ContextEntry(
            name=ctx.name,
            cluster=ctx.cluster,
            user=ctx.user,
            current=ctx.name == config.current_context,
        )
        for ctx in config.contexts
    ]


def current_context(config: KubeConfig) -> str:
    """Name of the current context, or an empty string."""
    return config.current_context or ""


def find_context(config: KubeConfig, name: str) -> Context:
    for ctx in config.contexts:
        if ctx.name == name:
            return ctx
    raise NotFound(f"Context not found: {name}")


def find_cluster(config: KubeConfig, name: str) -> Cluster:
    for cluster in config.clusters:
        if cluster.name == name:
            return cluster
    raise NotFound(f"Cluster not found: {name}")


def find_user(config: KubeConfig, name: str) -> User:
    for user in config.users:
        if user.name == name:
            return user
    raise NotFound(f"User not found: {name}")


def count_references(
    config: KubeConfig,
    cluster: Optional[str] = None,
    user: Optional[str] = None,
    exclude: Optional[str] = None,
) -> int:
    """
    Count contexts referencing a cluster or a user by name.

    Exactly one of cluster and user must be given.

    Args:
        config: Document to scan
        cluster: Cluster name to count references to
        user: User name to count references to
        exclude: Context name to leave out of the count

    Returns:
        Number of matching contexts

    Raises:
        ValueError: if both or neither of cluster and user are given
    """
    if (cluster is None) == (user is None):
        raise ValueError("count_references needs exactly one of cluster or user")

    count = 0
    for ctx in config.contexts:
        if ctx.name == exclude:
            continue
        if cluster is not None and ctx.cluster == cluster:
            count += 1
        elif user is not None and ctx.user == user:
            count += 1
    return count


def check_integrity(config: KubeConfig) -> list[str]:
    """
    Report dangling references and orphaned entries.

    Returns a list of problem descriptions (empty if the document is clean).
    """
    problems = []
    clusters = set(config.cluster_names())
    users = set(config.user_names())

    for ctx in config.contexts:
        if ctx.cluster and ctx.cluster not in clusters:
            problems.append(f"Context '{ctx.name}' references missing cluster '{ctx.cluster}'")
        if ctx.user and ctx.user not in users:
            problems.append(f"Context '{ctx.name}' references missing user '{ctx.user}'")

    if config.current_context and config.current_context not in config.context_names():
        problems.append(f"Current context '{config.current_context}' does not exist")

    referenced_clusters = {ctx.cluster for ctx in config.contexts}
    referenced_users = {ctx.user for ctx in config.contexts}
    for name in config.cluster_names():
        if name not in referenced_clusters:
            problems.append(f"Cluster '{name}' is not used by any context")
    for name in config.user_names():
        if name not in referenced_users:
            problems.append(f"User '{name}' is not used by any context")

    return problems
