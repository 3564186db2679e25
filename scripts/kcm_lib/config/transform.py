"""
Pure transformations of KubeConfig documents.

The mutation engine composes these with kubectl calls; keeping them here
lets each step be exercised without touching the filesystem.
"""

import copy
from dataclasses import dataclass, field
from typing import Optional

from .dataclasses import KubeConfig
from .registry import count_references, find_context


# =============================================================================
# Import renaming
# =============================================================================

def prefixed(name: str, prefix: str) -> str:
    """Return prefix-name, leaving empty names empty."""
    if not name or not prefix:
        return name
    return f"{prefix}-{name}"


def apply_prefix(config: KubeConfig, prefix: str) -> KubeConfig:
    """
    Rename every context, cluster and user with ``prefix-``.

    Context references and the current context are renamed the same way so
    that every renamed context still resolves. An empty prefix returns an
    unchanged copy.
    """
    renamed = copy.deepcopy(config)
    if not prefix:
        return renamed

    for ctx in renamed.contexts:
        ctx.name = prefixed(ctx.name, prefix)
        ctx.cluster = prefixed(ctx.cluster, prefix)
        ctx.user = prefixed(ctx.user, prefix)
    for cluster in renamed.clusters:
        cluster.name = prefixed(cluster.name, prefix)
    for user in renamed.users:
        user.name = prefixed(user.name, prefix)
    renamed.current_context = prefixed(renamed.current_context, prefix)
    return renamed


@dataclass
class Collision:
    """A name present in both documents with a different definition."""
    kind: str  # "context", "cluster" or "user"
    name: str

    def __str__(self) -> str:
        return f"{self.kind} '{self.name}' already exists with a different definition"


def find_collisions(existing: KubeConfig, candidate: KubeConfig) -> list[Collision]:
    """List names the candidate would redefine in the existing document."""
    collisions = []
    for kind, attr in (("context", "contexts"), ("cluster", "clusters"), ("user", "users")):
        current = {item.name: item for item in getattr(existing, attr)}
        for item in getattr(candidate, attr):
            if item.name in current and current[item.name] != item:
                collisions.append(Collision(kind=kind, name=item.name))
    return collisions


# =============================================================================
# Cascading delete
# =============================================================================

@dataclass
class DeletePlan:
    """What a cascading delete of one context will remove."""
    context: str
    cluster: str = ""
    user: str = ""
    remove_cluster: bool = False
    remove_user: bool = False
    notes: list[str] = field(default_factory=list)

    def steps(self) -> list[tuple[str, str]]:
        """Ordered (kind, name) removals; the context always comes first."""
        steps = [("context", self.context)]
        if self.remove_cluster:
            steps.append(("cluster", self.cluster))
        if self.remove_user:
            steps.append(("user", self.user))
        return steps

    def describe(self) -> list[str]:
        lines = [f"delete {kind} {name}" for kind, name in self.steps()]
        return lines + self.notes


def _keep_reason(kind: str, name: str, present: bool, shared: int) -> Optional[str]:
    if not name:
        return None
    if not present:
        return f"{kind} '{name}' is not defined, nothing to remove"
    if shared:
        return f"keeping {kind} '{name}' (used by {shared} other context(s))"
    return None


def plan_delete(config: KubeConfig, name: str) -> DeletePlan:
    """
    Work out which entries deleting a context removes.

    A cluster or user is removed only when it is defined in the document
    and no other context references it.

    Raises:
        NotFound: if the context does not exist
    """
    ctx = find_context(config, name)
    plan = DeletePlan(context=ctx.name, cluster=ctx.cluster, user=ctx.user)

    cluster_present = ctx.cluster in config.cluster_names()
    cluster_shared = count_references(config, cluster=ctx.cluster, exclude=ctx.name) if ctx.cluster else 0
    plan.remove_cluster = bool(ctx.cluster) and cluster_present and not cluster_shared

    user_present = ctx.user in config.user_names()
    user_shared = count_references(config, user=ctx.user, exclude=ctx.name) if ctx.user else 0
    plan.remove_user = bool(ctx.user) and user_present and not user_shared

    for note in (
        _keep_reason("cluster", ctx.cluster, cluster_present, cluster_shared),
        _keep_reason("user", ctx.user, user_present, user_shared),
    ):
        if note:
            plan.notes.append(note)
    return plan


def remove_context(config: KubeConfig, name: str) -> None:
    """Drop a context in place, clearing current-context if it pointed at it."""
    config.contexts = [c for c in config.contexts if c.name != name]
    if config.current_context == name:
        config.current_context = ""


def remove_cluster(config: KubeConfig, name: str) -> None:
    config.clusters = [c for c in config.clusters if c.name != name]


def remove_user(config: KubeConfig, name: str) -> None:
    config.users = [u for u in config.users if u.name != name]
