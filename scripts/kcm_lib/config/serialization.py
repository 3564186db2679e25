"""
Kubeconfig serialization for kcm.

Functions for converting between kubeconfig YAML text and the
KubeConfig dataclasses. Both directions are pure.
"""

from typing import Any

import yaml

from kcm_lib.errors import ParseError

from .constants import TOP_LEVEL_ORDER
from .dataclasses import Cluster, Context, KubeConfig, User


COLLECTIONS = ('contexts', 'clusters', 'users')


def _entries(data: dict, key: str) -> list[dict]:
    """Return the named entries of a top-level collection, checking shape and uniqueness."""
    if key not in data:
        raise ParseError(f"Missing top-level '{key}' collection")

    items = data[key]
    if items is None:
        return []
    if not isinstance(items, list):
        raise ParseError(f"'{key}' must be a list, got {type(items).__name__}")

    seen = set()
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise ParseError(f"{key}[{index}] must be a mapping")
        name = item.get('name')
        if not isinstance(name, str) or not name:
            raise ParseError(f"{key}[{index}] has no name")
        if name in seen:
            raise ParseError(f"Duplicate name in {key}: {name}")
        seen.add(name)
    return items


def _parse_context(item: dict) -> Context:
    body = item.get('context')
    if body is None:
        body = {}
    if not isinstance(body, dict):
        raise ParseError(f"Context '{item['name']}' has a malformed 'context' field")

    cluster = body.get('cluster') or ""
    user = body.get('user') or ""
    if not isinstance(cluster, str) or not isinstance(user, str):
        raise ParseError(f"Context '{item['name']}' has non-string cluster/user references")

    return Context(
        name=item['name'],
        cluster=cluster,
        user=user,
        extra={k: v for k, v in body.items() if k not in ('cluster', 'user')},
        entry_extra={k: v for k, v in item.items() if k not in ('name', 'context')},
    )


def parse(text: str) -> KubeConfig:
    """
    Parse kubeconfig text into a KubeConfig.

    Raises:
        ParseError: if the text is not YAML, the root is not a mapping,
            a contexts/clusters/users collection is missing or malformed,
            or a name is duplicated within a collection.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ParseError("Kubeconfig root must be a mapping")

    contexts = [_parse_context(item) for item in _entries(data, 'contexts')]
    clusters = [
        Cluster(name=item['name'], fields={k: v for k, v in item.items() if k != 'name'})
        for item in _entries(data, 'clusters')
    ]
    users = [
        User(name=item['name'], fields={k: v for k, v in item.items() if k != 'name'})
        for item in _entries(data, 'users')
    ]

    current = data.get('current-context') or ""
    if not isinstance(current, str):
        raise ParseError("'current-context' must be a string")

    extra = {
        k: v for k, v in data.items()
        if k not in COLLECTIONS and k != 'current-context'
    }

    return KubeConfig(
        contexts=contexts,
        clusters=clusters,
        users=users,
        current_context=current,
        extra=extra,
    )


def to_dict(config: KubeConfig) -> dict[str, Any]:
    """Convert a KubeConfig to the plain mapping kubectl writes, in kubectl's key order."""
    values = dict(config.extra)
    values['clusters'] = [{'name': c.name, **c.fields} for c in config.clusters]
    values['contexts'] = [
        {
            'name': ctx.name,
            'context': {'cluster': ctx.cluster, 'user': ctx.user, **ctx.extra},
            **ctx.entry_extra,
        }
        for ctx in config.contexts
    ]
    values['current-context'] = config.current_context
    values['users'] = [{'name': u.name, **u.fields} for u in config.users]

    ordered = {k: values[k] for k in TOP_LEVEL_ORDER if k in values}
    ordered.update({k: v for k, v in values.items() if k not in ordered})
    return ordered


def serialize(config: KubeConfig) -> str:
    """Serialize a KubeConfig to YAML text."""
    return yaml.safe_dump(
        to_dict(config),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
