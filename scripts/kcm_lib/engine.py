"""
engine.py - Kubeconfig mutation engine for kcm

Switches, deletes and imports contexts. Each operation keeps the kubeconfig
file and kubectl's view of it in step: kubectl is asked to make the change
first, and the file is only rewritten once kubectl has acknowledged it.

Usage:
    from kcm_lib.engine import MutationEngine

    engine = MutationEngine(store, applier)
    result = engine.switch_context("prod")
    result = engine.delete_context("old", confirm=lambda plan: True)
    result = engine.import_and_merge(text, prefix="demo")
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional

from kcm_lib.config.registry import find_context
from kcm_lib.config.serialization import parse, serialize
from kcm_lib.config.store import ConfigStore
from kcm_lib.config.transform import (
    DeletePlan,
    apply_prefix,
    find_collisions,
    plan_delete,
    remove_cluster,
    remove_context,
    remove_user,
)
from kcm_lib.errors import ApplyFailed, KubeconfigError


# =============================================================================
# Operation State
# =============================================================================

class OperationState(Enum):
    IDLE = "idle"
    IN_PROGRESS = "in-progress"
    COMMITTED = "committed"
    ABORTED = "aborted"


@dataclass
class OperationResult:
    """Outcome of one engine operation."""
    operation: str  # e.g., "switch-context", "delete-context", "import"
    state: OperationState = OperationState.IDLE
    messages: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)  # "kind/name" entries kubectl confirmed
    backup_path: Optional[Path] = None

    @property
    def committed(self) -> bool:
        return self.state == OperationState.COMMITTED

    def begin(self) -> None:
        if self.state != OperationState.IDLE:
            raise RuntimeError(f"{self.operation} already started")
        self.state = OperationState.IN_PROGRESS

    def _finish(self, state: OperationState, message: Optional[str]) -> None:
        if self.state != OperationState.IN_PROGRESS:
            raise RuntimeError(f"{self.operation} is not in progress")
        self.state = state
        if message:
            self.messages.append(message)

    def commit(self, message: Optional[str] = None) -> None:
        self._finish(OperationState.COMMITTED, message)

    def abort(self, message: Optional[str] = None) -> None:
        self._finish(OperationState.ABORTED, message)


ConfirmCallback = Callable[[DeletePlan], Optional[bool]]

_REMOVERS = {
    "context": remove_context,
    "cluster": remove_cluster,
    "user": remove_user,
}


# =============================================================================
# Mutation Engine
# =============================================================================

class MutationEngine:
    """Runs kubeconfig mutations against a store and a kubectl applier."""

    def __init__(self, store: ConfigStore, applier: Any):
        self.store = store
        self.applier = applier

    @staticmethod
    def _abort(result: OperationResult, exc: KubeconfigError) -> KubeconfigError:
        """Mark result aborted and attach it to the error being raised."""
        if result.state == OperationState.IN_PROGRESS:
            result.abort(str(exc))
        exc.result = result
        return exc

    # -------------------------------------------------------------------------
    # Switch
    # -------------------------------------------------------------------------

    def switch_context(self, name: str) -> OperationResult:
        """
        Make a context current.

        Raises:
            NotFound: no such context (file untouched)
            ApplyFailed: kubectl refused (file untouched)
        """
        result = OperationResult("switch-context")
        result.begin()
        try:
            find_context(self.store.load(), name)
            self.applier.use_context(name)

            # kubectl may have rewritten the file; start from what is on disk now
            config = self.store.load()
            config.current_context = name
            self.store.save(config)
        except KubeconfigError as e:
            raise self._abort(result, e)

        result.commit(f"Switched to context '{name}'")
        return result

    # -------------------------------------------------------------------------
    # Cascading delete
    # -------------------------------------------------------------------------

    def delete_context(
        self,
        name: str,
        confirm: Optional[ConfirmCallback] = None,
        dry_run: bool = False,
    ) -> OperationResult:
        """
        Delete a context plus any cluster/user no other context uses.

        Args:
            name: Context to delete
            confirm: Called with the DeletePlan before anything is removed;
                a falsy answer cancels the operation without error
            dry_run: Only report the plan

        Raises:
            NotFound: no such context
            ApplyFailed: a kubectl removal failed; removals that already
                succeeded stay removed and are listed in ``result.removed``
        """
        result = OperationResult("delete-context")
        result.begin()
        try:
            config = self.store.load()
            plan = plan_delete(config, name)
        except KubeconfigError as e:
            raise self._abort(result, e)

        if dry_run:
            result.messages.extend(f"[DRY-RUN] {line}" for line in plan.describe())
            result.abort("Dry run, nothing deleted")
            return result

        if confirm is not None and not confirm(plan):
            result.abort("Cancelled")
            return result

        steps = plan.steps()
        for index, (kind, entry) in enumerate(steps):
            try:
                getattr(self.applier, f"delete_{kind}")(entry)
            except ApplyFailed as e:
                pending = ", ".join(f"{k} '{n}'" for k, n in steps[index:])
                message = f"Failed to delete {kind} '{entry}': {e}"
                if result.removed:
                    message += f" (already removed: {', '.join(result.removed)}; not removed: {pending})"
                    try:
                        self.store.save(config)
                    except KubeconfigError as save_error:
                        message += f"; could not record removals: {save_error}"
                raise self._abort(result, ApplyFailed(message)) from e

            _REMOVERS[kind](config, entry)
            result.removed.append(f"{kind}/{entry}")
            result.messages.append(f"Deleted {kind} '{entry}'")

        result.messages.extend(plan.notes)
        try:
            self.store.save(config)
        except KubeconfigError as e:
            raise self._abort(result, e)

        result.commit(f"Context '{name}' and related configuration deleted")
        return result

    # -------------------------------------------------------------------------
    # Import
    # -------------------------------------------------------------------------

    def import_and_merge(self, raw_text: str, prefix: str = "") -> OperationResult:
        """
        Merge another kubeconfig into the managed one.

        Args:
            raw_text: Kubeconfig YAML to import
            prefix: When set, every imported name becomes ``prefix-name``

        Raises:
            ParseError: the input (or kubectl's merged output) is malformed
            ApplyFailed: kubectl could not merge; the kubeconfig is untouched
        """
        result = OperationResult("import")
        result.begin()
        prefix = (prefix or "").strip()

        try:
            candidate = apply_prefix(parse(raw_text), prefix)

            sources = []
            if self.store.exists():
                for collision in find_collisions(self.store.load(), candidate):
                    result.messages.append(f"warning: {collision}")
                sources.append(self.store.path)

            with self.store.scratch_file("kcm-import-", serialize(candidate)) as candidate_path:
                merged_text = self.applier.merge_flatten(sources + [candidate_path])

                with self.store.scratch_file("kcm-merged-", merged_text) as merged_path:
                    merged_text = merged_path.read_text(encoding="utf-8")
                    parse(merged_text)
                    self.store.write_text(merged_text)
        except KubeconfigError as e:
            raise self._abort(result, e)

        names = ", ".join(candidate.context_names()) or "none"
        result.messages.append(f"Imported context(s): {names}")
        result.commit("Kubeconfig imported and merged")
        return result

    # -------------------------------------------------------------------------
    # Backups
    # -------------------------------------------------------------------------

    def backup(self) -> OperationResult:
        result = OperationResult("backup")
        result.begin()
        try:
            result.backup_path = self.store.backup()
        except KubeconfigError as e:
            raise self._abort(result, e)
        result.commit(f"Backup saved to {result.backup_path}")
        return result

    def restore(self, backup_path: Path) -> OperationResult:
        """Replace the kubeconfig with a backup (no kubectl involvement)."""
        result = OperationResult("restore")
        result.begin()
        try:
            config = self.store.restore(backup_path)
        except KubeconfigError as e:
            raise self._abort(result, e)
        result.backup_path = Path(backup_path)
        result.commit(f"Restored {len(config.contexts)} context(s) from {backup_path}")
        return result
