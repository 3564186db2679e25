"""
Tab completion for the kcm REPL.

Completes command names, fixed subcommands, context names read fresh
from the kubeconfig, and backup files for ``backup restore``.
"""

from prompt_toolkit.completion import Completer, Completion

from .context import ReplContext


class MenuCompleter(Completer):
    """Dynamic completer that provides context-aware completions."""

    def __init__(self, ctx: ReplContext, menus: dict):
        self.ctx = ctx
        self.menus = menus

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        words = text.split()

        # Determine what we're completing
        if not words:
            completions = self._get_completions([])
            word = ""
        elif text.endswith(' '):
            completions = self._get_completions(words)
            word = ""
        else:
            completions = self._get_completions(words[:-1])
            word = words[-1]

        for item in completions:
            if item.lower().startswith(word.lower()):
                yield Completion(item, start_position=-len(word))

    def _get_completions(self, typed: list[str]) -> list[str]:
        """Get candidates for the word following the typed words."""
        if not typed:
            return list(self.menus.keys())

        entry = self.menus.get(typed[0].lower())
        if entry is None:
            return []

        if typed[0].lower() == "backup":
            if len(typed) == 1:
                return list(entry.get("commands", []))
            if len(typed) == 2 and typed[1] == "restore":
                return [str(p) for p in self.ctx.engine.store.list_backups()]
            return []

        if len(typed) > 1:
            return []

        completions = list(entry.get("commands", []))
        if entry.get("args") == "context":
            completions.extend(self.ctx.context_names())
        return completions
