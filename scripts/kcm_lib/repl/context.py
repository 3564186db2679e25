"""
REPL context and prompt utilities for kcm.

This module contains:
- ReplContext: The engine the shell drives plus the last operation result
- get_prompt_text: Generates the prompt string from the current context
- get_prompt_message: The same string, styled with the "prompt" class
"""

from dataclasses import dataclass
from typing import Optional

from prompt_toolkit.formatted_text import HTML

from kcm_lib.engine import MutationEngine, OperationResult
from kcm_lib.errors import KubeconfigError


@dataclass
class ReplContext:
    """State shared by REPL command handlers."""
    engine: MutationEngine
    last_result: Optional[OperationResult] = None

    def context_names(self) -> list[str]:
        """Context names for completion; empty if the kubeconfig can't be read."""
        try:
            return self.engine.store.load().context_names()
        except KubeconfigError:
            return []

    def current_context(self) -> str:
        try:
            return self.engine.store.load().current_context
        except KubeconfigError:
            return ""


def get_prompt_text(ctx: ReplContext) -> str:
    """Generate the prompt string, showing the current context."""
    current = ctx.current_context()
    if current:
        return f"kcm({current})> "
    return "kcm> "


def get_prompt_message(ctx: ReplContext) -> HTML:
    return HTML("<prompt>{}</prompt>").format(get_prompt_text(ctx))
