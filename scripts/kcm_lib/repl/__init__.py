"""
kcm_lib.repl - Interactive shell for kcm

This package contains the components of the kcm REPL:
- context: Shell state and prompt text
- menu: Command table
- completer: Tab completion
- commands: Command handlers
- loop: Dispatcher and main loop
"""

from .context import ReplContext, get_prompt_message, get_prompt_text
from .menu import build_menu_tree
from .completer import MenuCompleter
from .loop import handle_command, run_repl

__all__ = [
    'ReplContext',
    'get_prompt_text',
    'get_prompt_message',
    'build_menu_tree',
    'MenuCompleter',
    'handle_command',
    'run_repl',
]
