"""
Command dispatcher and main loop for the kcm REPL.
"""

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory
from prompt_toolkit.styles import Style

from kcm_lib.common import Colors, error, info, warn
from kcm_lib.config.constants import HISTORY_FILE
from kcm_lib.engine import MutationEngine
from kcm_lib.errors import KubeconfigError

from .commands import (
    cmd_backup,
    cmd_check,
    cmd_current,
    cmd_delete,
    cmd_help,
    cmd_import,
    cmd_list,
    cmd_use,
)
from .completer import MenuCompleter
from .context import ReplContext, get_prompt_message
from .menu import build_menu_tree


KCM_STYLE = Style.from_dict({
    'prompt': '#00aa00 bold',
    'completion-menu.completion.current': 'bg:#0088ff #ffffff',
})

HANDLERS = {
    "list": cmd_list,
    "ls": cmd_list,
    "current": cmd_current,
    "use": cmd_use,
    "switch": cmd_use,
    "delete": cmd_delete,
    "rm": cmd_delete,
    "backup": cmd_backup,
    "import": cmd_import,
    "check": cmd_check,
}


def handle_command(cmd: str, ctx: ReplContext, menus: dict) -> bool:
    """
    Handle a command. Returns False if should exit REPL.
    """
    parts = cmd.strip().split()
    if not parts:
        return True

    command = parts[0].lower()
    args = parts[1:]

    if command in ("exit", "quit"):
        return False

    if command in ("help", "?"):
        cmd_help(ctx, args, menus)
        return True

    handler = HANDLERS.get(command)
    if handler is None:
        error(f"Unknown command: {command}")
        print("  Type 'help' for available commands")
        return True

    try:
        handler(ctx, args)
    except KubeconfigError as e:
        error(str(e))
    return True


def run_repl(engine: MutationEngine) -> int:
    """Main REPL entry point."""
    print()
    print(f"{Colors.BOLD}kcm - Kubeconfig Manager{Colors.NC}")
    print("Type 'help' for commands, 'exit' to quit")
    print()

    ctx = ReplContext(engine=engine)
    if engine.store.exists():
        info(f"Using {engine.store.path}")
    else:
        warn(f"No kubeconfig at {engine.store.path}; use 'import' to create one")

    menus = build_menu_tree()
    session = PromptSession(
        history=FileHistory(str(HISTORY_FILE)),
        completer=MenuCompleter(ctx, menus),
        style=KCM_STYLE,
    )

    while True:
        try:
            cmd = session.prompt(get_prompt_message(ctx))
            if not handle_command(cmd, ctx, menus):
                break
        except KeyboardInterrupt:
            print()
            continue
        except EOFError:
            print()
            break

    print("Goodbye!")
    return 0
