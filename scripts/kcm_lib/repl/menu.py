"""
Command table for the kcm REPL.

Each entry lists its help text, the kind of argument it takes (used for
completion) and any fixed subcommands.
"""


def build_menu_tree() -> dict:
    """Build the command structure."""
    return {
        "list": {"help": "List contexts (* marks the current one)"},
        "current": {"help": "Show the current context"},
        "use": {"help": "use <context> - switch the current context", "args": "context"},
        "delete": {"help": "delete <context> - delete a context and its unused cluster/user",
                   "args": "context", "commands": ["--dry-run"]},
        "backup": {"help": "backup | backup list | backup restore <file>",
                   "commands": ["list", "restore"]},
        "import": {"help": "import <file> [prefix] | import paste [prefix]",
                   "args": "path", "commands": ["paste"]},
        "check": {"help": "Report dangling references and unused entries"},
        "help": {"help": "Show this help"},
        "exit": {"help": "Leave the shell"},
    }
