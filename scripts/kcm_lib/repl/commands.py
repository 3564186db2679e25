"""
Command handlers for the kcm REPL.

Handlers print their own output and let KubeconfigError propagate to the
dispatcher, which reports it and keeps the shell running.
"""

from pathlib import Path

from kcm_lib.common import Colors, error, log, warn
from kcm_lib.common.prompts import prompt_multiline, prompt_yes_no
from kcm_lib.config import check_integrity, list_contexts
from kcm_lib.config.store import read_kubeconfig_text
from kcm_lib.display import report_result, show_backups, show_contexts, show_delete_plan, show_integrity
from kcm_lib.engine import OperationResult

from .context import ReplContext


def _report(ctx: ReplContext, result: OperationResult) -> None:
    ctx.last_result = result
    report_result(result)


def cmd_help(ctx: ReplContext, args: list[str], menus: dict) -> None:
    """Show available commands."""
    print()
    print(f"{Colors.BOLD}Commands{Colors.NC}")
    print("=" * 50)
    for name, entry in menus.items():
        print(f"  {name:<10} {entry['help']}")
    print()


def cmd_list(ctx: ReplContext, args: list[str]) -> None:
    store = ctx.engine.store
    show_contexts(list_contexts(store.load()), store.path)


def cmd_current(ctx: ReplContext, args: list[str]) -> None:
    config = ctx.engine.store.load()
    if not config.current_context:
        warn("No current context is set")
        return
    print(config.current_context)
    if config.current_context not in config.context_names():
        warn("The current context does not exist in the kubeconfig")


def cmd_use(ctx: ReplContext, args: list[str]) -> None:
    if not args:
        error("Usage: use <context>")
        return
    _report(ctx, ctx.engine.switch_context(args[0]))


def cmd_delete(ctx: ReplContext, args: list[str]) -> None:
    dry_run = "--dry-run" in args
    names = [a for a in args if a != "--dry-run"]
    if not names:
        error("Usage: delete [--dry-run] <context>")
        return

    def confirm(plan) -> bool:
        show_delete_plan(plan)
        return bool(prompt_yes_no(f"Are you sure you want to delete {plan.context}?"))

    _report(ctx, ctx.engine.delete_context(names[0], confirm=confirm, dry_run=dry_run))


def cmd_backup(ctx: ReplContext, args: list[str]) -> None:
    """Create, list or restore backups."""
    if not args:
        _report(ctx, ctx.engine.backup())
        return

    if args[0] == "list":
        show_backups(ctx.engine.store.list_backups())
        return

    if args[0] == "restore":
        if len(args) < 2:
            error("Usage: backup restore <file>")
            print("  Use 'backup list' to see available backups")
            return
        if not prompt_yes_no(f"Replace {ctx.engine.store.path} with {args[1]}?"):
            warn("Cancelled")
            return
        if ctx.engine.store.exists():
            saved = ctx.engine.backup()
            log(f"Current kubeconfig saved to {saved.backup_path}")
        _report(ctx, ctx.engine.restore(Path(args[1]).expanduser()))
        return

    error(f"Unknown backup command: {args[0]}")


def cmd_import(ctx: ReplContext, args: list[str]) -> None:
    """Import a kubeconfig from a file or pasted text."""
    if not args:
        error("Usage: import <file> [prefix] | import paste [prefix]")
        return

    prefix = args[1] if len(args) > 1 else ""
    if args[0] == "paste":
        text = prompt_multiline("Paste kubeconfig content")
        if text is None:
            warn("Cancelled")
            return
    else:
        path = Path(args[0]).expanduser()
        if not path.is_file():
            error(f"File not found: {path}")
            return
        text = read_kubeconfig_text(path)

    _report(ctx, ctx.engine.import_and_merge(text, prefix=prefix))


def cmd_check(ctx: ReplContext, args: list[str]) -> None:
    show_integrity(check_integrity(ctx.engine.store.load()))
