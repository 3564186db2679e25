"""
Command-line interface for kcm.

    kcm list
    kcm use prod
    kcm delete old-cluster
    kcm import ~/Downloads/kubeconfig.yaml --prefix demo
    kcm backup
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from kcm_lib import __version__
from kcm_lib.common import KubectlApplier, error, info, warn
from kcm_lib.common.prompts import prompt_yes_no
from kcm_lib.config import ConfigStore, Settings, check_integrity, list_contexts
from kcm_lib.config.store import decode_kubeconfig, read_kubeconfig_text
from kcm_lib.display import report_result, show_backups, show_contexts, show_delete_plan, show_integrity
from kcm_lib.engine import MutationEngine, OperationResult
from kcm_lib.errors import KubeconfigError


def build_engine(settings: Settings) -> MutationEngine:
    """Wire a store and a kubectl applier from resolved settings."""
    store = ConfigStore(settings.kubeconfig, temp_dir=settings.temp_dir)
    applier = KubectlApplier(settings.kubeconfig, kubectl=settings.kubectl, timeout=settings.timeout)
    return MutationEngine(store, applier)


def report(result: OperationResult) -> int:
    report_result(result)
    return 0


# =============================================================================
# Commands
# =============================================================================

def cmd_list(engine: MutationEngine, args: argparse.Namespace) -> int:
    show_contexts(list_contexts(engine.store.load()), engine.store.path)
    return 0


def cmd_current(engine: MutationEngine, args: argparse.Namespace) -> int:
    config = engine.store.load()
    if not config.current_context:
        warn("No current context is set")
        return 1
    print(config.current_context)
    if config.current_context not in config.context_names():
        warn(f"Current context '{config.current_context}' does not exist in {engine.store.path}")
    return 0


def cmd_use(engine: MutationEngine, args: argparse.Namespace) -> int:
    return report(engine.switch_context(args.name))


def cmd_delete(engine: MutationEngine, args: argparse.Namespace) -> int:
    def confirm(plan) -> bool:
        show_delete_plan(plan)
        if args.yes:
            return True
        return bool(prompt_yes_no(f"Are you sure you want to delete {plan.context}?"))

    return report(engine.delete_context(args.name, confirm=confirm, dry_run=args.dry_run))


def cmd_backup(engine: MutationEngine, args: argparse.Namespace) -> int:
    if args.list:
        show_backups(engine.store.list_backups())
        return 0
    return report(engine.backup())


def cmd_restore(engine: MutationEngine, args: argparse.Namespace) -> int:
    if not args.yes and not prompt_yes_no(f"Replace {engine.store.path} with {args.backup}?"):
        warn("Cancelled")
        return 0
    if engine.store.exists():
        saved = engine.backup()
        info(f"Current kubeconfig saved to {saved.backup_path}")
    return report(engine.restore(args.backup))


def _read_import_source(source: str) -> str:
    if source == "-":
        return decode_kubeconfig(sys.stdin.buffer.read(), "<stdin>")
    return read_kubeconfig_text(Path(source).expanduser())


def cmd_import(engine: MutationEngine, args: argparse.Namespace) -> int:
    text = _read_import_source(args.source)
    if not text.strip():
        error("Nothing to import")
        return 1
    if args.backup and engine.store.exists():
        saved = engine.backup()
        info(f"Backup saved to {saved.backup_path}")
    return report(engine.import_and_merge(text, prefix=args.prefix or ""))


def cmd_check(engine: MutationEngine, args: argparse.Namespace) -> int:
    problems = check_integrity(engine.store.load())
    show_integrity(problems)
    return 1 if problems else 0


def cmd_repl(engine: MutationEngine, args: argparse.Namespace) -> int:
    from kcm_lib.repl import run_repl
    return run_repl(engine)


# =============================================================================
# Main
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kcm", description="Manage kubeconfig contexts")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--kubeconfig", help="Kubeconfig file (default: $KUBECONFIG or ~/.kube/config)")
    parser.add_argument("--kubectl", help="kubectl binary (default: kubectl)")
    parser.add_argument("--timeout", type=int, help="Seconds to wait for kubectl (default: 30)")

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    p = sub.add_parser("list", aliases=["ls"], help="List contexts")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("current", help="Print the current context")
    p.set_defaults(func=cmd_current)

    p = sub.add_parser("use", aliases=["switch"], help="Switch the current context")
    p.add_argument("name")
    p.set_defaults(func=cmd_use)

    p = sub.add_parser("delete", aliases=["rm"], help="Delete a context and its unused cluster/user")
    p.add_argument("name")
    p.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")
    p.add_argument("--dry-run", action="store_true", help="Only show what would be deleted")
    p.set_defaults(func=cmd_delete)

    p = sub.add_parser("backup", help="Back up the kubeconfig")
    p.add_argument("--list", action="store_true", help="List existing backups")
    p.set_defaults(func=cmd_backup)

    p = sub.add_parser("restore", help="Restore the kubeconfig from a backup")
    p.add_argument("backup", type=Path)
    p.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")
    p.set_defaults(func=cmd_restore)

    p = sub.add_parser("import", help="Import and merge another kubeconfig ('-' for stdin)")
    p.add_argument("source")
    p.add_argument("-p", "--prefix", help="Prefix every imported name with PREFIX-")
    p.add_argument("--backup", action="store_true", help="Back up the kubeconfig first")
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("check", help="Report dangling references and unused entries")
    p.set_defaults(func=cmd_check)

    p = sub.add_parser("repl", help="Start the interactive shell")
    p.set_defaults(func=cmd_repl)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings.resolve(kubeconfig=args.kubeconfig, kubectl=args.kubectl, timeout=args.timeout)
    engine = build_engine(settings)

    func = getattr(args, "func", cmd_list)
    try:
        return func(engine, args)
    except KubeconfigError as e:
        error(str(e))
        return 1


def repl_main(argv: Optional[list[str]] = None) -> int:
    """Entry point for kcm-repl: global options only, then the shell."""
    argv = sys.argv[1:] if argv is None else argv
    return main(list(argv) + ["repl"])


if __name__ == "__main__":
    sys.exit(main())
