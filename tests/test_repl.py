"""Tests for the interactive shell: dispatch, completion and prompt."""

from pathlib import Path

import pytest
from prompt_toolkit.completion import CompleteEvent
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import fragment_list_to_text, to_formatted_text
from rich.console import Console

import kcm_lib.display as display
import kcm_lib.repl.commands as commands
from kcm_lib.config import ConfigStore
from kcm_lib.engine import MutationEngine
from kcm_lib.repl import (
    MenuCompleter,
    ReplContext,
    build_menu_tree,
    get_prompt_message,
    get_prompt_text,
    handle_command,
)

from conftest import IMPORT_KUBECONFIG, FakeApplier


@pytest.fixture(autouse=True)
def quiet_console(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.setattr(display, "console", Console(width=400, no_color=True))


@pytest.fixture
def ctx(engine: MutationEngine) -> ReplContext:
    return ReplContext(engine=engine)


@pytest.fixture
def menus() -> dict:
    return build_menu_tree()


def complete(ctx: ReplContext, menus: dict, text: str) -> list[str]:
    completer = MenuCompleter(ctx, menus)
    return [c.text for c in completer.get_completions(Document(text), CompleteEvent())]


# =============================================================================
# Dispatch
# =============================================================================

def test_exit_and_blank_lines(ctx: ReplContext, menus: dict):
    assert handle_command("", ctx, menus)
    assert not handle_command("exit", ctx, menus)
    assert not handle_command("quit", ctx, menus)


def test_unknown_command(ctx: ReplContext, menus: dict, capsys):
    assert handle_command("frobnicate", ctx, menus)
    assert "Unknown command: frobnicate" in capsys.readouterr().err


def test_help_lists_commands(ctx: ReplContext, menus: dict, capsys):
    assert handle_command("help", ctx, menus)
    out = capsys.readouterr().out
    for name in menus:
        assert name in out


def test_use_switches(ctx: ReplContext, menus: dict, applier: FakeApplier, store: ConfigStore):
    assert handle_command("use b", ctx, menus)
    assert applier.calls == [("use-context", "b")]
    assert store.load().current_context == "b"
    assert ctx.last_result.committed


def test_alias_dispatches(ctx: ReplContext, menus: dict, applier: FakeApplier):
    assert handle_command("switch c", ctx, menus)
    assert applier.calls == [("use-context", "c")]


def test_errors_keep_the_shell_running(ctx: ReplContext, menus: dict, capsys):
    assert handle_command("use nope", ctx, menus)
    assert "Context not found: nope" in capsys.readouterr().err


def test_delete_confirmed(ctx: ReplContext, menus: dict, applier: FakeApplier, monkeypatch):
    monkeypatch.setattr(commands, "prompt_yes_no", lambda question: True)
    assert handle_command("delete c", ctx, menus)
    assert applier.calls == [("delete-context", "c"), ("delete-cluster", "solo")]


def test_delete_declined(ctx: ReplContext, menus: dict, applier: FakeApplier, monkeypatch):
    monkeypatch.setattr(commands, "prompt_yes_no", lambda question: False)
    assert handle_command("rm c", ctx, menus)
    assert applier.calls == []
    assert ctx.last_result.messages == ["Cancelled"]


def test_delete_dry_run(ctx: ReplContext, menus: dict, applier: FakeApplier, monkeypatch):
    monkeypatch.setattr(commands, "prompt_yes_no", lambda question: True)
    assert handle_command("delete --dry-run c", ctx, menus)
    assert applier.calls == []
    assert "[DRY-RUN] delete context c" in ctx.last_result.messages


def test_import_file_with_prefix(ctx: ReplContext, menus: dict, store: ConfigStore, tmp_path: Path):
    source = tmp_path / "incoming.yaml"
    source.write_text(IMPORT_KUBECONFIG)

    assert handle_command(f"import {source} demo", ctx, menus)

    assert "demo-dev" in store.load().context_names()


def test_import_paste(ctx: ReplContext, menus: dict, store: ConfigStore, monkeypatch):
    monkeypatch.setattr(commands, "prompt_multiline", lambda label: IMPORT_KUBECONFIG)
    assert handle_command("import paste", ctx, menus)
    assert "dev" in store.load().context_names()


def test_backup_then_list(ctx: ReplContext, menus: dict, store: ConfigStore, capsys):
    assert handle_command("backup", ctx, menus)
    assert len(store.list_backups()) == 1
    capsys.readouterr()

    assert handle_command("backup list", ctx, menus)
    assert "config_backup_" in capsys.readouterr().out


# =============================================================================
# Completion and prompt
# =============================================================================

def test_complete_commands(ctx: ReplContext, menus: dict):
    assert complete(ctx, menus, "") == list(menus)
    assert complete(ctx, menus, "ba") == ["backup"]


def test_complete_context_names(ctx: ReplContext, menus: dict):
    assert complete(ctx, menus, "use ") == ["a", "b", "c"]
    assert complete(ctx, menus, "delete ") == ["--dry-run", "a", "b", "c"]
    assert complete(ctx, menus, "use b") == ["b"]


def test_complete_backup_subcommands(ctx: ReplContext, menus: dict, store: ConfigStore):
    assert complete(ctx, menus, "backup ") == ["list", "restore"]
    saved = store.backup()
    assert complete(ctx, menus, "backup restore ") == [str(saved)]


def test_prompt_shows_current_context(ctx: ReplContext, store: ConfigStore, kubeconfig: Path):
    assert get_prompt_text(ctx) == "kcm(a)> "
    kubeconfig.unlink()
    assert get_prompt_text(ctx) == "kcm> "


def test_prompt_message_uses_prompt_style(ctx: ReplContext):
    fragments = to_formatted_text(get_prompt_message(ctx))
    assert fragment_list_to_text(fragments) == "kcm(a)> "
    assert all("class:prompt" in style for style, *_ in fragments)


def test_import_non_utf8_file_keeps_shell_running(
        ctx: ReplContext, menus: dict, applier: FakeApplier, kubeconfig: Path, tmp_path: Path, capsys):
    source = tmp_path / "incoming.yaml"
    source.write_bytes(b"\xff\xfe" + IMPORT_KUBECONFIG.encode("utf-8"))
    before = kubeconfig.read_bytes()

    assert handle_command(f"import {source}", ctx, menus)

    assert "not valid UTF-8" in capsys.readouterr().err
    assert applier.calls == []
    assert kubeconfig.read_bytes() == before
