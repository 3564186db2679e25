"""Tests for the kubeconfig file store."""

import os
import stat
from datetime import datetime, timezone
from pathlib import Path

import pytest

from kcm_lib.config import ConfigStore, parse
from kcm_lib.config.store import backup_timestamp
from kcm_lib.errors import ParseError, StoreUnavailable

from conftest import SAMPLE_KUBECONFIG


def test_load_missing_file(tmp_path: Path):
    store = ConfigStore(tmp_path / "nope")
    assert not store.exists()
    with pytest.raises(StoreUnavailable, match="not found"):
        store.load()


def test_load_malformed_file(tmp_path: Path):
    path = tmp_path / "config"
    path.write_text("contexts: [")
    with pytest.raises(ParseError):
        ConfigStore(path).load()


def test_load_reads_fresh_each_time(store: ConfigStore, kubeconfig: Path):
    assert store.load().current_context == "a"
    kubeconfig.write_text(SAMPLE_KUBECONFIG.replace("current-context: a", "current-context: c"))
    assert store.load().current_context == "c"


def test_save_replaces_file_without_leftovers(store: ConfigStore, kubeconfig: Path):
    config = store.load()
    config.current_context = "b"
    store.save(config)

    assert store.load().current_context == "b"
    assert sorted(p.name for p in kubeconfig.parent.iterdir()) == ["config"]


def test_save_keeps_permissions(store: ConfigStore, kubeconfig: Path):
    kubeconfig.chmod(0o640)
    store.save(store.load())
    assert stat.S_IMODE(kubeconfig.stat().st_mode) == 0o640


def test_save_creates_new_file_private(tmp_path: Path):
    path = tmp_path / "new" / "config"
    ConfigStore(path).write_text(SAMPLE_KUBECONFIG)
    assert path.read_text() == SAMPLE_KUBECONFIG
    assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_failed_write_leaves_original(store: ConfigStore, kubeconfig: Path, monkeypatch):
    before = kubeconfig.read_bytes()

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", broken_replace)
    with pytest.raises(StoreUnavailable, match="disk full"):
        store.write_text("contexts: []\nclusters: []\nusers: []\n")

    assert kubeconfig.read_bytes() == before
    assert sorted(p.name for p in kubeconfig.parent.iterdir()) == ["config"]


def test_backup_timestamp_format():
    when = datetime(2024, 5, 1, 10, 11, 12, 345000, tzinfo=timezone.utc)
    assert backup_timestamp(when) == "2024-05-01T10-11-12-345Z"


def test_backup_copies_bytes(store: ConfigStore, kubeconfig: Path):
    before = kubeconfig.read_bytes()

    backup = store.backup()

    assert backup.parent == kubeconfig.parent
    assert backup.name.startswith("config_backup_")
    assert backup.read_bytes() == before
    assert kubeconfig.read_bytes() == before


def test_backups_do_not_overwrite_each_other(store: ConfigStore):
    first = store.backup()
    second = store.backup()
    assert first != second
    assert store.list_backups() == sorted([first, second])


def test_backup_missing_source(tmp_path: Path):
    with pytest.raises(StoreUnavailable):
        ConfigStore(tmp_path / "config").backup()


def test_restore(store: ConfigStore, kubeconfig: Path):
    backup = store.backup()
    kubeconfig.write_text("contexts: []\nclusters: []\nusers: []\n")

    restored = store.restore(backup)

    assert restored.context_names() == ["a", "b", "c"]
    assert kubeconfig.read_text() == SAMPLE_KUBECONFIG


def test_restore_rejects_malformed_backup(store: ConfigStore, kubeconfig: Path, tmp_path: Path):
    bad = tmp_path / "bad"
    bad.write_text("not a kubeconfig")
    before = kubeconfig.read_bytes()

    with pytest.raises(ParseError):
        store.restore(bad)
    assert kubeconfig.read_bytes() == before


def test_restore_missing_backup(store: ConfigStore, tmp_path: Path):
    with pytest.raises(StoreUnavailable):
        store.restore(tmp_path / "gone")


def test_scratch_file_is_private_and_removed(store: ConfigStore, scratch_dir: Path):
    with store.scratch_file("kcm-test-", "hello") as path:
        assert path.parent == scratch_dir
        assert path.read_text() == "hello"
        assert stat.S_IMODE(path.stat().st_mode) == 0o600
    assert not path.exists()


def test_scratch_file_removed_on_error(store: ConfigStore, scratch_dir: Path):
    with pytest.raises(RuntimeError):
        with store.scratch_file("kcm-test-") as path:
            raise RuntimeError("boom")
    assert not path.exists()
    assert list(scratch_dir.iterdir()) == []


def test_saved_document_matches_loaded(store: ConfigStore, kubeconfig: Path):
    config = store.load()
    store.save(config)
    assert parse(kubeconfig.read_text()) == config


def test_restore_keeps_crlf_bytes(store: ConfigStore, kubeconfig: Path, tmp_path: Path):
    crlf = tmp_path / "config_crlf"
    crlf.write_bytes(SAMPLE_KUBECONFIG.replace("\n", "\r\n").encode("utf-8"))

    store.restore(crlf)

    assert kubeconfig.read_bytes() == crlf.read_bytes()


def test_restore_rejects_non_utf8_backup(store: ConfigStore, kubeconfig: Path, tmp_path: Path):
    bad = tmp_path / "bad"
    bad.write_bytes(b"\xff\xfe" + SAMPLE_KUBECONFIG.encode("utf-8"))
    before = kubeconfig.read_bytes()

    with pytest.raises(ParseError, match="not valid UTF-8"):
        store.restore(bad)
    assert kubeconfig.read_bytes() == before
