"""
Kubeconfig file store for kcm.

Loads and saves the kubeconfig document, replacing the file atomically so
that a crash mid-write never leaves a truncated config behind. Also owns
backups and the private scratch files used while importing.
"""

import os
import shutil
import stat
import tempfile
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

from kcm_lib.errors import ParseError, StoreUnavailable

from .constants import BACKUP_INFIX
from .dataclasses import KubeConfig
from .serialization import parse, serialize


def decode_kubeconfig(data: bytes, source) -> str:
    """Decode raw kubeconfig bytes as UTF-8, raising ParseError otherwise."""
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(f"{source} is not valid UTF-8: {e}") from e


def read_kubeconfig_text(path: Path) -> str:
    """
    Read a kubeconfig file given by the user (e.g. for import).

    Raises:
        StoreUnavailable: the file is missing or unreadable
        ParseError: the file is not UTF-8 text
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise StoreUnavailable(f"Cannot read {path}: {e}") from e
    return decode_kubeconfig(data, path)


def backup_timestamp(now: Optional[datetime] = None) -> str:
    """UTC ISO-8601 timestamp with ':' and '.' replaced, e.g. 2024-05-01T10-11-12-345Z."""
    now = now or datetime.now(timezone.utc)
    iso = now.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    iso = iso.replace("+00:00", "Z")
    return iso.replace(":", "-").replace(".", "-")


class ConfigStore:
    """Reads and writes one kubeconfig file."""

    def __init__(self, path: Path, temp_dir: Optional[Path] = None):
        self.path = Path(path)
        self.temp_dir = Path(temp_dir) if temp_dir else None

    # =========================================================================
    # Load / Save
    # =========================================================================

    def exists(self) -> bool:
        return self.path.is_file()

    def read_text(self) -> str:
        """Return the raw kubeconfig text."""
        if not self.path.exists():
            raise StoreUnavailable(f"Kubeconfig not found: {self.path}")
        try:
            return self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StoreUnavailable(f"Cannot read {self.path}: {e}") from e

    def load(self) -> KubeConfig:
        """Load and parse the kubeconfig. Always re-reads the file."""
        return parse(self.read_text())

    def save(self, config: KubeConfig) -> None:
        """Serialize and atomically write the kubeconfig."""
        self.write_text(serialize(config))

    def write_text(self, text: str) -> None:
        """Atomically replace the kubeconfig with text (stored as UTF-8)."""
        self.write_bytes(text.encode("utf-8"))

    def write_bytes(self, data: bytes) -> None:
        """
        Atomically replace the kubeconfig with data.

        The new content is written to a temporary file in the same directory,
        synced, given the live file's permissions and renamed over it.
        """
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            mode = stat.S_IMODE(self.path.stat().st_mode) if self.path.exists() else 0o600
            fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=f".{self.path.name}.", suffix=".tmp")
        except OSError as e:
            raise StoreUnavailable(f"Cannot write {self.path}: {e}") from e

        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, mode)
            os.replace(tmp_path, self.path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise StoreUnavailable(f"Cannot write {self.path}: {e}") from e
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

    # =========================================================================
    # Backups
    # =========================================================================

    def _backup_prefix(self) -> str:
        return f"{self.path.name}{BACKUP_INFIX}"

    def backup(self) -> Path:
        """
        Copy the kubeconfig byte-for-byte to a timestamped sibling file.

        Returns:
            Path of the new backup
        """
        if not self.path.is_file():
            raise StoreUnavailable(f"Kubeconfig not found: {self.path}")

        base = self.path.parent / f"{self._backup_prefix()}{backup_timestamp()}"
        backup_path = base
        counter = 1
        while backup_path.exists():
            backup_path = base.with_name(f"{base.name}-{counter}")
            counter += 1

        try:
            shutil.copy2(self.path, backup_path)
        except OSError as e:
            raise StoreUnavailable(f"Cannot back up {self.path}: {e}") from e
        return backup_path

    def list_backups(self) -> list[Path]:
        """Existing backups of this kubeconfig, oldest first."""
        if not self.path.parent.is_dir():
            return []
        return sorted(
            p for p in self.path.parent.glob(f"{self._backup_prefix()}*")
            if p.is_file()
        )

    def restore(self, backup_path: Path) -> KubeConfig:
        """
        Replace the kubeconfig with the contents of a backup.

        The backup must parse as a kubeconfig; the live file is left alone
        otherwise. The bytes are copied unchanged, line endings included.
        """
        backup_path = Path(backup_path)
        if not backup_path.is_file():
            raise StoreUnavailable(f"Backup not found: {backup_path}")
        try:
            data = backup_path.read_bytes()
        except OSError as e:
            raise StoreUnavailable(f"Cannot read {backup_path}: {e}") from e

        config = parse(decode_kubeconfig(data, backup_path))
        self.write_bytes(data)
        return config

    # =========================================================================
    # Scratch files
    # =========================================================================

    @contextmanager
    def scratch_file(self, prefix: str, text: str = "") -> Iterator[Path]:
        """
        Yield a private temporary file, removed on every exit path.

        Args:
            prefix: Filename prefix (e.g., "kcm-import-")
            text: Initial content
        """
        try:
            fd, name = tempfile.mkstemp(
                dir=self.temp_dir, prefix=prefix, suffix=".yaml")
        except OSError as e:
            raise StoreUnavailable(f"Cannot create temporary file: {e}") from e

        path = Path(name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            yield path
        finally:
            path.unlink(missing_ok=True)
