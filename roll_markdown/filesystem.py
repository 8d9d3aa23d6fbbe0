"""Filesystem-backed document store for roll-markdown."""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path, PurePosixPath
from typing import Any, Protocol, TextIO

from .exceptions import PageExistsError, PageNotFoundError, StoreError
from .frontmatter import read_frontmatter, update_frontmatter

logger = logging.getLogger(__name__)


class DocumentStore(Protocol):
    """Capabilities the page manager needs from the host's document store.

    Paths are vault-relative POSIX strings such as ``"Roll/Now.md"``.
    """

    def exists(self, path: str) -> bool: ...

    def read_text(self, path: str) -> str: ...

    def write_text(self, path: str, content: str) -> None: ...

    def create(self, path: str, content: str) -> None: ...

    def rename(self, source: str, destination: str) -> None: ...

    def delete(self, path: str) -> None: ...

    def ensure_folder(self, path: str) -> None: ...

    def read_metadata(self, path: str) -> dict[str, Any]: ...

    def write_metadata(self, path: str, updates: dict[str, Any]) -> None: ...


def contains_symlink(path: Path, stop_at: Path | None = None) -> bool:
    """Check whether a path or any parent directory is a symlink.

    Args:
        path: Path to inspect.
        stop_at: Ancestor at which to stop checking (not itself inspected).

    Returns:
        bool: True when a symlink is encountered, otherwise False.

    Examples:
        contains_symlink(Path("/tmp/vault/link/Now.md"), stop_at=Path("/tmp/vault"))
    """
    for candidate in (path, *path.parents):
        if stop_at is not None and candidate == stop_at:
            break
        try:
            if candidate.is_symlink():
                return True
        except OSError:
            continue
    return False


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Return stat information for a file while disallowing symlinks.

    Raises:
        PageNotFoundError: If the file does not exist.
        StoreError: If the path is inaccessible, a symlink, or not a regular file.
    """
    try:
        stat_result = os.stat(filepath, follow_symlinks=False)
    except FileNotFoundError as error:
        raise PageNotFoundError(str(filepath)) from error
    except OSError as error:
        raise StoreError(f"Error accessing {filepath}: {error}") from error

    if stat.S_ISLNK(stat_result.st_mode):
        raise StoreError(f"Symlinks are not supported: {filepath}.")

    if not stat.S_ISREG(stat_result.st_mode):
        raise StoreError(f"{filepath} is not a regular file.")

    return stat_result


def safe_read(filepath: Path) -> TextIO:
    """Open a file for reading with consistent error handling.

    Raises:
        PageNotFoundError: If the file is missing.
        StoreError: If the path is inaccessible or not a file.
    """
    try:
        return open(filepath, "r", encoding="UTF-8", newline="")
    except FileNotFoundError as error:
        raise PageNotFoundError(str(filepath)) from error
    except (PermissionError, IsADirectoryError, NotADirectoryError) as error:
        raise StoreError(f"Error accessing {filepath}: {error}") from error


def atomic_write(filepath: Path, content: str, permissions: int | None = None) -> None:
    """Replace `filepath` with `content` through a synced temporary file.

    Args:
        filepath: Destination file.
        content: Full replacement text.
        permissions: Mode bits to apply to the new file, if any.

    Raises:
        StoreError: If the temporary file cannot be written or moved into place.
    """
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="UTF-8", newline="", delete=False, dir=filepath.parent
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(content)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())
            if permissions is not None:
                os.chmod(tmp_file.name, permissions)

        os.replace(temp_path, filepath)
    except OSError as error:
        raise StoreError(f"Error writing {filepath}: {error}") from error
    finally:
        if temp_path is not None:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass


class FileSystemStore:
    """Document store rooted at a vault directory on disk.

    Args:
        root: Vault directory; every page path is resolved beneath it.

    Examples:
        store = FileSystemStore(Path("~/notes").expanduser())
        store.read_text("Roll/Now.md")
    """

    def __init__(self, root: Path):
        self.root = root.resolve()

    def resolve(self, path: str) -> Path:
        """Map a vault-relative path to a filesystem path under the root.

        Raises:
            StoreError: If the path is absolute, escapes the root, or crosses a
                symlink.
        """
        relative = PurePosixPath(path)
        if relative.is_absolute() or ".." in relative.parts:
            raise StoreError(f"{path} is outside of the vault {self.root}.")

        resolved = self.root.joinpath(*relative.parts)
        if contains_symlink(resolved, stop_at=self.root):
            raise StoreError(f"Symlinks are not supported for security reasons: {path}")
        return resolved

    def exists(self, path: str) -> bool:
        return self.resolve(path).exists()

    def read_text(self, path: str) -> str:
        filepath = self.resolve(path)
        collect_file_stat(filepath)
        try:
            with safe_read(filepath) as file:
                return file.read()
        except UnicodeDecodeError as error:
            raise StoreError(f"Invalid UTF-8 sequence in {path}: {error}") from error

    def write_text(self, path: str, content: str) -> None:
        filepath = self.resolve(path)
        current_stat = collect_file_stat(filepath)
        atomic_write(filepath, content, stat.S_IMODE(current_stat.st_mode))
        logger.debug("Wrote %s (%d characters)", path, len(content))

    def create(self, path: str, content: str) -> None:
        filepath = self.resolve(path)
        try:
            with open(filepath, "x", encoding="UTF-8", newline="") as file:
                file.write(content)
        except FileExistsError as error:
            raise PageExistsError(path) from error
        except OSError as error:
            raise StoreError(f"Error creating {path}: {error}") from error
        logger.debug("Created %s", path)

    def rename(self, source: str, destination: str) -> None:
        source_path = self.resolve(source)
        destination_path = self.resolve(destination)
        collect_file_stat(source_path)
        if destination_path.exists():
            raise PageExistsError(destination)
        try:
            source_path.rename(destination_path)
        except OSError as error:
            raise StoreError(f"Error moving {source} to {destination}: {error}") from error
        logger.debug("Moved %s to %s", source, destination)

    def delete(self, path: str) -> None:
        filepath = self.resolve(path)
        collect_file_stat(filepath)
        try:
            filepath.unlink()
        except OSError as error:
            raise StoreError(f"Error deleting {path}: {error}") from error
        logger.debug("Deleted %s", path)

    def ensure_folder(self, path: str) -> None:
        if not path:
            return
        folder = self.resolve(path)
        if folder.is_dir():
            return
        try:
            folder.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise StoreError(f"Error creating folder {path}: {error}") from error
        logger.debug("Created folder %s", path)

    def read_metadata(self, path: str) -> dict[str, Any]:
        return read_frontmatter(self.read_text(path), path)

    def write_metadata(self, path: str, updates: dict[str, Any]) -> None:
        text = self.read_text(path)
        self.write_text(path, update_frontmatter(text, lambda data: data.update(updates), path))
