"""
File store for uploaded hazard files.
"""

from __future__ import annotations

import logging
import shutil
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Protocol

from fieldreports.errors import StorageError

logger = logging.getLogger(__name__)

URL_PREFIX = "uploads"


class FileStore(Protocol):
    """Defines the operations the API needs from the file store."""

    directory: Path
    url_prefix: str

    def save(self, src: BinaryIO, original_name: str) -> str:
        ...

    def delete(self, relative_path: str) -> None:
        ...


def stored_filename(
    original_name: str,
    *,
    now_ms: Optional[int] = None,
    token: Optional[str] = None,
) -> str:
    """
    Build the on-disk name for an upload.

    Format: ``<millisecond-timestamp>-<8 hex chars>-<original name>``. The
    random token keeps two uploads of the same name in the same millisecond
    apart. Directory parts of the client name are dropped.
    """
    base = (original_name or "").replace("\\", "/").rsplit("/", 1)[-1]
    if base in ("", ".", ".."):
        base = "upload"
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    if token is None:
        token = uuid.uuid4().hex[:8]
    return f"{now_ms}-{token}-{base}"


@dataclass
class LocalFileStore:
    """
    Stores uploads in a local directory that the app serves under
    ``/<url_prefix>`` (/uploads by default).
    """

    directory: Path
    url_prefix: str = URL_PREFIX

    def __post_init__(self):
        self.directory = Path(self.directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def save(self, src: BinaryIO, original_name: str) -> str:
        """Copy ``src`` into the store and return its relative path."""
        name = stored_filename(original_name)
        target = self.directory / name
        try:
            # "xb" refuses to overwrite an existing upload.
            with open(target, "xb") as out:
                shutil.copyfileobj(src, out)
        except FileExistsError as exc:
            raise StorageError(f"Upload name collision: {name}") from exc
        except OSError as exc:
            target.unlink(missing_ok=True)
            raise StorageError(f"Failed to write upload {name}: {exc}") from exc
        logger.info("Stored upload %s", name)
        return f"{self.url_prefix}/{name}"

    def delete(self, relative_path: str) -> None:
        target = self.resolve(relative_path)
        try:
            target.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Failed to delete upload {target.name}: {exc}") from exc

    def resolve(self, relative_path: str) -> Path:
        """Return the on-disk path for a stored relative path."""
        name = relative_path.replace("\\", "/").rsplit("/", 1)[-1]
        return self.directory / name
