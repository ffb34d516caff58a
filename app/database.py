import asyncio
import json
import logging
import os
import re
import tempfile
import time
import weakref
from pathlib import Path
from typing import Dict, Any, List, Optional, BinaryIO

from .core import NotFound, PayloadTooLarge, ReadError, StorageError, ValidationError

# This file holds the flat-file stores: category documents and uploaded attachments.

logger = logging.getLogger(__name__)

_CATEGORY_RE = re.compile(r"^[A-Za-z0-9_-]+$")
_CHUNK_SIZE = 64 * 1024


class CategoryStore:
    """One pretty-printed JSON array per category under `data_dir`."""

    def __init__(self, data_dir: Path, suffix: str = "Cosmetic.json", allowed: Optional[List[str]] = None):
        self.data_dir = Path(data_dir)
        self.suffix = suffix
        self.allowed = [c.lower() for c in (allowed or [])]
        # entries vanish once no request holds the lock
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    def lock(self, category: str) -> asyncio.Lock:
        # serialises read-modify-write cycles on one category within this process
        key = f"category:{category.lower()}"
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    def category_path(self, category: str) -> Path:
        if not _CATEGORY_RE.match(category or ""):
            raise ValidationError("Invalid category name", details={"category": category})
        name = category.lower()
        if self.allowed and name not in self.allowed:
            raise NotFound("Category not found", details={"category": name, "allowed": self.allowed})
        return self.data_dir / f"{name}{self.suffix}"

    def exists(self, category: str) -> bool:
        return self.category_path(category).exists()

    def list_categories(self) -> List[str]:
        if not self.data_dir.is_dir():
            return []
        return sorted(
            p.name[: -len(self.suffix)]
            for p in self.data_dir.iterdir()
            if p.is_file() and p.name.endswith(self.suffix) and len(p.name) > len(self.suffix)
        )

    def load_category(self, category: str, create: bool = False) -> List[Dict[str, Any]]:
        """
        Return the stored records. A missing document reads as [] and is
        written out first when `create` is set. Unparsable contents raise ReadError.
        """
        path = self.category_path(category)
        if not path.exists():
            if create:
                logger.info("creating empty document %s", path)
                self._write(path, [])
            return []
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (ValueError, UnicodeDecodeError) as e:
            raise ReadError("Failed to read data", details=f"{path.name}: {e}") from e
        except OSError as e:
            raise StorageError("Failed to read data", details=str(e)) from e
        if not isinstance(data, list):
            raise ReadError("Failed to read data", details=f"{path.name}: expected a JSON array")
        return data

    def save_category(self, category: str, products: List[Dict[str, Any]]) -> None:
        path = self.category_path(category)
        try:
            self._write(path, products)
        except OSError as e:
            raise StorageError("Failed to save data", details=str(e)) from e
        logger.info("saved %d products to %s", len(products), path)

    def _write(self, path: Path, products: List[Dict[str, Any]]) -> None:
        # readers only ever see a complete array
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=str(path.parent), prefix=".", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(products, f, indent=2, ensure_ascii=False)
            os.replace(tmp, path)
        except BaseException:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise


class AttachmentStore:
    """Uploaded images, stored as `<epoch millis>-<original filename>`."""

    url_prefix = "/uploads/"

    def __init__(self, uploads_dir: Path, max_bytes: int):
        self.uploads_dir = Path(uploads_dir)
        self.max_bytes = max_bytes

    def ensure_dir(self) -> None:
        self.uploads_dir.mkdir(parents=True, exist_ok=True)

    def save_attachment(self, filename: str, stream: BinaryIO) -> str:
        """Copy `stream` to disk in chunks, aborting once the size cap is crossed."""
        self.ensure_dir()
        original = os.path.basename(filename.replace("\\", "/")) or "upload"
        stored = f"{int(time.time() * 1000)}-{original}"
        target = self.uploads_dir / stored

        written = 0
        try:
            with open(target, "wb") as out:
                while True:
                    chunk = stream.read(_CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise PayloadTooLarge(
                            "File too large",
                            details={"limit_bytes": self.max_bytes},
                        )
                    out.write(chunk)
        except PayloadTooLarge:
            target.unlink(missing_ok=True)
            logger.warning("rejected upload %s: over %d bytes", original, self.max_bytes)
            raise
        except OSError as e:
            target.unlink(missing_ok=True)
            raise StorageError("Failed to store upload", details=str(e)) from e

        logger.info("stored upload %s (%d bytes)", stored, written)
        return stored

    def reference(self, stored: str) -> str:
        return f"{self.url_prefix}{stored}"

    def load_attachment(self, name: str) -> Path:
        if not name or name != os.path.basename(name) or name in (".", ".."):
            raise NotFound("File not found")
        path = self.uploads_dir / name
        if not path.is_file():
            raise NotFound("File not found")
        return path

    def delete_attachment(self, reference: Optional[str]) -> bool:
        """Best-effort removal by `/uploads/<name>` reference. Never raises."""
        if not reference:
            return False
        name = os.path.basename(reference.split("?", 1)[0])
        if not name:
            return False
        path = self.uploads_dir / name
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning("attachment %s already gone", path)
            return False
        except OSError as e:
            logger.warning("could not delete attachment %s: %s", path, e)
            return False
        logger.info("deleted attachment %s", path)
        return True
