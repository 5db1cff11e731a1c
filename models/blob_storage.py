"""
Filesystem-backed blob storage.

Objects are addressed by slash-separated keys such as
``roms/<storage_dir>/<filename>`` and live at the same relative path under
the configured root directory. Only list/get/put are offered; callers are
responsible for building keys from a verified storage partition.
"""
from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import BinaryIO, List, Optional

from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

ROM_PREFIX = "roms"
SAVE_PREFIX = "saves"


def object_key(kind: str, store: str, filename: str = "") -> str:
    """Build ``<kind>/<store>/<filename>``; an empty filename yields the listing prefix."""
    if kind not in (ROM_PREFIX, SAVE_PREFIX):
        raise ValueError(f"unknown object kind: {kind}")
    if not store or store != secure_filename(store):
        raise ValueError("invalid storage partition")
    return f"{kind}/{store}/{filename}"


class BlobStorage:
    def __init__(self, root: Optional[str] = None):
        self.__root = Path(root or os.getenv("BLOB_STORAGE_ROOT", "storage")).resolve()

    @property
    def root(self) -> Path:
        return self.__root

    def configure(self, root: str):
        """Point the store at a new root directory (created on demand)."""
        self.__root = Path(root).resolve()
        self.__root.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        path = (self.__root / key).resolve()
        if path != self.__root and self.__root not in path.parents:
            raise ValueError(f"key escapes storage root: {key!r}")
        return path

    def list(self, prefix: str) -> List[str]:
        """Names of the objects directly under prefix, sorted."""
        directory = self._path_for(prefix)
        if not directory.is_dir():
            return []
        return sorted(p.name for p in directory.iterdir() if p.is_file() and not p.name.startswith("."))

    def get(self, key: str) -> Optional[Path]:
        path = self._path_for(key)
        if not path.is_file():
            return None
        return path

    def put(self, key: str, stream: BinaryIO) -> int:
        """
        Write stream to key, replacing any previous object.
        The object becomes visible only once fully written.
        """
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".upload-")
        try:
            with os.fdopen(fd, "wb") as tmp:
                shutil.copyfileobj(stream, tmp)
                size = tmp.tell()
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug("stored %s (%d bytes)", key, size)
        return size
