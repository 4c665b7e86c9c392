# src/aliaslookup/icons/icon_cache.py — v1
"""On-disk icon artifacts, one PNG per link alias."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from aliaslookup.core.models import LinkRecord


class IconCache:
    """Filesystem location of downloaded link icons."""

    def __init__(self, icons_dir: Path | str) -> None:
        self._dir = Path(icons_dir).expanduser()

    def path_for(self, link: LinkRecord) -> Path:
        safe = link.short.replace("/", "_").replace("\\", "_")
        return self._dir / f"{safe}.png"

    def has_icon(self, link: LinkRecord) -> bool:
        return self.path_for(link).is_file()

    def write(self, link: LinkRecord, content: bytes) -> Path:
        """Atomically write the icon of link and return its path."""
        self._dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(link)
        fd, tmp_name = tempfile.mkstemp(dir=self._dir, prefix=".tmp-", suffix=".part")
        try:
            with os.fdopen(fd, "wb") as tmp:
                tmp.write(content)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return path
