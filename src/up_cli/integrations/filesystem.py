"""Local filesystem access used by the chart cache.

The chart cache only touches the disk through this small surface so tests
can substitute a stub and count calls.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path


class OsFilesystem:
    """Filesystem backed by the operating system.

    OS errors (``FileNotFoundError``, ``PermissionError``...) propagate
    unwrapped.
    """

    def stat(self, path: str | Path) -> os.stat_result:
        return os.stat(path)

    def mkdir_all(self, path: str | Path, mode: int = 0o755) -> None:
        Path(path).mkdir(mode=mode, parents=True, exist_ok=True)

    def rename(self, src: str | Path, dst: str | Path) -> None:
        os.replace(src, dst)

    def remove_all(self, path: str | Path) -> None:
        """Remove a file or directory tree; a missing path is not an error."""
        p = Path(path)
        if p.is_dir() and not p.is_symlink():
            shutil.rmtree(p)
        elif p.exists() or p.is_symlink():
            p.unlink()

    def read_dir(self, path: str | Path) -> list[str]:
        """Return entry names in a directory, sorted."""
        return sorted(entry.name for entry in os.scandir(path))

    def temp_dir(self, parent: str | Path, prefix: str = "") -> str:
        """Create a fresh temporary directory inside ``parent``."""
        return tempfile.mkdtemp(prefix=prefix or None, dir=parent)
