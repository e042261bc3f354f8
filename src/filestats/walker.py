"""Collect file sizes and modification times from a directory tree.

Each collector walks the tree once, appends one sample per regular file and
sorts the result, so the instance is ready for calculate_percentiles().
Symlinks are not followed and special files (devices, sockets, fifos) are
ignored. Unreadable directories are logged and skipped.
"""
from __future__ import annotations

import os
import stat
from typing import Iterator, Optional

from .config import HistogramConfig
from .logutil import get_logger
from .percentiles import PercentileStats


def iter_files(root: str, suffix: Optional[str] = None) -> Iterator[os.stat_result]:
    """Yield lstat results for every regular file below (and including) root.

    With a suffix, only files whose lowercased name ends with it are reported.
    """
    log = get_logger()
    suffix = suffix.lower() if suffix else None

    def wanted(name: str) -> bool:
        return suffix is None or name.lower().endswith(suffix)

    try:
        st = os.lstat(root)
    except OSError as exc:
        log.warning("cannot stat %s: %s", root, exc)
        return
    if stat.S_ISREG(st.st_mode):
        if wanted(os.path.basename(root)):
            yield st
        return
    if not stat.S_ISDIR(st.st_mode):
        return

    pending = [root]
    while pending:
        directory = pending.pop()
        try:
            with os.scandir(directory) as entries:
                for entry in entries:
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            pending.append(entry.path)
                        elif entry.is_file(follow_symlinks=False) and wanted(entry.name):
                            yield entry.stat(follow_symlinks=False)
                    except OSError as exc:
                        log.warning("cannot stat %s: %s", entry.path, exc)
        except OSError as exc:
            log.warning("cannot read directory %s: %s", directory, exc)


class FileSizeStats(PercentileStats):
    """File size statistics for a tree, optionally limited to one suffix.

    'suffix' should start with ".", e.g. ".jpg"; it is matched case-insensitively.
    """

    def __init__(self, path: str, suffix: Optional[str] = None, config: Optional[HistogramConfig] = None) -> None:
        super().__init__(config)
        self.path = path
        self.suffix = suffix
        for st in iter_files(path, suffix):
            self.collect(st.st_size)
        self.sort()


class FileMTimeStats(PercentileStats):
    """Modification time (whole seconds since the epoch) statistics for a tree."""

    def __init__(self, path: str, config: Optional[HistogramConfig] = None) -> None:
        super().__init__(config)
        self.path = path
        for st in iter_files(path):
            self.collect(int(st.st_mtime))
        self.sort()


__all__ = ["FileMTimeStats", "FileSizeStats", "iter_files"]
