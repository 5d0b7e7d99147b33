# File: contextcounter/core/export/file_writer.py
# Version: v0.1.0
"""
All-or-nothing writer for a set of text outputs.

Every file is first written next to its target as `<name>.tmp`. Targets are
replaced only once every temp file is on disk. On any failure the temp files
and the targets already put in place by the same call are removed, so a
failed run leaves no count files behind.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List, Mapping

from contextcounter.core.errors import OutputError

log = logging.getLogger(__name__)

TMP_SUFFIX = ".tmp"


def _tmp_path(path: Path) -> Path:
    return path.with_name(path.name + TMP_SUFFIX)


def _discard(paths: Iterable[Path]) -> None:
    for p in paths:
        try:
            p.unlink(missing_ok=True)
        except OSError as e:
            log.warning("Could not remove %s after a failed write: %s", p, e)


def write_text_files(contents: Mapping[Path, str]) -> List[Path]:
    """Write {path: text} as one unit. Raises OutputError; nothing is left behind on failure."""
    targets = [Path(p) for p in contents]
    for path in targets:
        if path.is_dir():
            raise OutputError(f"Cannot write {path}: a directory with that name exists")

    staged: List[Path] = []
    placed: List[Path] = []
    try:
        for path, text in zip(targets, contents.values()):
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = _tmp_path(path)
            staged.append(tmp)
            tmp.write_text(text, encoding="utf-8")
        for path in targets:
            os.replace(_tmp_path(path), path)
            placed.append(path)
    except OSError as e:
        _discard(staged + placed)
        where = e.filename or ", ".join(str(p) for p in targets)
        raise OutputError(f"Failed to write {where}: {e.strerror or e}") from e
    return targets
