from __future__ import annotations

import logging
import shutil
import zipfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

# New World ROM images for mac99 are a few megabytes.
ROM_MIN_BYTES = 1_000_000
ROM_MAX_BYTES = 5_000_000
ROM_NAME_HINTS: Tuple[str, ...] = ("g3", "power")


@dataclass(frozen=True)
class RomCandidate:
    name: str
    size: int


def in_size_window(c: RomCandidate) -> bool:
    return ROM_MIN_BYTES <= c.size <= ROM_MAX_BYTES


def has_name_hint(c: RomCandidate) -> bool:
    base = PurePosixPath(c.name).name.lower()
    return any(h in base for h in ROM_NAME_HINTS)


def select_rom(candidates: Sequence[RomCandidate]) -> Optional[RomCandidate]:
    """Pick the ROM image to use, or None.

    Only sizes inside the window qualify. Among those, the first whose name
    hints at a G3/Power Macintosh wins; otherwise the first in archive order.
    """

    sized = [c for c in candidates if in_size_window(c)]
    for c in sized:
        if has_name_hint(c):
            return c
    return sized[0] if sized else None


def list_archive(path: Path | str) -> List[RomCandidate]:
    with zipfile.ZipFile(path) as zf:
        return [RomCandidate(name=i.filename, size=i.file_size) for i in zf.infolist() if not i.is_dir()]


def extract_member(archive: Path | str, member: str, dest: Path | str) -> None:
    d = Path(dest)
    d.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(archive) as zf, zf.open(member) as src, d.open("wb") as out:
        shutil.copyfileobj(src, out)
    logger.info("Extracted %s -> %s", member, str(d))
