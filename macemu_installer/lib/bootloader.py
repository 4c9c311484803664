from __future__ import annotations

import logging
import re
import shutil
from pathlib import Path
from typing import List, Sequence, Tuple

from .command import CommandRunner

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".macemu.backup"

# Silent boot: no menu, no text, no recovery entries, keep the framebuffer mode.
GRUB_SETTINGS: Tuple[Tuple[str, str], ...] = (
    ("GRUB_TIMEOUT", "0"),
    ("GRUB_TIMEOUT_STYLE", "hidden"),
    ("GRUB_CMDLINE_LINUX_DEFAULT", '"quiet splash vt.global_cursor_default=0 loglevel=0"'),
    ("GRUB_GFXMODE", "1024x768"),
    ("GRUB_GFXPAYLOAD_LINUX", "keep"),
    ("GRUB_DISABLE_RECOVERY", '"true"'),
)


def upsert_setting(lines: Sequence[str], key: str, value: str) -> List[str]:
    """Set ``key=value`` in a shell-style config, leaving exactly one active line.

    The first active ``key=`` line is replaced; without one, the first
    commented ``#key=`` placeholder is. Every other active or commented
    ``key=`` line is dropped. With neither, the setting is appended.
    """

    wanted = f"{key}={value}"
    active = re.compile(rf"^\s*{re.escape(key)}=")
    commented = re.compile(rf"^\s*#\s*{re.escape(key)}=")
    target = active if any(active.match(line) for line in lines) else commented

    out: List[str] = []
    replaced = False
    for line in lines:
        if active.match(line) or commented.match(line):
            if not replaced and target.match(line):
                out.append(wanted)
                replaced = True
            continue
        out.append(line)

    if not replaced:
        out.append(wanted)
    return out


def apply_settings(text: str, settings: Sequence[Tuple[str, str]]) -> str:
    lines = text.splitlines()
    for key, value in settings:
        lines = upsert_setting(lines, key, value)
    return "\n".join(lines) + "\n"


def backup_once(path: Path, *, dry_run: bool = False) -> bool:
    """Copy the pristine file aside unless a backup already exists."""

    backup = path.with_name(path.name + BACKUP_SUFFIX)
    if backup.exists():
        return False
    if dry_run:
        logger.info("Would back up %s -> %s", str(path), str(backup))
        return True
    shutil.copy2(path, backup)
    logger.info("Backed up %s -> %s", str(path), str(backup))
    return True


def update_grub(runner: CommandRunner) -> None:
    runner.run(["update-grub"])
    logger.info("GRUB configuration regenerated")
