from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .command import CommandRunner

logger = logging.getLogger(__name__)


def write_file(
    path: Path | str,
    contents: str,
    *,
    mode: Optional[int] = None,
    dry_run: bool = False,
) -> bool:
    """Write ``contents`` to ``path``; return True if the file changed.

    Identical contents are left untouched so rewriting a template is a no-op.
    """

    p = Path(path)
    if p.is_file() and p.read_text(encoding="utf-8") == contents:
        if mode is not None and not dry_run:
            p.chmod(mode)
        return False

    if dry_run:
        logger.info("Would write %s", str(p))
        return True

    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(contents, encoding="utf-8")
    if mode is not None:
        p.chmod(mode)
    logger.info("Wrote %s", str(p))
    return True


def chown(runner: CommandRunner, owner: str, *paths: Path | str, recursive: bool = False) -> None:
    argv = ["chown"]
    if recursive:
        argv.append("-R")
    runner.run([*argv, owner, *[str(p) for p in paths]])
