from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Callable, List, Optional, Sequence

logger = logging.getLogger(__name__)


def merge_tree(src: Path | str, dst: Path | str, *, dry_run: bool = False) -> None:
    """Copy ``src`` into ``dst`` file by file.

    Files already in ``dst`` that have no counterpart in ``src`` are kept.
    """

    s = Path(src)
    d = Path(dst)
    if not s.exists():
        raise FileNotFoundError(str(src))

    if dry_run:
        logger.info("Would merge tree %s -> %s", str(s), str(d))
        return

    d.mkdir(parents=True, exist_ok=True)
    for item in sorted(s.rglob("*")):
        rel = item.relative_to(s)
        out = d / rel
        if item.is_dir():
            out.mkdir(parents=True, exist_ok=True)
        else:
            out.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(item, out)


class UserDataBackup:
    """Carries operator data across a destructive replacement of the root.

    The staging directory is private to this process. It is removed only after
    a successful restore; if acquiring the new root or restoring into it fails,
    it holds the only copy of the operator's data and is left in place.
    """

    def __init__(
        self,
        root: Path | str,
        categories: Sequence[str],
        *,
        staging_dir: Path | str = "/tmp",
        dry_run: bool = False,
    ) -> None:
        self.root = Path(root)
        self.categories = list(categories)
        self.staging_parent = Path(staging_dir)
        self.dry_run = dry_run
        self.staging: Optional[Path] = None
        self.staged: List[str] = []

    def stage(self) -> List[str]:
        self.staging_parent.mkdir(parents=True, exist_ok=True)
        self.staging = Path(
            tempfile.mkdtemp(prefix=f"macemu_backup_{os.getpid()}_", dir=str(self.staging_parent))
        )
        self.staged = []
        for name in self.categories:
            src = self.root / name
            if not src.is_dir():
                continue
            shutil.copytree(src, self.staging / name, symlinks=True)
            self.staged.append(name)
        logger.info("Staged user data %s in %s", self.staged, str(self.staging))
        return self.staged

    def restore(self) -> None:
        if self.staging is None:
            raise RuntimeError("restore() called before stage()")
        for name in self.staged:
            merge_tree(self.staging / name, self.root / name)
        logger.info("Restored user data %s", self.staged)

    def cleanup(self) -> None:
        if self.staging is not None:
            shutil.rmtree(self.staging, ignore_errors=True)
            self.staging = None

    def replace_root(self, acquire: Callable[[], None]) -> List[str]:
        """Stage user data, remove the root, call ``acquire`` and restore.

        Returns the categories that were carried over.
        """

        if self.dry_run:
            logger.info("Would back up %s, replace %s and restore", self.categories, str(self.root))
            acquire()
            return []

        try:
            staged = self.stage()
        except Exception:
            # The root is still intact here.
            self.cleanup()
            raise

        try:
            shutil.rmtree(self.root)
            acquire()
            self.restore()
        except Exception:
            logger.error("Replacing %s failed; user data kept in %s", str(self.root), str(self.staging))
            raise

        self.cleanup()
        return staged
