from __future__ import annotations

import logging
from pathlib import Path

from .command import CommandRunner

logger = logging.getLogger(__name__)


def is_tracked(root: Path | str) -> bool:
    return (Path(root) / ".git").is_dir()


def clone(runner: CommandRunner, *, url: str, branch: str, root: Path | str) -> None:
    runner.run(["git", "clone", "--branch", branch, url, str(root)])
    logger.info("Cloned %s (%s) into %s", url, branch, str(root))


def reset_to_upstream(runner: CommandRunner, *, branch: str, root: Path | str) -> None:
    """Force the checkout to match origin; tracked local edits are discarded.

    Untracked files (the operator's data) are left alone.
    """

    runner.run(["git", "-C", str(root), "fetch", "origin", branch])
    runner.run(["git", "-C", str(root), "reset", "--hard", f"origin/{branch}"])
    logger.info("Checkout at %s reset to origin/%s", str(root), branch)
