from __future__ import annotations

import logging
from typing import Sequence

from .command import CommandRunner

logger = logging.getLogger(__name__)

APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}


def apt_update(runner: CommandRunner) -> None:
    runner.run(["apt-get", "update"], env=APT_ENV)


def apt_install(
    runner: CommandRunner,
    packages: Sequence[str],
    *,
    with_recommends: bool = True,
) -> None:
    """Request the whole package list; apt itself skips what is installed."""

    if not packages:
        return
    argv = ["apt-get", "install", "-y"]
    if not with_recommends:
        argv.append("--no-install-recommends")
    runner.run([*argv, *packages], env=APT_ENV)
    logger.info("Requested %d packages", len(packages))
