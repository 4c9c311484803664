from __future__ import annotations

import logging
from pathlib import Path

from .command import CommandRunner

logger = logging.getLogger(__name__)


def download(runner: CommandRunner, url: str, dest: Path | str) -> None:
    """Fetch ``url`` to ``dest``; a failed transfer leaves nothing at ``dest``."""

    d = Path(dest)
    part = d.with_name(d.name + ".part")
    d.parent.mkdir(parents=True, exist_ok=True)
    try:
        runner.run(["wget", "--progress=dot:giga", "-O", str(part), url])
    except Exception:
        part.unlink(missing_ok=True)
        raise
    if runner.dry_run:
        return
    part.replace(d)
    logger.info("Downloaded %s -> %s", url, str(d))


def primary_ip(runner: CommandRunner) -> str | None:
    """Best-effort first address from ``hostname -I``."""

    r = runner.run(["hostname", "-I"], check=False)
    fields = r.stdout.split()
    return fields[0] if r.ok and fields else None
