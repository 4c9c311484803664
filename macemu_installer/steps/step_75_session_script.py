from __future__ import annotations

import logging
import shlex
import stat
from pathlib import Path
from typing import List, Optional

from ..lib.files import chown, write_file
from ..pipeline import ProvisionContext, StepResult, converged, satisfied

logger = logging.getLogger(__name__)

XINITRC = """\
#!/bin/bash
# Appliance session: supervised emulator, restarted on crash.
exec {command} >> {log} 2>&1
"""


def session_command(ctx: ProvisionContext) -> str:
    cfg = ctx.config
    argv = [cfg.python_executable, "-m", "macemu_installer.session"]
    if cfg.source_path:
        argv += ["--config", cfg.source_path]
    return " ".join(shlex.quote(a) for a in argv)


def closed_parent(executable: str) -> Optional[Path]:
    """First existing parent directory that other users cannot traverse.

    The session runs as the unprivileged appliance user, so an interpreter in
    e.g. a virtualenv under /root cannot start it.
    """

    for parent in reversed(Path(executable).parents):
        if not parent.is_dir():
            continue
        if not parent.stat().st_mode & stat.S_IXOTH:
            return parent
    return None


class SessionScriptStep:
    step_id = "75_session_script"
    description = "Configuring X session"
    critical = True

    def run(self, ctx: ProvisionContext) -> StepResult:
        cfg = ctx.config
        xinitrc = cfg.home_dir / ".xinitrc"
        contents = XINITRC.format(command=session_command(ctx), log=shlex.quote(cfg.session_log))
        warnings: List[str] = []

        blocked = closed_parent(cfg.python_executable)
        if blocked is not None:
            warnings.append(
                f"{cfg.python_executable} is inside {blocked}, which {cfg.user} cannot access; "
                "install macemu-installer for a system-wide interpreter"
            )

        changed = write_file(xinitrc, contents, mode=0o755, dry_run=ctx.dry_run)
        chown(ctx.runner, cfg.owner, xinitrc)
        return converged(*warnings) if changed else satisfied(*warnings)
