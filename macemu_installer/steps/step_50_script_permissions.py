from __future__ import annotations

import logging
import stat

from ..lib.files import chown
from ..pipeline import ProvisionContext, StepResult, converged

logger = logging.getLogger(__name__)

EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


class ScriptPermissionsStep:
    step_id = "50_script_permissions"
    description = "Setting up emulator scripts"
    critical = False

    def run(self, ctx: ProvisionContext) -> StepResult:
        cfg = ctx.config
        targets = [
            *sorted(cfg.scripts_dir.glob("*.sh")),
            *sorted(cfg.scripts_dir.glob("*.py")),
            cfg.web_dir / "app.py",
        ]
        for p in targets:
            if not p.is_file():
                continue
            if ctx.dry_run:
                logger.info("Would chmod +x %s", str(p))
                continue
            p.chmod(p.stat().st_mode | EXEC_BITS)

        chown(ctx.runner, cfg.owner, cfg.scripts_dir, cfg.web_dir, recursive=True)
        return converged()
