from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from ..lib.files import write_file
from ..pipeline import ProvisionContext, StepResult, converged, satisfied

logger = logging.getLogger(__name__)

XWRAPPER = "allowed_users=anybody\nneeds_root_rights=yes\n"


class SystemUserStep:
    step_id = "20_system_user"
    description = "Setting up appliance user"
    critical = True

    def run(self, ctx: ProvisionContext) -> StepResult:
        cfg = ctx.config
        changed = False
        warnings: List[str] = []

        if ctx.runner.run(["id", "-u", cfg.user], check=False).ok:
            logger.info("User %s already exists", cfg.user)
        else:
            ctx.runner.run(["useradd", "-m", "-s", "/bin/bash", cfg.user])
            logger.info("Created user %s", cfg.user)
            changed = True

        # Group grants are repeatable; a missing group must not stop the install.
        r = ctx.runner.run(["usermod", "-aG", ",".join(cfg.user_groups), cfg.user], check=False)
        if not r.ok:
            warnings.append(f"Could not add {cfg.user} to groups {','.join(cfg.user_groups)}")

        # Let a non-root console user start X.
        xwrapper = Path(cfg.xwrapper_config)
        current = xwrapper.read_text(encoding="utf-8") if xwrapper.exists() else ""
        if "allowed_users=anybody" not in current:
            changed = write_file(xwrapper, XWRAPPER, dry_run=ctx.dry_run) or changed

        return converged(*warnings) if changed else satisfied(*warnings)
