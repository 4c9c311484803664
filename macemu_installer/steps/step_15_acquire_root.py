from __future__ import annotations

import logging

from ..config import USER_DATA_DIRS
from ..lib.backup import UserDataBackup
from ..lib.repo import clone, is_tracked, reset_to_upstream
from ..pipeline import ProvisionContext, StepResult, converged

logger = logging.getLogger(__name__)


class AcquireRootStep:
    step_id = "15_acquire_root"
    description = "Setting up repository from GitHub"
    critical = True

    def run(self, ctx: ProvisionContext) -> StepResult:
        cfg = ctx.config
        root = cfg.root_path

        if is_tracked(root):
            logger.info("Updating existing repository...")
            reset_to_upstream(ctx.runner, branch=cfg.branch, root=root)
            return converged()

        def acquire() -> None:
            clone(ctx.runner, url=cfg.repo_url, branch=cfg.branch, root=root)

        if root.exists():
            logger.info("Backing up existing files before clone...")
            backup = UserDataBackup(
                root,
                USER_DATA_DIRS,
                staging_dir=cfg.staging_dir,
                dry_run=ctx.dry_run,
            )
            carried = backup.replace_root(acquire)
            logger.info("User data restored: %s", ", ".join(carried) or "nothing to restore")
        else:
            acquire()
        return converged()
