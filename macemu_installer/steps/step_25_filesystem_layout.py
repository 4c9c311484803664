from __future__ import annotations

import logging

from ..config import LAYOUT_DIRS
from ..lib.files import chown
from ..pipeline import ProvisionContext, StepResult, converged, satisfied

logger = logging.getLogger(__name__)


class FilesystemLayoutStep:
    step_id = "25_filesystem_layout"
    description = "Creating directory structure"
    critical = True

    def run(self, ctx: ProvisionContext) -> StepResult:
        cfg = ctx.config
        missing = [cfg.root_path / rel for rel in LAYOUT_DIRS if not (cfg.root_path / rel).is_dir()]
        for d in missing:
            if ctx.dry_run:
                logger.info("Would create %s", str(d))
            else:
                d.mkdir(parents=True, exist_ok=True)

        # Ownership is re-asserted every run.
        chown(ctx.runner, cfg.owner, cfg.root_path, recursive=True)

        if missing:
            logger.info("Created %d directories", len(missing))
            return converged()
        return satisfied()
