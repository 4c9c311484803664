from __future__ import annotations

import dataclasses
import logging

from ..lib.files import chown, write_file
from ..pipeline import ProvisionContext, StepResult, converged, satisfied
from ..runtime_config import RuntimeSettings, render

logger = logging.getLogger(__name__)


class RuntimeConfigStep:
    step_id = "45_runtime_config"
    description = "Checking QEMU configuration"
    critical = True

    def run(self, ctx: ProvisionContext) -> StepResult:
        cfg = ctx.config
        path = cfg.runtime_config_path
        # Never merged: keys added in later versions are not written into old files.
        if path.exists():
            logger.info("QEMU configuration already exists (preserved)")
            return satisfied()

        settings = dataclasses.replace(RuntimeSettings(), ram_mb=cfg.default_ram_mb)
        write_file(path, render(settings), dry_run=ctx.dry_run)
        chown(ctx.runner, cfg.owner, path)
        return converged()
