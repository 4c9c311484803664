from __future__ import annotations

import logging

from ..lib.files import chown
from ..pipeline import ProvisionContext, StepResult, converged, satisfied

logger = logging.getLogger(__name__)


class VirtualDiskStep:
    step_id = "40_virtual_disk"
    description = "Checking virtual disk"
    critical = True

    def run(self, ctx: ProvisionContext) -> StepResult:
        cfg = ctx.config
        disk = cfg.disk_image_path
        # Any existing image is the operator's disk: never resized or recreated.
        if disk.exists():
            logger.info("Virtual disk already exists (preserved)")
            return satisfied()

        logger.info("Creating %s virtual disk...", cfg.disk_size)
        ctx.runner.run(["qemu-img", "create", "-f", "qcow2", str(disk), cfg.disk_size])
        chown(ctx.runner, cfg.owner, disk)
        return converged()
