from __future__ import annotations

import logging
from pathlib import Path

from ..lib.bootloader import GRUB_SETTINGS, apply_settings, backup_once, update_grub
from ..lib.files import write_file
from ..pipeline import ProvisionContext, StepResult, converged, satisfied

logger = logging.getLogger(__name__)


class BootloaderStep:
    step_id = "65_bootloader"
    description = "Configuring GRUB for silent boot"
    critical = True

    def run(self, ctx: ProvisionContext) -> StepResult:
        grub = Path(ctx.config.grub_file)
        if not grub.exists():
            # Hosts booted by something other than GRUB still get a working appliance.
            return satisfied(f"GRUB configuration file not found at {grub}")

        backup_once(grub, dry_run=ctx.dry_run)

        text = grub.read_text(encoding="utf-8")
        changed = write_file(grub, apply_settings(text, GRUB_SETTINGS), dry_run=ctx.dry_run)

        update_grub(ctx.runner)
        return converged() if changed else satisfied()
