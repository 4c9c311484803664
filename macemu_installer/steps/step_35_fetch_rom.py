from __future__ import annotations

import logging

from ..lib.files import chown
from ..lib.net import download
from ..lib.rom import extract_member, list_archive, select_rom
from ..pipeline import ProvisionContext, StepResult, converged, satisfied

logger = logging.getLogger(__name__)


class FetchRomStep:
    step_id = "35_fetch_rom"
    description = "Checking ROM files"
    critical = False

    def run(self, ctx: ProvisionContext) -> StepResult:
        cfg = ctx.config
        if cfg.rom_path.exists():
            logger.info("ROM already configured")
            return satisfied()

        if not cfg.rom_archive_path.exists():
            logger.info("Downloading ROM archive...")
            download(ctx.runner, cfg.rom_url, cfg.rom_archive_path)

        if ctx.dry_run:
            logger.info("Would select a ROM from %s", str(cfg.rom_archive_path))
            return converged()

        candidates = list_archive(cfg.rom_archive_path)
        chosen = select_rom(candidates)
        if chosen is None:
            # mac99 falls back to the built-in OpenBIOS.
            return satisfied(
                f"Could not auto-detect ROM among {len(candidates)} archive entries; "
                "the emulator will run without an explicit ROM file"
            )

        logger.info("Found potential ROM: %s (size: %d bytes)", chosen.name, chosen.size)
        extract_member(cfg.rom_archive_path, chosen.name, cfg.rom_path)
        chown(ctx.runner, cfg.owner, cfg.rom_dir, recursive=True)
        return converged()
