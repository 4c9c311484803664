from __future__ import annotations

import logging

from ..lib.files import chown
from ..lib.net import download
from ..pipeline import ProvisionContext, StepResult, converged, satisfied

logger = logging.getLogger(__name__)


class FetchInstallMediaStep:
    step_id = "30_fetch_install_media"
    description = "Checking Mac OS 9 ISO"
    critical = False

    def run(self, ctx: ProvisionContext) -> StepResult:
        cfg = ctx.config
        # Presence is enough; existing media is never re-validated.
        if cfg.iso_path.exists():
            logger.info("ISO already exists at %s", str(cfg.iso_path))
            return satisfied()

        logger.info("Downloading Mac OS 9.2.1 ISO from %s", cfg.iso_url)
        download(ctx.runner, cfg.iso_url, cfg.iso_path)
        chown(ctx.runner, cfg.owner, cfg.iso_path)
        return converged()
