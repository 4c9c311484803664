from __future__ import annotations

import logging

from ..lib.pkg import apt_install, apt_update
from ..pipeline import ProvisionContext, StepResult, converged

logger = logging.getLogger(__name__)


class InstallPackagesStep:
    step_id = "10_install_packages"
    description = "Installing required packages"
    critical = True

    def run(self, ctx: ProvisionContext) -> StepResult:
        # apt decides what is missing; we never compute a diff ourselves.
        apt_update(ctx.runner)
        apt_install(ctx.runner, ctx.config.packages)
        return converged()
