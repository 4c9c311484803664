from __future__ import annotations

import logging
from datetime import datetime

from ..lib.files import chown, write_file
from ..pipeline import ProvisionContext, StepResult, converged

logger = logging.getLogger(__name__)


def render_version(version: str, mode: str, when: datetime) -> str:
    return (
        f"MACEMU_VERSION={version}\n"
        f"INSTALL_DATE={when.isoformat(timespec='seconds')}\n"
        f"INSTALL_MODE={mode}\n"
    )


class VersionRecordStep:
    step_id = "90_version_record"
    description = "Saving version information"
    critical = True

    def run(self, ctx: ProvisionContext) -> StepResult:
        cfg = ctx.config
        contents = render_version(cfg.version, ctx.mode, datetime.now().astimezone())
        write_file(cfg.version_file, contents, dry_run=ctx.dry_run)
        chown(ctx.runner, cfg.owner, cfg.version_file)
        return converged()
