from __future__ import annotations

import logging
from pathlib import Path

from ..lib.files import chown, write_file
from ..pipeline import ProvisionContext, StepResult, converged, satisfied

logger = logging.getLogger(__name__)

AUTOLOGIN_UNIT = """\
[Service]
ExecStart=
ExecStart=-/sbin/agetty --autologin {user} --noclear %I $TERM
"""

BASH_PROFILE = """\
# Auto-start X on {tty}
if [ -z "$DISPLAY" ] && [ "$(tty)" = "/dev/{tty}" ]; then
    exec startx -- -nocursor 2>/dev/null
fi
"""


class LoginAutomationStep:
    step_id = "70_login_automation"
    description = "Configuring auto-login"
    critical = True

    def run(self, ctx: ProvisionContext) -> StepResult:
        cfg = ctx.config
        unit = Path(cfg.systemd_dir) / f"getty@{cfg.console_tty}.service.d" / "autologin.conf"
        profile = cfg.home_dir / ".bash_profile"

        # Rewritten every run; same template, same bytes.
        changed = write_file(unit, AUTOLOGIN_UNIT.format(user=cfg.user), dry_run=ctx.dry_run)
        changed = write_file(profile, BASH_PROFILE.format(tty=cfg.console_tty), dry_run=ctx.dry_run) or changed
        chown(ctx.runner, cfg.owner, profile)

        return converged() if changed else satisfied()
