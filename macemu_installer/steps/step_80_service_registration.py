from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from ..lib.files import write_file
from ..pipeline import ProvisionContext, StepResult, converged

logger = logging.getLogger(__name__)

WEB_SERVICE = """\
[Unit]
Description=Mac OS 9 Emulator Web Interface
After=network.target

[Service]
Type=simple
User=root
WorkingDirectory={web_dir}
ExecStart=/usr/bin/python3 {web_dir}/app.py
AmbientCapabilities=CAP_NET_BIND_SERVICE
Restart=always
RestartSec=5

[Install]
WantedBy=multi-user.target
"""


class ServiceRegistrationStep:
    step_id = "80_service_registration"
    description = "Creating systemd services"
    critical = False

    def run(self, ctx: ProvisionContext) -> StepResult:
        cfg = ctx.config
        unit = Path(cfg.systemd_dir) / cfg.service_name
        warnings: List[str] = []

        write_file(unit, WEB_SERVICE.format(web_dir=str(cfg.web_dir)), dry_run=ctx.dry_run)
        ctx.runner.run(["systemctl", "daemon-reload"])
        ctx.runner.run(["systemctl", "enable", cfg.service_name])

        # Restart so an update serves the new web code right away.
        r = ctx.runner.run(["systemctl", "restart", cfg.service_name], check=False)
        if not r.ok:
            warnings.append(f"Could not start {cfg.service_name}")
        return converged(*warnings)
