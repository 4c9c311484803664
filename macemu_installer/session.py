from __future__ import annotations

import argparse
import logging
import signal
from typing import Optional

from .config import InstallerConfig, load_config
from .emulator import current_emulator_argv
from .logging_utils import configure_logging
from .supervisor import BoundedWait, SessionSupervisor

logger = logging.getLogger(__name__)


def _exit_on_signal(signum, frame) -> None:
    # Unwinds through SessionSupervisor.run(), which tears the helpers down.
    raise SystemExit(128 + signum)


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="macemu-session")
    p.add_argument("--config", default=None, help="YAML file overriding installer defaults")
    p.add_argument("--log", default=None, help="Path to session log")
    args = p.parse_args(argv)

    cfg = load_config(args.config) if args.config else InstallerConfig()
    configure_logging(
        log_path=args.log or cfg.session_log,
        also_console=False,
        fallback_name="macemu-session.log",
    )

    for sig in (signal.SIGTERM, signal.SIGHUP):
        signal.signal(sig, _exit_on_signal)

    supervisor = SessionSupervisor(
        emulator_argv=lambda: current_emulator_argv(cfg),
        readiness=BoundedWait(cfg.wm_ready_timeout_s),
        restart_delay_s=cfg.restart_delay_s,
        background_color=cfg.background_color,
        window_manager=cfg.window_manager,
    )
    logger.info("=== Starting X session ===")
    session = supervisor.run()
    logger.info("=== X session ended (restarts=%d) ===", session.restart_count)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
