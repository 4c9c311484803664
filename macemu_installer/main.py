from __future__ import annotations

import argparse
import logging
import os
from typing import Any, Callable, Dict, List, Optional

from .config import InstallerConfig, load_config
from .errors import InstallerError
from .lib.command import CommandRunner
from .lib.net import primary_ip
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import ProvisionContext, Step, run_pipeline
from .probe import MODE_UPDATE, probe_host
from .state_store import load_state, new_run, save_state
from .steps import (
    AcquireRootStep,
    BootloaderStep,
    BootThemeStep,
    FetchInstallMediaStep,
    FetchRomStep,
    FilesystemLayoutStep,
    InstallPackagesStep,
    LoginAutomationStep,
    RuntimeConfigStep,
    ScriptPermissionsStep,
    ServiceRegistrationStep,
    SessionScriptStep,
    SystemUserStep,
    VersionRecordStep,
    VirtualDiskStep,
)

logger = logging.getLogger(__name__)


DEFAULT_STATE_PATH = "/var/lib/macemu-installer/state.json"

BANNER = "=" * 40


def build_steps() -> List[Step]:
    return [
        # Core installation
        InstallPackagesStep(),
        AcquireRootStep(),
        SystemUserStep(),
        FilesystemLayoutStep(),
        FetchInstallMediaStep(),
        FetchRomStep(),
        VirtualDiskStep(),
        RuntimeConfigStep(),
        ScriptPermissionsStep(),
        # System configuration
        BootThemeStep(),
        BootloaderStep(),
        LoginAutomationStep(),
        SessionScriptStep(),
        ServiceRegistrationStep(),
        VersionRecordStep(),
    ]


def _summary(cfg: InstallerConfig, mode: str, runner: CommandRunner) -> None:
    logger.info(BANNER)
    logger.info("  Installation Complete!")
    logger.info(BANNER)
    if mode == MODE_UPDATE:
        logger.info("The emulator has been updated to version %s", cfg.version)
        logger.info("Your configuration, disk images, and screenshots were preserved.")
        logger.info("The web interface has been restarted with the latest changes.")
        return

    ip = primary_ip(runner) or "<your-ip>"
    logger.info("The Mac OS 9 emulator has been installed successfully!")
    logger.info("Next steps:")
    logger.info("  1. Reboot the system to boot into the emulator")
    logger.info("  2. Access the web interface at http://%s", ip)
    logger.info("  3. Install Mac OS 9 from the CD-ROM")
    logger.info("  4. After installation, change boot device to Hard Disk in the web config")
    logger.info("To test the emulator manually (without reboot): su - %s; startx", cfg.user)


def run(
    *,
    config: Optional[InstallerConfig] = None,
    state_path: str = DEFAULT_STATE_PATH,
    log_path: str = DEFAULT_LOG_PATH,
    dry_run: bool = False,
    runner: Optional[CommandRunner] = None,
    steps: Optional[List[Step]] = None,
    geteuid: Callable[[], int] = os.geteuid,
) -> Dict[str, Any]:
    """Provision the host, persisting a report of what happened."""

    cfg = config or InstallerConfig()
    runner = runner or CommandRunner(dry_run=dry_run)

    actual_log_path = configure_logging(log_path=log_path)

    state = new_run(load_state(state_path), version=cfg.version)
    state["execution"]["paths"] = {"log_path_requested": log_path, "log_path_actual": actual_log_path}

    logger.info(BANNER)
    logger.info("  Mac OS 9 Emulator Installer v%s", cfg.version)
    logger.info(BANNER)

    try:
        # Pre-flight: nothing on the host is touched before these pass.
        host = probe_host(cfg, geteuid=geteuid)
        state["execution"]["mode"] = host.mode
        state["execution"]["installation"] = host.installation.value

        ctx = ProvisionContext(
            config=cfg,
            runner=runner,
            installation=host.installation,
            mode=host.mode,
            dry_run=dry_run,
        )
        result = run_pipeline(ctx=ctx, state=state, steps=steps if steps is not None else build_steps())
        state = result.state
        _summary(cfg, host.mode, runner)
        return state
    except Exception as e:
        if isinstance(e, InstallerError):
            logger.error("Installer failed: %s", e)
        else:
            logger.exception("Installer failed")
        state.setdefault("execution", {}).setdefault("errors", []).append(
            {
                "step": (state.get("execution") or {}).get("current_step"),
                "error": str(e),
            }
        )
        raise
    finally:
        try:
            save_state(state_path, state)
        except OSError as e:
            logger.warning("Could not save run report to %s: %s", state_path, e)


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="macemu-installer")
    p.add_argument("--config", default=None, help="YAML file overriding installer defaults")
    p.add_argument("--state", default=DEFAULT_STATE_PATH, help="Path to run report (json|yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to installer log")
    p.add_argument("--dry-run", action="store_true", help="Log commands and writes without executing them")

    args = p.parse_args(argv)

    cfg = load_config(args.config) if args.config else InstallerConfig()
    try:
        run(
            config=cfg,
            state_path=args.state,
            log_path=args.log,
            dry_run=bool(args.dry_run),
        )
    except InstallerError:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
