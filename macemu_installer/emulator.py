from __future__ import annotations

import logging
from typing import List

from . import runtime_config
from .config import InstallerConfig
from .runtime_config import BOOT_CDROM, RuntimeSettings

logger = logging.getLogger(__name__)

QEMU_BINARY = "qemu-system-ppc"


def build_emulator_argv(cfg: InstallerConfig, settings: RuntimeSettings) -> List[str]:
    """QEMU command line for the mac99 guest.

    The monitor socket is the control channel used by the web interface
    (screenshots, key injection). VNC on localhost mirrors the display for
    screenshot capture.
    """

    machine = "mac99,via=pmu"
    argv = [QEMU_BINARY]

    if settings.sound_enabled:
        argv += ["-audiodev", "alsa,id=snd0"]
        machine += ",audiodev=snd0"

    argv += [
        "-M", machine,
        "-m", str(settings.ram_mb),
        "-boot", settings.boot_device,
        "-g", f"{settings.screen_width}x{settings.screen_height}x32",
        "-prom-env", "auto-boot?=true",
        "-prom-env", "vga-ndrv?=true",
        "-drive", f"file={cfg.disk_image_path},format=qcow2,media=disk",
    ]

    if cfg.iso_path.exists():
        argv += ["-drive", f"file={cfg.iso_path},format=raw,media=cdrom"]
    elif settings.boot_device == BOOT_CDROM:
        logger.warning("Boot device is cdrom but %s is missing", str(cfg.iso_path))

    argv += [
        "-full-screen",
        "-vnc", f"127.0.0.1:{settings.vnc_display}",
        "-monitor", f"unix:{cfg.control_socket},server,nowait",
    ]
    return argv


def current_emulator_argv(cfg: InstallerConfig) -> List[str]:
    """Re-read the runtime configuration so edits apply on the next launch."""

    return build_emulator_argv(cfg, runtime_config.load(cfg.runtime_config_path))
