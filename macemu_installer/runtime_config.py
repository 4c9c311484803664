"""Runtime configuration for the emulator (``<root>/config/qemu.conf``).

Plain ``KEY=value`` lines, also read and written by the web interface.
The installer only ever writes the default file when none exists; existing
files are never merged with newly added keys. Missing keys fall back to the
defaults when the file is read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

logger = logging.getLogger(__name__)

BOOT_HARD_DISK = "c"
BOOT_CDROM = "d"

DEFAULT_TEMPLATE = """\
# Mac OS 9 QEMU Configuration
# Edit these values and restart the emulator

# Memory in MB (128-1024 recommended)
RAM_MB={ram_mb}

# Boot device: d=cdrom, c=hard disk
# Use 'd' for initial install, then 'c' after installation
BOOT_DEVICE={boot_device}

# Display resolution
SCREEN_WIDTH={screen_width}
SCREEN_HEIGHT={screen_height}

# VNC display number (for screenshots)
VNC_DISPLAY={vnc_display}

# Enable sound (0=disabled, 1=enabled)
SOUND_ENABLED={sound_enabled}
"""


@dataclass(frozen=True)
class RuntimeSettings:
    ram_mb: int = 512
    boot_device: str = BOOT_CDROM
    screen_width: int = 1024
    screen_height: int = 768
    vnc_display: int = 0
    sound_enabled: bool = False


def render(settings: RuntimeSettings) -> str:
    return DEFAULT_TEMPLATE.format(
        ram_mb=settings.ram_mb,
        boot_device=settings.boot_device,
        screen_width=settings.screen_width,
        screen_height=settings.screen_height,
        vnc_display=settings.vnc_display,
        sound_enabled=1 if settings.sound_enabled else 0,
    )


def parse_pairs(text: str) -> Dict[str, str]:
    pairs: Dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        pairs[key.strip()] = value.strip().strip('"').strip("'")
    return pairs


def _int(pairs: Dict[str, str], key: str, default: int) -> int:
    if key not in pairs:
        return default
    try:
        return int(pairs[key])
    except ValueError:
        logger.warning("Ignoring invalid %s=%r (using %s)", key, pairs[key], default)
        return default


def parse(text: str) -> RuntimeSettings:
    d = RuntimeSettings()
    pairs = parse_pairs(text)

    boot = pairs.get("BOOT_DEVICE", d.boot_device).lower()
    if boot not in {BOOT_HARD_DISK, BOOT_CDROM}:
        logger.warning("Ignoring invalid BOOT_DEVICE=%r (using %s)", boot, d.boot_device)
        boot = d.boot_device

    return RuntimeSettings(
        ram_mb=_int(pairs, "RAM_MB", d.ram_mb),
        boot_device=boot,
        screen_width=_int(pairs, "SCREEN_WIDTH", d.screen_width),
        screen_height=_int(pairs, "SCREEN_HEIGHT", d.screen_height),
        vnc_display=_int(pairs, "VNC_DISPLAY", d.vnc_display),
        sound_enabled=_int(pairs, "SOUND_ENABLED", int(d.sound_enabled)) == 1,
    )


def load(path: Path | str) -> RuntimeSettings:
    p = Path(path)
    if not p.exists():
        logger.warning("Runtime configuration %s missing; using defaults", str(p))
        return RuntimeSettings()
    try:
        # Undecodable bytes only spoil their own value, which then falls back.
        text = p.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.warning("Cannot read runtime configuration %s (%s); using defaults", str(p), e)
        return RuntimeSettings()
    return parse(text)
