from __future__ import annotations

import enum
import logging
import os
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict

from .config import InstallerConfig
from .errors import InsufficientPrivilege, UnsupportedPlatform

logger = logging.getLogger(__name__)

SUPPORTED_FAMILIES = frozenset({"debian"})

MODE_FRESH = "fresh"
MODE_UPDATE = "update"


class InstallationState(enum.Enum):
    UNPROVISIONED = "unprovisioned"
    PARTIALLY_PROVISIONED = "partially_provisioned"
    PROVISIONED = "provisioned"


@dataclass(frozen=True)
class HostReport:
    os_name: str
    installation: InstallationState

    @property
    def mode(self) -> str:
        return MODE_UPDATE if self.installation is InstallationState.PROVISIONED else MODE_FRESH


def read_os_release(path: str) -> Dict[str, str]:
    p = Path(path)
    if not p.exists():
        raise UnsupportedPlatform(f"Cannot detect operating system: {path} not found")

    data: Dict[str, str] = {}
    for raw in p.read_text(encoding="utf-8", errors="ignore").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        try:
            parts = shlex.split(value)
        except ValueError:
            parts = [value]
        data[key.strip()] = parts[0] if parts else ""
    return data


def is_supported(os_release: Dict[str, str]) -> bool:
    families = {os_release.get("ID", "").lower(), *os_release.get("ID_LIKE", "").lower().split()}
    return bool(families & SUPPORTED_FAMILIES)


def check_platform(path: str) -> str:
    """Return the OS pretty name; raise UnsupportedPlatform outside the Debian family."""

    info = read_os_release(path)
    name = info.get("PRETTY_NAME") or info.get("NAME") or info.get("ID") or "unknown"
    if not is_supported(info):
        raise UnsupportedPlatform(
            f"This installer requires Debian or a Debian-based distribution (detected: {name})"
        )
    return name


def check_privilege(geteuid: Callable[[], int] = os.geteuid) -> None:
    if geteuid() != 0:
        raise InsufficientPrivilege("Please run as root (use sudo)")


def classify(cfg: InstallerConfig) -> InstallationState:
    if not cfg.root_path.is_dir():
        return InstallationState.UNPROVISIONED
    if cfg.runtime_config_path.is_file():
        return InstallationState.PROVISIONED
    return InstallationState.PARTIALLY_PROVISIONED


def probe_host(cfg: InstallerConfig, *, geteuid: Callable[[], int] = os.geteuid) -> HostReport:
    check_privilege(geteuid)
    os_name = check_platform(cfg.os_release)
    logger.info("Detected OS: %s", os_name)

    state = classify(cfg)
    if state is InstallationState.PROVISIONED:
        logger.info("Existing installation detected - running in UPDATE mode")
        logger.info("User configuration, disk images, and screenshots will be preserved")
    elif state is InstallationState.PARTIALLY_PROVISIONED:
        logger.info("Partial installation detected - running in FRESH mode")
    else:
        logger.info("No existing installation - running in FRESH mode")

    return HostReport(os_name=os_name, installation=state)
