from __future__ import annotations

import dataclasses
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

DEFAULT_PACKAGES: Tuple[str, ...] = (
    "qemu-system-ppc",
    "qemu-utils",
    "git",
    "xorg",
    "openbox",
    "plymouth",
    "plymouth-themes",
    "python3-flask",
    "python3-pillow",
    "python3-yaml",
    "unzip",
    "wget",
    "curl",
    "xinit",
    "x11-xserver-utils",
    "xdotool",
    "netpbm",
    "imagemagick",
    "socat",
    "unclutter",
    "sudo",
)

# Directories under the root whose contents belong to the operator.
USER_DATA_DIRS: Tuple[str, ...] = ("config", "disk", "screenshots", "iso")

LAYOUT_DIRS: Tuple[str, ...] = (
    "iso",
    "rom",
    "disk",
    "config",
    "web/templates",
    "web/static",
    "scripts",
    "screenshots",
)


@dataclass(frozen=True)
class InstallerConfig:
    version: str = "1.0.0"
    root: str = "/opt/macemu"
    user: str = "macemu"
    user_groups: Tuple[str, ...] = ("video", "audio", "input", "tty")
    repo_url: str = "https://github.com/amcchord/macMaker.git"
    branch: str = "main"
    iso_url: str = "https://mcchord.net/static/macos_921_ppc.iso"
    rom_url: str = (
        "https://archive.org/download/mac_rom_archive_-_as_of_8-19-2011/"
        "mac_rom_archive_-_as_of_8-19-2011.zip"
    )
    disk_size: str = "10G"
    default_ram_mb: int = 512
    packages: Tuple[str, ...] = DEFAULT_PACKAGES

    # Host paths. Kept here so every mutation can be redirected (tests, chroots).
    os_release: str = "/etc/os-release"
    home_root: str = "/home"
    grub_file: str = "/etc/default/grub"
    systemd_dir: str = "/etc/systemd/system"
    plymouth_themes_dir: str = "/usr/share/plymouth/themes"
    plymouthd_conf: str = "/etc/plymouth/plymouthd.conf"
    xwrapper_config: str = "/etc/X11/Xwrapper.config"
    staging_dir: str = "/tmp"

    console_tty: str = "tty1"
    theme_name: str = "macgrey"
    service_name: str = "macemu-web.service"

    # Session supervisor.
    session_log: str = "/tmp/macemu-session.log"
    control_socket: str = "/tmp/macemu-monitor.sock"
    background_color: str = "#BDBDBD"
    window_manager: str = "openbox"
    restart_delay_s: float = 2.0
    wm_ready_timeout_s: float = 2.0
    python_executable: str = field(default_factory=lambda: sys.executable or "/usr/bin/python3")

    # Set by load_config() so generated session scripts can point back at it.
    source_path: Optional[str] = None

    @property
    def root_path(self) -> Path:
        return Path(self.root)

    @property
    def config_dir(self) -> Path:
        return self.root_path / "config"

    @property
    def runtime_config_path(self) -> Path:
        return self.config_dir / "qemu.conf"

    @property
    def disk_image_path(self) -> Path:
        return self.root_path / "disk" / "macos9.qcow2"

    @property
    def iso_path(self) -> Path:
        return self.root_path / "iso" / "macos_921_ppc.iso"

    @property
    def rom_dir(self) -> Path:
        return self.root_path / "rom"

    @property
    def rom_archive_path(self) -> Path:
        return self.rom_dir / "mac_roms.zip"

    @property
    def rom_path(self) -> Path:
        return self.rom_dir / "mac99.rom"

    @property
    def scripts_dir(self) -> Path:
        return self.root_path / "scripts"

    @property
    def web_dir(self) -> Path:
        return self.root_path / "web"

    @property
    def version_file(self) -> Path:
        return self.root_path / ".version"

    @property
    def home_dir(self) -> Path:
        return Path(self.home_root) / self.user

    @property
    def owner(self) -> str:
        return f"{self.user}:{self.user}"


def load_config(path: str) -> InstallerConfig:
    """Load overrides for InstallerConfig from a YAML mapping."""

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("installer config must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:
        raise RuntimeError("PyYAML is required to read the installer config") from e

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError("installer config must contain a mapping/object")

    known = {f.name for f in dataclasses.fields(InstallerConfig)} - {"source_path"}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown installer config keys: {', '.join(unknown)}")

    overrides: Dict[str, Any] = {}
    for key, value in raw.items():
        if isinstance(value, list):
            value = tuple(str(v) for v in value)
        overrides[key] = value

    return dataclasses.replace(InstallerConfig(), source_path=str(p.resolve()), **overrides)
