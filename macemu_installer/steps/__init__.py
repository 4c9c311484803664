from .step_10_install_packages import InstallPackagesStep
from .step_15_acquire_root import AcquireRootStep
from .step_20_system_user import SystemUserStep
from .step_25_filesystem_layout import FilesystemLayoutStep
from .step_30_fetch_install_media import FetchInstallMediaStep
from .step_35_fetch_rom import FetchRomStep
from .step_40_virtual_disk import VirtualDiskStep
from .step_45_runtime_config import RuntimeConfigStep
from .step_50_script_permissions import ScriptPermissionsStep
from .step_60_boot_theme import BootThemeStep
from .step_65_bootloader import BootloaderStep
from .step_70_login_automation import LoginAutomationStep
from .step_75_session_script import SessionScriptStep
from .step_80_service_registration import ServiceRegistrationStep
from .step_90_version_record import VersionRecordStep

__all__ = [
    "InstallPackagesStep",
    "AcquireRootStep",
    "SystemUserStep",
    "FilesystemLayoutStep",
    "FetchInstallMediaStep",
    "FetchRomStep",
    "VirtualDiskStep",
    "RuntimeConfigStep",
    "ScriptPermissionsStep",
    "BootThemeStep",
    "BootloaderStep",
    "LoginAutomationStep",
    "SessionScriptStep",
    "ServiceRegistrationStep",
    "VersionRecordStep",
]
