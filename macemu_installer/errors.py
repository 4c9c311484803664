from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .lib.command import CmdResult


class InstallerError(RuntimeError):
    pass


class UnsupportedPlatform(InstallerError):
    pass


class InsufficientPrivilege(InstallerError):
    pass


class ProvisionError(InstallerError):
    def __init__(self, step_id: str, message: str) -> None:
        super().__init__(f"{step_id}: {message}")
        self.step_id = step_id


class CommandError(InstallerError):
    def __init__(self, result: "CmdResult", message: str) -> None:
        super().__init__(message)
        self.result = result
