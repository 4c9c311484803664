from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

import pytest

from macemu_installer.config import InstallerConfig
from macemu_installer.errors import CommandError
from macemu_installer.lib.command import CmdResult, CommandRunner
from macemu_installer.pipeline import ProvisionContext
from macemu_installer.probe import InstallationState

HandlerResult = Union[None, int, Tuple[int, str]]


class FakeRunner(CommandRunner):
    """Records argv and answers from scripted handlers instead of executing."""

    def __init__(self, *, dry_run: bool = False, available: Sequence[str] = ()) -> None:
        super().__init__(dry_run=dry_run)
        self.calls: List[List[str]] = []
        self.envs: List[Optional[dict]] = []
        self.available = set(available)
        self._handlers: List[Tuple[Tuple[str, ...], Callable[[List[str]], HandlerResult]]] = []

    def on(self, prefix: Sequence[str], handler: Callable[[List[str]], HandlerResult]) -> None:
        self._handlers.append((tuple(prefix), handler))
        self._handlers.sort(key=lambda h: len(h[0]), reverse=True)

    def fail(self, *prefix: str, returncode: int = 1) -> None:
        self.on(prefix, lambda argv: returncode)

    def run(self, argv, *, check=True, env=None, cwd=None, input_text=None) -> CmdResult:
        argv = list(argv)
        self.calls.append(argv)
        self.envs.append(dict(env) if env else None)

        rc, out = 0, ""
        for prefix, handler in self._handlers:
            if tuple(argv[: len(prefix)]) == prefix:
                res = handler(argv)
                if isinstance(res, tuple):
                    rc, out = res
                elif isinstance(res, int):
                    rc = res
                break

        result = CmdResult(argv=argv, returncode=rc, stdout=out, stderr="")
        if check and rc != 0:
            raise CommandError(result, f"Command failed ({rc}): {' '.join(argv)}")
        return result

    def which(self, name: str) -> Optional[str]:
        return f"/usr/bin/{name}" if name in self.available else None

    def commands(self, name: str) -> List[List[str]]:
        return [c for c in self.calls if c and c[0] == name]


DEBIAN_OS_RELEASE = """\
PRETTY_NAME="Debian GNU/Linux 12 (bookworm)"
NAME="Debian GNU/Linux"
VERSION_ID="12"
ID=debian
"""


def make_config(tmp_path: Path) -> InstallerConfig:
    host = tmp_path / "host"
    return InstallerConfig(
        root=str(host / "opt" / "macemu"),
        os_release=str(host / "etc" / "os-release"),
        home_root=str(host / "home"),
        grub_file=str(host / "etc" / "default" / "grub"),
        systemd_dir=str(host / "etc" / "systemd" / "system"),
        plymouth_themes_dir=str(host / "usr" / "share" / "plymouth" / "themes"),
        plymouthd_conf=str(host / "etc" / "plymouth" / "plymouthd.conf"),
        xwrapper_config=str(host / "etc" / "X11" / "Xwrapper.config"),
        staging_dir=str(tmp_path / "staging"),
        session_log=str(tmp_path / "session.log"),
        control_socket=str(tmp_path / "monitor.sock"),
        python_executable="/usr/bin/python3",
    )


def make_ctx(
    cfg: InstallerConfig,
    runner: FakeRunner,
    *,
    mode: str = "fresh",
    installation: InstallationState = InstallationState.UNPROVISIONED,
) -> ProvisionContext:
    return ProvisionContext(config=cfg, runner=runner, installation=installation, mode=mode)


def write_download(argv: List[str]) -> int:
    # wget --progress=... -O <dest> <url>
    dest = Path(argv[argv.index("-O") + 1])
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_bytes(b"downloaded:" + argv[-1].encode())
    return 0


@pytest.fixture
def cfg(tmp_path: Path) -> InstallerConfig:
    return make_config(tmp_path)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def ctx(cfg: InstallerConfig, runner: FakeRunner) -> ProvisionContext:
    return make_ctx(cfg, runner)


@pytest.fixture
def snapshot() -> Callable[[Path], Dict[str, bytes]]:
    def _snap(root: Path) -> Dict[str, bytes]:
        return {
            str(p.relative_to(root)): p.read_bytes()
            for p in sorted(root.rglob("*"))
            if p.is_file()
        }

    return _snap
