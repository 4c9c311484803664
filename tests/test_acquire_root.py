from pathlib import Path

from conftest import make_ctx
from macemu_installer.pipeline import CONVERGED
from macemu_installer.steps import AcquireRootStep


def _fake_clone(argv):
    root = Path(argv[-1])
    (root / ".git").mkdir(parents=True)
    (root / "scripts").mkdir()
    (root / "scripts" / "start.sh").write_text("#!/bin/sh\n")
    (root / "config").mkdir()
    return 0


def test_fresh_host_is_cloned(cfg, runner):
    runner.on(["git", "clone"], _fake_clone)

    assert AcquireRootStep().run(make_ctx(cfg, runner)).outcome == CONVERGED

    assert runner.calls == [["git", "clone", "--branch", "main", cfg.repo_url, cfg.root]]
    assert (cfg.root_path / ".git").is_dir()


def test_untracked_root_is_replaced_preserving_user_data(cfg, runner, snapshot):
    root = cfg.root_path
    (root / "config").mkdir(parents=True)
    (root / "config" / "qemu.conf").write_text("RAM_MB=1024\n")
    (root / "disk").mkdir()
    (root / "disk" / "macos9.qcow2").write_bytes(b"\x00disk")
    (root / "web").mkdir()
    (root / "web" / "app.py").write_text("old")
    runner.on(["git", "clone"], _fake_clone)

    AcquireRootStep().run(make_ctx(cfg, runner))

    after = snapshot(root)
    assert after["config/qemu.conf"] == b"RAM_MB=1024\n"
    assert after["disk/macos9.qcow2"] == b"\x00disk"
    assert "scripts/start.sh" in after
    assert "web/app.py" not in after
    assert list(Path(cfg.staging_dir).iterdir()) == []


def test_tracked_root_is_reset_and_user_data_untouched(cfg, runner, snapshot):
    root = cfg.root_path
    (root / ".git").mkdir(parents=True)
    (root / "config").mkdir()
    (root / "config" / "qemu.conf").write_text("SOUND_ENABLED=1\n")
    (root / "screenshots").mkdir()
    (root / "screenshots" / "shot.png").write_bytes(b"\x89PNG")
    before = snapshot(root)

    AcquireRootStep().run(make_ctx(cfg, runner, mode="update"))

    assert runner.calls == [
        ["git", "-C", cfg.root, "fetch", "origin", "main"],
        ["git", "-C", cfg.root, "reset", "--hard", "origin/main"],
    ]
    assert snapshot(root) == before
    assert not Path(cfg.staging_dir).exists()
