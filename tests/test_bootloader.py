from pathlib import Path

from conftest import make_ctx
from macemu_installer.lib.bootloader import BACKUP_SUFFIX, GRUB_SETTINGS, upsert_setting
from macemu_installer.pipeline import CONVERGED, SATISFIED
from macemu_installer.steps import BootloaderStep

STOCK_GRUB = """\
# If you change this file, run 'update-grub' afterwards.
GRUB_DEFAULT=0
#GRUB_TIMEOUT=10
GRUB_TIMEOUT=5
GRUB_DISTRIBUTOR=`lsb_release -i -s 2> /dev/null || echo Debian`
GRUB_CMDLINE_LINUX_DEFAULT="quiet"
GRUB_CMDLINE_LINUX=""

# The resolution used on graphical terminal
#GRUB_GFXMODE=640x480

# Uncomment to disable generation of recovery mode menu entries
#GRUB_DISABLE_RECOVERY="true"
"""


def test_upsert_replaces_existing_line():
    assert upsert_setting(["A=1", "GRUB_TIMEOUT=5"], "GRUB_TIMEOUT", "0") == ["A=1", "GRUB_TIMEOUT=0"]


def test_upsert_does_not_confuse_prefixed_keys():
    lines = upsert_setting(["GRUB_TIMEOUT_STYLE=menu"], "GRUB_TIMEOUT", "0")
    assert lines == ["GRUB_TIMEOUT_STYLE=menu", "GRUB_TIMEOUT=0"]


def test_upsert_uncomments_placeholder_and_collapses_duplicates():
    assert upsert_setting(["#GRUB_GFXMODE=640x480"], "GRUB_GFXMODE", "1024x768") == ["GRUB_GFXMODE=1024x768"]
    assert upsert_setting(["K=1", "x", "K=2"], "K", "3") == ["K=3", "x"]


def test_upsert_drops_commented_placeholders_next_to_active_line():
    lines = ["#GRUB_TIMEOUT=10", "GRUB_TIMEOUT=5", "# GRUB_TIMEOUT=3"]
    assert upsert_setting(lines, "GRUB_TIMEOUT", "0") == ["GRUB_TIMEOUT=0"]


def _write_grub(cfg) -> Path:
    grub = Path(cfg.grub_file)
    grub.parent.mkdir(parents=True)
    grub.write_text(STOCK_GRUB, encoding="utf-8")
    return grub


def test_patch_twice_keeps_one_backup_and_one_line_per_key(cfg, runner):
    grub = _write_grub(cfg)
    step = BootloaderStep()
    ctx = make_ctx(cfg, runner)

    assert step.run(ctx).outcome == CONVERGED
    first = grub.read_text(encoding="utf-8")
    assert step.run(ctx).outcome == SATISFIED

    backups = sorted(grub.parent.glob("grub*" + BACKUP_SUFFIX))
    assert backups == [grub.with_name("grub" + BACKUP_SUFFIX)]
    assert backups[0].read_text(encoding="utf-8") == STOCK_GRUB

    text = grub.read_text(encoding="utf-8")
    assert text == first
    lines = text.splitlines()
    for key, value in GRUB_SETTINGS:
        assert text.count(f"{key}=") == 1
        assert f"{key}={value}" in lines
    assert "GRUB_DEFAULT=0" in lines

    assert runner.commands("update-grub") == [["update-grub"], ["update-grub"]]


def test_backup_keeps_the_true_original(cfg, runner):
    grub = _write_grub(cfg)
    BootloaderStep().run(make_ctx(cfg, runner))
    grub.write_text(grub.read_text(encoding="utf-8") + "GRUB_EXTRA=1\n", encoding="utf-8")
    BootloaderStep().run(make_ctx(cfg, runner))

    assert grub.with_name("grub" + BACKUP_SUFFIX).read_text(encoding="utf-8") == STOCK_GRUB


def test_missing_grub_file_is_a_warning(cfg, runner):
    result = BootloaderStep().run(make_ctx(cfg, runner))

    assert result.outcome == SATISFIED
    assert result.warnings and "not found" in result.warnings[0]
    assert runner.calls == []
