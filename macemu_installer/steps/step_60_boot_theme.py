from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from ..lib.bootloader import upsert_setting
from ..lib.files import write_file
from ..pipeline import ProvisionContext, StepResult, converged

logger = logging.getLogger(__name__)

THEME_SCRIPT = """\
# Mac Grey Plymouth Theme

# Set the grey background color
Window.SetBackgroundTopColor(0.74, 0.74, 0.74);
Window.SetBackgroundBottomColor(0.74, 0.74, 0.74);

message_sprite = Sprite();
message_sprite.SetPosition(Window.GetWidth() / 2, Window.GetHeight() / 2, 1);

fun message_callback(text) {
    # Suppress all messages for clean boot
}

Plymouth.SetMessageFunction(message_callback);

fun display_normal_callback() {
}

fun display_password_callback(prompt, bullets) {
}

Plymouth.SetDisplayNormalFunction(display_normal_callback);
Plymouth.SetDisplayPasswordFunction(display_password_callback);
"""

THEME_DESCRIPTOR = """\
[Plymouth Theme]
Name=Mac Grey
Description=Clean grey boot screen like classic Mac OS
ModuleName=script

[script]
ImageDir={theme_dir}
ScriptFile={theme_dir}/{name}.script
"""


def _select_in_plymouthd_conf(path: Path, theme: str, *, dry_run: bool) -> None:
    lines = path.read_text(encoding="utf-8").splitlines() if path.exists() else []
    if not any(line.strip() == "[Daemon]" for line in lines):
        lines = ["[Daemon]", *lines]
    write_file(path, "\n".join(upsert_setting(lines, "Theme", theme)) + "\n", dry_run=dry_run)


class BootThemeStep:
    step_id = "60_boot_theme"
    description = "Creating Plymouth boot theme"
    critical = False

    def run(self, ctx: ProvisionContext) -> StepResult:
        cfg = ctx.config
        name = cfg.theme_name
        theme_dir = Path(cfg.plymouth_themes_dir) / name
        warnings: List[str] = []

        write_file(theme_dir / f"{name}.script", THEME_SCRIPT, dry_run=ctx.dry_run)
        write_file(
            theme_dir / f"{name}.plymouth",
            THEME_DESCRIPTOR.format(theme_dir=str(theme_dir), name=name),
            dry_run=ctx.dry_run,
        )

        if ctx.runner.which("plymouth-set-default-theme"):
            r = ctx.runner.run(["plymouth-set-default-theme", name], check=False)
            if not r.ok:
                warnings.append(f"Could not select Plymouth theme {name}")
        else:
            _select_in_plymouthd_conf(Path(cfg.plymouthd_conf), name, dry_run=ctx.dry_run)

        # The theme only shows once it is inside the initramfs.
        r = ctx.runner.run(["update-initramfs", "-u"], check=False)
        if not r.ok:
            warnings.append("Could not update initramfs")

        return converged(*warnings)
