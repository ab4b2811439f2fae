"""clipstitch.common — small shared helpers.

Contains: color parsing, ${var} path resolution, ffmpeg number formatting,
and best-effort file removal.
"""

import logging
import re
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


# ── Color utilities ────────────────────────────────────────────────

def parse_hex_color(hex_str: str) -> tuple[int, int, int]:
    """Convert '#RRGGBB' or 'RRGGBB' string to (R, G, B) tuple."""
    hex_str = hex_str.lstrip("#")
    if len(hex_str) != 6 or not all(c in "0123456789abcdefABCDEF" for c in hex_str):
        raise ValueError(f"Invalid hex color: '#{hex_str}'")
    return (int(hex_str[0:2], 16), int(hex_str[2:4], 16), int(hex_str[4:6], 16))


def ffmpeg_color(hex_str: str) -> str:
    """Render a '#RRGGBB' color in ffmpeg's '0xRRGGBB' notation."""
    r, g, b = parse_hex_color(hex_str)
    return f"0x{r:02X}{g:02X}{b:02X}"


# ── Path utilities ─────────────────────────────────────────────────

def resolve_path_vars(text: str, paths: dict[str, str]) -> str:
    """Replace ${name} variables in a string using the paths dict."""
    def _replace(match):
        key = match.group(1)
        if key not in paths:
            raise ValueError(f"Unknown path variable: ${{{key}}}")
        return paths[key]
    return re.sub(r"\$\{(\w+)\}", _replace, text)


# ── Number formatting ──────────────────────────────────────────────

def fmt_seconds(value: float) -> str:
    """Format a time in seconds with millisecond precision for ffmpeg."""
    return f"{value:.3f}"


# ── Cleanup ────────────────────────────────────────────────────────

def remove_quietly(*paths: str | Path) -> None:
    """Best-effort removal of temp files and directories.

    Failures are logged and never raised, so a cleanup problem can't mask
    a successful render or replace the error that is already propagating.
    """
    for path in paths:
        p = Path(path)
        try:
            if p.is_dir():
                shutil.rmtree(p)
            else:
                p.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Failed to clean up %s: %s", p, exc)
