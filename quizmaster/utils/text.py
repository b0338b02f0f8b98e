import math
import re
from typing import Optional

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def clean_text(s: str) -> str:
    s = _CONTROL_CHARS_RE.sub("", s or "")
    return re.sub(r"\s+", " ", s).strip()


def ellipsize(s: str, max_len: int) -> str:
    s = (s or "").strip()
    if max_len <= 0:
        return ""
    if len(s) <= max_len:
        return s
    if max_len <= 1:
        return "…"
    return s[: max_len - 1].rstrip() + "…"


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def format_duration(seconds: Optional[int]) -> str:
    """42 -> '0:42', 125 -> '2:05', None -> '-'"""
    if seconds is None:
        return "-"
    seconds = max(0, int(seconds))
    m, s = divmod(seconds, 60)
    return f"{m}:{s:02d}"
