from __future__ import annotations

import re
from typing import Iterable, Optional, Tuple

# Partial matches for known mobile user agents
MOBILE_TOKENS = (
    "android", "avantgo", "blackberry", "bolt", "boost", "cricket", "docomo",
    "fone", "hiptop", "mini", "mobi", "palm", "phone", "pie", "tablet",
    "up.browser", "up.link", "webos", "wos",
)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def is_mobile(user_agent: Optional[str]) -> bool:
    if not user_agent:
        return False
    ua = user_agent.lower()
    return any(token in ua for token in MOBILE_TOKENS)


def parse_viewport_hint(raw: Optional[str]) -> Optional[int]:
    """
    Coerce a client supplied viewport value to an integer.

    ``None`` stays ``None`` (no hint). Anything else yields its leading
    integer, so ``"1000px"`` is 1000 and garbage is 0, which never matches a
    breakpoint and falls through to the smallest one.
    """
    if raw is None:
        return None
    m = _LEADING_INT.match(str(raw))
    return int(m.group(1)) if m else 0


def select_breakpoint(
    ladder: Iterable[int],
    hint: Optional[int],
    is_mobile_device: bool,
) -> Tuple[int, int]:
    """Return ``(max_screen_width, desired_width)`` for *hint* on *ladder*."""
    widths = tuple(ladder)
    if hint is None:
        max_screen_width = min(widths) if is_mobile_device else max(widths)
    else:
        max_screen_width = int(hint)

    fitting = [w for w in widths if w <= max_screen_width]
    desired_width = max(fitting) if fitting else min(widths)
    return max_screen_width, desired_width


def quality_for_width(
    current_width: int,
    max_width: int,
    min_quality: int,
    max_quality: int = 100,
) -> int:
    """
    Compression quality for an image *current_width* pixels wide.

    Images at or above the widest breakpoint get ``min_quality``; narrower
    ones are interpolated towards ``max_quality`` so small images keep more
    detail. The interpolation runs downwards, from ``max_quality`` at width 0
    to ``min_quality`` at ``max_width``, so quality never rises with width.
    """
    if current_width >= max_width:
        return min_quality
    ratio   = max(current_width, 0) / max_width
    quality = max_quality - ratio * (max_quality - min_quality)
    return int(min(max(round(quality), min_quality), max_quality))
