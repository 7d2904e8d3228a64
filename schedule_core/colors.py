"""Presentation helpers for class colors."""
from __future__ import annotations

import re
import typing as t

from schedule_core.constants import DEFAULT_COLOR, SUBJECT_COLORS

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


def is_hex_color(value: str) -> bool:
    return bool(_HEX_COLOR.match(value.strip()))


def resolve_color(value: t.Optional[str], default: str = DEFAULT_COLOR) -> str:
    """Turn a stored color into a hex value for display.

    Colors are stored exactly as imported, so this accepts hex values,
    preset names in any case, and falls back to ``default`` for anything else.
    """
    if not value:
        return default
    text = value.strip()
    if is_hex_color(text):
        return text.upper()
    return SUBJECT_COLORS.get(text.lower(), default)
