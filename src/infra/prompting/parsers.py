from __future__ import annotations

import re

_KEYWORD_SEP_RE = re.compile(r"[,\n、，]")
_WRAPPING_QUOTES = "\"'`“”「」"


def parse_keywords(text: str) -> list[str]:
    """Split a comma-separated model answer into unique, trimmed keywords."""
    out: list[str] = []
    for part in _KEYWORD_SEP_RE.split(text or ""):
        kw = part.strip().strip(_WRAPPING_QUOTES).strip()
        if kw and kw not in out:
            out.append(kw)
    return out


def clean_title(text: str) -> str:
    t = (text or "").strip()
    if t.startswith("#"):
        t = t.lstrip("#").strip()
    return t.strip(_WRAPPING_QUOTES).strip()
