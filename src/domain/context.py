from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from src.domain.relevance import RelevanceResult

# A document is only truncated into the context when more than this many
# characters of budget remain; at exactly this value it is dropped.
MIN_TRUNCATION_CHARS = 100
ELLIPSIS = "…"
EMPTY_CONTENT_PLACEHOLDER = "(no content)"


def budget_context(results: Iterable[RelevanceResult], max_length: int) -> list[RelevanceResult]:
    """Greedily pack document content into ``max_length`` characters.

    Results are re-sorted best first (the input is not modified). Whole documents
    are taken while they fit; the first one that does not fit is truncated when
    more than MIN_TRUNCATION_CHARS remain, otherwise dropped, and packing stops.
    """
    ordered = sorted(results, key=lambda r: r.score, reverse=True)
    packed: list[RelevanceResult] = []
    total = 0
    for r in ordered:
        length = r.document.content_length
        if total + length <= max_length:
            packed.append(r)
            total += length
            continue

        remaining = max_length - total
        if remaining > MIN_TRUNCATION_CHARS:
            cut = r.content[: remaining - len(ELLIPSIS)] + ELLIPSIS
            packed.append(replace(r, document=r.document.with_content(cut), truncated=True))
        break
    return packed


def packed_length(results: Iterable[RelevanceResult]) -> int:
    return sum(r.document.content_length for r in results)


def assemble_context(results: Iterable[RelevanceResult]) -> str:
    """Render numbered reference blocks for a generation prompt.

    Format per block:
    [i] Title\nContent...
    """
    out: list[str] = []
    for i, r in enumerate(results, 1):
        body = r.content.strip() or EMPTY_CONTENT_PLACEHOLDER
        out.append(f"[{i}] {r.document.title}\n{body}")
    return "\n\n---\n\n".join(out)
