from __future__ import annotations

import logging

_log = logging.getLogger(__name__)


def log_relevance_event(
    query: str,
    corpus_id: str,
    *,
    candidates: int,
    kept: int,
    failed: int,
    elapsed_ms: int,
    cached: bool,
) -> None:
    """Log the outcome of one relevance analysis.

    Parameters
    ----------
    query : str
        The analyzed query; only its first 50 characters are logged.
    corpus_id : str
        Corpus the candidates came from.
    candidates : int
        Number of documents scored (0 on a cache hit).
    kept : int
        Results left after threshold filtering and truncation.
    failed : int
        Candidates that fell back to a zero score.
    elapsed_ms : int
        Wall time of the analysis in milliseconds.
    cached : bool
        True when the result was served from the result cache.
    """
    _log.info(
        "relevance_event: corpus=%s query=%r candidates=%d kept=%d failed=%d elapsed_ms=%d cached=%s",
        corpus_id,
        (query or "")[:50],
        int(candidates),
        int(kept),
        int(failed),
        int(elapsed_ms),
        cached,
    )
