from .analyze_relevance import BatchRelevanceAnalyzer, RelevanceScorer
from .append_content import AppendOrchestrator
from .generate_response import AnswerSynthesizer
from .merge_content import ContentMerger
from .query_corpus import QueryCorpusUseCase, set_content_on_result

__all__ = [
    "RelevanceScorer",
    "BatchRelevanceAnalyzer",
    "ContentMerger",
    "AnswerSynthesizer",
    "AppendOrchestrator",
    "QueryCorpusUseCase",
    "set_content_on_result",
]
