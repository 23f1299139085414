"""
pipeline — kolaboratorzy backendu generowania i scalanie strumienia zdarzeń.

Publiczne API:
  PipelineConfig.from_env()                         -> PipelineConfig
  PipelineClient(base_url, timeout)                 — upload / open_stream / fetch_results
  iter_sse_data(lines)                              -> Iterator[str]
  classify_step(event, final_step)                  -> frozenset[StepKind]
  StreamMergeController(target, results, ...)       — routowanie zdarzeń do sesji
"""

from .config import PipelineConfig, DEFAULT_API_URL, DEFAULT_PREVIEW_CHARS
from .client import PipelineClient, PipelineError, PipelineStream, iter_sse_data
from .stream_merge import (
    FINAL_KEYWORD,
    SUGGESTION_KEYWORDS,
    TREE_KEYWORDS,
    MergeTarget,
    ResultsSource,
    StreamHandle,
    StreamMergeController,
    classify_step,
)

__all__ = [
    "PipelineConfig",
    "DEFAULT_API_URL",
    "DEFAULT_PREVIEW_CHARS",
    "PipelineClient",
    "PipelineError",
    "PipelineStream",
    "iter_sse_data",
    "FINAL_KEYWORD",
    "SUGGESTION_KEYWORDS",
    "TREE_KEYWORDS",
    "MergeTarget",
    "ResultsSource",
    "StreamHandle",
    "StreamMergeController",
    "classify_step",
]
