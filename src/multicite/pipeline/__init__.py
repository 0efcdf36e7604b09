# ABOUTME: Pipeline package: interception of host functions and the enrichment pipeline built on it.
# ABOUTME: Exports EnrichmentPipeline, the two hooks, and the Interceptor state machine.

from multicite.pipeline.enrichment import EnrichmentPipeline
from multicite.pipeline.hooks import ConversionHook, EngineCreationHook, run_callbacks
from multicite.pipeline.interceptor import (
    DEFAULT_MARKER,
    Interceptor,
    InterceptorState,
    resolve_owner,
)

__all__ = [
    "DEFAULT_MARKER",
    "ConversionHook",
    "EngineCreationHook",
    "EnrichmentPipeline",
    "Interceptor",
    "InterceptorState",
    "resolve_owner",
    "run_callbacks",
]
