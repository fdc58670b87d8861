"""Core Trace - request observability for ingest, query and chat."""

from core.trace.trace_context import TraceContext

__all__ = ["TraceContext"]
