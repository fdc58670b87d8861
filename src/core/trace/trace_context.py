"""Trace Context - stage recorder for ingest, query and chat requests.

A TraceContext collects one entry per pipeline stage (chunking, embedding,
index_build, retrieval, generation, memory_read) together with its duration,
so a whole request can be logged as a single structured record.
"""

import time
import uuid
from contextlib import contextmanager
from typing import Any, Iterator


class TraceContext:
    """Trace context for one request through the retrieval core.

    Attributes:
        trace_id: Unique identifier for this trace
        operation: Name of the traced operation (e.g. "ingest", "answer")
    """

    def __init__(self, operation: str = "request") -> None:
        """Initialize trace context with a unique trace ID.

        Args:
            operation: Name of the traced operation.
        """
        self._trace_id: str = uuid.uuid4().hex[:16]
        self._operation = operation
        self._start_time = time.perf_counter()
        self._stages: dict[str, dict[str, Any]] = {}

    @property
    def trace_id(self) -> str:
        """Get the unique trace ID for this request."""
        return self._trace_id

    @property
    def operation(self) -> str:
        """Get the traced operation name."""
        return self._operation

    def record_stage(self, stage_name: str, data: dict[str, Any]) -> None:
        """Record data for a pipeline stage.

        Recording the same stage twice merges the new data into the old entry.

        Args:
            stage_name: Name of the pipeline stage (e.g., "chunking", "retrieval").
            data: Dictionary of stage data to record.
        """
        self._stages.setdefault(stage_name, {}).update(data)

    @contextmanager
    def stage(self, stage_name: str, **data: Any) -> Iterator[dict[str, Any]]:
        """Time a stage and record it, including failures.

        The yielded dict can be filled with stage results while the block runs.

        Example:
            >>> with trace.stage("retrieval", k=3) as info:
            ...     info["hits"] = len(index.search(vector, 3))
        """
        info: dict[str, Any] = dict(data)
        start = time.perf_counter()
        try:
            yield info
        except Exception as e:
            info["error"] = f"{type(e).__name__}: {e}"
            raise
        finally:
            info["duration_seconds"] = round(time.perf_counter() - start, 6)
            self.record_stage(stage_name, info)

    def get_stage(self, stage_name: str) -> dict[str, Any] | None:
        """Get recorded data for a stage.

        Args:
            stage_name: Name of the pipeline stage.

        Returns:
            Dictionary of stage data, or None if not recorded.
        """
        return self._stages.get(stage_name)

    def get_all_stages(self) -> dict[str, dict[str, Any]]:
        """Get all recorded stage data."""
        return dict(self._stages)

    def finish(self, status: str = "success") -> dict[str, Any]:
        """Finalize the trace and return a JSON-serializable dict.

        Args:
            status: Final status ("success" or "error").

        Returns:
            Dictionary representation of the trace.
        """
        return {
            "trace_id": self._trace_id,
            "operation": self._operation,
            "status": status,
            "total_duration_seconds": round(time.perf_counter() - self._start_time, 6),
            "stages": self.get_all_stages(),
        }

    def __repr__(self) -> str:
        return (
            f"TraceContext(trace_id={self._trace_id}, operation={self._operation}, "
            f"stages={list(self._stages.keys())})"
        )
