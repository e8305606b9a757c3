import logging
import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional

trace_context: ContextVar[Optional['TraceSpan']] = ContextVar(
    'trace_context', default=None
)

logger = logging.getLogger(__name__)


@dataclass
class TraceSpan:
    '''A timed unit of work with metadata and an optional parent.'''

    name: str
    start_time: float = field(default_factory=time.perf_counter)
    end_time: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    parent: Optional['TraceSpan'] = None
    error: Optional[str] = None

    @property
    def duration_ms(self) -> Optional[float]:
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time) * 1000

    def finish(self) -> None:
        self.end_time = time.perf_counter()
        metadata_str = ', '.join(f'{k}={v}' for k, v in self.metadata.items())
        parent = f' (parent: {self.parent.name})' if self.parent else ''
        status = f' failed: {self.error}' if self.error else ''
        logger.debug(
            f'{self.name}: {self.duration_ms:.2f}ms{parent} [{metadata_str}]{status}'
        )


@contextmanager
def trace_span(
    name: str, metadata: Optional[Dict[str, Any]] = None
) -> Iterator[TraceSpan]:
    '''Time a block and log it at DEBUG when it exits.

    Example:
        with trace_span('achievements.evaluate', {'user_id': user_id}):
            metrics = collector.collect(user_id)
    '''
    parent = trace_context.get()
    span = TraceSpan(name=name, metadata=dict(metadata or {}), parent=parent)
    token = trace_context.set(span)
    try:
        yield span
    except Exception as e:
        span.error = type(e).__name__
        raise
    finally:
        span.finish()
        trace_context.reset(token)


def add_span_metadata(key: str, value: Any) -> None:
    '''Add metadata to the current span, if any.'''
    current = trace_context.get()
    if current:
        current.metadata[key] = value
