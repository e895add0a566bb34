import logging
import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional

# Span currently open on this context, if any
trace_context: ContextVar[Optional['TraceSpan']] = ContextVar(
    'trace_context', default=None
)

logger = logging.getLogger(__name__)


@dataclass
class TraceSpan:
    '''A named, timed block of work with free-form metadata.'''

    name: str
    start_time: float = field(default_factory=time.perf_counter)
    end_time: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    parent: Optional['TraceSpan'] = None

    @property
    def duration_ms(self) -> Optional[float]:
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time) * 1000

    def finish(self) -> None:
        self.end_time = time.perf_counter()
        metadata_str = ', '.join(f'{k}={v}' for k, v in self.metadata.items())
        parent_str = f' (parent: {self.parent.name})' if self.parent else ''
        logger.debug(
            f'{self.name}: {self.duration_ms:.2f}ms{parent_str} [{metadata_str}]'
        )


@contextmanager
def trace_span(
    name: str, metadata: Optional[Dict[str, Any]] = None
) -> Iterator[TraceSpan]:
    '''Time the wrapped block and log it on exit.

    Example:
        with trace_span('exp.recompute', {'records': len(skill.records)}):
            recompute(skill)
    '''
    span = TraceSpan(name=name, metadata=metadata or {}, parent=trace_context.get())
    token = trace_context.set(span)
    try:
        yield span
    finally:
        span.finish()
        trace_context.reset(token)


def add_span_metadata(key: str, value: Any) -> None:
    '''Attach metadata to the innermost open span.'''
    current = trace_context.get()
    if current:
        current.metadata[key] = value
