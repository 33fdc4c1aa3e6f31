"""
Async Utilities

Bounded-concurrency helpers for I/O fan-out against the storage backend.

Work is dispatched in fixed-width batches: every task of a batch is joined
before the next batch starts, which caps the number of in-flight storage
calls at the batch width. Failures are collected per item so that a single
bad item never aborts the rest.

All utilities integrate with OpenTelemetry for observability.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import (
    Awaitable,
    Callable,
    Generic,
    List,
    Sequence,
    Tuple,
    TypeVar,
)

from opentelemetry import trace

T = TypeVar("T")
R = TypeVar("R")

tracer = trace.get_tracer(__name__)


@dataclass
class BatchOutcome(Generic[T, R]):
    """Results of a batched run, split into successes and failures."""

    succeeded: List[Tuple[T, R]] = field(default_factory=list)
    failed: List[Tuple[T, BaseException]] = field(default_factory=list)

    @property
    def results(self) -> List[R]:
        return [result for _, result in self.succeeded]

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)


def chunked(items: Sequence[T], size: int) -> List[Sequence[T]]:
    """Split a sequence into consecutive chunks of at most ``size`` items."""
    if size < 1:
        raise ValueError("Batch size must be at least 1")
    return [items[i:i + size] for i in range(0, len(items), size)]


async def gather_in_batches(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    batch_size: int = 5,
) -> BatchOutcome[T, R]:
    """
    Run ``worker`` over ``items`` with at most ``batch_size`` calls in flight.

    Each batch is awaited as a whole before the next one is scheduled.
    Exceptions raised by ``worker`` are recorded in ``BatchOutcome.failed``;
    cancellation of the caller propagates immediately.

    Usage:
        outcome = await gather_in_batches(keys, fetch_document, batch_size=5)
        for key, error in outcome.failed:
            logger.warning("Skipped", key=key, error=str(error))
    """
    outcome: BatchOutcome[T, R] = BatchOutcome()

    with tracer.start_as_current_span("batch.process") as span:
        batches = chunked(items, batch_size)
        span.set_attribute("batch.total_items", len(items))
        span.set_attribute("batch.batch_size", batch_size)
        span.set_attribute("batch.batch_count", len(batches))

        for batch_idx, batch in enumerate(batches):
            with tracer.start_as_current_span("batch.chunk") as batch_span:
                batch_span.set_attribute("batch.chunk_index", batch_idx)
                batch_span.set_attribute("batch.chunk_size", len(batch))

                results = await asyncio.gather(
                    *[worker(item) for item in batch],
                    return_exceptions=True,
                )

            for item, result in zip(batch, results):
                if isinstance(result, asyncio.CancelledError):
                    raise result
                if isinstance(result, BaseException):
                    outcome.failed.append((item, result))
                else:
                    outcome.succeeded.append((item, result))

        span.set_attribute("batch.results_count", len(outcome.succeeded))
        span.set_attribute("batch.exceptions_count", len(outcome.failed))

    return outcome
