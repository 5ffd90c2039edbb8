"""Partitioning of validated records into fixed-size batches."""
from __future__ import annotations

from typing import List, Sequence

from ..models import Batch, ContactRecord

DEFAULT_BATCH_SIZE = 500


def batch_count(total: int, batch_size: int) -> int:
    return -(-total // batch_size) if total else 0


def make_batches(records: Sequence[ContactRecord], batch_size: int = DEFAULT_BATCH_SIZE) -> List[Batch]:
    """Slice ``records`` into ``ceil(N / batch_size)`` batches, preserving order."""

    if batch_size <= 0:
        raise ValueError(f"batch_size must be a positive integer, got {batch_size}")

    return [
        Batch(index=index, records=tuple(records[start : start + batch_size]))
        for index, start in enumerate(range(0, len(records), batch_size))
    ]


__all__ = ["DEFAULT_BATCH_SIZE", "batch_count", "make_batches"]
