import math

import pytest

from contact_import.models import ContactRecord
from contact_import.orchestrator.batching import batch_count, make_batches


def _records(count):
    return [ContactRecord(email=f"fan{index}@example.com") for index in range(count)]


@pytest.mark.parametrize("total,batch_size", [(0, 500), (1, 500), (500, 500), (501, 500), (1200, 500), (7, 3)])
def test_batches_cover_records_in_order(total, batch_size):
    records = _records(total)

    batches = make_batches(records, batch_size)

    assert len(batches) == math.ceil(total / batch_size) == batch_count(total, batch_size)
    assert [batch.index for batch in batches] == list(range(len(batches)))
    assert all(len(batch) <= batch_size for batch in batches)
    assert [record for batch in batches for record in batch.records] == records


def test_default_batch_size_is_500():
    assert [len(batch) for batch in make_batches(_records(1200))] == [500, 500, 200]


@pytest.mark.parametrize("batch_size", [0, -1])
def test_batch_size_must_be_positive(batch_size):
    with pytest.raises(ValueError):
        make_batches(_records(3), batch_size)
