"""Unit tests for batched page delivery."""
import pytest

from workout_notion_sync.models import Block, BlockKind
from workout_notion_sync.services.chunked_append import (
    NOTION_MAX_BLOCKS_PER_REQUEST,
    chunk_blocks,
    deliver,
)


def make_blocks(count):
    return [Block(kind=BlockKind.PARAGRAPH, text=f"line {i}") for i in range(count)]


class Recorder:
    """Collects create/append calls in the order they happen."""

    def __init__(self, fail_on_append=None):
        self.calls = []
        self.fail_on_append = fail_on_append

    def create(self, blocks):
        self.calls.append(("create", list(blocks)))
        return "page-1"

    def append(self, handle, blocks):
        appended = sum(1 for name, *_ in self.calls if name == "append")
        if self.fail_on_append is not None and appended == self.fail_on_append:
            raise RuntimeError("Notion unavailable")
        self.calls.append(("append", handle, list(blocks)))


def test_limit_constant():
    assert NOTION_MAX_BLOCKS_PER_REQUEST == 100


@pytest.mark.parametrize("count,sizes", [
    (0, []),
    (1, [1]),
    (100, [100]),
    (101, [100, 1]),
    (250, [100, 100, 50]),
])
def test_chunk_sizes(count, sizes):
    assert [len(c) for c in chunk_blocks(make_blocks(count))] == sizes


def test_chunks_concatenate_to_input():
    blocks = make_blocks(230)
    flat = [b for chunk in chunk_blocks(blocks) for b in chunk]
    assert flat == blocks


def test_deliver_250_blocks():
    blocks = make_blocks(250)
    recorder = Recorder()

    handle = deliver(blocks, recorder.create, recorder.append)

    assert handle == "page-1"
    assert [c[0] for c in recorder.calls] == ["create", "append", "append"]
    assert len(recorder.calls[0][1]) == 100
    assert len(recorder.calls[1][2]) == 100
    assert len(recorder.calls[2][2]) == 50
    assert all(c[1] == "page-1" for c in recorder.calls[1:])

    delivered = recorder.calls[0][1] + recorder.calls[1][2] + recorder.calls[2][2]
    assert delivered == blocks


@pytest.mark.parametrize("count", [1, 99, 100])
def test_deliver_small_page_needs_no_append(count):
    recorder = Recorder()
    deliver(make_blocks(count), recorder.create, recorder.append)

    assert len(recorder.calls) == 1
    assert recorder.calls[0][0] == "create"


def test_deliver_empty_still_creates_page():
    recorder = Recorder()
    handle = deliver([], recorder.create, recorder.append)

    assert handle == "page-1"
    assert recorder.calls == [("create", [])]


def test_append_failure_propagates_and_stops():
    """Earlier batches stay delivered; later ones are never attempted."""
    recorder = Recorder(fail_on_append=1)

    with pytest.raises(RuntimeError, match="Notion unavailable"):
        deliver(make_blocks(350), recorder.create, recorder.append)

    assert [c[0] for c in recorder.calls] == ["create", "append"]


def test_create_failure_skips_appends():
    def create(_blocks):
        raise RuntimeError("boom")

    appended = []
    with pytest.raises(RuntimeError):
        deliver(make_blocks(150), create, lambda h, b: appended.append(b))

    assert appended == []
