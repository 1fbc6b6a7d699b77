from __future__ import annotations

import pytest

from vicmd.buffer import BufferDocument, Marker
from vicmd.ranges import (
    Range,
    RangeType,
    block_rows,
    contract,
    describe,
    expand,
    transform,
)

EXCLUSIVE = RangeType.EXCLUSIVE
INCLUSIVE = RangeType.INCLUSIVE
LINE = RangeType.LINE
BLOCK = RangeType.BLOCK


def make_document(text: str = "abc\ndef\nghi\n") -> BufferDocument:
    return BufferDocument.from_text(text)


def test_expand_exclusive_orders_positions() -> None:
    document = make_document()

    assert expand(document, 1, 2, EXCLUSIVE) == Range(1, 2, EXCLUSIVE)
    assert expand(document, 2, 1, EXCLUSIVE) == Range(1, 2, EXCLUSIVE)
    assert expand(document, 4, 4, EXCLUSIVE) == Range(4, 4, EXCLUSIVE)


def test_expand_exclusive_ending_at_line_start_from_line_start() -> None:
    document = make_document()

    assert expand(document, 0, 8, EXCLUSIVE) == Range(0, 8, LINE)


def test_expand_exclusive_ending_at_line_start_mid_line() -> None:
    document = make_document()

    assert expand(document, 1, 4, EXCLUSIVE) == Range(1, 3, INCLUSIVE)


def test_expand_inclusive_and_line() -> None:
    document = make_document()

    assert expand(document, 5, 2, INCLUSIVE) == Range(2, 6, INCLUSIVE)
    assert expand(document, 5, 9, LINE) == Range(4, 12, LINE)


def test_expand_block_keeps_corners() -> None:
    document = make_document()

    span = expand(document, 1, 9, BLOCK)

    assert span == Range(1, 10, BLOCK)
    assert block_rows(document, span) == [(1, 2), (5, 6), (9, 10)]


def test_expand_block_orders_corners() -> None:
    document = make_document()

    span = expand(document, 9, 1, BLOCK)

    assert span == Range(1, 10, BLOCK)
    assert block_rows(document, expand(document, 2, 1, BLOCK)) == [(1, 3)]


def test_expand_accepts_markers_and_names() -> None:
    document = make_document()

    assert expand(document, Marker(2), Marker(5), INCLUSIVE) == Range(2, 6, INCLUSIVE)
    assert expand(document, 2, 5, "inclusive") == Range(2, 6, INCLUSIVE)


@pytest.mark.parametrize("kind", [INCLUSIVE, BLOCK])
def test_contract_undoes_expand(kind: RangeType) -> None:
    document = make_document()

    span = expand(document, 2, 5, kind)

    assert contract(document, span.begin, span.end, kind) == Range(2, 5, kind)


@pytest.mark.parametrize(
    ("begin", "end", "expected"),
    [(0, 0, "0 characters"), (0, 1, "1 character"), (5, 0, "5 characters")],
)
def test_describe_exclusive(begin: int, end: int, expected: str) -> None:
    assert describe(make_document(), begin, end, EXCLUSIVE) == expected


def test_describe_inclusive_counts_both_ends() -> None:
    document = make_document()

    assert describe(document, 2, 2, INCLUSIVE) == "1 character"
    assert describe(document, 2, 4, INCLUSIVE) == "3 characters"


def test_describe_lines_and_blocks() -> None:
    document = make_document()

    assert describe(document, 1, 1, LINE) == "1 line"
    assert describe(document, 1, 5, LINE) == "2 lines"
    assert describe(document, 1, 10, BLOCK) == "3 rows and 2 columns"


def test_transform_passes_positions_through() -> None:
    document = make_document()

    assert transform(document, 3, 1, None, "expand") == Range(3, 1, None)
    assert transform(document, 3, 1, INCLUSIVE, None) == Range(3, 1, INCLUSIVE)
    assert transform(document, 1, 3, INCLUSIVE, "expand") == Range(1, 4, INCLUSIVE)
    assert transform(document, 1, 4, INCLUSIVE, "contract") == Range(1, 3, INCLUSIVE)


def test_transform_rejects_unknown_operation() -> None:
    with pytest.raises(ValueError):
        transform(make_document(), 0, 1, INCLUSIVE, "shrink")  # type: ignore[arg-type]
