"""Unit tests for keyset pagination."""

import base64
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import pytest

from keelcast.models.config import PaginationConfig
from keelcast.pagination import (
    clamp_page_size,
    decode_cursor,
    encode_cursor,
    epoch_ms,
    paginate,
)


@dataclass(frozen=True)
class Row:
    """Minimal episode row for pagination tests."""

    id: str
    published_at: datetime


BASE = datetime(2024, 1, 1, tzinfo=UTC)


@pytest.fixture
def rows() -> list[Row]:
    """Seven rows, three of them sharing one timestamp."""
    return [
        Row("ep_1", BASE),
        Row("ep_2", BASE + timedelta(days=1)),
        Row("ep_3", BASE + timedelta(days=2)),
        Row("ep_4", BASE + timedelta(days=2)),
        Row("ep_5", BASE + timedelta(days=2)),
        Row("ep_6", BASE + timedelta(days=3)),
        Row("ep_7", BASE + timedelta(days=4)),
    ]


class TestCursor:
    """Test cursor encoding and decoding."""

    def test_known_encoding(self) -> None:
        """Test cursor is base64 of compact JSON."""
        cursor = encode_cursor(BASE, "ep_1")

        assert cursor == "eyJwQXQiOjE3MDQwNjcyMDAwMDAsImlkIjoiZXBfMSJ9"
        assert base64.b64decode(cursor) == b'{"pAt":1704067200000,"id":"ep_1"}'

    def test_round_trip(self) -> None:
        """Test decode inverts encode at millisecond precision."""
        published_at = datetime(2024, 3, 5, 8, 9, 10, 123456, tzinfo=UTC)

        decoded = decode_cursor(encode_cursor(published_at, "ep_42"))

        assert decoded is not None
        assert decoded.id == "ep_42"
        assert decoded.published_at == published_at.replace(microsecond=123000)

    @pytest.mark.parametrize(
        "cursor",
        [
            None,
            "",
            "not base64!!",
            base64.b64encode(b"not json").decode(),
            base64.b64encode(b'{"id":"ep_1"}').decode(),
            base64.b64encode(b"[1, 2]").decode(),
        ],
    )
    def test_invalid_cursor(self, cursor: str | None) -> None:
        """Test undecodable cursors yield None."""
        assert decode_cursor(cursor) is None

    def test_epoch_ms_naive_is_utc(self) -> None:
        """Test naive datetimes are taken as UTC."""
        assert epoch_ms(datetime(2024, 1, 1)) == epoch_ms(BASE) == 1704067200000


class TestClampPageSize:
    """Test clamp_page_size function."""

    @pytest.mark.parametrize(
        ("first", "expected"),
        [(None, 20), (0, 20), (5, 5), (100, 100), (500, 100), (-3, 1)],
    )
    def test_clamping(self, first: int | None, expected: int) -> None:
        """Test defaults and bounds."""
        assert clamp_page_size(first) == expected


class TestPaginate:
    """Test paginate function."""

    def test_first_page_order(self, rows: list[Row]) -> None:
        """Test rows come newest first with id as tie-breaker."""
        page = paginate(rows, first=4)

        assert [row.id for row in page.episodes] == ["ep_7", "ep_6", "ep_5", "ep_4"]
        assert page.has_next_page is True
        assert page.next_cursor == encode_cursor(rows[3].published_at, "ep_4")

    def test_walk_all_pages(self, rows: list[Row]) -> None:
        """Test paging visits every row exactly once across equal timestamps."""
        seen: list[str] = []
        cursor = None

        while True:
            page = paginate(rows, first=2, after=cursor)
            seen.extend(row.id for row in page.episodes)
            if not page.has_next_page:
                break
            cursor = page.next_cursor

        assert seen == ["ep_7", "ep_6", "ep_5", "ep_4", "ep_3", "ep_2", "ep_1"]

    def test_cursor_row_excluded(self, rows: list[Row]) -> None:
        """Test the row at the cursor is strictly excluded."""
        cursor = encode_cursor(rows[3].published_at, "ep_4")

        page = paginate(rows, first=10, after=cursor)

        assert [row.id for row in page.episodes] == ["ep_3", "ep_2", "ep_1"]
        assert page.has_next_page is False
        assert page.next_cursor is None

    def test_invalid_cursor_returns_first_page(self, rows: list[Row]) -> None:
        """Test an undecodable cursor is ignored."""
        page = paginate(rows, first=2, after="garbage")

        assert [row.id for row in page.episodes] == ["ep_7", "ep_6"]

    def test_exact_fit_has_no_next_page(self, rows: list[Row]) -> None:
        """Test a page that consumes the last rows reports no next page."""
        page = paginate(rows, first=7)

        assert len(page.episodes) == 7
        assert page.has_next_page is False

    def test_empty_rows(self) -> None:
        """Test pagination over nothing."""
        page = paginate([], first=5)

        assert page.episodes == []
        assert page.has_next_page is False
        assert page.next_cursor is None

    def test_default_page_size(self) -> None:
        """Test missing page size uses the default."""
        many = [Row(f"ep_{i:03d}", BASE + timedelta(minutes=i)) for i in range(30)]

        page = paginate(many)

        assert len(page.episodes) == 20
        assert page.has_next_page is True

    def test_configured_page_sizes(self) -> None:
        """Test the configured default and maximum page sizes apply."""
        many = [Row(f"ep_{i:03d}", BASE + timedelta(minutes=i)) for i in range(30)]
        config = PaginationConfig(default_page_size=5, max_page_size=8)

        assert len(paginate(many, config=config).episodes) == 5
        assert len(paginate(many, first=50, config=config).episodes) == 8
