"""Unit tests for page clamping and the page envelope."""

import pytest

from servicelog.domain.entities import Page, clamp_page


@pytest.mark.parametrize(
    ("page", "limit", "expected"),
    [
        (None, None, (1, 20)),
        (0, 10, (1, 10)),
        (-3, 10, (1, 10)),
        (2, 0, (2, 1)),
        (2, -5, (2, 1)),
        (3, 500, (3, 100)),
    ],
)
def test_clamp_page(page, limit, expected):
    assert clamp_page(page, limit, default_limit=20, max_limit=100) == expected


def test_default_limit_is_also_capped():
    assert clamp_page(1, None, default_limit=50, max_limit=10) == (1, 10)


def test_total_pages():
    assert Page(items=[], total=0, page=1, limit=20).total_pages == 0
    assert Page(items=[], total=41, page=1, limit=20).total_pages == 3
