import pytest

from app.togglehub.utils import MAX_DB_INT, get_pagination_params, parse_id


@pytest.mark.parametrize(
    "page,size,expected",
    [
        (None, None, (1, 10)),
        ("2", "25", (2, 25)),
        ("0", "5", (1, 5)),
        ("-3", "5", (1, 5)),
        ("abc", "xyz", (1, 10)),
        ("1", "0", (1, 10)),
        ("1", "-1", (1, 10)),
        ("1", "1000", (1, 100)),
        (" 3 ", " 7 ", (3, 7)),
        ("99999999999999999999", "10", (MAX_DB_INT // 10 + 1, 10)),
    ],
)
def test_pagination_defaults_and_clamping(page, size, expected):
    assert get_pagination_params(page, size) == expected


def test_pagination_respects_configured_bounds():
    assert get_pagination_params(None, None, default_page_size=20, max_page_size=50) == (1, 20)
    assert get_pagination_params("1", "80", default_page_size=20, max_page_size=50) == (1, 50)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("1", 1),
        ("42", 42),
        ("0", None),
        ("-1", None),
        ("abc", None),
        ("1.5", None),
        ("", None),
        (None, None),
        ("\u00b2", None),
        ("\u0663", None),
        (str(MAX_DB_INT), MAX_DB_INT),
        (str(MAX_DB_INT + 1), None),
        ("99999999999999999999", None),
    ],
)
def test_parse_id(raw, expected):
    assert parse_id(raw) == expected


def test_clamped_page_offset_fits_database_integer():
    for size in ("1", "7", "100"):
        page, page_size = get_pagination_params("9" * 40, size)
        assert (page - 1) * page_size <= MAX_DB_INT
