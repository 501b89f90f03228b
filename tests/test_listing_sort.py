import pytest

from application.utils.sorting import parse_sort, sort_summaries
from domain.storage import FileSummary


def _summary(key, file_name=None, file_type=None):
    return FileSummary(bucket_name="b1", key=key, file_name=file_name, file_type=file_type)


@pytest.fixture
def summaries():
    return [
        _summary("f/b", "b.json", "json"),
        _summary("f/none"),
        _summary("f/a", "a.txt", "txt"),
        _summary("f/c", "c.json", "json"),
    ]


def _names(items):
    return [s.file_name for s in items]


def test_ascending_by_file_name_puts_missing_last(summaries):
    result = sort_summaries(summaries, parse_sort("fileName,asc"))
    assert _names(result) == ["a.txt", "b.json", "c.json", None]


def test_descending_by_file_name_puts_missing_last(summaries):
    result = sort_summaries(summaries, parse_sort("fileName,desc"))
    assert _names(result) == ["c.json", "b.json", "a.txt", None]


@pytest.mark.parametrize("direction", ["DESC", "Desc", "descending", "asc", ""])
def test_only_exact_desc_reverses(summaries, direction):
    spec = parse_sort(f"fileName,{direction}")
    assert spec is not None and spec.descending is False
    assert _names(sort_summaries(summaries, spec)) == _names(sort_summaries(summaries, parse_sort("fileName,asc")))


def test_equal_values_keep_listing_order(summaries):
    result = sort_summaries(summaries, parse_sort("fileType,asc"))
    assert [s.key for s in result] == ["f/b", "f/c", "f/a", "f/none"]

    result = sort_summaries(summaries, parse_sort("fileType,desc"))
    assert [s.key for s in result] == ["f/a", "f/b", "f/c", "f/none"]


@pytest.mark.parametrize(
    "sort",
    [None, "", "   ", "nonexistentProp,asc", "filename,asc,extraBit", "fileName"],
)
def test_invalid_specs_leave_order_unchanged(summaries, sort):
    assert parse_sort(sort) is None
    assert sort_summaries(summaries, parse_sort(sort)) == summaries


def test_unknown_direction_sorts_ascending(summaries):
    assert _names(sort_summaries(summaries, parse_sort("fileName,sideways")))[:3] == ["a.txt", "b.json", "c.json"]


def test_snake_case_alias(summaries):
    spec = parse_sort(" file_name , desc ")
    assert spec is not None and spec.descending
    assert _names(sort_summaries(summaries, spec))[0] == "c.json"
