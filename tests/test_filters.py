import pytest

from checkhub.hub import Filter, FuncFilter, MatchAll, NameFilter, as_filter


def test_as_filter_none_matches_everything():
    f = as_filter(None)
    assert isinstance(f, MatchAll)
    assert f.filter("anything")


def test_as_filter_wraps_callables():
    f = as_filter(lambda name: name.startswith("a"))
    assert isinstance(f, FuncFilter)
    assert f.filter("apple")
    assert not f.filter("banana")


def test_as_filter_passes_filters_through():
    f = NameFilter(include=["a*"])
    assert as_filter(f) is f
    assert isinstance(f, Filter)


def test_as_filter_rejects_other_values():
    with pytest.raises(TypeError):
        as_filter(42)


def test_name_filter_include_and_exclude():
    f = NameFilter(include=["item*", "hero"], exclude=["item_conf"])
    assert f.filter("item")
    assert f.filter("item_drop")
    assert f.filter("hero")
    assert not f.filter("item_conf")
    assert not f.filter("activity")


def test_name_filter_exclude_only():
    f = NameFilter(exclude=["*_test"])
    assert f.filter("item")
    assert not f.filter("item_test")
