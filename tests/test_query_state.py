"""
Unit tests for QueryState: page resets, endpoint mode selection and the result-count policy.
"""

import sys
from datetime import date
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from src.models import QueryMode, SortKey
from src.query_state import QueryState, capped_total_pages, parse_year, popular_total_pages, year_options


def test_defaults():
	state = QueryState()
	assert state.query == ""
	assert state.sort is SortKey.POPULARITY_DESC
	assert state.page == 1
	assert state.mode is QueryMode.POPULAR


def test_every_change_resets_page():
	state = QueryState(page=7)
	state.set_query("alien")
	assert state.page == 1
	for change in (lambda s: s.set_genre(28), lambda s: s.set_year("1999"), lambda s: s.set_sort("vote_average.desc")):
		state.page = 5
		change(state)
		assert state.page == 1


def test_mode_follows_query_text_and_filters():
	state = QueryState()
	state.set_genre("28")
	assert state.mode is QueryMode.DISCOVER
	state.set_query("  heat ")
	assert state.query == "heat"
	assert state.mode is QueryMode.SEARCH
	state.set_query("")
	assert state.mode is QueryMode.DISCOVER
	state.reset()
	assert state.mode is QueryMode.POPULAR
	state.set_sort(SortKey.RELEASE_DATE_DESC)
	assert state.mode is QueryMode.DISCOVER


def test_discover_params_only_include_active_filters():
	state = QueryState()
	assert state.discover_params() == {"sort_by": "popularity.desc", "page": 1}
	state.set_genre(18)
	state.set_year(2001)
	assert state.discover_params() == {
		"sort_by": "popularity.desc",
		"page": 1,
		"with_genres": 18,
		"primary_release_year": 2001,
	}


def test_result_count_is_capped():
	assert capped_total_pages(10000) == 25
	assert capped_total_pages(500) == 25
	assert capped_total_pages(45) == 3
	assert capped_total_pages(0) == 0
	assert popular_total_pages() == 25


@pytest.mark.parametrize("bad", ["99", "20001", "19x9", 123])
def test_year_must_have_four_digits(bad):
	with pytest.raises(ValueError):
		parse_year(bad)


def test_empty_year_clears_filter():
	assert parse_year("") is None
	assert parse_year(None) is None
	assert parse_year(" 1984 ") == 1984


def test_unknown_sort_key_rejected():
	with pytest.raises(ValueError):
		QueryState().set_sort("title.asc")


def test_go_to_clamps_to_known_pages():
	state = QueryState(total_pages=25)
	assert state.go_to(30) == 25
	assert state.go_to(0) == 1
	assert state.go_to(12) == 12


def test_year_options_run_from_current_year_to_1900():
	years = year_options(date(2024, 5, 1))
	assert years[0] == 2024
	assert years[-1] == 1900
	assert len(years) == 125
