"""
Unit tests for search-mode post-processing: year/genre filters, sorting and page slicing.
"""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from src.models import Movie, SortKey
from src.post_processor import EPOCH_DATE, filter_by_genre, filter_by_year, post_process, release_sort_date, sort_movies

from fakes import movie_payload


def movies(*payloads):
	return [Movie.from_api(p) for p in payloads]


def ids(items):
	return [m.id for m in items]


def test_year_filter_on_twenty_raw_results():
	raw = movies(*[movie_payload(i, release_date="2010-06-01") for i in range(1, 21)])
	for i in (4, 9, 17):
		raw[i - 1] = Movie.from_api(movie_payload(i, release_date="1999-03-02"))
	result = post_process(raw, page=1, year="1999")
	assert ids(result.movies) == [4, 9, 17]
	assert result.total_pages == 1


def test_year_filter_drops_undated_records():
	raw = movies(movie_payload(1, release_date=None), movie_payload(2, release_date="2001-01-01"))
	assert ids(filter_by_year(raw, 2001)) == [2]
	assert ids(filter_by_year(raw, None)) == [1, 2]


def test_genre_filter_drops_records_without_genre_list():
	raw = movies(
		movie_payload(1, genre_ids=[28, 12]),
		movie_payload(2),
		movie_payload(3, genre_ids=[18]),
	)
	assert ids(filter_by_genre(raw, 28)) == [1]
	assert ids(filter_by_genre(raw, None)) == [1, 2, 3]


def test_rating_sort_is_stable_for_ties():
	raw = movies(
		movie_payload(1, vote_average=6.5),
		movie_payload(2, vote_average=8.0),
		movie_payload(3, vote_average=6.5),
		movie_payload(4, vote_average=8.0),
	)
	assert ids(sort_movies(raw, SortKey.VOTE_AVERAGE_DESC)) == [2, 4, 1, 3]


def test_release_sort_treats_missing_and_bad_dates_as_1970():
	raw = movies(
		movie_payload(1, release_date="1965-01-01"),
		movie_payload(2, release_date=None),
		movie_payload(3, release_date="2020-05-05"),
		movie_payload(4, release_date="someday"),
		movie_payload(5, release_date="1980-01-01"),
	)
	assert release_sort_date(raw[1]) == EPOCH_DATE
	# undated records land between 1980 and 1965, keeping their relative order
	assert ids(sort_movies(raw, SortKey.RELEASE_DATE_DESC)) == [3, 5, 2, 4, 1]


def test_popularity_keeps_server_order():
	raw = movies(movie_payload(3, vote_average=1), movie_payload(1, vote_average=9))
	assert ids(sort_movies(raw, SortKey.POPULARITY_DESC)) == [3, 1]


def test_filters_apply_before_sort_and_slice():
	raw = movies(
		movie_payload(1, release_date="2005-01-01", genre_ids=[35], vote_average=5),
		movie_payload(2, release_date="2005-02-01", genre_ids=[18], vote_average=9),
		movie_payload(3, release_date="2005-03-01", genre_ids=[35], vote_average=8),
		movie_payload(4, release_date="2006-03-01", genre_ids=[35], vote_average=10),
	)
	result = post_process(raw, page=1, year=2005, genre_id=35, sort=SortKey.VOTE_AVERAGE_DESC)
	assert ids(result.movies) == [3, 1]


def test_later_pages_slice_the_single_fetched_page():
	raw = movies(*[movie_payload(i) for i in range(1, 21)])
	result = post_process(raw, page=2)
	assert result.movies == []
	assert result.total_pages == 1


def test_no_matches_means_zero_pages():
	raw = movies(movie_payload(1, release_date="2001-01-01"))
	result = post_process(raw, page=1, year=1990)
	assert result.movies == []
	assert result.total_pages == 0


def test_non_string_release_dates_are_treated_as_unknown():
	raw = movies(
		movie_payload(1, release_date="2001-01-01"),
		movie_payload(2, release_date=2020),
		movie_payload(3, release_date={"year": 2020}),
	)
	assert raw[1].release_date is None
	assert ids(sort_movies(raw, SortKey.RELEASE_DATE_DESC)) == [1, 2, 3]
	assert ids(filter_by_year(raw, 2020)) == []
