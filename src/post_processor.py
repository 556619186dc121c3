"""
Result post-processor for search mode.
The text-search endpoint ignores genre, year and sort, so those are applied here
to the single page of raw results that was fetched. Counts and page numbers are
therefore computed over that one page only, not over the true filtered total.
"""

import math  # ceil for page counts
from datetime import date  # release date parsing
from typing import List, Optional, Union  # type hints

from loguru import logger  # console logging

from .config import PAGE_SIZE  # movies per page
from .models import Movie, ResultPage, SortKey  # domain types

# Sort fallback for records whose release date is missing or unparseable
EPOCH_DATE = date(1970, 1, 1)


def release_year(movie: Movie) -> str:
	"""First four characters of the release date, or '' when there is none."""
	return (movie.release_date or "")[:4]


def release_sort_date(movie: Movie) -> date:
	"""Parsed release date; missing or unparseable dates fall back to 1970-01-01."""
	text = (movie.release_date or "").strip()
	try:
		return date.fromisoformat(text[:10])
	except ValueError:
		return EPOCH_DATE


def filter_by_year(movies: List[Movie], year: Optional[Union[int, str]]) -> List[Movie]:
	"""Keep movies released in the given year (string comparison); undated movies are dropped."""
	if year is None or str(year) == "":
		return list(movies)
	wanted = str(year)
	return [m for m in movies if m.release_date and release_year(m) == wanted]


def filter_by_genre(movies: List[Movie], genre_id: Optional[int]) -> List[Movie]:
	"""Keep movies tagged with the genre id; movies without a genre list are dropped."""
	if genre_id is None:
		return list(movies)
	return [m for m in movies if m.genre_ids is not None and int(genre_id) in m.genre_ids]


def sort_movies(movies: List[Movie], sort: Union[SortKey, str]) -> List[Movie]:
	"""Stable sort by release date or rating (descending); popularity keeps server order."""
	sort = SortKey(sort)
	if sort is SortKey.RELEASE_DATE_DESC:
		return sorted(movies, key=release_sort_date, reverse=True)
	if sort is SortKey.VOTE_AVERAGE_DESC:
		return sorted(movies, key=lambda m: m.vote_average, reverse=True)
	return list(movies)


def paginate(movies: List[Movie], page: int, page_size: int = PAGE_SIZE) -> ResultPage:
	"""Slice one page out of the list; total pages is ceil(len / page_size)."""
	if page < 1:
		raise ValueError(f"Page must be >= 1, got {page}")
	start = (page - 1) * page_size
	return ResultPage(
		movies=movies[start:start + page_size],
		page=page,
		total_pages=math.ceil(len(movies) / page_size),
	)


def post_process(
	movies: List[Movie],
	page: int,
	year: Optional[Union[int, str]] = None,
	genre_id: Optional[int] = None,
	sort: Union[SortKey, str] = SortKey.POPULARITY_DESC,
) -> ResultPage:
	"""Year filter, then genre filter, then sort, then pagination."""
	kept = filter_by_year(movies, year)
	after_year = len(kept)
	kept = filter_by_genre(kept, genre_id)
	kept = sort_movies(kept, sort)
	result = paginate(kept, page)
	logger.debug(
		f"[PostProcess] raw={len(movies)} after_year={after_year} after_genre={len(kept)} "
		f"sort={SortKey(sort).value} page={page} shown={len(result.movies)} total_pages={result.total_pages}"
	)
	return result
