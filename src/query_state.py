"""
Query state and endpoint selection.
Holds what the user is currently asking the catalog for and decides which endpoint answers it.
"""

import math  # ceil for page counts
from dataclasses import dataclass, replace  # mutable state record
from datetime import date  # current year for the year filter
from typing import List, Optional, Union  # type hints

from loguru import logger  # console logging

from .config import HARD_PAGE_CAP, MIN_FILTER_YEAR, PAGE_SIZE, RESULT_CEILING  # paging policy
from .models import QueryMode, SortKey  # enumerations


def capped_total_pages(total_results: int) -> int:
	"""Page count for a server-filtered listing: results capped at 500, pages capped at 25."""
	capped = min(RESULT_CEILING, max(0, int(total_results or 0)))
	return min(math.ceil(capped / PAGE_SIZE), HARD_PAGE_CAP)


def popular_total_pages() -> int:
	"""The popular listing always paginates over the full ceiling."""
	return min(HARD_PAGE_CAP, math.ceil(RESULT_CEILING / PAGE_SIZE))


def parse_year(value: Union[int, str, None]) -> Optional[int]:
	"""Normalize a year filter value; empty means no filter, anything but 4 digits is rejected."""
	if value is None:
		return None
	text = str(value).strip()
	if not text:
		return None
	if len(text) != 4 or not text.isdigit():
		raise ValueError(f"Year filter must be a 4-digit year, got {value!r}")
	return int(text)


def parse_genre(value: Union[int, str, None]) -> Optional[int]:
	"""Normalize a genre filter value (catalog genre id); empty means no filter."""
	if value is None:
		return None
	if isinstance(value, int) and not isinstance(value, bool):
		return value
	text = str(value).strip()
	if not text:
		return None
	if not text.lstrip("-").isdigit():
		raise ValueError(f"Genre filter must be a numeric genre id, got {value!r}")
	return int(text)


def year_options(today: Optional[date] = None) -> List[int]:
	"""Years offered by the year filter: current year down to 1900."""
	current = (today or date.today()).year
	return list(range(current, MIN_FILTER_YEAR - 1, -1))


@dataclass
class QueryState:
	"""
	Session-scoped query state. Any change to the query text or a filter resets the page to 1.
	Search mode is implied by a non-empty query text.
	"""
	query: str = ""  # free text; empty means discover/popular
	genre_id: Optional[int] = None  # catalog genre id
	year: Optional[int] = None  # 4-digit release year
	sort: SortKey = SortKey.POPULARITY_DESC
	page: int = 1  # 1-based
	total_pages: int = 1  # derived after each fetch

	@property
	def has_filters(self) -> bool:
		"""True when the default popular listing cannot answer the query."""
		return bool(self.query) or self.genre_id is not None or self.year is not None or self.sort != SortKey.POPULARITY_DESC

	@property
	def mode(self) -> QueryMode:
		if self.query:
			return QueryMode.SEARCH
		if self.has_filters:
			return QueryMode.DISCOVER
		return QueryMode.POPULAR

	def snapshot(self) -> "QueryState":
		"""A detached copy, safe to hand to a worker thread."""
		return replace(self)

	def set_query(self, text: str) -> None:
		self.query = (text or "").strip()
		self.page = 1
		logger.debug(f"[Query] query='{self.query}' -> mode={self.mode.value}")

	def set_genre(self, genre_id: Union[int, str, None]) -> None:
		self.genre_id = parse_genre(genre_id)
		self.page = 1
		logger.debug(f"[Query] genre={self.genre_id}")

	def set_year(self, year: Union[int, str, None]) -> None:
		self.year = parse_year(year)
		self.page = 1
		logger.debug(f"[Query] year={self.year}")

	def set_sort(self, sort: Union[SortKey, str]) -> None:
		self.sort = SortKey(sort)  # ValueError for unknown keys
		self.page = 1
		logger.debug(f"[Query] sort={self.sort.value}")

	def reset(self) -> None:
		"""Back to startup defaults: popular listing, page 1."""
		self.query = ""
		self.genre_id = None
		self.year = None
		self.sort = SortKey.POPULARITY_DESC
		self.page = 1
		logger.debug("[Query] filters reset")

	def go_to(self, page: int) -> int:
		"""Move to a page, clamped to 1..total_pages (total_pages of 0 still allows page 1)."""
		page = int(page)
		upper = max(1, self.total_pages)
		self.page = max(1, min(page, upper))
		return self.page

	def discover_params(self) -> dict:
		"""Query parameters for the discover endpoint (server filters and sorts)."""
		params = {"sort_by": self.sort.value, "page": self.page}
		if self.genre_id is not None:
			params["with_genres"] = self.genre_id
		if self.year is not None:
			params["primary_release_year"] = self.year
		return params
