"""
Pagination window calculator.
Turns (current page, total pages, window size) into an ordered list of render directives.
"""

import math  # ceil for the after-half of the window
from typing import List, Tuple  # type hints

from .config import DEFAULT_WINDOW_SIZE, NARROW_VIEWPORT_PX, NARROW_WINDOW_SIZE  # bar widths
from .models import PageDirective  # directive record


def window_size_for_width(width_px: int) -> int:
	"""Number of page links for a viewport width: 3 on narrow screens, 5 otherwise."""
	return NARROW_WINDOW_SIZE if width_px <= NARROW_VIEWPORT_PX else DEFAULT_WINDOW_SIZE


def should_display(total_pages: int) -> bool:
	"""The bar is hidden when there is nothing to page through."""
	return total_pages > 1


def window_bounds(current_page: int, total_pages: int, window_size: int = DEFAULT_WINDOW_SIZE) -> Tuple[int, int]:
	"""
	First and last page number of the visible window (inclusive).
	The window is centred on the current page and clamped to 1..total_pages.
	"""
	if window_size < 1:
		raise ValueError(f"Window size must be >= 1, got {window_size}")
	if total_pages <= window_size:
		return 1, total_pages

	before = window_size // 2
	after = math.ceil(window_size / 2) - 1
	if current_page <= before:
		return 1, window_size
	if current_page + after >= total_pages:
		return total_pages - window_size + 1, total_pages
	return current_page - before, current_page + after


def page_window(current_page: int, total_pages: int, window_size: int = DEFAULT_WINDOW_SIZE) -> List[PageDirective]:
	"""
	Directives for the pagination bar, in render order:
	prev, [1, ellipsis], window pages, [ellipsis, last], next.
	"""
	if current_page < 1:
		raise ValueError(f"Current page must be >= 1, got {current_page}")
	total_pages = max(0, int(total_pages))
	start, end = window_bounds(current_page, total_pages, window_size)

	items: List[PageDirective] = [
		PageDirective(kind="prev", number=current_page - 1, disabled=current_page == 1),
	]
	if start > 1:
		items.append(PageDirective(kind="page", number=1, is_current=current_page == 1))
		if start > 2:
			items.append(PageDirective(kind="ellipsis"))

	for number in range(start, end + 1):
		items.append(PageDirective(kind="page", number=number, is_current=number == current_page))

	if end < total_pages:
		if end < total_pages - 1:
			items.append(PageDirective(kind="ellipsis"))
		items.append(PageDirective(kind="page", number=total_pages, is_current=current_page == total_pages))

	items.append(PageDirective(kind="next", number=current_page + 1, disabled=current_page >= total_pages))
	return items


def page_numbers(directives: List[PageDirective]) -> List[int]:
	"""Just the page numbers of the window (handy for logging and tests)."""
	return [d.number for d in directives if d.kind == "page"]
