"""
Unit tests for the pagination window calculator.
"""

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from src.models import PageDirective
from src.pagination import page_numbers, page_window, should_display, window_size_for_width


def layout(directives):
	"""Compact text form: '<' / '>' for prev/next ('!' when disabled), '*' marks the current page."""
	out = []
	for d in directives:
		if d.kind == "prev":
			out.append("<!" if d.disabled else "<")
		elif d.kind == "next":
			out.append(">!" if d.disabled else ">")
		elif d.kind == "ellipsis":
			out.append("...")
		else:
			out.append(f"{d.number}*" if d.is_current else str(d.number))
	return out


def test_first_page_of_twenty_five():
	directives = page_window(1, 25, 5)
	assert layout(directives) == ["<!", "1*", "2", "3", "4", "5", "...", "25", ">"]
	assert directives[0] == PageDirective(kind="prev", number=0, disabled=True)


def test_middle_page_is_centred():
	assert layout(page_window(13, 25, 5)) == ["<", "1", "...", "11", "12", "13*", "14", "15", "...", "25", ">"]


def test_last_page():
	assert layout(page_window(25, 25, 5)) == ["<", "1", "...", "21", "22", "23", "24", "25*", ">!"]


def test_window_start_two_shows_first_page_without_ellipsis():
	assert layout(page_window(4, 25, 5)) == ["<", "1", "2", "3", "4*", "5", "6", "...", "25", ">"]


def test_window_end_next_to_last_page_has_no_ellipsis():
	assert layout(page_window(22, 25, 5)) == ["<", "1", "...", "20", "21", "22*", "23", "24", "25", ">"]


def test_few_pages_show_all():
	assert layout(page_window(2, 3, 5)) == ["<", "1", "2*", "3", ">"]


def test_narrow_window():
	assert page_numbers(page_window(10, 25, 3)) == [1, 9, 10, 11, 25]
	assert layout(page_window(1, 25, 3)) == ["<!", "1*", "2", "3", "...", "25", ">"]


def test_single_page():
	assert layout(page_window(1, 1, 5)) == ["<!", "1*", ">!"]
	assert not should_display(1)
	assert should_display(2)


def test_window_size_for_width():
	assert window_size_for_width(320) == 3
	assert window_size_for_width(480) == 3
	assert window_size_for_width(481) == 5


def test_invalid_inputs():
	with pytest.raises(ValueError):
		page_window(0, 10)
	with pytest.raises(ValueError):
		page_window(1, 10, 0)
