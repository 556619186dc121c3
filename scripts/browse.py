"""
Browse the catalog and manage collections from a terminal.

This script:
1) Loads settings (TMDB_API_KEY, storage path) from the environment / .env
2) Runs one discover/search query, or lists a collection
3) Prints the cards and the pagination bar

Usage:
    python -m scripts.browse --query "dune" --year 2021
    python -m scripts.browse --genre "sci-fi" --sort vote_average.desc --page 3
    python -m scripts.browse --toggle watched 438631
    python -m scripts.browse --collection watchlist
"""

import argparse  # command-line options
import asyncio  # drive the controller's coroutines
import sys  # stderr sink for logs
from typing import List, Optional  # type hints

from loguru import logger  # console logging

from src.config import HARD_PAGE_CAP, NARROW_WINDOW_SIZE, Settings  # runtime settings
from src.controller import PageController, build_controller  # page orchestration
from src.models import CollectionName, MovieCard, OpenDetail, OpenTrailer, PageDirective, SortKey, View  # domain types
from src.pagination import should_display  # hide bar on single pages


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
	parser = argparse.ArgumentParser(description="Browse the movie catalog and your collections.")
	parser.add_argument("--query", default="", help="free-text search")
	parser.add_argument("--genre", default=None, help="genre id or name (e.g. 28 or 'sci-fi')")
	parser.add_argument("--year", default=None, help="4-digit release year")
	parser.add_argument("--sort", default=SortKey.POPULARITY_DESC.value, choices=[s.value for s in SortKey])
	parser.add_argument("--page", type=int, default=1)
	parser.add_argument("--narrow", action="store_true", help="3-link pagination bar")
	parser.add_argument("--collection", choices=[c.value for c in CollectionName], help="list a collection instead")
	parser.add_argument("--toggle", nargs=2, metavar=("COLLECTION", "ID"), help="add/remove a movie")
	parser.add_argument("--trailer", type=int, metavar="ID", help="print the trailer URL of a movie")
	parser.add_argument("--details", type=int, metavar="ID", help="print details of a movie")
	parser.add_argument("--verbose", action="store_true", help="debug logging")
	return parser.parse_args(argv)


def format_card(i: int, card: MovieCard) -> str:
	marks = "".join([
		"L" if card.in_watchlist else "-",
		"W" if card.in_watched else "-",
		"F" if card.in_favorites else "-",
	])
	return f"{i:>2}. [{marks}] {card.movie.title} ({card.year_label}) ⭐ {card.rating_label}  id={card.movie.id}"


def format_pagination(directives: List[PageDirective]) -> str:
	parts = []
	for d in directives:
		if d.kind == "ellipsis":
			parts.append("…")
		elif d.kind == "prev":
			parts.append("«" if not d.disabled else "(«)")
		elif d.kind == "next":
			parts.append("»" if not d.disabled else "(»)")
		else:
			parts.append(f"[{d.number}]" if d.is_current else str(d.number))
	return " ".join(parts)


async def run(args: argparse.Namespace, controller: PageController) -> int:
	await controller.load_genres()

	if args.toggle:
		name, movie_id = args.toggle
		now_in = await controller.toggle(CollectionName(name), int(movie_id))
		if now_in is None:
			print(f"Could not update {name}: catalog unavailable")
			return 1
		print(f"{movie_id} {'added to' if now_in else 'removed from'} {name}")
		return 0

	if args.trailer is not None:
		result = await controller.dispatch(OpenTrailer(args.trailer))
		print(result.url if result.available else result.message)
		return 0 if result.available else 1

	if args.details is not None:
		details = await controller.dispatch(OpenDetail(args.details))
		if details is None:
			print("Details are not available right now.")
			return 1
		print(f"{details.movie.title} ({details.year_label}) ⭐ {details.rating_label}")
		if details.tagline:
			print(details.tagline)
		print(f"Genres: {details.genres_label}")
		print(f"Director: {details.director}")
		print(details.movie.overview or "No description available.")
		if details.providers:
			print("Available on: " + ", ".join(p.provider_name for p in details.providers))
		return 0

	if args.collection:
		cards = await controller.switch_view(View(args.collection))
		for i, card in enumerate(cards, start=1):
			print(format_card(i, card))
		if not cards:
			print("(empty)")
		return 0

	# Discover page: apply filters without fetching each time, then fetch once
	controller.state.set_query(args.query)
	if args.genre:
		text = args.genre.strip()
		genre_id = int(text) if text.isdigit() else controller.genre_resolver.resolve(text)
		if genre_id is None:
			logger.warning(f"[CLI] Unknown genre '{args.genre}', ignoring")
		controller.state.set_genre(genre_id)
	controller.state.set_year(args.year)
	controller.state.set_sort(args.sort)
	controller.state.page = max(1, min(args.page, HARD_PAGE_CAP))  # catalog pages stop at the cap

	cards = await controller.load_discover() or []
	for i, card in enumerate(cards, start=1):
		print(format_card(i, card))
	if not cards:
		print("No movies found. Try adjusting your search or filter criteria.")
	if should_display(controller.state.total_pages):
		window = NARROW_WINDOW_SIZE if args.narrow else None
		print(format_pagination(controller.pagination(window)))
	return 0


def main(argv: Optional[List[str]] = None) -> int:
	args = parse_args(argv)
	settings = Settings.from_env()

	logger.remove()
	logger.add(sys.stderr, level="DEBUG" if args.verbose else settings.log_level)

	if not settings.api_key:
		logger.warning("[CLI] TMDB_API_KEY is not set; catalog requests will fail")
	controller = build_controller(settings)
	return asyncio.run(run(args, controller))


if __name__ == '__main__':
	sys.exit(main())
