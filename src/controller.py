"""
Page controller.
Owns the query state and current view, turns user actions into catalog calls and
collection updates, and exposes ready-to-render card models.

Catalog and storage calls are blocking, so each one runs in a worker thread
(asyncio.to_thread) while the controller itself stays single-threaded.
"""

import asyncio  # cooperative scheduling, debounce timers, concurrent detail fetch
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union  # type hints

from loguru import logger  # console logging

from .catalog_client import CatalogClient  # remote catalog
from .collection_store import CollectionStore  # persisted collections
from .config import DEFAULT_WINDOW_SIZE, HARD_PAGE_CAP, PAGE_SIZE, Settings  # paging policy, settings
from .details import (  # detail panel helpers
	TRAILER_UNAVAILABLE,
	build_movie_details,
	rating_label,
	select_trailer,
	select_watch_providers,
	trailer_url,
	year_label,
)
from .errors import RemoteFetchError  # recoverable catalog failure
from .genres import GenreResolver  # genre lookup by name
from .models import (  # domain types
	Action,
	CollectionName,
	Genre,
	GoToPage,
	Movie,
	MovieCard,
	MovieDetails,
	OpenDetail,
	OpenTrailer,
	PageDirective,
	QueryMode,
	ResultPage,
	SortKey,
	Theme,
	ToggleFavorite,
	ToggleWatched,
	ToggleWatchlist,
	TrailerResult,
	View,
)
from .pagination import page_window  # pagination directives
from .post_processor import post_process  # search-mode filtering
from .query_state import QueryState, capped_total_pages, popular_total_pages  # query policy
from .storage import JsonFileStorage, KeyValueStorage  # storage backends


class Debouncer:
	"""
	Runs only the most recently scheduled callback, once no new call arrived for `delay_s`.
	Scheduling again cancels the pending timer.
	"""

	def __init__(self, delay_s: float = 0.5):
		self.delay_s = delay_s
		self._handle: Optional[asyncio.TimerHandle] = None
		self._task: Optional[asyncio.Task] = None

	@property
	def pending(self) -> bool:
		return self._handle is not None

	def schedule(self, callback: Callable[[], Awaitable[Any]]) -> None:
		"""Must be called from a running event loop."""
		loop = asyncio.get_running_loop()
		self.cancel()
		self._handle = loop.call_later(self.delay_s, self._fire, callback)

	def _fire(self, callback: Callable[[], Awaitable[Any]]) -> None:
		self._handle = None
		self._task = asyncio.ensure_future(callback())

	def cancel(self) -> None:
		if self._handle is not None:
			self._handle.cancel()
			self._handle = None

	async def wait(self) -> Any:
		"""Wait for the pending timer (if any) and the callback it started."""
		while self._handle is not None:
			await asyncio.sleep(self.delay_s / 4 or 0.001)
		if self._task is not None:
			return await self._task
		return None


class RequestGenerations:
	"""Monotonic request tokens; only the newest token's response may update the view."""

	def __init__(self):
		self._current = 0

	def next(self) -> int:
		self._current += 1
		return self._current

	def is_current(self, token: int) -> bool:
		return token == self._current


class PageController:
	"""
	Single entry point for everything a renderer can ask for.
	Catalog failures never escape: they are logged and the view degrades to empty.
	"""

	def __init__(
		self,
		client: CatalogClient,
		store: CollectionStore,
		debounce_s: float = 0.5,
		window_size: int = DEFAULT_WINDOW_SIZE,
	):
		self.client = client
		self.store = store
		self.state = QueryState()
		self.view = View.DISCOVER
		self.window_size = window_size
		self.cards: List[MovieCard] = []  # what the current view shows
		self.genres: List[Genre] = []
		self.genre_resolver = GenreResolver([])
		self.debouncer = Debouncer(debounce_s)
		self.generations = RequestGenerations()

	# ---- startup ----

	async def start(self) -> List[MovieCard]:
		"""Load genres and the default view."""
		await self.load_genres()
		return await self.refresh()

	async def load_genres(self) -> List[Genre]:
		try:
			self.genres = await asyncio.to_thread(self.client.genres)
		except RemoteFetchError as e:
			logger.warning(f"[Controller] Genre list unavailable: {e}")
			self.genres = []
		self.genre_resolver = GenreResolver(self.genres)
		return self.genres

	# ---- discover page ----

	def _fetch_result_page(self, state: QueryState) -> ResultPage:
		"""Blocking: pick the endpoint for the state and shape its answer into one page."""
		mode = state.mode
		if mode is QueryMode.SEARCH:
			raw = self.client.search(state.query, state.page)
			return post_process(raw.results, state.page, year=state.year, genre_id=state.genre_id, sort=state.sort)

		if mode is QueryMode.DISCOVER:
			page = min(state.page, HARD_PAGE_CAP)  # the catalog never serves past this page
			raw = self.client.discover(sort=state.sort, page=page, genre_id=state.genre_id, year=state.year)
			return ResultPage(
				movies=raw.results[:PAGE_SIZE],
				page=page,
				total_pages=capped_total_pages(raw.total_results),
			)

		max_pages = popular_total_pages()
		page = min(state.page, max_pages)
		raw = self.client.popular(page)
		return ResultPage(movies=raw.results[:PAGE_SIZE], page=page, total_pages=max_pages)

	async def load_discover(self) -> Optional[List[MovieCard]]:
		"""
		Fetch the discover page for the current state.
		Returns the new cards, or None when a newer request superseded this one.
		"""
		token = self.generations.next()  # newest request wins
		snapshot = self.state.snapshot()  # worker thread sees a frozen copy
		logger.debug(f"[Controller] Request #{token} mode={snapshot.mode.value} page={snapshot.page}")
		try:
			result = await asyncio.to_thread(self._fetch_result_page, snapshot)
		except RemoteFetchError as e:
			if not self.generations.is_current(token):
				return None
			logger.warning(f"[Controller] Discover page unavailable: {e}")
			result = ResultPage(movies=[], page=snapshot.page, total_pages=0)

		if not self.generations.is_current(token):
			logger.debug(f"[Controller] Discarding stale response #{token}")
			return None

		self.state.page = result.page  # may have been clamped
		self.state.total_pages = result.total_pages
		cards = [self.card_for(m) for m in result.movies]
		if self.view is View.DISCOVER:
			self.cards = cards
		logger.info(
			f"[Controller] Discover page {result.page}/{result.total_pages} "
			f"({snapshot.mode.value}) with {len(result.movies)} movies"
		)
		return cards

	def on_search_input(self, text: str) -> None:
		"""Keystroke handler: update the query now, fetch after the typing pause."""
		self.state.set_query(text)
		self.debouncer.schedule(self.load_discover)

	async def search(self, text: str) -> Optional[List[MovieCard]]:
		"""Submit a query immediately (no debounce)."""
		self.debouncer.cancel()
		self.state.set_query(text)
		return await self.load_discover()

	async def set_genre(self, genre: Union[int, str, None]) -> Optional[List[MovieCard]]:
		"""Accepts a genre id or a genre name."""
		genre_id = genre
		if isinstance(genre, str) and genre.strip() and not genre.strip().isdigit():
			genre_id = self.genre_resolver.resolve(genre)
			if genre_id is None:
				logger.warning(f"[Controller] Unknown genre '{genre}', clearing genre filter")
		self.state.set_genre(genre_id)
		return await self.load_discover()

	async def set_year(self, year: Union[int, str, None]) -> Optional[List[MovieCard]]:
		self.state.set_year(year)
		return await self.load_discover()

	async def set_sort(self, sort: Union[SortKey, str]) -> Optional[List[MovieCard]]:
		self.state.set_sort(sort)
		return await self.load_discover()

	async def reset_filters(self) -> Optional[List[MovieCard]]:
		self.debouncer.cancel()
		self.state.reset()
		return await self.load_discover()

	async def go_to_page(self, page: int) -> Optional[List[MovieCard]]:
		self.state.go_to(page)
		if self.view is not View.DISCOVER:
			return self.cards
		return await self.load_discover()

	def pagination(self, window_size: Optional[int] = None) -> List[PageDirective]:
		return page_window(self.state.page, self.state.total_pages, window_size or self.window_size)

	# ---- views ----

	async def switch_view(self, view: Union[View, str]) -> List[MovieCard]:
		self.view = View(view)  # ValueError for unknown views
		logger.info(f"[Controller] Switched to {self.view.value}")
		return await self.refresh()

	async def refresh(self) -> List[MovieCard]:
		"""Reload whatever the current view shows."""
		if self.view is View.DISCOVER:
			await self.load_discover()
		else:
			self.cards = self.collection_cards(CollectionName(self.view.value))
		return self.cards

	def collection_cards(self, name: Union[CollectionName, str]) -> List[MovieCard]:
		return [self.card_for(m) for m in self.store.list(name)]

	def card_for(self, movie: Movie) -> MovieCard:
		membership = self.store.membership(movie.id)  # drives the button labels
		return MovieCard(
			movie=movie,
			in_watchlist=membership[CollectionName.WATCHLIST],
			in_watched=membership[CollectionName.WATCHED],
			in_favorites=membership[CollectionName.FAVORITES],
			poster_url=self.client.poster_url(movie.poster_path),
			year_label=year_label(movie.release_date),
			rating_label=rating_label(movie.vote_average),
		)

	def badges(self) -> Dict[CollectionName, int]:
		return self.store.counts()

	# ---- collection toggles ----

	async def toggle(self, name: Union[CollectionName, str], movie_id: int) -> Optional[bool]:
		"""
		Flip membership of a movie in a collection and refresh the view.
		Returns the new membership, or None when the full record could not be fetched.
		"""
		name = CollectionName(name)  # accepts plain strings too
		try:
			now_in = await asyncio.to_thread(self.store.toggle, name, movie_id, self.client.movie)
		except RemoteFetchError as e:
			logger.warning(f"[Controller] Could not toggle {movie_id} in {name.value}: {e}")
			return None
		logger.info(f"[Controller] {movie_id} {'added to' if now_in else 'removed from'} {name.value}")
		if self.view is View.DISCOVER:
			# membership changed, the movies did not: relabel without refetching
			self.cards = [self.card_for(card.movie) for card in self.cards]
		else:
			await self.refresh()
		return now_in

	# ---- detail and trailer ----

	async def open_detail(self, movie_id: int) -> Optional[MovieDetails]:
		"""Fetch detail and watch providers concurrently and join them."""
		detail, providers = await asyncio.gather(
			asyncio.to_thread(self.client.movie_details, movie_id),
			asyncio.to_thread(self.client.watch_providers, movie_id),
			return_exceptions=True,
		)
		if isinstance(detail, BaseException):
			if not isinstance(detail, RemoteFetchError):
				raise detail
			logger.warning(f"[Controller] Details for {movie_id} unavailable: {detail}")
			return None
		if isinstance(providers, BaseException):
			if not isinstance(providers, RemoteFetchError):
				raise providers
			logger.warning(f"[Controller] Watch providers for {movie_id} unavailable: {providers}")
			providers = {}
		try:
			return build_movie_details(
				detail,
				select_watch_providers(providers),
				self.store.membership(movie_id),
				self.client.poster_url(detail.get("poster_path")),
			)
		except ValueError as e:
			logger.warning(f"[Controller] Details for {movie_id} are malformed: {e}")
			return None

	async def open_trailer(self, movie_id: int) -> TrailerResult:
		try:
			videos = await asyncio.to_thread(self.client.videos, movie_id)
		except RemoteFetchError as e:
			logger.warning(f"[Controller] Videos for {movie_id} unavailable: {e}")
			return TrailerResult(url=None, message=TRAILER_UNAVAILABLE)
		video = select_trailer(videos)
		if video is None:
			return TrailerResult(url=None, message=TRAILER_UNAVAILABLE)
		return TrailerResult(url=trailer_url(video))

	# ---- theme ----

	@property
	def theme(self) -> Theme:
		return self.store.get_theme()

	def toggle_theme(self) -> Theme:
		return self.store.toggle_theme()

	# ---- action dispatch ----

	async def dispatch(self, action: Action) -> Any:
		"""Single handler for every renderer-originated action."""
		logger.debug(f"[Controller] Dispatch {action}")
		if isinstance(action, ToggleWatchlist):
			return await self.toggle(CollectionName.WATCHLIST, action.movie_id)
		if isinstance(action, ToggleFavorite):
			return await self.toggle(CollectionName.FAVORITES, action.movie_id)
		if isinstance(action, ToggleWatched):
			return await self.toggle(CollectionName.WATCHED, action.movie_id)
		if isinstance(action, OpenTrailer):
			return await self.open_trailer(action.movie_id)
		if isinstance(action, OpenDetail):
			return await self.open_detail(action.movie_id)
		if isinstance(action, GoToPage):
			return await self.go_to_page(action.page)
		raise TypeError(f"Unknown action: {action!r}")


def build_controller(settings: Settings, storage: Optional[KeyValueStorage] = None) -> PageController:
	"""Wire a controller from settings: JSON-file storage unless another backend is given."""
	client = CatalogClient.from_settings(settings)
	store = CollectionStore(storage if storage is not None else JsonFileStorage(settings.storage_path))
	logger.info(f"[Controller] Using catalog {settings.base_url} and storage {settings.storage_path}")
	return PageController(client, store, debounce_s=settings.search_debounce_s)
