"""
Remote catalog client.
Thin typed wrapper over the TMDB v3 endpoints the application needs.
Every call either returns parsed data or raises RemoteFetchError; there are no retries.
"""

# HTTP client used for every catalog request
import requests  # web requests with connection pooling via Session
from typing import Any, Dict, List, Optional  # type hints

# Console logging
from loguru import logger  # console logger

from .config import Settings  # runtime settings
from .errors import RemoteFetchError  # failure type for all calls
from .models import CatalogPage, Genre, Movie, SortKey, Video  # parsed payload types


class CatalogClient:
	"""
	Issues requests to the movie catalog API and parses the responses.
	The API key is sent as a query parameter and never logged.
	"""

	def __init__(
		self,
		api_key: str,
		base_url: str = "https://api.themoviedb.org/3",
		image_base_url: str = "https://image.tmdb.org/t/p/w500",
		backdrop_base_url: str = "https://image.tmdb.org/t/p/w1280",
		session: Optional[requests.Session] = None,  # injectable for tests
		timeout: Optional[float] = None,  # seconds; None waits indefinitely
	):
		self.api_key = api_key
		self.base_url = base_url.rstrip("/")
		self.image_base_url = image_base_url.rstrip("/")
		self.backdrop_base_url = backdrop_base_url.rstrip("/")
		self.session = session or requests.Session()
		self.timeout = timeout

	@classmethod
	def from_settings(cls, settings: Settings, session: Optional[requests.Session] = None) -> "CatalogClient":
		return cls(
			api_key=settings.api_key,
			base_url=settings.base_url,
			image_base_url=settings.image_base_url,
			backdrop_base_url=settings.backdrop_base_url,
			session=session,
			timeout=settings.request_timeout_s,
		)

	# ---- transport ----

	def _get(self, endpoint: str, **params: Any) -> Dict[str, Any]:
		"""GET an endpoint and return its JSON object, or raise RemoteFetchError."""
		query = {"api_key": self.api_key}
		query.update({k: v for k, v in params.items() if v is not None})
		logger.debug(f"[Catalog] GET {endpoint} {({k: v for k, v in query.items() if k != 'api_key'})}")
		try:
			resp = self.session.get(f"{self.base_url}{endpoint}", params=query, timeout=self.timeout)
			resp.raise_for_status()  # non-2xx becomes HTTPError
		except requests.HTTPError as e:
			status = getattr(e.response, "status_code", None)
			logger.warning(f"[Catalog] {endpoint} answered HTTP {status}")
			raise RemoteFetchError(endpoint, e, detail=f"HTTP {status}") from e
		except requests.RequestException as e:
			logger.warning(f"[Catalog] {endpoint} failed: {type(e).__name__}")
			raise RemoteFetchError(endpoint, e) from e
		try:
			data = resp.json()
		except ValueError as e:  # requests' JSONDecodeError subclasses ValueError
			logger.warning(f"[Catalog] {endpoint} returned a body that is not JSON")
			raise RemoteFetchError(endpoint, e) from e
		if not isinstance(data, dict):
			raise RemoteFetchError(endpoint, TypeError(f"expected a JSON object, got {type(data).__name__}"), detail="not a JSON object")
		return data

	def _listing(self, endpoint: str, data: Dict[str, Any], requested_page: int) -> CatalogPage:
		"""Parse a paged listing; malformed entries are skipped rather than failing the page."""
		movies: List[Movie] = []
		for raw in data.get("results") or []:
			try:
				movies.append(Movie.from_api(raw))
			except ValueError as e:
				logger.debug(f"[Catalog] Skipping malformed entry from {endpoint}: {e}")
		page = CatalogPage(
			results=movies,
			page=_as_int(data.get("page"), requested_page),
			total_results=_as_int(data.get("total_results"), len(movies)),
			total_pages=_as_int(data.get("total_pages"), 1),
		)
		logger.debug(f"[Catalog] {endpoint} page={page.page} results={len(movies)} total_results={page.total_results}")
		return page

	# ---- endpoints ----

	def genres(self) -> List[Genre]:
		"""All movie genres (id + name)."""
		data = self._get("/genre/movie/list")
		out: List[Genre] = []
		for g in data.get("genres") or []:
			if isinstance(g, dict) and isinstance(g.get("id"), int):
				out.append(Genre(id=g["id"], name=str(g.get("name") or "")))
		return out

	def popular(self, page: int = 1) -> CatalogPage:
		return self._listing("/movie/popular", self._get("/movie/popular", page=page), page)

	def search(self, query: str, page: int = 1) -> CatalogPage:
		"""Text search. The endpoint matches text only; it takes no genre, year or sort."""
		return self._listing("/search/movie", self._get("/search/movie", query=query, page=page), page)

	def discover(
		self,
		sort: SortKey = SortKey.POPULARITY_DESC,
		page: int = 1,
		genre_id: Optional[int] = None,
		year: Optional[int] = None,
	) -> CatalogPage:
		"""Server-side filtered and sorted listing."""
		data = self._get(
			"/discover/movie",
			sort_by=SortKey(sort).value,
			page=page,
			with_genres=genre_id,
			primary_release_year=year,
		)
		return self._listing("/discover/movie", data, page)

	def movie(self, movie_id: int) -> Movie:
		"""The plain movie record, as stored in collections."""
		data = self._get(f"/movie/{int(movie_id)}")
		try:
			return Movie.from_api(data)
		except ValueError as e:
			raise RemoteFetchError(f"/movie/{int(movie_id)}", e) from e

	def movie_details(self, movie_id: int) -> Dict[str, Any]:
		"""Full detail payload with credits and videos appended."""
		return self._get(f"/movie/{int(movie_id)}", append_to_response="credits,videos")

	def videos(self, movie_id: int) -> List[Video]:
		data = self._get(f"/movie/{int(movie_id)}/videos")
		return parse_videos(data.get("results"))

	def watch_providers(self, movie_id: int) -> Dict[str, Dict[str, Any]]:
		"""Where to watch, keyed by country code (payload order preserved)."""
		data = self._get(f"/movie/{int(movie_id)}/watch/providers")
		results = data.get("results") or {}
		return {str(k): v for k, v in results.items() if isinstance(v, dict)} if isinstance(results, dict) else {}

	# ---- image helpers ----

	def poster_url(self, poster_path: Optional[str]) -> Optional[str]:
		return f"{self.image_base_url}{poster_path}" if poster_path else None

	def backdrop_url(self, backdrop_path: Optional[str]) -> Optional[str]:
		return f"{self.backdrop_base_url}{backdrop_path}" if backdrop_path else None


def parse_videos(raw: Any) -> List[Video]:
	"""Parse a list of video objects, skipping entries without a key."""
	out: List[Video] = []
	for v in raw or []:
		if isinstance(v, dict) and v.get("key"):
			out.append(Video(
				key=str(v["key"]),
				site=str(v.get("site") or ""),
				type=str(v.get("type") or ""),
				name=str(v.get("name") or ""),
			))
	return out


def _as_int(value: Any, default: int) -> int:
	if isinstance(value, bool) or not isinstance(value, (int, float)):
		return default
	return int(value)
