"""
Data models for CineVault.
Defines the records returned by the movie catalog, the user's collection names,
and the small view models handed to whatever renders the pages.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field  # auto-generates __init__, __repr__, etc.
# Enum gives us closed sets of values (sort keys, collections, views, themes)
from enum import Enum  # string-valued enumerations
# Import typing helpers for precise and self-documenting types
from typing import Any, Dict, List, Optional, Tuple, Union  # containers and optionals


class SortKey(str, Enum):
	"""Sort options understood by the discover endpoint (values are sent as-is)."""
	POPULARITY_DESC = "popularity.desc"  # default server order
	RELEASE_DATE_DESC = "release_date.desc"  # newest first
	VOTE_AVERAGE_DESC = "vote_average.desc"  # best rated first


class CollectionName(str, Enum):
	"""The three personal lists a user can keep."""
	WATCHLIST = "watchlist"  # "watch later"
	WATCHED = "watched"  # already seen
	FAVORITES = "favorites"  # liked


class Theme(str, Enum):
	DARK = "dark"
	LIGHT = "light"


class View(str, Enum):
	"""Top-level pages of the application."""
	DISCOVER = "discover"
	WATCHLIST = "watchlist"
	WATCHED = "watched"
	FAVORITES = "favorites"


class QueryMode(str, Enum):
	"""Which catalog endpoint serves the discover page."""
	POPULAR = "popular"  # no filters at all
	DISCOVER = "discover"  # server filters and sorts
	SEARCH = "search"  # server matches text only; filters applied locally


@dataclass(frozen=True)
class Movie:
	"""
	A movie record as returned by the catalog API.
	The original payload is kept untouched so that stored records round-trip whole.
	"""
	id: int  # stable catalog identifier
	title: str  # display title
	overview: str  # synopsis, may be empty
	poster_path: Optional[str]  # relative image path, e.g. "/abc.jpg"
	release_date: Optional[str]  # ISO date string "YYYY-MM-DD" when known
	vote_average: float  # 0..10
	genre_ids: Optional[Tuple[int, ...]]  # present on list views only
	payload: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)  # raw API object

	@classmethod
	def from_api(cls, data: Dict[str, Any]) -> "Movie":
		"""Build a Movie from a raw API object; raises ValueError when it has no usable id."""
		if not isinstance(data, dict):
			raise ValueError(f"Movie payload must be an object, got {type(data).__name__}")
		raw_id = data.get("id")
		if isinstance(raw_id, bool) or not isinstance(raw_id, (int, float, str)):
			raise ValueError(f"Movie payload has no usable id: {raw_id!r}")
		try:
			movie_id = int(raw_id)
		except ValueError as e:
			raise ValueError(f"Movie payload has no usable id: {raw_id!r}") from e

		genre_ids = data.get("genre_ids")
		if isinstance(genre_ids, list):
			genre_ids = tuple(int(g) for g in genre_ids if isinstance(g, (int, float)) and not isinstance(g, bool))
		else:
			genre_ids = None  # detail records carry "genres" objects instead

		vote = data.get("vote_average")
		return cls(
			id=movie_id,
			title=str(data.get("title") or data.get("name") or ""),
			overview=str(data.get("overview") or ""),
			poster_path=_text_or_none(data.get("poster_path")),
			release_date=_text_or_none(data.get("release_date")),  # numbers or objects here are treated as unknown
			vote_average=float(vote) if isinstance(vote, (int, float)) and not isinstance(vote, bool) else 0.0,
			genre_ids=genre_ids,
			payload=dict(data),
		)

	def to_dict(self) -> Dict[str, Any]:
		"""Return the JSON-ready form used for persistence."""
		if self.payload:
			return dict(self.payload)
		out: Dict[str, Any] = {
			"id": self.id,
			"title": self.title,
			"overview": self.overview,
			"poster_path": self.poster_path,
			"release_date": self.release_date,
			"vote_average": self.vote_average,
		}
		if self.genre_ids is not None:
			out["genre_ids"] = list(self.genre_ids)
		return out


def _text_or_none(value: Any) -> Optional[str]:
	"""Non-empty strings pass through; anything else becomes None."""
	return value if isinstance(value, str) and value else None


@dataclass(frozen=True)
class Genre:
	id: int
	name: str


@dataclass(frozen=True)
class Video:
	key: str  # site-specific video key (YouTube id)
	site: str  # e.g. "YouTube"
	type: str  # e.g. "Trailer", "Teaser"
	name: str = ""


@dataclass(frozen=True)
class WatchProvider:
	provider_id: int
	provider_name: str
	logo_path: Optional[str] = None


@dataclass
class CatalogPage:
	"""One page of a list endpoint (popular, search, discover) as the server sent it."""
	results: List[Movie]  # parsed records, server order
	page: int  # page the server answered for
	total_results: int  # server-reported total (uncapped)
	total_pages: int  # server-reported page count (uncapped)


@dataclass
class ResultPage:
	"""What the discover view displays: a slice of movies and the page count to paginate."""
	movies: List[Movie]
	page: int
	total_pages: int


@dataclass(frozen=True)
class PageDirective:
	"""
	One element of the pagination bar.
	kind is "prev", "page", "ellipsis" or "next"; number is the target page (None for ellipsis).
	"""
	kind: str
	number: Optional[int] = None
	is_current: bool = False
	disabled: bool = False


@dataclass
class MovieCard:
	"""A movie plus everything a renderer needs to label its buttons."""
	movie: Movie
	in_watchlist: bool
	in_watched: bool
	in_favorites: bool
	poster_url: Optional[str]
	year_label: str  # "2024" or "N/A"
	rating_label: str  # "7.3" or "N/A"


@dataclass
class MovieDetails:
	"""Expanded information shown in the detail panel."""
	movie: Movie
	director: str  # "N/A" when credits have no director
	genres_label: str  # "Action, Drama" or "N/A"
	tagline: str
	year_label: str
	rating_label: str
	poster_url: Optional[str]
	providers: List[WatchProvider]
	in_watchlist: bool
	in_watched: bool
	in_favorites: bool


@dataclass(frozen=True)
class TrailerResult:
	url: Optional[str]  # YouTube watch URL when a trailer was found
	message: Optional[str] = None  # user-facing notice otherwise

	@property
	def available(self) -> bool:
		return self.url is not None


# ---- Actions dispatched by the renderer ----

@dataclass(frozen=True)
class ToggleWatchlist:
	movie_id: int


@dataclass(frozen=True)
class ToggleFavorite:
	movie_id: int


@dataclass(frozen=True)
class ToggleWatched:
	movie_id: int


@dataclass(frozen=True)
class OpenTrailer:
	movie_id: int


@dataclass(frozen=True)
class OpenDetail:
	movie_id: int


@dataclass(frozen=True)
class GoToPage:
	page: int


Action = Union[ToggleWatchlist, ToggleFavorite, ToggleWatched, OpenTrailer, OpenDetail, GoToPage]
