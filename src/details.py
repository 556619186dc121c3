"""
Detail helpers: display labels, the detail panel model, watch-provider selection and trailer lookup.
"""

from typing import Any, Dict, List, Optional  # type hints

from .config import YOUTUBE_WATCH_URL  # trailer link prefix
from .models import CollectionName, Movie, MovieDetails, Video, WatchProvider  # domain types

# Countries checked first when choosing which provider list to show
PRIORITY_COUNTRIES = ("IN", "US")

# Only these services are worth showing; matched as case-insensitive substrings of the provider name
MAJOR_SERVICES = (
	"Netflix", "Amazon Prime Video", "Amazon Video", "Prime Video", "Hotstar",
	"Disney+", "HBO Max", "Apple TV+", "Paramount+", "Peacock", "JioCinema",
	"SonyLIV", "Zee5", "MX Player", "Eros Now", "AltBalaji", "Voot",
)

TRAILER_UNAVAILABLE = "Trailer not available for this movie."


def year_label(release_date: Optional[str]) -> str:
	text = (release_date or "")[:4]
	return text if len(text) == 4 and text.isdigit() else "N/A"


def rating_label(vote_average: Optional[float]) -> str:
	# zero means "no votes yet" on this API
	return f"{vote_average:.1f}" if vote_average else "N/A"


def select_watch_providers(results_by_country: Optional[Dict[str, Dict[str, Any]]]) -> List[WatchProvider]:
	"""
	Pick one country's providers (IN, then US, then whichever comes first),
	merge flatrate/buy/rent, de-duplicate by id and keep the major services only.
	"""
	if not results_by_country:
		return []
	selected = None
	for country in PRIORITY_COUNTRIES:
		if results_by_country.get(country) is not None:  # an empty entry still wins over later countries
			selected = results_by_country[country]
			break
	if selected is None:
		selected = next(iter(results_by_country.values()))

	merged: List[Dict[str, Any]] = []
	for kind in ("flatrate", "buy", "rent"):
		merged.extend(p for p in (selected.get(kind) or []) if isinstance(p, dict))  # subscription first, then buy, then rent

	# later duplicates replace earlier ones but keep the first position
	unique: Dict[Any, Dict[str, Any]] = {}
	for p in merged:
		unique[p.get("provider_id")] = p

	majors = [s.lower() for s in MAJOR_SERVICES]  # case-insensitive match
	out: List[WatchProvider] = []
	for p in unique.values():
		name = str(p.get("provider_name") or "")
		if any(service in name.lower() for service in majors):
			out.append(WatchProvider(
				provider_id=int(p.get("provider_id") or 0),
				provider_name=name,
				logo_path=p.get("logo_path"),
			))
	return out


def select_trailer(videos: List[Video]) -> Optional[Video]:
	"""First YouTube trailer, else the first YouTube video of any type."""
	youtube = [v for v in videos if v.site == "YouTube"]  # only YouTube keys can be linked
	for v in youtube:
		if v.type == "Trailer":
			return v
	return youtube[0] if youtube else None


def trailer_url(video: Video) -> str:
	return f"{YOUTUBE_WATCH_URL}{video.key}"


def find_director(payload: Dict[str, Any]) -> str:
	crew = ((payload.get("credits") or {}).get("crew")) or []
	for member in crew:
		if isinstance(member, dict) and member.get("job") == "Director" and member.get("name"):
			return str(member["name"])
	return "N/A"


def build_movie_details(
	payload: Dict[str, Any],
	providers: List[WatchProvider],
	membership: Dict[CollectionName, bool],
	poster_url: Optional[str],
) -> MovieDetails:
	"""Assemble the detail panel model from a detail payload (with credits appended)."""
	movie = Movie.from_api(payload)  # ValueError when the payload has no id
	genre_names = [str(g.get("name")) for g in (payload.get("genres") or []) if isinstance(g, dict) and g.get("name")]
	return MovieDetails(
		movie=movie,
		director=find_director(payload),
		genres_label=", ".join(genre_names) or "N/A",
		tagline=str(payload.get("tagline") or ""),
		year_label=year_label(movie.release_date),
		rating_label=rating_label(movie.vote_average),
		poster_url=poster_url,
		providers=providers,
		in_watchlist=membership.get(CollectionName.WATCHLIST, False),
		in_watched=membership.get(CollectionName.WATCHED, False),
		in_favorites=membership.get(CollectionName.FAVORITES, False),
	)
