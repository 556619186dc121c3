"""
Configuration for CineVault.
Settings come from environment variables (a local .env file is honoured);
fixed paging policy and storage key names live here as module constants.
"""

import os  # environment lookups
from pathlib import Path  # filesystem-safe paths
from typing import Dict, Optional  # type hints

from dotenv import load_dotenv  # read .env into os.environ
from pydantic import BaseModel, Field  # validated settings object

# Paging policy shared by the query state, post-processor and pagination bar
PAGE_SIZE = 20  # movies per page
RESULT_CEILING = 500  # never paginate over more results than this
HARD_PAGE_CAP = 25  # and never over more pages than this

# Pagination bar width
DEFAULT_WINDOW_SIZE = 5  # page links shown on wide screens
NARROW_WINDOW_SIZE = 3  # page links shown on phones
NARROW_VIEWPORT_PX = 480  # widths at or below this are "narrow"

# Oldest year offered by the year filter
MIN_FILTER_YEAR = 1900

# Key-value storage keys (same names the browser build used, so exported data stays compatible)
STORAGE_KEYS: Dict[str, str] = {
	"watchlist": "cinevault_watchlist",
	"watched": "cinevault_watched",
	"favorites": "cinevault_favorites",
	"theme": "cinevault_theme",
}

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v="


class Settings(BaseModel):
	"""Runtime settings; every field has a usable default except the API key."""
	api_key: str = ""  # TMDB v3 key; empty means offline use only
	base_url: str = "https://api.themoviedb.org/3"
	image_base_url: str = "https://image.tmdb.org/t/p/w500"
	backdrop_base_url: str = "https://image.tmdb.org/t/p/w1280"
	storage_path: Path = Path("data") / "cinevault_storage.json"
	log_level: str = "INFO"
	search_debounce_ms: int = Field(default=500, ge=0)
	request_timeout_s: Optional[float] = Field(default=None, gt=0)  # None waits indefinitely

	@property
	def search_debounce_s(self) -> float:
		return self.search_debounce_ms / 1000.0

	@classmethod
	def from_env(cls, env_file: Optional[str] = None) -> "Settings":
		"""Build settings from the process environment (after loading .env if present)."""
		load_dotenv(env_file)
		values = {}
		mapping = {
			"TMDB_API_KEY": "api_key",
			"TMDB_BASE_URL": "base_url",
			"TMDB_IMAGE_BASE_URL": "image_base_url",
			"TMDB_BACKDROP_BASE_URL": "backdrop_base_url",
			"CINEVAULT_STORAGE_PATH": "storage_path",
			"CINEVAULT_LOG_LEVEL": "log_level",
			"CINEVAULT_SEARCH_DEBOUNCE_MS": "search_debounce_ms",
			"CINEVAULT_REQUEST_TIMEOUT_S": "request_timeout_s",
		}
		for env_name, field_name in mapping.items():
			raw = os.environ.get(env_name)
			if raw is not None and raw != "":
				values[field_name] = raw  # pydantic coerces str -> int/float/Path
		return cls(**values)
