"""
Genre name resolution.
Lets a user pick a genre by name ("sci-fi", "funny", "thriler") instead of by catalog id.
Exact names win, then common synonyms, then a fuzzy match.
"""

from typing import Dict, List, Optional, Union  # type hints

from rapidfuzz import fuzz, process, utils  # fuzzy matching utilities

from loguru import logger  # console logging

from .models import Genre  # genre record


class GenreResolver:
	"""Maps user-typed genre names or ids to catalog genre ids."""

	# Common user phrasings -> catalog genre name
	GENRE_SYNONYMS: Dict[str, str] = {
		'sci-fi': 'Science Fiction',
		'sci fi': 'Science Fiction',
		'scifi': 'Science Fiction',
		'sci-fy': 'Science Fiction',
		'science-fiction': 'Science Fiction',
		'funny': 'Comedy',
		'romantic': 'Romance',
		'romcom': 'Romance',
		'animated': 'Animation',
		'cartoon': 'Animation',
		'doc': 'Documentary',
		'docs': 'Documentary',
		'musical': 'Music',
		'scary': 'Horror',
		'kids': 'Family',
		'tv': 'TV Movie',
	}

	FUZZY_CUTOFF = 85  # minimum rapidfuzz WRatio score

	def __init__(self, genres: List[Genre]):
		self.genres = list(genres)
		self._by_name = {g.name.lower(): g for g in self.genres}
		self._by_id = {g.id: g for g in self.genres}
		self._names = [g.name for g in self.genres]
		logger.debug(f"[Genres] Resolver ready with {len(self.genres)} genres")

	def name_for(self, genre_id: Optional[int]) -> Optional[str]:
		g = self._by_id.get(genre_id) if genre_id is not None else None
		return g.name if g else None

	def resolve(self, value: Union[int, str, None]) -> Optional[int]:
		"""Return the genre id for an id or a name, or None when nothing matches."""
		if value is None:
			return None
		if isinstance(value, int) and not isinstance(value, bool):
			return value if value in self._by_id else None
		text = str(value).strip()
		if not text:
			return None
		if text.isdigit():
			return int(text) if int(text) in self._by_id else None

		needle = text.lower()
		if needle in self._by_name:
			return self._by_name[needle].id

		canonical = self.GENRE_SYNONYMS.get(needle)
		if canonical and canonical.lower() in self._by_name:
			logger.debug(f"[Genres] Synonym match: '{text}' -> '{canonical}'")
			return self._by_name[canonical.lower()].id

		if self._names:
			match = process.extractOne(
				text, self._names, scorer=fuzz.WRatio, processor=utils.default_process, score_cutoff=self.FUZZY_CUTOFF,
			)
			if match:
				name, score, _ = match
				logger.debug(f"[Genres] Fuzzy match: '{text}' -> '{name}' (score={score:.0f})")
				return self._by_name[name.lower()].id

		logger.debug(f"[Genres] No genre matches '{text}'")
		return None
