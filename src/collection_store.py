"""
Persistent collection store.
Keeps the watchlist, watched and favorites lists (plus the theme preference)
as JSON arrays in a key-value storage backend. This module is the only writer of those keys.
"""

import json  # collection values are JSON arrays
from typing import Callable, Dict, List, Optional, Union  # type hints

from loguru import logger  # console logging

from .config import STORAGE_KEYS  # key names
from .errors import StorageParseError  # malformed persisted data
from .models import CollectionName, Movie, Theme  # domain types
from .storage import KeyValueStorage  # backend contract

CollectionLike = Union[CollectionName, str]


def decode_records(key: str, raw: Optional[str]) -> List[Dict]:
	"""
	Decode a stored collection value into a list of record dicts.
	Absent values decode to []; anything that is not a JSON array raises StorageParseError.
	Array entries without an id are dropped.
	"""
	if raw is None or raw == "":
		return []
	try:
		data = json.loads(raw)
	except (TypeError, ValueError) as e:
		raise StorageParseError(key, e) from e
	if data is None:
		return []  # "null" behaves like an absent value
	if not isinstance(data, list):
		raise StorageParseError(key, TypeError(f"expected a JSON array, got {type(data).__name__}"))
	return [entry for entry in data if isinstance(entry, dict) and "id" in entry]


class CollectionStore:
	"""
	Named movie collections backed by key-value storage.
	Reads never raise: a corrupted entry degrades to an empty collection.
	"""

	def __init__(self, storage: KeyValueStorage, keys: Optional[Dict[str, str]] = None):
		self.storage = storage  # backend (memory, JSON file, ...)
		self.keys = dict(keys or STORAGE_KEYS)  # logical name -> storage key

	def _key(self, name: CollectionLike) -> str:
		return self.keys[CollectionName(name).value]  # ValueError for unknown names

	def _read(self, name: CollectionLike) -> List[Dict]:
		key = self._key(name)
		try:
			return decode_records(key, self.storage.get_item(key))
		except StorageParseError as e:
			logger.warning(f"[Store] {e}; treating '{key}' as empty")
			return []

	def _write(self, name: CollectionLike, records: List[Dict]) -> None:
		self.storage.set_item(self._key(name), json.dumps(records))

	def list(self, name: CollectionLike) -> List[Movie]:
		"""All records of a collection in insertion order."""
		movies: List[Movie] = []
		for record in self._read(name):
			try:
				movies.append(Movie.from_api(record))
			except ValueError as e:
				logger.warning(f"[Store] Skipping unreadable entry in '{CollectionName(name).value}': {e}")
		return movies

	def contains(self, name: CollectionLike, movie_id: int) -> bool:
		return any(_same_id(record, movie_id) for record in self._read(name))

	def add(self, name: CollectionLike, movie: Movie) -> bool:
		"""
		Append a movie unless it is already present. Returns True if something was added.
		Adding to watched always clears the same id from the watchlist.
		"""
		collection = CollectionName(name)  # ValueError for unknown names
		records = self._read(collection)  # current stored sequence
		added = False
		if not any(_same_id(record, movie.id) for record in records):
			records.append(movie.to_dict())  # full record, insertion order kept
			self._write(collection, records)
			added = True
			logger.info(f"[Store] Added {movie.id} to {collection.value} ({len(records)} items)")
		if collection is CollectionName.WATCHED:
			self.remove(CollectionName.WATCHLIST, movie.id)  # watched implies not pending
		return added

	def remove(self, name: CollectionLike, movie_id: int) -> bool:
		"""Remove a movie by id; absent ids are not an error. Returns True if something was removed."""
		collection = CollectionName(name)  # ValueError for unknown names
		records = self._read(collection)  # current stored sequence
		kept = [record for record in records if not _same_id(record, movie_id)]  # drop every match
		removed = len(kept) != len(records)
		self._write(collection, kept)  # persisted even when nothing changed
		if removed:
			logger.info(f"[Store] Removed {movie_id} from {collection.value} ({len(kept)} items)")
		return removed

	def toggle(self, name: CollectionLike, movie_id: int, fetch_full_record: Callable[[int], Movie]) -> bool:
		"""
		Remove the movie if present, otherwise fetch its full record and add it.
		Returns the new membership. Errors from fetch_full_record propagate with the store untouched.
		"""
		if self.contains(name, movie_id):
			self.remove(name, movie_id)
			return False
		movie = fetch_full_record(movie_id)
		self.add(name, movie)
		return True

	def membership(self, movie_id: int) -> Dict[CollectionName, bool]:
		return {name: self.contains(name, movie_id) for name in CollectionName}

	def counts(self) -> Dict[CollectionName, int]:
		"""Badge numbers: size of every collection."""
		return {name: len(self.list(name)) for name in CollectionName}  # same entries the views show

	# ---- theme preference ----

	def get_theme(self) -> Theme:
		raw = self.storage.get_item(self.keys["theme"])
		try:
			return Theme(raw)
		except ValueError:
			return Theme.DARK  # missing or unknown value

	def set_theme(self, theme: Union[Theme, str]) -> Theme:
		theme = Theme(theme)
		self.storage.set_item(self.keys["theme"], theme.value)
		logger.info(f"[Store] Theme set to {theme.value}")
		return theme

	def toggle_theme(self) -> Theme:
		return self.set_theme(Theme.LIGHT if self.get_theme() is Theme.DARK else Theme.DARK)


def _same_id(record: Dict, movie_id: int) -> bool:
	try:
		return int(record.get("id")) == int(movie_id)
	except (TypeError, ValueError):
		return False
