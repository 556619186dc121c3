"""
Unit tests for CollectionStore: membership, idempotence, watched/watchlist exclusivity,
corruption handling and the theme preference.
"""

import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from src.collection_store import CollectionStore, decode_records
from src.errors import StorageParseError
from src.models import CollectionName, Movie, Theme
from src.storage import JsonFileStorage, MemoryStorage

from fakes import fetch_from, movie_payload


def make_store(initial=None):
	storage = MemoryStorage(initial)
	return CollectionStore(storage), storage


def movie(movie_id):
	return Movie.from_api(movie_payload(movie_id))


def test_add_then_contains_and_remove():
	store, _ = make_store()
	store.add(CollectionName.FAVORITES, movie(1))
	assert store.contains(CollectionName.FAVORITES, 1)
	assert store.remove(CollectionName.FAVORITES, 1)
	assert not store.contains(CollectionName.FAVORITES, 1)


def test_add_is_idempotent():
	store, storage = make_store()
	store.add("watchlist", movie(7))
	once = storage.get_item("cinevault_watchlist")
	assert store.add("watchlist", movie(7)) is False
	assert storage.get_item("cinevault_watchlist") == once
	assert [m.id for m in store.list("watchlist")] == [7]


def test_remove_absent_is_not_an_error():
	store, _ = make_store()
	assert store.remove(CollectionName.WATCHED, 99) is False
	assert store.list(CollectionName.WATCHED) == []


def test_insertion_order_preserved():
	store, _ = make_store()
	for movie_id in (3, 1, 2):
		store.add(CollectionName.WATCHLIST, movie(movie_id))
	assert [m.id for m in store.list(CollectionName.WATCHLIST)] == [3, 1, 2]


def test_persisted_as_json_array_of_full_records():
	store, storage = make_store()
	payload = movie_payload(5, tagline="extra field survives")
	store.add(CollectionName.FAVORITES, Movie.from_api(payload))
	stored = json.loads(storage.get_item("cinevault_favorites"))
	assert stored == [payload]


@pytest.mark.parametrize("in_watchlist_before", [True, False])
def test_adding_to_watched_clears_watchlist(in_watchlist_before):
	store, _ = make_store()
	if in_watchlist_before:
		store.add(CollectionName.WATCHLIST, movie(4))
	store.add(CollectionName.WATCHLIST, movie(8))
	store.add(CollectionName.WATCHED, movie(4))
	assert store.contains(CollectionName.WATCHED, 4)
	assert not store.contains(CollectionName.WATCHLIST, 4)
	assert store.contains(CollectionName.WATCHLIST, 8)


def test_adding_to_watchlist_does_not_touch_watched():
	store, _ = make_store()
	store.add(CollectionName.WATCHED, movie(4))
	store.add(CollectionName.WATCHLIST, movie(4))
	assert store.contains(CollectionName.WATCHED, 4)
	assert store.contains(CollectionName.WATCHLIST, 4)


def test_toggle_adds_with_fetched_record_then_removes_without_fetching():
	store, _ = make_store()
	records = {10: movie_payload(10, title="Fetched")}
	assert store.toggle(CollectionName.FAVORITES, 10, fetch_from(records)) is True
	assert store.list(CollectionName.FAVORITES)[0].title == "Fetched"

	def no_fetch(movie_id):
		raise AssertionError("removal must not fetch")

	assert store.toggle(CollectionName.FAVORITES, 10, no_fetch) is False
	assert not store.contains(CollectionName.FAVORITES, 10)


def test_toggle_watched_removes_from_watchlist():
	store, _ = make_store()
	store.add(CollectionName.WATCHLIST, movie(11))
	store.toggle(CollectionName.WATCHED, 11, fetch_from({11: movie_payload(11)}))
	assert store.contains(CollectionName.WATCHED, 11)
	assert not store.contains(CollectionName.WATCHLIST, 11)


def test_toggle_fetch_error_leaves_store_untouched():
	store, storage = make_store()

	def failing(movie_id):
		raise RuntimeError("offline")

	with pytest.raises(RuntimeError):
		store.toggle(CollectionName.WATCHLIST, 12, failing)
	assert storage.get_item("cinevault_watchlist") is None


def test_corrupted_value_reads_as_empty():
	store, _ = make_store({"cinevault_watchlist": "{not json"})
	assert store.list(CollectionName.WATCHLIST) == []
	assert store.contains(CollectionName.WATCHLIST, 1) is False
	# the collection is still usable afterwards
	store.add(CollectionName.WATCHLIST, movie(1))
	assert [m.id for m in store.list(CollectionName.WATCHLIST)] == [1]


def test_non_array_value_reads_as_empty():
	store, _ = make_store({"cinevault_favorites": json.dumps({"id": 1})})
	assert store.list(CollectionName.FAVORITES) == []


def test_decode_records_raises_parse_error():
	with pytest.raises(StorageParseError) as info:
		decode_records("cinevault_watched", "oops")
	assert info.value.key == "cinevault_watched"
	assert decode_records("k", None) == []
	assert decode_records("k", "null") == []
	assert decode_records("k", json.dumps([{"id": 1}, "junk", {"title": "no id"}])) == [{"id": 1}]


def test_counts_and_membership():
	store, _ = make_store()
	store.add(CollectionName.WATCHLIST, movie(1))
	store.add(CollectionName.WATCHLIST, movie(2))
	store.add(CollectionName.FAVORITES, movie(2))
	assert store.counts() == {
		CollectionName.WATCHLIST: 2,
		CollectionName.WATCHED: 0,
		CollectionName.FAVORITES: 1,
	}
	assert store.membership(2) == {
		CollectionName.WATCHLIST: True,
		CollectionName.WATCHED: False,
		CollectionName.FAVORITES: True,
	}


def test_theme_defaults_to_dark_and_toggles():
	store, storage = make_store({"cinevault_theme": "sepia"})
	assert store.get_theme() is Theme.DARK
	assert store.toggle_theme() is Theme.LIGHT
	assert storage.get_item("cinevault_theme") == "light"
	assert store.toggle_theme() is Theme.DARK


def test_json_file_storage_round_trip(tmp_path):
	path = tmp_path / "store.json"
	store = CollectionStore(JsonFileStorage(path))
	store.add(CollectionName.WATCHED, movie(21))
	reopened = CollectionStore(JsonFileStorage(path))
	assert [m.id for m in reopened.list(CollectionName.WATCHED)] == [21]


def test_json_file_storage_unreadable_file_is_empty(tmp_path):
	path = tmp_path / "store.json"
	path.write_text("garbage", encoding="utf-8")
	storage = JsonFileStorage(path)
	assert storage.get_item("cinevault_watchlist") is None
	storage.set_item("cinevault_theme", "light")
	assert json.loads(path.read_text(encoding="utf-8")) == {"cinevault_theme": "light"}


def test_malformed_fields_in_stored_entry_still_list():
	stored = [{"id": 5, "release_date": 1999, "poster_path": 42}]
	store, _ = make_store({"cinevault_watchlist": json.dumps(stored)})
	[entry] = store.list(CollectionName.WATCHLIST)
	assert entry.id == 5
	assert entry.release_date is None
	assert entry.poster_path is None


def test_counts_match_what_the_collection_lists():
	stored = [{"id": 1}, {"id": "abc"}, {"id": "2"}]
	store, _ = make_store({"cinevault_favorites": json.dumps(stored)})
	assert [m.id for m in store.list(CollectionName.FAVORITES)] == [1, 2]
	assert store.counts()[CollectionName.FAVORITES] == 2
