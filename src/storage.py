"""
Key-value storage backends.
Values are plain strings under string keys, the same contract as a browser's localStorage,
so the collection store can stay agnostic of where data actually lives.
"""

import json  # file format of JsonFileStorage
from pathlib import Path  # filesystem-safe paths
from typing import Dict, Optional, Protocol  # type hints

from loguru import logger  # console logging


class KeyValueStorage(Protocol):
	def get_item(self, key: str) -> Optional[str]: ...

	def set_item(self, key: str, value: str) -> None: ...

	def remove_item(self, key: str) -> None: ...


class MemoryStorage:
	"""Process-local storage; used by tests and as a scratch backend."""

	def __init__(self, initial: Optional[Dict[str, str]] = None):
		self._data: Dict[str, str] = dict(initial or {})

	def get_item(self, key: str) -> Optional[str]:
		return self._data.get(key)

	def set_item(self, key: str, value: str) -> None:
		self._data[key] = str(value)

	def remove_item(self, key: str) -> None:
		self._data.pop(key, None)


class JsonFileStorage:
	"""
	Storage persisted as one JSON object on disk: {"key": "string value", ...}.
	A missing or unreadable file reads as empty; every write rewrites the whole file.
	"""

	def __init__(self, path: Path):
		self.path = Path(path)  # JSON file holding every key

	def _read_all(self) -> Dict[str, str]:
		if not self.path.exists():
			return {}
		try:
			raw = json.loads(self.path.read_text(encoding="utf-8"))
		except (OSError, json.JSONDecodeError) as e:
			logger.warning(f"[Storage] Ignoring unreadable storage file {self.path}: {e}")
			return {}
		if not isinstance(raw, dict):
			logger.warning(f"[Storage] Ignoring storage file {self.path}: top level is not an object")
			return {}
		# Non-string values are kept as their JSON text so readers see what was there
		return {str(k): v if isinstance(v, str) else json.dumps(v) for k, v in raw.items()}

	def _write_all(self, data: Dict[str, str]) -> None:
		self.path.parent.mkdir(parents=True, exist_ok=True)
		tmp = self.path.with_suffix(self.path.suffix + ".tmp")
		tmp.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
		tmp.replace(self.path)  # atomic swap so a crash never leaves half a file

	def get_item(self, key: str) -> Optional[str]:
		return self._read_all().get(key)

	def set_item(self, key: str, value: str) -> None:
		data = self._read_all()  # whole file, re-read each time
		data[key] = str(value)
		self._write_all(data)
		logger.debug(f"[Storage] Wrote key '{key}' to {self.path}")

	def remove_item(self, key: str) -> None:
		data = self._read_all()
		if data.pop(key, None) is not None:
			self._write_all(data)
