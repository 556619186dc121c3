"""
Error types for CineVault.
Every failure here is recoverable: callers log it and fall back to an empty result.
"""

from typing import Optional


class CineVaultError(Exception):
	"""Base class for all application errors."""


class RemoteFetchError(CineVaultError):
	"""
	A catalog request failed: network error, non-2xx status, or a body that is not a JSON object.
	Carries the endpoint path (never the full URL, which would include the API key).
	"""

	def __init__(self, endpoint: str, cause: Optional[BaseException] = None, detail: Optional[str] = None):
		self.endpoint = endpoint  # e.g. "/search/movie"
		self.cause = cause  # underlying exception, also chained as __cause__
		# the cause's own text may embed the request URL, so only its type is shown by default
		reason = detail or (type(cause).__name__ if cause is not None else "")
		super().__init__(f"Catalog request to {endpoint} failed" + (f": {reason}" if reason else ""))


class StorageParseError(CineVaultError):
	"""A persisted value could not be decoded. Readers treat it as an empty collection."""

	def __init__(self, key: str, cause: Optional[BaseException] = None):
		self.key = key
		self.cause = cause
		detail = f": {cause}" if cause is not None else ""
		super().__init__(f"Stored value under '{key}' is malformed{detail}")
