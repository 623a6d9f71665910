"""Client for the getAllPhotos route."""

import logging
from dataclasses import dataclass
from typing import Any

import requests

logger = logging.getLogger(__name__)

PHOTOS_PATH = "getAllPhotos"


class NetworkError(Exception):
  """The photo list could not be fetched or understood."""


@dataclass(frozen=True)
class PhotoRecord:
  filename: str
  url: str


def photos_url(api_base_url: str) -> str:
  return f"{api_base_url}{PHOTOS_PATH}"


def fetch_photos(api_base_url: str, session: Any = None) -> list[PhotoRecord]:
  """Fetch the photo list once, without retries.

  Raises:
    NetworkError: on connection failures, non-2xx responses or bad payloads.
  """
  http = session or requests
  url = photos_url(api_base_url)
  try:
    response = http.get(url)
    response.raise_for_status()
    payload = response.json()
  except (requests.RequestException, ValueError) as e:
    raise NetworkError(f"GET {url} failed: {e}") from e

  if not isinstance(payload, list):
    raise NetworkError(f"GET {url} returned {type(payload).__name__}, expected a list")
  try:
    return [PhotoRecord(filename=str(item["filename"]), url=str(item["url"])) for item in payload]
  except (KeyError, TypeError) as e:
    raise NetworkError(f"GET {url} returned a malformed photo record: {e}") from e


def load_photos(api_base_url: str, session: Any = None) -> list[PhotoRecord]:
  """Like fetch_photos, but an unreachable API yields an empty list."""
  try:
    return fetch_photos(api_base_url, session)
  except NetworkError as e:
    logger.warning("Showing an empty carousel: %s", e)
    return []
