"""Build-time configuration for the carousel site."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

API_URL_ENV_VAR = "GALLERY_API_URL"
INTERVAL_ENV_VAR = "GALLERY_SLIDE_INTERVAL_MS"
DEFAULT_INTERVAL_MS = 1000


@dataclass(frozen=True)
class SiteConfig:
  """Values baked into the site bundle when it is built."""

  api_base_url: str
  slide_interval_ms: int = DEFAULT_INTERVAL_MS
  title: str = "Photo Gallery"

  def __post_init__(self) -> None:
    if not self.api_base_url.startswith(("https://", "http://")):
      raise ValueError(f"API base URL must be absolute, got {self.api_base_url!r}")
    if self.slide_interval_ms <= 0:
      raise ValueError("Slide interval must be positive")
    # Routes are appended to the base, so it always ends with "/"
    if not self.api_base_url.endswith("/"):
      object.__setattr__(self, "api_base_url", self.api_base_url + "/")

  @classmethod
  def from_env(cls, environ: Mapping[str, str] | None = None) -> "SiteConfig":
    """Read GALLERY_API_URL and GALLERY_SLIDE_INTERVAL_MS."""
    environ = os.environ if environ is None else environ
    api_base_url = environ.get(API_URL_ENV_VAR, "")
    if not api_base_url:
      raise ValueError(f"{API_URL_ENV_VAR} is not set")
    return cls(
      api_base_url=api_base_url,
      slide_interval_ms=int(environ.get(INTERVAL_ENV_VAR, DEFAULT_INTERVAL_MS)),
    )
