"""Static carousel site and local preview server for the photo gallery."""

from .builder import SiteBuilder
from .config import SiteConfig
from .photos import NetworkError, PhotoRecord, fetch_photos, load_photos

__all__ = [
  "NetworkError",
  "PhotoRecord",
  "SiteBuilder",
  "SiteConfig",
  "fetch_photos",
  "load_photos",
]
