"""Renders the carousel page into a deployable bundle directory."""

import shutil
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

from .config import SiteConfig
from .photos import PhotoRecord

PACKAGE_DIR = Path(__file__).parent
SCRIPT_NAME = "carousel.js"


def page_context(
  config: SiteConfig,
  *,
  photos: Iterable[PhotoRecord] = (),
  prefetched: bool = False,
  script_url: str = SCRIPT_NAME,
) -> dict[str, Any]:
  """Template variables shared by the static bundle and the preview server."""
  return {
    "title": config.title,
    "api_base_url": config.api_base_url,
    "interval_ms": config.slide_interval_ms,
    "photos": list(photos),
    "prefetched": prefetched,
    "script_url": script_url,
  }


class SiteBuilder:
  """Build the static site bundle with the API base URL baked in."""

  def __init__(self, config: SiteConfig) -> None:
    self.config = config
    self.templates_dir = PACKAGE_DIR / "templates"
    self.static_dir = PACKAGE_DIR / "static"

    self.jinja_env = Environment(
      loader=FileSystemLoader(str(self.templates_dir)),
      autoescape=True,
    )

  def render_index(self) -> str:
    template = self.jinja_env.get_template("index.html")
    return template.render(**page_context(self.config))

  def build(self, output_dir: Path | str) -> list[Path]:
    """Write index.html and the carousel script; return the written paths."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    index_path = output_dir / "index.html"
    index_path.write_text(self.render_index(), encoding="utf-8")

    script_path = output_dir / SCRIPT_NAME
    shutil.copyfile(self.static_dir / SCRIPT_NAME, script_path)
    return [index_path, script_path]
