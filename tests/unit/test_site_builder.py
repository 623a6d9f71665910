"""Tests for the carousel site bundle and the photo list client."""

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
import requests

from gallery_site import NetworkError, PhotoRecord, SiteBuilder, SiteConfig, fetch_photos, load_photos
from gallery_site.builder import page_context
from gallery_site.photos import photos_url

API_URL = "https://abc123.execute-api.us-east-1.amazonaws.com"


def mock_session(payload: Any = None, error: Exception | None = None, status: int = 200) -> MagicMock:
  """Session whose get() returns payload, or raises error."""
  session = MagicMock()
  if error is not None:
    session.get.side_effect = error
    return session

  response = MagicMock()
  response.status_code = status
  response.json.return_value = payload
  if status >= 400:
    response.raise_for_status.side_effect = requests.HTTPError(f"{status} Server Error")
  session.get.return_value = response
  return session


class TestSiteConfig:
  """Tests for SiteConfig."""

  def test_defaults(self) -> None:
    config = SiteConfig(api_base_url=API_URL)

    assert config.slide_interval_ms == 1000
    assert config.title == "Photo Gallery"

  def test_adds_trailing_slash(self) -> None:
    assert SiteConfig(api_base_url=API_URL).api_base_url == API_URL + "/"
    assert SiteConfig(api_base_url=API_URL + "/").api_base_url == API_URL + "/"

  def test_rejects_relative_url(self) -> None:
    with pytest.raises(ValueError, match="absolute"):
      SiteConfig(api_base_url="/getAllPhotos")

  def test_rejects_non_positive_interval(self) -> None:
    with pytest.raises(ValueError, match="positive"):
      SiteConfig(api_base_url=API_URL, slide_interval_ms=0)

  def test_from_env(self) -> None:
    config = SiteConfig.from_env({"GALLERY_API_URL": API_URL, "GALLERY_SLIDE_INTERVAL_MS": "2500"})

    assert config.api_base_url == API_URL + "/"
    assert config.slide_interval_ms == 2500

  def test_from_env_requires_url(self) -> None:
    with pytest.raises(ValueError, match="GALLERY_API_URL"):
      SiteConfig.from_env({})


class TestSiteBuilder:
  """Tests for SiteBuilder."""

  @pytest.fixture
  def builder(self) -> SiteBuilder:
    return SiteBuilder(SiteConfig(api_base_url=API_URL))

  def test_api_url_is_baked_in(self, builder: SiteBuilder) -> None:
    html = builder.render_index()

    assert f'data-api-base="{API_URL}/"' in html
    assert 'data-interval="1000"' in html
    assert 'data-prefetched="false"' in html

  def test_static_bundle_starts_empty(self, builder: SiteBuilder) -> None:
    """Slides are rendered by the browser after it fetches the list."""
    html = builder.render_index()

    assert "carousel-item" not in html.split('id="carousel"', 1)[1].split("</div>", 1)[0]
    assert '<script src="carousel.js"></script>' in html

  def test_build_writes_bundle(self, builder: SiteBuilder, tmp_path: Path) -> None:
    output = tmp_path / "frontend" / "build"

    written = builder.build(output)

    assert written == [output / "index.html", output / "carousel.js"]
    assert all(path.is_file() for path in written)
    assert "<title>Photo Gallery</title>" in (output / "index.html").read_text()

  def test_script_fetches_photo_route(self, builder: SiteBuilder, tmp_path: Path) -> None:
    builder.build(tmp_path)
    script = (tmp_path / "carousel.js").read_text()

    assert '"getAllPhotos"' in script
    assert "setInterval" in script
    # A failed fetch still renders an (empty) carousel
    assert "render([])" in script

  def test_title_is_escaped(self, tmp_path: Path) -> None:
    builder = SiteBuilder(SiteConfig(api_base_url=API_URL, title="<b>Trip</b>"))

    assert "&lt;b&gt;Trip&lt;/b&gt;" in builder.render_index()


class TestPageContext:
  """Tests for page_context."""

  def test_slides_follow_photo_order(self) -> None:
    photos = [PhotoRecord("a.jpg", "https://s3/a.jpg"), PhotoRecord("b.png", "https://s3/b.png")]
    builder = SiteBuilder(SiteConfig(api_base_url=API_URL))

    template = builder.jinja_env.get_template("index.html")
    html = template.render(**page_context(builder.config, photos=photos, prefetched=True))

    assert html.count('class="carousel-item') == 2
    assert html.count("carousel-item active") == 1
    assert html.index('alt="a.jpg"') < html.index('alt="b.png"')
    assert "<h3>b.png</h3>" in html
    assert 'data-prefetched="true"' in html


class TestFetchPhotos:
  """Tests for fetch_photos and load_photos."""

  def test_photos_url(self) -> None:
    assert photos_url(API_URL + "/") == API_URL + "/getAllPhotos"

  def test_returns_records(self) -> None:
    session = mock_session(
      [
        {"filename": "a.jpg", "url": "https://s3/a.jpg?sig=1"},
        {"filename": "b.png", "url": "https://s3/b.png?sig=2"},
      ]
    )

    photos = fetch_photos(API_URL + "/", session)

    assert photos == [
      PhotoRecord("a.jpg", "https://s3/a.jpg?sig=1"),
      PhotoRecord("b.png", "https://s3/b.png?sig=2"),
    ]
    session.get.assert_called_once_with(API_URL + "/getAllPhotos")

  def test_empty_list(self) -> None:
    assert fetch_photos(API_URL + "/", mock_session([])) == []

  def test_connection_error(self) -> None:
    session = mock_session(error=requests.ConnectionError("Name or service not known"))

    with pytest.raises(NetworkError, match="getAllPhotos"):
      fetch_photos(API_URL + "/", session)

  def test_server_error(self) -> None:
    with pytest.raises(NetworkError, match="502"):
      fetch_photos(API_URL + "/", mock_session({"error": "boom"}, status=502))

  def test_error_object_is_not_a_list(self) -> None:
    with pytest.raises(NetworkError, match="expected a list"):
      fetch_photos(API_URL + "/", mock_session({"error": "boom"}))

  def test_malformed_record(self) -> None:
    with pytest.raises(NetworkError, match="malformed"):
      fetch_photos(API_URL + "/", mock_session([{"filename": "a.jpg"}]))

  def test_load_photos_falls_back_to_empty(self) -> None:
    session = mock_session(error=requests.ConnectionError("refused"))

    assert load_photos(API_URL + "/", session) == []
    assert session.get.call_count == 1
