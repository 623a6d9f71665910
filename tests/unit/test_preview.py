"""Tests for the Flask preview server."""

from collections.abc import Iterator
from unittest.mock import patch

import pytest
import requests
from flask.testing import FlaskClient

from gallery_site import PhotoRecord
from gallery_site.preview import app

API_URL = "https://abc123.execute-api.us-east-1.amazonaws.com/"


@pytest.fixture
def client() -> Iterator[FlaskClient]:
  """Test client pointed at a fake API."""
  app.config["TESTING"] = True
  app.config["GALLERY_API_URL"] = API_URL
  app.config["SLIDE_INTERVAL_MS"] = 1000
  with app.test_client() as client:
    yield client


class TestPreviewIndex:
  """Tests for the / route."""

  def test_renders_fetched_photos(self, client: FlaskClient) -> None:
    photos = [PhotoRecord("a.jpg", "https://s3/a.jpg"), PhotoRecord("b.png", "https://s3/b.png")]
    with patch("gallery_site.preview.load_photos", return_value=photos) as load:
      response = client.get("/")

    load.assert_called_once_with(API_URL)
    html = response.get_data(as_text=True)
    assert response.status_code == 200
    assert html.count('class="carousel-item') == 2
    assert 'src="https://s3/a.jpg"' in html
    assert 'data-prefetched="true"' in html
    assert "/static/carousel.js" in html

  def test_unreachable_api_renders_empty_carousel(self, client: FlaskClient) -> None:
    with patch("gallery_site.photos.requests.get", side_effect=requests.ConnectionError("refused")):
      response = client.get("/")

    assert response.status_code == 200
    assert 'class="carousel-item' not in response.get_data(as_text=True)

  def test_unconfigured(self, client: FlaskClient) -> None:
    app.config["GALLERY_API_URL"] = ""

    response = client.get("/")

    assert response.status_code == 500
    assert response.mimetype == "text/plain"
    assert "not configured" in response.get_data(as_text=True)

  def test_serves_script(self, client: FlaskClient) -> None:
    response = client.get("/static/carousel.js")

    assert response.status_code == 200
    assert b"getAllPhotos" in response.data
    response.close()
