"""Pytest fixtures for CDK construct and graph tests."""

from pathlib import Path

import aws_cdk as cdk
import pytest

from infrastructure.config import GalleryConfig

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def app() -> cdk.App:
  """Create a CDK App for testing."""
  return cdk.App()


@pytest.fixture
def stack(app: cdk.App) -> cdk.Stack:
  """Create a CDK Stack for testing."""
  return cdk.Stack(app, "TestStack", env=cdk.Environment(region="us-east-1"))


@pytest.fixture
def photos_dir(tmp_path: Path) -> Path:
  """Directory with two photos."""
  path = tmp_path / "photos"
  path.mkdir()
  (path / "a.jpg").write_bytes(b"\xff\xd8jpeg-a")
  (path / "b.png").write_bytes(b"\x89PNGpng-b")
  return path


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
  """Directory standing in for a built site bundle."""
  path = tmp_path / "build"
  path.mkdir()
  (path / "index.html").write_text("<html></html>")
  return path


@pytest.fixture
def gallery_config(photos_dir: Path, site_dir: Path) -> GalleryConfig:
  """Configuration pointing at temporary asset directories."""
  return GalleryConfig(
    photos_dir=photos_dir,
    site_dir=site_dir,
    function_dir=PROJECT_ROOT / "functions" / "get_photos",
  )
