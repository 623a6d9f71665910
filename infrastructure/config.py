"""Configuration loader for the photo gallery deployment."""

from dataclasses import dataclass
from pathlib import Path

import yaml
from aws_cdk import RemovalPolicy

PROJECT_ROOT = Path(__file__).parent.parent

REMOVAL_POLICIES = {
  "retain": RemovalPolicy.RETAIN,
  "destroy": RemovalPolicy.DESTROY,
  "snapshot": RemovalPolicy.SNAPSHOT,
}


@dataclass
class GalleryConfig:
  """Settings for one provisioning run, passed explicitly to every declare call."""

  stack_name: str = "PhotoGallery"
  region: str = "us-east-1"
  export_prefix: str = "MySimpleApp"
  photos_dir: Path = PROJECT_ROOT / "photos"
  site_dir: Path = PROJECT_ROOT / "frontend" / "build"
  function_dir: Path = PROJECT_ROOT / "functions" / "get_photos"
  api_name: str = "photo-api"
  bucket_env_var: str = "PHOTO_BUCKET_NAME"
  url_expiry_seconds: int = 3600
  powertools_layer_version: int = 7
  prune_deployments: bool = True
  removal_policy: RemovalPolicy = RemovalPolicy.RETAIN

  @classmethod
  def from_yaml(cls, path: Path | str = "gallery.yaml") -> "GalleryConfig":
    """Load configuration from YAML file.

    Relative directories are resolved against the directory holding the file.
    """
    path = Path(path)
    with open(path) as f:
      data = yaml.safe_load(f) or {}

    base = path.parent

    def directory(key: str, default: Path) -> Path:
      value = data.get(key)
      if value is None:
        return default
      return (base / value).resolve()

    removal_policy_str = str(data.get("removal_policy", "retain"))
    removal_policy = REMOVAL_POLICIES.get(removal_policy_str.lower(), RemovalPolicy.RETAIN)

    return cls(
      stack_name=data.get("stack_name", "PhotoGallery"),
      region=data.get("region", "us-east-1"),
      export_prefix=data.get("export_prefix", "MySimpleApp"),
      photos_dir=directory("photos_dir", PROJECT_ROOT / "photos"),
      site_dir=directory("site_dir", PROJECT_ROOT / "frontend" / "build"),
      function_dir=directory("function_dir", PROJECT_ROOT / "functions" / "get_photos"),
      api_name=data.get("api_name", "photo-api"),
      bucket_env_var=data.get("bucket_env_var", "PHOTO_BUCKET_NAME"),
      url_expiry_seconds=int(data.get("url_expiry_seconds", 3600)),
      powertools_layer_version=int(data.get("powertools_layer_version", 7)),
      prune_deployments=data.get("prune_deployments", True),
      removal_policy=removal_policy,
    )
