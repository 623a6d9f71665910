#!/usr/bin/env python3
"""CDK application entry point for the photo gallery."""

import logging
import os
import sys
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

import aws_cdk as cdk

from infrastructure.config import GalleryConfig
from infrastructure.errors import ConfigurationError, ProvisioningError
from infrastructure.stacks.gallery_stack import PhotoGalleryStack


def main() -> None:
  """Build the gallery stack from configuration and synthesize it."""
  logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
  app = cdk.App()

  config_path = Path(app.node.try_get_context("config") or "gallery.yaml")
  config = GalleryConfig.from_yaml(config_path) if config_path.exists() else GalleryConfig()

  try:
    PhotoGalleryStack(
      app,
      config.stack_name,
      gallery_config=config,
      env=cdk.Environment(
        account=os.environ.get("CDK_DEFAULT_ACCOUNT"),
        region=config.region,
      ),
      description="Photo gallery with listing API and CloudFront website",
    )
  except (ConfigurationError, ProvisioningError) as e:
    print(f"Error: {e}", file=sys.stderr)
    sys.exit(1)

  app.synth()


if __name__ == "__main__":
  main()
