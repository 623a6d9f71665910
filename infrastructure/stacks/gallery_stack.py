"""CDK stack for the photo gallery."""

import logging
from typing import Any

import aws_cdk as cdk
from constructs import Construct

from infrastructure.backend import CdkBackend
from infrastructure.config import GalleryConfig
from infrastructure.topology import build_gallery_graph

logger = logging.getLogger(__name__)


class PhotoGalleryStack(cdk.Stack):
  """Photo bucket, listing API, website bucket and CDN in one stack."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    gallery_config: GalleryConfig,
    **kwargs: Any,
  ) -> None:
    super().__init__(scope, id, **kwargs)

    self.graph = build_gallery_graph(gallery_config)
    self.backend = CdkBackend(self, gallery_config)
    self.exports = self.graph.apply(self.backend)
    logger.info(
      "Declared %d resources and %d exports in %s",
      len(self.graph.nodes),
      len(self.exports),
      id,
    )

    cdk.Tags.of(self).add("Project", "photo-gallery")
