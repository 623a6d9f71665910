"""CDK constructs for the photo gallery infrastructure."""

from .asset_deployment import AssetDeployment
from .distribution import CloudFrontDistribution
from .http_api import PhotoApi
from .listing_function import ListingFunction
from .storage import StorageBucket

__all__ = [
  "AssetDeployment",
  "CloudFrontDistribution",
  "ListingFunction",
  "PhotoApi",
  "StorageBucket",
]
