"""The photo gallery resource topology."""

from infrastructure.config import GalleryConfig
from infrastructure.graph import BucketAccess, BucketOptions, ResourceGraph

LISTING_HANDLER = "index.handler"
PHOTOS_ROUTE = "/getAllPhotos"


def build_gallery_graph(config: GalleryConfig) -> ResourceGraph:
  """Declare buckets, deployments, the listing function, its route and the CDN."""
  graph = ResourceGraph()

  photos = graph.declare_bucket("CDKTrainingBucket", BucketOptions(encrypted=True))
  graph.declare_deployment(
    config.photos_dir,
    photos,
    name="MySimpleAppPhotos",
    prune=config.prune_deployments,
  )

  website = graph.declare_bucket(
    "MySimpleAppWebsiteBucket",
    BucketOptions(encrypted=True, versioned=True, access=BucketAccess.IDENTITY_READ),
  )
  graph.declare_deployment(
    config.site_dir,
    website,
    name="MySimpleAppWebsiteDeployed",
    prune=config.prune_deployments,
  )

  list_bucket = graph.declare_policy(photos, ["ListBucket"])
  read_write_objects = graph.declare_policy(photos, ["GetObject", "PutObject"])

  listing = graph.declare_function(
    config.function_dir,
    LISTING_HANDLER,
    {
      config.bucket_env_var: photos.ref("bucket_name"),
      "URL_EXPIRY_SECONDS": str(config.url_expiry_seconds),
      "POWERTOOLS_SERVICE_NAME": "photo-gallery",
    },
    policies=[list_bucket, read_write_objects],
    name="MySimpleAppLambda",
  )

  route = graph.declare_route(PHOTOS_ROUTE, "GET", listing)
  distribution = graph.declare_distribution(website, name="MySimpleAppDistribution")

  prefix = config.export_prefix
  graph.export(f"{prefix}BucketName", photos.ref("bucket_name"), "Photo bucket name")
  graph.export(
    f"{prefix}WebsiteBucketName", website.ref("bucket_name"), "Website bucket name"
  )
  graph.export(
    f"{prefix}WebsiteURL", distribution.ref("url"), "CloudFront website URL"
  )
  graph.export(f"{prefix}Lambda", listing.ref("function_name"), "Listing function name")
  graph.export(f"{prefix}APIEndpoint", route.ref("api_url"), "HTTP API base URL")
  return graph
