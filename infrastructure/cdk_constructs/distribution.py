"""CloudFront distribution for the static website."""

from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk import aws_cloudfront_origins as origins
from aws_cdk import aws_s3 as s3
from constructs import Construct


class CloudFrontDistribution(Construct):
  """CloudFront distribution reading a private bucket through an origin access identity."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    bucket: s3.IBucket,
    default_root_object: str = "index.html",
  ) -> None:
    super().__init__(scope, id)

    self.origin_access_identity = cloudfront.OriginAccessIdentity(
      self,
      "OIA",
      comment="Created by CDK",
    )

    self.distribution = cloudfront.Distribution(
      self,
      "Distribution",
      default_behavior=cloudfront.BehaviorOptions(
        origin=origins.S3BucketOrigin.with_origin_access_identity(
          bucket,
          origin_access_identity=self.origin_access_identity,
        ),
        viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
        allowed_methods=cloudfront.AllowedMethods.ALLOW_GET_HEAD,
        cached_methods=cloudfront.CachedMethods.CACHE_GET_HEAD,
      ),
      default_root_object=default_root_object,
    )

  @property
  def url(self) -> str:
    return f"https://{self.distribution.distribution_domain_name}"
