"""Asset deployment of a local directory into an S3 bucket."""

from pathlib import Path

from aws_cdk import aws_s3 as s3
from aws_cdk import aws_s3_deployment as s3_deploy
from constructs import Construct


class AssetDeployment(Construct):
  """Uploads a directory tree to a bucket during deployment.

  The directory is packaged as a CDK asset keyed by its content hash, so an
  unchanged directory does not trigger a new upload.
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    source_dir: Path,
    bucket: s3.IBucket,
    prune: bool = True,
  ) -> None:
    super().__init__(scope, id)

    self.deployment = s3_deploy.BucketDeployment(
      self,
      "Deployment",
      sources=[s3_deploy.Source.asset(str(source_dir))],
      destination_bucket=bucket,
      prune=prune,
    )
