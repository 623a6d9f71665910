"""S3 buckets for photos and the compiled site."""

from aws_cdk import RemovalPolicy
from aws_cdk import aws_s3 as s3
from constructs import Construct


class StorageBucket(Construct):
  """S3 bucket with optional encryption, versioning and public read."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    encrypted: bool = True,
    versioned: bool = False,
    public_read: bool = False,
    removal_policy: RemovalPolicy = RemovalPolicy.RETAIN,
  ) -> None:
    super().__init__(scope, id)

    if public_read:
      block_public_access = s3.BlockPublicAccess(
        block_public_acls=False,
        ignore_public_acls=False,
        block_public_policy=False,
        restrict_public_buckets=False,
      )
    else:
      block_public_access = s3.BlockPublicAccess.BLOCK_ALL

    self.bucket = s3.Bucket(
      self,
      "Bucket",
      encryption=s3.BucketEncryption.S3_MANAGED if encrypted else s3.BucketEncryption.UNENCRYPTED,
      versioned=versioned,
      public_read_access=public_read,
      block_public_access=block_public_access,
      removal_policy=removal_policy,
      auto_delete_objects=removal_policy == RemovalPolicy.DESTROY,
    )
