"""Lambda handler listing every photo in the bucket named by PHOTO_BUCKET_NAME."""

import json
import os
from typing import Any

import boto3
from aws_lambda_powertools import Logger
from aws_lambda_powertools.utilities.typing import LambdaContext
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

BUCKET_ENV_VAR = "PHOTO_BUCKET_NAME"
DEFAULT_URL_EXPIRY = 3600

logger = Logger(service=os.getenv("POWERTOOLS_SERVICE_NAME", "photo-gallery"))

s3 = boto3.client("s3", config=Config(signature_version="s3v4"))


class StorageReadError(Exception):
  """The bucket could not be enumerated."""


def _response(status_code: int, body: Any) -> dict[str, Any]:
  return {
    "statusCode": status_code,
    "headers": {
      "Content-Type": "application/json",
      "Access-Control-Allow-Origin": "*",
    },
    "body": json.dumps(body),
  }


def list_photos(bucket: str, s3_client: Any, expires_in: int = DEFAULT_URL_EXPIRY) -> list[dict[str, str]]:
  """Return one {filename, url} record per object, in listing order.

  Raises:
    StorageReadError: if any page of the listing or any URL fails.
  """
  photos: list[dict[str, str]] = []
  try:
    paginator = s3_client.get_paginator("list_objects_v2")
    for page in paginator.paginate(Bucket=bucket):
      for obj in page.get("Contents", []):
        key = obj["Key"]
        url = s3_client.generate_presigned_url(
          "get_object",
          Params={"Bucket": bucket, "Key": key},
          ExpiresIn=expires_in,
        )
        photos.append({"filename": key.rsplit("/", 1)[-1], "url": url})
  except (ClientError, BotoCoreError) as e:
    raise StorageReadError(f"Could not list bucket {bucket}: {e}") from e
  return photos


@logger.inject_lambda_context
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
  bucket = os.environ.get(BUCKET_ENV_VAR)
  if not bucket:
    logger.error(f"{BUCKET_ENV_VAR} is not set")
    return _response(500, {"error": "Photo bucket is not configured"})

  expires_in = int(os.environ.get("URL_EXPIRY_SECONDS", DEFAULT_URL_EXPIRY))

  try:
    photos = list_photos(bucket, s3, expires_in)
  except StorageReadError as e:
    logger.exception("Listing failed")
    return _response(502, {"error": str(e)})

  logger.info(f"Listed {len(photos)} photos from {bucket}")
  return _response(200, photos)
