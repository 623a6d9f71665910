#!/usr/bin/env python3
"""Build the carousel site bundle with the deployed API URL baked in."""

import argparse
import sys
from pathlib import Path

import boto3
from botocore.exceptions import BotoCoreError, ClientError

sys.path.insert(0, str(Path(__file__).parent.parent))

from gallery_site import SiteBuilder, SiteConfig
from gallery_site.config import DEFAULT_INTERVAL_MS

DEFAULT_OUTPUT = Path(__file__).parent.parent / "frontend" / "build"


def get_api_url(stack_name: str, export_name: str, region: str = "us-east-1") -> str:
  """Read the API endpoint from the stack's CloudFormation outputs.

  Args:
    stack_name: The deployed stack (e.g., 'PhotoGallery')
    export_name: Export holding the endpoint (e.g., 'MySimpleAppAPIEndpoint')
    region: AWS region

  Returns:
    The HTTP API base URL
  """
  cloudformation = boto3.client("cloudformation", region_name=region)
  response = cloudformation.describe_stacks(StackName=stack_name)

  for output in response["Stacks"][0].get("Outputs", []):
    if output.get("ExportName") == export_name:
      return str(output["OutputValue"])
  raise LookupError(f"Stack {stack_name} has no output exported as {export_name}")


def main() -> None:
  """Main entry point."""
  parser = argparse.ArgumentParser(description="Build the photo gallery site bundle")
  source = parser.add_mutually_exclusive_group(required=True)
  source.add_argument("--api-url", help="HTTP API base URL")
  source.add_argument("--stack-name", help="Read the API URL from this deployed stack")
  parser.add_argument(
    "--export-name",
    default="MySimpleAppAPIEndpoint",
    help="Stack export holding the API URL (default: MySimpleAppAPIEndpoint)",
  )
  parser.add_argument(
    "--region",
    default="us-east-1",
    help="AWS region (default: us-east-1)",
  )
  parser.add_argument(
    "--interval-ms",
    type=int,
    default=DEFAULT_INTERVAL_MS,
    help=f"Milliseconds per slide (default: {DEFAULT_INTERVAL_MS})",
  )
  parser.add_argument(
    "--output",
    type=Path,
    default=DEFAULT_OUTPUT,
    help="Bundle directory (default: frontend/build)",
  )

  args = parser.parse_args()

  api_url = args.api_url
  if api_url is None:
    try:
      api_url = get_api_url(args.stack_name, args.export_name, args.region)
    except (BotoCoreError, ClientError, LookupError) as e:
      print(f"Error reading stack outputs: {e}", file=sys.stderr)
      sys.exit(1)

  try:
    config = SiteConfig(api_base_url=api_url, slide_interval_ms=args.interval_ms)
  except ValueError as e:
    print(f"Error: {e}", file=sys.stderr)
    sys.exit(1)

  print(f"Building site for {config.api_base_url} into {args.output}...")
  for path in SiteBuilder(config).build(args.output):
    print(f"  Wrote: {path}")
  print("Done!")


if __name__ == "__main__":
  main()
