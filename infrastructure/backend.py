"""CDK provisioning backend for the resource graph."""

from typing import Any

from aws_cdk import CfnOutput
from aws_cdk import aws_iam as iam
from aws_cdk import aws_lambda as lambda_
from aws_cdk import aws_s3 as s3
from constructs import Construct

from infrastructure.cdk_constructs import (
  AssetDeployment,
  CloudFrontDistribution,
  ListingFunction,
  PhotoApi,
  StorageBucket,
)
from infrastructure.config import GalleryConfig
from infrastructure.errors import ConfigurationError
from infrastructure.graph import BucketAccess, Export, ResourceKind, ResourceNode


class CdkBackend:
  """Creates one construct per node inside a stack and returns its outputs.

  Output values are CDK tokens; CloudFormation fills them in at deploy time.
  """

  def __init__(self, scope: Construct, config: GalleryConfig) -> None:
    self.scope = scope
    self.config = config
    self.api: PhotoApi | None = None
    self.api_methods: list[str] = []
    self.outputs: dict[str, CfnOutput] = {}
    self._buckets: dict[str, s3.IBucket] = {}
    self._statements: dict[str, iam.PolicyStatement] = {}
    self._functions: dict[str, lambda_.IFunction] = {}

  def materialize(self, node: ResourceNode, config: dict[str, Any]) -> dict[str, str]:
    handlers = {
      ResourceKind.BUCKET: self._bucket,
      ResourceKind.DEPLOYMENT: self._deployment,
      ResourceKind.POLICY: self._policy,
      ResourceKind.FUNCTION: self._function,
      ResourceKind.ROUTE: self._route,
      ResourceKind.DISTRIBUTION: self._distribution,
    }
    return handlers[node.kind](node, config)

  def publish(self, export: Export, value: str) -> None:
    self.outputs[export.export_name] = CfnOutput(
      self.scope,
      f"{export.export_name}Export",
      value=value,
      export_name=export.export_name,
      description=export.description or None,
    )

  def _bucket(self, node: ResourceNode, config: dict[str, Any]) -> dict[str, str]:
    options = config["options"]
    storage = StorageBucket(
      self.scope,
      node.name,
      encrypted=options.encrypted,
      versioned=options.versioned,
      public_read=options.access == BucketAccess.PUBLIC_READ,
      removal_policy=self.config.removal_policy,
    )
    self._buckets[node.name] = storage.bucket
    return {
      "bucket_name": storage.bucket.bucket_name,
      "bucket_arn": storage.bucket.bucket_arn,
    }

  def _deployment(self, node: ResourceNode, config: dict[str, Any]) -> dict[str, str]:
    AssetDeployment(
      self.scope,
      node.name,
      source_dir=config["source_dir"],
      bucket=self._buckets[config["bucket"].name],
      prune=config["prune"],
    )
    return {"source_dir": str(config["source_dir"]), "fingerprint": config["fingerprint"]}

  def _policy(self, node: ResourceNode, config: dict[str, Any]) -> dict[str, str]:
    statement = config["statement"]
    resource = statement.resource_arn_pattern
    self._statements[node.name] = iam.PolicyStatement(
      actions=sorted(statement.actions),
      resources=[resource],
    )
    return {"resource": resource, "actions": ",".join(sorted(statement.actions))}

  def _function(self, node: ResourceNode, config: dict[str, Any]) -> dict[str, str]:
    listing = ListingFunction(
      self.scope,
      node.name,
      code_path=config["code_path"],
      handler=config["handler"],
      environment=config["environment"],
      statements=[self._statements[p.name] for p in config["policies"]],
      powertools_layer_version=self.config.powertools_layer_version,
    )
    self._functions[node.name] = listing.function
    return {
      "function_name": listing.function.function_name,
      "function_arn": listing.function.function_arn,
    }

  def _route(self, node: ResourceNode, config: dict[str, Any]) -> dict[str, str]:
    cors = config["cors"]
    if self.api is None:
      self.api = PhotoApi(
        self.scope,
        "MySimpleAppHTTPAPI",
        api_name=self.config.api_name,
        allow_origins=cors["allow_origins"],
        allow_methods=cors["allow_methods"],
      )
    elif cors["allow_methods"] != self.api_methods:
      raise ConfigurationError(f"{node.name} needs CORS methods the HTTP API does not allow")
    self.api_methods = cors["allow_methods"]

    self.api.add_route(
      node.name,
      path=config["path"],
      method=config["method"],
      function=self._functions[config["function"].name],
    )
    return {
      "api_url": self.api.url,
      "api_id": self.api.api.api_id,
      "route_key": f"{config['method']} {config['path']}",
    }

  def _distribution(self, node: ResourceNode, config: dict[str, Any]) -> dict[str, str]:
    cdn = CloudFrontDistribution(
      self.scope,
      node.name,
      bucket=self._buckets[config["bucket"].name],
      default_root_object=config["default_root_object"],
    )
    return {
      "url": cdn.url,
      "domain_name": cdn.distribution.distribution_domain_name,
      "distribution_id": cdn.distribution.distribution_id,
    }
