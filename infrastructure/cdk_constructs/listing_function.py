"""Lambda function that lists the photo bucket."""

from pathlib import Path

from aws_cdk import Duration, Stack
from aws_cdk import aws_iam as iam
from aws_cdk import aws_lambda as lambda_
from constructs import Construct

POWERTOOLS_ACCOUNT = "017000801446"


class ListingFunction(Construct):
  """Python Lambda with Powertools logging and an explicit set of role statements."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    code_path: Path,
    handler: str,
    environment: dict[str, str],
    statements: list[iam.PolicyStatement],
    powertools_layer_version: int = 7,
    timeout: Duration = Duration.seconds(10),
  ) -> None:
    super().__init__(scope, id)

    region = Stack.of(self).region
    powertools_layer = lambda_.LayerVersion.from_layer_version_arn(
      self,
      "PowertoolsLayer",
      f"arn:aws:lambda:{region}:{POWERTOOLS_ACCOUNT}:layer:"
      f"AWSLambdaPowertoolsPythonV3-python312-x86_64:{powertools_layer_version}",
    )

    self.function = lambda_.Function(
      self,
      "Function",
      runtime=lambda_.Runtime.PYTHON_3_12,
      handler=handler,
      code=lambda_.Code.from_asset(str(code_path)),
      environment=environment,
      initial_policy=statements,
      layers=[powertools_layer],
      timeout=timeout,
    )
