"""HTTP API fronting the listing function."""

from aws_cdk import aws_apigatewayv2 as apigwv2
from aws_cdk import aws_apigatewayv2_integrations as integrations
from aws_cdk import aws_lambda as lambda_
from constructs import Construct


class PhotoApi(Construct):
  """API Gateway HTTP API with a default stage and CORS preflight."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    api_name: str,
    allow_origins: list[str],
    allow_methods: list[str],
  ) -> None:
    super().__init__(scope, id)

    self.api = apigwv2.HttpApi(
      self,
      "HttpApi",
      api_name=api_name,
      create_default_stage=True,
      cors_preflight=apigwv2.CorsPreflightOptions(
        allow_origins=allow_origins,
        allow_methods=[apigwv2.CorsHttpMethod[m] for m in allow_methods],
      ),
    )

  def add_route(self, id: str, *, path: str, method: str, function: lambda_.IFunction) -> None:
    """Route one path and method to a function through a Lambda proxy integration."""
    self.api.add_routes(
      path=path,
      methods=[apigwv2.HttpMethod[method]],
      integration=integrations.HttpLambdaIntegration(f"{id}Integration", function),
    )

  @property
  def url(self) -> str:
    # Default stage URL, always ends with "/"
    return self.api.url or self.api.api_endpoint + "/"
