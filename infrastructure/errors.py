"""Errors raised while building and applying the resource graph."""


class ConfigurationError(Exception):
  """The graph references an undeclared or misconfigured node."""


class ProvisioningError(Exception):
  """The provisioning backend rejected a resource."""

  def __init__(self, node_name: str, cause: BaseException) -> None:
    super().__init__(f"{node_name}: {cause}")
    self.node_name = node_name
    self.cause = cause
