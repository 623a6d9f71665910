"""Resource graph for the photo gallery infrastructure.

Nodes are declared in any order that respects references, then applied to a
provisioning backend in topological order. A node's configuration may hold
other nodes or ``OutputRef`` values; every such reference becomes a
dependency edge.
"""

import heapq
import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

from infrastructure.errors import ConfigurationError, ProvisioningError
from infrastructure.manifest import DeploymentManifest

logger = logging.getLogger(__name__)

BUCKET_ACTIONS = frozenset({"s3:ListBucket"})
OBJECT_ACTIONS = frozenset({"s3:GetObject", "s3:PutObject"})
ALLOWED_ACTIONS = BUCKET_ACTIONS | OBJECT_ACTIONS

HTTP_METHODS = frozenset({"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"})


class ResourceKind(str, Enum):
  BUCKET = "bucket"
  DEPLOYMENT = "deployment"
  POLICY = "policy"
  FUNCTION = "function"
  ROUTE = "route"
  DISTRIBUTION = "distribution"


# Tie-break for nodes that become ready at the same time
KIND_RANK = {
  ResourceKind.BUCKET: 0,
  ResourceKind.DEPLOYMENT: 1,
  ResourceKind.POLICY: 1,
  ResourceKind.FUNCTION: 2,
  ResourceKind.ROUTE: 3,
  ResourceKind.DISTRIBUTION: 4,
}


class BucketAccess(str, Enum):
  """Public-access posture of a bucket."""

  PRIVATE = "private"
  IDENTITY_READ = "identity_read"
  PUBLIC_READ = "public_read"


@dataclass(frozen=True)
class BucketOptions:
  encrypted: bool = True
  versioned: bool = False
  access: BucketAccess = BucketAccess.PRIVATE


@dataclass(frozen=True)
class OutputRef:
  """Reference to an output a node only has after it is provisioned."""

  node: "ResourceNode"
  key: str

  def resolve(self) -> str:
    if self.node.outputs is None:
      raise ConfigurationError(
        f"{self.node.name} has not been provisioned; {self.key} is undefined"
      )
    if self.key not in self.node.outputs:
      raise ConfigurationError(f"{self.node.name} has no output named {self.key}")
    return self.node.outputs[self.key]


@dataclass(eq=False)
class ResourceNode:
  """A declared cloud resource."""

  name: str
  kind: ResourceKind
  config: dict[str, Any]
  depends_on: tuple["ResourceNode", ...] = ()
  outputs: dict[str, str] | None = None

  def ref(self, key: str) -> OutputRef:
    return OutputRef(self, key)

  @property
  def provisioned(self) -> bool:
    return self.outputs is not None

  def resolved_config(self) -> dict[str, Any]:
    """Config with every OutputRef replaced by its provisioned value."""
    return {key: _resolve(value) for key, value in self.config.items()}

  def __repr__(self) -> str:
    return f"ResourceNode({self.name!r}, {self.kind.value})"


@dataclass(frozen=True)
class PolicyStatement:
  """Least-privilege grant on a bucket or on its objects."""

  bucket: ResourceNode
  actions: frozenset[str]

  @property
  def object_level(self) -> bool:
    return self.actions <= OBJECT_ACTIONS

  @property
  def resource_arn_pattern(self) -> str:
    arn = self.bucket.ref("bucket_arn").resolve()
    return f"{arn}/*" if self.object_level else arn


@dataclass(frozen=True)
class Export:
  export_name: str
  ref: OutputRef
  description: str = ""


class Backend(Protocol):
  """Reconciles declared nodes with real infrastructure."""

  def materialize(self, node: ResourceNode, config: dict[str, Any]) -> dict[str, str]: ...

  def publish(self, export: Export, value: str) -> None: ...


def _resolve(value: Any) -> Any:
  if isinstance(value, OutputRef):
    return value.resolve()
  if isinstance(value, Mapping):
    return {k: _resolve(v) for k, v in value.items()}
  if isinstance(value, (list, tuple)):
    return type(value)(_resolve(v) for v in value)
  return value


def _references(value: Any) -> Iterable[ResourceNode]:
  if isinstance(value, ResourceNode):
    yield value
  elif isinstance(value, OutputRef):
    yield value.node
  elif isinstance(value, PolicyStatement):
    yield value.bucket
  elif isinstance(value, Mapping):
    for v in value.values():
      yield from _references(v)
  elif isinstance(value, (list, tuple)):
    for v in value:
      yield from _references(v)


def normalize_actions(actions: Iterable[str]) -> frozenset[str]:
  """Prefix bare action names with ``s3:`` and check them against the allow-list."""
  normalized = set()
  for action in actions:
    if "*" in action:
      raise ConfigurationError(f"Wildcard action {action!r} is not allowed")
    name = action if action.startswith("s3:") else f"s3:{action}"
    if name not in ALLOWED_ACTIONS:
      raise ConfigurationError(
        f"Action {action!r} is outside the allow-list {sorted(ALLOWED_ACTIONS)}"
      )
    normalized.add(name)
  if not normalized:
    raise ConfigurationError("A policy needs at least one action")
  if normalized & BUCKET_ACTIONS and normalized & OBJECT_ACTIONS:
    raise ConfigurationError(
      "Bucket-level and object-level actions need separate statements"
    )
  return frozenset(normalized)


def _pascal(text: str) -> str:
  return "".join(part[:1].upper() + part[1:] for part in re.split(r"[^0-9A-Za-z]+", text))


class ResourceGraph:
  """Declared resources, their dependency edges and named exports."""

  def __init__(self) -> None:
    self._nodes: dict[str, ResourceNode] = {}
    self._exports: dict[str, Export] = {}
    self.manifest = DeploymentManifest()

  @property
  def nodes(self) -> list[ResourceNode]:
    return list(self._nodes.values())

  @property
  def exports(self) -> list[Export]:
    return list(self._exports.values())

  def node(self, name: str) -> ResourceNode:
    try:
      return self._nodes[name]
    except KeyError:
      raise ConfigurationError(f"No resource named {name!r} has been declared") from None

  def _require(
    self, node: ResourceNode | str, kind: ResourceKind | None = None
  ) -> ResourceNode:
    """Return node if it was declared in this graph (and has the given kind)."""
    if isinstance(node, str):
      found = self.node(node)
    else:
      found = self._nodes.get(node.name)
      if found is not node:
        raise ConfigurationError(f"{node.name} was not declared in this graph")
    if kind is not None and found.kind != kind:
      raise ConfigurationError(f"{found.name} is a {found.kind.value}, not a {kind.value}")
    return found

  def _add(self, name: str, kind: ResourceKind, config: dict[str, Any]) -> ResourceNode:
    if not name:
      raise ConfigurationError(f"A {kind.value} needs a name")
    if name in self._nodes:
      raise ConfigurationError(f"A resource named {name!r} is already declared")

    depends_on: list[ResourceNode] = []
    for ref in _references(config):
      self._require(ref)
      if ref not in depends_on:
        depends_on.append(ref)

    node = ResourceNode(name=name, kind=kind, config=config, depends_on=tuple(depends_on))
    self._nodes[name] = node
    logger.debug("Declared %s %s depending on %s", kind.value, name, [d.name for d in depends_on])
    return node

  def declare_bucket(self, name: str, options: BucketOptions | None = None) -> ResourceNode:
    return self._add(name, ResourceKind.BUCKET, {"options": options or BucketOptions()})

  def declare_deployment(
    self,
    source_dir: Path | str,
    destination_bucket: ResourceNode | str,
    *,
    name: str | None = None,
    prune: bool = True,
  ) -> ResourceNode:
    """Synchronize a local directory into a bucket when the graph is applied."""
    bucket = self._require(destination_bucket, ResourceKind.BUCKET)
    source = Path(source_dir)
    if not source.is_dir():
      raise ConfigurationError(f"Deployment source {source} does not exist")

    node = self._add(
      name or f"{bucket.name}Deployment",
      ResourceKind.DEPLOYMENT,
      {"source_dir": source, "bucket": bucket, "prune": prune},
    )
    entry = self.manifest.add(source, bucket)
    node.config["fingerprint"] = entry.fingerprint
    return node

  def declare_policy(
    self,
    resource: ResourceNode | str,
    actions: Iterable[str],
    *,
    name: str | None = None,
  ) -> ResourceNode:
    """Declare a statement to attach to a function's execution role.

    ``s3:ListBucket`` applies to the bucket itself, ``s3:GetObject`` and
    ``s3:PutObject`` to the objects in it.
    """
    bucket = self._require(resource, ResourceKind.BUCKET)
    statement = PolicyStatement(bucket=bucket, actions=normalize_actions(actions))
    suffix = "ObjectsPolicy" if statement.object_level else "Policy"
    return self._add(name or f"{bucket.name}{suffix}", ResourceKind.POLICY, {"statement": statement})

  def declare_function(
    self,
    entry_point: Path | str,
    handler_name: str,
    env: Mapping[str, str | OutputRef] | None = None,
    *,
    policies: Iterable[ResourceNode | str] = (),
    name: str | None = None,
  ) -> ResourceNode:
    """Declare a function whose code lives in the entry_point directory.

    Args:
      entry_point: Directory holding the handler module.
      handler_name: Handler in ``module.function`` form.
      env: Execution environment; values may reference other nodes.
      policies: Policy nodes attached to the execution role.
      name: Node name, derived from the entry point when omitted.
    """
    code_path = Path(entry_point)
    if not code_path.is_dir():
      raise ConfigurationError(f"Function entry point {code_path} does not exist")
    if "." not in handler_name:
      raise ConfigurationError(f"Handler {handler_name!r} must be module.function")

    attached = [self._require(p, ResourceKind.POLICY) for p in policies]
    return self._add(
      name or f"{_pascal(code_path.name)}Function",
      ResourceKind.FUNCTION,
      {
        "code_path": code_path,
        "handler": handler_name,
        "environment": dict(env or {}),
        "policies": attached,
      },
    )

  def declare_route(
    self,
    path: str,
    method: str,
    target_function: ResourceNode | str,
    *,
    name: str | None = None,
  ) -> ResourceNode:
    """Bind an HTTP path and method to a function, readable from any origin."""
    function = self._require(target_function, ResourceKind.FUNCTION)
    method = method.upper()
    if method not in HTTP_METHODS:
      raise ConfigurationError(f"Unsupported HTTP method {method!r}")
    if not path.startswith("/"):
      raise ConfigurationError(f"Route path {path!r} must start with '/'")

    return self._add(
      name or f"{_pascal(path)}Route",
      ResourceKind.ROUTE,
      {
        "path": path,
        "method": method,
        "function": function,
        "cors": {"allow_origins": ["*"], "allow_methods": [method]},
      },
    )

  def declare_distribution(
    self, source_bucket: ResourceNode | str, *, name: str | None = None
  ) -> ResourceNode:
    """Serve a bucket through the CDN with a restricted read identity."""
    bucket = self._require(source_bucket, ResourceKind.BUCKET)
    access = bucket.config["options"].access
    if access != BucketAccess.IDENTITY_READ:
      raise ConfigurationError(
        f"{bucket.name} must be readable through an access identity, not {access.value}"
      )
    return self._add(
      name or f"{bucket.name}Distribution",
      ResourceKind.DISTRIBUTION,
      {"bucket": bucket, "default_root_object": "index.html"},
    )

  def export(self, export_name: str, ref: OutputRef, description: str = "") -> Export:
    self._require(ref.node)
    if export_name in self._exports:
      raise ConfigurationError(f"Export {export_name!r} is already declared")
    export = Export(export_name=export_name, ref=ref, description=description)
    self._exports[export_name] = export
    return export

  def policy_statements(self) -> list[PolicyStatement]:
    return [
      n.config["statement"] for n in self._nodes.values() if n.kind == ResourceKind.POLICY
    ]

  def topological_order(self) -> list[ResourceNode]:
    """Order nodes so each one comes after everything it depends on."""
    position = {name: i for i, name in enumerate(self._nodes)}
    pending = {node.name: len(node.depends_on) for node in self._nodes.values()}
    dependents: dict[str, list[ResourceNode]] = {name: [] for name in self._nodes}
    for node in self._nodes.values():
      for dependency in node.depends_on:
        dependents[dependency.name].append(node)

    def key(node: ResourceNode) -> tuple[int, int, str]:
      return (KIND_RANK[node.kind], position[node.name], node.name)

    ready = [key(node) for node in self._nodes.values() if not node.depends_on]
    heapq.heapify(ready)

    order: list[ResourceNode] = []
    while ready:
      _, _, name = heapq.heappop(ready)
      node = self._nodes[name]
      order.append(node)
      for dependent in dependents[name]:
        pending[dependent.name] -= 1
        if pending[dependent.name] == 0:
          heapq.heappush(ready, key(dependent))

    if len(order) != len(self._nodes):
      stuck = sorted(name for name, count in pending.items() if count)
      raise ConfigurationError(f"Dependency cycle between {stuck}")
    return order

  def validate(self) -> None:
    """Check graph-wide constraints before any backend call."""
    attached = {
      policy.name
      for node in self._nodes.values()
      if node.kind == ResourceKind.FUNCTION
      for policy in node.config["policies"]
    }
    for node in self._nodes.values():
      if node.kind == ResourceKind.POLICY and node.name not in attached:
        raise ConfigurationError(f"{node.name} is not attached to any function")

  def apply(self, backend: Backend) -> dict[str, str]:
    """Materialize every node in dependency order, then publish exports."""
    order = self.topological_order()
    self.validate()

    for node in order:
      config = node.resolved_config()
      logger.info("Provisioning %s %s", node.kind.value, node.name)
      try:
        outputs = backend.materialize(node, config)
      except ConfigurationError:
        raise
      except Exception as e:
        raise ProvisioningError(node.name, e) from e
      node.outputs = dict(outputs)

    return self.finalize_outputs(backend)

  def finalize_outputs(self, backend: Backend | None = None) -> dict[str, str]:
    """Resolve every export; publish them when a backend is given."""
    values: dict[str, str] = {}
    for export in self._exports.values():
      value = export.ref.resolve()
      if not value:
        raise ConfigurationError(f"Export {export.export_name} resolved to an empty value")
      values[export.export_name] = value

    if backend is not None:
      for export in self._exports.values():
        try:
          backend.publish(export, values[export.export_name])
        except Exception as e:
          raise ProvisioningError(export.export_name, e) from e
    return values

