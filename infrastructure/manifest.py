"""Local directory to bucket synchronization instructions."""

import hashlib
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
  from infrastructure.graph import ResourceNode


def iter_files(source_dir: Path) -> Iterator[Path]:
  """Yield every regular file under source_dir in a stable order."""
  for path in sorted(source_dir.rglob("*")):
    if path.is_file():
      yield path


def fingerprint_directory(source_dir: Path) -> str:
  """Hash relative paths and file contents of a directory tree.

  Two trees with the same files and bytes produce the same fingerprint no
  matter when or where they were written.
  """
  digest = hashlib.sha256()
  for path in iter_files(source_dir):
    digest.update(path.relative_to(source_dir).as_posix().encode("utf-8"))
    digest.update(b"\0")
    digest.update(path.read_bytes())
    digest.update(b"\0")
  return digest.hexdigest()


@dataclass(frozen=True)
class DeploymentEntry:
  """One source directory synchronized into one bucket."""

  source_dir: Path
  destination: "ResourceNode"
  fingerprint: str

  @property
  def file_count(self) -> int:
    return sum(1 for _ in iter_files(self.source_dir))


class DeploymentManifest:
  """Ordered list of deployments applied once per provisioning run."""

  def __init__(self) -> None:
    self._entries: list[DeploymentEntry] = []

  def add(self, source_dir: Path, destination: "ResourceNode") -> DeploymentEntry:
    entry = DeploymentEntry(
      source_dir=source_dir,
      destination=destination,
      fingerprint=fingerprint_directory(source_dir),
    )
    self._entries.append(entry)
    return entry

  def __iter__(self) -> Iterator[DeploymentEntry]:
    return iter(self._entries)

  def __len__(self) -> int:
    return len(self._entries)
