import json
from collections.abc import Iterator, Mapping
from enum import IntEnum
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from tsgql import log
from tsgql.ast import Module, TypeNode, TypeReference
from tsgql.errors import ErrorMessages, ManifestError

INPUT_MARKER = "Input"


class GraphQLKind(IntEnum):
    """GraphQL kind of a declared type name. Values match the serialized manifest."""

    OBJECT = 0
    INPUT = 1
    ENUM = 2


class Manifest(Mapping[str, GraphQLKind]):
    """Read-only classification of declared type names into GraphQL kinds."""

    def __init__(self, kinds: Mapping[str, GraphQLKind] | None = None) -> None:
        self._kinds: Mapping[str, GraphQLKind] = MappingProxyType(dict(kinds or {}))

    def classify(self, name: str) -> GraphQLKind | None:
        """Return the kind of `name`, or None if the manifest does not know it."""
        return self._kinds.get(name)

    def __getitem__(self, name: str) -> GraphQLKind:
        return self._kinds[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._kinds)

    def __len__(self) -> int:
        return len(self._kinds)

    def __repr__(self) -> str:
        entries = ", ".join(f"{name}: {kind.name}" for name, kind in self._kinds.items())
        return f"Manifest({{{entries}}})"

    @classmethod
    def from_raw(cls, raw: Mapping[Any, Any]) -> "Manifest":
        """
        Build a manifest from its serialized form, e.g. `{"User": 0, "UserInput": 1}`.

        Kinds may be given as integers (0 = Object, 1 = Input, 2 = Enum) or as
        kind names ("object", "input", "enum").

        Args:
            raw: Mapping of type name to kind tag

        Returns:
            The manifest

        Raises:
            ManifestError: If a name is not a string or a tag is not a known kind
        """
        kinds: dict[str, GraphQLKind] = {}
        for name, tag in raw.items():
            if not isinstance(name, str):
                raise ManifestError(f"Manifest keys must be type names, got {name!r}")
            kinds[name] = _parse_kind(name, tag)
        return cls(kinds)

    def to_raw(self) -> dict[str, int]:
        """Serialize the manifest to its integer-tagged form."""
        return {name: int(kind) for name, kind in self._kinds.items()}


def _parse_kind(name: str, tag: Any) -> GraphQLKind:
    if isinstance(tag, bool):
        raise ManifestError(f"{ErrorMessages.INVALID_KIND}: {tag!r}", context=name)
    if isinstance(tag, int):
        try:
            return GraphQLKind(tag)
        except ValueError as e:
            raise ManifestError(f"{ErrorMessages.INVALID_KIND}: {tag!r}", context=name) from e
    if isinstance(tag, str) and tag.upper() in GraphQLKind.__members__:
        return GraphQLKind[tag.upper()]
    raise ManifestError(f"{ErrorMessages.INVALID_KIND}: {tag!r}", context=name)


def load_manifest(manifest_path: Path) -> Manifest:
    """
    Load a manifest from a JSON or YAML file.

    Args:
        manifest_path: Path to a `.json`, `.yaml` or `.yml` file

    Returns:
        The manifest

    Raises:
        OSError: If the file cannot be read
        ManifestError: If the content is not a mapping of names to kinds
    """
    text = manifest_path.read_text(encoding="utf-8")
    try:
        if manifest_path.suffix.lower() in (".yaml", ".yml"):
            raw = yaml.safe_load(text)
        else:
            raw = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ManifestError(f"Cannot parse manifest {manifest_path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ManifestError(f"Manifest root must be a mapping, got {type(raw).__name__}")

    log.debug("Loaded manifest with %d entries from %s", len(raw), manifest_path)
    return Manifest.from_raw(raw)


def is_input_marker(type_: TypeNode) -> bool:
    """True if `type_` is the `Input<T>` marker used to declare GraphQL inputs."""
    return isinstance(type_, TypeReference) and type_.name == INPUT_MARKER and len(type_.type_arguments) == 1


def infer_manifest(module: Module) -> Manifest:
    """
    Derive a manifest from the declarations of a module.

    Exported aliases declared as `Input<...>` are Inputs, every other exported
    alias is an Object. Aliases that are not exported are left out, unless the
    module exports nothing at all (as in reduced output), in which case every
    alias is considered.

    Args:
        module: The parsed module

    Returns:
        The inferred manifest
    """
    exports_only = any(alias.exported for alias in module)
    kinds: dict[str, GraphQLKind] = {}
    for alias in module:
        if exports_only and not alias.exported:
            continue
        kinds[alias.name] = GraphQLKind.INPUT if is_input_marker(alias.type) else GraphQLKind.OBJECT

    log.debug("Inferred manifest: %s", kinds)
    return Manifest(kinds)
