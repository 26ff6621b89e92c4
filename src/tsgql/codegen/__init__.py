from tsgql.codegen.generator import FieldKind, Position, SchemaGenerator, generate_schema
from tsgql.manifest import Manifest, infer_manifest
from tsgql.parser import parse_module


def generate_schema_from_source(source: str, manifest: Manifest | None = None) -> str:
    """Parse TypeScript source and translate it to GraphQL SDL.

    When no manifest is given it is inferred from the source, see `infer_manifest`.
    """
    module = parse_module(source)
    if manifest is None:
        manifest = infer_manifest(module)
    return generate_schema(module, manifest)


__all__ = [
    "FieldKind",
    "Position",
    "SchemaGenerator",
    "generate_schema",
    "generate_schema_from_source",
]
