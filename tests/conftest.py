from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import pytest
from hypothesis import strategies as st
from hypothesis.strategies import composite

from tsgql.codegen import generate_schema
from tsgql.manifest import GraphQLKind, Manifest
from tsgql.parser import parse_module

PRIMITIVE_TYPES = {"string": "String", "number": "Int", "boolean": "Boolean"}


class TestSchemaData:
    TESTS_DATA_DIR: Path = Path(__file__).parent / "data"
    BASIC_SCHEMA: Path = TESTS_DATA_DIR / "basic.ts"
    ARGS_SCHEMA: Path = TESTS_DATA_DIR / "args.ts"
    INVALID_SCHEMA: Path = TESTS_DATA_DIR / "invalid.ts"
    SYNTAX_ERROR_SCHEMA: Path = TESTS_DATA_DIR / "syntax_error.ts"
    ARGS_MANIFEST_JSON: Path = TESTS_DATA_DIR / "args_manifest.json"
    ARGS_MANIFEST_YAML: Path = TESTS_DATA_DIR / "args_manifest.yaml"
    PROJECT_CONFIG: Path = TESTS_DATA_DIR / "tsgql.yaml"


@pytest.fixture
def generate() -> Callable[[str, dict[str, int]], str]:
    """Parse TypeScript source and translate it with a manifest given in its serialized form."""

    def _generate(source: str, manifest: dict[str, int]) -> str:
        return generate_schema(parse_module(source), Manifest.from_raw(manifest))

    return _generate


@dataclass
class MockField:
    name: str
    primitive: str
    optional: bool


@dataclass
class MockObject:
    name: str
    fields: list[MockField] = field(default_factory=list)
    array_depth: int = 0

    @property
    def source(self) -> str:
        members = "; ".join(
            f"{f.name}{'?' if f.optional else ''}: {f.primitive}{'[]' * self.array_depth}" for f in self.fields
        )
        return f"type {self.name} = {{ {members} }}"

    @property
    def manifest(self) -> Manifest:
        return Manifest({self.name: GraphQLKind.OBJECT})


field_names = st.from_regex(r"[a-z][A-Za-z0-9]{0,11}", fullmatch=True)


@composite
def mock_object_strategy(draw: st.DrawFn) -> MockObject:
    """An object type whose fields are primitives, or arrays of primitives, some of them optional."""
    names = draw(st.lists(field_names, min_size=1, max_size=8, unique=True))
    fields = [MockField(name, draw(st.sampled_from(sorted(PRIMITIVE_TYPES))), draw(st.booleans())) for name in names]
    return MockObject("Sample", fields, draw(st.integers(min_value=0, max_value=2)))
