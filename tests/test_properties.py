from graphql import build_ast_schema, parse
from hypothesis import given

from tests.conftest import PRIMITIVE_TYPES, MockObject, mock_object_strategy
from tsgql.codegen import generate_schema
from tsgql.parser import parse_module


def expected_field(mock: MockObject, name: str, primitive: str, optional: bool) -> str:
    scalar = PRIMITIVE_TYPES[primitive]
    type_ = "[" * mock.array_depth + scalar + "]" * mock.array_depth
    return f"  {name}: {type_}{'' if optional else '!'}"


@given(mock=mock_object_strategy())
def test_fields_render_in_declaration_order(mock: MockObject) -> None:
    sdl = generate_schema(parse_module(mock.source), mock.manifest)

    lines = [expected_field(mock, f.name, f.primitive, f.optional) for f in mock.fields]
    assert sdl == "\n".join([f"type {mock.name} {{", *lines, "}"]) + "\n"


@given(mock=mock_object_strategy())
def test_generation_is_deterministic(mock: MockObject) -> None:
    module = parse_module(mock.source)
    assert generate_schema(module, mock.manifest) == generate_schema(module, mock.manifest)


@given(mock=mock_object_strategy())
def test_output_builds_a_schema(mock: MockObject) -> None:
    schema = build_ast_schema(parse(generate_schema(parse_module(mock.source), mock.manifest)))
    object_type = schema.get_type(mock.name)

    assert object_type is not None
    assert list(object_type.fields) == [f.name for f in mock.fields]  # type: ignore[attr-defined]
