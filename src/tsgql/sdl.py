"""
GraphQL definitions under construction and their rendering to SDL text.

Definitions are kept as small dataclasses while the generator builds them and are
converted to graphql-core language nodes only when the schema is finished, so
that forward references to types declared later in the module are fine.
"""

from dataclasses import dataclass, field
from typing import Union

from graphql import (
    DocumentNode,
    FieldDefinitionNode,
    GraphQLError,
    InputObjectTypeDefinitionNode,
    InputValueDefinitionNode,
    ListTypeNode,
    NamedTypeNode,
    NameNode,
    NonNullTypeNode,
    ObjectTypeDefinitionNode,
    TypeNode,
    assert_name,
    print_ast,
)
from graphql.validation.validate import validate_sdl

from tsgql import log
from tsgql.errors import (
    DuplicateTypeError,
    ErrorMessages,
    SchemaFinishedError,
    StructuralError,
    UndefinedTypeError,
)


@dataclass(frozen=True)
class NamedType:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ListType:
    of_type: "GraphQLTypeRef"

    def __str__(self) -> str:
        return f"[{self.of_type}]"


@dataclass(frozen=True)
class NonNullType:
    of_type: "GraphQLTypeRef"

    def __post_init__(self) -> None:
        if isinstance(self.of_type, NonNullType):
            raise StructuralError(ErrorMessages.NESTED_NON_NULL)

    def __str__(self) -> str:
        return f"{self.of_type}!"


GraphQLTypeRef = Union[NamedType, ListType, NonNullType]


def non_null(type_: GraphQLTypeRef) -> NonNullType:
    """Wrap `type_` in NonNull unless it already is."""
    return type_ if isinstance(type_, NonNullType) else NonNullType(type_)


@dataclass
class InputValue:
    """An argument of a field."""

    name: str
    type: GraphQLTypeRef


@dataclass
class InputField:
    name: str
    type: GraphQLTypeRef


@dataclass
class Field:
    name: str
    type: GraphQLTypeRef
    arguments: list[InputValue] = field(default_factory=list)


@dataclass
class ObjectDef:
    name: str
    fields: list[Field] = field(default_factory=list)


@dataclass
class InputObjectDef:
    name: str
    fields: list[InputField] = field(default_factory=list)


Definition = Union[ObjectDef, InputObjectDef]


def _name_node(name: str) -> NameNode:
    try:
        return NameNode(value=assert_name(name))
    except GraphQLError as e:
        raise StructuralError(e.message, context=name) from e


def type_to_ast(type_: GraphQLTypeRef) -> TypeNode:
    """Convert a type reference to its graphql-core language node."""
    if isinstance(type_, NonNullType):
        return NonNullTypeNode(type=type_to_ast(type_.of_type))
    if isinstance(type_, ListType):
        return ListTypeNode(type=type_to_ast(type_.of_type))
    return NamedTypeNode(name=_name_node(type_.name))


def _input_value_to_ast(value: InputValue | InputField) -> InputValueDefinitionNode:
    return InputValueDefinitionNode(
        name=_name_node(value.name),
        type=type_to_ast(value.type),
        directives=(),
    )


def definition_to_ast(definition: Definition) -> ObjectTypeDefinitionNode | InputObjectTypeDefinitionNode:
    """Convert an object or input definition to its graphql-core language node."""
    if isinstance(definition, InputObjectDef):
        return InputObjectTypeDefinitionNode(
            name=_name_node(definition.name),
            directives=(),
            fields=tuple(_input_value_to_ast(f) for f in definition.fields),
        )

    return ObjectTypeDefinitionNode(
        name=_name_node(definition.name),
        interfaces=(),
        directives=(),
        fields=tuple(
            FieldDefinitionNode(
                name=_name_node(f.name),
                arguments=tuple(_input_value_to_ast(arg) for arg in f.arguments),
                type=type_to_ast(f.type),
                directives=(),
            )
            for f in definition.fields
        ),
    )


class Schema:
    """
    Ordered, append-only collection of object and input definitions.

    Definitions render in the order they were pushed. `finish` renders the
    whole schema once; the schema cannot be used afterwards.
    """

    def __init__(self) -> None:
        self._definitions: list[Definition] = []
        self._names: set[str] = set()
        self._external: set[str] = set()
        self._finished = False

    @property
    def definitions(self) -> tuple[Definition, ...]:
        return tuple(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._definitions)

    def push(self, definition: Definition) -> None:
        """
        Append a definition.

        Raises:
            DuplicateTypeError: If a definition with the same name was already pushed
            SchemaFinishedError: If the schema was already rendered
        """
        self._check_not_finished()
        if definition.name in self._names:
            raise DuplicateTypeError(f"{ErrorMessages.DUPLICATE_TYPE}: {definition.name}", context=definition.name)

        self._names.add(definition.name)
        self._definitions.append(definition)

    def declare_external(self, name: str) -> None:
        """Allow references to `name`, a type defined outside of this schema."""
        self._check_not_finished()
        self._external.add(name)

    def object(self, object_def: ObjectDef) -> None:
        self.push(object_def)

    def input(self, input_def: InputObjectDef) -> None:
        self.push(input_def)

    def to_document(self) -> DocumentNode:
        return DocumentNode(definitions=tuple(definition_to_ast(d) for d in self._definitions))

    def validate(self, document: DocumentNode) -> None:
        """
        Check the rendered document with graphql-core's SDL rules.

        Raises:
            UndefinedTypeError: If a definition references a type nothing defines and not declared external
            StructuralError: On any other SDL violation (e.g. duplicate fields)
        """
        errors = [error for error in validate_sdl(document) if not self._is_external_reference(error)]
        if not errors:
            return

        for error in errors:
            log.debug("SDL validation error: %s", error.message)

        unknown = [error.message for error in errors if error.message.startswith("Unknown type")]
        if unknown:
            raise UndefinedTypeError(" ".join(unknown))
        raise StructuralError(f"{ErrorMessages.INVALID_SDL}: {' '.join(error.message for error in errors)}")

    def finish(self) -> str:
        """
        Render every definition to SDL text, in insertion order, and consume the schema.

        Each block is followed by a single newline, e.g.::

            type User {
              id: String!
            }
            input UserInput {
              id: String
            }

        Returns:
            The SDL text

        Raises:
            SchemaFinishedError: If the schema was already rendered
        """
        self._check_not_finished()
        self._finished = True

        document = self.to_document()
        self.validate(document)
        return "".join(f"{print_ast(definition)}\n" for definition in document.definitions)

    def _is_external_reference(self, error: GraphQLError) -> bool:
        node = error.nodes[0] if error.nodes else None
        return isinstance(node, NamedTypeNode) and node.name.value in self._external

    def _check_not_finished(self) -> None:
        if self._finished:
            raise SchemaFinishedError(ErrorMessages.SCHEMA_FINISHED)
