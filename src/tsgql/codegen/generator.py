from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum

from tsgql import log
from tsgql.ast import (
    ArrayType,
    FunctionType,
    KeywordType,
    Module,
    PropertySignature,
    TypeAlias,
    TypeLiteral,
    TypeNode,
    TypeReference,
    UnionType,
)
from tsgql.codegen.naming import input_type_name, output_type_name
from tsgql.errors import (
    ErrorMessages,
    MalformedUnionError,
    PositionalViolationError,
    StructuralError,
    TsgqlError,
    UndefinedTypeError,
    UnsupportedTypeError,
)
from tsgql.manifest import INPUT_MARKER, GraphQLKind, Manifest, is_input_marker
from tsgql.sdl import (
    Definition,
    Field,
    GraphQLTypeRef,
    InputField,
    InputObjectDef,
    InputValue,
    ListType,
    NamedType,
    NonNullType,
    ObjectDef,
    Schema,
    non_null,
)

PROMISE = "Promise"

SCALAR_TYPES = {
    "string": "String",
    "number": "Int",
    "boolean": "Boolean",
}

ResolvedType = tuple[GraphQLTypeRef, list[InputValue] | None]


class Position(str, Enum):
    """Where in the schema a type expression is being resolved."""

    OUTPUT = "output"
    """Type of an object field."""
    INPUT = "input"
    """Type of an argument or of an input field."""
    RETURN = "return"
    """Return type of a field with arguments. Anonymous objects become `<Field>Output` types."""


class FieldKind(str, Enum):
    OBJECT = "object"
    INPUT = "input"

    @property
    def position(self) -> Position:
        return Position.INPUT if self == FieldKind.INPUT else Position.OUTPUT


def _describe(type_: TypeNode) -> str:
    return f"'{type_}'"


def _is_nullable_keyword(type_: TypeNode) -> bool:
    return isinstance(type_, KeywordType) and type_.is_nullable


class SchemaGenerator:
    """
    Translate a module of TypeScript type aliases into a GraphQL schema.

    Every type alias classified by the manifest becomes an object or input
    definition. Anonymous object shapes used as arguments or return types are
    turned into new definitions with generated names, pushed before the
    definition that uses them.

    A generator translates a single module: `generate` consumes its schema.
    """

    def __init__(self, manifest: Manifest) -> None:
        self.manifest = manifest
        self.schema = Schema()
        self._path: list[str] = []
        # (type name, path of the field or argument referencing it)
        self._references: list[tuple[str, str]] = []

    def generate(self, module: Module) -> str:
        """
        Translate every type alias of `module` and render the schema.

        Args:
            module: The parsed module

        Returns:
            GraphQL SDL text

        Raises:
            TsgqlError: On the first declaration that cannot be translated
        """
        for alias in module:
            self.visit_type_alias(alias)
        self.check_references()
        return self.schema.finish()

    @contextmanager
    def scope(self, name: str) -> Iterator[None]:
        """Track `name` as the declaration, field or argument being built and add it to the context of errors."""
        self._path.append(name)
        try:
            yield
        except TsgqlError as e:
            e.with_context(name)
            raise
        finally:
            self._path.pop()

    def check_references(self) -> None:
        """
        Check that every referenced name was generated.

        Enum names the module does not declare are left to be defined elsewhere.

        Raises:
            UndefinedTypeError: For the first reference no definition provides
        """
        for name, path in self._references:
            if name in self.schema:
                continue
            if self.manifest.classify(name) == GraphQLKind.ENUM:
                log.debug("Enum '%s' is not declared, expecting an external definition", name)
                self.schema.declare_external(name)
                continue
            raise UndefinedTypeError(f"{ErrorMessages.UNDEFINED_TYPE}: {name}", context=path or None)

    def visit_type_alias(self, alias: TypeAlias) -> None:
        kind = self.manifest.classify(alias.name)
        if kind is None:
            log.debug("Skipping type '%s': not in manifest", alias.name)
            return

        type_ = alias.type
        # `type X = Input<{ ... }>` declares an input through a marker type
        if isinstance(type_, TypeReference) and is_input_marker(type_) and INPUT_MARKER not in self.manifest:
            type_ = type_.type_arguments[0]

        field_kind = FieldKind.INPUT if kind == GraphQLKind.INPUT else FieldKind.OBJECT
        with self.scope(alias.name):
            self.build_type_literal(field_kind, alias.name, type_)

    def build_type_literal(
        self,
        kind: FieldKind,
        name: str,
        type_: TypeNode,
        position: Position | None = None,
    ) -> Definition:
        """
        Build an object or input definition named `name` from an object literal and push it.

        Args:
            kind: Whether to build an object or an input definition
            name: Name of the definition
            type_: The object literal
            position: Position its fields are resolved in, defaults to the one implied by `kind`

        Returns:
            The definition, already pushed to the schema
        """
        if not isinstance(type_, TypeLiteral):
            raise UnsupportedTypeError(f"{ErrorMessages.TOP_LEVEL_NOT_LITERAL}, got {_describe(type_)}")
        if not type_.members:
            raise StructuralError(f"Type '{name}' must declare at least one field")

        position = position or kind.position
        fields: list[Field | InputField] = []
        for member in type_.members:
            if any(f.name == member.name for f in fields):
                raise StructuralError(ErrorMessages.DUPLICATE_FIELD, context=member.name)
            fields.append(self.build_field(kind, member, position))

        definition: Definition
        if kind == FieldKind.INPUT:
            definition = InputObjectDef(name, [f for f in fields if isinstance(f, InputField)])
        else:
            definition = ObjectDef(name, [f for f in fields if isinstance(f, Field)])

        self.schema.push(definition)
        log.debug("Generated %s type '%s' with %d field(s)", kind.value, name, len(fields))
        return definition

    def build_field(self, kind: FieldKind, prop: PropertySignature, position: Position) -> Field | InputField:
        """
        Build a field (or input field) from a property of an object literal.

        Raises:
            StructuralError: If the property declares arguments but `kind` is INPUT
        """
        with self.scope(prop.name):
            type_, arguments = self.resolve_type(prop.name, prop.type, prop.optional, position)
            if arguments is None:
                if kind == FieldKind.INPUT:
                    return InputField(prop.name, type_)
                return Field(prop.name, type_)

            if kind == FieldKind.INPUT:
                raise StructuralError(ErrorMessages.ARGS_ON_INPUT_FIELD)
            return Field(prop.name, type_, arguments)

    def resolve_type(self, field_name: str, type_: TypeNode, optional: bool, position: Position) -> ResolvedType:
        """
        Return the GraphQL type of a type expression, and its arguments if it is a function.

        `field_name` is used to name the types synthesized for anonymous objects.
        Promise, union and function types decide their own nullability; every
        other type is wrapped in NonNull unless `optional` is set.

        Args:
            field_name: Name of the field or argument being resolved
            type_: The type expression
            optional: Whether the property was declared optional
            position: Where the type is used

        Returns:
            The GraphQL type and the argument list (None unless `type_` is a function)

        Raises:
            UnsupportedTypeError: If the type expression has no GraphQL counterpart
            MalformedUnionError: If a union is not `T | null` / `T | undefined`
            PositionalViolationError: If an Object is used as an argument or an Input as a field
            UndefinedTypeError: If a referenced name is not in the manifest
            StructuralError: If a function type is malformed or used where arguments are not allowed
        """
        resolved: GraphQLTypeRef
        if isinstance(type_, KeywordType):
            resolved = self.resolve_keyword(type_)
        elif isinstance(type_, ArrayType):
            resolved = self.resolve_array(field_name, type_, position)
        elif isinstance(type_, TypeReference):
            if type_.name == PROMISE:
                return self.resolve_promise(field_name, type_, position)
            resolved = self.resolve_reference(type_, position)
        elif isinstance(type_, FunctionType):
            return self.resolve_function(field_name, type_, position)
        elif isinstance(type_, UnionType):
            return self.resolve_type(field_name, self.unwrap_union(type_), True, position)
        elif isinstance(type_, TypeLiteral):
            raise UnsupportedTypeError(ErrorMessages.UNNAMED_TYPE_LITERAL)
        else:
            raise UnsupportedTypeError(f"{ErrorMessages.UNSUPPORTED_TYPE}: {_describe(type_)}")

        if not optional:
            return non_null(resolved), None
        return resolved, None

    def resolve_keyword(self, type_: KeywordType) -> NamedType:
        scalar = SCALAR_TYPES.get(type_.kind)
        if scalar is None:
            raise UnsupportedTypeError(f"{ErrorMessages.UNSUPPORTED_KEYWORD}: {type_.kind}")
        return NamedType(scalar)

    def resolve_array(self, field_name: str, type_: ArrayType, position: Position) -> ListType:
        # TS cannot mark array elements as non-null, so [Int!] is never produced
        if position == Position.RETURN and isinstance(type_.element, TypeLiteral):
            return ListType(NamedType(self.synthesize_output(field_name, type_.element)))

        element, arguments = self.resolve_type(field_name, type_.element, True, position)
        if arguments is not None:
            raise StructuralError(ErrorMessages.NESTED_ARGS)
        return ListType(element)

    def resolve_reference(self, type_: TypeReference, position: Position) -> NamedType:
        name = type_.name
        if type_.type_arguments:
            raise UnsupportedTypeError(f"{ErrorMessages.UNSUPPORTED_TYPE}: generic type {name}")

        kind = self.manifest.classify(name)
        if kind is None:
            raise UndefinedTypeError(f"{ErrorMessages.UNDEFINED_TYPE}: {name}")
        if kind == GraphQLKind.OBJECT and position == Position.INPUT:
            raise PositionalViolationError(f"{ErrorMessages.ARGS_MUST_BE_INPUTS} (check: {name})")
        if kind == GraphQLKind.INPUT and position != Position.INPUT:
            raise PositionalViolationError(f"{ErrorMessages.FIELD_CANNOT_BE_INPUT} (check: {name})")

        self._references.append((name, ".".join(self._path)))
        return NamedType(name)

    def resolve_promise(self, field_name: str, type_: TypeReference, position: Position) -> ResolvedType:
        """
        Resolve `Promise<T>` as a return type.

        The nullability of the result comes from `T` only: `Promise<User | null>`
        is `User` and `Promise<User>` is `User!`. An anonymous object `T` becomes
        a `<Field>Output` type.
        """
        if position == Position.INPUT:
            raise UnsupportedTypeError(ErrorMessages.PROMISE_IN_INPUT)
        if len(type_.type_arguments) != 1:
            raise UnsupportedTypeError(f"{ErrorMessages.PROMISE_TYPE_PARAMS}: {len(type_.type_arguments)}")

        inner = type_.type_arguments[0]
        if isinstance(inner, UnionType) and inner.is_nullable:
            present = self.unwrap_union(inner)
            if isinstance(present, TypeLiteral):
                return NamedType(self.synthesize_output(field_name, present)), None
            resolved = self.resolve_type(field_name, present, True, Position.RETURN)
        elif isinstance(inner, TypeLiteral):
            return NonNullType(NamedType(self.synthesize_output(field_name, inner))), None
        else:
            resolved = self.resolve_type(field_name, inner, False, Position.RETURN)

        if resolved[1] is not None:
            raise StructuralError(ErrorMessages.NESTED_ARGS)
        return resolved

    def resolve_function(self, field_name: str, type_: FunctionType, position: Position) -> ResolvedType:
        """
        Resolve `(args: { ... }) => R` into the type of R and one argument per member of `args`.
        """
        if position == Position.INPUT:
            raise StructuralError(ErrorMessages.ARGS_ON_INPUT_FIELD)
        if len(type_.parameters) != 1:
            raise StructuralError(f"{ErrorMessages.SINGLE_PARAMETER}, got {len(type_.parameters)}")

        parameter = type_.parameters[0]
        if not isinstance(parameter.type, TypeLiteral):
            raise StructuralError(ErrorMessages.PARAMETER_NOT_OBJECT, context=parameter.name)

        arguments = self.build_argument_list(parameter.type.members, field_name)

        # The return type is nullable until a Promise or union wrapper says otherwise
        return_type, return_arguments = self.resolve_type(field_name, type_.return_type, True, Position.RETURN)
        if return_arguments is not None:
            raise StructuralError(ErrorMessages.NESTED_ARGS)
        return return_type, arguments

    def build_argument_list(self, members: tuple[PropertySignature, ...], field_name: str) -> list[InputValue]:
        """
        Build the arguments of `field_name` from the members of its parameter object.

        A member typed as an anonymous object (optionally `| null`/`| undefined`)
        gets an input type named after the field, see `input_type_name`.
        """
        arguments: list[InputValue] = []
        for member in members:
            if any(arg.name == member.name for arg in arguments):
                raise StructuralError(ErrorMessages.DUPLICATE_ARGUMENT, context=member.name)
            with self.scope(member.name):
                arguments.append(self.build_argument(field_name, member, len(members)))
        return arguments

    def build_argument(self, field_name: str, member: PropertySignature, member_count: int) -> InputValue:
        type_ = member.type
        resolved: GraphQLTypeRef

        if isinstance(type_, TypeLiteral):
            name = self.synthesize_input(field_name, member.name, member_count, type_)
            resolved = NamedType(name) if member.optional else NonNullType(NamedType(name))
        elif isinstance(type_, UnionType):
            if not type_.is_nullable:
                raise MalformedUnionError(ErrorMessages.NON_NULLABLE_UNION)
            unwrapped = self.unwrap_union(type_)
            if isinstance(unwrapped, TypeLiteral):
                resolved = NamedType(self.synthesize_input(field_name, member.name, member_count, unwrapped))
            else:
                resolved, _ = self.resolve_type(member.name, unwrapped, True, Position.INPUT)
        else:
            resolved, _ = self.resolve_type(member.name, type_, member.optional, Position.INPUT)

        return InputValue(member.name, resolved)

    def synthesize_output(self, field_name: str, literal: TypeLiteral) -> str:
        name = output_type_name(field_name)
        self.build_type_literal(FieldKind.OBJECT, name, literal, Position.RETURN)
        return name

    def synthesize_input(self, field_name: str, member_name: str, member_count: int, literal: TypeLiteral) -> str:
        name = input_type_name(field_name, member_name, member_count)
        self.build_type_literal(FieldKind.INPUT, name, literal)
        return name

    @staticmethod
    def unwrap_union(type_: UnionType) -> TypeNode:
        """
        Return the only non-nullable member of a union.

        Ex: "User | null"             -> User
            "User | null | undefined" -> User
            "User | string"           -> MalformedUnionError
            "null | undefined"        -> MalformedUnionError

        Raises:
            MalformedUnionError: If the union is not exactly one type plus null/undefined
        """
        members = type_.flattened()
        present = [member for member in members if not _is_nullable_keyword(member)]
        if not present:
            raise MalformedUnionError(ErrorMessages.NO_NON_NULL_MEMBER)
        if len(present) > 1:
            kinds = " | ".join(_describe(member) for member in present)
            raise MalformedUnionError(f"{ErrorMessages.MULTIPLE_NON_NULL_MEMBERS}: {kinds}")
        if len(present) == len(members):
            raise MalformedUnionError(ErrorMessages.NON_NULLABLE_UNION)
        return present[0]


def generate_schema(module: Module, manifest: Manifest) -> str:
    """
    Translate a parsed module into GraphQL SDL.

    Args:
        module: The parsed module
        manifest: Classification of the declared names

    Returns:
        GraphQL SDL text

    Raises:
        TsgqlError: If any declaration cannot be translated. No partial output is produced.
    """
    return SchemaGenerator(manifest).generate(module)
