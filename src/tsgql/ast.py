"""
Tree of TypeScript type declarations consumed by the schema generator.

Only the subset of the TypeScript type language that has a GraphQL counterpart
is represented, plus a couple of node kinds (intersections, literal types) that
exist so the generator can reject them with a precise error.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field

NULLABLE_KEYWORDS = frozenset({"null", "undefined"})


@dataclass(frozen=True)
class TypeNode:
    """Base class for all type expression nodes."""


@dataclass(frozen=True)
class KeywordType(TypeNode):
    """A keyword type such as `string`, `number`, `null` or `undefined`."""

    kind: str

    @property
    def is_nullable(self) -> bool:
        return self.kind in NULLABLE_KEYWORDS

    def __str__(self) -> str:
        return self.kind


@dataclass(frozen=True)
class LiteralType(TypeNode):
    """A literal type: `"a"`, `1`, `true`."""

    value: str | int | float | bool

    def __str__(self) -> str:
        if isinstance(self.value, bool):
            return str(self.value).lower()
        if isinstance(self.value, str):
            return f'"{self.value}"'
        return str(self.value)


@dataclass(frozen=True)
class ArrayType(TypeNode):
    """`T[]`"""

    element: TypeNode

    def __str__(self) -> str:
        if isinstance(self.element, (UnionType, IntersectionType, FunctionType)):
            return f"({self.element})[]"
        return f"{self.element}[]"


@dataclass(frozen=True)
class TypeReference(TypeNode):
    """A named type, optionally with type arguments: `User`, `Promise<User>`."""

    name: str
    type_arguments: tuple[TypeNode, ...] = ()

    def __str__(self) -> str:
        if not self.type_arguments:
            return self.name
        return f"{self.name}<{', '.join(str(t) for t in self.type_arguments)}>"


@dataclass(frozen=True)
class PropertySignature:
    """A member of an object type literal: `name?: T`."""

    name: str
    type: TypeNode
    optional: bool = False

    def __str__(self) -> str:
        return f"{self.name}{'?' if self.optional else ''}: {self.type}"


@dataclass(frozen=True)
class TypeLiteral(TypeNode):
    """An anonymous object shape: `{ a: T; b?: U }`."""

    members: tuple[PropertySignature, ...] = ()

    def __str__(self) -> str:
        if not self.members:
            return "{}"
        return "{ " + "; ".join(str(m) for m in self.members) + " }"


@dataclass(frozen=True)
class Parameter:
    """A function type parameter: `args: { id: string }`."""

    name: str
    type: TypeNode | None = None
    optional: bool = False

    def __str__(self) -> str:
        annotation = f": {self.type}" if self.type is not None else ""
        return f"{self.name}{'?' if self.optional else ''}{annotation}"


@dataclass(frozen=True)
class FunctionType(TypeNode):
    """`(args: {...}) => ReturnType`"""

    parameters: tuple[Parameter, ...]
    return_type: TypeNode

    def __str__(self) -> str:
        return f"({', '.join(str(p) for p in self.parameters)}) => {self.return_type}"


@dataclass(frozen=True)
class UnionType(TypeNode):
    """`A | B | ...`"""

    types: tuple[TypeNode, ...]

    def __str__(self) -> str:
        return " | ".join(str(t) for t in self.types)

    def flattened(self) -> list[TypeNode]:
        """Return the members of this union with nested unions inlined."""
        members: list[TypeNode] = []
        for member in self.types:
            if isinstance(member, UnionType):
                members.extend(member.flattened())
            else:
                members.append(member)
        return members

    @property
    def is_nullable(self) -> bool:
        """True if the union is like `T | null` or `T | undefined`."""
        return any(isinstance(t, KeywordType) and t.is_nullable for t in self.flattened())


@dataclass(frozen=True)
class IntersectionType(TypeNode):
    """`A & B`"""

    types: tuple[TypeNode, ...]

    def __str__(self) -> str:
        return " & ".join(str(t) for t in self.types)


@dataclass(frozen=True)
class TypeAlias:
    """A top-level `type Name = ...` declaration."""

    name: str
    type: TypeNode
    exported: bool = False


@dataclass
class Module:
    """A parsed source file: its type aliases in source order."""

    declarations: list[TypeAlias] = field(default_factory=list)

    def __iter__(self) -> Iterator[TypeAlias]:
        return iter(self.declarations)

    def __len__(self) -> int:
        return len(self.declarations)
