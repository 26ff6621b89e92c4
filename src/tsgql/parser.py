"""
Parser for the subset of TypeScript used to declare GraphQL schemas.

The input is a module made of `type` aliases (optionally exported), usually the
output of a type reducer that has already widened utility types such as
`Partial<T>` into plain object literals. Import statements are skipped. Anything
else is rejected with a `TsSyntaxError` before it reaches the generator.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto

from tsgql.ast import (
    ArrayType,
    FunctionType,
    IntersectionType,
    KeywordType,
    LiteralType,
    Module,
    Parameter,
    PropertySignature,
    TypeAlias,
    TypeLiteral,
    TypeNode,
    TypeReference,
    UnionType,
)
from tsgql.errors import TsSyntaxError

KEYWORD_TYPES = frozenset(
    {
        "string",
        "number",
        "boolean",
        "bigint",
        "symbol",
        "object",
        "null",
        "undefined",
        "void",
        "never",
        "any",
        "unknown",
    }
)

_IDENT_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_NUMBER_RE = re.compile(r"\d+(\.\d+)?")
_PUNCTUATION = "{}()[]<>;,:?|&=."


class TokenType(Enum):
    IDENT = auto()
    STRING = auto()
    NUMBER = auto()
    PUNCT = auto()
    EOF = auto()


@dataclass
class Token:
    type: TokenType
    value: str
    line: int
    column: int

    def is_punct(self, value: str) -> bool:
        return self.type == TokenType.PUNCT and self.value == value

    def is_ident(self, value: str | None = None) -> bool:
        return self.type == TokenType.IDENT and (value is None or self.value == value)


def tokenize(source: str) -> list[Token]:
    """Split TypeScript source into tokens, dropping whitespace and comments.

    Raises:
        TsSyntaxError: On unterminated comments/strings or unexpected characters.
    """
    tokens: list[Token] = []
    i = 0
    line = 1
    line_start = 0

    while i < len(source):
        c = source[i]
        column = i - line_start + 1

        if c == "\n":
            line += 1
            line_start = i + 1
            i += 1
            continue

        if c in " \t\r\ufeff":
            i += 1
            continue

        if source.startswith("//", i):
            end = source.find("\n", i)
            i = len(source) if end == -1 else end
            continue

        if source.startswith("/*", i):
            end = source.find("*/", i + 2)
            if end == -1:
                raise TsSyntaxError("Unterminated comment", line, column)
            comment = source[i:end]
            line += comment.count("\n")
            if "\n" in comment:
                line_start = i + comment.rindex("\n") + 1
            i = end + 2
            continue

        if c in "\"'`":
            j = i + 1
            while j < len(source) and source[j] != c:
                if source[j] == "\n" and c != "`":
                    break
                j += 2 if source[j] == "\\" else 1
            if j >= len(source) or source[j] != c:
                raise TsSyntaxError("Unterminated string literal", line, column)
            tokens.append(Token(TokenType.STRING, source[i + 1 : j], line, column))
            i = j + 1
            continue

        if source.startswith("=>", i) or source.startswith("...", i):
            value = "=>" if c == "=" else "..."
            tokens.append(Token(TokenType.PUNCT, value, line, column))
            i += len(value)
            continue

        if c in _PUNCTUATION:
            tokens.append(Token(TokenType.PUNCT, c, line, column))
            i += 1
            continue

        match = _IDENT_RE.match(source, i) or _NUMBER_RE.match(source, i)
        if match:
            token_type = TokenType.NUMBER if c.isdigit() else TokenType.IDENT
            tokens.append(Token(token_type, match.group(), line, column))
            i = match.end()
            continue

        raise TsSyntaxError(f"Unexpected character '{c}'", line, column)

    tokens.append(Token(TokenType.EOF, "", line, i - line_start + 1))
    return tokens


class Parser:
    """Recursive descent parser producing a `Module` of type aliases."""

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens
        self.pos = 0

    def current(self) -> Token:
        return self.tokens[self.pos]

    def peek(self, offset: int = 1) -> Token:
        return self.tokens[min(self.pos + offset, len(self.tokens) - 1)]

    def error(self, message: str, token: Token | None = None) -> TsSyntaxError:
        token = token or self.current()
        return TsSyntaxError(message, token.line, token.column)

    def consume_punct(self, value: str) -> Token:
        tok = self.current()
        if not tok.is_punct(value):
            found = tok.value or "end of input"
            raise self.error(f"Expected '{value}', got '{found}'")
        self.pos += 1
        return tok

    def consume_ident(self) -> Token:
        tok = self.current()
        if tok.type != TokenType.IDENT:
            found = tok.value or "end of input"
            raise self.error(f"Expected an identifier, got '{found}'")
        self.pos += 1
        return tok

    def skip_punct(self, value: str) -> bool:
        if self.current().is_punct(value):
            self.pos += 1
            return True
        return False

    # Statements

    def parse_module(self) -> Module:
        module = Module()
        while self.current().type != TokenType.EOF:
            if self.skip_punct(";"):
                continue
            if self.current().is_ident("import"):
                self.skip_import()
                continue
            module.declarations.append(self.parse_type_alias())
        return module

    def skip_import(self) -> None:
        self.consume_ident()
        while self.current().type not in (TokenType.STRING, TokenType.EOF):
            self.pos += 1
        if self.current().type == TokenType.EOF:
            raise self.error("Expected a module specifier in import statement")
        self.pos += 1
        self.skip_punct(";")

    def parse_type_alias(self) -> TypeAlias:
        exported = False
        if self.current().is_ident("export"):
            exported = True
            self.pos += 1

        if not self.current().is_ident("type"):
            raise self.error("Only type alias declarations are supported")
        self.pos += 1

        name = self.consume_ident().value
        if self.current().is_punct("<"):
            raise self.error(f"Generic type alias '{name}' is not supported")
        self.consume_punct("=")
        type_ = self.parse_type()
        self.skip_punct(";")
        return TypeAlias(name=name, type=type_, exported=exported)

    # Types

    def parse_type(self) -> TypeNode:
        self.skip_punct("|")
        types = [self.parse_intersection()]
        while self.skip_punct("|"):
            types.append(self.parse_intersection())
        if len(types) == 1:
            return types[0]
        return UnionType(tuple(types))

    def parse_intersection(self) -> TypeNode:
        self.skip_punct("&")
        types = [self.parse_postfix()]
        while self.skip_punct("&"):
            types.append(self.parse_postfix())
        if len(types) == 1:
            return types[0]
        return IntersectionType(tuple(types))

    def parse_postfix(self) -> TypeNode:
        type_ = self.parse_primary()
        while self.current().is_punct("["):
            if not self.peek().is_punct("]"):
                raise self.error("Indexed access types are not supported")
            self.pos += 2
            type_ = ArrayType(type_)
        return type_

    def parse_primary(self) -> TypeNode:
        tok = self.current()

        if tok.is_punct("{"):
            return self.parse_type_literal()

        if tok.is_punct("("):
            if self.is_function_start():
                return self.parse_function_type()
            self.pos += 1
            type_ = self.parse_type()
            self.consume_punct(")")
            return type_

        if tok.type == TokenType.STRING:
            self.pos += 1
            return LiteralType(tok.value)

        if tok.type == TokenType.NUMBER:
            self.pos += 1
            return LiteralType(float(tok.value) if "." in tok.value else int(tok.value))

        if tok.type == TokenType.IDENT:
            if tok.value in ("true", "false"):
                self.pos += 1
                return LiteralType(tok.value == "true")
            if tok.value in KEYWORD_TYPES:
                self.pos += 1
                return KeywordType(tok.value)
            return self.parse_type_reference()

        found = tok.value or "end of input"
        raise self.error(f"Expected a type, got '{found}'")

    def parse_type_reference(self) -> TypeReference:
        name = self.consume_ident().value
        while self.skip_punct("."):
            name = f"{name}.{self.consume_ident().value}"

        arguments: list[TypeNode] = []
        if self.skip_punct("<"):
            arguments.append(self.parse_type())
            while self.skip_punct(","):
                arguments.append(self.parse_type())
            self.consume_punct(">")
        return TypeReference(name=name, type_arguments=tuple(arguments))

    def parse_type_literal(self) -> TypeLiteral:
        self.consume_punct("{")
        members: list[PropertySignature] = []
        while not self.current().is_punct("}"):
            members.append(self.parse_property_signature())
            if not (self.skip_punct(";") or self.skip_punct(",")):
                # Members may also be separated by a newline only
                if not self.current().is_punct("}") and self.current().line == self.tokens[self.pos - 1].line:
                    raise self.error(f"Expected ';' or '}}', got '{self.current().value or 'end of input'}'")
        self.consume_punct("}")
        return TypeLiteral(tuple(members))

    def parse_property_signature(self) -> PropertySignature:
        tok = self.current()
        if tok.is_punct("["):
            raise self.error("Index signatures are not supported")
        if tok.is_ident("readonly") and self.peek().type == TokenType.IDENT:
            self.pos += 1
        if self.current().type == TokenType.STRING:
            raise self.error("Property names must be identifiers")

        name = self.consume_ident().value
        optional = self.skip_punct("?")
        if self.current().is_punct("(") or self.current().is_punct("<"):
            raise self.error(f"Method signature '{name}' is not supported, use a function type property instead")
        if not self.skip_punct(":"):
            raise self.error(f"Property '{name}' is missing a type annotation")
        return PropertySignature(name=name, type=self.parse_type(), optional=optional)

    def is_function_start(self) -> bool:
        """Tell `(params) => R` apart from a parenthesized type, starting at `(`."""
        first = self.peek(1)
        if first.is_punct(")") or first.is_punct("..."):
            return True
        if first.type != TokenType.IDENT:
            return False
        second = self.peek(2)
        if second.is_punct(":") or second.is_punct("?") or second.is_punct(","):
            return True
        return second.is_punct(")") and self.peek(3).is_punct("=>")

    def parse_function_type(self) -> FunctionType:
        self.consume_punct("(")
        parameters: list[Parameter] = []
        while not self.current().is_punct(")"):
            if self.current().is_punct("..."):
                raise self.error("Rest parameters are not supported")
            name = self.consume_ident().value
            optional = self.skip_punct("?")
            type_ = self.parse_type() if self.skip_punct(":") else None
            parameters.append(Parameter(name=name, type=type_, optional=optional))
            if not self.skip_punct(","):
                break
        self.consume_punct(")")
        self.consume_punct("=>")
        return FunctionType(parameters=tuple(parameters), return_type=self.parse_type())


def parse_module(source: str) -> Module:
    """Parse TypeScript source into a `Module` of type aliases.

    Args:
        source: TypeScript source text

    Returns:
        The parsed module, declarations in source order

    Raises:
        TsSyntaxError: If the source is malformed or uses unsupported syntax
    """
    return Parser(tokenize(source)).parse_module()
