class TsgqlError(ValueError):
    """Base class for every error raised while translating a module.

    Attributes:
        context: Name of the declaration, field or argument being processed when
            the error was raised, outermost first (e.g. "Query.findUser.id").
    """

    def __init__(self, message: str, context: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def with_context(self, name: str) -> "TsgqlError":
        """Prefix `name` to the error context and return the same error."""
        self.context = f"{name}.{self.context}" if self.context else name
        return self

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} (in {self.context})"
        return self.message


class UnsupportedTypeError(TsgqlError):
    """Raised for a type expression outside the supported subset."""


class MalformedUnionError(TsgqlError):
    """Raised for a union that is not `T | null` / `T | undefined`."""


class PositionalViolationError(TsgqlError):
    """Raised when an Object is used as an argument or an Input as a field type."""


class UndefinedTypeError(TsgqlError):
    """Raised when a referenced type name is unknown."""


class StructuralError(TsgqlError):
    """Raised when a shape is supported but put together in an invalid way."""


class DuplicateTypeError(StructuralError):
    """Raised when two definitions end up with the same GraphQL name."""


class SchemaFinishedError(StructuralError):
    """Raised when a schema is used after it was rendered."""


class ManifestError(TsgqlError):
    """Raised when a manifest cannot be read or has invalid entries."""


class TsSyntaxError(TsgqlError):
    """Raised by the parser for malformed or unsupported TypeScript syntax."""

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(message)
        self.line = line
        self.column = column

    def __str__(self) -> str:
        return f"{self.message} at line {self.line}, column {self.column}"


# Error message constants for consistent messaging and testability
class ErrorMessages:
    """Standard error messages for tsgql exceptions."""

    UNSUPPORTED_KEYWORD = "Unsupported keyword type"
    UNSUPPORTED_TYPE = "Unsupported type expression"
    UNNAMED_TYPE_LITERAL = "Anonymous object types are only supported as arguments or as the return of a field"
    TOP_LEVEL_NOT_LITERAL = "Type aliases must be object types"
    PROMISE_TYPE_PARAMS = "Invalid amount of type parameters for Promise"
    PROMISE_IN_INPUT = "Promise can only be used in output position"
    NO_NON_NULL_MEMBER = "No non-nullable type found in union"
    MULTIPLE_NON_NULL_MEMBERS = "A union of different types has no GraphQL representation"
    NON_NULLABLE_UNION = "Unions must include null or undefined"
    ARGS_MUST_BE_INPUTS = "Field args can only be Inputs"
    FIELD_CANNOT_BE_INPUT = "Field type can't be an Input"
    UNDEFINED_TYPE = "Undefined type"
    SINGLE_PARAMETER = "Expected only one parameter for field arg"
    PARAMETER_NOT_OBJECT = "Type of field args can only be objects"
    ARGS_ON_INPUT_FIELD = "Only ObjectDefs can contain fields with args"
    NESTED_ARGS = "Only a field's own type can declare arguments"
    NESTED_NON_NULL = "NonNull cannot wrap another NonNull"
    DUPLICATE_FIELD = "Field is declared more than once"
    DUPLICATE_ARGUMENT = "Argument is declared more than once"
    DUPLICATE_TYPE = "A type with this name was already generated"
    SCHEMA_FINISHED = "Schema was already rendered"
    INVALID_KIND = "Invalid GraphQL kind in manifest"
    INVALID_SDL = "Generated SDL is not valid GraphQL"
