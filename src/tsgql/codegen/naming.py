"""Names for the types synthesized from anonymous object shapes."""

OUTPUT_SUFFIX = "Output"
INPUT_SUFFIX = "Input"


def upper_camel_case(name: str) -> str:
    """Uppercase the first character of `name` if it is an ASCII letter and leave the rest unchanged.

    Examples:
        "findUser" -> "FindUser", "find_user" -> "Find_user", "" -> ""
    """
    first = name[:1]
    if first.isascii():
        first = first.upper()
    return first + name[1:]


def output_type_name(field_name: str) -> str:
    """Name of the object type synthesized for the return type of `field_name`."""
    return f"{upper_camel_case(field_name)}{OUTPUT_SUFFIX}"


def input_type_name(field_name: str, member_name: str, member_count: int) -> str:
    """
    Name of the input type synthesized for an argument of `field_name`.

    When the argument object has a single member the member name is left out,
    otherwise it is appended so that every member gets its own input type.

    Args:
        field_name: Name of the field declaring the arguments
        member_name: Name of the argument whose type is an object literal
        member_count: Number of members of the argument object

    Returns:
        The input type name, e.g. "FindUserInput" or "FindUserInputUser"
    """
    if member_count == 1:
        return f"{upper_camel_case(field_name)}{INPUT_SUFFIX}"
    return f"{upper_camel_case(field_name)}{INPUT_SUFFIX}{upper_camel_case(member_name)}"
