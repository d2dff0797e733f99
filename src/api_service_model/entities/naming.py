"""Name conversions shared by the walker and the type normalizer."""

BUILTIN_TYPES = frozenset({"String", "Integer", "Boolean", "Double", "Long", "Timestamp", "Data"})

_UNSAFE_CHARACTERS = ("-", ".", " ", "/", "(", ")", ":")


def starting_with_uppercase(name: str) -> str:
    return name[:1].upper() + name[1:]


def safe_model_name(name: str, replacement: str = "", wildcard_replacement: str = "Star") -> str:
    """Strip characters that cannot appear in a type name.

    '*' becomes `wildcard_replacement` so that "Accept-*" and "Accept" stay distinct.
    """
    for character in _UNSAFE_CHARACTERS:
        name = name.replace(character, replacement)
    return name.replace("*", f"{replacement}{wildcard_replacement}")


def is_builtin_type(name: str) -> bool:
    return name in BUILTIN_TYPES
