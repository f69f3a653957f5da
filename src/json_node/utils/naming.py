"""Property name casing helpers."""

import re


_SEPARATORS = re.compile(r"[_\s]+")


def to_camel_case(name: str) -> str:
    """
    Convert a structural property name to camel case.

    Handles both Python attribute names and Pascal-cased names:
    ``foo_bar`` -> ``fooBar``, ``FooBar`` -> ``fooBar``, ``ID`` -> ``id``,
    ``URLValue`` -> ``urlValue``. Leading underscores are kept.

    Args:
        name: Property name

    Returns:
        Camel-cased property name
    """
    if not name:
        return name

    stripped = name.lstrip("_")
    prefix = name[:len(name) - len(stripped)]
    parts = [part for part in _SEPARATORS.split(stripped) if part]
    if not parts:
        return name

    head = _lower_leading_run(parts[0])
    tail = "".join(part[0].upper() + part[1:] for part in parts[1:])
    return prefix + head + tail


def _lower_leading_run(word: str) -> str:
    # Lowercase the leading run of capitals, keeping the last one when it
    # starts the next word ("URLValue" -> "urlValue").
    chars = list(word)
    for i, char in enumerate(chars):
        if not char.isupper():
            break
        has_next = i + 1 < len(chars)
        if i > 0 and has_next and not chars[i + 1].isupper():
            break
        chars[i] = char.lower()
    return "".join(chars)
