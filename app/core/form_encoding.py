from collections.abc import Mapping
from typing import Any, List, Tuple
from urllib.parse import urlencode

DEFAULT_MAX_DEPTH = 32


class FormEncodingError(ValueError):
    pass


def _children(value: Any):
    if isinstance(value, Mapping):
        return list(value.items())
    return list(enumerate(value))


def _is_container(value: Any) -> bool:
    return isinstance(value, (Mapping, list, tuple))


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_form(data: Mapping, max_depth: int = DEFAULT_MAX_DEPTH) -> List[Tuple[str, str]]:
    """
    Flatten a nested mapping into ordered form fields.

    Mapping keys become ``parent[child]`` and sequence elements become
    ``parent[index]``. ``None`` values are dropped rather than sent empty.
    Output follows the insertion order of the input.

    Raises FormEncodingError when nesting exceeds ``max_depth`` or a
    container appears inside itself.
    """
    if not isinstance(data, Mapping):
        raise FormEncodingError(f"Expected a mapping, got {type(data).__name__}")

    pairs: List[Tuple[str, str]] = []
    # Each frame: (key path, value, depth, ids of enclosing containers)
    stack = [(str(key), value, 1, (id(data),)) for key, value in reversed(_children(data))]

    while stack:
        path, value, depth, ancestors = stack.pop()
        if value is None:
            continue

        if not _is_container(value):
            pairs.append((path, _scalar(value)))
            continue

        if id(value) in ancestors:
            raise FormEncodingError(f"Cycle detected at '{path}'")
        if depth >= max_depth:
            raise FormEncodingError(f"Nesting deeper than {max_depth} levels at '{path}'")

        inner = ancestors + (id(value),)
        for key, child in reversed(_children(value)):
            stack.append((f"{path}[{key}]", child, depth + 1, inner))

    return pairs


def urlencode_form(data: Mapping, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    return urlencode(encode_form(data, max_depth=max_depth))
