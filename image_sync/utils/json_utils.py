"""
Small JSON helpers for reading build metadata files.
"""
import json
import re
from pathlib import Path
from typing import Any, Dict, List, Union

from ..exceptions import NotFoundError

PATH_TOKEN_RE = re.compile(r'\.(?:"([^"]+)"|([A-Za-z_][\w-]*))|\[(\d+)\]')

_MISSING = object()


def load_json(file: Union[str, Path]) -> Any:
    with open(file, 'r', encoding='utf-8') as handle:
        return json.load(handle)


def parse_path(pattern: str) -> List[Union[str, int]]:
    """
    Split a jq style path such as ``.Segment.Modules[0]."x.y"`` into keys.

    Raises:
        ValueError: If the pattern is not a simple path
    """
    if pattern == '.':
        return []

    tokens: List[Union[str, int]] = []
    position = 0
    while position < len(pattern):
        match = PATH_TOKEN_RE.match(pattern, position)
        if not match:
            raise ValueError(f"Unsupported JSON path: {pattern}")
        quoted, plain, index = match.groups()
        tokens.append(int(index) if index is not None else (quoted or plain))
        position = match.end()
    return tokens


def _resolve(document: Any, tokens: List[Union[str, int]]) -> Any:
    current = document
    for token in tokens:
        if isinstance(token, int):
            if not isinstance(current, list) or token >= len(current):
                return _MISSING
        elif not isinstance(current, dict) or token not in current:
            return _MISSING
        current = current[token]
    return current


def get_json_value(file: Union[str, Path], *patterns: str) -> Any:
    """
    First non-null value found at any of the paths, tried in order.

    Raises:
        NotFoundError: If no path resolves to a non-null value
    """
    document = load_json(file)
    for pattern in patterns:
        value = _resolve(document, parse_path(pattern))
        if value is not _MISSING and value is not None:
            return value

    raise NotFoundError(f"None of {', '.join(patterns)} found in {file}")


def add_json_ancestor_objects(file: Union[str, Path], *ancestors: str) -> Dict[str, Any]:
    """Wrap the document in nested objects, the first ancestor outermost."""
    document = load_json(file)
    for ancestor in reversed(ancestors):
        document = {ancestor: document}
    return document
