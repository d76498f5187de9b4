from __future__ import annotations

"""
Key-path index: dotted key paths compiled into a nested lookup.

Shape: Dict[segment, None | index]
- None marks a terminal entry: the key and everything under it is dropped
- a nested dict lists which child keys must be dropped under that key
- a missing key is kept untouched

A terminal entry always wins over deeper ones ("a" shadows "a.b"), no matter
which path was registered first.
"""

from typing import Dict, Iterable, List, Optional, Union

KeyPathIndex = Dict[str, Optional["KeyPathIndex"]]

PATH_SEPARATOR = "."


def split_key_path(path: str) -> List[str]:
    # Empty segments ("a..b", ".a", "a.") are kept as literal "" keys.
    return str(path).split(PATH_SEPARATOR)


def add_key_path(index: KeyPathIndex, path: str) -> KeyPathIndex:
    segments = split_key_path(path)
    node = index
    last = len(segments) - 1
    for i, seg in enumerate(segments):
        if seg in node and node[seg] is None:
            # already dropped as a whole by a shorter path
            return index
        if i == last:
            node[seg] = None
            return index
        child = node.get(seg)
        if child is None:
            child = {}
            node[seg] = child
        node = child
    return index


def build_key_index(key_paths: Optional[Iterable[str]]) -> KeyPathIndex:
    index: KeyPathIndex = {}
    for path in key_paths or ():
        add_key_path(index, path)
    return index


def is_terminal(entry: Union[KeyPathIndex, None]) -> bool:
    return entry is None


def describe_key_index(index: Optional[KeyPathIndex]) -> List[str]:
    """
    Flatten an index back into its effective dotted paths (sorted).
    """
    out: List[str] = []

    def _walk(node: KeyPathIndex, prefix: List[str]) -> None:
        for seg, child in node.items():
            path = prefix + [seg]
            if child is None:
                out.append(PATH_SEPARATOR.join(path))
            else:
                _walk(child, path)

    _walk(index or {}, [])
    return sorted(out)
