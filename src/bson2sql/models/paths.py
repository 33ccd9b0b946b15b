"""Source field paths.

Paths are dot-separated (``profile.address.city``). A single ``[]`` marker
(``pages[].text``) denotes array expansion: one output row per element.
"""

from pydantic import BaseModel, ConfigDict

EXPANSION_MARKER = "[]"
PATH_SEPARATOR = "."


class ExpansionPath(BaseModel):
    """An array-expansion path split at its ``[]`` marker.

    ``array_path`` addresses the array in the top-level document and
    ``element_path`` addresses the value inside each element. An empty
    ``element_path`` means the element itself is the value.
    """

    array_path: str
    element_path: str

    model_config = ConfigDict(frozen=True)


def is_expansion_path(path: str) -> bool:
    return EXPANSION_MARKER in path


def split_expansion_path(path: str) -> ExpansionPath | None:
    """Split ``pages[].text`` into ``pages`` and ``text``.

    Returns None for plain paths.

    Raises:
        ValueError: If the path holds more than one marker, has nothing
            before the marker, or continues after it without a separator.
    """
    marker_count = path.count(EXPANSION_MARKER)
    if marker_count == 0:
        return None
    if marker_count > 1:
        raise ValueError(f"path '{path}' contains more than one '{EXPANSION_MARKER}' marker")

    array_path, _, remainder = path.partition(EXPANSION_MARKER)
    if not array_path:
        raise ValueError(f"path '{path}' has no array field before '{EXPANSION_MARKER}'")
    if remainder and (not remainder.startswith(PATH_SEPARATOR) or len(remainder) == 1):
        raise ValueError(f"path '{path}' must end with '{EXPANSION_MARKER}' or continue with '.<field>'")

    return ExpansionPath(array_path=array_path, element_path=remainder[1:])
