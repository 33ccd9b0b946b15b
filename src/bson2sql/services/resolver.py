"""Field resolution against decoded documents.

Arrays are never indexed or flattened here; expansion of ``[]`` paths is
driven by the SQL generator, which resolves the array and then each element.
"""

from collections.abc import Mapping

from bson2sql.models.paths import PATH_SEPARATOR
from bson2sql.models.value import Value


def resolve_field(document: Value, path: str) -> Value:
    """Resolve a dotted path against a document.

    Every hop but the last must land on a subdocument. Returns None (absent)
    when a key is missing, a hop lands on an array or scalar, or the resolved
    value is null.
    """
    current = document
    for segment in path.split(PATH_SEPARATOR):
        if not isinstance(current, Mapping):
            return None
        current = current.get(segment)
        if current is None:
            return None
    return current


def resolve_element(element: Value, element_path: str) -> Value:
    """Resolve the value addressed inside one element of an expanded array.

    ``element_path`` is dotted like any other path, so ``pages[].meta.title``
    reads ``element["meta"]["title"]`` rather than a literal ``"meta.title"``
    key. An empty path yields the element itself.
    """
    if not element_path:
        return element
    return resolve_field(element, element_path)
