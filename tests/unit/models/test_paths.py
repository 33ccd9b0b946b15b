import pytest

from bson2sql.models.paths import ExpansionPath, is_expansion_path, split_expansion_path


def test_plain_path_is_not_expansion() -> None:
    assert not is_expansion_path("profile.name")
    assert split_expansion_path("profile.name") is None


def test_splits_array_and_element_path() -> None:
    assert split_expansion_path("pages[].text") == ExpansionPath(array_path="pages", element_path="text")


def test_nested_array_and_element_paths() -> None:
    result = split_expansion_path("crawl.pages[].meta.title")

    assert result is not None
    assert result.array_path == "crawl.pages"
    assert result.element_path == "meta.title"


def test_trailing_marker_addresses_element_itself() -> None:
    assert split_expansion_path("tags[]") == ExpansionPath(array_path="tags", element_path="")


@pytest.mark.parametrize(
    "path",
    [
        "pages[].links[].href",
        "[].text",
        "pages[]text",
        "pages[].",
    ],
)
def test_rejects_malformed_expansion_paths(path: str) -> None:
    with pytest.raises(ValueError):
        split_expansion_path(path)
