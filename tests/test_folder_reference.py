import pytest

from adnamer.services.folder_reference import resolve_folder_reference
from adnamer.utils.errors import InvalidReference


def test_folder_url():
    assert resolve_folder_reference("https://drive.google.com/drive/folders/ABC123") == "ABC123"
    assert resolve_folder_reference(
        "https://drive.google.com/drive/u/0/folders/1a-B_c2?usp=sharing"
    ) == "1a-B_c2"


def test_bare_id_is_trimmed():
    assert resolve_folder_reference("ABC123") == "ABC123"
    assert resolve_folder_reference("  1a-B_c2\n") == "1a-B_c2"


def test_invalid_references():
    for reference in ["not a url", "", "   ", "https://example.com/file/d/xyz", None]:
        with pytest.raises(InvalidReference):
            resolve_folder_reference(reference)


def test_invalid_reference_is_a_value_error():
    with pytest.raises(ValueError):
        resolve_folder_reference("a b")
