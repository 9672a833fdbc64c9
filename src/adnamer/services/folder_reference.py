"""Parsing of user-supplied Drive folder references."""

import re

from adnamer.utils.errors import InvalidReference

FOLDER_URL_PATTERN = re.compile(r"/folders/([A-Za-z0-9_-]+)")
FOLDER_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def resolve_folder_reference(reference: str) -> str:
    """Resolve a folder URL or bare folder ID into a Drive folder ID.

    Args:
        reference: Text pasted by the user, e.g.
            ``https://drive.google.com/drive/folders/ABC123?usp=sharing`` or ``ABC123``

    Returns:
        The folder ID

    Raises:
        InvalidReference: If the text is neither a folder URL nor an ID
    """
    if reference is None:
        raise InvalidReference("")

    match = FOLDER_URL_PATTERN.search(reference)
    if match:
        return match.group(1)

    trimmed = reference.strip()
    if FOLDER_ID_PATTERN.match(trimmed):
        return trimmed

    raise InvalidReference(reference)
