"""Per-multiplier sequence numbers that avoid filename collisions."""

import logging
import re
from typing import Iterable, List, Optional, Union

from adnamer.models.naming import Multiplier

logger = logging.getLogger(__name__)

MultiplierLike = Union[Multiplier, str]


def _code(multiplier: MultiplierLike) -> str:
    return Multiplier.parse(multiplier).value


def parse_sequence(multiplier: MultiplierLike, name: str) -> Optional[int]:
    """Return the sequence number encoded after the multiplier prefix of a name."""
    match = re.match(rf"^{re.escape(_code(multiplier))}(\d+)", name or "")
    if match:
        return int(match.group(1))
    return None


def allocate_sequence(multiplier: MultiplierLike, existing_names: Iterable[str],
                      starting_sequence: int = 1) -> int:
    """Compute the next free sequence number for a multiplier.

    Args:
        multiplier: Multiplier code the new name will start with
        existing_names: Names already present (or about to be) in the folder
        starting_sequence: Lowest number the caller wants to hand out

    Returns:
        max(starting_sequence, highest existing sequence + 1)
    """
    highest = None
    for name in existing_names:
        sequence = parse_sequence(multiplier, name)
        if sequence is not None and (highest is None or sequence > highest):
            highest = sequence

    if highest is None:
        return starting_sequence
    return max(starting_sequence, highest + 1)


def format_sequence(sequence: int, width: int = 2) -> str:
    """Zero-pad a sequence number; wider numbers are never truncated."""
    if sequence < 0:
        raise ValueError(f"Sequence must not be negative: {sequence}")
    return str(sequence).zfill(width)


class SequenceAllocator:
    """Allocates sequences against an accumulating view of folder names.

    Every allocation reserves its number so later items in the same batch
    never receive a duplicate, even before anything is renamed.
    """

    def __init__(self, existing_names: Iterable[str], starting_sequence: int = 1):
        self.names: List[str] = list(existing_names)
        self.starting_sequence = starting_sequence

    def allocate(self, multiplier: MultiplierLike) -> int:
        code = _code(multiplier)
        sequence = allocate_sequence(code, self.names, self.starting_sequence)
        self.reserve(code, sequence)
        logger.debug(f"Allocated sequence {sequence} for multiplier {code}")
        return sequence

    def reserve(self, multiplier: MultiplierLike, sequence: int) -> None:
        """Record a sequence as taken without computing a new one."""
        self.names.append(f"{_code(multiplier)}{sequence}")
