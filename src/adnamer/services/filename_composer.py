"""Filename composition following the ad naming convention.

Template::

    <multiplier><sequence>[.<safety label>].<creator>.<description>.<duration>sec.<ext>

The safety label is ``NamingRules.safe_label`` for TikTok-safe videos and
``NamingRules.unsafe_label`` otherwise; an empty label drops the segment.
"""

import logging
import re
from typing import Optional

from adnamer.models.naming import Multiplier, NamingRules
from adnamer.services.sequence_allocator import format_sequence

logger = logging.getLogger(__name__)

NAMING_CONVENTION = "[MULTIPLIER][SEQUENCE].[TTS].[CREATOR].[DESCRIPTION].[LENGTH]sec.mp4"


def _sanitize_segment(value: str, fallback: str) -> str:
    """Strip path separators and dots so a value stays one filename segment."""
    sanitized = re.sub(r"[/\\.]", "", str(value))
    sanitized = re.sub(r"\s+", "", sanitized)
    return sanitized or fallback


def compose_filename(
    multiplier: Multiplier,
    sequence: int,
    is_safe: bool,
    creator_code: str,
    description: str,
    duration_seconds: int,
    rules: Optional[NamingRules] = None,
) -> str:
    """Compose the canonical filename for a video.

    Args:
        multiplier: Multiplier tier (enum or code string)
        sequence: Allocated sequence number
        is_safe: Whether the video is TikTok safe
        creator_code: Creator code or initials
        description: Short CamelCase description
        duration_seconds: Video length in whole seconds
        rules: Naming rules providing width, labels and extension

    Returns:
        The composed filename
    """
    rules = rules or NamingRules()
    code = Multiplier.parse(multiplier).value
    sequence_str = format_sequence(sequence, rules.sequence_width)

    segments = [f"{code}{sequence_str}"]

    label = rules.safe_label if is_safe else rules.unsafe_label
    if label:
        segments.append(label)

    segments.append(_sanitize_segment(creator_code, "0"))
    segments.append(_sanitize_segment(description, rules.fallback_description))
    segments.append(f"{max(int(duration_seconds or 0), 0)}sec")
    segments.append(rules.extension.lstrip("."))

    return ".".join(segments)


class FilenameComposer:
    """Composes filenames with a fixed set of naming rules."""

    def __init__(self, rules: Optional[NamingRules] = None):
        self.rules = rules or NamingRules()

    def compose(self, multiplier: Multiplier, sequence: int, is_safe: bool,
                creator_code: str, description: str, duration_seconds: int) -> str:
        name = compose_filename(
            multiplier, sequence, is_safe, creator_code, description,
            duration_seconds, self.rules,
        )
        logger.debug(f"Composed filename: {name}")
        return name
