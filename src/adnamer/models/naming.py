"""Naming configuration models for adnamer."""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Tuple


class Multiplier(Enum):
    """Promotional reward tier encoded at the start of every filename."""
    QUINTUPLE = "5000"
    QUADRUPLE = "4000"
    TRIPLE = "3000"
    DOUBLE = "2000"
    EVERGREEN = "1000"
    END_OF_SWEEPS = "0001"

    @property
    def label(self) -> str:
        return MULTIPLIER_LABELS[self]

    @classmethod
    def parse(cls, value: str) -> 'Multiplier':
        """Look up a multiplier by its code string (e.g. "3000")."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip())
        except ValueError:
            codes = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown multiplier code '{value}' (expected one of: {codes})")


MULTIPLIER_LABELS = {
    Multiplier.QUINTUPLE: "5X Entries",
    Multiplier.QUADRUPLE: "4X Entries",
    Multiplier.TRIPLE: "3X Entries",
    Multiplier.DOUBLE: "2X Entries",
    Multiplier.EVERGREEN: "1X or No Mention (evergreen)",
    Multiplier.END_OF_SWEEPS: "End of Sweeps / Last Chance",
}


# Payment-related phrases that make content NOT TikTok safe
DEFAULT_PAYMENT_PHRASES: Tuple[str, ...] = (
    "$12.95",
    "$12",
    "12.95",
    "twelve ninety-five",
    "twelve dollars",
    "every dollar equals entries",
    "dollar equals entries",
    "dollars equal entries",
    "entry per dollar",
    "entries per dollar",
    "cost",
    "price",
    "payment",
    "pay ",
    "charge",
    "purchase",
    "buy",
    "buy now",
    "credit card",
    "debit card",
)

# Disclaimers stripped before the payment scan ("No purchase necessary" is required sweepstakes copy)
DEFAULT_EXEMPT_PHRASES: Tuple[str, ...] = (
    "no purchase necessary",
    "no purchase needed",
    "no purchase required",
    "no payment necessary",
    "no payment needed",
    "no payment required",
)

# Ordered (pattern, code) pairs; the first match wins
DEFAULT_MULTIPLIER_RULES: Tuple[Tuple[str, str], ...] = (
    (r"\b5x\s*entr", "5000"),
    (r"\bfive\s*times?\s*(?:the\s*)?entr", "5000"),
    (r"quintuple", "5000"),
    (r"\b4x\s*entr", "4000"),
    (r"\bfour\s*times?\s*(?:the\s*)?entr", "4000"),
    (r"quadruple", "4000"),
    (r"\b3x\s*entr", "3000"),
    (r"\bthree\s*times?\s*(?:the\s*)?entr", "3000"),
    (r"triple", "3000"),
    (r"\b2x\s*entr", "2000"),
    (r"\btwo\s*times?\s*(?:the\s*)?entr", "2000"),
    (r"double", "2000"),
    (r"end\s*of\s*(?:the\s*)?sweeps", "0001"),
    (r"last\s*chance", "0001"),
    (r"final\s*days?", "0001"),
    (r"ending\s*soon", "0001"),
)

DEFAULT_STOP_WORDS: FrozenSet[str] = frozenset({
    "the", "a", "an", "is", "are", "this", "that", "and", "or", "but",
    "hey", "hi", "hello", "so", "um", "uh", "you", "your", "guys",
    "yeah", "okay", "like", "just", "with", "for", "was", "were",
})


@dataclass(frozen=True)
class NamingRules:
    """Tunable data driving classification and filename composition."""

    sequence_width: int = 2
    safe_label: str = "TTS"
    unsafe_label: str = ""  # empty: omit the label for unsafe videos
    extension: str = "mp4"
    stop_words: FrozenSet[str] = DEFAULT_STOP_WORDS
    payment_phrases: Tuple[str, ...] = DEFAULT_PAYMENT_PHRASES
    exempt_phrases: Tuple[str, ...] = DEFAULT_EXEMPT_PHRASES
    multiplier_rules: Tuple[Tuple[str, str], ...] = DEFAULT_MULTIPLIER_RULES
    description_words: int = 4
    description_max_length: int = 25
    min_word_length: int = 3
    fallback_description: str = "Ad"

    def __post_init__(self):
        if self.sequence_width < 1:
            raise ValueError("sequence_width must be at least 1")
        for _, code in self.multiplier_rules:
            Multiplier.parse(code)


@dataclass(frozen=True)
class NamingConfig:
    """Session-scoped naming inputs chosen by the user."""

    creator_code: str
    starting_sequence: int = 1
    default_multiplier: Multiplier = Multiplier.EVERGREEN

    def __post_init__(self):
        if self.starting_sequence < 1:
            raise ValueError("starting_sequence must be at least 1")
        if not str(self.creator_code).strip():
            raise ValueError("creator_code must not be empty")
        # Accept plain code strings for convenience
        object.__setattr__(self, 'default_multiplier', Multiplier.parse(self.default_multiplier))
