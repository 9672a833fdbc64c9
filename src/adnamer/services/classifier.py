"""Transcript classification for ad naming."""

import logging
import re
from typing import List, Optional, Pattern, Tuple

from adnamer.models.naming import Multiplier, NamingRules
from adnamer.models.video import ClassificationResult

logger = logging.getLogger(__name__)


class TranscriptClassifier:
    """Derives TikTok safety, multiplier tier and a short description from speech."""

    def __init__(self, rules: Optional[NamingRules] = None):
        """Initialize the classifier.

        Args:
            rules: Denylist, multiplier patterns and description settings.
                Defaults to the stock naming rules.
        """
        self.rules = rules or NamingRules()
        self._multiplier_patterns: List[Tuple[Pattern, Multiplier]] = [
            (re.compile(pattern, re.IGNORECASE), Multiplier.parse(code))
            for pattern, code in self.rules.multiplier_rules
        ]
        self._payment_phrases = [phrase.lower() for phrase in self.rules.payment_phrases]
        self._exempt_phrases = [phrase.lower() for phrase in self.rules.exempt_phrases]
        self._stop_words = {word.lower() for word in self.rules.stop_words}

    def is_tiktok_safe(self, transcript: str) -> bool:
        """Check a transcript for payment language.

        Matching is case-insensitive substring containment; any single
        denylisted phrase makes the transcript unsafe.
        """
        if not transcript:
            return True

        lowered = transcript.lower()
        for disclaimer in self._exempt_phrases:
            lowered = lowered.replace(disclaimer, " ")

        for phrase in self._payment_phrases:
            if phrase in lowered:
                logger.debug(f"Payment phrase found in transcript: '{phrase}'")
                return False
        return True

    def detect_multiplier(self, transcript: str,
                          default: Multiplier = Multiplier.EVERGREEN) -> Multiplier:
        """Return the multiplier of the first matching rule, or the default."""
        if not transcript:
            return default

        for pattern, multiplier in self._multiplier_patterns:
            if pattern.search(transcript):
                return multiplier
        return default

    def extract_description(self, transcript: str) -> str:
        """Build a CamelCase description from the first significant words.

        The result is at most ``description_max_length`` characters and never
        empty.
        """
        rules = self.rules
        if not transcript:
            return rules.fallback_description

        cleaned = re.sub(r"[^\w\s]|_", " ", transcript)
        cleaned = re.sub(r"\s+", " ", cleaned).strip()

        words = [
            word for word in cleaned.split(" ")
            if len(word) >= rules.min_word_length and word.lower() not in self._stop_words
        ]

        description = "".join(
            word[:1].upper() + word[1:].lower()
            for word in words[:rules.description_words]
        )
        description = description[:rules.description_max_length]

        return description or rules.fallback_description

    def classify(self, transcript: Optional[str],
                 default_multiplier: Multiplier = Multiplier.EVERGREEN) -> ClassificationResult:
        """Classify a transcript; never raises.

        Args:
            transcript: Speech transcript, possibly empty or None
            default_multiplier: Tier used when no multiplier phrase is spoken

        Returns:
            ClassificationResult with safety, description and multiplier
        """
        if not transcript or not transcript.strip():
            return ClassificationResult.default(default_multiplier, self.rules.fallback_description)

        try:
            return ClassificationResult(
                is_safe=self.is_tiktok_safe(transcript),
                description=self.extract_description(transcript),
                multiplier=self.detect_multiplier(transcript, default_multiplier),
            )
        except Exception as e:
            # Garbled transcripts must not block naming
            logger.warning(f"Classification failed, using safe defaults: {e}")
            return ClassificationResult.default(default_multiplier, self.rules.fallback_description)


_default_classifier = TranscriptClassifier()


def classify(transcript: Optional[str]) -> ClassificationResult:
    """Classify a transcript with the stock naming rules."""
    return _default_classifier.classify(transcript)


def is_tiktok_safe(transcript: str) -> bool:
    return _default_classifier.is_tiktok_safe(transcript)


def detect_multiplier(transcript: str) -> Multiplier:
    return _default_classifier.detect_multiplier(transcript)


def extract_description(transcript: str) -> str:
    return _default_classifier.extract_description(transcript)
