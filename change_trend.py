"""
Trend classifier for single patch-note change lines.

Decides whether one line ("Cooldown: 12/11/10 → 10/9/8", "Slow no longer
reduced by tenacity", ...) reads as a buff (up), a nerf (down) or neither.
Vocabulary covers English and Russian patch notes.
"""

import re
from typing import Optional, Sequence

from patch_models import Trend


class TrendClassifier:
    """Keyword + arrow-split heuristics for up/down/neutral trends."""

    # A removed penalty is a buff; checked before the removal rule below.
    NO_LONGER_REDUCED_PHRASES = (
        "no longer reduced",
        "больше не уменьшается",
    )

    REMOVAL_KEYWORDS = (
        "removed",
        "удалено",
    )

    CESSATION_PHRASES = (
        "no longer",
        "больше не",
    )

    # Stats where a smaller number is the better number
    INVERSE_KEYWORDS = (
        "cooldown",
        "перезарядка",
        "cost",
        "стоимость",
        "затраты",
        "mana",
        "маны",
        "energy",
        "энергии",
        "time",
        "время",
    )

    BUFF_KEYWORDS = (
        "increased",
        "buffed",
        "new effect",
        "увеличен",
        "усилен",
        "новый эффект",
    )

    NERF_KEYWORDS = (
        "decreased",
        "nerfed",
        "removed",
        "уменьшен",
        "ослаблен",
        "удалено",
    )

    def __init__(self):
        # "A → B", "A ⇒ B", "A -> B"
        self.arrow_pattern = re.compile(r"\s*(?:→|⇒|->)\s*")
        # 60, -5, 0.5, 1,5 (comma decimal)
        self.number_pattern = re.compile(r"[-+]?\d+(?:[.,]\d+)?")

    # -------------------------- [Helpers] --------------------------

    @staticmethod
    def _contains_any(text_lower: str, keywords: Sequence[str]) -> bool:
        return any(keyword in text_lower for keyword in keywords)

    def sum_numbers(self, text: str) -> Optional[float]:
        """Sum every number in text; None when there is nothing to sum.

        Per-rank values ("60/70/80") add up to a rough "total power" figure.
        """
        numbers = []
        for raw in self.number_pattern.findall(text):
            try:
                numbers.append(float(raw.replace(",", ".")))
            except ValueError:
                continue
        if not numbers:
            return None
        return sum(numbers)

    def is_inverse(self, text: str) -> bool:
        return self._contains_any(text.lower(), self.INVERSE_KEYWORDS)

    # -------------------------- [Classification] --------------------------

    def classify(self, text: str) -> Trend:
        """Classify one change line. Never raises."""
        if not text:
            return Trend.NEUTRAL
        text_lower = text.lower()

        if self._contains_any(text_lower, self.NO_LONGER_REDUCED_PHRASES):
            return Trend.UP
        if self._contains_any(text_lower, self.REMOVAL_KEYWORDS) or self._contains_any(
            text_lower, self.CESSATION_PHRASES
        ):
            return Trend.DOWN

        inverse = self._contains_any(text_lower, self.INVERSE_KEYWORDS)

        parts = self.arrow_pattern.split(text)
        if len(parts) == 2:
            before = self.sum_numbers(parts[0])
            after = self.sum_numbers(parts[1])
            if before is not None and after is not None:
                if after > before:
                    return Trend.DOWN if inverse else Trend.UP
                if after < before:
                    return Trend.UP if inverse else Trend.DOWN

        if self._contains_any(text_lower, self.BUFF_KEYWORDS):
            return Trend.UP
        if self._contains_any(text_lower, self.NERF_KEYWORDS):
            return Trend.DOWN
        return Trend.NEUTRAL


DEFAULT_CLASSIFIER = TrendClassifier()


def classify_trend(line: str) -> Trend:
    """Module-level shortcut over the shared, stateless classifier."""
    return DEFAULT_CLASSIFIER.classify(line)
