"""Weighted scoring of action-target candidates."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from pagelens.core.interfaces.driver import IElement

# Words that label a control which submits or advances a form
ACTION_SYNONYMS = (
    "sign in",
    "login",
    "submit",
    "continue",
    "next",
    "authorize",
    "enter",
    "start",
    "proceed",
)

# Tokens in id/class names that mark a submit control
ACTION_NAME_TOKENS = ("login", "signin", "submit")


@dataclass(frozen=True)
class CandidateFeatures:
    """The parts of an element the scoring rules look at."""

    input_type: str = ""
    text: str = ""
    aria_label: str = ""
    value: str = ""
    dom_id: str = ""
    class_name: str = ""

    @property
    def label(self) -> str:
        """Visible and accessible labelling, lowercased."""
        return " ".join(filter(None, [self.text, self.aria_label, self.value])).lower()

    @property
    def names(self) -> str:
        """Developer-facing names, lowercased."""
        return " ".join(filter(None, [self.dom_id, self.class_name])).lower()

    @classmethod
    async def from_element(cls, element: IElement) -> CandidateFeatures:
        """Read features from a live element."""
        return cls(
            input_type=await element.get_attribute("type") or "",
            text=await element.get_text() or "",
            aria_label=await element.get_attribute("aria-label") or "",
            value=await element.get_attribute("value") or "",
            dom_id=await element.get_attribute("id") or "",
            class_name=await element.get_attribute("class") or "",
        )


@dataclass(frozen=True)
class ScoreRule:
    """A named rule: ``weight`` is added once per match ``matches`` reports."""

    name: str
    weight: int
    matches: Callable[[CandidateFeatures], int]


def _is_submit(features: CandidateFeatures) -> int:
    return int(features.input_type.lower() == "submit")


def _synonym_matches(features: CandidateFeatures) -> int:
    label = features.label
    return sum(1 for word in ACTION_SYNONYMS if word in label)


def _name_token_matches(features: CandidateFeatures) -> int:
    names = features.names
    return sum(1 for token in ACTION_NAME_TOKENS if token in names)


ACTION_RULES: tuple[ScoreRule, ...] = (
    ScoreRule("submit_type", 5, _is_submit),
    ScoreRule("label_synonym", 3, _synonym_matches),
    ScoreRule("name_token", 2, _name_token_matches),
)


def score(features: CandidateFeatures, rules: Sequence[ScoreRule] = ACTION_RULES) -> int:
    """Sum of rule weights times match counts."""
    return sum(rule.weight * rule.matches(features) for rule in rules)


def pick_best(scored: Sequence[tuple[int, int]]) -> int | None:
    """
    Index of the winning candidate.

    Args:
        scored: ``(score, document_position)`` pairs

    Returns:
        Index into ``scored`` of the highest positive score, earliest
        document position on ties, or None when nothing scores
    """
    best: int | None = None
    for i, (points, position) in enumerate(scored):
        if points <= 0:
            continue
        if best is None:
            best = i
            continue
        best_points, best_position = scored[best]
        if points > best_points or (points == best_points and position < best_position):
            best = i
    return best
