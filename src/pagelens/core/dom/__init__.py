"""DOM capture, classification, selector synthesis and element resolution."""

from pagelens.core.dom.classifier import ElementClassifier
from pagelens.core.dom.resolver import (
    BehavioralStrategy,
    DirectStrategy,
    ElementResolver,
    FrameStrategy,
    Resolution,
    ResolveOptions,
    ResolveStrategy,
    ScoredStrategy,
    TargetKind,
)
from pagelens.core.dom.scanner import PageScanner, RawNode, derive_element_id
from pagelens.core.dom.scoring import ACTION_RULES, CandidateFeatures, ScoreRule, score
from pagelens.core.dom.selector import SelectorPair, SelectorSynthesizer

__all__ = [
    # Scanning
    "PageScanner",
    "RawNode",
    "derive_element_id",
    # Components
    "ElementClassifier",
    "SelectorSynthesizer",
    "SelectorPair",
    # Resolution
    "ElementResolver",
    "Resolution",
    "ResolveOptions",
    "TargetKind",
    "ResolveStrategy",
    "DirectStrategy",
    "FrameStrategy",
    "ScoredStrategy",
    "BehavioralStrategy",
    # Scoring
    "ACTION_RULES",
    "CandidateFeatures",
    "ScoreRule",
    "score",
]
