# pharmashe/engine/classifier.py

"""Classifier deciding which words are complex medical terms."""

import logging
import re
import threading
from typing import FrozenSet, Iterable, Optional, Pattern, Tuple

from pharmashe.core.loader import PatternLoader

logger = logging.getLogger(__name__)

MIN_TERM_LENGTH = 7
MIN_PATTERN_LENGTH = 8

_NON_ALPHA = re.compile(r"[^a-z]")


def normalize(term: str) -> str:
    """Lower-cases a term and strips every character outside a-z."""
    return _NON_ALPHA.sub("", term.lower())


class TermClassifier:
    """Decides whether a word should be offered as a dictionary lookup.

    Rules are applied to the normalized form, first match wins:
    too short, excluded, included, long enough and matching a pattern.
    The vocabularies are held as frozensets and the pattern table as a tuple,
    so an instance is safe to share between threads.
    """

    def __init__(
        self,
        excluded: Iterable[str],
        included: Iterable[str],
        patterns: Iterable[Tuple[str, Pattern]],
    ) -> None:
        self._excluded: FrozenSet[str] = frozenset(excluded)
        self._included: FrozenSet[str] = frozenset(included)
        self._patterns: Tuple[Tuple[str, Pattern], ...] = tuple(patterns)

    @classmethod
    def from_loader(cls, loader: Optional[PatternLoader] = None) -> "TermClassifier":
        """Builds a classifier from the packaged terms.yaml vocabulary."""
        loader = loader or PatternLoader.get_instance()
        return cls(
            excluded=loader.get_excluded_terms(),
            included=loader.get_included_terms(),
            patterns=loader.get_patterns(),
        )

    def is_clickable(self, term: str) -> bool:
        """Returns True when the term is a complex medical term."""
        key = normalize(term)

        if len(key) < MIN_TERM_LENGTH:
            return False

        if key in self._excluded:
            return False

        if key in self._included:
            return True

        if len(key) >= MIN_PATTERN_LENGTH:
            return self.matching_rule(key) is not None

        return False

    def matching_rule(self, key: str) -> Optional[str]:
        """Returns the name of the first pattern matching a normalized key."""
        for name, pattern in self._patterns:
            if pattern.search(key):
                return name
        return None

    def __repr__(self):
        return (
            f"<TermClassifier "
            f"excluded={len(self._excluded)} "
            f"included={len(self._included)} "
            f"patterns={len(self._patterns)}>"
        )


_default_classifier: Optional[TermClassifier] = None
_lock = threading.Lock()


def get_classifier() -> TermClassifier:
    """Returns the process-wide classifier built from terms.yaml."""
    global _default_classifier
    if _default_classifier is None:
        with _lock:
            if _default_classifier is None:
                _default_classifier = TermClassifier.from_loader()
                logger.debug(f"Default classifier created: {_default_classifier!r}")
    return _default_classifier


def classify(term: str) -> bool:
    """Classifies a single word with the default vocabulary."""
    return get_classifier().is_clickable(term)
