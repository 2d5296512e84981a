# pharmashe/engine/segmenter.py

"""Splits analysis text into plain runs and clickable medical terms."""

import re
from typing import Iterator, List, Optional

from pharmashe.core.domain import ClickableTerm, PlainText, Segment, Term
from pharmashe.engine.classifier import TermClassifier, get_classifier, normalize

_TERM_PATTERN = re.compile(r"[a-zA-Z]+")


def extract_terms(text: str) -> Iterator[Term]:
    """Yields every maximal run of ASCII letters with its start offset.

    Anything else (whitespace, digits, punctuation, markdown syntax) separates
    terms and is left for the caller to emit as plain text.
    """
    for match in _TERM_PATTERN.finditer(text):
        yield Term(text=match.group(), start=match.start())


def segment(text: str, classifier: Optional[TermClassifier] = None) -> List[Segment]:
    """Splits text into PlainText and ClickableTerm segments.

    Joining the ``text`` of every returned segment gives back the input
    unchanged. Text without clickable terms, including the empty string,
    comes back as a single PlainText segment.
    """
    classifier = classifier or get_classifier()
    segments: List[Segment] = []
    cursor = 0

    for term in extract_terms(text):
        if not classifier.is_clickable(term.text):
            continue

        if term.start > cursor:
            segments.append(PlainText(text[cursor : term.start]))

        segments.append(ClickableTerm(text=term.text, key=normalize(term.text)))
        cursor = term.end

    if cursor < len(text) or not segments:
        segments.append(PlainText(text[cursor:]))

    return segments


def clickable_terms(
    text: str, classifier: Optional[TermClassifier] = None
) -> List[str]:
    """Returns distinct lookup keys in order of first appearance."""
    seen = {}
    for s in segment(text, classifier):
        if isinstance(s, ClickableTerm):
            seen.setdefault(s.key, None)
    return list(seen)
