# pharmashe/engine/markdown.py

"""Line-by-line rendering of LLM analysis text into display blocks."""

import re
from typing import List, Optional

from pharmashe.core.definitions import BlockKind
from pharmashe.core.domain import Block, ClickableTerm, Segment
from pharmashe.engine.classifier import TermClassifier
from pharmashe.engine.segmenter import segment

_SUBHEADING_PREFIX = re.compile(r"^##\s*")
_HEADING_PREFIX = re.compile(r"^#\s*")


def render_blocks(
    text: str, classifier: Optional[TermClassifier] = None
) -> List[Block]:
    """Converts analysis text into headings, paragraphs and spacers.

    Each line is handled on its own: blank lines become spacers, lines starting
    with "##" become subheadings and lines starting with "#" become headings.
    Everything else is a paragraph. Non-spacer blocks carry their segments so
    clickable terms can be rendered as lookups.
    """
    blocks: List[Block] = []

    for line in text.split("\n"):
        if line.strip() == "":
            blocks.append(Block(kind=BlockKind.SPACER))
            continue

        if line.startswith("##"):
            kind = BlockKind.SUBHEADING
            body = _SUBHEADING_PREFIX.sub("", line)
        elif line.startswith("#"):
            kind = BlockKind.HEADING
            body = _HEADING_PREFIX.sub("", line)
        else:
            kind = BlockKind.PARAGRAPH
            body = line

        blocks.append(Block(kind=kind, text=body, segments=segment(body, classifier)))

    return blocks


def highlight_terms(segments: List[Segment], color: str = "blue") -> str:
    """Joins segments back into markdown with clickable terms colored."""
    parts = []
    for s in segments:
        if isinstance(s, ClickableTerm):
            parts.append(f":{color}[{s.text}]")
        else:
            parts.append(s.text)
    return "".join(parts)
