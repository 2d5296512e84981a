# pharmashe/core/definitions.py

"""Constants for segment kinds, rendered block kinds and vocabulary sections."""


class SegmentKind:
    """Kinds of segment produced by the term segmenter."""

    PLAIN = "plain"
    CLICKABLE = "clickable"


class BlockKind:
    """Kinds of block produced when rendering an analysis line by line."""

    HEADING = "heading"
    SUBHEADING = "subheading"
    PARAGRAPH = "paragraph"
    SPACER = "spacer"


class Vocabulary:
    """Section names in terms.yaml."""

    EXCLUDED = "excluded"
    INCLUDED = "included"


class SearchType:
    """openFDA search modes."""

    BRAND = "brand"
    INGREDIENT = "ingredient"
