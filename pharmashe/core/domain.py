# pharmashe/core/domain.py

"""Domain models for term segmentation, drug data and analysis results."""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Union

from pharmashe.core.definitions import SegmentKind


@dataclass(frozen=True)
class Term:
    """A maximal run of ASCII letters found in a block of text.

    Attributes:
        text: The run with its original casing
        start: Offset of the first character in the source text
    """

    text: str
    start: int

    @property
    def end(self) -> int:
        return self.start + len(self.text)


@dataclass(frozen=True)
class PlainText:
    """Text rendered as-is."""

    text: str
    kind: str = field(default=SegmentKind.PLAIN, init=False)


@dataclass(frozen=True)
class ClickableTerm:
    """A complex medical term rendered as a dictionary lookup trigger.

    Attributes:
        text: Term as it appears in the source, original casing kept for display
        key: Lower-cased normalized form, passed verbatim to the definition lookup
    """

    text: str
    key: str
    kind: str = field(default=SegmentKind.CLICKABLE, init=False)


Segment = Union[PlainText, ClickableTerm]


@dataclass
class Block:
    """One rendered line of an analysis.

    Attributes:
        kind: BlockKind constant
        text: Line text with any heading marker removed
        segments: Segmented text, empty for spacers
    """

    kind: str
    text: str = ""
    segments: List[Segment] = field(default_factory=list)


@dataclass
class DrugInfo:
    """One Drugs@FDA product, flattened from its application record."""

    name: str
    active_ingredients: List[str] = field(default_factory=list)
    dosage_form: Optional[str] = None
    route: Optional[str] = None
    manufacturer: Optional[str] = None
    marketing_status: Optional[str] = None


@dataclass(frozen=True)
class Definition:
    part_of_speech: str
    definition: str


@dataclass
class LookupResult:
    """Outcome of a definition lookup.

    A missing definition is a normal result (``found`` is False), not an error.
    """

    word: str
    found: bool
    definitions: List[Definition] = field(default_factory=list)


@dataclass
class UserProfile:
    """Health profile kept on the local machine and used to personalize analyses.

    Numeric fields are stored as entered so partially typed values survive a
    save/load cycle.
    """

    height_cm: str = ""
    weight_kg: str = ""
    underlying_conditions: str = ""
    concerns: str = ""
    saved_at: str = ""


@dataclass
class AnalysisResult:
    """Result object returned by the analysis service.

    Attributes:
        drugs: Drug names that were analyzed
        analysis: Raw markdown text returned by the LLM
        blocks: Rendered blocks with clickable terms marked
        terms: Distinct lookup keys in order of first appearance
        drug_details: openFDA data gathered for each drug
        timestamp: ISO timestamp of completion
        metadata: Additional processing information, including "error" on failure
    """

    drugs: List[str]
    analysis: str = ""
    blocks: List[Block] = field(default_factory=list)
    terms: List[str] = field(default_factory=list)
    drug_details: List[DrugInfo] = field(default_factory=list)
    timestamp: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class DrugSearchResult:
    query: str
    search_type: str
    results: List[DrugInfo] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
