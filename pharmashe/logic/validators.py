# pharmashe/logic/validators.py

"""Validation of drug names entered by the user."""

import re
import logging
from typing import List

from pharmashe.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 100


class ValidationLogic:
    """Utility patterns for drug name input."""

    # Commas, semicolons and line breaks separate drug names
    SEPARATORS = re.compile(r"[,;\r\n]+")
    HAS_LETTER = re.compile(r"[A-Za-z]")
    WHITESPACE = re.compile(r"\s+")

    @staticmethod
    def clean(name: str) -> str:
        """Trims a name and collapses internal whitespace."""
        return ValidationLogic.WHITESPACE.sub(" ", name).strip()


def parse_drug_names(raw: str) -> List[str]:
    """Splits free-text input into distinct drug names.

    Args:
        raw: Text such as "Ibuprofen, aspirin\\nMetformin"

    Returns:
        Names in input order, de-duplicated case-insensitively keeping the
        first spelling seen
    """
    if not raw:
        return []

    names: List[str] = []
    seen = set()

    for part in ValidationLogic.SEPARATORS.split(raw):
        name = ValidationLogic.clean(part)
        if not name or name.lower() in seen:
            continue
        seen.add(name.lower())
        names.append(name)

    return names


def validate_drug_list(drugs: List[str], max_drugs: int) -> List[str]:
    """Checks a drug list before it is sent for analysis.

    Args:
        drugs: Drug names, already split
        max_drugs: Upper bound on the number of drugs in one analysis

    Returns:
        The cleaned names

    Raises:
        ValidationError: If the list is empty, too long, or holds an invalid name
    """
    if not drugs:
        raise ValidationError("Drugs list is required and must not be empty")

    cleaned = [ValidationLogic.clean(d) for d in drugs if isinstance(d, str)]

    if len(cleaned) != len(drugs):
        raise ValidationError("Drug names must be strings")

    if len(cleaned) > max_drugs:
        raise ValidationError(
            f"Too many drugs: {len(cleaned)} given, at most {max_drugs} allowed"
        )

    for name in cleaned:
        if not ValidationLogic.HAS_LETTER.search(name):
            raise ValidationError(f"Invalid drug name: '{name}'")
        if len(name) > MAX_NAME_LENGTH:
            raise ValidationError(
                f"Drug name exceeds {MAX_NAME_LENGTH} characters"
            )

    logger.debug("Drug list validated", extra={"drug_count": len(cleaned)})
    return cleaned
