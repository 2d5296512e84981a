# pharmashe/service/dictionary.py

"""Definition lookup for clickable medical terms via the Free Dictionary API."""

import logging
from typing import Any, List
from urllib.parse import quote

import requests

from pharmashe.core.domain import Definition, LookupResult

logger = logging.getLogger(__name__)


class DictionaryClient:
    """Fetches short definitions for a single lower-case word.

    A word the service does not know, a failed request and an unexpected
    payload all produce a LookupResult with found=False.
    """

    def __init__(
        self,
        base_url: str,
        max_definitions: int = 3,
        max_per_group: int = 2,
        timeout: float = 15.0,
    ) -> None:
        self._base_url = base_url
        self._max_definitions = max_definitions
        self._max_per_group = max_per_group
        self._timeout = timeout

    def lookup(self, word: str) -> LookupResult:
        word = (word or "").strip().lower()
        if not word:
            return LookupResult(word=word, found=False)

        url = f"{self._base_url}/{quote(word, safe='')}"

        try:
            response = requests.get(url, timeout=self._timeout)
        except requests.RequestException:
            logger.warning("Definition request failed", exc_info=True)
            return LookupResult(word=word, found=False)

        if not response.ok:
            logger.info(
                "Definition not found",
                extra={"status_code": response.status_code, "word_length": len(word)},
            )
            return LookupResult(word=word, found=False)

        try:
            definitions = self._extract(response.json())
        except ValueError:
            logger.warning("Dictionary returned invalid JSON")
            return LookupResult(word=word, found=False)

        return LookupResult(word=word, found=bool(definitions), definitions=definitions)

    def _extract(self, data: Any) -> List[Definition]:
        """Takes up to max_per_group definitions from each meaning of the first entry.

        Meanings or definition entries that are not objects are skipped.
        """
        if not isinstance(data, list) or not data or not isinstance(data[0], dict):
            return []

        definitions: List[Definition] = []
        for meaning in _as_list(data[0].get("meanings")):
            if not isinstance(meaning, dict):
                continue
            part_of_speech = meaning.get("partOfSpeech") or ""
            entries = [e for e in _as_list(meaning.get("definitions")) if isinstance(e, dict)]
            for entry in entries[: self._max_per_group]:
                text = entry.get("definition")
                if text and isinstance(text, str):
                    definitions.append(Definition(str(part_of_speech), text))

        return definitions[: self._max_definitions]


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []
