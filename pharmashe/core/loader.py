# pharmashe/core/loader.py

"""Vocabulary and pattern loader for the medical term classifier."""

import re
import yaml
import logging
from pathlib import Path
from typing import Dict, FrozenSet, Any, Optional, Pattern, Tuple

from pharmashe.core.definitions import Vocabulary
from pharmashe.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class PatternLoader:
    """Singleton loader for the term vocabularies and pattern table.

    Loads terms.yaml once and caches it for the application lifecycle. The
    cached data is exposed as frozensets and tuples, so readers on any thread
    see the same immutable values.
    """

    _instance: Optional["PatternLoader"] = None
    _config: Dict[str, Any] = {}
    _loaded: bool = False
    _excluded: FrozenSet[str] = frozenset()
    _included: FrozenSet[str] = frozenset()
    _patterns: Tuple[Tuple[str, Pattern], ...] = ()

    def __new__(cls) -> "PatternLoader":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if not PatternLoader._loaded:
            self._load_config()

    def _load_config(self) -> None:
        """Loads terms.yaml from the module directory.

        Raises:
            ConfigurationError: If file is missing, invalid, or empty.
        """
        try:
            config_path = Path(__file__).parent / "terms.yaml"

            if not config_path.exists():
                error_msg = f"Configuration file not found: {config_path}"
                logger.error(error_msg)
                raise ConfigurationError(error_msg)

            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)

            if not config:
                raise ConfigurationError("Configuration file is empty or invalid")

            self._validate_config(config)

            vocabulary = config["vocabulary"]
            PatternLoader._excluded = _as_term_set(vocabulary[Vocabulary.EXCLUDED])
            PatternLoader._included = _as_term_set(vocabulary[Vocabulary.INCLUDED])
            PatternLoader._patterns = _compile_patterns(config["patterns"])
            PatternLoader._config = config

            PatternLoader._loaded = True
            logger.info(
                "Term vocabulary loaded successfully",
                extra={
                    "config_path": str(config_path),
                    "excluded_count": len(PatternLoader._excluded),
                    "included_count": len(PatternLoader._included),
                    "pattern_count": len(PatternLoader._patterns),
                },
            )

        except yaml.YAMLError as e:
            logger.error(f"YAML parsing error: {e}", exc_info=True)
            raise ConfigurationError(f"Failed to parse terms.yaml: {e}") from e
        except Exception as e:
            if isinstance(e, ConfigurationError):
                raise
            logger.error(f"Configuration loading failed: {e}", exc_info=True)
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

    @staticmethod
    def _validate_config(config: Dict[str, Any]) -> None:
        """Validates required configuration sections exist.

        Raises:
            ConfigurationError: If required sections are missing.
        """
        required_sections = ["vocabulary", "patterns"]
        missing = [s for s in required_sections if s not in config]

        vocabulary = config.get("vocabulary") or {}
        missing += [
            f"vocabulary.{s}"
            for s in (Vocabulary.EXCLUDED, Vocabulary.INCLUDED)
            if s not in vocabulary
        ]

        if missing:
            error_msg = f"Missing required configuration sections: {missing}"
            logger.error(error_msg)
            raise ConfigurationError(error_msg)

    @classmethod
    def get_instance(cls) -> "PatternLoader":
        """Returns the singleton instance of PatternLoader."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def get_excluded_terms(self) -> FrozenSet[str]:
        """Returns common words that are never clickable."""
        return self._excluded

    def get_included_terms(self) -> FrozenSet[str]:
        """Returns technical terms that are always clickable."""
        return self._included

    def get_patterns(self) -> Tuple[Tuple[str, Pattern], ...]:
        """Returns the ordered (name, compiled regex) pattern table."""
        return self._patterns


def _as_term_set(terms: Any) -> FrozenSet[str]:
    if not isinstance(terms, list):
        raise ConfigurationError("Vocabulary sections must be lists of words")
    return frozenset(str(t).strip().lower() for t in terms if str(t).strip())


def _compile_patterns(pattern_defs: Any) -> Tuple[Tuple[str, Pattern], ...]:
    """Compiles pattern definitions with 'name' and 'regex' keys, keeping order."""
    if not isinstance(pattern_defs, list):
        raise ConfigurationError("The patterns section must be a list")

    compiled = []
    for p in pattern_defs:
        try:
            compiled.append((p["name"], re.compile(p["regex"])))
        except (KeyError, TypeError) as e:
            raise ConfigurationError(f"Malformed pattern definition: {p!r}") from e
        except re.error as e:
            raise ConfigurationError(
                f"Invalid regex for pattern '{p['name']}': {e}"
            ) from e
    return tuple(compiled)
