# pharmashe/service/pipeline.py

"""Main drug analysis service pipeline."""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from pharmashe.service.config import settings
from pharmashe.service.dictionary import DictionaryClient
from pharmashe.service.llm import GeminiClient
from pharmashe.service.openfda import OpenFDAClient
from pharmashe.engine.markdown import render_blocks
from pharmashe.engine.segmenter import clickable_terms
from pharmashe.logic.validators import validate_drug_list
from pharmashe.core.definitions import SearchType
from pharmashe.core.domain import (
    AnalysisResult,
    DrugInfo,
    DrugSearchResult,
    LookupResult,
    UserProfile,
)
from pharmashe.core.exceptions import (
    AnalysisError,
    ConfigurationError,
    InitializationError,
    UpstreamServiceError,
    ValidationError,
)

logger = logging.getLogger(__name__)


@dataclass
class ServiceClients:
    """The external service clients shared by every request."""

    openfda: OpenFDAClient
    gemini: GeminiClient
    dictionary: DictionaryClient


class PharmaSheService:
    """Singleton holder for the external service clients.

    Manages client lifecycle and provides thread-safe access to them.
    """

    _instance: Optional[ServiceClients] = None
    _lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> ServiceClients:
        """Returns the singleton service clients.

        Raises:
            InitializationError: If a client cannot be constructed
        """
        if cls._instance is None:
            with cls._lock:
                # Double-checked locking pattern
                if cls._instance is None:
                    try:
                        logger.info("Initializing service clients")
                        cls._instance = ServiceClients(
                            openfda=OpenFDAClient(
                                base_url=settings.openfda_base_url,
                                limit=settings.openfda_limit,
                                timeout=settings.request_timeout,
                            ),
                            gemini=GeminiClient(
                                api_key=settings.gemini_api_key,
                                model=settings.gemini_model,
                            ),
                            dictionary=DictionaryClient(
                                base_url=settings.dictionary_base_url,
                                max_definitions=settings.max_definitions,
                                max_per_group=settings.max_definitions_per_group,
                                timeout=settings.request_timeout,
                            ),
                        )
                        logger.info("Service clients initialized successfully")

                    except Exception as e:
                        logger.error(
                            "Failed to initialize service clients", exc_info=True
                        )
                        raise InitializationError(
                            "Service client initialization failed"
                        ) from e

        return cls._instance


def enrich_drugs(drugs: List[str], client: OpenFDAClient) -> List[DrugInfo]:
    """Looks up the first Drugs@FDA product for each drug name.

    A drug openFDA does not know, or a failed lookup, yields a DrugInfo with
    just the entered name and no ingredients.
    """
    details = []
    for index, drug in enumerate(drugs):
        try:
            matches = client.search_by_brand(drug)
        except UpstreamServiceError:
            logger.warning(
                "openFDA enrichment failed, continuing without it",
                exc_info=True,
                extra={"drug_index": index, "drug_count": len(drugs)},
            )
            matches = []

        details.append(matches[0] if matches else DrugInfo(name=drug))
    return details


def analyze_drugs(
    drugs: List[str],
    context: Optional[str] = None,
    profile: Optional[UserProfile] = None,
) -> AnalysisResult:
    """Main entry point for a drug interaction analysis.

    Args:
        drugs: Drug names entered by the user
        context: Analysis context, defaults to settings.default_context
        profile: Optional health profile used to personalize the analysis

    Returns:
        AnalysisResult with the analysis text and rendered blocks.
        On failure, returns a result whose metadata carries the error.
    """
    drug_list = list(drugs or [])

    try:
        drug_list = validate_drug_list(drug_list, settings.max_drugs)
        clients = PharmaSheService.get_instance()

        logger.info(
            "Starting analysis request",
            extra={
                "drug_count": len(drug_list),
                "personalized": profile is not None,
            },
        )

        details = enrich_drugs(drug_list, clients.openfda)
        ingredients = {
            drug: info.active_ingredients for drug, info in zip(drug_list, details)
        }

        analysis = clients.gemini.analyze_drug_interactions(
            drug_list,
            context=context or settings.default_context,
            profile=profile,
            ingredients=ingredients,
        )

        blocks = render_blocks(analysis)
        terms = clickable_terms(analysis)

        logger.info(
            "Analysis completed",
            extra={"analysis_length": len(analysis), "term_count": len(terms)},
        )

        return AnalysisResult(
            drugs=drug_list,
            analysis=analysis,
            blocks=blocks,
            terms=terms,
            drug_details=details,
            timestamp=datetime.now(timezone.utc).isoformat(),
            metadata={"status": "success", "model": settings.gemini_model},
        )

    except ValidationError as e:
        logger.warning(
            "Rejected analysis request", extra={"drug_count": len(drug_list)}
        )
        return AnalysisResult(
            drugs=drug_list,
            metadata={
                "error": str(e),
                "status": "failed",
                "error_type": type(e).__name__,
            },
        )

    except (ConfigurationError, InitializationError, AnalysisError) as e:
        # These are known errors, log with context and surface the details
        logger.error(
            f"Known error during analysis: {type(e).__name__}",
            exc_info=True,
            extra={"drug_count": len(drug_list)},
        )
        return AnalysisResult(
            drugs=drug_list,
            metadata={
                "error": "Failed to analyze drugs",
                "details": str(e),
                "status": "failed",
                "error_type": type(e).__name__,
            },
        )

    except Exception:
        # Catch-all for unexpected bugs
        logger.error(
            "Unexpected critical error in analysis pipeline",
            exc_info=True,
            extra={"drug_count": len(drug_list)},
        )
        return AnalysisResult(
            drugs=drug_list,
            metadata={
                "error": "An unexpected system error occurred.",
                "status": "failed",
            },
        )


def search_drugs(query: str, search_type: str = SearchType.BRAND) -> DrugSearchResult:
    """Searches Drugs@FDA by brand name (default) or active ingredient."""
    query = (query or "").strip()
    search_type = (search_type or SearchType.BRAND).lower()

    if not query:
        return DrugSearchResult(
            query=query,
            search_type=search_type,
            metadata={"error": "Query is required", "status": "failed"},
        )

    try:
        client = PharmaSheService.get_instance().openfda
        if search_type == SearchType.INGREDIENT:
            results = client.search_by_ingredient(query)
        else:
            results = client.search_by_brand(query)

        return DrugSearchResult(
            query=query,
            search_type=search_type,
            results=results,
            metadata={"status": "success", "count": len(results)},
        )

    except (InitializationError, UpstreamServiceError) as e:
        logger.error(
            f"Drug search failed: {type(e).__name__}",
            exc_info=True,
            extra={"search_type": search_type},
        )
        return DrugSearchResult(
            query=query,
            search_type=search_type,
            metadata={
                "error": "Failed to search FDA drug database",
                "status": "failed",
                "error_type": type(e).__name__,
            },
        )

    except Exception:
        # Catch-all for unexpected bugs
        logger.error(
            "Unexpected critical error in drug search",
            exc_info=True,
            extra={"search_type": search_type},
        )
        return DrugSearchResult(
            query=query,
            search_type=search_type,
            metadata={
                "error": "An unexpected system error occurred.",
                "status": "failed",
            },
        )


def lookup_definition(term: str) -> LookupResult:
    """Fetches definitions for a clickable term's lookup key.

    An unavailable dictionary service is reported as a missing definition.
    """
    try:
        clients = PharmaSheService.get_instance()
    except InitializationError:
        logger.error("Definition lookup unavailable", exc_info=True)
        return LookupResult(word=term, found=False)

    return clients.dictionary.lookup(term)
