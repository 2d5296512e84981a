# pharmashe/service/openfda.py

"""Drugs@FDA client.

See https://open.fda.gov/apis/drug/drugsfda/how-to-use-the-endpoint/
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from pharmashe.core.domain import DrugInfo
from pharmashe.core.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)

BRAND_FIELD = "products.brand_name"
INGREDIENT_FIELD = "products.active_ingredients.name"


def format_active_ingredient(name: str, strength: Optional[str]) -> str:
    """Formats an ingredient as "NAME (STRENGTH)", or just the name."""
    s = (strength or "").strip()
    return f"{name} ({s})" if s else name


def _search_term(term: str) -> str:
    # Multi-word names must be quoted to be matched as a phrase
    return f'"{term}"' if " " in term else term


class OpenFDAClient:
    """Searches Drugs@FDA and flattens application records into products."""

    def __init__(self, base_url: str, limit: int = 99, timeout: float = 15.0) -> None:
        self._base_url = base_url
        self._limit = limit
        self._timeout = timeout

    def search_by_brand(self, drug_name: str) -> List[DrugInfo]:
        """Searches by product brand name; openFDA matching is case-insensitive."""
        return self._search(BRAND_FIELD, drug_name)

    def search_by_ingredient(self, ingredient_name: str) -> List[DrugInfo]:
        """Searches by active ingredient name (e.g. "IBUPROFEN")."""
        return self._search(INGREDIENT_FIELD, ingredient_name)

    def get_active_ingredients(self, drug_name: str) -> List[str]:
        """Returns the active ingredients of the first matching product."""
        drugs = self.search_by_brand(drug_name)
        if drugs and drugs[0].active_ingredients:
            return drugs[0].active_ingredients
        return []

    def _search(self, search_field: str, query: str) -> List[DrugInfo]:
        """Runs one search and returns one DrugInfo per product.

        Raises:
            UpstreamServiceError: On network failures or non-404 error statuses.
        """
        term = (query or "").strip()
        if not term:
            return []

        params = {
            "search": f"{search_field}:{_search_term(term)}",
            "limit": self._limit,
        }

        try:
            response = requests.get(self._base_url, params=params, timeout=self._timeout)
        except requests.RequestException as e:
            logger.error(
                "openFDA request failed",
                exc_info=True,
                extra={"search_field": search_field},
            )
            raise UpstreamServiceError(f"openFDA request failed: {e}") from e

        # openFDA answers 404 when nothing matches
        if response.status_code == 404:
            logger.info(
                "No openFDA matches", extra={"search_field": search_field}
            )
            return []

        if not response.ok:
            logger.error(
                "openFDA returned an error status",
                extra={"status_code": response.status_code},
            )
            raise UpstreamServiceError(
                f"FDA API responded with status: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamServiceError("openFDA returned invalid JSON") from e

        if not isinstance(data, dict):
            logger.error(
                "openFDA returned an unexpected payload",
                extra={"payload_type": type(data).__name__},
            )
            raise UpstreamServiceError("openFDA returned an unexpected payload")

        drugs = self._flatten(data.get("results") or [])
        logger.info(
            "openFDA search completed",
            extra={"search_field": search_field, "product_count": len(drugs)},
        )
        return drugs

    @staticmethod
    def _flatten(results: List[Dict[str, Any]]) -> List[DrugInfo]:
        drugs: List[DrugInfo] = []
        for application in results:
            for product in application.get("products") or []:
                ingredients = [
                    format_active_ingredient(i.get("name", ""), i.get("strength"))
                    for i in product.get("active_ingredients") or []
                ]
                drugs.append(
                    DrugInfo(
                        name=product.get("brand_name") or "Unknown",
                        active_ingredients=ingredients,
                        dosage_form=product.get("dosage_form"),
                        route=product.get("route"),
                        manufacturer=application.get("sponsor_name"),
                        marketing_status=product.get("marketing_status"),
                    )
                )
        return drugs
