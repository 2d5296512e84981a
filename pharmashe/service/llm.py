# pharmashe/service/llm.py

"""Gemini client producing drug interaction and women's health analyses."""

import logging
import threading
from typing import Dict, List, Optional

from google import genai

from pharmashe.core.domain import UserProfile
from pharmashe.core.exceptions import AnalysisError, ConfigurationError
from pharmashe.logic.profile import has_content

logger = logging.getLogger(__name__)


def format_profile_for_prompt(profile: UserProfile) -> str:
    """One line per non-blank profile field."""
    parts = []
    if profile.height_cm.strip():
        parts.append(f"Height: {profile.height_cm.strip()} cm")
    if profile.weight_kg.strip():
        parts.append(f"Weight: {profile.weight_kg.strip()} kg")
    if profile.underlying_conditions.strip():
        parts.append(f"Underlying conditions: {profile.underlying_conditions.strip()}")
    if profile.concerns.strip():
        parts.append(f"Health concerns or notes: {profile.concerns.strip()}")
    return "\n".join(parts)


def _profile_section(profile: Optional[UserProfile]) -> str:
    if not has_content(profile):
        return (
            "Formatting rules: Do not use emojis. You may use checkboxes in lists: "
            '"- [ ]" for unchecked and "- [x]" for checked. '
            "Use **bold** for drug names and important terms."
        )

    return f"""USER PROFILE (personalize the analysis using this):
{format_profile_for_prompt(profile)}

When the user has provided profile data above:
- Bold any potential side effects or interactions that are especially relevant to this user (use **bold** markdown).
- For each such item, add a short explanation starting with "Why this matters for you:".
- Do not use emojis anywhere in your response.
- You may use checkboxes in lists: "- [ ]" for unchecked and "- [x]" for checked."""


def _ingredients_section(ingredients: Optional[Dict[str, List[str]]]) -> str:
    lines = [
        f"- {drug}: {', '.join(items)}"
        for drug, items in (ingredients or {}).items()
        if items
    ]
    if not lines:
        return ""
    return "Active ingredients reported by Drugs@FDA:\n" + "\n".join(lines)


def build_analysis_prompt(
    drugs: List[str],
    context: str,
    profile: Optional[UserProfile] = None,
    ingredients: Optional[Dict[str, List[str]]] = None,
) -> str:
    sections = [
        "You are a pharmaceutical expert specializing in women's health.",
        "Analyze the following drugs for potential interactions and their "
        "specific effects on women's health:\n"
        f"Drugs: {', '.join(drugs)}",
        _ingredients_section(ingredients),
        "Please provide:\n"
        "1. Any potential drug-drug interactions\n"
        "2. Specific concerns or benefits for women\n"
        "3. Dosage considerations for women\n"
        "4. Potential side effects that may be more pronounced in women\n"
        "5. Recommendations for monitoring or usage",
        f"Context: {context}",
        _profile_section(profile),
        "Be detailed but concise, and always recommend consulting with a "
        "healthcare provider.",
    ]
    return "\n\n".join(s for s in sections if s)


class GeminiClient:
    """Lazily connected wrapper around the google-genai client.

    The API key is only read when the first request is made, so the UI can
    start and render without one.
    """

    def __init__(self, api_key: str, model: str) -> None:
        self._api_key = api_key
        self._model = model
        self._client: Optional[genai.Client] = None
        self._lock = threading.Lock()

    def _get_client(self) -> genai.Client:
        if self._client is None:
            with self._lock:
                if self._client is None:
                    if not self._api_key or not self._api_key.strip():
                        raise ConfigurationError(
                            "GEMINI_API_KEY is not set. Add GEMINI_API_KEY=your_key "
                            "to the environment or .env and restart the app."
                        )
                    self._client = genai.Client(api_key=self._api_key.strip())
                    logger.info("Gemini client created", extra={"model": self._model})
        return self._client

    def _generate(self, prompt: str, purpose: str) -> str:
        client = self._get_client()
        try:
            response = client.models.generate_content(
                model=self._model, contents=prompt
            )
        except Exception as e:
            logger.error(
                "Gemini request failed",
                exc_info=True,
                extra={"purpose": purpose, "model": self._model},
            )
            raise AnalysisError(f"Failed to {purpose} with Gemini API: {e}") from e

        text = response.text or ""
        logger.info(
            "Gemini response received",
            extra={"purpose": purpose, "response_length": len(text)},
        )
        return text

    def analyze_drug_interactions(
        self,
        drugs: List[str],
        context: str = "women's health",
        profile: Optional[UserProfile] = None,
        ingredients: Optional[Dict[str, List[str]]] = None,
    ) -> str:
        prompt = build_analysis_prompt(drugs, context, profile, ingredients)
        return self._generate(prompt, "analyze drugs")

    def get_drug_side_effects(self, drug: str) -> str:
        prompt = (
            f"Provide a comprehensive overview of side effects for {drug}, "
            "specifically noting any that may be more common or severe in women. "
            "Include:\n"
            "1. Common side effects\n"
            "2. Serious side effects\n"
            "3. Women-specific considerations\n"
            "4. Pregnancy/breastfeeding implications\n"
            "Keep the response concise and factual."
        )
        return self._generate(prompt, "retrieve side effects")

    def get_women_health_guidance(self, drug: str) -> str:
        prompt = (
            f"Provide women's health specific guidance for {drug}. Include:\n"
            "1. How this drug affects women differently than men (if applicable)\n"
            "2. Hormonal interaction considerations\n"
            "3. Pregnancy/breastfeeding safety\n"
            "4. Drug interactions with common women's health medications "
            "(birth control, hormone therapy, etc.)\n"
            "5. Any special monitoring needed for women\n\n"
            "Be thorough and evidence-based."
        )
        return self._generate(prompt, "retrieve women's health guidance")
