# tests/test_pipeline.py

import logging

import pytest

from pharmashe.core.definitions import BlockKind, SearchType
from pharmashe.core.domain import DrugInfo, LookupResult, UserProfile
from pharmashe.core.exceptions import (
    AnalysisError,
    InitializationError,
    UpstreamServiceError,
)
from pharmashe.service.config import settings
from pharmashe.service.dictionary import DictionaryClient
from pharmashe.service.llm import GeminiClient
from pharmashe.service.openfda import OpenFDAClient
from pharmashe.service.pipeline import (
    PharmaSheService,
    ServiceClients,
    analyze_drugs,
    enrich_drugs,
    lookup_definition,
    search_drugs,
)

from conftest import FakeResponse

ANALYSIS = "# Results\n\nIbuprofen may cause hepatotoxicity in rare cases."


class FakeOpenFDA:
    def __init__(self, products=None, error=None):
        self.products = products or {}
        self.error = error
        self.calls = []

    def search_by_brand(self, name):
        self.calls.append(("brand", name))
        if self.error is not None:
            raise self.error
        return self.products.get(name, [])

    def search_by_ingredient(self, name):
        self.calls.append(("ingredient", name))
        if self.error is not None:
            raise self.error
        return self.products.get(name, [])


class FakeGemini:
    def __init__(self, text=ANALYSIS, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def analyze_drug_interactions(self, drugs, context, profile=None, ingredients=None):
        self.calls.append(
            {"drugs": drugs, "context": context, "profile": profile, "ingredients": ingredients}
        )
        if self.error is not None:
            raise self.error
        return self.text


class FakeDictionary:
    def lookup(self, word):
        return LookupResult(word=word, found=False)


ADVIL = DrugInfo(name="ADVIL", active_ingredients=["IBUPROFEN (200MG)"])


@pytest.fixture
def clients(monkeypatch):
    fakes = ServiceClients(
        openfda=FakeOpenFDA(products={"Advil": [ADVIL]}),
        gemini=FakeGemini(),
        dictionary=FakeDictionary(),
    )
    monkeypatch.setattr(PharmaSheService, "_instance", fakes)
    return fakes


class TestServiceSingleton:
    def test_builds_real_clients(self, monkeypatch):
        monkeypatch.setattr(PharmaSheService, "_instance", None)

        instance = PharmaSheService.get_instance()

        assert isinstance(instance.openfda, OpenFDAClient)
        assert isinstance(instance.gemini, GeminiClient)
        assert isinstance(instance.dictionary, DictionaryClient)
        assert PharmaSheService.get_instance() is instance


class TestEnrichDrugs:
    def test_first_match_or_bare_name(self):
        client = FakeOpenFDA(products={"Advil": [ADVIL, DrugInfo(name="OTHER")]})
        assert enrich_drugs(["Advil", "Mystery"], client) == [
            ADVIL,
            DrugInfo(name="Mystery"),
        ]

    def test_upstream_failure_is_tolerated(self):
        client = FakeOpenFDA(error=UpstreamServiceError("down", status_code=503))
        assert enrich_drugs(["Advil"], client) == [DrugInfo(name="Advil")]

    def test_failure_log_carries_index_not_name(self, caplog):
        client = FakeOpenFDA(error=UpstreamServiceError("down", status_code=503))

        with caplog.at_level(logging.WARNING, logger="pharmashe.service.pipeline"):
            enrich_drugs(["Advil", "Midol"], client)

        assert [r.drug_index for r in caplog.records] == [0, 1]
        for record in caplog.records:
            assert record.drug_count == 2
            assert not hasattr(record, "drug")
            assert "Advil" not in record.getMessage()
            assert "Midol" not in record.getMessage()


class TestAnalyzeDrugs:
    def test_success(self, clients):
        result = analyze_drugs([" Advil "])

        assert result.metadata["status"] == "success"
        assert "error" not in result.metadata
        assert result.drugs == ["Advil"]
        assert result.analysis == ANALYSIS
        assert result.terms == ["hepatotoxicity"]
        assert result.drug_details == [ADVIL]
        assert result.timestamp
        assert [b.kind for b in result.blocks] == [
            BlockKind.HEADING,
            BlockKind.SPACER,
            BlockKind.PARAGRAPH,
        ]

    def test_passes_context_profile_and_ingredients(self, clients):
        profile = UserProfile(concerns="breastfeeding")

        analyze_drugs(["Advil", "Mystery"], profile=profile)

        call = clients.gemini.calls[0]
        assert call["context"] == settings.default_context
        assert call["profile"] is profile
        assert call["ingredients"] == {"Advil": ["IBUPROFEN (200MG)"], "Mystery": []}

    def test_custom_context(self, clients):
        analyze_drugs(["Advil"], context="menopause")
        assert clients.gemini.calls[0]["context"] == "menopause"

    def test_empty_list(self, clients):
        result = analyze_drugs([])

        assert result.metadata["status"] == "failed"
        assert result.metadata["error_type"] == "ValidationError"
        assert clients.gemini.calls == []

    def test_llm_failure(self, clients):
        clients.gemini.error = AnalysisError("quota exceeded")

        result = analyze_drugs(["Advil"])

        assert result.metadata["error"] == "Failed to analyze drugs"
        assert result.metadata["details"] == "quota exceeded"
        assert result.metadata["error_type"] == "AnalysisError"
        assert result.blocks == []

    def test_unexpected_failure(self, clients):
        clients.gemini.error = RuntimeError("boom")

        result = analyze_drugs(["Advil"])

        assert result.metadata == {
            "error": "An unexpected system error occurred.",
            "status": "failed",
        }


class TestSearchDrugs:
    def test_brand(self, clients):
        result = search_drugs("Advil")
        assert result.results == [ADVIL]
        assert result.metadata == {"status": "success", "count": 1}
        assert clients.openfda.calls == [("brand", "Advil")]

    def test_ingredient(self, clients):
        search_drugs("ibuprofen", search_type="INGREDIENT")
        assert clients.openfda.calls == [("ingredient", "ibuprofen")]

    def test_blank_query(self, clients):
        result = search_drugs("  ")
        assert result.metadata["status"] == "failed"
        assert result.search_type == SearchType.BRAND
        assert clients.openfda.calls == []

    def test_upstream_failure(self, clients):
        clients.openfda.error = UpstreamServiceError("down", status_code=500)
        result = search_drugs("Advil")
        assert result.metadata["error"] == "Failed to search FDA drug database"
        assert result.results == []

    def test_unexpected_failure(self, clients):
        clients.openfda.error = RuntimeError("boom")

        result = search_drugs("Advil")

        assert result.results == []
        assert result.metadata == {
            "error": "An unexpected system error occurred.",
            "status": "failed",
        }

    def test_non_object_payload_from_openfda(self, monkeypatch, fake_get):
        monkeypatch.setattr(
            PharmaSheService,
            "_instance",
            ServiceClients(
                openfda=OpenFDAClient(
                    base_url="https://api.fda.gov/drug/drugsfda.json",
                    limit=99,
                    timeout=5.0,
                ),
                gemini=FakeGemini(),
                dictionary=FakeDictionary(),
            ),
        )
        fake_get(FakeResponse(200, ["not", "an", "object"]))

        result = search_drugs("Advil")

        assert result.results == []
        assert result.metadata["status"] == "failed"
        assert result.metadata["error_type"] == "UpstreamServiceError"


def test_lookup_definition(clients):
    assert lookup_definition("nephropathy") == LookupResult(
        word="nephropathy", found=False
    )




def test_lookup_definition_without_clients(monkeypatch):
    def unavailable():
        raise InitializationError("Service client initialization failed")

    monkeypatch.setattr(PharmaSheService, "get_instance", unavailable)

    assert lookup_definition("nephropathy") == LookupResult(
        word="nephropathy", found=False
    )
