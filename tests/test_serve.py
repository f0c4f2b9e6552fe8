"""Tests for the dashboard API served by FastAPI."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from interestmap import __version__
from interestmap.config import InterestmapSettings
from interestmap.llm.client import LLMUsageTracker
from interestmap.narrative import APOLOGY, MISSING_TERM
from interestmap.server.app import create_app


class FakeLLM:
    provider = "google"

    def __init__(self, reply: str = "Läsaren bygger\nsina egna drönare.") -> None:
        self.reply = reply
        self.fail = False
        self.prompts: list[str] = []
        self.tracker = LLMUsageTracker()

    async def generate(self, prompt: str, max_tokens: int | None = None) -> str:
        self.prompts.append(prompt)
        if self.fail:
            raise ConnectionError("network down")
        return self.reply


@pytest.fixture()
def llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture()
def client(settings: InterestmapSettings, llm: FakeLLM) -> TestClient:
    """An app with no data loaded yet."""
    return TestClient(create_app(settings=settings, llm_client=llm))  # type: ignore[arg-type]


@pytest.fixture()
def loaded(settings: InterestmapSettings, llm: FakeLLM, sample_file: Path) -> TestClient:
    """An app started with the sample interest file."""
    app = create_app(settings=settings, data_file=sample_file, llm_client=llm)  # type: ignore[arg-type]
    return TestClient(app)


def _upload(client: TestClient, body: bytes, name: str = "intressen.txt"):
    return client.post("/api/dataset", files={"file": (name, body, "text/plain")})


# ---------------------------------------------------------------------------
# Health and app factory
# ---------------------------------------------------------------------------


class TestHealth:
    def test_ok(self, client: TestClient) -> None:
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "version": __version__}


class TestAppFactory:
    def test_missing_startup_file_leaves_empty(
        self, settings: InterestmapSettings, tmp_path: Path
    ) -> None:
        app = create_app(settings=settings, data_file=tmp_path / "borta.txt")
        assert not app.state.store.current.has_data

    def test_data_file_from_env(
        self, settings: InterestmapSettings, sample_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("_INTERESTMAP_DATA_FILE", str(sample_file))
        app = create_app(settings=settings)
        assert app.state.store.current.source_name == "intressen.txt"

    def test_custom_categories_file(self, settings: InterestmapSettings, tmp_path: Path) -> None:
        path = tmp_path / "cats.yaml"
        path.write_text(
            "categories:\n  - name: Allt\n    catch_all: true\n",
            encoding="utf-8",
        )
        custom = settings.model_copy(update={"categories_file": path})
        app = create_app(settings=custom)
        assert app.state.categories.names == ["Allt"]


# ---------------------------------------------------------------------------
# Dataset
# ---------------------------------------------------------------------------


class TestDataset:
    def test_empty_summary(self, client: TestClient) -> None:
        data = client.get("/api/dataset").json()
        assert data["has_data"] is False
        assert data["respondent_count"] == 0

    def test_startup_file(self, loaded: TestClient) -> None:
        data = loaded.get("/api/dataset").json()
        assert data == {
            "has_data": True,
            "source_name": "intressen.txt",
            "records_read": 7,
            "respondent_count": 4,
            "distinct_interests": 7,
            "mention_count": 9,
        }

    def test_upload(self, client: TestClient, sample_text: str) -> None:
        resp = _upload(client, sample_text.encode("utf-8"))
        assert resp.status_code == 200
        assert resp.json()["distinct_interests"] == 7
        assert client.get("/api/dataset").json()["has_data"] is True

    def test_upload_replaces(self, loaded: TestClient) -> None:
        _upload(loaded, "Robots, Drönare\n".encode(), name="ny.txt")
        data = loaded.get("/api/dataset").json()
        assert data["source_name"] == "ny.txt"
        assert data["distinct_interests"] == 2

    def test_upload_with_bom(self, client: TestClient) -> None:
        _upload(client, b"\xef\xbb\xbfrobot, saab")
        top = client.get("/api/overview").json()["top"]
        assert {t["interest"] for t in top} == {"robot", "saab"}

    def test_empty_upload_rejected(self, client: TestClient) -> None:
        resp = _upload(client, b"")
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Uploaded file is empty"

    def test_oversized_upload_rejected(self, settings: InterestmapSettings) -> None:
        small = settings.model_copy(update={"max_upload_bytes": 10})
        client = TestClient(create_app(settings=small))
        resp = _upload(client, "kärnkraft, elbil, rymd".encode("utf-8"))
        assert resp.status_code == 400
        assert "exceeds 10 bytes" in resp.json()["detail"]

    def test_noise_only_upload_accepted_but_empty(self, client: TestClient) -> None:
        resp = _upload(client, b"ab, cd\n")
        assert resp.status_code == 200
        assert resp.json()["has_data"] is False

    def test_delete(self, loaded: TestClient) -> None:
        resp = loaded.delete("/api/dataset")
        assert resp.status_code == 200
        assert resp.json()["has_data"] is False
        assert loaded.get("/api/overview").json()["top"] == []


# ---------------------------------------------------------------------------
# Overview
# ---------------------------------------------------------------------------


class TestOverview:
    def test_empty(self, client: TestClient) -> None:
        data = client.get("/api/overview").json()
        assert data["has_data"] is False
        assert data["top"] == []
        assert data["word_cloud"] == []

    def test_top_first(self, loaded: TestClient) -> None:
        top = loaded.get("/api/overview").json()["top"]
        assert top[0] == {"interest": "kärnkraft", "label": "Kärnkraft", "count": 3}
        assert len(top) == 7

    def test_top_param(self, loaded: TestClient) -> None:
        assert len(loaded.get("/api/overview", params={"top": 2}).json()["top"]) == 2

    def test_top_must_be_positive(self, loaded: TestClient) -> None:
        assert loaded.get("/api/overview", params={"top": 0}).status_code == 422

    def test_filter(self, loaded: TestClient) -> None:
        data = loaded.get("/api/overview", params={"filter": "R"}).json()
        assert data["filter"] == "R"
        assert [i["interest"] for i in data["interests"]] == [
            "kärnkraft",
            "elbilar",
            "gripen",
            "rymd",
        ]
        # the top list ignores the filter
        assert len(data["top"]) == 7

    def test_filter_param_name(self, loaded: TestClient) -> None:
        """Only ``?filter=`` narrows the ranking; the Python-side name is not exposed."""
        data = loaded.get("/api/overview", params={"filter_text": "rymd"}).json()
        assert data["filter"] == ""
        assert len(data["interests"]) == 7

    def test_word_cloud_links_to_connections(self, loaded: TestClient) -> None:
        cloud = loaded.get("/api/overview").json()["word_cloud"]
        first = cloud[0]
        assert first["text"] == "kärnkraft"
        assert first["font_size"] == pytest.approx(60.0)
        assert first["connections_url"] == "/api/connections?q=k%C3%A4rnkraft"

    def test_cloud_param(self, loaded: TestClient) -> None:
        cloud = loaded.get("/api/overview", params={"cloud": 3}).json()["word_cloud"]
        assert len(cloud) == 3


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


class TestCategories:
    def test_empty_still_lists_categories(self, client: TestClient) -> None:
        data = client.get("/api/categories").json()
        assert data["has_data"] is False
        assert data["grand_total"] == 0
        assert len(data["categories"]) == 6
        assert all(c["total"] == 0 for c in data["categories"])

    def test_totals(self, loaded: TestClient) -> None:
        data = loaded.get("/api/categories").json()
        totals = {c["name"]: c["total"] for c in data["categories"]}
        assert totals == {
            "Elfordon & Batteri": 2,
            "AI & Datorvetenskap": 0,
            "Energi & Miljö": 3,
            "Försvar & Rymd": 2,
            "Ekonomi & Industri": 0,
            "Övrigt": 2,
        }
        assert data["grand_total"] == 9

    def test_catch_all_flag_and_colour(self, loaded: TestClient) -> None:
        last = loaded.get("/api/categories").json()["categories"][-1]
        assert last["name"] == "Övrigt"
        assert last["is_catch_all"] is True
        assert last["colour"] == "#6B7280"

    def test_top_terms(self, loaded: TestClient) -> None:
        data = loaded.get("/api/categories", params={"top": 1}).json()
        by_name = {c["name"]: c for c in data["categories"]}
        assert by_name["Försvar & Rymd"]["top_terms"] == [{"term": "gripen", "count": 1}]


# ---------------------------------------------------------------------------
# Connections
# ---------------------------------------------------------------------------


class TestConnections:
    def test_no_query(self, loaded: TestClient) -> None:
        data = loaded.get("/api/connections").json()
        assert data["status"] == "no_query"
        assert data["message"] is None
        assert data["connections"] == []

    def test_ok(self, loaded: TestClient) -> None:
        data = loaded.get("/api/connections", params={"q": "Kärnkraft"}).json()
        assert data["status"] == "ok"
        assert data["matching_respondents"] == 3
        assert data["title"] == "Personer intresserade av Kärnkraft är också intresserade av:"
        assert [(c["interest"], c["percentage"]) for c in data["connections"]] == [
            ("elbilar", 33.3),
            ("gripen", 33.3),
            ("quiz", 33.3),
            ("spel", 33.3),
        ]
        assert data["connections"][0]["label"] == "Elbilar"

    def test_no_match(self, loaded: TestClient) -> None:
        data = loaded.get("/api/connections", params={"q": "Kvantdator"}).json()
        assert data["status"] == "no_match"
        assert data["message"] == 'Hittade inga läsare med intresset "Kvantdator".'

    def test_no_co_occurrence(self, client: TestClient) -> None:
        _upload(client, b"robot\nrobot\n")
        data = client.get("/api/connections", params={"q": "robot"}).json()
        assert data["status"] == "no_co_occurrence"
        assert data["matching_respondents"] == 2

    def test_cloud_url_round_trips(self, loaded: TestClient) -> None:
        url = loaded.get("/api/overview").json()["word_cloud"][0]["connections_url"]
        assert loaded.get(url).json()["normalized_query"] == "kärnkraft"


# ---------------------------------------------------------------------------
# AI narratives
# ---------------------------------------------------------------------------


class TestAI:
    def test_persona_requires_data(self, client: TestClient, llm: FakeLLM) -> None:
        resp = client.post("/api/ai/persona")
        assert resp.status_code == 400
        assert llm.prompts == []

    def test_persona(self, loaded: TestClient, llm: FakeLLM) -> None:
        resp = loaded.post("/api/ai/persona")
        assert resp.status_code == 200
        data = resp.json()
        assert data["text"] == "Läsaren bygger\nsina egna drönare."
        assert data["html"] == "Läsaren bygger<br>sina egna drönare."
        assert "Intressen: kärnkraft, elbilar" in llm.prompts[0]

    def test_persona_failure_is_apology(self, loaded: TestClient, llm: FakeLLM) -> None:
        llm.fail = True
        resp = loaded.post("/api/ai/persona")
        assert resp.status_code == 200
        assert resp.json()["text"] == APOLOGY

    def test_explain(self, client: TestClient, llm: FakeLLM) -> None:
        resp = client.post("/api/ai/explain", json={"term": "SMR"})
        assert resp.status_code == 200
        assert '"SMR"' in llm.prompts[0]

    def test_explain_blank_term(self, client: TestClient) -> None:
        resp = client.post("/api/ai/explain", json={"term": "  "})
        assert resp.status_code == 400
        assert resp.json()["detail"] == MISSING_TERM

    def test_explain_missing_body_field(self, client: TestClient) -> None:
        assert client.post("/api/ai/explain", json={}).status_code == 400
