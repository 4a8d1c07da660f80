from __future__ import annotations

import pytest

from seoinstruct import web
from seoinstruct.errors import FetchError


@pytest.fixture()
def client():
    app = web.create_app()
    app.config.update(TESTING=True)
    return app.test_client()


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok"}


def test_content_endpoint(client):
    resp = client.post("/api/content", json={"content": "# A\n\n# B", "targetKeyword": "seo", "filePath": "a.md"})
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["filePath"] == "a.md"
    assert any(i["value"].get("suggested") == "## B" for i in data["instructions"])


def test_content_requires_body(client):
    resp = client.post("/api/content", json={"content": "   "})
    assert resp.status_code == 400
    assert "error" in resp.get_json()


def test_bad_options_are_rejected(client):
    resp = client.post("/api/content", json={"content": "# A", "maxSentenceWords": "lots"})
    assert resp.status_code == 400


def test_schema_with_documents(client):
    resp = client.post("/api/schema", json={"documents": [{"@type": "Article", "headline": "x"}]})
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["schemasFound"] == 1
    assert data["schemas"][0]["missingRequired"] == ["author", "datePublished"]


def test_schema_rejects_non_objects(client):
    resp = client.post("/api/schema", json={"documents": ["nope"]})
    assert resp.status_code == 400


def test_schema_from_inline_html(client):
    html = '<script type="application/ld+json">{"@type": "Organization", "name": "Acme"}</script>'
    resp = client.post("/api/schema", json={"html": html, "url": "https://acme.test/"})
    data = resp.get_json()
    assert data["url"] == "https://acme.test/"
    assert data["schemas"][0]["type"] == "Organization"


def test_readability_clamps_target_grade(client):
    text = "Organizational communication necessitates comprehensive documentation."
    resp = client.post("/api/readability", json={"text": text, "targetGrade": -5})
    assert resp.status_code == 200
    assert resp.get_json()["gradeComparison"]["recommendation"] == "Simplify to reach target grade 1 level"


def test_page_fetch_failure_is_bad_gateway(client, monkeypatch):
    def fail(url):
        raise FetchError(url, "HTTP 500")

    monkeypatch.setattr(web, "fetch_html", fail)
    resp = client.post("/api/page", json={"url": "example.com"})
    assert resp.status_code == 502
    assert resp.get_json()["error"] == "https://example.com/: HTTP 500"


def test_page_with_inline_html(client):
    resp = client.post("/api/page", json={"html": "<title>T</title><h1>Hi</h1>", "pageType": "landing"})
    assert resp.status_code == 200
    assert resp.get_json()["seo"]["details"]["headingsScore"] == 100


def test_non_json_payload(client):
    resp = client.post("/api/page", data="not json", content_type="text/plain")
    assert resp.status_code == 400


def test_page_improvements_follow_options(client):
    payload = {
        "html": "<title>Widgets</title><h1>Hi</h1>",
        "targetKeyword": "blue",
        "siteName": "Acme\tCo",
        "schemaType": "FAQPage",
    }
    resp = client.post("/api/page", json=payload)
    assert resp.status_code == 200
    improvements = resp.get_json()["improvements"]
    assert improvements["title"]["suggestions"][-1] == "blue | Acme Co"
    assert [i["priority"] for i in improvements["schema"]["instructions"]] == ["medium", "high"]
    assert "FAQPage" in improvements["schema"]["instructions"][0]["value"]["suggested"]
