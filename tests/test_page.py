from __future__ import annotations

import unittest

from seoinstruct.config import AnalysisOptions
from seoinstruct.fetch import ResourceCache
from seoinstruct.page import analyze_page, extract_page, resolve_image_resources

HTML = """<!doctype html>
<html lang="en">
<head>
  <title>Python Testing Guide &amp; Tips</title>
  <meta name="description" content="Learn how to test Python code.">
  <meta property="og:title" content="OG title">
  <link rel="canonical" href="/guide">
  <script type="application/ld+json">
  {"@context": "https://schema.org", "@type": "Article", "headline": "Guide"}
  </script>
  <script type="application/ld+json">[{"@type": "Organization", "name": "Acme"}, "oops"]</script>
  <script type="application/ld+json">{not json}</script>
</head>
<body>
  <h1>Python testing</h1>
  <h2>Why <em>tests</em></h2>
  <h2>Tools</h2>
  <p>Python tests catch bugs early. Tests make refactoring safe.</p>
  <p>Use pytest for python projects.</p>
  <img src="/a.png" alt="Diagram">
  <img src="b.jpg" alt="">
  <img src="data:image/gif;base64,AAAA">
  <a href="/docs">Docs</a>
  <a href="https://example.com/about">About</a>
  <a href="https://other.test/">Other</a>
  <a href="mailto:me@example.com">Mail</a>
  <a href="#top">Top</a>
  <script>var ignored = "python python python";</script>
</body>
</html>
"""


class ExtractPageTests(unittest.TestCase):
    def setUp(self) -> None:
        self.page = extract_page(HTML, "https://example.com/guide")

    def test_head_fields(self) -> None:
        self.assertEqual(self.page.title, "Python Testing Guide & Tips")
        self.assertEqual(self.page.description, "Learn how to test Python code.")
        self.assertEqual(self.page.canonical, "https://example.com/guide")
        self.assertEqual(self.page.lang, "en")

    def test_headings(self) -> None:
        self.assertEqual(self.page.heading_count(1), 1)
        self.assertEqual(self.page.headings["h2"].texts, ["Why tests", "Tools"])
        self.assertEqual(self.page.heading_count(6), 0)

    def test_images(self) -> None:
        self.assertEqual(self.page.images.total, 3)
        self.assertEqual(self.page.images.with_alt, 1)
        self.assertEqual(self.page.images.without_alt, 2)

    def test_links_split_by_origin(self) -> None:
        self.assertEqual([link.href for link in self.page.links.internal], ["/docs", "https://example.com/about"])
        self.assertEqual([link.href for link in self.page.links.external], ["https://other.test/"])

    def test_ld_json_blocks(self) -> None:
        docs = self.page.ld_json
        self.assertEqual(len(docs), 4)
        self.assertEqual(docs[0]["@type"], "Article")
        self.assertEqual(docs[1]["@type"], "Organization")
        self.assertEqual(docs[2], {"error": "Invalid JSON", "raw": '"oops"'})
        self.assertEqual(docs[3]["error"], "Invalid JSON")

    def test_visible_text_skips_scripts(self) -> None:
        self.assertIn("Python tests catch bugs early.", self.page.text)
        self.assertNotIn("ignored", self.page.text)


def test_analyze_page_report():
    report = analyze_page(HTML, "https://example.com/guide", AnalysisOptions(target_keyword="python"))
    data = report.to_dict()

    assert data["title"] == "Python Testing Guide & Tips"
    assert report.seo.details.headings_score == 100
    assert report.seo.details.images_score == 33
    assert report.seo.details.links_score == 75
    assert report.seo.details.keyword_score == 100
    assert data["keywords"]["topKeywords"][0]["word"] == "python"
    assert data["keywords"]["targetKeywordDensity"] > 3
    assert any("over-optimized" in s for s in report.suggestions)
    assert any(s.startswith("Content is thin") for s in report.suggestions)
    assert data["structuredData"]["schemasFound"] == 4
    assert data["fingerprint"]


def test_analyze_page_reports_head_tags_and_improvements():
    report = analyze_page(HTML, "https://example.com/guide", AnalysisOptions(target_keyword="python"))
    data = report.to_dict()

    assert data["canonical"] == "https://example.com/guide"
    assert data["lang"] == "en"
    assert data["socialMeta"] == {"og:title": "OG title"}

    improvements = data["improvements"]
    assert improvements["canonical"] == []
    assert improvements["images"]["imagesWithoutAlt"] == 2
    assert "Missing og:description" in improvements["openGraph"]["issues"]
    assert improvements["schema"]["summary"] == "4 schema fixes: 3 high, 1 low priority"
    reasons = [i["reason"] for i in improvements["schema"]["instructions"]]
    assert reasons[0] == "Missing @context property. Schema.org context is required."
    assert reasons[1:3] == [
        "author is required for Article schema to be valid.",
        "datePublished is required for Article schema to be valid.",
    ]


def test_analyze_page_without_keyword():
    report = analyze_page("<html><body><p>Hello there.</p></body></html>")
    assert report.target_keyword_density is None
    assert report.seo.details.title_score == 0
    assert report.structured_data.schemas_found == 0


def test_resolve_image_resources_skips_data_uris():
    class Session:
        def __init__(self):
            self.calls = []

        def get(self, url, timeout=None, headers=None):
            self.calls.append(url)

            class Response:
                status_code = 200
                text = ""
                headers = {"content-type": "image/png"}

            return Response()

    page = extract_page(HTML, "https://example.com/guide")
    session = Session()
    resources = resolve_image_resources(page.images, "https://example.com/guide", ResourceCache(), session=session)
    assert [r.url for r in resources] == ["https://example.com/a.png", "https://example.com/b.jpg"]
    assert session.calls == ["https://example.com/a.png", "https://example.com/b.jpg"]
