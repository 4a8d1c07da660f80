from __future__ import annotations

import copy

import pytest

from seoinstruct.jsonld import (
    SCHEMA_TYPES,
    analyze_graph,
    analyze_schema,
    calculate_schema_score,
    coerce_documents,
    get_schema_type,
    is_valid_iso_date,
    is_valid_rating,
    suggest_missing_schemas,
    validate_property,
    validate_structured_data,
)

FULL_ARTICLE = {
    "@context": "https://schema.org",
    "@type": "Article",
    "headline": "Hello",
    "author": {"@type": "Person", "name": "Ada"},
    "datePublished": "2024-01-15",
    "image": "https://example.com/img.png",
    "dateModified": "2024-02-01T10:00:00",
    "publisher": {"@type": "Organization", "name": "Example"},
    "description": "An article.",
    "mainEntityOfPage": "https://example.com/post",
}


def test_registry_has_twenty_types():
    assert len(SCHEMA_TYPES) == 20
    assert SCHEMA_TYPES["Offer"].required == ("price", "priceCurrency")


def test_article_missing_required_properties():
    analysis = analyze_schema({"@type": "Article"})
    assert analysis.missing_required == ["headline", "author", "datePublished"]
    assert analysis.validation_score == 0
    assert analysis.completeness_score == 0
    assert analysis.is_valid is False
    assert analysis.suggestions == [
        "Add required properties: headline, author, datePublished",
        "Consider adding recommended properties to enhance rich results",
    ]


def test_complete_article_is_valid():
    analysis = analyze_schema(FULL_ARTICLE)
    assert analysis.is_valid
    assert (analysis.validation_score, analysis.completeness_score) == (100, 100)
    assert analysis.warnings == []
    assert analysis.suggestions == []


def test_bad_date_is_a_warning_and_lowers_validation():
    data = dict(FULL_ARTICLE, datePublished="January 5")
    analysis = analyze_schema(data)
    assert analysis.warnings == ["datePublished: Invalid date format"]
    assert analysis.is_valid is False
    assert analysis.validation_score == 67


def test_few_missing_recommended_are_listed():
    data = {"@type": "Organization", "name": "Acme", "url": "https://acme.test", "logo": "https://acme.test/l.png"}
    analysis = analyze_schema(data)
    assert analysis.missing_recommended == ["contactPoint", "sameAs", "description"]
    assert analysis.suggestions == ["Consider adding: contactPoint, sameAs, description"]
    assert analysis.completeness_score == 40


def test_unknown_type():
    analysis = analyze_schema({"@type": "Spaceship", "@id": "#ship"})
    assert analysis.is_valid is True
    assert (analysis.validation_score, analysis.completeness_score) == (50, 0)
    assert analysis.id == "#ship"
    assert analysis.warnings == ['Schema type "Spaceship" is not in the known schema registry']


def test_missing_type():
    analysis = analyze_schema({"name": "x"})
    assert analysis.type == "Unknown"
    assert analysis.is_valid is False
    assert analysis.validation_score == 0


def test_type_list_uses_first_entry():
    assert get_schema_type({"@type": ["Product", "Thing"]}) == "Product"
    assert get_schema_type({"@type": []}) == "Unknown"


def test_analyze_schema_requires_an_object():
    with pytest.raises(TypeError):
        analyze_schema(["not", "a", "node"])


@pytest.mark.parametrize(
    "value,expected",
    [("2024-01-15", True), ("2024-01-15T08:30:00Z", True), ("15/01/2024", False), (20240115, False)],
)
def test_iso_dates(value, expected):
    assert is_valid_iso_date(value) is expected


@pytest.mark.parametrize(
    "value,expected",
    [(4.5, True), ("4.5", True), ("4.5 stars", True), (0, True), (7, False), ("abc", False), (True, False)],
)
def test_ratings(value, expected):
    assert is_valid_rating(value) is expected


def test_validate_property():
    assert validate_property("url", "not a url").issue == "Invalid URL format"
    assert validate_property("url", "https://example.com").is_valid
    # ImageObject nodes are not URL-checked
    assert validate_property("image", {"@type": "ImageObject"}).is_valid
    assert validate_property("price", "29.99").is_valid
    assert validate_property("price", 29.99).is_valid
    assert validate_property("price", {"amount": 1}).issue == "Price should be a number or numeric string"
    assert validate_property("ratingValue", 9).expected_format == "Number between 0-5"
    assert validate_property("name", None).is_valid


def test_mutual_references_are_circular():
    doc = {"@graph": [{"@id": "a", "knows": {"@id": "b"}}, {"@id": "b", "knows": {"@id": "a"}}]}
    graph = analyze_graph(doc)
    assert graph.circular_references == ["a <-> b"]
    assert graph.root_nodes == []
    assert graph.orphan_nodes == []


def test_isolated_node_is_root_and_orphan():
    graph = analyze_graph({"@graph": [{"@id": "solo", "@type": "Thing"}]})
    assert graph.root_nodes == ["solo"]
    assert graph.orphan_nodes == ["solo"]
    assert graph.nodes[0].type == "Thing"


def test_longer_cycles_are_not_reported():
    doc = {
        "@graph": [
            {"@id": "a", "next": {"@id": "b"}},
            {"@id": "b", "next": {"@id": "c"}},
            {"@id": "c", "next": {"@id": "a"}},
        ]
    }
    graph = analyze_graph(doc)
    assert graph.circular_references == []
    assert graph.root_nodes == []


def test_references_are_found_in_nested_values():
    doc = {
        "@graph": [
            {"@id": "page", "@type": "WebPage", "about": [{"@type": "Thing", "sameAs": {"@id": "org"}}]},
            {"@id": "org", "@type": "Organization", "member": {"@id": "unknown"}},
            {"@type": "Person", "name": "no id"},
        ]
    }
    graph = analyze_graph(doc)
    by_id = {n.id: n for n in graph.nodes}
    assert by_id["page"].references == ["org"]
    assert by_id["org"].referenced_by == ["page"]
    assert by_id["org"].references == []
    assert "_:node2" in by_id
    assert graph.root_nodes == ["page", "_:node2"]
    assert graph.orphan_nodes == ["_:node2"]


def test_empty_id_is_a_blank_node():
    doc = {"@graph": [{"@id": "", "@type": "Thing"}, {"@id": "page", "about": {"@id": ""}}]}
    graph = analyze_graph(doc)
    assert [n.id for n in graph.nodes] == ["_:node0", "page"]
    assert graph.nodes[1].references == []
    assert "id" not in analyze_schema({"@id": "", "@type": "Thing"}).to_dict()


def test_self_reference_is_ignored():
    node = {"@id": "a", "@type": "Thing"}
    node["self"] = node
    graph = analyze_graph({"@graph": [node]})
    assert graph.nodes[0].references == []
    assert graph.circular_references == []


def test_no_graph():
    assert analyze_graph({"@type": "Article"}) is None


def test_coverage_points():
    def types(*names):
        return [analyze_schema({"@type": n}) for n in names]

    assert calculate_schema_score([]).overall == 0
    assert calculate_schema_score(types("Organization")).coverage == 8
    assert calculate_schema_score(types("Organization", "BreadcrumbList")).coverage == 15
    assert calculate_schema_score(types("Organization", "BreadcrumbList", "WebSite")).coverage == 20
    assert calculate_schema_score(types("Organization", "BreadcrumbList", "WebSite", "Product")).coverage == 25


def test_schema_score_sums_parts():
    score = calculate_schema_score([analyze_schema(FULL_ARTICLE)])
    assert (score.validation, score.completeness, score.coverage) == (40, 35, 5)
    assert score.overall == 80


def test_suggest_missing_schemas():
    assert suggest_missing_schemas(["LocalBusiness", "BreadcrumbList", "WebSite"]) == []
    assert len(suggest_missing_schemas([])) == 3


def test_validate_structured_data_without_documents():
    result = validate_structured_data([])
    assert result.schemas_found == 0
    assert result.recommended_schemas == ["Organization", "BreadcrumbList", "WebPage"]
    assert len(result.general_suggestions) == 2
    assert result.to_dict()["graphAnalysis"] is None


def test_validate_structured_data_expands_graph():
    doc = {
        "@context": "https://schema.org",
        "@graph": [
            {"@id": "#org", "@type": "Organization", "name": "Acme"},
            {"@id": "#page", "@type": "WebPage", "name": "Home", "publisher": {"@id": "#org"}},
            {"@id": "#lonely", "@type": "Person", "name": "Bob"},
        ],
    }
    result = validate_structured_data([doc], url="https://acme.test/")
    assert result.schemas_found == 3
    assert result.graph_analysis.orphan_nodes == ["#lonely"]
    assert "1 orphan node(s) in @graph - consider linking them with @id references" in result.general_suggestions
    assert result.general_suggestions[0] == "Add BreadcrumbList schema for enhanced navigation in search results"
    assert result.recommended_schemas == []


def test_verbose_includes_raw_data():
    quiet = validate_structured_data([FULL_ARTICLE]).to_dict()
    loud = validate_structured_data([FULL_ARTICLE], verbose=True).to_dict()
    assert "rawData" not in quiet["schemas"][0]
    assert loud["schemas"][0]["rawData"]["headline"] == "Hello"


def test_validation_is_idempotent_and_does_not_mutate():
    doc = copy.deepcopy(FULL_ARTICLE)
    first = validate_structured_data([doc]).to_dict()
    second = validate_structured_data([doc]).to_dict()
    assert first == second
    assert doc == FULL_ARTICLE


def test_coerce_documents_keeps_objects_and_marks_the_rest():
    article = {"@type": "Article"}
    assert coerce_documents([article, "text", 3, [1]]) == [
        article,
        {"error": "Invalid JSON", "raw": '"text"'},
        {"error": "Invalid JSON", "raw": "3"},
        {"error": "Invalid JSON", "raw": "[1]"},
    ]
