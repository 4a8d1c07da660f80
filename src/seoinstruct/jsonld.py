"""Schema.org / JSON-LD validation and ``@graph`` analysis."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set

from .logging import get_logger
from .utils import is_absolute_url, round_half_up

logger = get_logger("jsonld")

UNKNOWN_TYPE = "Unknown"
MAX_GRAPH_DEPTH = 64


@dataclass(frozen=True)
class SchemaTypeDefinition:
    required: Sequence[str]
    recommended: Sequence[str]


def _schema(required: Iterable[str], recommended: Iterable[str]) -> SchemaTypeDefinition:
    return SchemaTypeDefinition(required=tuple(required), recommended=tuple(recommended))


SCHEMA_TYPES: Mapping[str, SchemaTypeDefinition] = MappingProxyType(
    {
        "Article": _schema(
            ["headline", "author", "datePublished"],
            ["image", "dateModified", "publisher", "description", "mainEntityOfPage"],
        ),
        "NewsArticle": _schema(
            ["headline", "author", "datePublished"],
            ["image", "dateModified", "publisher", "description", "articleBody"],
        ),
        "BlogPosting": _schema(
            ["headline", "author", "datePublished"],
            ["image", "dateModified", "publisher", "description", "wordCount"],
        ),
        "Product": _schema(
            ["name"],
            ["image", "description", "sku", "brand", "offers", "review", "aggregateRating"],
        ),
        "LocalBusiness": _schema(
            ["name", "address"],
            ["image", "telephone", "openingHours", "priceRange", "geo", "review"],
        ),
        "Organization": _schema(["name"], ["url", "logo", "contactPoint", "sameAs", "description"]),
        "Person": _schema(["name"], ["image", "url", "sameAs", "jobTitle", "worksFor"]),
        "WebPage": _schema(["name"], ["description", "breadcrumb", "mainEntity", "lastReviewed"]),
        "WebSite": _schema(["name", "url"], ["potentialAction", "publisher", "description"]),
        "FAQPage": _schema(["mainEntity"], []),
        "HowTo": _schema(["name", "step"], ["image", "totalTime", "estimatedCost", "supply", "tool"]),
        "Recipe": _schema(
            ["name", "recipeIngredient"],
            ["image", "author", "prepTime", "cookTime", "recipeInstructions", "nutrition"],
        ),
        "Event": _schema(
            ["name", "startDate", "location"],
            ["endDate", "image", "description", "offers", "performer", "organizer"],
        ),
        "BreadcrumbList": _schema(["itemListElement"], []),
        "VideoObject": _schema(
            ["name", "description", "thumbnailUrl", "uploadDate"],
            ["duration", "contentUrl", "embedUrl", "interactionCount", "expires"],
        ),
        "ImageObject": _schema(["contentUrl"], ["name", "description", "caption", "width", "height", "author"]),
        "Review": _schema(["itemReviewed", "author"], ["reviewRating", "reviewBody", "datePublished"]),
        "AggregateRating": _schema(["ratingValue"], ["reviewCount", "ratingCount", "bestRating", "worstRating"]),
        "Offer": _schema(
            ["price", "priceCurrency"],
            ["availability", "priceValidUntil", "url", "seller", "itemCondition"],
        ),
        "SoftwareApplication": _schema(
            ["name"],
            ["operatingSystem", "applicationCategory", "offers", "aggregateRating", "screenshot"],
        ),
    }
)

URL_PROPERTIES = frozenset({"url", "image", "logo", "contentUrl", "thumbnailUrl", "embedUrl"})
DATE_PROPERTIES = frozenset({"datePublished", "dateModified", "uploadDate", "expires", "priceValidUntil"})
ORGANIZATION_TYPES = frozenset({"Organization", "LocalBusiness"})
PAGE_TYPES = frozenset({"WebPage", "WebSite"})
CONTENT_TYPES = frozenset({"Article", "BlogPosting", "NewsArticle", "Product", "Event"})
BASELINE_SCHEMAS = ("Organization", "BreadcrumbList", "WebPage")

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}(T\d{2}:\d{2}:\d{2})?")
_NUMERIC_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class PropertyValidation:
    property: str
    value: Any
    is_valid: bool = True
    issue: Optional[str] = None
    expected_format: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"property": self.property, "value": self.value, "isValid": self.is_valid}
        if self.issue is not None:
            data["issue"] = self.issue
        if self.expected_format is not None:
            data["expectedFormat"] = self.expected_format
        return data


@dataclass(frozen=True)
class SchemaAnalysis:
    type: str
    id: Optional[str]
    is_valid: bool
    validation_score: int
    completeness_score: int
    required_properties: List[PropertyValidation] = field(default_factory=list)
    recommended_properties: List[PropertyValidation] = field(default_factory=list)
    missing_required: List[str] = field(default_factory=list)
    missing_recommended: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    raw_data: Optional[Mapping[str, Any]] = None

    def to_dict(self, include_raw: bool = False) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type}
        if self.id is not None:
            data["id"] = self.id
        data.update(
            {
                "isValid": self.is_valid,
                "validationScore": self.validation_score,
                "completenessScore": self.completeness_score,
                "requiredProperties": [p.to_dict() for p in self.required_properties],
                "recommendedProperties": [p.to_dict() for p in self.recommended_properties],
                "missingRequired": list(self.missing_required),
                "missingRecommended": list(self.missing_recommended),
                "warnings": list(self.warnings),
                "suggestions": list(self.suggestions),
            }
        )
        if include_raw and self.raw_data is not None:
            data["rawData"] = self.raw_data
        return data


@dataclass(frozen=True)
class GraphNode:
    id: str
    type: str
    references: List[str] = field(default_factory=list)
    referenced_by: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "references": list(self.references),
            "referencedBy": list(self.referenced_by),
        }


@dataclass(frozen=True)
class GraphAnalysis:
    node_count: int
    nodes: List[GraphNode]
    root_nodes: List[str]
    orphan_nodes: List[str]
    circular_references: List[str]
    has_graph: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hasGraph": self.has_graph,
            "nodeCount": self.node_count,
            "nodes": [n.to_dict() for n in self.nodes],
            "rootNodes": list(self.root_nodes),
            "orphanNodes": list(self.orphan_nodes),
            "circularReferences": list(self.circular_references),
        }


@dataclass(frozen=True)
class SchemaValidationScore:
    validation: int = 0
    completeness: int = 0
    coverage: int = 0
    overall: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "validation": self.validation,
            "completeness": self.completeness,
            "coverage": self.coverage,
            "overall": self.overall,
        }


@dataclass(frozen=True)
class SchemaValidationResult:
    url: Optional[str]
    schemas: List[SchemaAnalysis]
    graph_analysis: Optional[GraphAnalysis]
    score: SchemaValidationScore
    general_suggestions: List[str]
    recommended_schemas: List[str]
    verbose: bool = False

    @property
    def schemas_found(self) -> int:
        return len(self.schemas)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "schemasFound": self.schemas_found,
            "schemas": [s.to_dict(include_raw=self.verbose) for s in self.schemas],
            "graphAnalysis": self.graph_analysis.to_dict() if self.graph_analysis else None,
            "score": self.score.to_dict(),
            "generalSuggestions": list(self.general_suggestions),
            "recommendedSchemas": list(self.recommended_schemas),
        }


# -- property checks ---------------------------------------------------------


def is_valid_iso_date(value: Any) -> bool:
    return isinstance(value, str) and bool(_ISO_DATE.match(value))


def _parse_leading_float(value: str) -> Optional[float]:
    # Accepts "4.5 stars" the way parseFloat does
    match = _NUMERIC_PREFIX.match(value)
    if not match:
        return None
    return float(match.group(0))


def is_valid_rating(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return 0 <= value <= 5
    if isinstance(value, str):
        number = _parse_leading_float(value)
        return number is not None and 0 <= number <= 5
    return False


def validate_property(prop: str, value: Any) -> PropertyValidation:
    """Check the format of a single property value.

    Only string URLs are checked (image/logo may also be ImageObject
    nodes); dates must be ISO strings; ``ratingValue`` must fall in 0-5 and
    ``price`` must be a number or a string.
    """
    if prop in URL_PROPERTIES and isinstance(value, str) and not is_absolute_url(value):
        return PropertyValidation(prop, value, False, "Invalid URL format", "https://example.com/path")

    if prop in DATE_PROPERTIES and not is_valid_iso_date(value):
        return PropertyValidation(prop, value, False, "Invalid date format", "YYYY-MM-DD or YYYY-MM-DDTHH:MM:SS")

    if prop == "ratingValue" and not is_valid_rating(value):
        return PropertyValidation(prop, value, False, "Rating should be between 0 and 5", "Number between 0-5")

    if prop == "price" and (isinstance(value, bool) or not isinstance(value, (int, float, str))):
        return PropertyValidation(
            prop, value, False, "Price should be a number or numeric string", "Number (e.g., 29.99)"
        )

    return PropertyValidation(prop, value)


# -- node analysis -----------------------------------------------------------


def _require_mapping(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise TypeError(f"JSON-LD node must be an object, got {type(data).__name__}")
    return data


def coerce_documents(items: Iterable[Any]) -> List[Mapping[str, Any]]:
    """Turn non-object JSON-LD items into ``Invalid JSON`` placeholder documents.

    Arrays, strings and numbers are legal JSON but cannot describe a node, so
    they are analyzed as an object of unknown type instead of failing.
    """
    documents: List[Mapping[str, Any]] = []
    for item in items:
        if isinstance(item, Mapping):
            documents.append(item)
        else:
            documents.append({"error": "Invalid JSON", "raw": json.dumps(item)})
    return documents


def get_schema_type(data: Mapping[str, Any]) -> str:
    kind = data.get("@type")
    if isinstance(kind, str):
        return kind
    if isinstance(kind, list) and kind:
        return str(kind[0])
    return UNKNOWN_TYPE


def has_property(data: Mapping[str, Any], prop: str) -> bool:
    return data.get(prop) is not None


def _node_id(data: Mapping[str, Any]) -> Optional[str]:
    value = data.get("@id")
    # An empty @id names nothing
    return value if isinstance(value, str) and value else None


def analyze_schema(data: Mapping[str, Any]) -> SchemaAnalysis:
    data = _require_mapping(data)
    kind = get_schema_type(data)
    definition = SCHEMA_TYPES.get(kind)

    if definition is None:
        logger.debug("Schema type %s is not in the registry", kind)
        return SchemaAnalysis(
            type=kind,
            id=_node_id(data),
            is_valid=kind != UNKNOWN_TYPE,
            validation_score=0 if kind == UNKNOWN_TYPE else 50,
            completeness_score=0,
            warnings=[f'Schema type "{kind}" is not in the known schema registry'],
            suggestions=["Add a valid @type property from Schema.org vocabulary"],
            raw_data=data,
        )

    warnings: List[str] = []

    def check(props: Sequence[str]):
        present: List[PropertyValidation] = []
        missing: List[str] = []
        for prop in props:
            if not has_property(data, prop):
                missing.append(prop)
                continue
            validation = validate_property(prop, data[prop])
            present.append(validation)
            if not validation.is_valid:
                warnings.append(f"{prop}: {validation.issue}")
        return present, missing

    required, missing_required = check(definition.required)
    recommended, missing_recommended = check(definition.recommended)

    suggestions: List[str] = []
    if missing_required:
        suggestions.append(f"Add required properties: {', '.join(missing_required)}")
    if 0 < len(missing_recommended) <= 3:
        suggestions.append(f"Consider adding: {', '.join(missing_recommended)}")
    elif len(missing_recommended) > 3:
        suggestions.append("Consider adding recommended properties to enhance rich results")

    required_total = len(definition.required)
    required_valid = sum(1 for p in required if p.is_valid)
    recommended_total = len(definition.recommended)
    recommended_present = recommended_total - len(missing_recommended)

    validation_score = round_half_up(required_valid / required_total * 100) if required_total else 100
    completeness_score = round_half_up(recommended_present / recommended_total * 100) if recommended_total else 100

    return SchemaAnalysis(
        type=kind,
        id=_node_id(data),
        is_valid=not missing_required and not warnings,
        validation_score=validation_score,
        completeness_score=completeness_score,
        required_properties=required,
        recommended_properties=recommended,
        missing_required=missing_required,
        missing_recommended=missing_recommended,
        warnings=warnings,
        suggestions=suggestions,
        raw_data=data,
    )


# -- graph analysis ----------------------------------------------------------


def _collect_references(root: Any, source_id: str, node_ids: Set[str]) -> List[str]:
    """Depth-first walk of a node's value tree collecting ``@id`` references.

    Containers already visited (by identity) are skipped and the walk stops
    descending past ``MAX_GRAPH_DEPTH`` levels, so self-referencing Python
    structures cannot loop forever.
    """
    found: List[str] = []
    seen_targets: Set[str] = set()
    visited: Set[int] = set()
    stack = [(root, 0)]

    while stack:
        value, depth = stack.pop()
        if not isinstance(value, (Mapping, list)) or depth > MAX_GRAPH_DEPTH:
            continue
        if id(value) in visited:
            continue
        visited.add(id(value))

        if isinstance(value, list):
            children = list(value)
        else:
            target = value.get("@id")
            if isinstance(target, str) and target in node_ids and target != source_id and target not in seen_targets:
                seen_targets.add(target)
                found.append(target)
            children = list(value.values())

        # Reversed so children are visited in document order
        for child in reversed(children):
            stack.append((child, depth + 1))

    return found


def analyze_graph(data: Mapping[str, Any]) -> Optional[GraphAnalysis]:
    """Build the reference graph of a document's ``@graph`` array.

    Returns ``None`` when the document has no ``@graph`` list. Circular
    references are only detected between two nodes that reference each
    other directly; longer cycles (a -> b -> c -> a) are not reported.
    """
    data = _require_mapping(data)
    graph = data.get("@graph")
    if not isinstance(graph, list):
        return None

    items = [item for item in graph if isinstance(item, Mapping)]

    references: Dict[str, List[str]] = {}
    for item in items:
        node_id = _node_id(item)
        if node_id is not None:
            references.setdefault(node_id, [])
    node_ids = set(references)

    for item in items:
        node_id = _node_id(item)
        if node_id is None:
            continue
        for target in _collect_references(item, node_id, node_ids):
            if target not in references[node_id]:
                references[node_id].append(target)

    referenced_by: Dict[str, List[str]] = {}
    for source, targets in references.items():
        for target in targets:
            incoming = referenced_by.setdefault(target, [])
            if source not in incoming:
                incoming.append(source)

    nodes: List[GraphNode] = []
    for item in items:
        node_id = _node_id(item) or f"_:node{len(nodes)}"
        nodes.append(
            GraphNode(
                id=node_id,
                type=get_schema_type(item),
                references=list(references.get(node_id, [])),
                referenced_by=list(referenced_by.get(node_id, [])),
            )
        )

    root_nodes = [n.id for n in nodes if not n.referenced_by]
    orphan_nodes = [n.id for n in nodes if not n.referenced_by and not n.references]

    circular: List[str] = []
    for source, targets in references.items():
        for target in targets:
            if source in references.get(target, []):
                pair = " <-> ".join(sorted((source, target)))
                if pair not in circular:
                    circular.append(pair)

    logger.debug("Graph with %d nodes, %d circular pair(s)", len(nodes), len(circular))
    return GraphAnalysis(
        node_count=len(nodes),
        nodes=nodes,
        root_nodes=root_nodes,
        orphan_nodes=orphan_nodes,
        circular_references=circular,
    )


# -- scoring -----------------------------------------------------------------


def calculate_schema_score(
    schemas: Sequence[SchemaAnalysis], graph_analysis: Optional[GraphAnalysis] = None
) -> SchemaValidationScore:
    """Aggregate score: validation (40) + completeness (35) + coverage (25)."""
    if not schemas:
        return SchemaValidationScore()

    avg_validation = sum(s.validation_score for s in schemas) / len(schemas)
    avg_completeness = sum(s.completeness_score for s in schemas) / len(schemas)
    validation = round_half_up(avg_validation / 100 * 40)
    completeness = round_half_up(avg_completeness / 100 * 35)

    types = {s.type for s in schemas}
    coverage = 0
    if types & ORGANIZATION_TYPES:
        coverage += 8
    if "BreadcrumbList" in types:
        coverage += 7
    if types & PAGE_TYPES:
        coverage += 5
    if types & CONTENT_TYPES:
        coverage += 5
    coverage = min(coverage, 25)

    return SchemaValidationScore(
        validation=validation,
        completeness=completeness,
        coverage=coverage,
        overall=validation + completeness + coverage,
    )


def suggest_missing_schemas(existing_types: Iterable[str]) -> List[str]:
    types = set(existing_types)
    suggestions: List[str] = []
    if not types & ORGANIZATION_TYPES:
        suggestions.append("Add Organization or LocalBusiness schema for brand visibility")
    if "BreadcrumbList" not in types:
        suggestions.append("Add BreadcrumbList schema for enhanced navigation in search results")
    if not types & PAGE_TYPES:
        suggestions.append("Add WebPage or WebSite schema to define page structure")
    return suggestions


def validate_structured_data(
    documents: Sequence[Any], url: Optional[str] = None, verbose: bool = False
) -> SchemaValidationResult:
    """Validate every JSON-LD document found on a page.

    ``@graph`` documents are expanded into one analysis per node. When
    several documents carry a ``@graph``, the last one is used for the
    graph analysis.
    """
    if not documents:
        return SchemaValidationResult(
            url=url,
            schemas=[],
            graph_analysis=None,
            score=SchemaValidationScore(),
            general_suggestions=[
                "No structured data found. Add JSON-LD markup to help search engines understand your content.",
                "Consider adding: Organization, WebPage, and BreadcrumbList schemas as a minimum.",
            ],
            recommended_schemas=list(BASELINE_SCHEMAS),
            verbose=verbose,
        )

    schemas: List[SchemaAnalysis] = []
    graph_analysis: Optional[GraphAnalysis] = None

    for document in documents:
        document = _require_mapping(document)
        graph = document.get("@graph")
        if isinstance(graph, list):
            graph_analysis = analyze_graph(document)
            schemas.extend(analyze_schema(item) for item in graph if isinstance(item, Mapping))
        else:
            schemas.append(analyze_schema(document))

    score = calculate_schema_score(schemas, graph_analysis)
    existing_types = [s.type for s in schemas]
    general = suggest_missing_schemas(existing_types)

    if graph_analysis is not None:
        if graph_analysis.orphan_nodes:
            general.append(
                f"{len(graph_analysis.orphan_nodes)} orphan node(s) in @graph - "
                "consider linking them with @id references"
            )
        if graph_analysis.circular_references:
            general.append(f"Circular references detected: {', '.join(graph_analysis.circular_references)}")

    recommended = [t for t in BASELINE_SCHEMAS if t not in existing_types] if len(existing_types) < 3 else []

    logger.debug("Validated %d schema node(s), overall %d", len(schemas), score.overall)
    return SchemaValidationResult(
        url=url,
        schemas=schemas,
        graph_analysis=graph_analysis,
        score=score,
        general_suggestions=general,
        recommended_schemas=recommended,
        verbose=verbose,
    )
