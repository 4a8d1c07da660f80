"""Analysis options shared by the CLI, the web API and the analyzers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .errors import ConfigError

USER_AGENT = "seoinstruct/0.1 (+https://example.com)"
DEFAULT_TIMEOUT = 15

AUDIENCE_GRADES = {
    "technical": 12,
    "beginner": 6,
    "general": 8,
}
DEFAULT_AUDIENCE = "general"

PAGE_TYPES = ("blog", "product", "landing")
DEFAULT_PAGE_TYPE = "blog"

DEFAULT_MAX_SENTENCE_WORDS = 25
DEFAULT_MAX_PARAGRAPH_SENTENCES = 5

# JSON-LD templates that can be requested for a page
SCHEMA_TEMPLATE_TYPES = ("WebPage", "WebSite", "Organization", "Article", "BreadcrumbList", "FAQPage")


@dataclass(frozen=True)
class AnalysisOptions:
    target_keyword: Optional[str] = None
    target_audience: str = DEFAULT_AUDIENCE
    page_type: str = DEFAULT_PAGE_TYPE
    max_sentence_words: int = DEFAULT_MAX_SENTENCE_WORDS
    max_paragraph_sentences: int = DEFAULT_MAX_PARAGRAPH_SENTENCES
    site_name: Optional[str] = None
    schema_type: Optional[str] = None

    def __post_init__(self) -> None:
        if self.max_sentence_words < 1:
            raise ConfigError("max_sentence_words must be a positive integer")
        if self.max_paragraph_sentences < 1:
            raise ConfigError("max_paragraph_sentences must be a positive integer")

    @property
    def target_grade(self) -> int:
        return AUDIENCE_GRADES.get(self.target_audience, AUDIENCE_GRADES[DEFAULT_AUDIENCE])

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "AnalysisOptions":
        """Build options from a CLI/JSON payload.

        Keys may be camelCase (``targetKeyword``) or snake_case
        (``target_keyword``). Unknown audiences and page types fall back to
        the defaults instead of failing, and an unknown ``schemaType`` is
        dropped.
        """
        data = data or {}

        def pick(snake: str, camel: str) -> Any:
            if snake in data and data[snake] is not None:
                return data[snake]
            return data.get(camel)

        keyword = pick("target_keyword", "targetKeyword")
        if keyword is not None:
            keyword = str(keyword).strip() or None

        audience = str(pick("target_audience", "targetAudience") or "").strip().lower()
        if audience not in AUDIENCE_GRADES:
            audience = DEFAULT_AUDIENCE

        page_type = str(pick("page_type", "pageType") or "").strip().lower()
        if page_type not in PAGE_TYPES:
            page_type = DEFAULT_PAGE_TYPE

        site_name = str(pick("site_name", "siteName") or "").strip() or None

        schema_type = str(pick("schema_type", "schemaType") or "").strip()
        if schema_type not in SCHEMA_TEMPLATE_TYPES:
            schema_type = None

        return cls(
            target_keyword=keyword,
            target_audience=audience,
            page_type=page_type,
            max_sentence_words=_as_int(
                pick("max_sentence_words", "maxSentenceWords"), DEFAULT_MAX_SENTENCE_WORDS, "max_sentence_words"
            ),
            max_paragraph_sentences=_as_int(
                pick("max_paragraph_sentences", "maxParagraphSentences"),
                DEFAULT_MAX_PARAGRAPH_SENTENCES,
                "max_paragraph_sentences",
            ),
            site_name=site_name,
            schema_type=schema_type,
        )


def _as_int(value: Any, default: int, name: str) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {value!r}") from None
