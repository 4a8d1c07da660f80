"""Regex-based extraction of the page facts the scorers need.

This is deliberately shallow: it turns an HTML string into plain records
(title, headings, images, links, social tags, JSON-LD) and leaves all
judgement to the scoring and suggestion modules.
"""

from __future__ import annotations

import html as html_lib
import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import requests

from .config import AnalysisOptions
from .fetch import Resource, ResourceCache, retrieve_resources
from .jsonld import SchemaValidationResult, coerce_documents, validate_structured_data
from .logging import get_logger
from .readability import ReadabilityScores, calculate_readability_scores
from .scoring import SEOScore, calculate_seo_score, score_content_length
from .suggestions import PageImprovements, suggest_page_improvements
from .text import (
    average_sentence_length,
    calculate_keyword_density,
    count_sentences,
    extract_keywords,
    extract_words,
    generate_text_fingerprint,
)
from .utils import extract_visible_text, round_half_up, round_to, to_absolute

logger = get_logger("page")

TOP_KEYWORDS = 10


@dataclass(frozen=True)
class HeadingData:
    count: int
    texts: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"count": self.count, "texts": list(self.texts)}


@dataclass(frozen=True)
class ImageInfo:
    src: str
    alt: Optional[str]
    width: Optional[str] = None
    height: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"src": self.src, "alt": self.alt, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class ImageStats:
    total: int
    with_alt: int
    details: List[ImageInfo] = field(default_factory=list)

    @property
    def without_alt(self) -> int:
        return self.total - self.with_alt

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "withAlt": self.with_alt,
            "withoutAlt": self.without_alt,
            "details": [d.to_dict() for d in self.details],
        }


@dataclass(frozen=True)
class LinkInfo:
    href: str
    text: str
    rel: Optional[str] = None
    target: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"href": self.href, "text": self.text, "rel": self.rel, "target": self.target}


@dataclass(frozen=True)
class PageLinks:
    internal: List[LinkInfo] = field(default_factory=list)
    external: List[LinkInfo] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "internal": [link.to_dict() for link in self.internal],
            "external": [link.to_dict() for link in self.external],
        }


@dataclass(frozen=True)
class PageData:
    url: str
    title: Optional[str]
    description: Optional[str]
    canonical: Optional[str]
    lang: Optional[str]
    headings: Dict[str, HeadingData]
    images: ImageStats
    links: PageLinks
    text: str
    ld_json: List[Any] = field(default_factory=list)
    social: Dict[str, str] = field(default_factory=dict)

    def heading_count(self, level: int) -> int:
        data = self.headings.get(f"h{level}")
        return data.count if data else 0


@dataclass(frozen=True)
class KeywordUsage:
    word: str
    count: int
    density: float

    def to_dict(self) -> Dict[str, Any]:
        return {"word": self.word, "count": self.count, "density": self.density}


@dataclass(frozen=True)
class PageReport:
    url: str
    word_count: int
    sentence_count: int
    avg_sentence_length: float
    readability: ReadabilityScores
    seo: SEOScore
    top_keywords: List[KeywordUsage]
    target_keyword_density: Optional[float]
    content_score: int
    fingerprint: str
    suggestions: List[str]
    structured_data: SchemaValidationResult
    title: Optional[str] = None
    description: Optional[str] = None
    headings: Dict[str, HeadingData] = field(default_factory=dict)
    images: Optional[ImageStats] = None
    canonical: Optional[str] = None
    lang: Optional[str] = None
    social: Dict[str, str] = field(default_factory=dict)
    improvements: Optional[PageImprovements] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "canonical": self.canonical,
            "lang": self.lang,
            "socialMeta": dict(self.social),
            "wordCount": self.word_count,
            "sentenceCount": self.sentence_count,
            "avgSentenceLength": self.avg_sentence_length,
            "readability": self.readability.to_dict(),
            "seo": self.seo.to_dict(),
            "keywords": {
                "topKeywords": [k.to_dict() for k in self.top_keywords],
                "targetKeywordDensity": self.target_keyword_density,
            },
            "contentScore": self.content_score,
            "fingerprint": self.fingerprint,
            "suggestions": list(self.suggestions),
            "headings": {level: h.to_dict() for level, h in self.headings.items()},
            "images": self.images.to_dict() if self.images else None,
            "structuredData": self.structured_data.to_dict(),
            "improvements": self.improvements.to_dict() if self.improvements else None,
        }


# -- extraction --------------------------------------------------------------


def _clean(fragment: str) -> str:
    text = re.sub(r"<[^>]+>", " ", fragment)
    return re.sub(r"\s+", " ", html_lib.unescape(text)).strip()


def get_head(html: str) -> str:
    m = re.search(r"<head[\s\S]*?</head>", html, flags=re.I)
    return m.group(0) if m else ""


def get_body(html: str) -> str:
    m = re.search(r"<body[^>]*>([\s\S]*?)(?:</body>|$)", html, flags=re.I)
    return m.group(1) if m else html


def get_attr(tag_html: str, attr: str) -> Optional[str]:
    m = re.search(fr"(?:^|\s){attr}\s*=\s*(?:\"([^\"]*)\"|'([^']*)')", tag_html, flags=re.I)
    if not m:
        return None
    value = m.group(1) if m.group(1) is not None else m.group(2)
    return html_lib.unescape(value)


def extract_meta(head_html: str) -> Dict[str, str]:
    metas = {}
    for m in re.finditer(r"<meta[^>]+>", head_html, flags=re.I):
        tag = m.group(0)
        name = get_attr(tag, "name")
        prop = get_attr(tag, "property")
        content = get_attr(tag, "content") or ""
        if name:
            metas[f"name:{name.lower()}"] = content
        if prop:
            metas[f"prop:{prop.lower()}"] = content
    return metas


def extract_social_meta(metas: Dict[str, str]) -> Dict[str, str]:
    """Pick the Open Graph (``og:*``) and Twitter card (``twitter:*``) tags."""
    social: Dict[str, str] = {}
    for key, value in metas.items():
        kind, _, name = key.partition(":")
        if name.startswith(("og:", "twitter:")) and kind in {"prop", "name"}:
            social.setdefault(name, value)
    return social


def extract_title(head_html: str) -> Optional[str]:
    m = re.search(r"<title[^>]*>([\s\S]*?)</title>", head_html, flags=re.I)
    return _clean(m.group(1)) if m else None


def extract_canonical(head_html: str, base_url: str) -> Optional[str]:
    for m in re.finditer(r"<link[^>]+>", head_html, flags=re.I):
        tag = m.group(0)
        rel = (get_attr(tag, "rel") or "").lower()
        if "canonical" in rel:
            href = get_attr(tag, "href")
            if href:
                return to_absolute(base_url, href)
    return None


def extract_lang(html: str) -> Optional[str]:
    m = re.search(r"<html[^>]*>", html, flags=re.I)
    return get_attr(m.group(0), "lang") if m else None


def extract_headings(html: str) -> Dict[str, HeadingData]:
    headings: Dict[str, HeadingData] = {}
    for level in range(1, 7):
        matches = re.findall(fr"<h{level}(?:\s[^>]*)?>([\s\S]*?)</h{level}>", html, flags=re.I)
        texts = [t for t in (_clean(m) for m in matches) if t]
        headings[f"h{level}"] = HeadingData(count=len(matches), texts=texts)
    return headings


def extract_images(html: str) -> ImageStats:
    details: List[ImageInfo] = []
    for m in re.finditer(r"<img\b[^>]*>", html, flags=re.I):
        tag = m.group(0)
        details.append(
            ImageInfo(
                src=get_attr(tag, "src") or "",
                alt=get_attr(tag, "alt"),
                width=get_attr(tag, "width"),
                height=get_attr(tag, "height"),
            )
        )
    with_alt = sum(1 for img in details if img.alt is not None and img.alt.strip())
    return ImageStats(total=len(details), with_alt=with_alt, details=details)


def extract_links(html: str, page_url: str) -> PageLinks:
    origin = "{0.scheme}://{0.netloc}".format(urlparse(page_url)) if page_url else ""
    internal: List[LinkInfo] = []
    external: List[LinkInfo] = []

    for m in re.finditer(r"(<a\b[^>]*>)([\s\S]*?)</a>", html, flags=re.I):
        tag, inner = m.group(1), m.group(2)
        href = get_attr(tag, "href")
        if not href:
            continue
        lower = href.lower()
        if lower.startswith(("mailto:", "tel:", "javascript:", "#")):
            continue

        link = LinkInfo(href=href, text=_clean(inner), rel=get_attr(tag, "rel"), target=get_attr(tag, "target"))
        if href.startswith("/") or (origin and href.startswith(origin)):
            internal.append(link)
        elif lower.startswith(("http://", "https://")):
            external.append(link)

    return PageLinks(internal=internal, external=external)


def extract_ld_json(html: str) -> List[Any]:
    blocks: List[Any] = []
    for m in re.finditer(
        r"<script[^>]+type=[\"']application/ld\+json[\"'][^>]*>([\s\S]*?)</script>", html, flags=re.I
    ):
        body = m.group(1).strip()
        try:
            blocks.append(json.loads(body))
        except ValueError:
            blocks.append({"error": "Invalid JSON", "raw": body})
    return blocks


def extract_page(html: str, url: str = "") -> PageData:
    head = get_head(html)
    metas = extract_meta(head)
    body = get_body(html)

    ld_json: List[Any] = []
    for block in extract_ld_json(html):
        # A script may hold an array of documents
        ld_json.extend(coerce_documents(block if isinstance(block, list) else [block]))

    return PageData(
        url=url,
        title=extract_title(head),
        description=metas.get("name:description"),
        canonical=extract_canonical(head, url),
        lang=extract_lang(html),
        headings=extract_headings(body),
        images=extract_images(body),
        links=extract_links(body, url),
        text=extract_visible_text(body),
        ld_json=ld_json,
        social=extract_social_meta(metas),
    )


# -- analysis ----------------------------------------------------------------


def _content_suggestions(
    word_count: int,
    readability: ReadabilityScores,
    avg_sentence_len: float,
    target_keyword: Optional[str],
    keyword_density: Optional[float],
) -> List[str]:
    suggestions: List[str] = []
    if word_count < 300:
        suggestions.append(
            f"Content is thin ({word_count} words). Aim for at least 500-1000 words for better rankings."
        )
    elif word_count < 600:
        suggestions.append(f"Content could be expanded ({word_count} words). Consider adding more depth.")

    if readability.flesch_reading_ease < 50:
        suggestions.append(
            f"Content is difficult to read (Flesch score: {readability.flesch_reading_ease}). "
            "Simplify sentences and use shorter words."
        )
    if avg_sentence_len > 25:
        suggestions.append(
            f"Average sentence length is high ({round_half_up(avg_sentence_len)} words). Break up long sentences."
        )
    if target_keyword and keyword_density is not None:
        if keyword_density < 0.5:
            suggestions.append(
                f'Target keyword "{target_keyword}" density is low ({keyword_density}%). '
                "Consider using it more naturally."
            )
        elif keyword_density > 3:
            suggestions.append(
                f'Target keyword "{target_keyword}" may be over-optimized ({keyword_density}%). '
                "Reduce usage to avoid keyword stuffing."
            )
    if readability.flesch_kincaid_grade > 12:
        suggestions.append(
            f"Content reads at college level (grade {readability.flesch_kincaid_grade}). "
            "Consider simplifying for broader audience."
        )
    return suggestions


def analyze_page(html: str, url: str = "", options: Optional[AnalysisOptions] = None) -> PageReport:
    """Score an already-fetched HTML page."""
    options = options or AnalysisOptions()
    page = extract_page(html, url)
    text = page.text

    words = extract_words(text)
    word_count = len(words)
    readability = calculate_readability_scores(text)
    avg_sentence_len = average_sentence_length(text)

    top_keywords = [
        KeywordUsage(word=word, count=count, density=round_to(calculate_keyword_density(text, word), 2))
        for word, count in list(extract_keywords(text).items())[:TOP_KEYWORDS]
    ]

    keyword = options.target_keyword
    keyword_density = round_to(calculate_keyword_density(text, keyword), 2) if keyword else None

    seo = calculate_seo_score(
        title=page.title,
        description=page.description,
        word_count=word_count,
        h1_count=page.heading_count(1),
        image_count=page.images.total,
        images_with_alt=page.images.with_alt,
        internal_links=len(page.links.internal),
        external_links=len(page.links.external),
        target_keyword=keyword,
        page_type=options.page_type,
    )

    structured_data = validate_structured_data(page.ld_json, url=url or None)

    logger.debug("Analyzed page %s: %d words, overall %d", url or "(inline)", word_count, seo.overall)
    return PageReport(
        url=url,
        title=page.title,
        description=page.description,
        word_count=word_count,
        sentence_count=count_sentences(text),
        avg_sentence_length=round_to(avg_sentence_len, 1),
        readability=readability,
        seo=seo,
        top_keywords=top_keywords,
        target_keyword_density=keyword_density,
        content_score=score_content_length(word_count, options.page_type),
        fingerprint=generate_text_fingerprint(text),
        suggestions=_content_suggestions(word_count, readability, avg_sentence_len, keyword, keyword_density),
        structured_data=structured_data,
        headings=page.headings,
        images=page.images,
        canonical=page.canonical,
        lang=page.lang,
        social=page.social,
        improvements=suggest_page_improvements(page, structured_data.schemas, options),
    )


def resolve_image_resources(
    images: ImageStats, page_url: str, cache: ResourceCache, session: Optional[requests.Session] = None
) -> List[Resource]:
    """Look up the MIME type of every image on a page through ``cache``."""
    origin = "{0.scheme}://{0.netloc}".format(urlparse(page_url))
    urls = [to_absolute(page_url, img.src) for img in images.details if img.src and not img.src.startswith("data:")]
    return retrieve_resources(dict.fromkeys(urls), cache, base=origin, session=session)
