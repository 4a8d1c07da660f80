"""Fix suggestions built on top of the extracted page facts.

The scorers turn a page into numbers. The helpers here turn the same facts
into issues plus concrete replacements: a reworded title, an alt text
guessed from the image filename, a ready-to-paste JSON-LD snippet.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional, Sequence
from urllib.parse import urlparse

from .config import AnalysisOptions
from .jsonld import ORGANIZATION_TYPES, UNKNOWN_TYPE, SchemaAnalysis, get_schema_type
from .logging import get_logger
from .utils import round_half_up

if TYPE_CHECKING:
    from .page import HeadingData, ImageInfo, PageData

logger = get_logger("suggestions")

TITLE_MIN, TITLE_MAX = 30, 60
DESCRIPTION_MIN, DESCRIPTION_MAX = 120, 160
DESCRIPTION_SNIPPET = 155
H1_MIN, H1_MAX = 20, 70
ALT_MIN, ALT_MAX = 10, 125
MANY_IMAGES = 20

CTA_WORDS = ("learn", "discover", "find", "get", "try", "start", "read", "click", "see", "explore", "join")
GENERIC_HEADINGS = ("introduction", "overview", "welcome", "home", "untitled", "section")
REDUNDANT_ALT_PREFIXES = ("image of", "picture of", "photo of", "graphic of")
FILENAME_NOISE = frozenset({"img", "image", "photo", "pic", "screenshot", "screen"})
MODERN_IMAGE_FORMATS = ("webp", "avif")

_TITLE_SUFFIX = re.compile(r"\s*[-|]\s*.+$")
_TAG = re.compile(r"<[^>]*>")
_ALT_FILENAME = re.compile(r"\.(jpg|jpeg|png|gif|webp|svg)", re.I)
_CAMEL = re.compile(r"([a-z])([A-Z])")
_LEADING_INT = re.compile(r"\s*(\d+)")
_ISO_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")

_LD_SELECTOR = 'script[type="application/ld+json"]:has-text("{}")'


# -- records -----------------------------------------------------------------


@dataclass(frozen=True)
class MetaSuggestion:
    """Issues and rewrites for a title or a meta description."""

    current: Optional[str]
    issues: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current": self.current,
            "issues": list(self.issues),
            "suggestions": list(self.suggestions),
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class HeadingStructure:
    counts: Dict[int, int]
    total_headings: int
    has_proper_hierarchy: bool
    skipped_levels: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {f"h{level}Count": self.counts.get(level, 0) for level in range(1, 7)}
        data.update(
            {
                "totalHeadings": self.total_headings,
                "hasProperHierarchy": self.has_proper_hierarchy,
                "skippedLevels": list(self.skipped_levels),
            }
        )
        return data


@dataclass(frozen=True)
class HeadingSuggestion:
    structure: HeadingStructure
    issues: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "issues": list(self.issues),
            "recommendations": list(self.recommendations),
            "structure": self.structure.to_dict(),
        }


@dataclass(frozen=True)
class ImageSuggestion:
    src: str
    suggested_alt: Optional[str]
    issues: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "src": self.src,
            "issues": list(self.issues),
            "suggestedAlt": self.suggested_alt,
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class ImageAnalysis:
    total_images: int
    images_without_alt: int
    image_suggestions: List[ImageSuggestion] = field(default_factory=list)
    general_recommendations: List[str] = field(default_factory=list)

    @property
    def images_with_alt(self) -> int:
        return self.total_images - self.images_without_alt

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalImages": self.total_images,
            "imagesWithAlt": self.images_with_alt,
            "imagesWithoutAlt": self.images_without_alt,
            "imageSuggestions": [s.to_dict() for s in self.image_suggestions],
            "generalRecommendations": list(self.general_recommendations),
        }


@dataclass(frozen=True)
class SocialSuggestion:
    issues: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"issues": list(self.issues), "suggestions": list(self.suggestions)}


@dataclass(frozen=True)
class FixInstruction:
    """An HTML-level change, shaped like the markdown ``ContentInstruction``."""

    action: str
    selector: str
    suggested: str
    reason: str
    priority: str
    automated: bool = False
    current: Optional[str] = None
    tag_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        target: Dict[str, Any] = {"type": "html-tag", "selector": self.selector}
        if self.tag_name is not None:
            target["tagName"] = self.tag_name
        value: Dict[str, Any] = {}
        if self.current is not None:
            value["current"] = self.current
        value["suggested"] = self.suggested
        return {
            "action": self.action,
            "target": target,
            "value": value,
            "reason": self.reason,
            "priority": self.priority,
            "automated": self.automated,
        }


@dataclass(frozen=True)
class SchemaFixResult:
    instructions: List[FixInstruction]
    summary: str

    def to_dict(self) -> Dict[str, Any]:
        return {"instructions": [i.to_dict() for i in self.instructions], "summary": self.summary}


@dataclass(frozen=True)
class PageImprovements:
    title: MetaSuggestion
    description: MetaSuggestion
    canonical: List[str]
    headings: HeadingSuggestion
    images: ImageAnalysis
    open_graph: SocialSuggestion
    twitter: SocialSuggestion
    schema: SchemaFixResult

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title.to_dict(),
            "description": self.description.to_dict(),
            "canonical": list(self.canonical),
            "headings": self.headings.to_dict(),
            "images": self.images.to_dict(),
            "openGraph": self.open_graph.to_dict(),
            "twitter": self.twitter.to_dict(),
            "schema": self.schema.to_dict(),
        }


# -- meta tags ---------------------------------------------------------------


def suggest_title_improvements(
    title: Optional[str], target_keyword: Optional[str] = None, site_name: Optional[str] = None
) -> MetaSuggestion:
    if not title:
        return MetaSuggestion(
            current=None,
            issues=["Missing title tag - critical for SEO"],
            recommendations=["Add a descriptive title tag that includes your primary keyword"],
        )

    issues: List[str] = []
    suggestions: List[str] = []
    recommendations: List[str] = []
    length = len(title)

    if length < TITLE_MIN:
        issues.append(f"Title too short ({length} chars). Optimal: 50-60 characters")
        recommendations.append("Expand title to include more descriptive keywords")
    elif length > TITLE_MAX:
        issues.append(f"Title too long ({length} chars). May be truncated in search results")
        recommendations.append("Shorten title to under 60 characters")

    if target_keyword:
        if target_keyword.lower() not in title.lower():
            issues.append(f'Target keyword "{target_keyword}" not found in title')
            recommendations.append(f'Include "{target_keyword}" near the beginning of the title')

        # "Guide | Site" -> "Guide"
        base = _TITLE_SUFFIX.sub("", title, count=1).strip()
        suggestions.append(f"{target_keyword} - {base}")
        suggestions.append(f"{base}: {target_keyword} Guide")
        if site_name:
            suggestions.append(f"{target_keyword} | {site_name}")

    if not re.match(r"[A-Z]", title):
        recommendations.append("Start title with a capital letter")
    if "  " in title:
        recommendations.append("Remove double spaces in title")
    lowered = title.lower()
    if "untitled" in lowered or "home" in lowered:
        recommendations.append("Use a more descriptive, keyword-rich title instead of generic terms")

    return MetaSuggestion(current=title, issues=issues, suggestions=suggestions, recommendations=recommendations)


def _description_from_text(page_text: str) -> Optional[str]:
    sentences = [s.strip() for s in re.split(r"[.!?]", _TAG.sub("", page_text))]
    snippet = ". ".join(s for s in sentences[:2] if s)
    if not snippet:
        return None
    if len(snippet) > DESCRIPTION_SNIPPET:
        return snippet[:DESCRIPTION_SNIPPET] + "..."
    return snippet


def suggest_description_improvements(
    description: Optional[str], target_keyword: Optional[str] = None, page_text: Optional[str] = None
) -> MetaSuggestion:
    """Check a meta description; when it is missing, draft one from the page text."""
    if not description:
        drafted = _description_from_text(page_text) if page_text else None
        return MetaSuggestion(
            current=None,
            issues=["Missing meta description - important for click-through rates"],
            suggestions=[drafted] if drafted else [],
            recommendations=["Add a compelling meta description that summarizes page content"],
        )

    issues: List[str] = []
    recommendations: List[str] = []
    length = len(description)
    lowered = description.lower()

    if length < DESCRIPTION_MIN:
        issues.append(f"Description too short ({length} chars). Optimal: 150-160 characters")
        recommendations.append("Expand description to provide more context for searchers")
    elif length > DESCRIPTION_MAX:
        issues.append(f"Description too long ({length} chars). Will be truncated in search results")
        recommendations.append("Shorten to 160 characters to prevent truncation")

    if target_keyword and target_keyword.lower() not in lowered:
        issues.append(f'Target keyword "{target_keyword}" not found in description')
        recommendations.append(f'Include "{target_keyword}" naturally in the description')

    if not any(word in lowered for word in CTA_WORDS):
        recommendations.append('Add a call-to-action (e.g., "Learn more", "Discover how", "Get started")')
    if not description.endswith((".", "!", "?")):
        recommendations.append("End description with proper punctuation")
    if "welcome to" in lowered:
        recommendations.append('Avoid generic phrases like "Welcome to" - be specific and unique')

    return MetaSuggestion(current=description, issues=issues, recommendations=recommendations)


def suggest_canonical_url(current_url: str, canonical: Optional[str]) -> List[str]:
    issues: List[str] = []
    if not canonical:
        issues.append("Missing canonical URL - add one to prevent duplicate content issues")
    elif canonical != current_url:
        issues.append("Canonical URL differs from current URL. Ensure this is intentional.")

    parsed = urlparse(current_url)
    if (parsed.hostname or "").startswith("www."):
        issues.append("Consider using non-www version for consistency (or vice versa)")
    if parsed.path.endswith("/") and parsed.path != "/":
        issues.append("Ensure trailing slash usage is consistent across the site")
    return issues


# -- headings ----------------------------------------------------------------


def analyze_heading_structure(headings: Mapping[str, "HeadingData"]) -> HeadingStructure:
    """Per-level counts plus the levels left empty between used levels.

    Unlike the markdown check in ``content``, this only sees counts, so an
    H1 and an H3 with no H2 anywhere on the page report level 2 as skipped.
    """
    counts = {level: headings[f"h{level}"].count if f"h{level}" in headings else 0 for level in range(1, 7)}

    skipped: List[int] = []
    last_used = 0
    for level in range(1, 7):
        if counts[level] == 0:
            continue
        if last_used:
            skipped.extend(gap for gap in range(last_used + 1, level) if counts[gap] == 0)
        last_used = level

    return HeadingStructure(
        counts=counts,
        total_headings=sum(counts.values()),
        has_proper_hierarchy=not skipped and counts[1] <= 1,
        skipped_levels=skipped,
    )


def _texts(headings: Mapping[str, "HeadingData"], level: int) -> List[str]:
    data = headings.get(f"h{level}")
    return list(data.texts) if data else []


def suggest_heading_improvements(
    headings: Mapping[str, "HeadingData"], target_keyword: Optional[str] = None
) -> HeadingSuggestion:
    structure = analyze_heading_structure(headings)
    issues: List[str] = []
    recommendations: List[str] = []
    h1_count = structure.counts[1]

    if h1_count == 0:
        issues.append("Missing H1 tag - every page should have exactly one H1")
        recommendations.append("Add a single H1 heading that describes the main topic of the page")
    elif h1_count > 1:
        issues.append(f"Multiple H1 tags found ({h1_count}) - use only one H1 per page")
        recommendations.append("Convert additional H1s to H2s or lower")

    if structure.skipped_levels:
        issues.append("Skipped heading levels: " + ", ".join(f"H{level}" for level in structure.skipped_levels))
        recommendations.append("Maintain proper heading hierarchy (H1 → H2 → H3, etc.)")

    if target_keyword:
        keyword = target_keyword.lower()
        if keyword not in " ".join(_texts(headings, 1)).lower():
            recommendations.append(f'Consider including target keyword "{target_keyword}" in H1')
        if structure.counts[2] > 0 and keyword not in " ".join(_texts(headings, 2)).lower():
            recommendations.append("Consider including target keyword variations in H2 headings")

    if structure.total_headings < 3:
        recommendations.append("Add more headings to break up content and improve readability")
    if structure.counts[2] == 0 and structure.total_headings > 1:
        issues.append("Missing H2 headings - use H2s to structure main content sections")

    for text in _texts(headings, 1):
        if len(text) > H1_MAX:
            recommendations.append("H1 is too long - keep it under 70 characters for better SEO")
        if len(text) < H1_MIN:
            recommendations.append("H1 is too short - make it more descriptive")

    # Only the first generic heading is reported
    for text in (t.lower() for level in (1, 2, 3) for t in _texts(headings, level)):
        if any(text == term or text.startswith(term + " ") for term in GENERIC_HEADINGS):
            recommendations.append(f'Avoid generic heading "{text}" - use descriptive, keyword-rich headings')
            break

    return HeadingSuggestion(structure=structure, issues=issues, recommendations=recommendations)


# -- images ------------------------------------------------------------------


def _filename_words(src: str) -> List[str]:
    stem = src.split("/")[-1].split(".")[0]
    stem = _CAMEL.sub(r"\1 \2", stem.replace("-", " ").replace("_", " "))
    return [w for w in stem.lower().split() if len(w) > 2 and w not in FILENAME_NOISE]


def generate_alt_suggestion(src: str, nearby_text: Optional[str] = None) -> Optional[str]:
    """Guess alt text from the filename, falling back to short nearby text."""
    words = _filename_words(src)
    if words:
        text = " ".join(words)
        return text[0].upper() + text[1:]
    if nearby_text:
        cleaned = _TAG.sub("", nearby_text).strip()
        if 0 < len(cleaned) < 100:
            return cleaned
    return None


def _image_extension(src: str) -> Optional[str]:
    if src.startswith("data:"):
        return None
    name = urlparse(src).path.rsplit("/", 1)[-1]
    if "." not in name:
        return None
    return name.rsplit(".", 1)[-1].lower() or None


def analyze_image(image: "ImageInfo") -> ImageSuggestion:
    issues: List[str] = []
    recommendations: List[str] = []
    suggested_alt: Optional[str] = None

    if not image.alt or not image.alt.strip():
        issues.append("Missing alt text")
        suggested_alt = generate_alt_suggestion(image.src)
        if suggested_alt:
            recommendations.append(f'Suggested alt text: "{suggested_alt}"')
        else:
            recommendations.append("Add descriptive alt text that explains the image content")
    else:
        alt = image.alt.strip()
        if len(alt) < ALT_MIN:
            issues.append("Alt text too short - provide more description")
        if len(alt) > ALT_MAX:
            issues.append("Alt text too long - keep under 125 characters")
        if alt.lower().startswith(REDUNDANT_ALT_PREFIXES):
            recommendations.append(
                'Remove redundant phrases like "image of" - screen readers already announce it as an image'
            )
        if _ALT_FILENAME.search(alt):
            issues.append("Alt text contains filename - use descriptive text instead")
        words = alt.lower().split()
        if len(words) > 5 and len(set(words)) < len(words) * 0.5:
            recommendations.append("Avoid keyword stuffing in alt text - keep it natural")

    if not image.width or not image.height:
        recommendations.append("Add explicit width and height attributes to prevent layout shift")

    if not image.src:
        issues.append("Missing image source")
    else:
        if image.src.startswith("//"):
            recommendations.append("Use explicit protocol (https://) instead of protocol-relative URL")
        extension = _image_extension(image.src)
        if extension and extension not in MODERN_IMAGE_FORMATS:
            recommendations.append(f"Consider using WebP or AVIF format for better compression (current: {extension})")

    return ImageSuggestion(src=image.src, suggested_alt=suggested_alt, issues=issues, recommendations=recommendations)


def _leading_int(value: Optional[str]) -> int:
    match = _LEADING_INT.match(value or "")
    return int(match.group(1)) if match else 0


def analyze_images(images: Sequence["ImageInfo"]) -> ImageAnalysis:
    suggestions = [analyze_image(img) for img in images]
    without_alt = sum(1 for s in suggestions if "Missing alt text" in s.issues)

    general: List[str] = []
    if not images:
        general.append("Consider adding relevant images to improve engagement and SEO")
    if without_alt:
        percentage = round_half_up(without_alt / len(images) * 100)
        general.append(f"{percentage}% of images are missing alt text - accessibility and SEO issue")
    if len(images) > MANY_IMAGES:
        general.append("Page has many images - ensure lazy loading is implemented")
    has_hero = any(_leading_int(img.width) > 800 or _leading_int(img.height) > 600 for img in images)
    if images and not has_hero:
        general.append("Consider adding a prominent hero image above the fold")

    return ImageAnalysis(
        total_images=len(images),
        images_without_alt=without_alt,
        image_suggestions=suggestions,
        general_recommendations=general,
    )


# -- social meta -------------------------------------------------------------


def analyze_open_graph(
    social: Mapping[str, str], page_title: Optional[str] = None, page_description: Optional[str] = None
) -> SocialSuggestion:
    issues: List[str] = []
    suggestions: List[str] = []

    title = social.get("og:title")
    if not title:
        issues.append("Missing og:title")
        if page_title:
            suggestions.append(f'Add og:title - suggest using page title: "{page_title[:60]}"')
        else:
            suggestions.append("Add og:title meta tag")
    elif len(title) > 60:
        suggestions.append(f"og:title is {len(title)} chars - consider shortening to under 60 for optimal display")

    description = social.get("og:description")
    if not description:
        issues.append("Missing og:description")
        if page_description:
            suggestions.append("Add og:description - suggest using meta description")
        else:
            suggestions.append("Add og:description meta tag")
    elif len(description) > 300:
        suggestions.append("og:description exceeds 300 chars - may be truncated on Facebook")

    image = social.get("og:image")
    if not image:
        issues.append("Missing og:image - social shares will lack visual appeal")
        suggestions.append("Add og:image with minimum 1200x630px dimensions")
    else:
        if not image.startswith("https://"):
            issues.append("og:image should use HTTPS URL")
        if not social.get("og:image:width") or not social.get("og:image:height"):
            suggestions.append("Add og:image:width and og:image:height for faster rendering")
        if not social.get("og:image:alt"):
            suggestions.append("Add og:image:alt for accessibility")

    if not social.get("og:url"):
        suggestions.append("Add og:url to specify the canonical URL for sharing")
    if not social.get("og:type"):
        suggestions.append('Add og:type (e.g., "website", "article") for better categorization')
    if not social.get("og:site_name"):
        suggestions.append("Add og:site_name to display your brand name")
    if not social.get("og:locale"):
        suggestions.append('Add og:locale to specify content language (e.g., "en_US")')

    return SocialSuggestion(issues=issues, suggestions=suggestions)


def analyze_twitter_card(social: Mapping[str, str]) -> SocialSuggestion:
    """Twitter falls back to Open Graph values, so only gaps in both count."""
    issues: List[str] = []
    suggestions: List[str] = []

    card = social.get("twitter:card")
    if not card:
        if social.get("og:image"):
            suggestions.append('Add twitter:card="summary_large_image" to display large image preview')
        else:
            suggestions.append('Add twitter:card="summary" for Twitter card support')

    if not social.get("twitter:title") and not social.get("og:title"):
        issues.append("Missing twitter:title (and no og:title fallback)")
    if not social.get("twitter:description") and not social.get("og:description"):
        issues.append("Missing twitter:description (and no og:description fallback)")
    if not social.get("twitter:image") and not social.get("og:image"):
        issues.append("Missing twitter:image (and no og:image fallback)")

    if not social.get("twitter:site"):
        suggestions.append("Add twitter:site with your Twitter @username for attribution")
    elif not social.get("twitter:creator"):
        suggestions.append("Consider adding twitter:creator for author attribution")

    if card == "player" and not all(
        social.get(key) for key in ("twitter:player", "twitter:player:width", "twitter:player:height")
    ):
        issues.append('twitter:card="player" requires player, player:width, and player:height')

    return SocialSuggestion(issues=issues, suggestions=suggestions)


# -- JSON-LD fixes -----------------------------------------------------------


def _origin(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}" if parsed.netloc else ""


def _web_page(url: str, title: str, description: str, today: date) -> Dict[str, Any]:
    return {"@context": "https://schema.org", "@type": "WebPage", "name": title, "description": description, "url": url}


def _web_site(url: str, title: str, description: str, today: date) -> Dict[str, Any]:
    origin = _origin(url)
    return {
        "@context": "https://schema.org",
        "@type": "WebSite",
        "name": title,
        "description": description,
        "url": origin,
        "potentialAction": {
            "@type": "SearchAction",
            "target": f"{origin}/search?q={{search_term_string}}",
            "query-input": "required name=search_term_string",
        },
    }


def _organization(url: str, title: str, description: str, today: date) -> Dict[str, Any]:
    origin = _origin(url)
    return {
        "@context": "https://schema.org",
        "@type": "Organization",
        "name": re.split(r"[-|]", title)[0].strip() or title,
        "url": origin,
        "logo": f"{origin}/logo.png",
    }


def _article(url: str, title: str, description: str, today: date) -> Dict[str, Any]:
    return {
        "@context": "https://schema.org",
        "@type": "Article",
        "headline": title,
        "description": description,
        "url": url,
        "datePublished": today.isoformat(),
        "author": {"@type": "Person", "name": "Author Name"},
        "publisher": {
            "@type": "Organization",
            "name": "Publisher Name",
            "logo": {"@type": "ImageObject", "url": f"{_origin(url)}/logo.png"},
        },
    }


def _breadcrumb_list(url: str, title: str, description: str, today: date) -> Dict[str, Any]:
    origin = _origin(url)
    items: List[Dict[str, Any]] = [{"@type": "ListItem", "position": 1, "name": "Home", "item": origin}]
    path = ""
    for part in (p for p in urlparse(url).path.split("/") if p):
        path += f"/{part}"
        items.append(
            {
                "@type": "ListItem",
                "position": len(items) + 1,
                "name": part[0].upper() + part[1:].replace("-", " "),
                "item": f"{origin}{path}",
            }
        )
    return {"@context": "https://schema.org", "@type": "BreadcrumbList", "itemListElement": items}


def _faq_page(url: str, title: str, description: str, today: date) -> Dict[str, Any]:
    return {
        "@context": "https://schema.org",
        "@type": "FAQPage",
        "mainEntity": [
            {
                "@type": "Question",
                "name": "Your question here?",
                "acceptedAnswer": {"@type": "Answer", "text": "Your answer here."},
            }
        ],
    }


SCHEMA_TEMPLATES: Dict[str, Callable[[str, str, str, date], Dict[str, Any]]] = {
    "WebPage": _web_page,
    "WebSite": _web_site,
    "Organization": _organization,
    "Article": _article,
    "BreadcrumbList": _breadcrumb_list,
    "FAQPage": _faq_page,
}


def render_schema_template(
    schema_type: str, url: str, title: str, description: str, today: Optional[date] = None
) -> str:
    """Return a ``<script type="application/ld+json">`` block for ``schema_type``."""
    try:
        template = SCHEMA_TEMPLATES[schema_type]
    except KeyError:
        raise ValueError(f"No JSON-LD template for {schema_type!r}") from None
    body = json.dumps(template(url, title, description, today or date.today()), indent=2)
    return f'<script type="application/ld+json">\n{body}\n</script>'


def _document_type(document: Mapping[str, Any]) -> str:
    kind = get_schema_type(document)
    graph = document.get("@graph")
    if kind == UNKNOWN_TYPE and isinstance(graph, list) and graph and isinstance(graph[0], Mapping):
        return get_schema_type(graph[0])
    return kind


def _node_fixes(analysis: SchemaAnalysis, today: date) -> List[FixInstruction]:
    data = analysis.raw_data or {}
    selector = _LD_SELECTOR.format(analysis.type)
    fixes: List[FixInstruction] = []

    image = data.get("image")
    if isinstance(image, str) and not image.startswith("http"):
        slash = "" if image.startswith("/") else "/"
        fixes.append(
            FixInstruction(
                action="update",
                selector=selector,
                current=f'"image": "{image}"',
                suggested=f'"image": "https://yourdomain.com{slash}{image}"',
                reason="Image URL should be absolute (start with https://).",
                priority="medium",
            )
        )

    published = data.get("datePublished")
    if isinstance(published, str) and not _ISO_DATE_PREFIX.match(published):
        fixes.append(
            FixInstruction(
                action="update",
                selector=selector,
                current=f'"datePublished": "{published}"',
                suggested=f'"datePublished": "{today.isoformat()}"',
                reason="datePublished should be in ISO 8601 format (YYYY-MM-DD).",
                priority="medium",
            )
        )

    for prop in analysis.missing_required:
        fixes.append(
            FixInstruction(
                action="update",
                selector=selector,
                current=f'Missing "{prop}"',
                suggested=f'Add "{prop}" property to {analysis.type} schema',
                reason=f"{prop} is required for {analysis.type} schema to be valid.",
                priority="high",
            )
        )
    return fixes


def _add_template(
    schema_type: str, url: str, title: str, description: str, today: date, reason: str, priority: str
) -> FixInstruction:
    return FixInstruction(
        action="add",
        selector="head",
        tag_name="script",
        suggested=render_schema_template(schema_type, url, title, description, today),
        reason=reason,
        priority=priority,
        automated=True,
    )


def _fix_summary(instructions: Sequence[FixInstruction]) -> str:
    if not instructions:
        return "Structured data looks good"
    counts = {p: sum(1 for i in instructions if i.priority == p) for p in ("critical", "high", "medium", "low")}
    parts = [f"{n} {priority}" for priority, n in counts.items() if n]
    return f"{len(instructions)} schema fixes: {', '.join(parts)} priority"


def suggest_schema_fixes(
    documents: Sequence[Mapping[str, Any]],
    schemas: Sequence[SchemaAnalysis],
    url: str = "",
    title: Optional[str] = None,
    description: Optional[str] = None,
    schema_type: Optional[str] = None,
    today: Optional[date] = None,
) -> SchemaFixResult:
    """Turn JSON-LD analyses into HTML-level fix instructions.

    ``documents`` are the top-level JSON-LD blocks (checked for
    ``@context``); ``schemas`` are their per-node analyses. Nodes of
    unknown type are left alone. Missing baseline schemas come back as
    ready-to-paste templates.
    """
    today = today or date.today()
    title = title or "Page Title"
    description = description or "Page description"
    instructions: List[FixInstruction] = []

    for document in documents:
        kind = _document_type(document)
        if kind == UNKNOWN_TYPE or "@context" in document:
            continue
        instructions.append(
            FixInstruction(
                action="update",
                selector=_LD_SELECTOR.format(kind),
                current=json.dumps(dict(document), separators=(",", ":"), default=str)[:50] + "...",
                suggested='{"@context": "https://schema.org", ...}',
                reason="Missing @context property. Schema.org context is required.",
                priority="high",
            )
        )

    for analysis in schemas:
        if analysis.type != UNKNOWN_TYPE:
            instructions.extend(_node_fixes(analysis, today))

    existing = {s.type for s in schemas}
    if schema_type in SCHEMA_TEMPLATES and schema_type not in existing:
        instructions.append(
            _add_template(
                schema_type,
                url,
                title,
                description,
                today,
                f"Adding {schema_type} schema to improve rich results in search.",
                "medium",
            )
        )

    if not documents:
        instructions.append(
            _add_template(
                "WebPage",
                url,
                title,
                description,
                today,
                "No structured data found. Adding WebPage schema as minimum for SEO.",
                "high",
            )
        )
    else:
        if not existing & ORGANIZATION_TYPES:
            instructions.append(
                _add_template(
                    "Organization",
                    url,
                    title,
                    description,
                    today,
                    "Adding Organization schema improves brand visibility in search.",
                    "medium",
                )
            )
        if "BreadcrumbList" not in existing:
            instructions.append(
                _add_template(
                    "BreadcrumbList",
                    url,
                    title,
                    description,
                    today,
                    "Adding BreadcrumbList schema enables breadcrumb display in search results.",
                    "low",
                )
            )

    return SchemaFixResult(instructions=instructions, summary=_fix_summary(instructions))


# -- page --------------------------------------------------------------------


def suggest_page_improvements(
    page: "PageData",
    schemas: Sequence[SchemaAnalysis],
    options: Optional[AnalysisOptions] = None,
    today: Optional[date] = None,
) -> PageImprovements:
    options = options or AnalysisOptions()
    keyword = options.target_keyword
    improvements = PageImprovements(
        title=suggest_title_improvements(page.title, keyword, options.site_name),
        description=suggest_description_improvements(page.description, keyword, page.text),
        canonical=suggest_canonical_url(page.url, page.canonical),
        headings=suggest_heading_improvements(page.headings, keyword),
        images=analyze_images(page.images.details),
        open_graph=analyze_open_graph(page.social, page.title, page.description),
        twitter=analyze_twitter_card(page.social),
        schema=suggest_schema_fixes(
            page.ld_json,
            schemas,
            url=page.url,
            title=page.title,
            description=page.description,
            schema_type=options.schema_type,
            today=today,
        ),
    )
    logger.debug("Page improvements: %s", improvements.schema.summary)
    return improvements
