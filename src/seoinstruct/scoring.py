from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .utils import clamp, round_half_up

TITLE_ACTION_WORDS = ("how", "guide", "best", "top", "ultimate", "complete", "free", "new")
DESCRIPTION_CTA_WORDS = ("learn", "discover", "find", "get", "try", "start", "read", "click", "see", "explore")

CONTENT_LENGTH_RANGES = {
    "blog": {"min": 1000, "max": 2500, "ideal": 1500},
    "product": {"min": 300, "max": 1000, "ideal": 500},
    "landing": {"min": 500, "max": 1500, "ideal": 800},
}

# Share of the overall score per category
CATEGORY_WEIGHTS = {
    "onPage": 0.4,
    "content": 0.35,
    "technical": 0.25,
}


@dataclass(frozen=True)
class SEOScoreDetails:
    title_score: int
    description_score: int
    headings_score: int
    images_score: int
    links_score: int
    content_length_score: int
    keyword_score: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "titleScore": self.title_score,
            "descriptionScore": self.description_score,
            "headingsScore": self.headings_score,
            "imagesScore": self.images_score,
            "linksScore": self.links_score,
            "contentLengthScore": self.content_length_score,
            "keywordScore": self.keyword_score,
        }


@dataclass(frozen=True)
class SEOScore:
    overall: int
    content: int
    technical: int
    on_page: int
    details: SEOScoreDetails

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall": self.overall,
            "content": self.content,
            "technical": self.technical,
            "onPage": self.on_page,
            "details": self.details.to_dict(),
        }


def _contains(haystack: Optional[str], needle: Optional[str]) -> bool:
    if not haystack or not needle:
        return False
    return needle.lower() in haystack.lower()


def score_title_tag(title: Optional[str], target_keyword: Optional[str] = None) -> int:
    """Score a <title> from 0 to 100; 50-60 characters is optimal."""
    if not title:
        return 0

    score = 0
    length = len(title)
    lowered = title.lower()

    if 50 <= length <= 60:
        score += 40
    elif 40 <= length <= 70:
        score += 30
    elif 30 <= length <= 80:
        score += 20
    else:
        score += 10

    if target_keyword and target_keyword.lower() in lowered:
        score += 30
        if lowered.startswith(target_keyword.lower()):
            score += 10
    else:
        score += 15

    if length >= 30:
        score += 10

    if any(word in lowered for word in TITLE_ACTION_WORDS):
        score += 10

    return min(100, score)


def score_meta_description(description: Optional[str], target_keyword: Optional[str] = None) -> int:
    """Score a meta description from 0 to 100; 150-160 characters is optimal."""
    if not description:
        return 0

    score = 0
    length = len(description)
    lowered = description.lower()

    if 150 <= length <= 160:
        score += 40
    elif 120 <= length <= 180:
        score += 30
    elif 80 <= length <= 200:
        score += 20
    else:
        score += 10

    if target_keyword and target_keyword.lower() in lowered:
        score += 25
    else:
        score += 10

    if any(word in lowered for word in DESCRIPTION_CTA_WORDS):
        score += 15

    if re.search(r"[.!?]$", description):
        score += 10

    # "X is a Y" reads as filler rather than a value proposition
    if "is a" not in lowered and "are a" not in lowered:
        score += 10

    return min(100, score)


def score_content_length(word_count: int, page_type: str = "blog") -> int:
    try:
        bounds = CONTENT_LENGTH_RANGES[page_type]
    except KeyError:
        raise ValueError(f"Unknown page type: {page_type!r}") from None

    lo, hi, ideal = bounds["min"], bounds["max"], bounds["ideal"]

    if lo <= word_count <= hi:
        distance = abs(word_count - ideal)
        max_distance = max(ideal - lo, hi - ideal)
        return 70 + round_half_up((1 - distance / max_distance) * 30)

    if word_count < lo:
        return round_half_up(word_count / lo * 50)

    over_ratio = word_count / hi
    if over_ratio <= 1.5:
        return 60
    if over_ratio <= 2:
        return 50
    return 40


def score_headings(h1_count: int) -> int:
    if h1_count == 1:
        return 100
    if h1_count == 0:
        return 20
    return 50


def score_images(image_count: int, images_with_alt: int) -> int:
    if image_count == 0:
        return 50
    return round_half_up(images_with_alt / image_count * 100)


def score_links(internal_links: int, external_links: int) -> int:
    score = 50
    if internal_links >= 3:
        score += 25
    if external_links >= 1:
        score += 25
    return score


def score_keyword(title: Optional[str], description: Optional[str], target_keyword: Optional[str] = None) -> int:
    score = 50
    if target_keyword:
        if _contains(title, target_keyword):
            score += 25
        if _contains(description, target_keyword):
            score += 25
    return score


def _bounded(score: float) -> int:
    return int(clamp(score, 0, 100))


def calculate_seo_score(
    title: Optional[str],
    description: Optional[str],
    word_count: int,
    h1_count: int,
    image_count: int,
    images_with_alt: int,
    internal_links: int,
    external_links: int,
    target_keyword: Optional[str] = None,
    page_type: str = "blog",
) -> SEOScore:
    details = SEOScoreDetails(
        title_score=_bounded(score_title_tag(title, target_keyword)),
        description_score=_bounded(score_meta_description(description, target_keyword)),
        headings_score=_bounded(score_headings(h1_count)),
        images_score=_bounded(score_images(image_count, images_with_alt)),
        links_score=_bounded(score_links(internal_links, external_links)),
        content_length_score=_bounded(score_content_length(word_count, page_type)),
        keyword_score=_bounded(score_keyword(title, description, target_keyword)),
    )

    on_page = round_half_up((details.title_score + details.description_score + details.headings_score) / 3)
    content = round_half_up((details.content_length_score + details.keyword_score) / 2)
    technical = round_half_up((details.images_score + details.links_score) / 2)
    overall = round_half_up(
        on_page * CATEGORY_WEIGHTS["onPage"]
        + content * CATEGORY_WEIGHTS["content"]
        + technical * CATEGORY_WEIGHTS["technical"]
    )

    return SEOScore(overall=overall, content=content, technical=technical, on_page=on_page, details=details)
