from __future__ import annotations

import pytest

from seoinstruct.scoring import (
    calculate_seo_score,
    score_content_length,
    score_headings,
    score_images,
    score_keyword,
    score_links,
    score_meta_description,
    score_title_tag,
)


def test_missing_title_scores_zero():
    assert score_title_tag(None) == 0
    assert score_title_tag("") == 0


def test_title_keyword_at_start_scores_higher():
    title = "x" * 55
    assert score_title_tag(title, "x") == 90
    assert score_title_tag(title) == 65


def test_short_title_with_action_word():
    # 25 chars: length 10, no keyword 15, action word 10
    assert score_title_tag("Best coffee grinders 2024") == 35


def test_title_score_never_exceeds_100():
    title = "Ultimate guide " + "y" * 40
    assert score_title_tag(title, "ultimate") == 100


def test_ideal_meta_description():
    description = "Learn seo basics " + "x" * 137 + "."
    assert len(description) == 155
    assert score_meta_description(description, "seo") == 100


def test_meta_description_penalizes_filler_phrasing():
    assert score_meta_description(None) == 0
    assert score_meta_description("This tool is a helper") == 20
    assert score_meta_description("This tool helps you") == 30


@pytest.mark.parametrize(
    "words,page_type,expected",
    [
        (1500, "blog", 100),
        (1000, "blog", 85),
        (2500, "blog", 70),
        (500, "blog", 25),
        (0, "blog", 0),
        (3000, "blog", 60),
        (5000, "blog", 50),
        (6000, "blog", 40),
        (500, "product", 100),
        (800, "landing", 100),
    ],
)
def test_content_length_bands(words, page_type, expected):
    assert score_content_length(words, page_type) == expected


def test_unknown_page_type_is_rejected():
    with pytest.raises(ValueError):
        score_content_length(100, "wiki")


def test_component_scores():
    assert [score_headings(n) for n in (0, 1, 2)] == [20, 100, 50]
    assert score_images(0, 0) == 50
    assert score_images(3, 2) == 67
    assert score_links(0, 0) == 50
    assert score_links(3, 1) == 100
    assert score_keyword("SEO tips", "Learn seo", "seo") == 100
    assert score_keyword("Tips", None, "seo") == 50


def test_calculate_seo_score_for_empty_page():
    score = calculate_seo_score(
        title=None,
        description=None,
        word_count=0,
        h1_count=0,
        image_count=0,
        images_with_alt=0,
        internal_links=0,
        external_links=0,
    )
    assert score.on_page == 7
    assert score.content == 25
    assert score.technical == 50
    assert score.overall == 24
    assert score.to_dict()["details"]["headingsScore"] == 20


def test_calculate_seo_score_is_weighted_average():
    score = calculate_seo_score(
        title="x" * 55,
        description="Learn seo basics " + "x" * 137 + ".",
        word_count=500,
        h1_count=1,
        image_count=2,
        images_with_alt=2,
        internal_links=3,
        external_links=1,
        target_keyword="x",
        page_type="product",
    )
    assert score.details.content_length_score == 100
    assert score.on_page == 97
    assert score.content == 100
    assert score.technical == 100
    # 97 * 0.4 + 100 * 0.35 + 100 * 0.25
    assert score.overall == 99
