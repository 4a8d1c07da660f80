from __future__ import annotations

import pytest

from seoinstruct.config import AnalysisOptions
from seoinstruct.errors import ConfigError


def test_defaults():
    options = AnalysisOptions()
    assert options.target_audience == "general"
    assert options.target_grade == 8
    assert options.page_type == "blog"
    assert (options.max_sentence_words, options.max_paragraph_sentences) == (25, 5)


def test_from_mapping_accepts_camel_and_snake_case():
    camel = AnalysisOptions.from_mapping(
        {"targetKeyword": " seo ", "targetAudience": "Technical", "pageType": "product"}
    )
    snake = AnalysisOptions.from_mapping(
        {"target_keyword": "seo", "target_audience": "technical", "page_type": "product"}
    )
    assert camel == snake
    assert camel.target_keyword == "seo"
    assert camel.target_grade == 12


def test_unknown_values_fall_back_to_defaults():
    options = AnalysisOptions.from_mapping({"targetAudience": "wizards", "pageType": "wiki", "targetKeyword": "  "})
    assert options.target_audience == "general"
    assert options.page_type == "blog"
    assert options.target_keyword is None


def test_thresholds_are_validated():
    assert AnalysisOptions.from_mapping({"maxSentenceWords": "30"}).max_sentence_words == 30
    with pytest.raises(ConfigError):
        AnalysisOptions.from_mapping({"maxSentenceWords": "many"})
    with pytest.raises(ConfigError):
        AnalysisOptions(max_paragraph_sentences=0)


def test_config_error_is_a_value_error():
    with pytest.raises(ValueError):
        AnalysisOptions(max_sentence_words=-1)


def test_site_name_and_schema_type():
    options = AnalysisOptions.from_mapping({"siteName": " Acme ", "schemaType": "FAQPage"})
    assert options.site_name == "Acme"
    assert options.schema_type == "FAQPage"

    snake = AnalysisOptions.from_mapping({"site_name": "", "schema_type": "Recipe"})
    assert snake.site_name is None
    assert snake.schema_type is None
