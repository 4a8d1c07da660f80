from __future__ import annotations

import math

import pytest

from seoinstruct.readability import (
    automated_readability_index,
    calculate_readability_scores,
    check_readability,
    flesch_kincaid_grade,
    flesch_reading_ease,
    gunning_fog,
    interpret_flesch_score,
    smog_index,
)

FORMULAS = [
    flesch_reading_ease,
    flesch_kincaid_grade,
    gunning_fog,
    smog_index,
    automated_readability_index,
]

SIMPLE = "The cat sat on the mat."
HARD = "Organizational communication necessitates comprehensive documentation."


@pytest.mark.parametrize("formula", FORMULAS)
@pytest.mark.parametrize("text", ["", "   ", "... !!! ???"])
def test_formulas_return_zero_without_words(formula, text):
    assert formula(text) == 0


def test_simple_sentence_scores():
    # 6 words, 1 sentence, 6 syllables, 17 letters
    assert flesch_reading_ease(SIMPLE) == pytest.approx(206.835 - 1.015 * 6 - 84.6 * 1)
    assert flesch_kincaid_grade(SIMPLE) == pytest.approx(0.39 * 6 + 11.8 - 15.59)
    assert gunning_fog(SIMPLE) == pytest.approx(2.4)
    assert smog_index(SIMPLE) == pytest.approx(3.1291)
    assert automated_readability_index(SIMPLE) == pytest.approx(4.71 * 17 / 6 + 3 - 21.43)


def test_calculate_readability_scores_rounds_to_one_decimal():
    scores = calculate_readability_scores(SIMPLE)
    assert scores.flesch_reading_ease == 116.1
    assert scores.flesch_kincaid_grade == -1.4
    assert scores.gunning_fog == 2.4
    assert scores.smog_index == 3.1
    assert scores.automated_readability_index == -5.1
    assert scores.interpretation == "Very Easy (5th grade)"
    assert scores.to_dict()["fleschReadingEase"] == 116.1


def test_longer_sentences_lower_reading_ease():
    short = flesch_reading_ease("The cat sat. The dog ran.")
    longer = flesch_reading_ease("The cat sat and the dog ran.")
    assert longer < short


def test_smog_scales_short_samples_to_thirty_sentences():
    two = "Education matters. " * 2
    forty = "Education matters. " * 40
    assert smog_index(two) == pytest.approx(1.0430 * math.sqrt(2 * (30 / 2)) + 3.1291)
    assert smog_index(forty) == pytest.approx(1.0430 * math.sqrt(40) + 3.1291)


@pytest.mark.parametrize(
    "score,label",
    [
        (100, "Very Easy (5th grade)"),
        (90, "Very Easy (5th grade)"),
        (89.9, "Easy (6th grade)"),
        (80, "Easy (6th grade)"),
        (70, "Fairly Easy (7th grade)"),
        (60, "Standard (8th-9th grade) - Ideal for web"),
        (50, "Fairly Difficult (10th-12th grade)"),
        (30, "Difficult (College level)"),
        (29.99, "Very Difficult (Professional level)"),
        (-50, "Very Difficult (Professional level)"),
    ],
)
def test_interpretation_buckets(score, label):
    assert interpret_flesch_score(score) == label


def test_check_readability_for_easy_text():
    report = check_readability(SIMPLE)
    assert report.grade_comparison.score == "Excellent"
    assert report.statistics.word_count == 6
    assert report.statistics.sentence_count == 1
    assert report.suggestions == ["Content readability is excellent. No immediate improvements needed."]


def test_check_readability_for_hard_text():
    report = check_readability(HARD, target_grade=8)
    assert report.grade_comparison.score == "Needs Improvement"
    assert report.grade_comparison.recommendation == "Simplify to reach target grade 8 level"
    assert report.statistics.complex_word_count == 5
    assert report.statistics.complex_word_percentage == 100.0
    assert any(s.startswith("Use simpler words") for s in report.suggestions)
    assert any(s.startswith("Gunning Fog Index") for s in report.suggestions)
    data = report.to_dict()
    assert "interpretation" not in data["scores"]
    assert data["interpretation"] == "Very Difficult (Professional level)"


def test_check_readability_is_idempotent():
    assert check_readability(HARD).to_dict() == check_readability(HARD).to_dict()
