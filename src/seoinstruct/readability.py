"""Readability formulas (Flesch, Flesch-Kincaid, Gunning Fog, SMOG, ARI)."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .text import (
    average_sentence_length,
    average_syllables_per_word,
    count_complex_words,
    count_sentences,
    count_syllables,
    extract_paragraphs,
    extract_words,
)
from .utils import round_half_up, round_to


@dataclass(frozen=True)
class ReadabilityScores:
    flesch_reading_ease: float
    flesch_kincaid_grade: float
    gunning_fog: float
    smog_index: float
    automated_readability_index: float
    interpretation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fleschReadingEase": self.flesch_reading_ease,
            "fleschKincaidGrade": self.flesch_kincaid_grade,
            "gunningFog": self.gunning_fog,
            "smogIndex": self.smog_index,
            "automatedReadabilityIndex": self.automated_readability_index,
            "interpretation": self.interpretation,
        }


@dataclass(frozen=True)
class ReadabilityStatistics:
    word_count: int
    sentence_count: int
    paragraph_count: int
    avg_sentence_length: float
    avg_syllables_per_word: float
    complex_word_count: int
    complex_word_percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wordCount": self.word_count,
            "sentenceCount": self.sentence_count,
            "paragraphCount": self.paragraph_count,
            "avgSentenceLength": self.avg_sentence_length,
            "avgSyllablesPerWord": self.avg_syllables_per_word,
            "complexWordCount": self.complex_word_count,
            "complexWordPercentage": self.complex_word_percentage,
        }


@dataclass(frozen=True)
class GradeComparison:
    score: str
    target_audience: str
    recommendation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "targetAudience": self.target_audience,
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class ReadabilityReport:
    scores: ReadabilityScores
    statistics: ReadabilityStatistics
    grade_comparison: GradeComparison
    suggestions: List[str] = field(default_factory=list)
    url: str = ""

    def to_dict(self) -> Dict[str, Any]:
        scores = self.scores.to_dict()
        interpretation = scores.pop("interpretation")
        return {
            "url": self.url,
            "scores": scores,
            "interpretation": interpretation,
            "statistics": self.statistics.to_dict(),
            "gradeComparison": self.grade_comparison.to_dict(),
            "suggestions": list(self.suggestions),
        }


def _counts(text: str):
    words = extract_words(text)
    sentences = count_sentences(text)
    syllables = sum(count_syllables(w) for w in words)
    return words, sentences, syllables


def flesch_reading_ease(text: str) -> float:
    """Higher is easier; 60-70 is the usual target for web copy."""
    words, sentences, syllables = _counts(text)
    if not words or sentences == 0:
        return 0.0
    asl = len(words) / sentences
    asw = syllables / len(words)
    return 206.835 - 1.015 * asl - 84.6 * asw


def flesch_kincaid_grade(text: str) -> float:
    """US school grade level."""
    words, sentences, syllables = _counts(text)
    if not words or sentences == 0:
        return 0.0
    asl = len(words) / sentences
    asw = syllables / len(words)
    return 0.39 * asl + 11.8 * asw - 15.59


def gunning_fog(text: str) -> float:
    words = extract_words(text)
    sentences = count_sentences(text)
    if not words or sentences == 0:
        return 0.0
    complex_words = count_complex_words(text)
    asl = len(words) / sentences
    hard_word_pct = complex_words / len(words) * 100
    return 0.4 * (asl + hard_word_pct)


def smog_index(text: str) -> float:
    words = extract_words(text)
    sentences = count_sentences(text)
    if not words or sentences == 0:
        return 0.0
    complex_words = count_complex_words(text)
    if sentences < 30:
        # Scaled up to the 30-sentence sample the formula was built on
        return 1.0430 * math.sqrt(complex_words * (30 / sentences)) + 3.1291
    return 1.0430 * math.sqrt(complex_words) + 3.1291


def automated_readability_index(text: str) -> float:
    words = extract_words(text)
    sentences = count_sentences(text)
    if not words or sentences == 0:
        return 0.0
    characters = len("".join(words))
    return 4.71 * (characters / len(words)) + 0.5 * (len(words) / sentences) - 21.43


def interpret_flesch_score(score: float) -> str:
    if score >= 90:
        return "Very Easy (5th grade)"
    if score >= 80:
        return "Easy (6th grade)"
    if score >= 70:
        return "Fairly Easy (7th grade)"
    if score >= 60:
        return "Standard (8th-9th grade) - Ideal for web"
    if score >= 50:
        return "Fairly Difficult (10th-12th grade)"
    if score >= 30:
        return "Difficult (College level)"
    return "Very Difficult (Professional level)"


def calculate_readability_scores(text: str) -> ReadabilityScores:
    fre = flesch_reading_ease(text)
    return ReadabilityScores(
        flesch_reading_ease=round_to(fre, 1),
        flesch_kincaid_grade=round_to(flesch_kincaid_grade(text), 1),
        gunning_fog=round_to(gunning_fog(text), 1),
        smog_index=round_to(smog_index(text), 1),
        automated_readability_index=round_to(automated_readability_index(text), 1),
        interpretation=interpret_flesch_score(fre),
    )


def _compare_grade(actual_grade: float, target_grade: int) -> GradeComparison:
    grade = round_half_up(actual_grade)
    if actual_grade <= target_grade:
        return GradeComparison(
            score="Excellent",
            target_audience=f"Suitable for grade {grade} and above",
            recommendation="Content is appropriately readable for web audiences",
        )
    if actual_grade <= target_grade + 2:
        return GradeComparison(
            score="Good",
            target_audience=f"Requires grade {grade} education",
            recommendation="Minor simplification could improve accessibility",
        )
    return GradeComparison(
        score="Needs Improvement",
        target_audience=f"Requires grade {grade} education",
        recommendation=f"Simplify to reach target grade {target_grade} level",
    )


def check_readability(text: str, target_grade: int = 8, url: str = "") -> ReadabilityReport:
    """Full readability report for a block of plain text."""
    words = extract_words(text)
    word_count = len(words)
    sentence_count = count_sentences(text)
    paragraphs = extract_paragraphs(text)
    complex_words = count_complex_words(text)

    scores = calculate_readability_scores(text)
    avg_sentence_len = average_sentence_length(text)
    avg_syllables = average_syllables_per_word(text)
    complex_pct = complex_words / word_count * 100 if word_count else 0.0

    suggestions: List[str] = []
    if avg_sentence_len > 20:
        suggestions.append(
            f"Break up long sentences. Current average: {round_half_up(avg_sentence_len)} words. Target: 15-20 words."
        )
    if avg_syllables > 1.5:
        suggestions.append(
            f"Use simpler words. Average syllables per word: {avg_syllables:.2f}. "
            "Use more one and two-syllable words."
        )
    if complex_pct > 10:
        suggestions.append(
            f"Reduce complex words (3+ syllables). Currently {complex_pct:.1f}% of content. Target: under 10%."
        )
    if scores.flesch_reading_ease < 60:
        suggestions.append(f"Flesch Reading Ease is {scores.flesch_reading_ease}. Aim for 60-70 for web content.")
    if scores.gunning_fog > 12:
        suggestions.append(f"Gunning Fog Index is {scores.gunning_fog}. Reduce jargon and technical terms.")

    long_paragraphs = [p for p in paragraphs if len(extract_words(p)) > 100]
    if long_paragraphs:
        suggestions.append(
            f"{len(long_paragraphs)} paragraph(s) exceed 100 words. Break them into smaller chunks."
        )
    if not suggestions:
        suggestions.append("Content readability is excellent. No immediate improvements needed.")

    statistics = ReadabilityStatistics(
        word_count=word_count,
        sentence_count=sentence_count,
        paragraph_count=len(paragraphs),
        avg_sentence_length=round_to(avg_sentence_len, 1),
        avg_syllables_per_word=round_to(avg_syllables, 2),
        complex_word_count=complex_words,
        complex_word_percentage=round_to(complex_pct, 1),
    )
    return ReadabilityReport(
        scores=scores,
        statistics=statistics,
        grade_comparison=_compare_grade(scores.flesch_kincaid_grade, target_grade),
        suggestions=suggestions,
        url=url,
    )
