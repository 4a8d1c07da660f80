"""Word, sentence and syllable statistics used by the scoring modules."""

from __future__ import annotations

import re
from collections import Counter
from typing import AbstractSet, Dict, List

_NON_WORD = re.compile(r"[^\w\s]")
_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_SILENT_SUFFIX = re.compile(r"(?:[^laeiouy]es|ed|[^laeiouy]e)$")
_LEADING_Y = re.compile(r"^y")
_VOWEL_GROUP = re.compile(r"[aeiouy]{1,2}")
_PARAGRAPH_SPLIT = re.compile(r"\n\n+")

DEFAULT_STOP_WORDS: AbstractSet[str] = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "by", "for", "from",
        "has", "he", "in", "is", "it", "its", "of", "on", "that", "the",
        "to", "was", "were", "will", "with", "this", "but", "they",
        "have", "had", "what", "when", "where", "who", "which", "why", "how",
        "all", "each", "every", "both", "few", "more", "most", "other", "some",
        "such", "no", "nor", "not", "only", "own", "same", "so", "than", "too",
        "very", "can", "just", "should", "now", "also", "into", "our", "your",
        "their", "would", "could", "may", "might", "must", "shall", "about",
        "after", "before", "between", "under", "over", "through", "during",
    }
)


def extract_words(text: str) -> List[str]:
    return _NON_WORD.sub(" ", text.lower()).split()


def count_sentences(text: str) -> int:
    sentences = [s for s in _SENTENCE_SPLIT.split(text) if s.strip()]
    return max(len(sentences), 1)


def count_syllables(word: str) -> int:
    """Approximate syllable count.

    Words of three letters or fewer count as one. Longer words lose a
    silent trailing ``e``/``es``/``ed`` and a leading ``y``, then every run
    of one or two vowels counts as a syllable.
    """
    word = word.lower().strip()
    if len(word) <= 3:
        return 1

    word = _SILENT_SUFFIX.sub("", word)
    word = _LEADING_Y.sub("", word)

    matches = _VOWEL_GROUP.findall(word)
    return len(matches) if matches else 1


def count_total_syllables(text: str) -> int:
    return sum(count_syllables(word) for word in extract_words(text))


def average_sentence_length(text: str) -> float:
    return len(extract_words(text)) / count_sentences(text)


def average_syllables_per_word(text: str) -> float:
    words = extract_words(text)
    if not words:
        return 0.0
    return sum(count_syllables(w) for w in words) / len(words)


def count_complex_words(text: str) -> int:
    return sum(1 for word in extract_words(text) if count_syllables(word) >= 3)


def extract_keywords(text: str, stop_words: AbstractSet[str] = DEFAULT_STOP_WORDS) -> Dict[str, int]:
    """Return keyword frequencies, most frequent first.

    Ties keep the order in which the words first appear in ``text``.
    """
    frequency: Counter = Counter()
    for word in extract_words(text):
        if len(word) < 3 or word in stop_words:
            continue
        frequency[word] += 1

    ranked = sorted(frequency.items(), key=lambda item: item[1], reverse=True)
    return dict(ranked)


def calculate_keyword_density(text: str, keyword: str) -> float:
    words = extract_words(text)
    if not words:
        return 0.0
    keyword_lower = keyword.lower()
    matches = sum(1 for w in words if w == keyword_lower)
    return matches / len(words) * 100


def extract_paragraphs(text: str) -> List[str]:
    return [p.strip() for p in _PARAGRAPH_SPLIT.split(text) if p.strip()]


def _string_hash(value: str) -> int:
    h = 0
    for ch in value:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    # Reinterpret as signed 32-bit
    return h - 0x100000000 if h & 0x80000000 else h


def generate_text_fingerprint(text: str) -> str:
    """Near-duplicate fingerprint built from the ten smallest 3-gram hashes."""
    words = extract_words(text)
    ngrams = [f"{words[i]} {words[i + 1]} {words[i + 2]}" for i in range(len(words) - 2)]
    hashes = sorted(_string_hash(ngram) for ngram in ngrams)[:10]
    return "-".join(format(h, "x") if h >= 0 else f"-{format(-h, 'x')}" for h in hashes)
