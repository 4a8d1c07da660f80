"""Markdown content analysis and improvement instructions.

The analyzers here work on the raw markdown lines so that every
instruction can point back at a line number in the source file. Plain-text
statistics (readability, keyword density) run on a markdown-stripped copy
of the whole document, frontmatter included.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .config import AnalysisOptions
from .logging import get_logger
from .readability import flesch_kincaid_grade
from .text import (
    calculate_keyword_density,
    count_complex_words,
    count_sentences,
    extract_words,
)
from .utils import round_half_up, round_to

logger = get_logger("content")

ACTIONS = ("replace", "add", "remove", "split", "merge")
CATEGORIES = ("seo", "readability", "structure")
PRIORITY_ORDER = {"critical": 0, "high": 1, "medium": 2, "low": 3}

# Points deducted from a category score per instruction in that category
CATEGORY_PENALTIES = {"seo": 15, "readability": 10, "structure": 12}
CATEGORY_WEIGHTS = {"seo": 0.4, "readability": 0.35, "structure": 0.25}

MAX_SENTENCE_INSTRUCTIONS = 5
MAX_PARAGRAPH_INSTRUCTIONS = 3
MAX_PASSIVE_EXAMPLES = 3

_FRONTMATTER_FIELD = re.compile(r"^(\w+):\s*(.*)$")
_FRONTMATTER_QUOTES = re.compile(r"^[\"']|[\"']$")
_HEADING = re.compile(r"^(#{1,6})\s+(.+)$")
_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")
_LIST_ITEM = re.compile(r"^(?:[-*+]\s+|\d+\.\s+)")
_PASSIVE_PATTERNS = (
    re.compile(
        r"\b(is|are|was|were|be|been|being)\s+"
        r"(\w+ed|written|done|made|taken|given|shown|known|found|thought|seen)\b",
        re.I,
    ),
)

_STRIP_RULES: Tuple[Tuple[re.Pattern, str], ...] = (
    # code blocks and inline code
    (re.compile(r"```[\s\S]*?```"), ""),
    (re.compile(r"`[^`]+`"), ""),
    # images, then links (keeping the link text)
    (re.compile(r"!\[.*?\]\(.*?\)"), ""),
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
    (re.compile(r"^#{1,6}\s+", re.M), ""),
    # bold/italic
    (re.compile(r"\*\*([^*]+)\*\*"), r"\1"),
    (re.compile(r"\*([^*]+)\*"), r"\1"),
    (re.compile(r"__([^_]+)__"), r"\1"),
    (re.compile(r"_([^_]+)_"), r"\1"),
    # blockquotes and list markers
    (re.compile(r"^>\s+", re.M), ""),
    (re.compile(r"^[-*+]\s+", re.M), ""),
    (re.compile(r"^\d+\.\s+", re.M), ""),
    (re.compile(r"\n{3,}"), "\n\n"),
)


@dataclass(frozen=True)
class Heading:
    level: int
    text: str
    line_number: int


@dataclass(frozen=True)
class LongSentence:
    line_number: int
    sentence: str
    word_count: int


@dataclass(frozen=True)
class LongParagraph:
    start_line: int
    end_line: int
    sentence_count: int


@dataclass(frozen=True)
class PassiveVoiceInstance:
    line_number: int
    text: str


@dataclass(frozen=True)
class ContentTarget:
    type: str
    line_number: Optional[int] = None
    start_line: Optional[int] = None
    end_line: Optional[int] = None
    selector: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type}
        if self.line_number is not None:
            data["lineNumber"] = self.line_number
        if self.start_line is not None:
            data["startLine"] = self.start_line
        if self.end_line is not None:
            data["endLine"] = self.end_line
        if self.selector is not None:
            data["selector"] = self.selector
        return data


@dataclass(frozen=True)
class ContentValue:
    suggested: str
    current: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.current is not None:
            data["current"] = self.current
        data["suggested"] = self.suggested
        return data


@dataclass(frozen=True)
class ContentInstruction:
    """A single fix for a markdown document.

    ``automated`` marks deterministic substitutions that can be applied
    without review (demoting an extra H1, adding a frontmatter field).
    """

    action: str
    target: ContentTarget
    value: ContentValue
    reason: str
    priority: str
    category: str
    automated: bool = False

    def __post_init__(self) -> None:
        if self.action not in ACTIONS:
            raise ValueError(f"Unknown action: {self.action!r}")
        if self.category not in CATEGORIES:
            raise ValueError(f"Unknown category: {self.category!r}")
        if self.priority not in PRIORITY_ORDER:
            raise ValueError(f"Unknown priority: {self.priority!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action,
            "target": self.target.to_dict(),
            "value": self.value.to_dict(),
            "reason": self.reason,
            "priority": self.priority,
            "category": self.category,
            "automated": self.automated,
        }


@dataclass(frozen=True)
class ReadabilityMetrics:
    flesch_kincaid: float
    avg_sentence_length: float
    avg_word_length: float
    complex_word_percentage: float
    passive_voice_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fleschKincaid": self.flesch_kincaid,
            "avgSentenceLength": self.avg_sentence_length,
            "avgWordLength": self.avg_word_length,
            "complexWordPercentage": self.complex_word_percentage,
            "passiveVoiceCount": self.passive_voice_count,
        }


@dataclass(frozen=True)
class SEOMetrics:
    word_count: int
    keyword_count: int
    keyword_density: float
    keyword_in_first_paragraph: bool
    keyword_in_headings: int
    has_meta_description: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wordCount": self.word_count,
            "keywordCount": self.keyword_count,
            "keywordDensity": self.keyword_density,
            "keywordInFirstParagraph": self.keyword_in_first_paragraph,
            "keywordInHeadings": self.keyword_in_headings,
            "hasMetaDescription": self.has_meta_description,
        }


@dataclass(frozen=True)
class StructureMetrics:
    heading_count: int
    h1_count: int
    has_proper_hierarchy: bool
    skipped_levels: List[str]
    avg_paragraph_length: int
    list_count: int
    code_block_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "headingCount": self.heading_count,
            "h1Count": self.h1_count,
            "hasProperHierarchy": self.has_proper_hierarchy,
            "skippedLevels": list(self.skipped_levels),
            "avgParagraphLength": self.avg_paragraph_length,
            "listCount": self.list_count,
            "codeBlockCount": self.code_block_count,
        }


@dataclass(frozen=True)
class ContentAnalysisResult:
    readability: ReadabilityMetrics
    seo: SEOMetrics
    structure: StructureMetrics
    lines: List[str]
    frontmatter: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "readability": self.readability.to_dict(),
            "seo": self.seo.to_dict(),
            "structure": self.structure.to_dict(),
            "frontmatter": dict(self.frontmatter),
        }


@dataclass(frozen=True)
class CategoryScore:
    score: int
    issues: int

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, "issues": self.issues}


@dataclass(frozen=True)
class ContentAnalysisSummary:
    seo: CategoryScore
    readability: CategoryScore
    structure: CategoryScore

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seo": self.seo.to_dict(),
            "readability": self.readability.to_dict(),
            "structure": self.structure.to_dict(),
        }


@dataclass(frozen=True)
class ContentFixResult:
    file_path: Optional[str]
    score: int
    word_count: int
    instructions: List[ContentInstruction]
    summary: ContentAnalysisSummary
    overview: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filePath": self.file_path,
            "score": self.score,
            "wordCount": self.word_count,
            "instructions": [i.to_dict() for i in self.instructions],
            "summary": self.summary.to_dict(),
            "overview": self.overview,
        }


# -- parsing -----------------------------------------------------------------


def parse_markdown_lines(content: str) -> List[str]:
    return content.split("\n")


def extract_frontmatter(lines: List[str]) -> Tuple[Dict[str, str], int]:
    """Parse a leading ``---`` block of flat ``key: value`` pairs.

    Returns the fields and the index of the first line after the closing
    ``---`` (0 when there is no complete frontmatter block).
    """
    frontmatter: Dict[str, str] = {}
    content_start = 0

    if lines and lines[0].strip() == "---":
        for i in range(1, len(lines)):
            if lines[i].strip() == "---":
                content_start = i + 1
                break
            match = _FRONTMATTER_FIELD.match(lines[i])
            if match:
                frontmatter[match.group(1)] = _FRONTMATTER_QUOTES.sub("", match.group(2))

    return frontmatter, content_start


def strip_markdown(text: str) -> str:
    for pattern, replacement in _STRIP_RULES:
        text = pattern.sub(replacement, text)
    return text.strip()


def extract_markdown_headings(lines: List[str]) -> List[Heading]:
    headings: List[Heading] = []
    for i, line in enumerate(lines):
        match = _HEADING.match(line)
        if match:
            headings.append(Heading(level=len(match.group(1)), text=match.group(2), line_number=i + 1))
    return headings


def _is_prose_line(line: str) -> bool:
    return not (line.startswith("#") or line.startswith("```") or line.startswith("|"))


def find_long_sentences(lines: List[str], max_length: int = 25) -> List[LongSentence]:
    found: List[LongSentence] = []
    for i, line in enumerate(lines):
        if not line or not _is_prose_line(line):
            continue
        for sentence in _SENTENCE_BOUNDARY.split(line):
            words = extract_words(sentence)
            if len(words) > max_length:
                found.append(LongSentence(line_number=i + 1, sentence=sentence.strip(), word_count=len(words)))
    return found


def _paragraph_blocks(lines: List[str]) -> List[Tuple[int, int, str]]:
    """Group prose lines into (start_index, end_line, text) paragraphs.

    Headings, code fences, table rows and ``-`` list items are left out of
    the paragraph text but do not end a paragraph; only blank lines do.
    """
    blocks: List[Tuple[int, int, str]] = []
    start = -1
    text = ""
    for i, line in enumerate(lines):
        if line.strip() == "":
            if start >= 0 and text.strip():
                blocks.append((start, i, text))
            start = -1
            text = ""
        elif _is_prose_line(line) and not line.startswith("-"):
            if start < 0:
                start = i
            text += " " + line
    if start >= 0 and text.strip():
        blocks.append((start, len(lines), text))
    return blocks


def find_long_paragraphs(lines: List[str], max_sentences: int = 5) -> List[LongParagraph]:
    found: List[LongParagraph] = []
    for start, end, text in _paragraph_blocks(lines):
        sentence_count = count_sentences(text)
        if sentence_count > max_sentences:
            found.append(LongParagraph(start_line=start + 1, end_line=end, sentence_count=sentence_count))
    return found


def detect_passive_voice(lines: List[str]) -> List[PassiveVoiceInstance]:
    instances: List[PassiveVoiceInstance] = []
    for i, line in enumerate(lines):
        if not line:
            continue
        for pattern in _PASSIVE_PATTERNS:
            for match in pattern.finditer(line):
                instances.append(PassiveVoiceInstance(line_number=i + 1, text=match.group(0)))
    return instances


# -- metrics -----------------------------------------------------------------


def analyze_readability(content: str, lines: List[str]) -> ReadabilityMetrics:
    plain = strip_markdown(content)
    words = extract_words(plain)
    sentences = count_sentences(plain)
    complex_words = count_complex_words(plain)

    return ReadabilityMetrics(
        flesch_kincaid=round_to(flesch_kincaid_grade(plain), 1),
        avg_sentence_length=round_to(len(words) / max(sentences, 1), 1),
        avg_word_length=round_to(len("".join(words)) / len(words), 1) if words else 0,
        complex_word_percentage=round_to(complex_words / len(words) * 100, 1) if words else 0,
        passive_voice_count=len(detect_passive_voice(lines)),
    )


def analyze_seo(
    content: str,
    lines: List[str],
    options: Optional[AnalysisOptions] = None,
    frontmatter: Optional[Dict[str, str]] = None,
) -> SEOMetrics:
    options = options or AnalysisOptions()
    if frontmatter is None:
        frontmatter, _ = extract_frontmatter(lines)

    plain = strip_markdown(content)
    words = extract_words(plain)
    headings = extract_markdown_headings(lines)

    keyword = (options.target_keyword or "").lower()
    keyword_count = sum(1 for w in words if w == keyword) if keyword else 0
    density = calculate_keyword_density(plain, keyword) if keyword else 0.0

    first_paragraph = next(
        (line for line in lines if line and not line.startswith("#") and not line.startswith("---") and line.strip()),
        None,
    )
    in_first_paragraph = bool(keyword and first_paragraph and keyword in first_paragraph.lower())
    in_headings = sum(1 for h in headings if keyword in h.text.lower()) if keyword else 0

    return SEOMetrics(
        word_count=len(words),
        keyword_count=keyword_count,
        keyword_density=round_to(density, 2),
        keyword_in_first_paragraph=in_first_paragraph,
        keyword_in_headings=in_headings,
        has_meta_description=bool(frontmatter.get("description")),
    )


def find_skipped_levels(headings: List[Heading]) -> List[str]:
    """Report jumps of more than one level from the previously seen heading.

    Going back up (H3 then H2) is never a skip; the comparison is always
    against the heading immediately before, not against H1.
    """
    skipped: List[str] = []
    previous = 0
    for heading in headings:
        if previous > 0 and heading.level > previous + 1:
            skipped.append(f"H{previous} → H{heading.level}")
        previous = heading.level
    return skipped


def analyze_structure(lines: List[str]) -> StructureMetrics:
    headings = extract_markdown_headings(lines)
    skipped = find_skipped_levels(headings)

    list_count = sum(1 for line in lines if _LIST_ITEM.match(line))

    code_blocks = 0
    in_code = False
    for line in lines:
        if line.startswith("```"):
            if not in_code:
                code_blocks += 1
            in_code = not in_code

    paragraphs = [text.strip() for _, _, text in _paragraph_blocks(lines)]
    avg_paragraph = (
        round_half_up(sum(len(extract_words(p)) for p in paragraphs) / len(paragraphs)) if paragraphs else 0
    )

    return StructureMetrics(
        heading_count=len(headings),
        h1_count=sum(1 for h in headings if h.level == 1),
        has_proper_hierarchy=not skipped,
        skipped_levels=skipped,
        avg_paragraph_length=avg_paragraph,
        list_count=list_count,
        code_block_count=code_blocks,
    )


def analyze_markdown_content(content: str, options: Optional[AnalysisOptions] = None) -> ContentAnalysisResult:
    options = options or AnalysisOptions()
    lines = parse_markdown_lines(content)
    # Frontmatter is analyzed as part of the text
    frontmatter, _ = extract_frontmatter(lines)

    result = ContentAnalysisResult(
        readability=analyze_readability(content, lines),
        seo=analyze_seo(content, lines, options, frontmatter),
        structure=analyze_structure(lines),
        lines=lines,
        frontmatter=frontmatter,
    )
    logger.debug(
        "Analyzed markdown: %d words, %d headings", result.seo.word_count, result.structure.heading_count
    )
    return result


# -- instructions ------------------------------------------------------------


def _seo_instructions(seo: SEOMetrics, options: AnalysisOptions) -> List[ContentInstruction]:
    out: List[ContentInstruction] = []

    if seo.word_count < 300:
        out.append(
            ContentInstruction(
                action="add",
                target=ContentTarget(type="paragraph"),
                value=ContentValue(
                    current=f"{seo.word_count} words",
                    suggested="Add more content to reach at least 300 words for SEO. "
                    "Aim for 1000-2000 words for blog posts.",
                ),
                reason="Content is too short. Search engines prefer longer, comprehensive content.",
                priority="high",
                category="seo",
            )
        )
    elif seo.word_count < 1000:
        out.append(
            ContentInstruction(
                action="add",
                target=ContentTarget(type="paragraph"),
                value=ContentValue(
                    current=f"{seo.word_count} words",
                    suggested="Consider expanding content to 1000-2000 words for better SEO ranking potential.",
                ),
                reason="Content length is acceptable but could be improved for competitive keywords.",
                priority="low",
                category="seo",
            )
        )

    keyword = options.target_keyword
    if keyword:
        density = _format_number(seo.keyword_density)
        if seo.keyword_density < 0.5:
            out.append(
                ContentInstruction(
                    action="add",
                    target=ContentTarget(type="paragraph"),
                    value=ContentValue(
                        current=f'Keyword "{keyword}" density: {density}%',
                        suggested=f'Increase usage of "{keyword}" to reach 1-3% density. Currently at {density}%.',
                    ),
                    reason="Keyword density is too low. Include the target keyword more naturally "
                    "throughout the content.",
                    priority="high",
                    category="seo",
                )
            )
        elif seo.keyword_density > 3:
            out.append(
                ContentInstruction(
                    action="replace",
                    target=ContentTarget(type="paragraph"),
                    value=ContentValue(
                        current=f'Keyword "{keyword}" density: {density}%',
                        suggested=f'Reduce usage of "{keyword}" to 1-3% density. Currently at {density}% '
                        "which may appear as keyword stuffing.",
                    ),
                    reason="Keyword density is too high and may be seen as keyword stuffing by search engines.",
                    priority="high",
                    category="seo",
                )
            )

        if not seo.keyword_in_first_paragraph:
            out.append(
                ContentInstruction(
                    action="add",
                    target=ContentTarget(type="paragraph", selector="first paragraph"),
                    value=ContentValue(suggested=f'Include "{keyword}" in the first paragraph/introduction.'),
                    reason="Target keyword should appear early in the content for SEO.",
                    priority="medium",
                    category="seo",
                )
            )

        if seo.keyword_in_headings == 0:
            out.append(
                ContentInstruction(
                    action="add",
                    target=ContentTarget(type="heading"),
                    value=ContentValue(suggested=f'Include "{keyword}" in at least one heading (H2 or H3).'),
                    reason="Keywords in headings signal topic relevance to search engines.",
                    priority="medium",
                    category="seo",
                )
            )

    if not seo.has_meta_description:
        out.append(
            ContentInstruction(
                action="add",
                target=ContentTarget(type="frontmatter"),
                value=ContentValue(suggested='description: "Your 150-160 character meta description here"'),
                reason="Missing meta description in frontmatter. Add a compelling description for search results.",
                priority="high",
                category="seo",
                automated=True,
            )
        )

    return out


def _readability_instructions(
    readability: ReadabilityMetrics, lines: List[str], options: AnalysisOptions
) -> List[ContentInstruction]:
    out: List[ContentInstruction] = []
    target_grade = options.target_grade

    if readability.flesch_kincaid > target_grade + 2:
        out.append(
            ContentInstruction(
                action="replace",
                target=ContentTarget(type="paragraph"),
                value=ContentValue(
                    current=f"Grade level: {_format_number(readability.flesch_kincaid)}",
                    suggested=f"Simplify language to reach grade level {target_grade}. "
                    "Use shorter sentences and simpler words.",
                ),
                reason=f"Content is too complex for {options.target_audience} audience.",
                priority="medium",
                category="readability",
            )
        )

    long_sentences = find_long_sentences(lines, options.max_sentence_words)
    for item in long_sentences[:MAX_SENTENCE_INSTRUCTIONS]:
        current = item.sentence[:80] + "..." if len(item.sentence) > 80 else item.sentence
        out.append(
            ContentInstruction(
                action="split",
                target=ContentTarget(type="line", line_number=item.line_number),
                value=ContentValue(current=current, suggested="Break this sentence into 2-3 shorter sentences."),
                reason=f"Sentence has {item.word_count} words. Keep sentences under "
                f"{options.max_sentence_words} words for better readability.",
                priority="medium",
                category="readability",
            )
        )

    long_paragraphs = find_long_paragraphs(lines, options.max_paragraph_sentences)
    for item in long_paragraphs[:MAX_PARAGRAPH_INSTRUCTIONS]:
        out.append(
            ContentInstruction(
                action="split",
                target=ContentTarget(type="range", start_line=item.start_line, end_line=item.end_line),
                value=ContentValue(
                    current=f"{item.sentence_count} sentences",
                    suggested="Break this paragraph into smaller paragraphs (3-4 sentences each).",
                ),
                reason="Long paragraphs reduce readability. Break into digestible chunks.",
                priority="low",
                category="readability",
            )
        )

    passive = detect_passive_voice(lines)
    if len(passive) > 3:
        examples = ", ".join(f'Line {p.line_number}: "{p.text}"' for p in passive[:MAX_PASSIVE_EXAMPLES])
        out.append(
            ContentInstruction(
                action="replace",
                target=ContentTarget(type="paragraph"),
                value=ContentValue(
                    current=f"{len(passive)} passive voice instances",
                    suggested=f"Rewrite using active voice. Examples: {examples}",
                ),
                reason="Excessive passive voice makes content feel weak. "
                "Use active voice for more engaging content.",
                priority="low",
                category="readability",
            )
        )

    if readability.complex_word_percentage > 15:
        out.append(
            ContentInstruction(
                action="replace",
                target=ContentTarget(type="paragraph"),
                value=ContentValue(
                    current=f"{_format_number(readability.complex_word_percentage)}% complex words",
                    suggested="Replace complex words (3+ syllables) with simpler alternatives where possible.",
                ),
                reason="Too many complex words reduce readability. Aim for under 15% complex words.",
                priority="medium",
                category="readability",
            )
        )

    return out


def _structure_instructions(
    structure: StructureMetrics, seo: SEOMetrics, lines: List[str]
) -> List[ContentInstruction]:
    out: List[ContentInstruction] = []

    if structure.h1_count == 0:
        out.append(
            ContentInstruction(
                action="add",
                target=ContentTarget(type="heading", line_number=1),
                value=ContentValue(suggested="# Your Main Title Here"),
                reason="Missing H1 heading. Every page should have exactly one H1.",
                priority="critical",
                category="structure",
                automated=True,
            )
        )
    elif structure.h1_count > 1:
        h1s = [h for h in extract_markdown_headings(lines) if h.level == 1]
        for heading in h1s[1:]:
            out.append(
                ContentInstruction(
                    action="replace",
                    target=ContentTarget(type="heading", line_number=heading.line_number, selector=f"# {heading.text}"),
                    value=ContentValue(current=f"# {heading.text}", suggested=f"## {heading.text}"),
                    reason="Multiple H1 headings found. Convert additional H1s to H2.",
                    priority="high",
                    category="structure",
                    automated=True,
                )
            )

    for skip in structure.skipped_levels:
        out.append(
            ContentInstruction(
                action="replace",
                target=ContentTarget(type="heading"),
                value=ContentValue(current=skip, suggested=f"Fix heading hierarchy - don't skip levels ({skip})"),
                reason="Skipped heading levels hurt accessibility and SEO. Use sequential levels.",
                priority="medium",
                category="structure",
            )
        )

    if structure.heading_count < 3 and seo.word_count > 500:
        out.append(
            ContentInstruction(
                action="add",
                target=ContentTarget(type="heading"),
                value=ContentValue(suggested="Add H2 subheadings to break up content into sections."),
                reason="Long content should be divided with subheadings for better scanability.",
                priority="medium",
                category="structure",
            )
        )

    return out


def sort_instructions(instructions: List[ContentInstruction]) -> List[ContentInstruction]:
    """Order by priority; equal priorities keep their generation order."""
    return sorted(instructions, key=lambda i: PRIORITY_ORDER[i.priority])


def generate_content_instructions(
    analysis: ContentAnalysisResult, options: Optional[AnalysisOptions] = None
) -> List[ContentInstruction]:
    options = options or AnalysisOptions()
    instructions = (
        _seo_instructions(analysis.seo, options)
        + _readability_instructions(analysis.readability, analysis.lines, options)
        + _structure_instructions(analysis.structure, analysis.seo, analysis.lines)
    )
    return sort_instructions(instructions)


def calculate_category_scores(instructions: List[ContentInstruction]) -> ContentAnalysisSummary:
    scores: Dict[str, CategoryScore] = {}
    for category in CATEGORIES:
        issues = sum(1 for i in instructions if i.category == category)
        scores[category] = CategoryScore(score=max(0, 100 - issues * CATEGORY_PENALTIES[category]), issues=issues)
    return ContentAnalysisSummary(**scores)


def _overview(score: int, instructions: List[ContentInstruction]) -> str:
    if not instructions:
        return "Content looks great! No major improvements needed."

    counts = {p: 0 for p in PRIORITY_ORDER}
    for instruction in instructions:
        counts[instruction.priority] += 1

    parts = [f"Content Score: {score}/100."]
    if counts["critical"]:
        parts.append(f"{counts['critical']} critical issue(s) need immediate attention.")
    if counts["high"]:
        parts.append(f"{counts['high']} high priority improvement(s).")
    if counts["medium"] or counts["low"]:
        parts.append(f"{counts['medium'] + counts['low']} additional suggestions.")
    return " ".join(parts)


def improve_content(
    content: str, options: Optional[AnalysisOptions] = None, file_path: Optional[str] = None
) -> ContentFixResult:
    options = options or AnalysisOptions()
    analysis = analyze_markdown_content(content, options)
    instructions = generate_content_instructions(analysis, options)
    summary = calculate_category_scores(instructions)

    score = round_half_up(
        summary.seo.score * CATEGORY_WEIGHTS["seo"]
        + summary.readability.score * CATEGORY_WEIGHTS["readability"]
        + summary.structure.score * CATEGORY_WEIGHTS["structure"]
    )
    logger.debug("Generated %d instructions (score %d)", len(instructions), score)

    return ContentFixResult(
        file_path=file_path,
        score=score,
        word_count=analysis.seo.word_count,
        instructions=instructions,
        summary=summary,
        overview=_overview(score, instructions),
    )


def improve_content_file(path: Union[str, Path], options: Optional[AnalysisOptions] = None) -> ContentFixResult:
    path = Path(path)
    content = path.read_text(encoding="utf-8")
    return improve_content(content, options, file_path=str(path))


def _format_number(value: float) -> str:
    # 2.0 -> "2", 1.25 -> "1.25"
    return f"{value:g}" if value != int(value) else str(int(value))
