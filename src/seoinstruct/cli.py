from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .config import (
    DEFAULT_MAX_PARAGRAPH_SENTENCES,
    DEFAULT_MAX_SENTENCE_WORDS,
    PAGE_TYPES,
    SCHEMA_TEMPLATE_TYPES,
    AnalysisOptions,
)
from .content import improve_content_file
from .errors import SeoInstructError
from .fetch import ResourceCache, fetch_html
from .jsonld import coerce_documents, validate_structured_data
from .logging import configure_logging, get_logger
from .page import analyze_page, extract_page, resolve_image_resources
from .readability import check_readability
from .utils import extract_visible_text, normalize_url

logger = get_logger("cli")


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _load_schema_documents(source: str) -> Tuple[List[Any], Optional[str]]:
    if _is_url(source):
        url = normalize_url(source)
        return extract_page(fetch_html(url), url).ld_json, url
    data = json.loads(Path(source).read_text(encoding="utf-8"))
    return coerce_documents(data if isinstance(data, list) else [data]), None


def _load_text(source: str) -> Tuple[str, str]:
    if _is_url(source):
        url = normalize_url(source)
        return extract_page(fetch_html(url), url).text, url
    path = Path(source)
    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() in {".html", ".htm"}:
        raw = extract_visible_text(raw)
    return raw, str(path)


def _print_instructions(result: Dict[str, Any]) -> None:
    print(result["overview"])
    print(f"Word count: {result['wordCount']}")
    for name, cat in result["summary"].items():
        print(f"  - {name}: {cat['score']}/100 ({cat['issues']} issue(s))")
    if result["instructions"]:
        print("\nInstructions:")
        for idx, ins in enumerate(result["instructions"], start=1):
            target = ins["target"]
            where = f" line {target['lineNumber']}" if "lineNumber" in target else ""
            if "startLine" in target:
                where = f" lines {target['startLine']}-{target['endLine']}"
            auto = " [auto]" if ins["automated"] else ""
            print(f"  {idx}. [{ins['priority']}/{ins['category']}] {ins['action']} {target['type']}{where}{auto}")
            if "current" in ins["value"]:
                print(f"     current:   {ins['value']['current']}")
            print(f"     suggested: {ins['value']['suggested']}")
            print(f"     why:       {ins['reason']}")


def _print_schema(result: Dict[str, Any]) -> None:
    score = result["score"]
    print(f"Structured data score: {score['overall']}/100")
    print(
        f"  - validation: {score['validation']}/40, completeness: {score['completeness']}/35, "
        f"coverage: {score['coverage']}/25"
    )
    print(f"Schemas found: {result['schemasFound']}")
    for s in result["schemas"]:
        status = "valid" if s["isValid"] else "invalid"
        print(f"\n  {s['type']} ({status}) validation {s['validationScore']}, completeness {s['completenessScore']}")
        if s["missingRequired"]:
            print(f"    missing required: {', '.join(s['missingRequired'])}")
        for warning in s["warnings"]:
            print(f"    warning: {warning}")
        for suggestion in s["suggestions"]:
            print(f"    - {suggestion}")
    graph = result["graphAnalysis"]
    if graph:
        print(f"\n@graph: {graph['nodeCount']} node(s)")
        print(f"  roots: {', '.join(graph['rootNodes']) or '(none)'}")
        print(f"  orphans: {', '.join(graph['orphanNodes']) or '(none)'}")
        print(f"  circular: {', '.join(graph['circularReferences']) or '(none)'}")
    if result["generalSuggestions"]:
        print("\nSuggestions:")
        for suggestion in result["generalSuggestions"]:
            print(f"  - {suggestion}")


def _print_readability(result: Dict[str, Any]) -> None:
    print(f"Readability ({result['url']}): {result['interpretation']}")
    for k, v in result["scores"].items():
        print(f"  - {k}: {v}")
    stats = result["statistics"]
    print(
        f"Words: {stats['wordCount']}, sentences: {stats['sentenceCount']}, "
        f"paragraphs: {stats['paragraphCount']}, complex words: {stats['complexWordPercentage']}%"
    )
    grade = result["gradeComparison"]
    print(f"Grade: {grade['score']} - {grade['targetAudience']}. {grade['recommendation']}")
    print("\nSuggestions:")
    for s in result["suggestions"]:
        print(f"  - {s}")


def _print_page(result: Dict[str, Any]) -> None:
    seo = result["seo"]
    print(f"SEO Score for {result['url']}: {seo['overall']}/100")
    print(f"  - on-page: {seo['onPage']}, content: {seo['content']}, technical: {seo['technical']}")
    for k, v in seo["details"].items():
        print(f"    {k}: {v}")
    print(f"  Title: {result['title'] or '(missing)'}")
    print(f"  Description: {result['description'] or '(missing)'}")
    print(f"  Word count: {result['wordCount']}")
    print(f"  Flesch reading ease: {result['readability']['fleschReadingEase']}")
    print(f"  Structured data score: {result['structuredData']['score']['overall']}/100")
    top = ", ".join(f"{k['word']} ({k['count']})" for k in result["keywords"]["topKeywords"])
    print(f"  Top keywords: {top or '(none)'}")
    if result.get("imageResources"):
        print("  Images:")
        for res in result["imageResources"]:
            print(f"    {res['url']} -> {res['mime']}")
    if result["suggestions"]:
        print("\nSuggestions:")
        for s in result["suggestions"]:
            print(f"  - {s}")
    _print_improvements(result.get("improvements"))


def _print_improvements(improvements: Optional[Dict[str, Any]]) -> None:
    if not improvements:
        return
    issues: List[str] = []
    for key in ("title", "description", "headings", "openGraph", "twitter"):
        issues.extend(improvements[key]["issues"])
    issues.extend(improvements["canonical"])
    for image in improvements["images"]["imageSuggestions"]:
        issues.extend(f"{image['src'] or '(no src)'}: {issue}" for issue in image["issues"])
    if issues:
        print("\nIssues:")
        for issue in issues:
            print(f"  - {issue}")
    schema = improvements["schema"]
    print(f"\nStructured data fixes: {schema['summary']}")
    for ins in schema["instructions"]:
        print(f"  [{ins['priority']}] {ins['action']} {ins['target']['selector']}: {ins['reason']}")


def _options_from_args(args: argparse.Namespace) -> AnalysisOptions:
    return AnalysisOptions.from_mapping(
        {
            "target_keyword": getattr(args, "keyword", None),
            "target_audience": getattr(args, "audience", None),
            "page_type": getattr(args, "page_type", None),
            "max_sentence_words": getattr(args, "max_sentence_words", None),
            "max_paragraph_sentences": getattr(args, "max_paragraph_sentences", None),
            "site_name": getattr(args, "site_name", None),
            "schema_type": getattr(args, "schema_type", None),
        }
    )


def _run_content(args: argparse.Namespace) -> Dict[str, Any]:
    return improve_content_file(args.file, _options_from_args(args)).to_dict()


def _run_schema(args: argparse.Namespace) -> Dict[str, Any]:
    documents, url = _load_schema_documents(args.source)
    return validate_structured_data(documents, url=url, verbose=args.verbose_schema).to_dict()


def _run_readability(args: argparse.Namespace) -> Dict[str, Any]:
    text, source = _load_text(args.source)
    return check_readability(text, target_grade=args.target_grade, url=source).to_dict()


def _run_page(args: argparse.Namespace) -> Dict[str, Any]:
    url = normalize_url(args.url)
    html = fetch_html(url)
    report = analyze_page(html, url, _options_from_args(args))
    data = report.to_dict()
    if args.check_images and report.images is not None:
        cache = ResourceCache()
        data["imageResources"] = [r.to_dict() for r in resolve_image_resources(report.images, url, cache)]
    return data


COMMANDS = {
    "content": (_run_content, _print_instructions),
    "schema": (_run_schema, _print_schema),
    "readability": (_run_readability, _print_readability),
    "page": (_run_page, _print_page),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="seoinstruct",
        description="Analyze pages and markdown documents and emit structured SEO improvement instructions.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--json", dest="as_json", action="store_true", help="Output JSON report to stdout")
    parser.add_argument("--log-file", type=Path, help="Also write log records to this file")
    sub = parser.add_subparsers(dest="command", required=True)

    content = sub.add_parser("content", help="Improvement instructions for a markdown file")
    content.add_argument("file", help="Markdown file to analyze")
    content.add_argument("--keyword", help="Target keyword")
    content.add_argument(
        "--audience",
        choices=["general", "technical", "beginner"],
        default="general",
        help="Target audience (default: general)",
    )
    content.add_argument(
        "--max-sentence-words",
        type=int,
        default=DEFAULT_MAX_SENTENCE_WORDS,
        help=f"Flag sentences longer than N words (default: {DEFAULT_MAX_SENTENCE_WORDS})",
    )
    content.add_argument(
        "--max-paragraph-sentences",
        type=int,
        default=DEFAULT_MAX_PARAGRAPH_SENTENCES,
        help=f"Flag paragraphs with more than N sentences (default: {DEFAULT_MAX_PARAGRAPH_SENTENCES})",
    )

    schema = sub.add_parser("schema", help="Validate JSON-LD from a .json file or a page URL")
    schema.add_argument("source", help="JSON file or http(s) URL")
    schema.add_argument("--verbose", dest="verbose_schema", action="store_true", help="Include raw schema data")

    readability = sub.add_parser("readability", help="Readability report for a text/HTML file or a page URL")
    readability.add_argument("source", help="Text file, HTML file or http(s) URL")
    readability.add_argument("--target-grade", type=int, default=8, help="Target grade level (default: 8)")

    page = sub.add_parser("page", help="SEO score for a live page")
    page.add_argument("url", help="Page URL (e.g., https://example.com)")
    page.add_argument("--keyword", help="Target keyword")
    page.add_argument("--page-type", choices=list(PAGE_TYPES), default="blog", help="Page type (default: blog)")
    page.add_argument("--check-images", action="store_true", help="Fetch image headers to report MIME types")
    page.add_argument("--site-name", help="Site name used in title suggestions")
    page.add_argument(
        "--schema-type", choices=list(SCHEMA_TEMPLATE_TYPES), help="Also suggest a JSON-LD template of this type"
    )

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, log_file=args.log_file)

    run, render = COMMANDS[args.command]
    try:
        result = run(args)
    except (SeoInstructError, OSError, ValueError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.as_json:
        print(json.dumps(result, indent=2, default=str))
    else:
        render(result)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
