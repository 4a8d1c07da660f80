from __future__ import annotations

import argparse
from typing import Any, Dict, List, Optional, Tuple

from flask import Flask, jsonify, request

from .config import AnalysisOptions
from .content import improve_content
from .errors import ConfigError, FetchError
from .fetch import fetch_html
from .jsonld import validate_structured_data
from .logging import configure_logging, get_logger
from .page import analyze_page, extract_page
from .readability import check_readability
from .utils import normalize_url

logger = get_logger("web")

MAX_CONTENT_LENGTH = 2_000_000
MAX_DOCUMENTS = 50


class BadRequest(ValueError):
    pass


def _clean_string(value: Any, *, max_length: int) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        value = str(value)
    value = value.strip()
    value = value.replace("\r", " ").replace("\n", " ").replace("\t", " ")
    cleaned = "".join(ch for ch in value if ch.isprintable()).strip()
    if len(cleaned) > max_length:
        cleaned = cleaned[:max_length].strip()
    return cleaned


def sanitize_url(value: Any) -> str:
    cleaned = _clean_string(value, max_length=2000)
    if not cleaned:
        raise BadRequest("Missing 'url'")
    try:
        return normalize_url(cleaned)
    except ValueError as exc:
        raise BadRequest(str(exc)) from None


def sanitize_document(value: Any) -> str:
    """Markdown/HTML bodies keep their newlines; only size and type are checked."""
    if not isinstance(value, str) or not value.strip():
        raise BadRequest("Expected a non-empty string body")
    if len(value) > MAX_CONTENT_LENGTH:
        raise BadRequest(f"Body exceeds {MAX_CONTENT_LENGTH} characters")
    return value


def sanitize_documents(value: Any) -> List[Dict[str, Any]]:
    items = value if isinstance(value, list) else [value]
    if len(items) > MAX_DOCUMENTS:
        raise BadRequest(f"At most {MAX_DOCUMENTS} JSON-LD documents are accepted")
    if not all(isinstance(item, dict) for item in items):
        raise BadRequest("JSON-LD documents must be objects")
    return items


def sanitize_options(payload: Dict[str, Any]) -> AnalysisOptions:
    raw = dict(payload)
    keyword = raw.get("targetKeyword", raw.get("target_keyword"))
    if keyword is not None:
        raw["targetKeyword"] = _clean_string(keyword, max_length=100)
        raw.pop("target_keyword", None)
    site_name = raw.get("siteName", raw.get("site_name"))
    if site_name is not None:
        raw["siteName"] = _clean_string(site_name, max_length=100)
        raw.pop("site_name", None)
    return AnalysisOptions.from_mapping(raw)


def _payload() -> Dict[str, Any]:
    payload = request.get_json(force=True, silent=True)
    if not isinstance(payload, dict):
        raise BadRequest("Expected a JSON object")
    return payload


def _target_grade(payload: Dict[str, Any]) -> int:
    raw = payload.get("targetGrade", payload.get("target_grade", 8))
    try:
        grade = int(raw)
    except (TypeError, ValueError):
        raise BadRequest("targetGrade must be an integer") from None
    return max(1, min(grade, 20))


def _html_from(payload: Dict[str, Any]) -> Tuple[str, Optional[str]]:
    if payload.get("html") is not None:
        url = _clean_string(payload.get("url"), max_length=2000) or None
        return sanitize_document(payload["html"]), url
    url = sanitize_url(payload.get("url"))
    return fetch_html(url), url


def create_app() -> Flask:
    app = Flask(__name__)

    @app.errorhandler(BadRequest)
    @app.errorhandler(ConfigError)
    def bad_request(exc: Exception):
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(FetchError)
    def fetch_failed(exc: FetchError):
        logger.warning("Fetch failed: %s", exc)
        return jsonify({"error": str(exc)}), 502

    @app.get("/api/health")
    def health():
        return jsonify({"status": "ok"})

    @app.post("/api/content")
    def api_content():
        payload = _payload()
        content = sanitize_document(payload.get("content"))
        options = sanitize_options(payload)
        file_path = _clean_string(payload.get("filePath"), max_length=500) or None
        return jsonify(improve_content(content, options, file_path=file_path).to_dict())

    @app.post("/api/schema")
    def api_schema():
        payload = _payload()
        verbose = bool(payload.get("verbose", False))
        if "documents" in payload:
            documents = sanitize_documents(payload["documents"])
            url = _clean_string(payload.get("url"), max_length=2000) or None
        else:
            html, url = _html_from(payload)
            documents = extract_page(html, url or "").ld_json
        return jsonify(validate_structured_data(documents, url=url, verbose=verbose).to_dict())

    @app.post("/api/readability")
    def api_readability():
        payload = _payload()
        target_grade = _target_grade(payload)
        if payload.get("text") is not None:
            text = sanitize_document(payload["text"])
            source = ""
        else:
            html, url = _html_from(payload)
            text = extract_page(html, url or "").text
            source = url or ""
        return jsonify(check_readability(text, target_grade=target_grade, url=source).to_dict())

    @app.post("/api/page")
    def api_page():
        payload = _payload()
        options = sanitize_options(payload)
        html, url = _html_from(payload)
        return jsonify(analyze_page(html, url or "", options).to_dict())

    return app


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Run the seoinstruct JSON API")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=5173)
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args(argv)

    configure_logging(verbose=args.debug)
    app = create_app()
    app.run(host=args.host, port=args.port, debug=args.debug)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
