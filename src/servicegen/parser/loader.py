"""Read an API description into a plain dict.

Sources, picked by :func:`load_spec_source`:

* an ``http(s)://`` URL, fetched once with :class:`httpx.AsyncClient`
  (no retries, 30 second timeout, redirects followed),
* ``-`` for stdin,
* anything else as a local file path.

Inline text goes straight to :func:`parse_spec_text`.  Both JSON and YAML are
accepted; a file suffix or response ``Content-Type`` only decides which
parser is tried first.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from servicegen.exceptions import ConnectionError_, SpecParseError

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 30.0

_SUFFIX_HINTS = {".json": "json", ".yaml": "yaml", ".yml": "yaml"}


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


async def load_spec_source(source: str) -> dict[str, Any]:
    """Load from a URL, ``-`` or a file path.

    Raises:
        SpecParseError: Unreadable source, HTTP error status, or bad content.
        ConnectionError_: The URL could not be reached.
    """
    if is_url(source):
        return await fetch_spec(source)
    return load_spec(source)


def load_spec(source: str) -> dict[str, Any]:
    """Synchronous loader for ``-`` (stdin) and file paths."""
    if source == "-":
        return _load_from_stdin()
    return _load_from_file(source)


async def fetch_spec(url: str) -> dict[str, Any]:
    """GET *url* and parse the body.

    Raises:
        SpecParseError: On a 4xx/5xx status or unparseable content.
        ConnectionError_: On DNS failures, refused connections and timeouts.
    """
    logger.debug("Fetching spec from %s", url)
    try:
        async with httpx.AsyncClient(timeout=FETCH_TIMEOUT, follow_redirects=True) as client:
            response = await client.get(url)
            response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise ConnectionError_(f"Failed to fetch spec from {url}: {exc}") from exc

    return parse_spec_text(
        response.text, hint=_content_type_hint(response.headers.get("content-type", ""))
    )


def _content_type_hint(content_type: str) -> str:
    if "json" in content_type:
        return "json"
    if "yaml" in content_type or "yml" in content_type:
        return "yaml"
    return ""


def _load_from_stdin() -> dict[str, Any]:
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc
    if not content.strip():
        raise SpecParseError("No input received from stdin")
    return parse_spec_text(content)


def _load_from_file(path: str) -> dict[str, Any]:
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Spec file not found: {path}")
    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc
    if not content.strip():
        raise SpecParseError(f"Spec file is empty: {path}")

    logger.debug("Read %d bytes from %s", len(content), file_path)
    return parse_spec_text(content, hint=_SUFFIX_HINTS.get(file_path.suffix.lower(), ""))


def _require_object(document: Any) -> dict[str, Any]:
    if isinstance(document, dict):
        return document
    kind = "empty document" if document is None else type(document).__name__
    raise SpecParseError(f"Spec must be a JSON/YAML object (got {kind})")


def parse_spec_text(content: str, hint: str = "") -> dict[str, Any]:
    """Parse *content* as JSON, falling back to YAML.

    Args:
        content: Document text.
        hint: ``"json"`` parses strictly as JSON with no fallback;
            ``"yaml"`` skips the JSON attempt.

    Raises:
        SpecParseError: Neither parser accepts the text, or the top level is
            not an object.
    """
    errors: list[str] = []

    if hint != "yaml":
        try:
            return _require_object(json.loads(content))
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise SpecParseError(f"Invalid JSON: {exc}") from exc
            errors.append(f"JSON error: {exc}")

    try:
        return _require_object(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        errors.append(f"YAML error: {exc}")

    raise SpecParseError(
        "Failed to parse spec as JSON or YAML" + "".join(f"\n  {e}" for e in errors)
    )
