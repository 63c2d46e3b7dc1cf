"""upstage_docai.config.defaults
=============================

Central place for small, stable default values used across the package and
the CLI. These defaults can be overridden via environment variables or an
external configuration file, but provide sensible fallbacks for local
development and tests.

This module intentionally avoids importing from other package modules to
prevent circular dependencies. Only plain constants should live here.
"""

from __future__ import annotations

# ---- API endpoint ----
DOCAI_DEFAULT_BASE_URL = "https://api.upstage.ai/v1"

# ---- Document parsing ----
DOCUMENT_PARSE_DEFAULT_MODEL = "document-parse"
DOCUMENT_PARSE_MODELS = ("document-parse", "document-parse-nightly")
DOCUMENT_PARSE_OCR_MODES = ("auto", "force")
DOCUMENT_PARSE_OUTPUT_FORMATS = ("html", "markdown", "text")
DOCUMENT_PARSE_BASE64_CATEGORIES = ("figure", "table", "equation", "chart")
DOCUMENT_PARSE_RETURN_MODES = (
    "full",
    "content_html",
    "content_markdown",
    "content_text",
    "elements",
)

# ---- Information extraction ----
INFORMATION_EXTRACT_DEFAULT_MODEL = "information-extract"
INFORMATION_EXTRACT_DEFAULT_SCHEMA_NAME = "document_schema"
INFORMATION_EXTRACT_RETURN_MODES = ("extracted", "full")
SCHEMA_GENERATION_RETURN_MODES = ("schema", "full")

# ---- Document chat ----
DOCUMENT_CHAT_DEFAULT_MODEL = "genius"
DOCUMENT_CHAT_MODELS = ("genius", "turbo")
DOCUMENT_CHAT_FILE_PURPOSE = "user_data"
REASONING_EFFORTS = ("low", "medium", "high")
REASONING_SUMMARIES = ("auto", "enabled", "disabled")
REASONING_DEFAULT_EFFORT = "medium"
REASONING_DEFAULT_SUMMARY = "auto"

# ---- Uploads ----
DEFAULT_MIME_TYPE = "application/octet-stream"

# ---- CLI ----
DOCAI_CLI_PROG = "docai-cli"


__all__ = [
    "DOCAI_DEFAULT_BASE_URL",
    "DOCUMENT_PARSE_DEFAULT_MODEL",
    "DOCUMENT_PARSE_MODELS",
    "DOCUMENT_PARSE_OCR_MODES",
    "DOCUMENT_PARSE_OUTPUT_FORMATS",
    "DOCUMENT_PARSE_BASE64_CATEGORIES",
    "DOCUMENT_PARSE_RETURN_MODES",
    "INFORMATION_EXTRACT_DEFAULT_MODEL",
    "INFORMATION_EXTRACT_DEFAULT_SCHEMA_NAME",
    "INFORMATION_EXTRACT_RETURN_MODES",
    "SCHEMA_GENERATION_RETURN_MODES",
    "DOCUMENT_CHAT_DEFAULT_MODEL",
    "DOCUMENT_CHAT_MODELS",
    "DOCUMENT_CHAT_FILE_PURPOSE",
    "REASONING_EFFORTS",
    "REASONING_SUMMARIES",
    "REASONING_DEFAULT_EFFORT",
    "REASONING_DEFAULT_SUMMARY",
    "DEFAULT_MIME_TYPE",
    "DOCAI_CLI_PROG",
]
