"""
Pull the JSON object out of an AI text response.

Models wrap their JSON in markdown fences and surround it with prose. The
greedy brace span locates the object; decoding then stops at the end of the
first complete JSON value, so trailing text containing braces is ignored.
Two top-level objects in one response still yield only the first.
"""

import json
import re
from typing import Any

from .exceptions import ExtractionError, ParseError

CODE_FENCE = re.compile(r"```(?:json)?")
JSON_BLOB = re.compile(r"\{[\s\S]*\}")

_decoder = json.JSONDecoder()


def strip_code_fences(text: str) -> str:
    return CODE_FENCE.sub("", text).strip()


def extract_json(text: str) -> Any:
    cleaned = strip_code_fences(text or "")
    match = JSON_BLOB.search(cleaned)
    if match is None:
        raise ExtractionError("AI response did not contain a JSON object")
    try:
        value, _ = _decoder.raw_decode(cleaned, match.start())
    except json.JSONDecodeError as e:
        raise ParseError(f"AI response contained invalid JSON: {e.msg} (char {e.pos})") from e
    return value
