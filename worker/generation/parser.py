"""Extract structured payloads from free-form model output.

Models wrap JSON in prose, markdown fences or commentary. The parsers
here scan for the first balanced block that decodes to the expected
shape and report a ParseError instead of raising.
"""

import json
from dataclasses import dataclass, field

# Each unterminated block costs a scan to the end of the text
MAX_UNTERMINATED_SCANS = 8


@dataclass
class ParsedPayload:
    """A rewrite payload pulled out of a model response."""

    content: str
    title: str | None = None
    meta_description: str | None = None
    changes: list[str] = field(default_factory=list)
    raw: dict = field(default_factory=dict)


@dataclass
class ParseError:
    """Why no payload could be extracted."""

    reason: str
    snippet: str = ""

    def to_dict(self) -> dict:
        return {"reason": self.reason, "snippet": self.snippet}


def iter_balanced_blocks(text: str, opener: str = "{", closer: str = "}"):
    """
    Yield every balanced ``opener ... closer`` block in order of its start.

    Brackets inside JSON string literals (including escaped quotes) are
    ignored. Unterminated blocks are skipped, and scanning stops once
    MAX_UNTERMINATED_SCANS of them have been seen.
    """
    unterminated = 0
    start = text.find(opener)
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        end = -1
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == opener:
                depth += 1
            elif char == closer:
                depth -= 1
                if depth == 0:
                    end = index
                    break
        if end != -1:
            yield text[start : end + 1]
        else:
            unterminated += 1
            if unterminated >= MAX_UNTERMINATED_SCANS:
                return
        start = text.find(opener, start + 1)


def _optional_str(value: object) -> str | None:
    return value.strip() if isinstance(value, str) and value.strip() else None


def parse_payload(text: str | None) -> ParsedPayload | ParseError:
    """
    Find the first JSON object with a non-empty ``"content"`` string.

    Args:
        text: Raw model output

    Returns:
        ParsedPayload, or ParseError when nothing usable is present
    """
    if not text or not text.strip():
        return ParseError(reason="empty_response")

    saw_object = False
    for block in iter_balanced_blocks(text):
        try:
            data = json.loads(block)
        except json.JSONDecodeError:
            continue
        if not isinstance(data, dict):
            continue
        saw_object = True
        content = data.get("content")
        if not isinstance(content, str) or not content.strip():
            continue

        changes = data.get("changes") or []
        return ParsedPayload(
            content=content.strip(),
            title=_optional_str(data.get("title")),
            meta_description=_optional_str(data.get("metaDescription") or data.get("meta_description")),
            changes=[str(change) for change in changes] if isinstance(changes, list) else [],
            raw=data,
        )

    reason = "missing_content" if saw_object else "no_json_object"
    return ParseError(reason=reason, snippet=text.strip()[:200])


def parse_array(text: str | None) -> list | ParseError:
    """Find the first JSON array in model output."""
    if not text or not text.strip():
        return ParseError(reason="empty_response")

    for block in iter_balanced_blocks(text, "[", "]"):
        try:
            data = json.loads(block)
        except json.JSONDecodeError:
            continue
        if isinstance(data, list):
            return data

    return ParseError(reason="no_json_array", snippet=text.strip()[:200])
