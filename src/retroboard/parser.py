"""Parse and serialize card documents: YAML front-matter plus a text body."""

import re

import yaml

_FRONT_MATTER = re.compile(r"^---\r?\n(?:(.*?)\r?\n)?---(?:\r?\n|$)", re.DOTALL)


def parse_document(text: str) -> tuple[str, dict]:
    """Split a document into (body, meta).

    meta is the front-matter dict (or {} if absent or unreadable). The body
    loses the single trailing newline added by serialize_document and is
    otherwise returned as stored, line endings included.
    """
    meta: dict = {}
    match = _FRONT_MATTER.match(text)
    if match:
        try:
            loaded = yaml.safe_load(match.group(1) or "")
        except yaml.YAMLError:
            loaded = None
        meta = loaded if isinstance(loaded, dict) else {}
        text = text[match.end() :]
    if text.endswith("\r\n"):
        text = text[:-2]
    elif text.endswith("\n"):
        text = text[:-1]
    return text, meta


def serialize_document(body: str, meta: dict | None = None) -> str:
    """Serialize a body and meta dict back to document text.

    Meta is always written first so a body that itself starts with
    "---" can't be mistaken for front-matter.
    """
    parts = [
        "---",
        yaml.safe_dump(meta or {}, default_flow_style=False, sort_keys=False, allow_unicode=True).rstrip(),
        "---",
    ]
    parts.append(body)
    return "\n".join(parts) + "\n"
