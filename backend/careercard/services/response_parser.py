"""
Response reshaping - pull the JSON payload out of a completion and trim it
down to the fields the card understands
"""
import json
import logging
import re
import uuid
from typing import Any, Dict, Iterable, List

logger = logging.getLogger(__name__)

_CODE_FENCE_RE = re.compile(r'```(?:json)?\s*\n?', re.IGNORECASE)


class LLMResponseError(Exception):
    """The completion carried no parseable JSON payload"""
    pass


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences (```json ... ```) and surrounding whitespace."""
    if not text:
        return ""
    return _CODE_FENCE_RE.sub('', text).strip()


def _loads(raw: Any, source: str):
    if isinstance(raw, (dict, list)):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        raise LLMResponseError(f"Empty {source} in AI response")
    try:
        return json.loads(strip_code_fences(raw))
    except json.JSONDecodeError as e:
        logger.debug(f"Unparseable {source}: {raw[:1000]}")
        raise LLMResponseError(f"Failed to parse {source} as JSON: {e}")


def extract_payload(completion) -> Any:
    """
    Get the JSON payload from a chat completion.

    The first tool call's arguments win; models that ignore the forced tool
    and answer in the message body are accepted too.
    """
    try:
        message = completion.choices[0].message
    except (AttributeError, IndexError, TypeError):
        raise LLMResponseError("No choices in AI response")

    tool_calls = getattr(message, 'tool_calls', None) or []
    if tool_calls:
        return _loads(tool_calls[0].function.arguments, 'tool arguments')

    return _loads(getattr(message, 'content', None), 'message content')


def _clean_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, list):
        return ", ".join(_clean_value(v) for v in value if v is not None)
    return str(value).strip()


def shape_object(obj: Any, fields: Iterable[str]) -> Dict[str, str]:
    """Keep exactly ``fields`` of ``obj`` as trimmed strings ("" when absent)."""
    source = obj if isinstance(obj, dict) else {}
    return {field: _clean_value(source.get(field)) for field in fields}


def shape_items(items: Any, fields: Iterable[str]) -> List[Dict[str, str]]:
    """
    Reshape a list of records: non-dict entries are dropped, each kept record
    has exactly ``fields`` plus a freshly generated ``id``.
    """
    if not isinstance(items, list):
        return []
    fields = list(fields)
    shaped = []
    for item in items:
        if not isinstance(item, dict):
            continue
        record = shape_object(item, fields)
        if not any(record.values()):
            continue
        record['id'] = str(uuid.uuid4())
        shaped.append(record)
    return shaped
