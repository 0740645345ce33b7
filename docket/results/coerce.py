"""Defensive coercion helpers shared by the workflow normalizer and the row decoder.

Nothing in here raises on malformed input; every helper falls back to a
caller-supplied or fixed default.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Mapping

from docket.results.models import ClauseRiskLevel

RISK_WORD_SCORES: dict[str, float] = {
    "low": 2,
    "medium": 5,
    "high": 8,
    "critical": 10,
}

_NON_DIGITS = re.compile(r"\D")


def parse_list_field(value: Any) -> list[Any]:
    """Turn a loosely-typed list column into a list.

    Accepts ``None``, an actual list, a JSON-encoded value, or comma-joined
    text. A JSON object or scalar becomes a one-element list.
    """
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, (tuple, set)):
        return list(value)
    if isinstance(value, dict):
        return [value]
    if not isinstance(value, str):
        return [value]
    if not value.strip():
        return []
    try:
        parsed = json.loads(value)
    except RecursionError:
        return []
    except (json.JSONDecodeError, ValueError):
        return [piece.strip() for piece in value.split(",") if piece.strip()]
    if parsed is None:
        return []
    if isinstance(parsed, list):
        return parsed
    return [parsed]


def key_variants(title: str) -> tuple[str, str]:
    """``"Risk Score"`` -> ``("Risk Score", "risk_score")``."""
    return title, title.strip().lower().replace(" ", "_")


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return len(value) == 0
    return False


def lookup(data: Any, *titles: str, default: Any = None) -> Any:
    """Return the first non-blank value among the Title Case / snake_case spellings of ``titles``.

    Titles are tried in the order given; for each title the Title Case key
    wins over its snake_case twin.
    """
    if not isinstance(data, Mapping):
        return default
    for title in titles:
        for key in key_variants(title):
            if key in data and not is_blank(data[key]):
                return data[key]
    return default


def has_any(data: Any, titles: tuple[str, ...]) -> bool:
    return lookup(data, *titles) is not None


def to_float(value: Any, default: float) -> float:
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, (int, float)):
        try:
            result = float(value)
        except OverflowError:
            return default
    elif isinstance(value, str):
        try:
            result = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    if not math.isfinite(result):
        return default
    return result


def coerce_risk_score(value: Any, default: float, unknown_word: float | None = None) -> float:
    """Read a risk score given as a number, a numeric string or a tier word.

    ``unknown_word`` is used when the value is text that is neither a number
    nor a known tier; it defaults to ``default``.
    """
    if is_blank(value):
        return default
    number = to_float(value, math.nan)
    if not math.isnan(number):
        return number
    if isinstance(value, str):
        word = value.strip().lower()
        if word in RISK_WORD_SCORES:
            return float(RISK_WORD_SCORES[word])
    return default if unknown_word is None else unknown_word


def parse_page_number(value: Any) -> int:
    """Strip every non-digit from ``value`` and parse the rest; 1 when nothing usable is left."""
    if value is None or isinstance(value, bool):
        return 1
    if isinstance(value, int):
        return value if value >= 1 else 1
    digits = _NON_DIGITS.sub("", str(value))
    if not digits:
        return 1
    try:
        page = int(digits)
    except ValueError:
        # Past the interpreter's int-string digit limit.
        return 1
    return page if page >= 1 else 1


def coerce_clause_risk(value: Any) -> ClauseRiskLevel:
    if isinstance(value, str):
        try:
            return ClauseRiskLevel(value.strip().lower())
        except ValueError:
            pass
    return ClauseRiskLevel.MEDIUM


def as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def as_optional_text(value: Any) -> str | None:
    return None if is_blank(value) else as_text(value)


def as_string_list(value: Any) -> list[str]:
    """Recommendation fields arrive as a single string or a list of strings."""
    if isinstance(value, list):
        return [as_text(item) for item in value if not is_blank(item)]
    if is_blank(value):
        return []
    return [as_text(value)]
