# fellowship_api/utils/text_utils.py
from typing import Iterable, List, Optional


def truncate(text: str, limit: int) -> str:
    """
    Bound ``text`` to ``limit`` characters.

    When the text is too long the last kept character is replaced by an
    ellipsis, so the result is never longer than ``limit``.
    """
    if limit <= 0:
        return ""
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


def unique_strings(values: Iterable[str], limit: Optional[int] = None) -> List[str]:
    """
    De-duplicate strings case-insensitively.

    Whitespace is trimmed, blank entries are dropped and the casing of the
    first occurrence is kept. ``limit`` caps the number of returned items.

    Example:
        >>> unique_strings(["Grace", "grace ", "Hope"])
        ['Grace', 'Hope']
    """
    seen = set()
    out: List[str] = []
    for value in values:
        cleaned = value.strip()
        key = cleaned.lower()
        if not cleaned or key in seen:
            continue
        seen.add(key)
        out.append(cleaned)
        if limit is not None and len(out) >= limit:
            break
    return out
