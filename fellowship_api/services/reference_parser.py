# Reference Parser
"""Split free-text scripture citations into book, chapter and verse spec."""

import re

from fellowship_api.errors import ParseError
from fellowship_api.models.verse import ParsedReference

# "John 3:16", "1 John 3:18", "II Kings 2:11", "Romans 8:28-29", "Psalms 23:1,4"
REFERENCE_PATTERN = re.compile(
    r"^(?P<book>[\dI]{0,3}\s*[A-Za-z]+(?:\s+[A-Za-z]+)*)"
    r"\s+(?P<chapter>\d+)"
    r":(?P<verses>[\d\-–,]+)$"
)


def parse_reference(reference: str) -> ParsedReference:
    """
    Parse a citation such as ``"Romans 8:28-29"``.

    Args:
        reference: Raw citation text; surrounding whitespace is ignored

    Returns:
        ParsedReference with the book and verse spec exactly as written

    Raises:
        ParseError: If the text does not look like ``Book C:V``
    """
    match = REFERENCE_PATTERN.match((reference or "").strip())
    if not match:
        raise ParseError(reference)

    return ParsedReference(
        book=match.group("book"),
        chapter=int(match.group("chapter")),
        verse_spec=match.group("verses"),
    )


def first_verse(verse_spec: str) -> str:
    """Return the first verse number of a range or list (``"28-29"`` -> ``"28"``)."""
    return re.split(r"[,\-–]", verse_spec)[0].strip()
