"""Citation extraction from assistant answer text.

Answers reference their sources inline as ``[source: HMRC VAT Notice 700]``.
The parser splits the text on those markers and returns an ordered list of
text and citation segments for rendering.
"""

import re

from advisor_chat.models.schemas import CitationSegment, ContentSegment, TextSegment

# [source: freeform text], keyword case-insensitive, no nested brackets
CITATION_PATTERN = re.compile(r"(\[source:[^\[\]]*\])", re.IGNORECASE)
_CITATION_BODY = re.compile(r"^\[source:([^\[\]]*)\]$", re.IGNORECASE)


def parse_message_content(text: str) -> list[ContentSegment]:
    """Split answer text into text and citation segments.

    Segments keep the order of the source text. Text between two adjacent
    markers is kept as an empty TextSegment. Unterminated or malformed
    markers stay part of the surrounding text.

    Args:
        text: Canonical answer string.

    Returns:
        Segments in occurrence order; exactly one TextSegment when the text
        contains no markers.
    """
    segments: list[ContentSegment] = []

    # re.split with a capturing group alternates text, marker, text, ...
    for index, part in enumerate(CITATION_PATTERN.split(text)):
        if index % 2 == 0:
            segments.append(TextSegment(value=part))
            continue
        match = _CITATION_BODY.match(part)
        segments.append(CitationSegment(value=match.group(1).strip() if match else part))

    return segments

