"""Answer text processing.

Turns whatever the backend returns into renderable content.

Responsibilities:
    - Collapse the backend's answer envelopes into one canonical string
    - Extract inline ``[source: ...]`` citations into ordered segments
"""

from advisor_chat.parsing.content_parser import parse_message_content
from advisor_chat.parsing.normalizer import classify_payload, normalize_response

__all__ = ["classify_payload", "normalize_response", "parse_message_content"]
