"""HTML rendering helpers for chat messages.

Pure functions, kept apart from the NiceGUI page so they can be tested
without a running UI.
"""

import html
import re
from collections.abc import Sequence
from datetime import datetime

from advisor_chat.models.schemas import CitationSegment, ContentSegment, Message, Sender
from advisor_chat.parsing.content_parser import parse_message_content

CITATION_ICON_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 16 16" fill="currentColor" '
    'class="citation-icon"><path fill-rule="evenodd" d="M4.242 2.47a.75.75 0 0 1 .666 0l4.004 '
    '2.224a.75.75 0 0 1 0 1.332L4.908 8.25a.75.75 0 0 1-.666 0L.908 5.91a.75.75 0 0 1 0-1.332L4.242 '
    '2.47Z" clip-rule="evenodd"/></svg>'
)

CODE_BLOCK_OPEN = (
    '<pre class="bg-gray-800 text-gray-100 rounded-lg p-3 my-2 overflow-x-auto text-xs"><code>'
)
FENCE = "```"

# Links are only rendered for web URLs
_SAFE_URL = re.compile(r"^https?://\S+$", re.IGNORECASE)


def _render_list(lines: list[str], pattern: str, tag: str, classes: str) -> list[str]:
    in_list = False
    result = []
    for line in lines:
        stripped = line.strip()
        if re.match(pattern, stripped):
            if not in_list:
                result.append(f'<{tag} class="{classes}">')
                in_list = True
            item = re.sub(pattern, "", stripped)
            result.append(f"<li>{item}</li>")
        else:
            if in_list:
                result.append(f"</{tag}>")
                in_list = False
            result.append(line)
    if in_list:
        result.append(f"</{tag}>")
    return result


def _render_link(match: re.Match[str]) -> str:
    label, url = match.group(1), match.group(2)
    if not _SAFE_URL.match(url):
        return label
    return (
        f'<a href="{url}" class="text-blue-600 underline" target="_blank" '
        f'rel="noopener noreferrer">{label}</a>'
    )


def _render_inline(line: str) -> str:
    """Render one line of markdown. Quotes are escaped so no attribute can be opened."""
    line = html.escape(line, quote=True)

    # Inline code (`code`)
    line = re.sub(
        r"`([^`]+)`",
        r'<code class="bg-gray-200 text-pink-600 px-1.5 py-0.5 rounded text-xs">\1</code>',
        line,
    )

    # Headings (# to ###)
    line = re.sub(r"^### (.+)$", r'<h3 class="text-lg font-semibold mb-1">\1</h3>', line)
    line = re.sub(r"^## (.+)$", r'<h2 class="text-xl font-semibold mb-1">\1</h2>', line)
    line = re.sub(r"^# (.+)$", r'<h1 class="text-2xl font-bold mb-2">\1</h1>', line)

    # Bold (**text** or __text__)
    line = re.sub(r"\*\*(.+?)\*\*", r'<strong class="font-semibold">\1</strong>', line)
    line = re.sub(r"__(.+?)__", r'<strong class="font-semibold">\1</strong>', line)

    # Italic (*text* or _text_)
    line = re.sub(r"\*([^*]+)\*", r"<em>\1</em>", line)
    line = re.sub(r"\b_([^_]+)_\b", r"<em>\1</em>", line)

    # Links [text](url)
    return re.sub(r"\[([^\]]+)\]\(([^)]+)\)", _render_link, line)


def _code_block(lines: list[str]) -> str:
    body = "\n".join(html.escape(line, quote=True) for line in lines)
    return f"{CODE_BLOCK_OPEN}{body}</code></pre>"


def render_markdown_lines(lines: Sequence[str]) -> str:
    """Convert markdown lines to HTML for chat display.

    Supports: headings, bold, italic, inline code, fenced code blocks, links,
    lists. Each line break becomes a <br>, except inside code blocks.
    """
    rendered: list[str] = []
    code: list[str] | None = None
    for line in lines:
        stripped = line.strip()
        if code is None:
            if not stripped.startswith(FENCE):
                rendered.append(_render_inline(line))
            elif len(stripped) > 2 * len(FENCE) and stripped.endswith(FENCE):
                rendered.append(_code_block([stripped[len(FENCE) : -len(FENCE)]]))
            else:
                code = [line]
        elif stripped.startswith(FENCE):
            # First entry is the opening fence and its language tag
            rendered.append(_code_block(code[1:]))
            code = None
        else:
            code.append(line)
    if code is not None:
        # Unterminated fence: show it as ordinary text
        rendered.extend(_render_inline(line) for line in code)

    rendered = _render_list(rendered, r"^[-*]\s+", "ul", "list-disc list-inside my-2 space-y-1")
    rendered = _render_list(
        rendered, r"^\d+\.\s+", "ol", "list-decimal list-inside my-2 space-y-1"
    )
    return "<br>".join(rendered)


def markdown_to_html(text: str) -> str:
    """Convert a markdown string to HTML for chat display."""
    return render_markdown_lines(text.split("\n"))


def citation_to_html(text: str) -> str:
    """Render a citation as an inline chip with a source icon."""
    return f'<span class="citation">{CITATION_ICON_SVG}{html.escape(text)}</span>'


def segments_to_html(segments: Sequence[ContentSegment]) -> str:
    """Render parsed segments: markdown for text, chips for citations."""
    parts = []
    for segment in segments:
        if isinstance(segment, CitationSegment):
            parts.append(citation_to_html(segment.value))
        elif segment.value:
            parts.append(render_markdown_lines(segment.lines))
    return "".join(parts)


def message_to_html(message: Message) -> str:
    """Render a message body. User text is escaped only, never parsed."""
    if message.sender == Sender.USER:
        return html.escape(message.text).replace("\n", "<br>")
    return segments_to_html(parse_message_content(message.text))


def format_timestamp(timestamp: datetime) -> str:
    """Format a message time as HH:MM."""
    return timestamp.strftime("%H:%M")
