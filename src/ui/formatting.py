"""Display formatting for documents and answers."""

import re

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")

# Link targets allowed in answers; any other target renders as its bare label
_SAFE_LINK_TARGET = re.compile(r"^(?:https?://|mailto:)[^\s<>]+$", re.IGNORECASE)


def format_file_size(size_bytes: int) -> str:
    """Format a byte count for the document list (e.g. ``"1.5 KB"``)."""
    if size_bytes <= 0:
        return "0 Bytes"

    value = float(size_bytes)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{round(value, 2):g} {_SIZE_UNITS[unit]}"


def format_percent(fraction: float) -> str:
    """Format a relevance or confidence value as a whole percentage."""
    return f"{round(fraction * 100)}%"


def markdown_to_html(text: str) -> str:
    """Convert markdown to HTML for answer display.

    Supports: bold, italic, inline code, code blocks, links, lists.
    """
    # Escape HTML entities first
    text = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
    text = text.replace('"', "&quot;").replace("'", "&#x27;")

    # Code blocks (```code```)
    text = re.sub(
        r"```(\w*)\n?([\s\S]*?)```",
        r'<pre class="bg-slate-800 text-slate-100 rounded-lg p-3 my-2 overflow-x-auto text-xs">'
        r"<code>\2</code></pre>",
        text,
    )

    # Inline code (`code`)
    text = re.sub(
        r"`([^`]+)`",
        r'<code class="bg-slate-800 text-purple-300 px-1.5 py-0.5 rounded text-xs">\1</code>',
        text,
    )

    # Bold, then italic
    text = re.sub(r"\*\*(.+?)\*\*", r"<strong>\1</strong>", text)
    text = re.sub(r"\*([^*]+)\*", r"<em>\1</em>", text)

    # Links [text](url), only for web and mail targets
    text = re.sub(r"\[([^\]]+)\]\(([^)]+)\)", _render_link, text)

    text = _wrap_list_items(text, r"^[-*]\s+", "ul", "list-disc")
    text = _wrap_list_items(text, r"^\d+\.\s+", "ol", "list-decimal")

    return text.replace("\n", "<br>")


def _wrap_list_items(text: str, marker: str, tag: str, style: str) -> str:
    lines = text.split("\n")
    in_list = False
    result = []
    for line in lines:
        stripped = line.strip()
        if re.match(marker, stripped):
            if not in_list:
                result.append(f'<{tag} class="{style} list-inside my-2 space-y-1">')
                in_list = True
            result.append(f"<li>{re.sub(marker, '', stripped)}</li>")
        else:
            if in_list:
                result.append(f"</{tag}>")
                in_list = False
            result.append(line)
    if in_list:
        result.append(f"</{tag}>")
    return "\n".join(result)


def _render_link(match: re.Match[str]) -> str:
    label, url = match.group(1), match.group(2).strip()
    if not _SAFE_LINK_TARGET.match(url):
        return label
    return (
        f'<a href="{url}" class="text-purple-400 underline" target="_blank" '
        f'rel="noopener noreferrer">{label}</a>'
    )
