"""HTML rendering helpers shared by the chat pages."""

import re

_LIST_STYLES = {
    "ul": (re.compile(r"^[-*]\s+"), "list-disc list-inside my-2 space-y-1"),
    "ol": (re.compile(r"^\d+\.\s+"), "list-decimal list-inside my-2 space-y-1"),
}


def _wrap_lists(text: str, tag: str) -> str:
    marker, classes = _LIST_STYLES[tag]
    result: list[str] = []
    in_list = False
    for line in text.split("\n"):
        stripped = line.strip()
        if marker.match(stripped):
            if not in_list:
                result.append(f'<{tag} class="{classes}">')
                in_list = True
            result.append(f"<li>{marker.sub('', stripped)}</li>")
            continue
        if in_list:
            result.append(f"</{tag}>")
            in_list = False
        result.append(line)
    if in_list:
        result.append(f"</{tag}>")
    return "\n".join(result)


def markdown_to_html(text: str) -> str:
    """Convert markdown to HTML for chat display.

    Supports: bold, italic, inline code, code blocks, links, lists.
    """
    text = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")

    text = re.sub(
        r"```(\w*)\n?([\s\S]*?)```",
        r'<pre class="bg-gray-800 text-gray-100 rounded-lg p-3 my-2 overflow-x-auto text-xs">'
        r"<code>\2</code></pre>",
        text,
    )
    text = re.sub(
        r"`([^`]+)`",
        r'<code class="bg-gray-200 text-pink-600 px-1.5 py-0.5 rounded text-xs">\1</code>',
        text,
    )
    text = re.sub(r"\*\*(.+?)\*\*", r"<strong>\1</strong>", text)
    text = re.sub(r"\*([^*]+)\*", r"<em>\1</em>", text)
    text = re.sub(
        r"\[([^\]]+)\]\(([^)]+)\)",
        r'<a href="\2" class="text-blue-600 underline" target="_blank">\1</a>',
        text,
    )

    text = _wrap_lists(text, "ul")
    text = _wrap_lists(text, "ol")
    return text.replace("\n", "<br>")


def plain_to_html(text: str) -> str:
    """Escape user text and keep its line breaks."""
    escaped = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
    return escaped.replace("\n", "<br>")
