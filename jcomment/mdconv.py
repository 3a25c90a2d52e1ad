"""Markdown conversion utilities.

Comments are edited as Markdown. Jira stores them either as Atlassian
Document Format (Cloud, REST v3) or as wiki markup (REST v2), so this
module translates both into Markdown for the editor, and Markdown back
into wiki markup for submission.
"""

import html
import re
from html.parser import HTMLParser

import markdown


# Map Jira code macro languages to markdown fence names
LANG_MAP_REVERSE = {
    "html/xml": "xml",
    "c#": "csharp",
    "c++": "cpp",
    "none": "",
}


# ---------------------------------------------------------------------------
# Atlassian Document Format -> Markdown
# ---------------------------------------------------------------------------

INLINE_NODES = {"text", "hardBreak", "mention", "emoji", "inlineCard", "status", "date"}


def _apply_marks(text: str, marks: list[dict]) -> str:
    """Wrap text in markdown for the ADF marks on a text node."""
    by_type = {m.get("type"): m for m in marks or []}
    if "code" in by_type:
        text = f"`{text}`"
    if "strike" in by_type:
        text = f"~~{text}~~"
    if "em" in by_type:
        text = f"*{text}*"
    if "strong" in by_type:
        text = f"**{text}**"
    if "link" in by_type:
        href = by_type["link"].get("attrs", {}).get("href", "")
        text = f"[{text}]({href})"
    return text


def _render_inline_node(node: dict) -> str:
    node_type = node.get("type")
    attrs = node.get("attrs", {})
    if node_type == "text":
        return _apply_marks(node.get("text", ""), node.get("marks", []))
    if node_type == "hardBreak":
        return "\n"
    if node_type == "mention":
        # Wiki markup form, so an unchanged mention is still one after submit
        if attrs.get("id"):
            return f"[~accountid:{attrs['id']}]"
        return attrs.get("text", "")
    if node_type == "emoji":
        return attrs.get("text") or attrs.get("shortName", "")
    if node_type == "inlineCard":
        return attrs.get("url", "")
    if node_type == "status":
        return attrs.get("text", "")
    if node_type == "date":
        return attrs.get("timestamp", "")
    return _render_inline(node.get("content", []))


def _render_inline(nodes: list[dict]) -> str:
    return "".join(_render_inline_node(n) for n in nodes)


def _render_list(node: dict, indent: str) -> str:
    ordered = node.get("type") == "orderedList"
    number = node.get("attrs", {}).get("order", 1)
    items = []
    for item in node.get("content", []):
        marker = f"{number}. " if ordered else "- "
        if item.get("type") == "taskItem":
            checked = "x" if item.get("attrs", {}).get("state") == "DONE" else " "
            items.append(f"{indent}- [{checked}] {_render_inline(item.get('content', []))}")
        else:
            items.append(_render_list_item(item, indent, marker))
        number += 1
    return "\n".join(items)


def _render_list_item(item: dict, indent: str, marker: str) -> str:
    lines = []
    child_indent = indent + "  "
    for child in item.get("content", []):
        if child.get("type") in {"bulletList", "orderedList"}:
            lines.append(_render_list(child, child_indent))
        elif not lines:
            lines.append(f"{indent}{marker}{_render_block(child, child_indent)}")
        else:
            lines.append(f"{child_indent}{_render_block(child, child_indent)}")
    if not lines:
        return f"{indent}{marker}".rstrip()
    return "\n".join(lines)


def _render_table(node: dict) -> str:
    rows = []
    for row in node.get("content", []):
        cells = [
            _render_blocks(cell.get("content", [])).replace("\n", " ")
            for cell in row.get("content", [])
        ]
        rows.append("| " + " | ".join(cells) + " |")
        if len(rows) == 1:
            rows.append("|" + "|".join(["---"] * len(cells)) + "|")
    return "\n".join(rows)


def _render_block(node: dict, indent: str = "") -> str:
    node_type = node.get("type")
    attrs = node.get("attrs", {})
    content = node.get("content", [])

    if node_type == "paragraph":
        return _render_inline(content)
    if node_type == "heading":
        level = attrs.get("level", 1)
        return f"{'#' * level} {_render_inline(content)}"
    if node_type in {"bulletList", "orderedList", "taskList"}:
        return _render_list(node, indent)
    if node_type == "codeBlock":
        lang = attrs.get("language") or ""
        code = "".join(c.get("text", "") for c in content).rstrip("\n")
        return f"```{lang}\n{code}\n```"
    if node_type == "blockquote":
        inner = _render_blocks(content)
        return "\n".join(f"> {line}" if line else ">" for line in inner.split("\n"))
    if node_type == "rule":
        return "---"
    if node_type == "table":
        return _render_table(node)
    if node_type in {"blockCard", "embedCard"}:
        return attrs.get("url", "")
    if node_type in {"mediaSingle", "mediaGroup", "media"}:
        return ""
    if node_type == "expand":
        title = attrs.get("title", "")
        body = _render_blocks(content)
        return f"**{title}**\n\n{body}" if title else body
    if node_type in INLINE_NODES:
        return _render_inline_node(node)
    # panel, nestedExpand, layoutSection and anything unknown: render children
    return _render_blocks(content, indent)


def _render_blocks(nodes: list[dict], indent: str = "") -> str:
    parts = [_render_block(n, indent) for n in nodes]
    return "\n\n".join(p for p in parts if p)


def adf_to_markdown(doc: dict) -> str:
    """Convert an Atlassian Document Format tree to Markdown.

    Args:
        doc: ADF document (``{"type": "doc", "content": [...]}``)

    Returns:
        Markdown text
    """
    if not doc:
        return ""
    text = _render_blocks(doc.get("content", []))
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


# ---------------------------------------------------------------------------
# Jira wiki markup -> Markdown
# ---------------------------------------------------------------------------

def _macro_to_code_block(match: re.Match) -> str:
    """Convert a {code}/{noformat} macro to a fenced code block."""
    params = match.group(2) or ""
    code = match.group(3).strip("\n")
    # {code:title=Foo.java|borderStyle=solid} has no language
    lang = params.split("|", 1)[0]
    if "=" in lang or match.group(1) == "noformat":
        lang = ""
    lang = LANG_MAP_REVERSE.get(lang.lower(), lang.lower())
    return f"\n```{lang}\n{code}\n```\n"


def _quote_to_markdown(match: re.Match) -> str:
    lines = match.group(1).strip("\n").split("\n")
    return "\n".join(f"> {line}" if line else ">" for line in lines)


def _convert_inline(line: str) -> str:
    """Convert inline wiki markup on a single line."""
    protected: list[str] = []

    def protect(text: str) -> str:
        protected.append(text)
        return f"\x00{len(protected) - 1}\x00"

    # Monospace and links first, their content must not be reformatted
    line = re.sub(r"\{\{(.+?)\}\}", lambda m: protect(f"`{m.group(1)}`"), line)
    line = re.sub(
        r"\[([^|\]]+)\|([^\]]+)\]",
        lambda m: protect(f"[{m.group(1)}]({m.group(2)})"),
        line,
    )
    # Mentions stay in wiki form so they survive the trip back to Jira
    line = re.sub(r"\[~[^\]]+\]", lambda m: protect(m.group(0)), line)
    line = re.sub(r"\[((?:https?|mailto):[^\]]+)\]", lambda m: protect(f"<{m.group(1)}>"), line)
    line = re.sub(
        r"!([^!\s|]+)(?:\|[^!]*)?!",
        lambda m: protect(f"![]({m.group(1)})"),
        line,
    )

    line = re.sub(r"(?<![\w*])\*(?=\S)([^*]+?)(?<=\S)\*(?![\w*])", r"**\1**", line)
    line = re.sub(r"(?<![\w_])_(?=\S)([^_]+?)(?<=\S)_(?![\w_])", r"*\1*", line)
    line = re.sub(r"(?<![\w-])-(?=\S)([^-]+?)(?<=\S)-(?![\w-])", r"~~\1~~", line)
    line = re.sub(r"(?<![\w+])\+(?=\S)([^+]+?)(?<=\S)\+(?![\w+])", r"\1", line)
    line = re.sub(r"\?\?(.+?)\?\?", r"*\1*", line)
    line = re.sub(r"\{color(?::[^}]*)?\}", "", line)

    return re.sub(r"\x00(\d+)\x00", lambda m: protected[int(m.group(1))], line)


def _convert_markup(chunk: str) -> str:
    """Convert block-level wiki markup outside code blocks."""
    result = []
    for line in chunk.split("\n"):
        heading = re.match(r"^\s*h([1-6])\.\s+(.*)$", line)
        if heading:
            level = int(heading.group(1))
            result.append(f"{'#' * level} {_convert_inline(heading.group(2))}")
            continue

        quote = re.match(r"^\s*bq\.\s+(.*)$", line)
        if quote:
            result.append(f"> {_convert_inline(quote.group(1))}")
            continue

        if re.match(r"^\s*-{4,}\s*$", line):
            result.append("---")
            continue

        item = re.match(r"^\s*([*#-]+)\s+(.*)$", line)
        if item and (len(item.group(1)) == 1 or "-" not in item.group(1)):
            markers = item.group(1)
            indent = "  " * (len(markers) - 1)
            bullet = "1." if markers[-1] == "#" else "-"
            result.append(f"{indent}{bullet} {_convert_inline(item.group(2))}")
            continue

        header_row = re.match(r"^\s*\|\|(.*?)\|\|\s*$", line)
        if header_row:
            cells = [_convert_inline(c.strip()) for c in header_row.group(1).split("||")]
            result.append("| " + " | ".join(cells) + " |")
            result.append("|" + "|".join(["---"] * len(cells)) + "|")
            continue

        row = re.match(r"^\s*\|(.*?)\|\s*$", line)
        if row:
            cells = [_convert_inline(c.strip()) for c in row.group(1).split("|")]
            result.append("| " + " | ".join(cells) + " |")
            continue

        result.append(_convert_inline(line))
    return "\n".join(result)


def jira_to_markdown(text: str) -> str:
    """Convert Jira wiki markup to Markdown.

    Args:
        text: Jira wiki markup (REST v2 comment body)

    Returns:
        Markdown text
    """
    if not text:
        return ""
    text = text.replace("\r\n", "\n")

    text = re.sub(
        r"\{(code|noformat)(?::([^}]*))?\}(.*?)\{\1\}",
        _macro_to_code_block,
        text,
        flags=re.DOTALL,
    )
    text = re.sub(r"\{quote\}(.*?)\{quote\}", _quote_to_markdown, text, flags=re.DOTALL)
    text = re.sub(r"\{panel(?::[^}]*)?\}", "", text)

    # Fenced blocks produced above are left untouched
    parts = re.split(r"(```.*?```)", text, flags=re.DOTALL)
    converted = [
        part if i % 2 else _convert_markup(part)
        for i, part in enumerate(parts)
    ]
    text = "".join(converted)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


# ---------------------------------------------------------------------------
# Markdown -> Jira wiki markup
# ---------------------------------------------------------------------------

def _normalize_list_indent(md_content: str) -> str:
    """Convert 2-space list indents to 4-space for markdown parser.

    The Python markdown library requires 4-space indentation for nested lists.
    This preprocessor allows users to write with 2-space indents.
    """
    lines = md_content.split('\n')
    result = []
    in_code_block = False

    for line in lines:
        if line.startswith('```'):
            in_code_block = not in_code_block
            result.append(line)
            continue

        if in_code_block:
            result.append(line)
            continue

        match = re.match(r'^( +)([-*+]|\d+\.) ', line)
        if match:
            indent = match.group(1)
            result.append(indent * 2 + line[len(indent):])
        else:
            result.append(line)

    return '\n'.join(result)


class WikiMarkupExtractor(HTMLParser):
    """Render HTML produced by the markdown library as Jira wiki markup."""

    HEADER_LEVELS = {"h1", "h2", "h3", "h4", "h5", "h6"}

    def __init__(self):
        super().__init__()
        self.text = []
        self.list_stack = []  # "*" for ul, "#" for ol
        self.just_closed_list = False
        self.in_table = False
        self.row = []
        self.row_is_header = False
        self.cell = None
        self._pending_link = ""

    def _emit(self, value: str) -> None:
        if self.cell is not None:
            self.cell.append(value)
        else:
            self.text.append(value)

    def handle_starttag(self, tag, attrs):
        attrs_dict = dict(attrs)
        if tag == "br":
            self._emit("\n")
        elif tag in self.HEADER_LEVELS:
            self._emit(f"{tag}. ")
        elif tag in {"ul", "ol"}:
            if self.list_stack:
                self._emit("\n")
            self.list_stack.append("*" if tag == "ul" else "#")
        elif tag == "li":
            self._emit("".join(self.list_stack) + " ")
        elif tag == "code":
            self._emit("{{")
        elif tag in {"strong", "b"}:
            self._emit("*")
        elif tag in {"em", "i"}:
            self._emit("_")
        elif tag in {"del", "s"}:
            self._emit("-")
        elif tag == "hr":
            self._emit("----\n\n")
        elif tag == "a":
            self._pending_link = attrs_dict.get("href", "")
            self._emit("[")
        elif tag == "img":
            self._emit(f"!{attrs_dict.get('src', '')}!")
        elif tag == "blockquote":
            self._emit("{quote}\n")
        elif tag == "table":
            self.in_table = True
        elif tag == "tr":
            self.row = []
            self.row_is_header = False
        elif tag in {"th", "td"}:
            self.cell = []
            if tag == "th":
                self.row_is_header = True

    def handle_endtag(self, tag):
        if tag in self.HEADER_LEVELS:
            self._emit("\n\n")
        elif tag in {"ul", "ol"}:
            if self.list_stack:
                self.list_stack.pop()
            if not self.list_stack:
                self._emit("\n")
            else:
                self.just_closed_list = True
        elif tag == "li":
            if self.just_closed_list:
                self.just_closed_list = False
            else:
                self._emit("\n")
        elif tag == "p":
            if not self.list_stack and not self.in_table:
                self._emit("\n\n")
        elif tag == "code":
            self._emit("}}")
        elif tag in {"strong", "b"}:
            self._emit("*")
        elif tag in {"em", "i"}:
            self._emit("_")
        elif tag in {"del", "s"}:
            self._emit("-")
        elif tag == "a":
            self._emit(f"|{self._pending_link}]")
            self._pending_link = ""
        elif tag == "blockquote":
            self._emit("{quote}\n\n")
        elif tag in {"th", "td"}:
            if self.cell is not None:
                self.row.append("".join(self.cell).strip())
            self.cell = None
        elif tag == "tr":
            sep = "||" if self.row_is_header else "|"
            self.text.append(sep + sep.join(self.row) + sep + "\n")
        elif tag == "table":
            self.in_table = False
            self.text.append("\n")

    def handle_data(self, data):
        if (self.list_stack or self.in_table) and not data.strip():
            return
        self._emit(data)


def markdown_to_jira(md_content: str) -> str:
    """Convert Markdown to Jira wiki markup.

    Args:
        md_content: Markdown text

    Returns:
        Jira wiki markup suitable for REST v2 comment bodies
    """
    if not md_content.strip():
        return md_content

    md_content = _normalize_list_indent(md_content)
    md = markdown.Markdown(extensions=["tables", "fenced_code", "sane_lists"])
    # Angle brackets in comments are text, not HTML: Vec<String>, a <b> & c
    md.preprocessors.deregister("html_block")
    md.inlinePatterns.deregister("html")
    rendered = md.convert(md_content)

    # Code blocks bypass the HTML parser so their content stays verbatim
    code_blocks: list[str] = []

    def code_to_macro(match: re.Match) -> str:
        lang = match.group(1) or ""
        code = html.unescape(match.group(2)).rstrip("\n")
        macro = f"{{code:{lang}}}" if lang else "{code}"
        code_blocks.append(f"{macro}\n{code}\n{{code}}")
        return f"@@CODEBLOCK{len(code_blocks) - 1}@@\n\n"

    rendered = re.sub(
        r'<pre><code(?:\s+class="language-([^"]*)")?>(.*?)</code></pre>',
        code_to_macro,
        rendered,
        flags=re.DOTALL,
    )

    extractor = WikiMarkupExtractor()
    extractor.feed(rendered)
    extractor.close()

    text = "".join(extractor.text)
    text = re.sub(r"@@CODEBLOCK(\d+)@@", lambda m: code_blocks[int(m.group(1))], text)
    text = re.sub(r"\n+\{quote\}", "\n{quote}", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()
