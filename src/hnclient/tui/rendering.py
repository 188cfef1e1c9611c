"""Rich rendering of navigator state for the Textual widgets.

Every function here is pure: state in, rich Text out. Widgets decide how
many rows fit and call these with the visible slice.

# [LAW:single-enforcer] Styling decisions for rows/comments live here only.
"""

from __future__ import annotations

from typing import Sequence

from rich.text import Text

from hnclient.core.comments import count_descendants
from hnclient.core.items import CommentNode, DisplayRow
from hnclient.core.text import comment_paragraphs, domain_from_url, relative_time, trim_line
from hnclient.tui.input_modes import FOOTER_KEYS, PROMPTS, InputMode

# Lines each entry takes in a pane; the widget divides its height by these.
STORY_BLOCK_HEIGHT = 3
COMMENT_BLOCK_HEIGHT = 1

CURSOR_STYLE = "bold reverse"
MATCH_STYLE = "bold yellow"
READ_STYLE = "dim"
META_STYLE = "grey62"
AUTHOR_STYLE = "bold cyan"
COLLAPSED_MARK = "▸"
EXPANDED_MARK = "▾"
LEAF_MARK = "·"


def render_story_rows(
    rows: Sequence[DisplayRow],
    start: int,
    cursor: int,
    *,
    read_ids: set[int] = frozenset(),
    matches: set[int] = frozenset(),
    width: int = 120,
) -> Text:
    """Render rows (already sliced, first row has index `start`)."""
    text = Text()
    if not rows:
        text.append("Nothing loaded yet.", style=META_STYLE)
        return text
    for offset, row in enumerate(rows):
        index = start + offset
        title_style = READ_STYLE if row.id in read_ids else "bold"
        if index == cursor:
            title_style = CURSOR_STYLE
        elif index in matches:
            title_style = MATCH_STYLE
        prefix = f"{index + 1:>3}. "
        text.append(prefix, style=META_STYLE)
        text.append(trim_line(row.title, max(10, width - len(prefix) - 2)), style=title_style)
        text.append("\n")
        meta = (
            f"{row.score} points by {row.author} {relative_time(row.timestamp)}"
            f" | {row.comment_count} comments | {domain_from_url(row.url)}"
        )
        if row.kind != "story":
            meta += f" | {row.kind}"
        text.append(" " * len(prefix) + meta, style=META_STYLE)
        text.append("\n\n")
    text.rstrip()
    return text


def render_comment_rows(
    nodes: Sequence[CommentNode],
    start: int,
    cursor: int,
    *,
    collapsed: set[int] = frozenset(),
    matches: set[int] = frozenset(),
    width: int = 120,
) -> Text:
    text = Text()
    if not nodes:
        text.append("No comments.", style=META_STYLE)
        return text
    for offset, node in enumerate(nodes):
        index = start + offset
        indent = "  " * node.depth
        if not node.children:
            mark = LEAF_MARK
        elif node.id in collapsed:
            mark = COLLAPSED_MARK
        else:
            mark = EXPANDED_MARK
        body = " ".join(comment_paragraphs(node.text))
        if node.id in collapsed:
            body = f"[+{count_descendants(node)}] {body}"
        header = f"{indent}{mark} {node.author} {relative_time(node.timestamp)}: "
        line_style = CURSOR_STYLE if index == cursor else ("" if index not in matches else MATCH_STYLE)
        text.append(indent + f"{mark} ", style=line_style or META_STYLE)
        text.append(node.author, style=line_style or AUTHOR_STYLE)
        text.append(f" {relative_time(node.timestamp)}: ", style=line_style or META_STYLE)
        text.append(trim_line(body, max(10, width - len(header))), style=line_style)
        text.append("\n")
    text.rstrip()
    return text


def render_comment_detail(node: CommentNode | None, width: int = 100) -> Text:
    """Full text of the selected comment, one paragraph per block."""
    text = Text()
    if node is None:
        return text
    text.append(node.author, style=AUTHOR_STYLE)
    text.append(f" {relative_time(node.timestamp)}\n", style=META_STYLE)
    text.append("\n\n".join(comment_paragraphs(node.text)))
    return text


def render_article(title: str, url: str, lines: Sequence[str], start: int) -> Text:
    text = Text()
    text.append(title, style="bold")
    text.append(f"\n{url}\n\n", style=META_STYLE)
    text.append("\n".join(lines))
    if start > 0:
        text.append(f"\n\n(line {start + 1})", style=META_STYLE)
    return text


def render_header(feed: str, pane: str, loaded: int, total: int, loading: bool) -> Text:
    text = Text()
    text.append(" HN ", style="bold black on dark_orange")
    text.append(f" {feed.upper()} | pane:{pane} | loaded {loaded}/{total}", style="bold")
    if loading:
        text.append("  loading…", style="italic " + META_STYLE)
    return text


def render_status(status: str, mode: InputMode, buffer: str) -> Text:
    text = Text()
    if mode is not InputMode.NONE:
        text.append(PROMPTS[mode], style="bold")
        text.append(buffer)
        text.append("█\n", style="blink")
    else:
        text.append(status or " ")
        text.append("\n")
    for key, label in FOOTER_KEYS[mode]:
        text.append(key, style="bold")
        text.append(f" {label}  ", style=META_STYLE)
    return text
