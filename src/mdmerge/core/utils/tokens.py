"""Shared markdown-it syntax tree utilities"""

import re

from markdown_it.tree import SyntaxTreeNode


_WS_RE = re.compile(r'\s+')

# Leaf node types whose content counts as literal text for hashing.
TEXT_TYPES = {'text', 'code_inline', 'fence', 'code_block'}


def heading_level(node: SyntaxTreeNode) -> int | None:
    """Return the heading level (1-6) for a heading node, else None."""
    tag = node.tag
    if node.type == 'heading' and tag and tag[0] == 'h' and tag[1:].isdigit():
        return int(tag[1:])
    return None


def node_text(node: SyntaxTreeNode) -> str:
    """Concatenate literal text and inline code found anywhere under node, depth-first."""
    parts: list[str] = []
    for child in node.walk():
        if child.is_root or child.type not in TEXT_TYPES:
            continue
        parts.append(child.content)
    return ''.join(parts)


def normalize_ws(text: str) -> str:
    """Collapse internal whitespace runs to one space and strip the ends."""
    return _WS_RE.sub(' ', text).strip()


def fence_language(node: SyntaxTreeNode) -> str | None:
    """Return the first word of a fence info string, or None."""
    info = node.info.strip() if node.type == 'fence' else ''
    return info.split()[0] if info else None


def descendant_span(node: SyntaxTreeNode) -> tuple[int, int] | None:
    """Return the (begin, end) line map covering node and its descendants.

    Some plugin containers (footnotes) carry no map of their own; their
    children do.
    """
    begins, ends = [], []
    for child in node.walk():
        if child.is_root:
            continue
        m = child.map
        if m:
            begins.append(m[0])
            ends.append(m[1])
    if not begins:
        return None
    return min(begins), max(ends)
