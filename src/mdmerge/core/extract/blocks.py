"""Syntax tree to top-level Block conversion using source line maps"""

from typing import Optional

from markdown_it.tree import SyntaxTreeNode

from mdmerge.core.models import Block, BlockKind
from mdmerge.core.parse import FrontMatter
from mdmerge.core.utils.tokens import descendant_span


BLOCK_KIND_MAP: dict[str, BlockKind] = {
    'heading':      BlockKind.heading,
    'paragraph':    BlockKind.paragraph,
    'fence':        BlockKind.code_block,
    'code_block':   BlockKind.code_block,
    'bullet_list':  BlockKind.list,
    'ordered_list': BlockKind.list,
    'blockquote':   BlockKind.block_quote,
    'hr':           BlockKind.thematic_break,
    'html_block':   BlockKind.html_block,
    'table':        BlockKind.table,
    'footnote':     BlockKind.footnote_definition,
}

# Plugin containers whose children are the real top-level blocks.
FLATTEN_TYPES = {'footnote_block'}


def _line_span(node: SyntaxTreeNode, lines: list[str]) -> tuple[Optional[int], Optional[int]]:
    """Return the 1-indexed inclusive line span of node, trailing blank lines excluded."""
    span = node.map or descendant_span(node)
    if not span:
        return None, None
    start, end = span[0] + 1, span[1]
    while end > start and end <= len(lines) and not lines[end - 1].strip():
        end -= 1
    return start, max(start, end)


def node_to_block(node: SyntaxTreeNode, lines: list[str]) -> Block:
    """Wrap a single top-level node as a Block."""
    start, end = _line_span(node, lines)
    return Block(
        kind=BLOCK_KIND_MAP.get(node.type, BlockKind.unknown),
        node=node,
        start_line=start,
        end_line=end,
    )


def front_matter_block(front_matter: FrontMatter) -> Block:
    return Block(
        kind=BlockKind.front_matter,
        node=None,
        start_line=1,
        end_line=front_matter.line_count,
        raw=front_matter.raw,
    )


def tree_to_blocks(
    tree: SyntaxTreeNode,
    lines: list[str],
    front_matter: Optional[FrontMatter] = None,
    ) -> list[Block]:
    """Convert the root's children into Blocks in tree order."""
    blocks: list[Block] = []
    if front_matter is not None:
        blocks.append(front_matter_block(front_matter))

    for node in tree.children:
        if node.type in FLATTEN_TYPES:
            blocks.extend(node_to_block(child, lines) for child in node.children)
        else:
            blocks.append(node_to_block(node, lines))

    return blocks
