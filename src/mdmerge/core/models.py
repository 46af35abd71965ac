"""Data models for the analyse, align, resolve and merge pipeline"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from markdown_it.tree import SyntaxTreeNode
from pydantic import BaseModel

from mdmerge.core.utils.hashing import short_hash
from mdmerge.core.utils.tokens import fence_language, heading_level, node_text, normalize_ws


class BlockKind(str, Enum):
    """Closed set of top-level block kinds the merge engine distinguishes"""
    heading = "heading"
    paragraph = "paragraph"
    code_block = "code_block"
    list = "list"
    block_quote = "block_quote"
    thematic_break = "thematic_break"
    html_block = "html_block"
    table = "table"
    footnote_definition = "footnote_definition"
    front_matter = "front_matter"
    freeze_block = "freeze_block"
    unknown = "unknown"


class Preference(str, Enum):
    """Which side wins when a matched pair differs"""
    template = "template"
    destination = "destination"


class EntryType(str, Enum):
    match = "match"
    template_only = "template_only"
    dest_only = "dest_only"


class Decision(str, Enum):
    """Why a resolved entry's text was chosen (or dropped)"""
    frozen = "frozen"
    template = "template"
    destination = "destination"
    template_only = "template_only"
    destination_only = "destination_only"
    skipped = "skipped"


@dataclass(eq=False)
class Block:
    """A top-level parsed block: a read-only view over one SyntaxTreeNode.

    Lines are 1-indexed and inclusive. `node` is borrowed from the document's
    tree and never modified; front matter has no node and carries its YAML
    text in `raw`.
    """
    kind:       BlockKind
    node:       Optional[SyntaxTreeNode]
    start_line: Optional[int]
    end_line:   Optional[int]
    raw:        str = ""

    @property
    def node_type(self) -> str:
        return self.node.type if self.node is not None else self.kind.value

    @property
    def has_span(self) -> bool:
        return self.start_line is not None and self.end_line is not None

    @property
    def text(self) -> str:
        """Literal text and inline code of the block, formatting ignored."""
        if self.node is None:
            return self.raw
        return node_text(self.node)

    @property
    def heading_level(self) -> Optional[int]:
        return heading_level(self.node) if self.node is not None else None

    @property
    def heading_text(self) -> str:
        return normalize_ws(self.text)

    @property
    def fence_language(self) -> Optional[str]:
        return fence_language(self.node) if self.node is not None else None

    @property
    def code_body(self) -> str:
        return self.node.content if self.node is not None else ""

    @property
    def html(self) -> str:
        return self.node.content if self.node is not None else ""

    @property
    def ordered(self) -> bool:
        return self.node is not None and self.node.type == 'ordered_list'

    @property
    def items(self) -> list[SyntaxTreeNode]:
        if self.node is None:
            return []
        return [c for c in self.node.children if c.type == 'list_item']

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def rows(self) -> list[SyntaxTreeNode]:
        if self.node is None:
            return []
        return [n for n in self.node.walk() if n.type == 'tr']

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def header_cells(self) -> list[str]:
        """Normalized text of each header cell, left to right."""
        rows = self.rows
        if not rows:
            return []
        return [normalize_ws(node_text(cell)) for cell in rows[0].children]

    @property
    def footnote_label(self) -> Optional[str]:
        if self.node is None:
            return None
        return self.node.meta.get('label')

    def render(self) -> str:
        """Canonical markdown for a block that has no source span to copy."""
        kind = self.kind
        if kind == BlockKind.heading:
            return f"{'#' * (self.heading_level or 1)} {self.heading_text}"
        if kind == BlockKind.code_block:
            fence = self.fence_language or ''
            body = self.code_body.rstrip('\n')
            return f"```{fence}\n{body}\n```"
        if kind == BlockKind.thematic_break:
            return "---"
        if kind == BlockKind.html_block:
            return self.html.rstrip('\n')
        if kind == BlockKind.front_matter:
            return f"---\n{self.raw}\n---"
        if kind == BlockKind.list:
            lines = []
            for i, item in enumerate(self.items, start=1):
                bullet = f"{i}." if self.ordered else "-"
                lines.append(f"{bullet} {normalize_ws(node_text(item))}")
            return '\n'.join(lines)
        if kind == BlockKind.block_quote:
            return '\n'.join(f"> {line}" for line in self.text.splitlines())
        if kind == BlockKind.table:
            rows = [[normalize_ws(node_text(c)) for c in row.children] for row in self.rows]
            if not rows:
                return ""
            out = ["| " + " | ".join(rows[0]) + " |", "|" + "---|" * len(rows[0])]
            out.extend("| " + " | ".join(r) + " |" for r in rows[1:])
            return '\n'.join(out)
        if kind == BlockKind.footnote_definition:
            return f"[^{self.footnote_label}]: {normalize_ws(self.text)}"
        return self.text

    def __repr__(self) -> str:
        return f"Block({self.kind.value}, {self.start_line}-{self.end_line})"


@dataclass(frozen=True)
class FreezeBlock:
    """A verbatim span between paired freeze/unfreeze marker comments."""
    start_line:   int
    end_line:     int
    content:      str           # text strictly between the markers
    full_text:    str           # source span, markers included
    start_marker: str
    end_marker:   str
    reason:       Optional[str] = None

    kind = BlockKind.freeze_block

    @property
    def has_span(self) -> bool:
        return True

    @property
    def signature(self) -> tuple:
        return ("freeze_block", short_hash(self.content.strip()))

    def contains(self, line: int) -> bool:
        return self.start_line <= line <= self.end_line

    def covers(self, start_line: int, end_line: int) -> bool:
        return self.start_line <= start_line and end_line <= self.end_line


Statement = Union[Block, FreezeBlock]


@dataclass
class AlignmentEntry:
    """One row of the template/destination correspondence."""
    type:           EntryType
    template_node:  Optional[Statement] = None
    dest_node:      Optional[Statement] = None
    template_index: Optional[int] = None
    dest_index:     Optional[int] = None


@dataclass(frozen=True)
class Resolution:
    source:   Optional[Preference]
    decision: Decision
    text:     Optional[str]


class FrozenBlockInfo(BaseModel):
    """Audit record of a freeze block carried into the merged output."""
    start_line: int
    end_line:   int
    reason:     Optional[str] = None
    side:       Preference = Preference.destination


class MergeReport(BaseModel):
    """Serializable summary of a merge, without the merged text."""
    success:       bool
    frozen_blocks: list[FrozenBlockInfo] = []
    stats:         dict[str, Any] = {}


@dataclass
class MergeResult:
    content:       str
    success:       bool = True
    frozen_blocks: list[FrozenBlockInfo] = field(default_factory=list)
    stats:         dict[str, Any] = field(default_factory=dict)

    def to_report(self) -> MergeReport:
        return MergeReport(success=self.success, frozen_blocks=self.frozen_blocks, stats=self.stats)
