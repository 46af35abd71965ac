"""Per-document analysis: parse tree, statement sequence, and signature cache"""

import logging
from typing import Any, Optional

from markdown_it import MarkdownIt

from mdmerge.core.extract.blocks import tree_to_blocks
from mdmerge.core.extract.freeze import DEFAULT_FREEZE_TOKEN, extract_freeze_blocks, integrate_statements
from mdmerge.core.models import FreezeBlock, Statement
from mdmerge.core.parse import make_parser, parse_tree, split_front_matter
from mdmerge.core.signature import Signature, SignatureGenerator, compute_signature
from mdmerge.errors import ParseError


LOGGER = logging.getLogger(__name__)


class FileAnalysis:
    """Everything the merge needs to know about one Markdown document.

    Built once per document per merge. The parser may be injected; otherwise
    one is made from `options` (see make_parser).
    """

    def __init__(
        self,
        source: str,
        freeze_token: str = DEFAULT_FREEZE_TOKEN,
        signature_generator: Optional[SignatureGenerator] = None,
        parser: Optional[MarkdownIt] = None,
        options: Optional[dict[str, Any]] = None,
        ):
        if not isinstance(source, str):
            raise ParseError(f"Markdown source must be a string, got {type(source).__name__}")

        self.source = source
        self.freeze_token = freeze_token
        self.signature_generator = signature_generator
        self.lines = source.split('\n')

        try:
            md = parser or make_parser(options)
            self.front_matter = split_front_matter(source)
            self.tree = parse_tree(md, source, self.front_matter)
        except Exception as e:
            raise ParseError(f"Failed to parse markdown: {e}") from e

        blocks = tree_to_blocks(self.tree, self.lines, self.front_matter)
        self.freeze_blocks = extract_freeze_blocks(self.lines, freeze_token)
        self.statements: list[Statement] = integrate_statements(blocks, self.freeze_blocks)
        self._signatures = [self.generate_signature(s) for s in self.statements]
        LOGGER.debug(
            "Analyzed %d statement(s), %d freeze block(s)",
            len(self.statements), len(self.freeze_blocks),
        )

    def __len__(self) -> int:
        return len(self.statements)

    @property
    def valid(self) -> bool:
        """True once constructed; unparseable sources raise instead."""
        return True

    def generate_signature(self, stmt: Statement) -> Optional[Signature]:
        return compute_signature(stmt, self.signature_generator)

    def signature_at(self, index: int) -> Optional[Signature]:
        """Cached signature of statement `index` (0-based); None when out of range."""
        if index < 0 or index >= len(self._signatures):
            return None
        return self._signatures[index]

    def line_at(self, number: int) -> Optional[str]:
        """Raw line `number` (1-based), or None when out of range."""
        if number < 1 or number > len(self.lines):
            return None
        return self.lines[number - 1]

    def normalized_line(self, number: int) -> Optional[str]:
        line = self.line_at(number)
        return line.strip() if line is not None else None

    def source_range(self, start_line: int, end_line: int) -> str:
        """Lines start_line..end_line (1-based, inclusive) joined with newlines; '' if invalid."""
        if start_line < 1 or end_line < start_line:
            return ''
        return '\n'.join(self.lines[start_line - 1:end_line])

    def in_freeze_block(self, number: int) -> bool:
        return self.freeze_block_at(number) is not None

    def freeze_block_at(self, number: int) -> Optional[FreezeBlock]:
        """Freeze block whose span (markers included) contains line `number`."""
        for block in self.freeze_blocks:
            if block.contains(number):
                return block
        return None

    def frozen_within(self, stmt: Statement) -> list[FreezeBlock]:
        """Outermost freeze blocks carried by stmt: itself, or those nested in its span."""
        if isinstance(stmt, FreezeBlock):
            return [stmt]
        if stmt is None or not stmt.has_span:
            return []
        inner = [fb for fb in self.freeze_blocks if stmt.start_line <= fb.start_line and fb.end_line <= stmt.end_line]
        return [fb for fb in inner if not any(o is not fb and o.covers(fb.start_line, fb.end_line) for o in inner)]

    def statement_source(self, stmt: Statement) -> str:
        """Original text of a statement, or a canonical rendering when it has no span."""
        if isinstance(stmt, FreezeBlock):
            return stmt.full_text
        if stmt.has_span:
            return self.source_range(stmt.start_line, stmt.end_line)
        return stmt.render()
