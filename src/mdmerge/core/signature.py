"""Block signatures: the equality keys used to match blocks across documents.

A signature is a tuple whose first item names the block kind. Two blocks
match only when their signatures are equal; a block whose signature is None
never matches anything.

Callers may pass a signature generator that sees each parsed Block first. It
answers with one of three shapes:

- a tuple: use it as the signature
- None: the block is unmatchable
- FALLTHROUGH: no opinion, compute the built-in signature

Freeze blocks are never offered to the generator.
"""

from enum import Enum
from typing import Callable, Optional, Union

from mdmerge.core.models import Block, BlockKind, FreezeBlock, Statement
from mdmerge.core.utils.hashing import short_hash


class Override(Enum):
    FALLTHROUGH = "fallthrough"


FALLTHROUGH = Override.FALLTHROUGH

Signature = tuple
SignatureGenerator = Callable[[Block], Union[Signature, None, Override]]


def _heading(block: Block) -> Signature:
    return ("heading", block.heading_level, block.heading_text)


def _paragraph(block: Block) -> Signature:
    return ("paragraph", short_hash(block.text, 32))


def _code_block(block: Block) -> Signature:
    return ("code_block", block.fence_language, short_hash(block.code_body))


def _list(block: Block) -> Signature:
    return ("list", "ordered" if block.ordered else "bullet", block.item_count)


def _block_quote(block: Block) -> Signature:
    return ("block_quote", short_hash(block.text))


def _thematic_break(block: Block) -> Signature:
    return ("thematic_break",)


def _html_block(block: Block) -> Signature:
    return ("html_block", short_hash(block.html))


def _table(block: Block) -> Signature:
    return ("table", block.row_count, short_hash("|".join(block.header_cells)))


def _footnote(block: Block) -> Signature:
    return ("footnote_definition", block.footnote_label)


def _front_matter(block: Block) -> Signature:
    return ("front_matter",)


DEFAULT_SIGNATURES: dict[BlockKind, Callable[[Block], Signature]] = {
    BlockKind.heading:             _heading,
    BlockKind.paragraph:           _paragraph,
    BlockKind.code_block:          _code_block,
    BlockKind.list:                _list,
    BlockKind.block_quote:         _block_quote,
    BlockKind.thematic_break:      _thematic_break,
    BlockKind.html_block:          _html_block,
    BlockKind.table:               _table,
    BlockKind.footnote_definition: _footnote,
    BlockKind.front_matter:        _front_matter,
}


def default_signature(block: Block) -> Signature:
    """Built-in signature for a parsed block."""
    compute = DEFAULT_SIGNATURES.get(block.kind)
    if compute is None:
        return ("unknown", block.node_type, block.start_line)
    return compute(block)


def compute_signature(stmt: Statement, generator: Optional[SignatureGenerator] = None) -> Optional[Signature]:
    """Return the signature of a statement, consulting generator first if given."""
    if isinstance(stmt, FreezeBlock):
        return stmt.signature
    if generator is not None:
        result = generator(stmt)
        if result is None:
            return None
        if isinstance(result, list):
            result = tuple(result)
        if isinstance(result, tuple):
            return result
        if result is not FALLTHROUGH:
            raise TypeError(
                f"signature generator must return a tuple, None, or FALLTHROUGH; got {type(result).__name__}"
            )
    return default_signature(stmt)
