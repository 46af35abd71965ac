"""Freeze marker scanning and statement sequence integration"""

import logging
import re

from mdmerge.core.models import Block, FreezeBlock, Statement


LOGGER = logging.getLogger(__name__)

DEFAULT_FREEZE_TOKEN = 'merge'


def marker_pattern(freeze_token: str) -> re.Pattern:
    """Regex matching a whole-line freeze or unfreeze comment for freeze_token."""
    return re.compile(
        r'^\s*<!--\s*' + re.escape(freeze_token) + r':(freeze|unfreeze)(?=\s|-->)(.*?)-->\s*$'
    )


def extract_freeze_blocks(lines: list[str], freeze_token: str = DEFAULT_FREEZE_TOKEN) -> list[FreezeBlock]:
    """Pair freeze/unfreeze markers in lines (0-indexed list) into FreezeBlocks.

    Markers pair like brackets: an unfreeze closes the most recent open
    freeze. Stray unfreezes and unclosed freezes are logged and ignored.
    """
    pattern = marker_pattern(freeze_token)
    stack: list[tuple[int, str]] = []   # (1-based line, reason)
    blocks: list[FreezeBlock] = []

    for number, line in enumerate(lines, start=1):
        m = pattern.match(line)
        if not m:
            continue
        directive, tail = m.group(1), m.group(2).strip()
        if directive == 'freeze':
            stack.append((number, tail))
            continue
        if not stack:
            LOGGER.debug("Ignoring unfreeze marker without matching freeze at line %d", number)
            continue
        start, reason = stack.pop()
        blocks.append(FreezeBlock(
            start_line=start,
            end_line=number,
            content='\n'.join(lines[start:number - 1]),
            full_text='\n'.join(lines[start - 1:number]),
            start_marker=lines[start - 1],
            end_marker=line,
            reason=reason or None,
        ))

    for start, _ in stack:
        LOGGER.debug("Dropping unclosed freeze marker at line %d", start)

    return sorted(blocks, key=lambda b: b.start_line)


def _encloses(block: Block, fb: FreezeBlock) -> bool:
    return block.has_span and block.start_line <= fb.start_line and fb.end_line <= block.end_line


def integrate_statements(blocks: list[Block], freeze_blocks: list[FreezeBlock]) -> list[Statement]:
    """Interleave parsed blocks and freeze blocks in line order.

    Blocks lying entirely inside a freeze span are represented only by the
    freeze block. A freeze block nested inside another is represented by the
    outer one, and one nested inside a parsed block (an indented marker pair
    in a list item, say) travels with that block's source text.
    """
    ordered = sorted(blocks, key=lambda b: b.start_line if b.start_line is not None else 0)
    kept = [
        block for block in ordered
        if not (block.has_span and any(fb.covers(block.start_line, block.end_line) for fb in freeze_blocks))
    ]
    pending = [
        fb for fb in freeze_blocks
        if not any(other is not fb and other.covers(fb.start_line, fb.end_line) for other in freeze_blocks)
        and not any(_encloses(block, fb) for block in kept)
    ]

    statements: list[Statement] = []
    for block in kept:
        if block.has_span:
            while pending and pending[0].start_line < block.start_line:
                statements.append(pending.pop(0))
        statements.append(block)

    statements.extend(pending)
    return statements
