"""Unit tests for core/extract/freeze.py"""

from mdmerge.core.extract.freeze import extract_freeze_blocks, integrate_statements, marker_pattern
from mdmerge.core.models import Block, BlockKind, FreezeBlock


def _lines(text: str) -> list[str]:
    return text.split("\n")


def _block(start: int, end: int) -> Block:
    return Block(kind=BlockKind.paragraph, node=None, start_line=start, end_line=end)


def test_marker_pattern_matches_freeze_with_reason():
    """The freeze marker captures trailing free text as the reason."""
    m = marker_pattern("merge").match("<!-- merge:freeze Manual TOC -->")
    assert m.group(1) == "freeze"
    assert m.group(2).strip() == "Manual TOC"


def test_marker_pattern_token_is_literal():
    """Regex metacharacters in the token are matched literally."""
    pattern = marker_pattern("a.b")
    assert pattern.match("<!-- a.b:freeze -->")
    assert not pattern.match("<!-- axb:freeze -->")


def test_marker_must_be_on_its_own_line():
    """A marker embedded in prose is not a directive."""
    assert not marker_pattern("merge").match("text <!-- merge:freeze -->")


def test_extract_single_block():
    """A freeze/unfreeze pair yields one block spanning both marker lines."""
    lines = _lines("# Title\n\n<!-- merge:freeze -->\n## Frozen\n<!-- merge:unfreeze -->\n")
    blocks = extract_freeze_blocks(lines, "merge")
    assert len(blocks) == 1
    fb = blocks[0]
    assert (fb.start_line, fb.end_line) == (3, 5)
    assert fb.content == "## Frozen"
    assert fb.full_text == "<!-- merge:freeze -->\n## Frozen\n<!-- merge:unfreeze -->"
    assert fb.start_marker == "<!-- merge:freeze -->"
    assert fb.end_marker == "<!-- merge:unfreeze -->"
    assert fb.reason is None


def test_extract_reason_trimmed():
    """The reason is captured with surrounding whitespace removed."""
    lines = _lines("<!-- merge:freeze   Manual TOC  -->\n- [Intro](#intro)\n<!-- merge:unfreeze -->")
    assert extract_freeze_blocks(lines, "merge")[0].reason == "Manual TOC"


def test_extract_empty_block():
    """Adjacent markers produce a block with empty content."""
    blocks = extract_freeze_blocks(_lines("<!-- merge:freeze -->\n<!-- merge:unfreeze -->\n"), "merge")
    assert len(blocks) == 1
    assert blocks[0].content == ""


def test_unmatched_unfreeze_ignored():
    """An unfreeze with no open freeze produces nothing."""
    lines = _lines("# Heading\n\n<!-- merge:unfreeze -->\n\nContent\n")
    assert extract_freeze_blocks(lines, "merge") == []


def test_unclosed_freeze_dropped():
    """A freeze never closed produces nothing."""
    lines = _lines("# Heading\n\n<!-- merge:freeze -->\n\nContent without close\n")
    assert extract_freeze_blocks(lines, "merge") == []


def test_other_token_ignored():
    """Markers for a different token are not recognised."""
    lines = _lines("<!-- my-token:freeze -->\nx\n<!-- my-token:unfreeze -->")
    assert extract_freeze_blocks(lines, "merge") == []
    assert len(extract_freeze_blocks(lines, "my-token")) == 1


def test_nested_blocks_pair_like_brackets():
    """Nested markers pair innermost first; output is sorted by start line."""
    lines = _lines(
        "<!-- merge:freeze outer -->\n"
        "<!-- merge:freeze inner -->\n"
        "x\n"
        "<!-- merge:unfreeze -->\n"
        "<!-- merge:unfreeze -->"
    )
    blocks = extract_freeze_blocks(lines, "merge")
    assert [(b.start_line, b.end_line, b.reason) for b in blocks] == [(1, 5, "outer"), (2, 4, "inner")]


def test_integrate_orders_and_suppresses():
    """Freeze blocks are slotted by line; blocks inside a freeze span are dropped."""
    fb = FreezeBlock(start_line=3, end_line=6, content="", full_text="", start_marker="", end_marker="")
    before, inside, after = _block(1, 1), _block(4, 5), _block(8, 8)
    statements = integrate_statements([before, inside, after], [fb])
    assert statements == [before, fb, after]


def test_integrate_keeps_partial_overlap():
    """A block only partly inside a freeze span is kept."""
    fb = FreezeBlock(start_line=3, end_line=5, content="", full_text="", start_marker="", end_marker="")
    straddling = _block(4, 7)
    assert integrate_statements([straddling], [fb]) == [fb, straddling]


def test_integrate_trailing_and_leading_freeze():
    """Freeze blocks before the first and after the last block are both placed."""
    first = FreezeBlock(start_line=1, end_line=3, content="", full_text="", start_marker="", end_marker="")
    last = FreezeBlock(start_line=7, end_line=9, content="", full_text="", start_marker="", end_marker="")
    middle = _block(5, 5)
    assert integrate_statements([middle], [first, last]) == [first, middle, last]


def test_integrate_nested_freeze_uses_outer():
    """Only the outermost of nested freeze blocks enters the sequence."""
    outer = FreezeBlock(start_line=1, end_line=5, content="", full_text="", start_marker="", end_marker="")
    inner = FreezeBlock(start_line=2, end_line=4, content="", full_text="", start_marker="", end_marker="")
    assert integrate_statements([], [outer, inner]) == [outer]


def test_directive_must_end_at_word_boundary():
    """A directive followed by more name characters is not a marker."""
    pattern = marker_pattern("merge")
    assert not pattern.match("<!-- merge:freeze-now -->")
    assert not pattern.match("<!-- merge:unfreezed -->")
    assert pattern.match("<!-- merge:freeze-->")


def test_hyphenated_directive_opens_no_block():
    lines = _lines("<!-- merge:freeze-now -->\nx\n<!-- merge:unfreeze -->")
    assert extract_freeze_blocks(lines, "merge") == []


def test_extract_crlf_markers():
    """Carriage returns stay in the captured text so it round-trips byte for byte."""
    lines = _lines("<!-- merge:freeze why -->\r\nkept\r\n<!-- merge:unfreeze -->\r\n")
    fb = extract_freeze_blocks(lines, "merge")[0]
    assert fb.reason == "why"
    assert fb.full_text == "<!-- merge:freeze why -->\r\nkept\r\n<!-- merge:unfreeze -->\r"


def test_integrate_drops_freeze_inside_block():
    """A freeze span nested in a parsed block travels with that block only."""
    fb = FreezeBlock(start_line=2, end_line=4, content="", full_text="", start_marker="", end_marker="")
    enclosing = _block(1, 4)
    after = _block(6, 6)
    assert integrate_statements([enclosing, after], [fb]) == [enclosing, after]
