"""Merge orchestration: analyse, align, resolve, and reassemble"""

import logging
import time
from typing import Any, Optional, Union

from markdown_it import MarkdownIt

from mdmerge.config import Settings
from mdmerge.core.align import FileAligner, MatchRefiner
from mdmerge.core.analysis import FileAnalysis
from mdmerge.core.extract.freeze import DEFAULT_FREEZE_TOKEN
from mdmerge.core.models import (
    AlignmentEntry,
    Decision,
    FrozenBlockInfo,
    MergeResult,
    Preference,
    Resolution,
    Statement,
)
from mdmerge.core.refine import TableMatchRefiner
from mdmerge.core.resolve import ConflictResolver
from mdmerge.core.signature import SignatureGenerator
from mdmerge.errors import DestinationParseError, ParseError, TemplateParseError


LOGGER = logging.getLogger(__name__)


def _preference(value: Union[str, Preference]) -> Preference:
    try:
        return Preference(value)
    except ValueError as e:
        raise ValueError(f"preference must be 'template' or 'destination', got {value!r}") from e


class SmartMerger:
    """Merge a template Markdown document into a destination document.

    Destination customizations survive by default; `preference="template"`
    lets template content win for matched blocks, and
    `add_template_only_nodes=True` carries over blocks the destination lacks.
    Freeze blocks are reproduced byte for byte whatever the preference.

    Both documents are analysed on construction, so parse failures surface
    here as TemplateParseError or DestinationParseError.
    """

    def __init__(
        self,
        template_content: str,
        dest_content: str,
        *,
        signature_generator: Optional[SignatureGenerator] = None,
        preference: Union[str, Preference] = Preference.destination,
        add_template_only_nodes: bool = False,
        freeze_token: str = DEFAULT_FREEZE_TOKEN,
        match_refiner: Optional[MatchRefiner] = None,
        options: Optional[dict[str, Any]] = None,
        parser: Optional[MarkdownIt] = None,
        ):
        self.preference = _preference(preference)
        self.add_template_only_nodes = add_template_only_nodes
        self.freeze_token = freeze_token
        self.signature_generator = signature_generator
        self.match_refiner = match_refiner
        self.options = options or {}
        self.parser = parser

        self.template_analysis = self._analyze(template_content, TemplateParseError)
        self.dest_analysis = self._analyze(dest_content, DestinationParseError)
        self.aligner = FileAligner(self.template_analysis, self.dest_analysis, match_refiner)
        self.resolver = ConflictResolver(
            self.preference, add_template_only_nodes, self.template_analysis, self.dest_analysis,
        )

    @classmethod
    def from_settings(cls, template_content: str, dest_content: str, settings: Settings, **kwargs) -> "SmartMerger":
        """Build a merger from loaded Settings; keyword arguments take precedence."""
        params: dict[str, Any] = {
            "preference": settings.preference,
            "add_template_only_nodes": settings.add_template_only_nodes,
            "freeze_token": settings.freeze_token,
            "options": {"preset": settings.parser_preset},
        }
        if settings.fuzzy_tables:
            params["match_refiner"] = TableMatchRefiner(settings.table_match_threshold)
        params.update(kwargs)
        return cls(template_content, dest_content, **params)

    def _analyze(self, content: str, error_class: type[ParseError]) -> FileAnalysis:
        try:
            return FileAnalysis(
                content,
                freeze_token=self.freeze_token,
                signature_generator=self.signature_generator,
                parser=self.parser,
                options=self.options,
            )
        except ParseError as e:
            raise error_class(str(e)) from e

    def merge(self) -> MergeResult:
        """Run the merge and return content, frozen-block inventory, and stats."""
        started = time.perf_counter()
        alignment = self.aligner.align()

        pieces: list[tuple[str, FileAnalysis, Optional[int], Optional[Statement]]] = []
        frozen: list[FrozenBlockInfo] = []
        stats = {"nodes_modified": 0, "nodes_added": 0, "nodes_skipped": 0, "frozen_count": 0}

        for entry in alignment:
            resolution = self.resolver.resolve(entry)
            self._count(entry, resolution, stats)
            if resolution.text is None:
                continue
            analysis, index, stmt = self._origin(entry, resolution)
            pieces.append((resolution.text, analysis, index, stmt))
            if resolution.decision == Decision.frozen:
                frozen.extend(
                    FrozenBlockInfo(start_line=fb.start_line, end_line=fb.end_line, reason=fb.reason, side=resolution.source)
                    for fb in analysis.frozen_within(stmt)
                )

        content = self._assemble(pieces)
        stats["frozen_count"] = len(frozen)
        stats["merge_time_ms"] = round((time.perf_counter() - started) * 1000, 3)
        LOGGER.debug("Merged %d entries: %s", len(alignment), stats)
        return MergeResult(content=content, success=True, frozen_blocks=frozen, stats=stats)

    def merge_as_string(self) -> str:
        return self.merge().content

    def _count(self, entry: AlignmentEntry, resolution: Resolution, stats: dict) -> None:
        if resolution.decision == Decision.template:
            if resolution.text != self.dest_analysis.statement_source(entry.dest_node):
                stats["nodes_modified"] += 1
        elif resolution.decision == Decision.template_only:
            stats["nodes_added"] += 1
        elif resolution.decision == Decision.skipped:
            stats["nodes_skipped"] += 1

    def _origin(self, entry: AlignmentEntry, resolution: Resolution):
        """Return (analysis, statement index, statement) the resolved text came from."""
        if resolution.source == Preference.template:
            return self.template_analysis, entry.template_index, entry.template_node
        return self.dest_analysis, entry.dest_index, entry.dest_node

    def _assemble(self, pieces) -> str:
        """Join resolved texts, one blank line apart.

        Neighbours that were already adjacent in the same source keep the
        original gap between them (blank runs collapsed), so tight constructs
        survive. Text before a source's first statement and after its last
        (link reference definitions, say) opens and closes the output
        wherever that statement was placed.
        """
        if not pieces:
            return ''

        out: list[str] = []
        head = next((p for p in pieces if p[2] == 0 and p[3].has_span), None)
        if head is not None:
            _, analysis, _, stmt = head
            out.append(_edge(analysis.lines[:stmt.start_line - 1]))
        out.append(pieces[0][0])

        for prev, cur in zip(pieces, pieces[1:]):
            p_text, p_analysis, p_index, p_stmt = prev
            text, c_analysis, c_index, c_stmt = cur
            if c_analysis is p_analysis and c_index == p_index + 1 and p_stmt.has_span and c_stmt.has_span:
                gap = _collapse(p_analysis.lines[p_stmt.end_line:c_stmt.start_line - 1])
                out.append('\n' + '\n'.join(gap) + '\n' if gap else '\n')
            else:
                out.append('\n' + _blank_for(p_text) + '\n')
            out.append(text)

        tail = next((p for p in reversed(pieces) if p[2] == len(p[1]) - 1 and p[3].has_span), None)
        if tail is not None:
            _, analysis, _, stmt = tail
            out.append(_edge(analysis.lines[stmt.end_line:], trailing=True))

        return ''.join(out).strip('\n') + '\n'


def _is_blank(line: str) -> bool:
    return not line.strip()


def _blank_for(text: str) -> str:
    """Blank line matching the line ending of text ('\\r' for CRLF sources)."""
    return '\r' if text.endswith('\r') else ''


def _collapse(lines: list[str]) -> list[str]:
    """Squeeze each run of blank lines to its first line, kept as written."""
    gap: list[str] = []
    for line in lines:
        if _is_blank(line) and gap and _is_blank(gap[-1]):
            continue
        gap.append(line)
    return gap


def _edge(lines: list[str], trailing: bool = False) -> str:
    """Text outside the first/last statement, blank runs squeezed."""
    gap = _collapse(lines)
    while gap and _is_blank(gap[0]):
        gap.pop(0)
    while gap and _is_blank(gap[-1]):
        gap.pop()
    if not gap:
        return ''
    text = '\n'.join(gap)
    blank = '\n' + _blank_for(text) + '\n'
    return blank + text if trailing else text + blank



def merge_documents(template_content: str, dest_content: str, **kwargs) -> MergeResult:
    """One-shot convenience wrapper around SmartMerger(...).merge()."""
    return SmartMerger(template_content, dest_content, **kwargs).merge()
