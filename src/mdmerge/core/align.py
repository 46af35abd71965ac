"""Signature-based alignment of two statement sequences"""

import logging
from collections import defaultdict
from typing import Callable, Optional

from mdmerge.core.analysis import FileAnalysis
from mdmerge.core.models import AlignmentEntry, EntryType


LOGGER = logging.getLogger(__name__)

# (template_only entries, dest_only entries, template analysis, dest analysis) -> pairs to match
MatchRefiner = Callable[
    [list[AlignmentEntry], list[AlignmentEntry], FileAnalysis, FileAnalysis],
    list[tuple[AlignmentEntry, AlignmentEntry]],
]


class FileAligner:
    """Pair template and destination statements with equal signatures.

    Duplicate signatures pair up in document order: the n-th destination
    occurrence takes the n-th remaining template occurrence.
    """

    def __init__(
        self,
        template_analysis: FileAnalysis,
        dest_analysis: FileAnalysis,
        match_refiner: Optional[MatchRefiner] = None,
        ):
        self.template_analysis = template_analysis
        self.dest_analysis = dest_analysis
        self.match_refiner = match_refiner

    def _signature_map(self) -> dict[tuple, list[int]]:
        sig_map: dict[tuple, list[int]] = defaultdict(list)
        for i in range(len(self.template_analysis)):
            sig = self.template_analysis.signature_at(i)
            if sig is not None:
                sig_map[sig].append(i)
        return sig_map

    def align(self) -> list[AlignmentEntry]:
        """Return match, template_only and dest_only entries in output order."""
        t_stmts = self.template_analysis.statements
        d_stmts = self.dest_analysis.statements
        sig_map = self._signature_map()
        consumed: set[int] = set()
        matches: list[AlignmentEntry] = []
        dest_only: list[AlignmentEntry] = []

        for d_idx, d_stmt in enumerate(d_stmts):
            sig = self.dest_analysis.signature_at(d_idx)
            candidates = sig_map.get(sig, []) if sig is not None else []
            if candidates:
                t_idx = candidates.pop(0)
                consumed.add(t_idx)
                matches.append(AlignmentEntry(
                    type=EntryType.match,
                    template_node=t_stmts[t_idx], dest_node=d_stmt,
                    template_index=t_idx, dest_index=d_idx,
                ))
            else:
                dest_only.append(AlignmentEntry(
                    type=EntryType.dest_only, dest_node=d_stmt, dest_index=d_idx,
                ))

        template_only = [
            AlignmentEntry(type=EntryType.template_only, template_node=stmt, template_index=t_idx)
            for t_idx, stmt in enumerate(t_stmts)
            if t_idx not in consumed
        ]

        if self.match_refiner is not None and template_only and dest_only:
            matches, template_only, dest_only = self._refine(matches, template_only, dest_only)

        LOGGER.debug(
            "Aligned %d match(es), %d template-only, %d dest-only",
            len(matches), len(template_only), len(dest_only),
        )
        return self._order(matches, template_only, dest_only)

    def _refine(self, matches, template_only, dest_only):
        """Let the match refiner promote leftover one-sided pairs to matches."""
        pairs = self.match_refiner(template_only, dest_only, self.template_analysis, self.dest_analysis)
        used_t, used_d = set(), set()
        for t_entry, d_entry in pairs:
            if id(t_entry) in used_t or id(d_entry) in used_d:
                continue
            used_t.add(id(t_entry))
            used_d.add(id(d_entry))
            matches.append(AlignmentEntry(
                type=EntryType.match,
                template_node=t_entry.template_node, dest_node=d_entry.dest_node,
                template_index=t_entry.template_index, dest_index=d_entry.dest_index,
            ))
        template_only = [e for e in template_only if id(e) not in used_t]
        dest_only = [e for e in dest_only if id(e) not in used_d]
        return matches, template_only, dest_only

    @staticmethod
    def _order(matches, template_only, dest_only) -> list[AlignmentEntry]:
        """Sort into template order, slotting dest-only entries after their
        nearest preceding matched destination neighbour (or first, if none).

        Keys: match (t, 0, d); template_only (t, 0, -1); dest_only (anchor, 1, d).
        """
        anchor_by_dest = {m.dest_index: m.template_index for m in matches}

        def anchor(d_idx: int) -> int:
            prior = [i for i in anchor_by_dest if i < d_idx]
            return anchor_by_dest[max(prior)] if prior else -1

        keyed = [((m.template_index, 0, m.dest_index), m) for m in matches]
        keyed += [((t.template_index, 0, -1), t) for t in template_only]
        keyed += [((anchor(d.dest_index), 1, d.dest_index), d) for d in dest_only]
        keyed.sort(key=lambda pair: pair[0])
        return [entry for _, entry in keyed]
