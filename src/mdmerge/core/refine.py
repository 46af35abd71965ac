"""Fuzzy pairing of tables left unmatched by exact signatures"""

import difflib
import logging

from mdmerge.core.analysis import FileAnalysis
from mdmerge.core.models import AlignmentEntry, Block, BlockKind


LOGGER = logging.getLogger(__name__)


def _is_table(stmt) -> bool:
    return isinstance(stmt, Block) and stmt.kind == BlockKind.table


def table_similarity(a: Block, b: Block, header_weight: float = 0.7) -> float:
    """Score in [0, 1] from header cell similarity and row count closeness."""
    header_a = [c.lower() for c in a.header_cells]
    header_b = [c.lower() for c in b.header_cells]
    header_score = difflib.SequenceMatcher(None, header_a, header_b).ratio()
    rows_a, rows_b = a.row_count, b.row_count
    row_score = min(rows_a, rows_b) / max(rows_a, rows_b) if max(rows_a, rows_b) else 1.0
    return header_weight * header_score + (1 - header_weight) * row_score


class TableMatchRefiner:
    """Match refiner that pairs tables whose headers are close enough.

    Tables whose body rows were added or whose header was lightly edited get
    different exact signatures; this pairs them back up so the preference
    decides their content. Candidates are taken greedily, best score first.
    """

    def __init__(self, threshold: float = 0.5):
        self.threshold = threshold

    def __call__(
        self,
        template_only: list[AlignmentEntry],
        dest_only: list[AlignmentEntry],
        template_analysis: FileAnalysis,
        dest_analysis: FileAnalysis,
        ) -> list[tuple[AlignmentEntry, AlignmentEntry]]:
        t_tables = [e for e in template_only if _is_table(e.template_node)]
        d_tables = [e for e in dest_only if _is_table(e.dest_node)]

        scored = []
        for ti, t_entry in enumerate(t_tables):
            for di, d_entry in enumerate(d_tables):
                score = table_similarity(t_entry.template_node, d_entry.dest_node)
                if score >= self.threshold:
                    scored.append((-score, ti, di))
        scored.sort()

        pairs = []
        used_t, used_d = set(), set()
        for neg_score, ti, di in scored:
            if ti in used_t or di in used_d:
                continue
            used_t.add(ti)
            used_d.add(di)
            pairs.append((t_tables[ti], d_tables[di]))
            LOGGER.debug(
                "Paired template table %s with destination table %s (score %.2f)",
                t_tables[ti].template_index, d_tables[di].dest_index, -neg_score,
            )
        return pairs
