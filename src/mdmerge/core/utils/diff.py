"""Line diffs between a destination document and its merged replacement"""

import difflib
from typing import NamedTuple


class DiffSummary(NamedTuple):
    added:     int
    deleted:   int
    unchanged: int

    @property
    def changed(self) -> bool:
        return bool(self.added or self.deleted)

    def __str__(self) -> str:
        return f"{self.added} added, {self.deleted} deleted"


def diff_summary(before: str, after: str) -> DiffSummary:
    """Count lines added, deleted and kept going from before to after."""
    matcher = difflib.SequenceMatcher(None, before.splitlines(), after.splitlines(), autojunk=False)
    added = deleted = unchanged = 0
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            unchanged += i2 - i1
            continue
        deleted += i2 - i1
        added += j2 - j1
    return DiffSummary(added, deleted, unchanged)


def unified_diff(before: str, after: str, path: str = "destination", context: int = 3) -> str:
    """Unified diff of a merge against its destination, labelled with path; '' when unchanged."""
    return ''.join(difflib.unified_diff(
        before.splitlines(keepends=True),
        after.splitlines(keepends=True),
        fromfile=path,
        tofile=f"{path} (merged)",
        n=context,
    ))
