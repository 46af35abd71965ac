"""Structural smart merging of Markdown documents"""

from mdmerge.core.align import FileAligner
from mdmerge.core.analysis import FileAnalysis
from mdmerge.core.extract.freeze import DEFAULT_FREEZE_TOKEN
from mdmerge.core.merge import SmartMerger, merge_documents
from mdmerge.core.models import FreezeBlock, MergeResult, Preference
from mdmerge.core.refine import TableMatchRefiner
from mdmerge.core.resolve import ConflictResolver
from mdmerge.core.signature import FALLTHROUGH
from mdmerge.errors import DestinationParseError, MergeError, ParseError, TemplateParseError

__version__ = "0.1.0"

__all__ = [
    "ConflictResolver",
    "DEFAULT_FREEZE_TOKEN",
    "DestinationParseError",
    "FALLTHROUGH",
    "FileAligner",
    "FileAnalysis",
    "FreezeBlock",
    "MergeError",
    "MergeResult",
    "ParseError",
    "Preference",
    "SmartMerger",
    "TableMatchRefiner",
    "TemplateParseError",
    "merge_documents",
]
