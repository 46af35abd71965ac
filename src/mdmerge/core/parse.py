"""Parser construction, front matter splitting, and markdown-it tree building"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml
from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode


FRONTMATTER_RE = re.compile(r'^---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|$)', re.DOTALL)
DEFAULT_PRESET = 'gfm-like'


@dataclass
class FrontMatter:
    """Leading YAML header: parsed mapping, raw YAML text, and lines occupied."""
    data:       dict[str, Any]
    raw:        str
    line_count: int


def make_parser(options: Optional[dict[str, Any]] = None) -> MarkdownIt:
    """Build a MarkdownIt instance from passthrough parser options.

    Recognised keys: `preset` (default gfm-like), `options_update` (merged over
    linkify=False), and `plugins`, a list of plugin callables or
    (plugin, kwargs) pairs handed to MarkdownIt.use.
    """
    options = options or {}
    preset = options.get('preset', DEFAULT_PRESET)
    options_update = {"linkify": False, **options.get('options_update', {})}
    try:
        md = MarkdownIt(preset, options_update=options_update)
    except KeyError as e:
        raise ValueError(f"Unknown parser preset: {preset!r}") from e
    for plugin in options.get('plugins', ()):
        if isinstance(plugin, tuple):
            md.use(plugin[0], **plugin[1])
        else:
            md.use(plugin)
    return md


def split_front_matter(text: str) -> Optional[FrontMatter]:
    """Return the leading YAML front matter of text, or None.

    A header whose YAML is not a mapping is left alone as ordinary markdown
    (a thematic break followed by a setext heading is valid CommonMark).
    """
    m = FRONTMATTER_RE.match(text)
    if not m:
        return None
    raw = m.group(1) or ''
    data: Any = {}
    if raw.strip():
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML front matter: {e}") from e
        if not isinstance(data, dict):
            return None
    matched = m.group(0)
    line_count = matched.count('\n') + (0 if matched.endswith('\n') else 1)
    return FrontMatter(data=data, raw=raw, line_count=line_count)


def parse_tree(md: MarkdownIt, text: str, front_matter: Optional[FrontMatter] = None) -> SyntaxTreeNode:
    """Parse text into a syntax tree whose line maps refer to the original text.

    Front matter lines are blanked rather than removed so that every map
    stays aligned with the source.
    """
    if front_matter is not None:
        body = text.split('\n', front_matter.line_count)
        rest = body[front_matter.line_count] if len(body) > front_matter.line_count else ''
        text = '\n' * front_matter.line_count + rest
    return SyntaxTreeNode(md.parse(text))


def read_document(path: Path) -> str:
    """Read a markdown file as UTF-8 text."""
    return path.read_text(encoding='utf-8')
