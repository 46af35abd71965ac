"""Shared fixtures for core unit tests"""

import pytest
from markdown_it import MarkdownIt


SAMPLE_MD = """\
# Title

Intro text.

<!-- merge:freeze -->
## Custom Section

This content is frozen.
<!-- merge:unfreeze -->

## Regular Section

Not frozen.
"""

RICH_MD = """\
# Project

Intro paragraph with **bold** and `code`.

## Install

```bash
pip install project
```

- one
- two

1. first
2. second

> A quote.

---

| Name | Value |
|------|-------|
| a    | 1     |

<div>html</div>

<!-- merge:freeze Custom notes -->
Frozen text.
<!-- merge:unfreeze -->

Final paragraph.
"""


@pytest.fixture(name="parser")
def parser_fixture():
    return MarkdownIt("gfm-like", options_update={"linkify": False})


@pytest.fixture(name="sample_md")
def sample_md_fixture():
    return SAMPLE_MD


@pytest.fixture(name="rich_md")
def rich_md_fixture():
    return RICH_MD
