"""Root test configuration: isolate each test from the caller's working directory"""

import pytest


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every test from a clean tmp directory so no stray .mdmerge.yaml or env var leaks in."""
    monkeypatch.chdir(tmp_path)
    for name in ("PREFERENCE", "ADD_TEMPLATE_ONLY_NODES", "FREEZE_TOKEN", "PARSER_PRESET",
                 "FUZZY_TABLES", "TABLE_MATCH_THRESHOLD"):
        monkeypatch.delenv(f"MDMERGE_{name}", raising=False)
