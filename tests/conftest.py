from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture
def ns_config() -> dict[str, Any]:
    return {
        "env": "test",
        "account_id": "1234567_SB1",
        "access_token": "token-123",
        "query_limit": 500,
        "timeout": 5,
    }


@pytest.fixture
def config_path(tmp_path: Path, ns_config: dict[str, Any], monkeypatch: pytest.MonkeyPatch) -> Path:
    """Write the config profile to disk and run from tmp_path so logs/ and data/ land there."""
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "config.json"
    path.write_text(json.dumps(ns_config))
    return path
