from __future__ import annotations

import json
import shutil
from pathlib import Path
from typing import Any

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"

CLAUDE_FIXTURE = FIXTURES_DIR / "claude_conversations.json"
CHATGPT_FIXTURE = FIXTURES_DIR / "chatgpt_conversations.json"

_ENV_VARS = (
    "SKIMALENS_EXPORT_DIR",
    "SKIMALENS_EXPORT_FORMAT",
    "SKIMALENS_FILENAME_FORMAT",
    "SKIMALENS_HIDE_DELETED",
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the CLI config at a file that does not exist yet."""
    path = tmp_path / "config" / "config.toml"
    monkeypatch.setenv("SKIMALENS_CONFIG", str(path))
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return path


@pytest.fixture()
def claude_conversations() -> list[dict[str, Any]]:
    return json.loads(CLAUDE_FIXTURE.read_text())


@pytest.fixture()
def claude_conversation(claude_conversations: list[dict[str, Any]]) -> dict[str, Any]:
    return claude_conversations[0]


@pytest.fixture()
def chatgpt_conversations() -> list[dict[str, Any]]:
    return json.loads(CHATGPT_FIXTURE.read_text())


@pytest.fixture()
def chatgpt_conversation(chatgpt_conversations: list[dict[str, Any]]) -> dict[str, Any]:
    return chatgpt_conversations[0]


@pytest.fixture()
def claude_file(tmp_path: Path) -> Path:
    path = tmp_path / "claude_export.json"
    shutil.copy(CLAUDE_FIXTURE, path)
    return path


@pytest.fixture()
def chatgpt_file(tmp_path: Path) -> Path:
    path = tmp_path / "chatgpt_export.json"
    shutil.copy(CHATGPT_FIXTURE, path)
    return path


def make_chatgpt_node(
    node_id: str,
    role: str | None = "user",
    parts: list[Any] | None = None,
    create_time: float | None = None,
) -> dict[str, Any]:
    """A mapping node whose message has the given author role and parts."""
    return {
        "id": node_id,
        "message": {
            "id": node_id,
            "author": {"role": role},
            "content": {"content_type": "text", "parts": parts or []},
            "create_time": create_time,
        },
        "parent": None,
        "children": [],
    }


@pytest.fixture()
def chatgpt_node():
    return make_chatgpt_node


CLAUDE_YAML_UNQUOTED = """\
uuid: conv-y
name: From YAML
created_at: 2025-03-01T09:00:00Z
updated_at: 2025-03-01T09:05:00Z
chat_messages:
  - uuid: m2
    sender: assistant
    text: Hello back
    created_at: 2025-03-01T09:00:30Z
  - uuid: m1
    sender: human
    text: Hello from YAML
    created_at: 2025-03-01T09:00:00Z
"""


@pytest.fixture()
def claude_yaml_file(tmp_path: Path) -> Path:
    """A Claude export whose timestamps are unquoted YAML scalars."""
    path = tmp_path / "claude_export.yaml"
    path.write_text(CLAUDE_YAML_UNQUOTED, encoding="utf-8")
    return path
