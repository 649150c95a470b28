from __future__ import annotations

from pathlib import Path

import pytest

from skimalens.core.exceptions import ParseError
from skimalens.core.loader import (
    determine_serialization,
    load_file,
    load_text,
    parse_content,
)
from skimalens.core.types import DataKind, SerializationKind
from skimalens.providers.claude.normalizer import normalize_claude_messages

CLAUDE_YAML = """\
uuid: conv-y
name: From YAML
created_at: "2025-03-01T00:00:00Z"
updated_at: "2025-03-01T00:00:00Z"
chat_messages:
  - uuid: y-1
    sender: human
    text: hello from yaml
    created_at: "2025-03-01T00:00:00Z"
"""


class TestDetermineSerialization:
    @pytest.mark.parametrize(
        "filename, expected",
        [
            ("a.json", SerializationKind.JSON),
            ("a.JSON", SerializationKind.JSON),
            ("a.yaml", SerializationKind.YAML),
            ("a.yml", SerializationKind.YAML),
        ],
    )
    def test_by_extension(self, filename, expected):
        assert determine_serialization(filename, "") is expected

    def test_sniffs_json(self):
        assert determine_serialization("paste", '{"a": 1}') is SerializationKind.JSON

    def test_sniffs_yaml(self):
        assert determine_serialization("paste", "a: 1\nb: 2") is SerializationKind.YAML

    def test_unparseable_defaults_to_json(self):
        assert determine_serialization("paste", "a: [1, 2") is SerializationKind.JSON


class TestParseContent:
    def test_invalid_json(self):
        with pytest.raises(ParseError) as exc_info:
            parse_content("{not json", SerializationKind.JSON)
        assert exc_info.value.message.startswith("Failed to parse JSON: ")
        assert exc_info.value.serialization == "json"

    def test_invalid_yaml(self):
        with pytest.raises(ParseError, match="Failed to parse YAML"):
            parse_content("a: [1, 2", SerializationKind.YAML)


class TestLoadText:
    def test_yaml_claude(self):
        parsed = load_text(CLAUDE_YAML, "export.yaml")
        assert parsed.kind is DataKind.CLAUDE_CONVERSATION
        assert parsed.record_count == 1
        assert parsed.metadata.file_size == len(CLAUDE_YAML.encode("utf-8"))

    def test_metadata(self):
        parsed = load_text("[1, 2]", "numbers.json")
        meta = parsed.metadata.to_dict()
        assert meta["filename"] == "numbers.json"
        assert meta["estimated_type"] == "generic-json"
        assert meta["record_count"] == 2
        assert "T" in meta["parse_time"]


class TestLoadFile:
    def test_claude_export(self, claude_file: Path):
        parsed = load_file(claude_file)
        assert parsed.kind is DataKind.CLAUDE_CONVERSATION
        assert parsed.record_count == 5
        assert parsed.metadata.file_size == claude_file.stat().st_size

    def test_chatgpt_export(self, chatgpt_file: Path):
        parsed = load_file(str(chatgpt_file))
        assert parsed.kind is DataKind.CHATGPT_CONVERSATION
        assert parsed.record_count == 6

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError, match="File not found"):
            load_file(tmp_path / "nope.json")

    def test_unsupported_extension(self, tmp_path: Path):
        path = tmp_path / "notes.txt"
        path.write_text("{}")
        with pytest.raises(ParseError, match="Unsupported file type"):
            load_file(path)

    def test_invalid_json_file(self, tmp_path: Path):
        path = tmp_path / "broken.json"
        path.write_text("[1, 2,")
        with pytest.raises(ParseError, match="Failed to parse JSON"):
            load_file(path)


class TestYamlTimestamps:
    def test_unquoted_timestamps_stay_strings(self):
        content = "created_at: 2025-03-01T09:00:00Z\nday: 2025-03-01\n"
        data = parse_content(content, SerializationKind.YAML)
        assert data == {"created_at": "2025-03-01T09:00:00Z", "day": "2025-03-01"}

    def test_other_scalars_still_resolve(self):
        content = "n: 3\nf: 1.5\nok: true\nnothing: null\n"
        data = parse_content(content, SerializationKind.YAML)
        assert data == {"n": 3, "f": 1.5, "ok": True, "nothing": None}

    def test_yaml_claude_timeline_is_chronological(self, claude_yaml_file: Path):
        parsed = load_file(claude_yaml_file)
        assert parsed.kind is DataKind.CLAUDE_CONVERSATION

        messages = normalize_claude_messages(parsed.raw)
        assert [m.id for m in messages] == ["m1", "m2"]
        assert all(m.create_time is not None for m in messages)
