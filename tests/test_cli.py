from __future__ import annotations

import json
from pathlib import Path

import pytest

from skimalens.cli.app import main


def _run_failing(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


class TestNoCommand:
    def test_prints_banner_and_help(self, capsys):
        main([])
        out = capsys.readouterr().out
        assert "Claude and ChatGPT conversation viewer" in out
        assert "inspect" in out
        assert "export" in out


class TestInspect:
    def test_claude_file(self, claude_file: Path, capsys):
        main(["inspect", str(claude_file)])
        out = capsys.readouterr().out
        assert "claude-conversation" in out
        assert "Records:  5" in out
        assert "Conversations:  3" in out
        assert "Deleted:  1" in out

    def test_generic_file(self, tmp_path: Path, capsys):
        path = tmp_path / "numbers.json"
        path.write_text("[1, 2, 3]")
        main(["inspect", str(path)])
        out = capsys.readouterr().out
        assert "generic-json" in out
        assert "Records:  3" in out
        assert "Conversations" not in out

    def test_missing_file(self, tmp_path: Path, capsys):
        assert _run_failing(["inspect", str(tmp_path / "nope.json")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_invalid_json(self, tmp_path: Path, capsys):
        path = tmp_path / "broken.json"
        path.write_text("{")
        assert _run_failing(["inspect", str(path)]) == 1
        assert "Failed to parse JSON" in capsys.readouterr().err


class TestView:
    def test_lists_conversations(self, claude_file: Path, capsys):
        main(["view", str(claude_file)])
        out = capsys.readouterr().out
        assert "Conversations (2 of 3)" in out
        assert out.index("Trip planning") < out.index("Python help")
        assert "conv-b" not in out

    def test_show_deleted(self, claude_file: Path, capsys):
        main(["view", str(claude_file), "--show-deleted"])
        out = capsys.readouterr().out
        assert "Conversations (3 of 3)" in out
        assert "conv-b" in out

    def test_hide_deleted_from_env(self, claude_file: Path, capsys, monkeypatch):
        monkeypatch.setenv("SKIMALENS_HIDE_DELETED", "false")
        main(["view", str(claude_file)])
        assert "Conversations (3 of 3)" in capsys.readouterr().out

    def test_search_list(self, chatgpt_file: Path, capsys):
        main(["view", str(chatgpt_file), "--search", "recipe"])
        out = capsys.readouterr().out
        assert "Conversations (1 of 2)" in out
        assert "gpt-1" in out

    def test_timeline(self, claude_file: Path, capsys):
        main(["view", str(claude_file), "-c", "conv-a"])
        out = capsys.readouterr().out
        assert "Python help" in out
        assert "2 (1 human, 1 assistant)" in out
        assert "With feedback:  1" in out
        assert out.index("How do I filter a list") < out.index("Use a list comprehension.")

    def test_timeline_sender_filter(self, chatgpt_file: Path, capsys):
        main(["view", str(chatgpt_file), "-c", "gpt-1", "--sender", "assistant"])
        out = capsys.readouterr().out
        assert "An omelette." in out
        assert "What can I cook with eggs?" not in out

    def test_timeline_search(self, chatgpt_file: Path, capsys):
        main(["view", str(chatgpt_file), "-c", "gpt-1", "-s", "eggs"])
        out = capsys.readouterr().out
        assert 'Found 1 message(s) matching "eggs"' in out

    def test_single_conversation_shows_timeline(self, tmp_path: Path, claude_conversation, capsys):
        path = tmp_path / "single.json"
        path.write_text(json.dumps(claude_conversation))
        main(["view", str(path)])
        out = capsys.readouterr().out
        assert "Conversations (" not in out
        assert "Use a list comprehension." in out

    def test_unknown_conversation(self, claude_file: Path, capsys):
        assert _run_failing(["view", str(claude_file), "-c", "missing"]) == 1
        assert "No conversation with id missing" in capsys.readouterr().err

    def test_non_conversation_file(self, tmp_path: Path, capsys):
        path = tmp_path / "data.json"
        path.write_text('{"foo": "bar"}')
        assert _run_failing(["view", str(path)]) == 1
        assert "Unsupported data type for view: generic-json" in capsys.readouterr().err


class TestExport:
    def test_markdown_export(self, claude_file: Path, tmp_path: Path, capsys):
        out_dir = tmp_path / "md"
        main(["export", str(claude_file), "--out", str(out_dir)])

        out = capsys.readouterr().out
        assert "Detected data type:  claude-conversation" in out
        assert "Exported: Python-help.md" in out
        assert "Export completed successfully" in out
        assert sorted(p.name for p in out_dir.iterdir()) == [
            "Python-help.md",
            "Trip-planning.md",
            "untitled.md",
        ]

    def test_options_from_env(self, chatgpt_file: Path, tmp_path: Path, monkeypatch):
        out_dir = tmp_path / "from-env"
        monkeypatch.setenv("SKIMALENS_EXPORT_DIR", str(out_dir))
        monkeypatch.setenv("SKIMALENS_EXPORT_FORMAT", "json")
        main(["export", str(chatgpt_file), "--filename-format", "id"])
        assert sorted(p.name for p in out_dir.iterdir()) == ["gpt-1.json", "gpt-2.json"]

    def test_flags_override_config(self, chatgpt_file: Path, tmp_path: Path, isolated_config: Path):
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text('[export]\nformat = "json"\n')
        out_dir = tmp_path / "yaml"
        main(["export", str(chatgpt_file), "--out", str(out_dir), "--export-format", "yaml"])
        assert sorted(p.suffix for p in out_dir.iterdir()) == [".yaml", ".yaml"]

    def test_yaml_source(self, claude_yaml_file: Path, tmp_path: Path, capsys):
        out_dir = tmp_path / "from-yaml"
        main(
            ["export", str(claude_yaml_file), "--out", str(out_dir), "--export-format", "json"]
        )

        assert "Export completed successfully" in capsys.readouterr().out
        data = json.loads((out_dir / "From-YAML.json").read_text(encoding="utf-8"))
        assert [m["created_at"] for m in data["chat_messages"]] == [
            "2025-03-01T09:00:30Z",
            "2025-03-01T09:00:00Z",
        ]

    def test_yaml_source_markdown(self, claude_yaml_file: Path, tmp_path: Path):
        out_dir = tmp_path / "md"
        main(["export", str(claude_yaml_file), "--out", str(out_dir)])
        md = (out_dir / "From-YAML.md").read_text(encoding="utf-8")
        assert "## Assistant (03/01/2025, 09:00:30)" in md

    def test_invalid_conversation(self, tmp_path: Path, capsys):
        path = tmp_path / "chatgpt-broken.json"
        path.write_text('{"foo": "bar"}')
        assert _run_failing(["export", str(path), "--out", str(tmp_path / "out")]) == 1
        err = capsys.readouterr().err
        assert "Error during export: Invalid ChatGPT conversation format" in err

    def test_non_conversation_file(self, tmp_path: Path, capsys):
        path = tmp_path / "numbers.json"
        path.write_text("[1, 2]")
        assert _run_failing(["export", str(path)]) == 1
        assert "Unsupported data type for export: generic-json" in capsys.readouterr().err


class TestConfigCommands:
    def test_show_defaults(self, capsys):
        main(["config", "show"])
        out = capsys.readouterr().out
        assert "Configuration (defaults)" in out
        assert "Export format:  markdown" in out

    def test_path(self, isolated_config: Path, capsys):
        main(["config", "path"])
        assert capsys.readouterr().out.strip() == str(isolated_config)

    def test_init(self, isolated_config: Path, capsys):
        main(["config", "init"])
        assert isolated_config.exists()
        assert "Config written to" in capsys.readouterr().out

        main(["config", "init"])
        assert "Config already exists" in capsys.readouterr().out

    def test_init_force(self, isolated_config: Path, capsys, monkeypatch):
        main(["config", "init"])
        monkeypatch.setenv("SKIMALENS_EXPORT_FORMAT", "yaml")
        main(["config", "init", "--force"])
        assert 'format = "yaml"' in isolated_config.read_text()

    def test_config_without_subcommand(self):
        assert _run_failing(["config"]) == 0
