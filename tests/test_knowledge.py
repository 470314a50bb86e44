"""Tests for ctxpack.knowledge -- Markdown parsing and directory loading."""

import logging

import pytest

from ctxpack.core.config import Config
from ctxpack.core.errors import ContextDirNotFound
from ctxpack.knowledge.loader import ContextLoader, ContextSources
from ctxpack.knowledge.parser import (
    extract_active_tasks,
    extract_bullet_items,
    extract_constitution_rules,
    parse_entry_blocks,
)


DECISIONS = (
    "# Decisions\n"
    "\n"
    "Preamble text that belongs to no entry.\n"
    "\n"
    "## [2026-02-19-120000] Use JWT for auth\n"
    "\n"
    "For stateless sessions.\n"
    "\n"
    "\n"
    "## [2026-02-18-093000] Keep a flat layout\n"
    "\n"
    "~~Superseded by [2026-02-19-120000] Use JWT for auth~~\n"
)


# ---------------------------------------------------------------------------
# parse_entry_blocks
# ---------------------------------------------------------------------------


class TestParseEntryBlocks:
    def test_headers(self):
        entries = parse_entry_blocks(DECISIONS)
        assert [e.title for e in entries] == ["Use JWT for auth", "Keep a flat layout"]
        assert entries[0].date == "2026-02-19"
        assert entries[0].timestamp == "2026-02-19-120000"
        assert entries[1].timestamp == "2026-02-18-093000"

    def test_block_lines_and_trailing_blanks_trimmed(self):
        first = parse_entry_blocks(DECISIONS)[0]
        assert first.lines == (
            "## [2026-02-19-120000] Use JWT for auth",
            "",
            "For stateless sessions.",
        )

    def test_superseded_detected(self):
        entries = parse_entry_blocks(DECISIONS)
        assert not entries[0].is_superseded
        assert entries[1].is_superseded

    def test_last_block_runs_to_end(self):
        last = parse_entry_blocks(DECISIONS)[-1]
        assert last.lines[-1].startswith("~~Superseded")

    def test_header_only_entry(self):
        entries = parse_entry_blocks("## [2026-01-01-000000] Lonely\n\n\n")
        assert entries[0].lines == ("## [2026-01-01-000000] Lonely",)

    def test_crlf(self):
        entries = parse_entry_blocks("## [2026-01-01-000000] A\r\nbody\r\n")
        assert entries[0].lines == ("## [2026-01-01-000000] A", "body")

    def test_malformed_headers_ignored(self):
        text = "## [2026-01-01] No time\n## 2026-01-01-000000 No brackets\n"
        assert parse_entry_blocks(text) == []

    def test_empty(self):
        assert parse_entry_blocks("") == []
        assert parse_entry_blocks("# Just a title\n") == []


# ---------------------------------------------------------------------------
# List extraction
# ---------------------------------------------------------------------------


class TestListExtraction:
    def test_active_tasks(self):
        text = (
            "# Tasks\n"
            "- [ ] First\n"
            "- [x] Done already\n"
            "    - [ ] Nested subtask\n"
            "<!-- - [ ] Commented task -->\n"
            "Plain line\n"
        )
        assert extract_active_tasks(text) == ["- [ ] First", "- [ ] Nested subtask"]

    def test_bullets_skip_checkboxes_and_comments(self):
        text = (
            "# Conventions\n"
            "- Use snake_case\n"
            "* Keep modules small\n"
            "- [ ] not a convention\n"
            "<!--\n"
            "- hidden\n"
            "-->\n"
            "---\n"
            "**bold line**\n"
            "-  Extra spaced  \n"
        )
        assert extract_bullet_items(text) == [
            "Use snake_case",
            "Keep modules small",
            "Extra spaced",
        ]

    def test_bullet_limit(self):
        text = "\n".join(f"- item {i}" for i in range(10))
        assert extract_bullet_items(text, limit=3) == ["item 0", "item 1", "item 2"]

    def test_constitution_rules(self):
        text = "# Constitution\n- [ ] Never commit secrets\n- [x] Tests pass\n- No force pushes\n"
        assert extract_constitution_rules(text) == [
            "Never commit secrets",
            "Tests pass",
            "No force pushes",
        ]


# ---------------------------------------------------------------------------
# ContextLoader
# ---------------------------------------------------------------------------


class TestContextLoader:
    def test_load(self, config, context_dir):
        sources = ContextLoader(config).load()

        assert sources.constitution == [
            "Never commit secrets",
            "Always run the tests before pushing",
        ]
        assert sources.tasks == [
            "- [ ] Implement hook scoring for the agent",
            "- [ ] Fix budget allocation in the packet",
        ]
        assert sources.conventions == ["Use snake_case for functions", "Keep modules small"]
        assert [d.title for d in sources.decisions] == [
            "Score entries by recency and relevance",
            "Use a flat list for decisions",
        ]
        assert [l.title for l in sources.learnings] == ["Hooks fail silently"]

    def test_read_order_only_existing_files(self, config, context_dir):
        sources = ContextLoader(config).load()
        assert sources.read_order == [
            str(context_dir / name)
            for name in (
                "CONSTITUTION.md",
                "TASKS.md",
                "CONVENTIONS.md",
                "DECISIONS.md",
                "LEARNINGS.md",
            )
        ]

    def test_custom_read_order(self, tmp_path, context_dir):
        cfg = Config(context_dir=context_dir, read_order=["LEARNINGS.md", "MISSING.md"])
        assert ContextLoader(cfg).load().read_order == [str(context_dir / "LEARNINGS.md")]

    def test_missing_files_are_empty(self, config, caplog):
        config.context_dir.mkdir(parents=True)
        with caplog.at_level(logging.DEBUG, logger="ctxpack"):
            sources = ContextLoader(config).load()
        assert sources == ContextSources()
        assert "absent" in caplog.text

    def test_missing_directory_raises(self, config):
        with pytest.raises(ContextDirNotFound, match="Context directory not found"):
            ContextLoader(config).load()

    def test_unreadable_file_is_absent(self, config, context_dir, caplog):
        (context_dir / "TASKS.md").write_bytes(b"\xff\xfe- [ ] bad bytes \x80\n")
        with caplog.at_level(logging.WARNING, logger="ctxpack"):
            sources = ContextLoader(config).load()
        assert sources.tasks == []
        assert "Could not read" in caplog.text
