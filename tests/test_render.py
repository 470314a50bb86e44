"""Tests for ctxpack.render."""

import json

import pytest

from ctxpack.core.types import AssembledPacket
from ctxpack.render import render, render_json, render_markdown

STAMP = "2026-02-19T12:00:00Z"


@pytest.fixture
def packet():
    return AssembledPacket(
        budget=8000,
        instruction="Confirm context reading.",
        read_order=[".context/CONSTITUTION.md", ".context/TASKS.md"],
        constitution=["Never violate"],
        tasks=["- [ ] Do something"],
        conventions=["Use gofmt"],
        decisions=["## [2026-02-19-120000] Use JWT\n\nFor auth."],
        learnings=["## [2026-02-19-130000] Hooks fail silently\n\nCheck stderr."],
        summaries=["Old learning about paths"],
        tokens_used=2000,
    )


class TestRenderMarkdown:
    def test_sections(self, packet):
        out = render_markdown(packet, STAMP)
        for check in (
            "# Context Packet",
            f"Generated: {STAMP} | Budget: 8000 tokens | Used: ~2000",
            "## Read These Files (in order)",
            "1. .context/CONSTITUTION.md",
            "2. .context/TASKS.md",
            "## Constitution (NEVER VIOLATE)\n- Never violate",
            "## Current Tasks\n- [ ] Do something",
            "## Key Conventions\n- Use gofmt",
            "## Recent Decisions\n## [2026-02-19-120000] Use JWT",
            "## Key Learnings",
            "## Also Noted\n- Old learning about paths",
        ):
            assert check in out

    def test_instruction_last(self, packet):
        assert render_markdown(packet, STAMP).endswith("Confirm context reading.\n")

    def test_section_order(self, packet):
        out = render_markdown(packet, STAMP)
        headers = [line for line in out.splitlines() if line.startswith("## ") and "[" not in line]
        assert headers == [
            "## Read These Files (in order)",
            "## Constitution (NEVER VIOLATE)",
            "## Current Tasks",
            "## Key Conventions",
            "## Recent Decisions",
            "## Key Learnings",
            "## Also Noted",
        ]

    def test_empty_sections_omitted(self):
        out = render_markdown(AssembledPacket(budget=100, instruction="Do stuff."), STAMP)
        assert "# Context Packet" in out
        assert "## Read These Files (in order)" in out
        assert "Do stuff." in out
        for header in ("## Current Tasks", "## Constitution", "## Also Noted"):
            assert header not in out


class TestRenderJson:
    def test_fields(self, packet):
        data = json.loads(render_json(packet, STAMP))
        assert data == {
            "generated": STAMP,
            "budget": 8000,
            "tokens_used": 2000,
            "read_order": [".context/CONSTITUTION.md", ".context/TASKS.md"],
            "constitution": ["Never violate"],
            "tasks": ["- [ ] Do something"],
            "conventions": ["Use gofmt"],
            "decisions": ["## [2026-02-19-120000] Use JWT\n\nFor auth."],
            "learnings": ["## [2026-02-19-130000] Hooks fail silently\n\nCheck stderr."],
            "summaries": ["Old learning about paths"],
            "instruction": "Confirm context reading.",
        }

    def test_generated_defaults_to_now(self, packet):
        data = json.loads(render_json(packet))
        assert data["generated"].endswith("Z")
        assert "T" in data["generated"]


class TestRenderDispatch:
    def test_formats(self, packet):
        assert render(packet, "md", STAMP) == render_markdown(packet, STAMP)
        assert render(packet, "json", STAMP) == render_json(packet, STAMP)

    def test_unknown_format(self, packet):
        with pytest.raises(ValueError, match="Unknown format"):
            render(packet, "xml")
