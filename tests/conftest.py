"""Shared fixtures for ctxpack tests."""

from datetime import datetime

import pytest

from ctxpack.core.config import Config


@pytest.fixture
def now():
    """Fixed reference time used for recency scoring."""
    return datetime(2026, 2, 19, 12, 0, 0)


@pytest.fixture
def config(tmp_path):
    """Provide a Config pointing at a temp context directory."""
    return Config(context_dir=tmp_path / ".context")


@pytest.fixture
def context_dir(config):
    """A populated context directory."""
    d = config.context_dir
    d.mkdir(parents=True)
    (d / "CONSTITUTION.md").write_text(
        "# Constitution\n"
        "\n"
        "- [ ] Never commit secrets\n"
        "- [ ] Always run the tests before pushing\n",
        encoding="utf-8",
    )
    (d / "TASKS.md").write_text(
        "# Tasks\n"
        "\n"
        "## In Progress\n"
        "- [ ] Implement hook scoring for the agent\n"
        "- [x] Set up the repository\n"
        "  - [ ] Fix budget allocation in the packet\n",
        encoding="utf-8",
    )
    (d / "CONVENTIONS.md").write_text(
        "# Conventions\n"
        "\n"
        "- Use snake_case for functions\n"
        "* Keep modules small\n"
        "<!-- - Commented out convention -->\n",
        encoding="utf-8",
    )
    (d / "DECISIONS.md").write_text(
        "# Decisions\n"
        "\n"
        "## [2026-02-18-093000] Score entries by recency and relevance\n"
        "\n"
        "**Context:** The agent needs the freshest hook decisions first.\n"
        "\n"
        "\n"
        "## [2025-06-01-120000] Use a flat list for decisions\n"
        "\n"
        "~~Superseded by [2026-02-18-093000] Score entries~~\n",
        encoding="utf-8",
    )
    (d / "LEARNINGS.md").write_text(
        "# Learnings\n"
        "\n"
        "## [2026-02-10-080000] Hooks fail silently\n"
        "\n"
        "Check stderr when a hook misbehaves.\n",
        encoding="utf-8",
    )
    return d
