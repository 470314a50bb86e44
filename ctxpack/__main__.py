"""
ctxpack.__main__ -- CLI entry point.

Usage:
    ctxpack agent [--budget N] [--format md|json] [--context-dir DIR] [--config PATH]
    ctxpack init [--context-dir DIR]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

log = logging.getLogger("ctxpack")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="ctxpack",
        description="ctxpack -- token-budgeted context packets for AI agents",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--json-logs", action="store_true", help="Emit structured JSON log lines"
    )

    sub = parser.add_subparsers(dest="command")

    # -- agent -------------------------------------------------------------
    agent_p = sub.add_parser("agent", help="Print an AI-ready context packet")
    agent_p.add_argument(
        "--budget",
        type=int,
        default=None,
        help="Token budget for the packet (default: from config, 8000)",
    )
    agent_p.add_argument(
        "--format",
        default="md",
        choices=["md", "json"],
        help="Output format (default: md)",
    )
    agent_p.add_argument("--context-dir", default=None, help="Context directory")
    agent_p.add_argument("--config", default=None, help="Path to a YAML config file")

    # -- init --------------------------------------------------------------
    init_p = sub.add_parser("init", help="Create a context directory with templates")
    init_p.add_argument(
        "--context-dir",
        default=".context",
        help="Directory to create (default: ./.context)",
    )

    args = parser.parse_args(argv)

    # -- Logging -----------------------------------------------------------
    from ctxpack.core.logging import configure_logging

    configure_logging(
        structured=args.json_logs,
        level="DEBUG" if args.verbose else "WARNING",
        stream=sys.stderr,
    )

    if args.command is None:
        parser.print_help()
        return 0

    from ctxpack.core.errors import CtxpackError

    # -- Dispatch ----------------------------------------------------------
    try:
        if args.command == "agent":
            _cmd_agent(args)
        elif args.command == "init":
            _cmd_init(args)
        else:
            parser.print_help()
    except CtxpackError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


# ---------------------------------------------------------------------------
# Command implementations
# ---------------------------------------------------------------------------


def _cmd_agent(args: argparse.Namespace) -> None:
    """Load the context directory, assemble a packet, print it."""
    from ctxpack.core.config import Config
    from ctxpack.core.errors import ConfigError
    from ctxpack.core.logging import configure_logging
    from ctxpack.knowledge.loader import ContextLoader
    from ctxpack.render import render
    from ctxpack.working.packet import PacketAssembler

    try:
        config = Config.load(args.config)
    except FileNotFoundError as exc:
        raise ConfigError(str(exc)) from exc
    if args.context_dir:
        config.context_dir = Path(args.context_dir)
    if config.structured_logging and not args.json_logs:
        configure_logging(
            structured=True,
            level="DEBUG" if args.verbose else config.log_level,
            stream=sys.stderr,
        )

    budget = config.token_budget if args.budget is None else args.budget
    if budget <= 0:
        raise ConfigError(f"--budget must be positive, got {budget}")

    sources = ContextLoader(config).load()
    packet = PacketAssembler(config).assemble_sources(sources, budget=budget)
    log.debug("Packet assembled: %d/%d tokens", packet.tokens_used, packet.budget)
    sys.stdout.write(render(packet, fmt=args.format))


_TEMPLATES = {
    "CONSTITUTION.md": (
        "# Constitution\n"
        "\n"
        "Rules that must never be violated.\n"
        "\n"
        "- [ ] Never commit secrets to the repository\n"
    ),
    "TASKS.md": (
        "# Tasks\n"
        "\n"
        "## In Progress\n"
        "\n"
        "- [ ] Describe the first task here\n"
    ),
    "CONVENTIONS.md": (
        "# Conventions\n"
        "\n"
        "- Describe a coding convention here\n"
    ),
    "DECISIONS.md": (
        "# Decisions\n"
        "\n"
        "<!-- Entries look like:\n"
        "## [YYYY-MM-DD-HHMMSS] Title\n"
        "\n"
        "**Context:** ...\n"
        "**Decision:** ...\n"
        "\n"
        "Mark obsolete entries with a line starting ~~Superseded -->\n"
    ),
    "LEARNINGS.md": (
        "# Learnings\n"
        "\n"
        "<!-- Entries look like:\n"
        "## [YYYY-MM-DD-HHMMSS] Title\n"
        "\n"
        "What happened and what to do next time. -->\n"
    ),
}


def _cmd_init(args: argparse.Namespace) -> None:
    """Create a context directory with template files (existing files kept)."""
    context_dir = Path(args.context_dir).resolve()
    context_dir.mkdir(parents=True, exist_ok=True)

    for name, template in _TEMPLATES.items():
        path = context_dir / name
        if path.exists():
            print(f"  kept     {path}")
            continue
        path.write_text(template, encoding="utf-8")
        print(f"  created  {path}")

    print()
    print(f"Initialized context directory: {context_dir}")
    print("Next: ctxpack agent --context-dir", str(context_dir))


if __name__ == "__main__":
    sys.exit(main())
