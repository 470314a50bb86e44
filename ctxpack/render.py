"""
ctxpack.render -- Markdown and JSON output for an assembled packet.

Pure formatting: every decision about what goes in the packet has
already been made by the assembler.  Sections with no content are
left out, except the read-order list which always has a header.
"""

from __future__ import annotations

import json
from typing import List, Optional

from ctxpack.core.types import AssembledPacket, now_rfc3339


def render_markdown(packet: AssembledPacket, generated: Optional[str] = None) -> str:
    """Render *packet* as a sectioned Markdown document."""
    generated = generated or now_rfc3339()
    out: List[str] = [
        "# Context Packet",
        f"Generated: {generated} | Budget: {packet.budget} tokens "
        f"| Used: ~{packet.tokens_used}",
        "",
        "## Read These Files (in order)",
    ]
    out.extend(f"{idx}. {path}" for idx, path in enumerate(packet.read_order, 1))
    out.append("")

    if packet.constitution:
        out.append("## Constitution (NEVER VIOLATE)")
        out.extend(f"- {rule}" for rule in packet.constitution)
        out.append("")

    if packet.tasks:
        out.append("## Current Tasks")
        out.extend(packet.tasks)
        out.append("")

    if packet.conventions:
        out.append("## Key Conventions")
        out.extend(f"- {conv}" for conv in packet.conventions)
        out.append("")

    if packet.decisions:
        out.append("## Recent Decisions")
        for body in packet.decisions:
            out.extend([body, ""])

    if packet.learnings:
        out.append("## Key Learnings")
        for body in packet.learnings:
            out.extend([body, ""])

    if packet.summaries:
        out.append("## Also Noted")
        out.extend(f"- {title}" for title in packet.summaries)
        out.append("")

    out.append(packet.instruction)
    return "\n".join(out) + "\n"


def render_json(packet: AssembledPacket, generated: Optional[str] = None) -> str:
    """Render *packet* as an indented JSON object."""
    return json.dumps(packet.to_dict(generated=generated), indent=2) + "\n"


RENDERERS = {
    "md": render_markdown,
    "json": render_json,
}


def render(packet: AssembledPacket, fmt: str = "md", generated: Optional[str] = None) -> str:
    try:
        renderer = RENDERERS[fmt]
    except KeyError:
        raise ValueError(
            f"Unknown format {fmt!r}; expected one of {sorted(RENDERERS)}"
        ) from None
    return renderer(packet, generated=generated)
