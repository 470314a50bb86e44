"""
ctxpack -- Token-budgeted context packets for AI agents.

    from ctxpack import Config, ContextLoader, PacketAssembler, render_markdown

    config = Config.load()
    sources = ContextLoader(config).load()
    packet = PacketAssembler(config).assemble_sources(sources, budget=4000)
    print(render_markdown(packet))
"""

from ctxpack.core.config import Config
from ctxpack.core.types import AssembledPacket, KnowledgeEntry, ScoredEntry
from ctxpack.knowledge.loader import ContextLoader, ContextSources
from ctxpack.render import render_json, render_markdown
from ctxpack.working.packet import PacketAssembler, assemble_packet

__version__ = "0.1.0"

__all__ = [
    "Config",
    "AssembledPacket",
    "KnowledgeEntry",
    "ScoredEntry",
    "ContextLoader",
    "ContextSources",
    "PacketAssembler",
    "assemble_packet",
    "render_markdown",
    "render_json",
]
