"""
ctxpack.knowledge.parser -- Markdown parsing for knowledge files.

Decision and learning files are sequences of entries, each opening
with a timestamped level-two header::

    ## [2026-02-19-120000] Use JWT for auth

    **Context:** ...

An entry runs until the next header.  Trailing blank lines are trimmed
and anything before the first header is ignored.

Task, convention and constitution files are flat Markdown lists.
"""

from __future__ import annotations

import re
from typing import List, Optional

from ctxpack.core.types import KnowledgeEntry

ENTRY_HEADER_RE = re.compile(r"^## \[(\d{4}-\d{2}-\d{2})-(\d{6})\] (.+)$")

TASK_UNDONE_PREFIX = "- [ ]"
TASK_DONE_PREFIX = "- [x]"

# "- item" / "* item", but not "- [ ] task"
_BULLET_RE = re.compile(r"^\s*[-*]\s+(?!\s*\[[ xX]\])(.+?)\s*$")
_CHECKBOX_RE = re.compile(r"^\s*[-*]\s+\[[ xX]\]\s+(.+?)\s*$")
_COMMENT_OPEN = "<!--"
_COMMENT_CLOSE = "-->"


def parse_entry_blocks(text: str) -> List[KnowledgeEntry]:
    """Split a knowledge file into entries, in file order."""
    if not text:
        return []

    lines = text.replace("\r\n", "\n").split("\n")
    headers = []
    for idx, line in enumerate(lines):
        match = ENTRY_HEADER_RE.match(line)
        if match:
            headers.append((idx, match))

    entries: List[KnowledgeEntry] = []
    for pos, (start, match) in enumerate(headers):
        end = headers[pos + 1][0] if pos + 1 < len(headers) else len(lines)
        while end > start + 1 and not lines[end - 1].strip():
            end -= 1
        day, clock, title = match.group(1), match.group(2), match.group(3)
        entries.append(
            KnowledgeEntry(
                title=title.strip(),
                date=day,
                timestamp=f"{day}-{clock}",
                lines=tuple(lines[start:end]),
            )
        )
    return entries


def _uncommented_lines(text: str) -> List[str]:
    """Lines of *text* with HTML comment blocks removed."""
    kept: List[str] = []
    in_comment = False
    for line in text.replace("\r\n", "\n").split("\n"):
        stripped = line.strip()
        if in_comment:
            if _COMMENT_CLOSE in stripped:
                in_comment = False
            continue
        if stripped.startswith(_COMMENT_OPEN):
            in_comment = _COMMENT_CLOSE not in stripped
            continue
        kept.append(line)
    return kept


def extract_bullet_items(text: str, limit: Optional[int] = None) -> List[str]:
    """Plain bullet items (marker stripped), skipping checkboxes and comments."""
    items: List[str] = []
    for line in _uncommented_lines(text):
        match = _BULLET_RE.match(line)
        if not match:
            continue
        items.append(match.group(1))
        if limit is not None and len(items) >= limit:
            break
    return items


def extract_active_tasks(text: str) -> List[str]:
    """Unchecked ``- [ ]`` task lines, verbatim apart from surrounding space."""
    return [
        line.strip()
        for line in _uncommented_lines(text)
        if line.strip().startswith(TASK_UNDONE_PREFIX)
    ]


def extract_constitution_rules(text: str) -> List[str]:
    """Rules written either as checkboxes or as plain bullets."""
    rules: List[str] = []
    for line in _uncommented_lines(text):
        match = _CHECKBOX_RE.match(line) or _BULLET_RE.match(line)
        if match:
            rules.append(match.group(1))
    return rules
