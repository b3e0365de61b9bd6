#!/usr/bin/env python3
"""
md.py
-------------------
Markdown frontmatter and heading-section helpers.

Notes may start with a YAML frontmatter block:

    ---
    done: true
    ---

    Body text...

Functions:
    split_frontmatter: Separate the YAML block from the body
    parse_frontmatter: Frontmatter as a dictionary
    get_frontmatter_value: Read one property
    set_frontmatter_value: Write one property, creating the block if needed
    is_truthy_flag: Interpret a stored flag (True or "true")
    parse_markdown_sections: Split a note into heading sections
    find_section: First section with a given heading
    section_exists: Whether a heading of a given level is present
    append_to_section: Insert text at the end of an existing section
    add_section: Append a new section at the end of a note
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Pattern, Tuple

# --- Third party imports ---
import yaml

HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")
ANY_HEADING_RE = re.compile(r"^(#{1,6})\s+")


def split_frontmatter(content: str) -> Tuple[str, List[str]]:
    """
    Split markdown content into YAML frontmatter and body.

    Args:
        content: Full markdown file content

    Returns:
        Tuple of (frontmatter_text, body_lines)
        - frontmatter_text: YAML content as string (empty if no frontmatter)
        - body_lines: List of body content lines

    Examples:
        >>> fm, body = split_frontmatter("---\\ndone: true\\n---\\n\\nBody text")
        >>> fm
        'done: true'
        >>> body
        ['Body text']
    """
    lines = content.splitlines()

    if not lines or lines[0].strip() != "---":
        return "", lines

    frontmatter_end = None
    for i, line in enumerate(lines[1:], 1):
        if line.strip() == "---":
            frontmatter_end = i
            break

    if frontmatter_end is None:
        return "", lines

    frontmatter_lines = lines[1:frontmatter_end]
    body_lines = lines[frontmatter_end + 1 :]

    while body_lines and body_lines[0].strip() == "":
        body_lines.pop(0)

    return "\n".join(frontmatter_lines), body_lines


def parse_frontmatter(content: str) -> Dict[str, Any]:
    """
    Frontmatter of a note as a dictionary.

    Malformed YAML is propagated as ``yaml.YAMLError``; a missing block or a
    non-mapping block yields an empty dictionary.
    """
    frontmatter, _ = split_frontmatter(content)
    if not frontmatter.strip():
        return {}
    data = yaml.safe_load(frontmatter)
    return data if isinstance(data, dict) else {}


def get_frontmatter_value(content: str, key: str) -> Optional[Any]:
    return parse_frontmatter(content).get(key)


def set_frontmatter_value(content: str, key: str, value: Any) -> str:
    """
    Set a frontmatter property, keeping the body untouched.

    Args:
        content: Full markdown content
        key: Property name
        value: New value; None removes the property

    Returns:
        Updated markdown content
    """
    data = parse_frontmatter(content)
    _, body_lines = split_frontmatter(content)

    if value is None:
        data.pop(key, None)
    else:
        data[key] = value

    body = "\n".join(body_lines)
    if not data:
        return body + ("\n" if body else "")

    frontmatter = yaml.safe_dump(data, sort_keys=False, allow_unicode=True).rstrip("\n")
    parts = ["---", frontmatter, "---"]
    if body:
        parts.extend(["", body])
    return "\n".join(parts) + "\n"


def is_truthy_flag(value: Any) -> bool:
    """A stored flag counts as set when it is True or the string 'true'."""
    return value is True or value == "true"


# ----- Sections -----

@dataclass(frozen=True)
class MarkdownSection:
    """A heading and the trimmed text below it, up to the next heading."""

    heading: str
    content: str
    level: int

    @property
    def header(self) -> str:
        return f"{'#' * self.level} {self.heading}"


def parse_markdown_sections(content: str) -> List[MarkdownSection]:
    """
    Split markdown into sections at every ATX heading (# to ######).

    Text before the first heading belongs to no section. Nested headings
    start sections of their own, so a section's content stops at the next
    heading of any level.

    Examples:
        >>> parse_markdown_sections("intro\\n# Tasks\\n- a\\n## Done\\n- b")
        [MarkdownSection(heading='Tasks', content='- a', level=1), MarkdownSection(heading='Done', content='- b', level=2)]
    """
    sections: List[MarkdownSection] = []
    heading: Optional[Tuple[str, int]] = None
    body: List[str] = []

    for line in content.split("\n"):
        match = HEADING_RE.match(line)
        if match:
            if heading is not None:
                sections.append(MarkdownSection(heading[0], "\n".join(body).strip(), heading[1]))
            heading = (match.group(2), len(match.group(1)))
            body = []
        elif heading is not None:
            body.append(line)

    if heading is not None:
        sections.append(MarkdownSection(heading[0], "\n".join(body).strip(), heading[1]))
    return sections


def find_section(
    content: str, heading: str, level: Optional[int] = None
) -> Optional[MarkdownSection]:
    for section in parse_markdown_sections(content):
        if section.heading.strip() == heading.strip() and level in (None, section.level):
            return section
    return None


def _heading_pattern(heading: str, level: int, flags: int = 0) -> Pattern[str]:
    return re.compile(rf"^{'#' * level}\s+{re.escape(heading)}\s*$", flags)


def section_exists(content: str, heading: str, level: int) -> bool:
    return _heading_pattern(heading, level, re.MULTILINE).search(content) is not None


def append_to_section(content: str, section: MarkdownSection, new_content: str) -> str:
    """
    Insert text at the end of an existing section.

    The text goes before the next heading of the same or a higher level
    (fewer #), separated by a blank line, or at the end of the note.

    Args:
        content: Full markdown content
        section: Target section (heading and level are used)
        new_content: Text to insert

    Returns:
        Updated markdown content
    """
    lines = content.split("\n")
    pattern = _heading_pattern(section.heading, section.level)

    in_section = False
    insert_at = len(lines)
    for index, line in enumerate(lines):
        if pattern.match(line):
            in_section = True
            continue
        if in_section:
            match = ANY_HEADING_RE.match(line)
            if match and len(match.group(1)) <= section.level:
                insert_at = index
                break

    lines[insert_at:insert_at] = ["", new_content]
    return "\n".join(lines)


def add_section(content: str, section: MarkdownSection) -> str:
    return f"{content.rstrip()}\n\n{section.header}\n\n{section.content}\n"
