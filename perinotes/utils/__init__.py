"""
Utility Functions
-----------------

Helpers shared across the periodic notes toolkit.

Modules:
    - formats: Moment-style naming patterns (format and parse dates)
    - fs: Filesystem discovery helpers
    - md: Markdown frontmatter and heading-section helpers
    - templates: {{variable}} substitution for note templates
"""
from .formats import format_date, parse_date, filename_pattern
from .fs import find_markdown_files, ensure_dir
from .md import split_frontmatter, get_frontmatter_value, set_frontmatter_value, parse_markdown_sections
from .templates import substitute_variables

__all__ = [
    "format_date",
    "parse_date",
    "filename_pattern",
    "find_markdown_files",
    "ensure_dir",
    "split_frontmatter",
    "get_frontmatter_value",
    "set_frontmatter_value",
    "parse_markdown_sections",
    "substitute_variables",
]
