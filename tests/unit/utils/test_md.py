"""
Tests for markdown frontmatter and section helpers.
"""
import pytest
import yaml

from perinotes.utils.md import (
    MarkdownSection,
    add_section,
    append_to_section,
    find_section,
    get_frontmatter_value,
    is_truthy_flag,
    parse_frontmatter,
    parse_markdown_sections,
    section_exists,
    set_frontmatter_value,
    split_frontmatter,
)


class TestSplitFrontmatter:
    """Tests for split_frontmatter."""

    def test_with_frontmatter(self):
        frontmatter, body = split_frontmatter("---\ndone: true\n---\n\n# Monday")
        assert frontmatter == "done: true"
        assert body == ["# Monday"]

    def test_without_frontmatter(self):
        frontmatter, body = split_frontmatter("# Monday\ntext")
        assert frontmatter == ""
        assert body == ["# Monday", "text"]

    def test_unclosed_frontmatter_is_body(self):
        frontmatter, body = split_frontmatter("---\ndone: true\n")
        assert frontmatter == ""
        assert body == ["---", "done: true"]


class TestFrontmatterValues:
    """Tests for reading and writing frontmatter properties."""

    def test_get_value(self):
        assert get_frontmatter_value("---\ndone: true\n---\n", "done") is True
        assert get_frontmatter_value("no frontmatter", "done") is None

    def test_malformed_yaml_raises(self):
        with pytest.raises(yaml.YAMLError):
            parse_frontmatter("---\ndone: [unclosed\n---\n")

    def test_set_value_adds_frontmatter(self):
        result = set_frontmatter_value("# Week 3\n", "done", True)
        assert result == "---\ndone: true\n---\n\n# Week 3\n"

    def test_set_value_keeps_other_keys_and_body(self):
        content = "---\ntags:\n- review\n---\n\nBody\n"
        result = set_frontmatter_value(content, "done", False)
        assert parse_frontmatter(result) == {"tags": ["review"], "done": False}
        assert result.endswith("\nBody\n")

    def test_none_removes_value(self):
        result = set_frontmatter_value("---\ndone: true\n---\n\nBody", "done", None)
        assert result == "Body\n"


class TestIsTruthyFlag:
    """Tests for is_truthy_flag."""

    @pytest.mark.parametrize("value,expected", [(True, True), ("true", True), ("yes", False), (1, False), (None, False)])
    def test_flags(self, value, expected):
        assert is_truthy_flag(value) is expected


NOTE = """---
done: true
---
Intro line

# Monday

## Wins
- shipped

## Next
- rest
### Detail
deep
"""


class TestParseMarkdownSections:
    """Tests for parse_markdown_sections and find_section."""

    def test_sections_in_order(self):
        sections = parse_markdown_sections(NOTE)
        assert [(s.heading, s.level) for s in sections] == [
            ("Monday", 1),
            ("Wins", 2),
            ("Next", 2),
            ("Detail", 3),
        ]
        assert sections[1].content == "- shipped"
        assert sections[2].content == "- rest"
        assert sections[3].content == "deep"

    def test_text_before_first_heading_is_ignored(self):
        assert parse_markdown_sections("no headings\nat all") == []

    def test_heading_needs_space_and_at_most_six_marks(self):
        sections = parse_markdown_sections("#tag\n####### seven\n# Real\nbody")
        assert sections == [MarkdownSection("Real", "body", 1)]

    def test_find_section_by_level(self):
        assert find_section(NOTE, "Wins").level == 2
        assert find_section(NOTE, "Wins", level=1) is None
        assert find_section(NOTE, "Missing") is None


class TestSectionEditing:
    """Tests for section_exists, append_to_section and add_section."""

    def test_section_exists_matches_level(self):
        assert section_exists(NOTE, "Wins", 2) is True
        assert section_exists(NOTE, "Wins", 1) is False
        assert section_exists(NOTE, "Win", 2) is False
        assert section_exists("## a.b (c)\n", "a.b (c)", 2) is True

    def test_append_before_next_heading_of_same_level(self):
        section = MarkdownSection("Wins", "", 2)
        updated = append_to_section(NOTE, section, "- copied")
        assert "## Wins\n- shipped\n\n\n- copied\n## Next" in updated

    def test_append_skips_deeper_headings(self):
        section = MarkdownSection("Next", "", 2)
        updated = append_to_section(NOTE, section, "- copied")
        assert updated.endswith("### Detail\ndeep\n\n\n- copied")

    def test_add_section_at_end(self):
        updated = add_section("# Week\n\nplans\n\n\n", MarkdownSection("Wins", "- shipped", 2))
        assert updated == "# Week\n\nplans\n\n## Wins\n\n- shipped\n"
