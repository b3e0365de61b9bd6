"""
templates.py
------------
Variable substitution for new periodic notes.

Templates are plain markdown files inside the notes root and use
{{variable}} placeholders:

    # {{title}}

    {{period}} review

Available variables are built by ``note_variables``.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import date
from typing import Any, Dict


def substitute_variables(template: str, variables: Dict[str, Any]) -> str:
    """
    Substitute {{variables}} in template with provided values.

    Args:
        template: Template string with {{variable}} placeholders
        variables: Dictionary mapping variable names to their values
                  Values can be:
                  - str: inserted as-is
                  - List[str]: joined with newlines
                  - None/empty: replaced with empty string

    Returns:
        Template with all variables substituted

    Example:
        >>> substitute_variables("# {{title}}", {"title": "2024-01-15"})
        '# 2024-01-15'
    """
    result = template

    for var_name, value in variables.items():
        placeholder = f"{{{{{var_name}}}}}"

        if value is None or value == "":
            replacement = ""
        elif isinstance(value, list):
            replacement = "\n".join(str(item) for item in value)
        else:
            replacement = str(value)

        result = result.replace(placeholder, replacement)

    return result


def note_variables(title: str, period_start: date, period_label: str) -> Dict[str, Any]:
    """Variables offered to note templates."""
    return {
        "title": title,
        "date": period_start.isoformat(),
        "period": period_label,
    }
