"""Utilities for preparing HTML snippets before rendering in Streamlit."""
import html
from textwrap import dedent
from typing import Any


def html_block(template: str, **values: Any) -> str:
    """
    Fill an HTML template with escaped values and flatten its indentation.

    Streamlit's Markdown renderer treats lines with >=4 leading spaces as
    code blocks, so every line is left-stripped after dedenting. Values are
    substituted with ``str.format`` after ``html.escape``; attendee data
    comes from scanned badges and must not inject markup.
    """
    escaped = {key: html.escape(str(value)) for key, value in values.items()}
    rendered = dedent(template).format(**escaped) if escaped else dedent(template)
    return "\n".join(line.lstrip() for line in rendered.splitlines()).strip()
