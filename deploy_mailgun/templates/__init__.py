"""Message body templates.

Two Jinja2 templates ship with the package and are addressed by name:
``deploy_text`` (``default.txt.j2``) and ``deploy_html``
(``default.html.j2``).  Any other value is treated as a path to a custom
template file.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Mapping

from jinja2 import Environment, FileSystemLoader, select_autoescape

from deploy_mailgun.errors import ConfigurationError

TEMPLATE_DIR = Path(__file__).resolve().parent

BUNDLED_TEMPLATES = {
    "deploy_text": TEMPLATE_DIR / "default.txt.j2",
    "deploy_html": TEMPLATE_DIR / "default.html.j2",
}


def find_template(template: str) -> Path:
    """Resolve a bundled template name or a filesystem path.

    Raises:
        ConfigurationError: If ``template`` is neither a bundled name nor an
            existing file.
    """
    if template in BUNDLED_TEMPLATES:
        return BUNDLED_TEMPLATES[template]
    path = Path(template).expanduser()
    if not path.is_file():
        raise ConfigurationError(f"Template not found: {template}")
    return path


def _environment(directory: Path) -> Environment:
    return Environment(
        loader=FileSystemLoader(str(directory)),
        autoescape=select_autoescape(["html", "html.j2"]),
        keep_trailing_newline=True,
    )


def render_template(template: str, context: Mapping[str, Any]) -> str:
    path = find_template(template)
    return _environment(path.parent).get_template(path.name).render(**context)


def clean_text(text: str) -> str:
    """Strip indentation and collapse runs of blank lines in a text body."""
    text = re.sub(r"^ +", "", text, flags=re.MULTILINE)
    return re.sub(r"\n{3,}", "\n\n", text)


__all__ = [
    "BUNDLED_TEMPLATES",
    "TEMPLATE_DIR",
    "clean_text",
    "find_template",
    "render_template",
]
