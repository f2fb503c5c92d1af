# -*- coding: utf-8 -*-
"""
Jinja2 environment for the article prompt templates.

Templates live in settings.PROMPTS_DIR. User input (keywords) is never
rendered by Jinja2: it is swapped in after rendering, so a keyword like
"{{ price }}" ends up in the prompt literally.
"""
import re
import uuid
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template

from .config import settings

# User-supplied variables substituted after rendering
CONTENT_VARS = ("keyword", "secondary_keywords")


class PromptTemplate(Template):
    """Template whose output has at most one blank line in a row."""

    _BLANK_RUNS = re.compile(r"\n{3,}")

    def render(self, *args, **kwargs) -> str:
        output = super().render(*args, **kwargs)
        return self._BLANK_RUNS.sub("\n\n", output).strip()


def tag_list(tags) -> str:
    """Jinja2 filter: ["h1", "p"] -> "<h1>, <p>"."""
    return ", ".join(f"<{tag}>" for tag in tags)


def create_jinja_env(template_dir: Path | str | None = None) -> Environment:
    """
    Build a prompt environment.

    Missing variables raise (StrictUndefined) instead of rendering as an
    empty string, and nothing is HTML-escaped.

    Args:
        template_dir: Templates directory. Defaults to settings.PROMPTS_DIR.

    Returns:
        Jinja2 Environment
    """
    env = Environment(
        loader=FileSystemLoader(str(template_dir or settings.PROMPTS_DIR)),
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
        autoescape=False,
    )
    env.template_class = PromptTemplate
    env.filters["tag_list"] = tag_list
    return env


_default_env: Environment | None = None


def get_jinja_env() -> Environment:
    """Get or create the default prompt environment."""
    global _default_env
    if _default_env is None:
        _default_env = create_jinja_env()
    return _default_env


def render_prompt(template_name: str, **context) -> str:
    """
    Render a prompt template.

    Non-empty CONTENT_VARS values are replaced by unique tokens for the
    Jinja2 pass and restored in the output. Empty values are passed as-is
    so ``{% if secondary_keywords %}`` still sees them as false.

    Args:
        template_name: Template file name (e.g., "article_prompt.j2")
        **context: Template variables

    Returns:
        Rendered prompt
    """
    marker = uuid.uuid4().hex
    tokens: dict[str, str] = {}

    for key in CONTENT_VARS:
        value = context.get(key)
        if isinstance(value, str) and value:
            token = f"@@{key}-{marker}@@"
            tokens[token] = value
            context[key] = token

    rendered = get_jinja_env().get_template(template_name).render(**context)

    for token, value in tokens.items():
        rendered = rendered.replace(token, value)
    return rendered
