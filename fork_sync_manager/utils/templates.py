"""Contains utilities for rendering pull request and issue templates."""

import re
from pathlib import Path
from typing import Any, Mapping

import jinja2
import structlog

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

TEMPLATES_DIRECTORY = Path(__file__).parent.parent / "templates"

PLACEHOLDER_PATTERN = re.compile(r"\{([a-z_]+)\}")


def render_placeholders(template: str, values: Mapping[str, Any]) -> str:
    """Substitute {name} placeholders in a single pass.

    Only names present in values are replaced; any other brace expression is
    left untouched. Substituted values are never scanned again, so a value
    that itself looks like a placeholder is emitted verbatim.
    """

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in values:
            return match.group(0)
        return str(values[name])

    return PLACEHOLDER_PATTERN.sub(_replace, template)


def construct_jinja2_environment() -> jinja2.Environment:
    """Construct a Jinja2 environment that loads templates shipped with the package."""
    return jinja2.Environment(
        loader=jinja2.FileSystemLoader(TEMPLATES_DIRECTORY),
        undefined=jinja2.StrictUndefined,
        keep_trailing_newline=True,
    )


def render_package_template(template_name: str, environment: jinja2.Environment | None = None, **context: Any) -> str:
    """Render one of the package's Jinja2 templates with the given context."""
    if environment is None:
        environment = construct_jinja2_environment()
    try:
        template = environment.get_template(template_name)
    except jinja2.TemplateNotFound:
        logger.error("Jinja2 template not found", template_name=template_name, templates_directory=str(TEMPLATES_DIRECTORY))
        raise
    try:
        return template.render(**context)
    except jinja2.UndefinedError as exc:
        logger.error("Failed to render template", template_name=template_name, context_keys=sorted(context), error=str(exc))
        raise
