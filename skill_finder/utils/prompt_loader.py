"""
Prompt Template Loader

Renders the Jinja2 prompt templates shipped in skill_finder/prompts/.
Template names are paths relative to that directory, e.g.
"recommendation/rerank_system.j2".

Usage:
    loader = PromptLoader(strict_undefined=True)
    system_prompt = loader.render(RERANK_TEMPLATE, max_recommendations=5, ...)
"""

from pathlib import Path
from typing import Any, Optional

import structlog
from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    TemplateSyntaxError,
    Undefined,
    UndefinedError,
)

logger = structlog.get_logger(__name__)

PROMPTS_DIR = Path(__file__).parent.parent / "prompts"


class PromptLoader:
    """Jinja2 environment over a prompt directory.

    With strict_undefined=True a template variable the caller forgot to pass
    raises UndefinedError instead of rendering as an empty string.
    """

    def __init__(
        self,
        template_dir: Optional[Path] = None,
        strict_undefined: bool = False,
    ) -> None:
        self.template_dir = template_dir or PROMPTS_DIR
        self.strict_undefined = strict_undefined

        # Plain-text prompts: no HTML escaping, block tags leave no blank lines
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined if strict_undefined else Undefined,
        )

    def render(
        self,
        template_name: str,
        correlation_id: Optional[str] = None,
        **variables: Any,
    ) -> str:
        """
        Render a template with the given variables.

        Args:
            template_name: Path relative to the template directory
            correlation_id: Optional correlation ID for logging
            **variables: Template variables

        Returns:
            Rendered prompt text

        Raises:
            TemplateNotFound: If the template file doesn't exist
            TemplateSyntaxError: If the template doesn't parse
            UndefinedError: If strict and a referenced variable is missing
        """
        log = logger.bind(template_name=template_name, correlation_id=correlation_id)

        try:
            rendered = self.env.get_template(template_name).render(**variables)
        except TemplateNotFound:
            log.error("Prompt template not found", template_dir=str(self.template_dir))
            raise
        except TemplateSyntaxError as e:
            log.error("Prompt template syntax error", error=str(e), lineno=e.lineno)
            raise
        except UndefinedError as e:
            log.error(
                "Prompt template variable missing",
                error=str(e),
                variables_provided=sorted(variables),
            )
            raise

        log.debug("Prompt rendered", rendered_length=len(rendered))
        return rendered
