"""Prompt templates with ``{{variable}}`` placeholders."""

import re
from dataclasses import dataclass, field
from typing import Any

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


class PromptTemplateError(Exception):
    """Error while rendering a prompt template."""

    pass


@dataclass(frozen=True)
class PromptTemplate:
    """A single prompt template with variables."""

    name: str
    content: str
    variables: dict[str, Any] = field(default_factory=dict)

    def render(self, **kwargs: Any) -> str:
        """Render the prompt with provided variables.

        Args:
            **kwargs: Variable values to substitute

        Returns:
            Rendered prompt string

        Raises:
            PromptTemplateError: If a required variable is missing
        """
        for var_name, var_info in self.variables.items():
            if var_info.get("required", False) and kwargs.get(var_name) is None:
                raise PromptTemplateError(f"Missing required variable '{var_name}' for prompt '{self.name}'")

        def substitute(match: re.Match[str]) -> str:
            key = match.group(1)
            if key in kwargs and kwargs[key] is not None:
                return str(kwargs[key])
            return str(self.variables.get(key, {}).get("default", ""))

        # Single pass so substituted values are never re-scanned
        return _PLACEHOLDER.sub(substitute, self.content)

    def placeholders(self) -> set[str]:
        """Names of all placeholders in the template."""
        return set(_PLACEHOLDER.findall(self.content))
