"""
Template substitution implementation.
Handles ${name} placeholders resolved against a flat context mapping.
"""

import json
import re
from typing import Any, Dict

from ..workflow.pointers import is_undefined


class TemplateSubstitutor:
    """
    Replaces ${name} placeholders with context values.

    - Names are one or more word characters; anything else is left as-is.
    - Unresolved names (missing, null or absent) become the empty string.
    - There is no escape sequence for a literal ${...}.
    """

    VAR_PATTERN = re.compile(r'\$\{(\w+)\}')

    def substitute(self, text: str, context: Dict[str, Any]) -> str:
        """
        Substitute placeholders in a string.

        Args:
            text: Template containing ${name} references
            context: Context values

        Returns:
            String with every placeholder replaced
        """
        def replace_var(match):
            return self.to_text(context.get(match.group(1)))

        return self.VAR_PATTERN.sub(replace_var, text)

    def substitute_structured(self, value: Any, context: Dict[str, Any]) -> Any:
        """
        Substitute placeholders inside a JSON-like tree.

        The tree is serialized to JSON text, substituted textually, then
        parsed back. A placeholder must therefore resolve to text that keeps
        the document valid JSON: string placeholders need their own quotes
        in the template ("${id}"), numeric ones must not have them.

        Args:
            value: JSON-like value (dict, list, scalar)
            context: Context values

        Returns:
            New value with placeholders substituted

        Raises:
            json.JSONDecodeError: If the substituted text is not valid JSON
        """
        if value is None:
            return None
        text = json.dumps(value)
        return json.loads(self.substitute(text, context))

    @staticmethod
    def to_text(value: Any) -> str:
        """String form used when a context value is spliced into a template."""
        if value is None or is_undefined(value):
            return ''
        if isinstance(value, bool):
            return 'true' if value else 'false'
        elif isinstance(value, (int, float)):
            return str(value)
        elif isinstance(value, str):
            return value
        else:
            # Complex types get JSON representation
            return json.dumps(value)
