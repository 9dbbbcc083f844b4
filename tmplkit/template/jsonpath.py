"""JSONPath lookups over template data."""

import re
from typing import Any, Dict, List, Mapping, Match, Optional

from jsonpath_ng import parse as jsonpath_parse

from ..values import printable, resolve


class JSONPathEngine:
    """Evaluates JSONPath expressions with variable substitution."""

    @staticmethod
    def substitute_variables(expression: str, variables: Mapping[str, Any]) -> str:
        """
        Replace ${var_name} placeholders with the printed variable value.

        Unknown placeholders are left untouched.
        """
        def replace_var(match: Match[str]) -> str:
            var_name = match.group(1)
            if var_name not in variables:
                return match.group(0)
            return printable(variables[var_name])

        return re.sub(r'\$\{(\w+)\}', replace_var, expression)

    @staticmethod
    def evaluate(expression: str, data: Any, variables: Optional[Dict[str, Any]] = None) -> List[Any]:
        """
        Evaluate a JSONPath expression against data.

        Args:
            expression: JSONPath expression (e.g. "$.items[*].price")
            data: Data to query; references around the root are resolved first
            variables: Optional values for ${...} placeholders

        Returns:
            List of matching values (empty when data is absent)
        """
        if variables:
            expression = JSONPathEngine.substitute_variables(expression, variables)

        data, absent = resolve(data)
        if absent:
            return []

        jsonpath_expr = jsonpath_parse(expression)
        return [match.value for match in jsonpath_expr.find(data)]
