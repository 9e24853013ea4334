from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when no compatible script engine can be produced.

    Example:
        ```python
        raise ConfigurationError("No script engine registered under 'python'")
        ```
    """


class ParameterParseError(ValueError):
    """Raised when the caller-supplied params text is not a JSON object.

    Example:
        ```python
        raise ParameterParseError("Error parsing JSON parameter map")
        ```
    """


class ScriptEvaluationError(Exception):
    """Raised inside an engine when a script fails to compile or run.

    Example:
        ```python
        raise ScriptEvaluationError("ZeroDivisionError: division by zero")
        ```
    """
