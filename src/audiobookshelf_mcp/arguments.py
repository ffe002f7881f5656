"""Typed access to the argument mapping of a tool invocation."""

from typing import Any, Mapping, Optional

from audiobookshelf.exceptions import MissingArgumentError

# true spellings of strconv.ParseBool
_TRUE_STRINGS = {"1", "t", "T", "TRUE", "true", "True"}


class ToolArguments:
    """Name-keyed argument bag with typed accessors.

    get_* accessors return a default for absent or unusable values;
    require_* accessors raise MissingArgumentError instead.
    """

    def __init__(self, arguments: Optional[Mapping[str, Any]] = None):
        self._arguments = dict(arguments or {})

    def __contains__(self, name: str) -> bool:
        return name in self._arguments

    def __repr__(self) -> str:
        # never echo the bearer token
        shown = {k: v for k, v in self._arguments.items() if k != "token"}
        return f"ToolArguments({shown!r})"

    def get_string(self, name: str, default: str = "") -> str:
        value = self._arguments.get(name)
        if value is None:
            return default
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (str, int, float)):
            return str(value)
        return default

    def get_bool(self, name: str, default: bool = False) -> bool:
        value = self._arguments.get(name)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return value != 0
        if isinstance(value, str):
            return value.strip() in _TRUE_STRINGS
        return default

    def get_float(self, name: str, default: float = 0.0) -> float:
        value = self._arguments.get(name)
        if value is None or isinstance(value, bool):
            return default
        try:
            return float(value)
        except (TypeError, ValueError):
            return default

    def require_string(self, name: str) -> str:
        """Return a non-empty string argument.

        Raises:
            MissingArgumentError: If the argument is absent or empty
        """
        value = self.get_string(name)
        if not value:
            raise MissingArgumentError(name)
        return value

    def require_float(self, name: str) -> float:
        """Return a numeric argument; numeric strings are accepted.

        Raises:
            MissingArgumentError: If the argument is absent or not a number
        """
        value = self._arguments.get(name)
        if value is None or value == "":
            raise MissingArgumentError(name)
        if isinstance(value, bool):
            raise MissingArgumentError(name, f"argument \"{name}\" is not a number")
        try:
            return float(value)
        except (TypeError, ValueError):
            raise MissingArgumentError(name, f"argument \"{name}\" is not a number")
