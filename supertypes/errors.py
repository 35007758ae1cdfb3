"""Exceptions raised by py-super-types."""


class SuperTypesError(Exception):
    """Base class for all py-super-types errors."""


class NoEnclosingClassError(SuperTypesError):
    """The cursor is not inside a class definition."""

    def __init__(self, path: str, line: int, column: int):
        self.path = path
        self.line = line
        self.column = column
        super().__init__(f"No enclosing class found at {path}:{line + 1}:{column + 1}")


class LinearizationError(SuperTypesError, ValueError):
    """The hierarchy has no consistent C3 linearization."""

    def __init__(self, class_name: str, heads: list[str]):
        self.class_name = class_name
        self.heads = heads
        super().__init__(
            f"Cannot compute C3 linearization for {class_name}: "
            f"conflicting bases {', '.join(heads)}"
        )


class ConfigError(SuperTypesError):
    """Invalid configuration value or file."""
