"""Typed exception hierarchy. Every error nalagen can raise."""


class NalagenError(Exception):
    """Base exception for all nalagen errors."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidInputError(NalagenError):
    """A command argument failed validation (usage error)."""
    def __init__(self, message: str, field: str = "", value: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value


class ConfigError(NalagenError):
    """Project configuration could not be read, parsed, or written."""
    def __init__(self, message: str, path: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.path = path


class ProjectNotFoundError(ConfigError):
    """Named project is not present in the project configuration."""
    def __init__(self, message: str, project: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.project = project


class GenerationError(NalagenError):
    """Generation was asked for something no template covers."""
    pass


class ExtractionError(NalagenError):
    """Live property extraction from a rendered component failed."""
    def __init__(self, message: str, component_id: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.component_id = component_id


class TestCommandError(NalagenError):
    """External test command could not be launched."""
    __test__ = False

    def __init__(self, message: str, command: list = None, **kwargs):
        super().__init__(message, **kwargs)
        self.command = command or []
