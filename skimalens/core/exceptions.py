"""Custom exceptions for loading, validation and export."""


class SkimaLensError(Exception):
    """Base class for all errors raised by skimalens."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ParseError(SkimaLensError):
    """Raw text is not valid JSON/YAML for its serialization kind."""

    def __init__(self, serialization: str, message: str | None = None):
        self.serialization = serialization
        detail = message or "Unknown error"
        super().__init__(f"Failed to parse {serialization.upper()}: {detail}")


class FormatError(SkimaLensError, ValueError):
    """Parsed data does not match the schema it was validated against."""

    pass


class UnsupportedDataKindError(SkimaLensError, ValueError):
    """Raised when an operation is requested for a kind that has no provider."""

    def __init__(self, kind: str, message: str | None = None):
        self.kind = kind
        super().__init__(message or f"Unsupported data type for export: {kind}")
