"""Library exceptions for the esreadmodels package."""


class EsReadModelsError(Exception):
    """Base exception for esreadmodels library."""

    pass


class SerializationError(EsReadModelsError):
    """Raised when read model serialization or deserialization fails."""

    def __init__(self, type_name: str, message: str) -> None:
        self.type_name = type_name
        super().__init__(f"Serialization error for {type_name}: {message}")


class ConfigurationError(EsReadModelsError, ValueError):
    """Raised when client or repository configuration is invalid."""

    pass
