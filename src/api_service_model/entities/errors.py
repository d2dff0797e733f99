"""Exceptions raised while building a service model.

All are fatal: the model builder never returns a partial model.
"""


class ServiceModelError(Exception):
    """Base exception for service model construction errors."""

    def __init__(self, message: str, entity_name: str | None = None) -> None:
        self.entity_name = entity_name
        full_message = message if not entity_name else f"[{entity_name}] {message}"
        super().__init__(full_message)


class UnsupportedConstruct(ServiceModelError):
    """Raised when the document uses a schema shape the walker cannot model."""

    def __init__(self, construct: str, entity_name: str | None = None) -> None:
        self.construct = construct
        super().__init__(f"Unsupported construct: {construct}", entity_name)


class MissingReference(ServiceModelError):
    """Raised when a referenced structure or definition is not registered."""

    def __init__(self, name: str, context: str, entity_name: str | None = None) -> None:
        self.name = name
        super().__init__(f"No definition named '{name}' ({context})", entity_name)


class InvalidDocument(ServiceModelError):
    """Raised when a document value has the wrong shape, e.g. a non-numeric minimum."""

    def __init__(self, source: str, detail: str) -> None:
        self.source = source
        super().__init__(f"Invalid document {source}: {detail}")
