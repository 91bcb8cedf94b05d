from typing import List, Optional

from cloudfront_provider.types import Json


class ProviderError(Exception):
    pass


class SchemaError(ProviderError):
    """
    Mark error as data that does not fit the resource schema.
    """


class SchemaValidationError(ProviderError):
    """
    Mark error as an invalid resource configuration.
    All problems found in the configuration are collected in errors.
    """

    def __init__(self, kind: str, errors: List[str]) -> None:
        self.kind = kind
        self.errors = errors
        super().__init__(f"Invalid configuration for {kind}: " + "; ".join(errors))


class NotFoundError(ProviderError):
    """
    Mark error as something that could not be found remotely.
    """


class EmptyResultError(NotFoundError):
    """
    The API answered successfully, but the expected object was not part of the answer.
    """


class ResourceOperationError(ProviderError):
    """
    A lifecycle operation (create, read, update, delete) of a resource failed.
    If the remote object was created before the failure, state holds what is known about it.
    """

    def __init__(self, message: str, state: Optional[Json] = None) -> None:
        super().__init__(message)
        self.state = state


class UnknownResourceKindError(ProviderError):
    pass
