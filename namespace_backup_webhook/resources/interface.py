from typing import Any


class ResourceError(Exception):
    """A backend call for a namespaced resource failed."""

    def __init__(self, message: str = "", status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class ResourceNotFound(ResourceError):
    pass


class ResourceAlreadyExists(ResourceError):
    pass


class ClusterConfigError(Exception):
    """Credentials or the API client could not be set up."""


class ResourceClient:
    """get/create/delete for one resource kind inside one namespace."""

    def get(self, name: str, timeout: float | None = None) -> dict[str, Any]:
        """
        Return the stored object; raise ResourceNotFound if it does not exist.
        """
        raise NotImplementedError

    def create(self, body: dict[str, Any], timeout: float | None = None) -> dict[str, Any]:
        """
        Create the object; raise ResourceAlreadyExists if the name is taken.
        """
        raise NotImplementedError

    def delete(self, name: str, timeout: float | None = None) -> None:
        """
        Delete the object; raise ResourceNotFound if it does not exist.
        """
        raise NotImplementedError
