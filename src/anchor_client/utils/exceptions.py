"""Custom exceptions for Anchor Client."""


class AnchorClientError(Exception):
    """Base exception for Anchor Client errors."""

    pass


class ApiError(AnchorClientError):
    """Base exception for control-plane API failures."""

    pass


class ApiConnectionError(ApiError):
    """Exception raised when the control-plane API cannot be reached."""

    def __init__(
        self,
        base_url: str,
        original_error: Exception | None = None,
        message: str | None = None,
    ) -> None:
        """
        Initialize ApiConnectionError.

        Args:
            base_url: Base URL that could not be reached
            original_error: Original transport exception
            message: Override for the default connection message
        """
        self.base_url = base_url
        self.original_error = original_error
        super().__init__(
            message
            or f"Cannot connect to control-plane API at {base_url}. "
            "Make sure the API server is running."
        )


class ApiTimeoutError(ApiConnectionError):
    """Exception raised when an API call exceeds its timeout."""

    def __init__(self, base_url: str, original_error: Exception | None = None) -> None:
        super().__init__(
            base_url,
            original_error,
            message=f"Request to control-plane API at {base_url} timed out",
        )


class ApiResponseError(ApiError):
    """Exception raised for non-2xx responses and failed envelopes."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        payload: object | None = None,
    ) -> None:
        """
        Initialize ApiResponseError.

        Args:
            message: Server message, or the HTTP status line as fallback
            status_code: HTTP status code if known
            payload: Decoded response body if any
        """
        self.status_code = status_code
        self.payload = payload
        super().__init__(message)


class PreconditionError(AnchorClientError):
    """Exception raised when an operation is refused before any network call."""

    pass


class VolumeInUseError(PreconditionError):
    """Exception raised when removing an in-use volume without force."""

    def __init__(self, name: str) -> None:
        """
        Initialize VolumeInUseError.

        Args:
            name: Volume name
        """
        self.name = name
        super().__init__(f"Volume {name} is in use by one or more containers")


class ResourceNotFoundError(AnchorClientError):
    """Exception raised when a resource is not in the local collection."""

    def __init__(self, kind: str, identifier: str) -> None:
        """
        Initialize ResourceNotFoundError.

        Args:
            kind: Resource kind (container, image, volume)
            identifier: ID or name that was not found
        """
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind.capitalize()} {identifier} not found")


class UnsupportedResourceError(AnchorClientError, ValueError):
    """Exception raised for an unknown resource kind, filter or sort key."""

    pass
