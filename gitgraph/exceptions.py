"""gitgraph exception classes."""


class GitGraphError(Exception):
    """Base exception for all gitgraph errors."""

    def __init__(
        self,
        code: str,
        message: str,
        request_id: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        self.status_code = status_code
        super().__init__(f"[{code}] {message}")


class ConfigurationError(GitGraphError):
    """Raised when client configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class InvalidArgumentError(GitGraphError):
    """Raised when a caller supplies a malformed identifier or value."""

    def __init__(self, message: str) -> None:
        super().__init__("INVALID_ARGUMENT", message)


class UnsupportedError(GitGraphError):
    """Raised when the provider cannot return a complete result.

    A truncated tree listing is the typical case. It is never retried.
    """

    def __init__(self, message: str) -> None:
        super().__init__("UNSUPPORTED", message)


class AuthenticationError(GitGraphError):
    """Raised when the token is rejected."""

    pass


class AuthorizationError(GitGraphError):
    """Raised when access is denied."""

    pass


class NotFoundError(GitGraphError):
    """Raised when a resource is not found."""

    pass


class DependencyFileNotFoundError(NotFoundError):
    """Raised when a file does not exist at the requested ref."""

    def __init__(
        self,
        file_path: str,
        repo_uri: str,
        ref: str,
        request_id: str | None = None,
    ) -> None:
        super().__init__(
            "FILE_NOT_FOUND",
            f"File '{file_path}' does not exist in repo '{repo_uri}' at '{ref}'",
            request_id,
            404,
        )
        self.file_path = file_path
        self.repo_uri = repo_uri
        self.ref = ref


class TreePathNotFoundError(NotFoundError):
    """Raised when a directory path cannot be resolved inside a commit."""

    def __init__(self, path: str) -> None:
        super().__init__("PATH_NOT_FOUND", f"The path '{path}' could not be found.")
        self.path = path


class ConflictError(GitGraphError):
    """Raised on conflicts (non fast-forward ref updates, merge conflicts, etc.)."""

    pass


class RateLimitedError(GitGraphError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        request_id: str | None = None,
        status_code: int | None = 429,
    ) -> None:
        super().__init__(code, message, request_id, status_code)
        self.retry_after = retry_after


class ValidationError(GitGraphError):
    """Raised on validation errors (422 and other client errors)."""

    pass


class ServerError(GitGraphError):
    """Raised on server errors (5xx) and connection failures."""

    pass
