from typing import List


class RepoCardError(Exception):
    """Base exception for all repo card errors. Rendered as an error card by the pin endpoint."""
    def __init__(self, message: str, secondary_message: str = ""):
        self.message = message
        self.secondary_message = secondary_message
        super().__init__(message)


class MissingParamError(RepoCardError):
    """Raised when required query parameters are absent."""
    def __init__(self, missed_params: List[str], secondary_message: str = ""):
        self.missed_params = missed_params
        quoted = ", ".join(f'"{p}"' for p in missed_params)
        super().__init__(
            f"Missing params {quoted} make sure you pass the parameters in URL",
            secondary_message,
        )


class FetchError(RepoCardError):
    """Raised when GitHub answers with an error or an unusable payload."""
    pass


class RepositoryNotFoundError(FetchError):
    """Raised when the repository does not exist or is private."""
    def __init__(self, message: str = "Repository Not found"):
        super().__init__(message)


class RetryExhaustedError(FetchError):
    """Raised when every retry attempt failed."""
    def __init__(self, tag: str, attempts: int):
        self.attempts = attempts
        super().__init__(f"{tag} failed after {attempts} attempts", "Please try again later")
