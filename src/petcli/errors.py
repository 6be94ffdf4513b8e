"""Error types shared across PetCLI."""


class PetCLIError(Exception):
    """Base class for all PetCLI errors."""


class ConfigLoadError(PetCLIError):
    """The config file exists but could not be parsed or has bad values."""

    def __init__(self, message: str, path=None) -> None:
        super().__init__(message)
        self.path = path


class MissingCredential(PetCLIError):
    """A required API key is not available in the environment."""

    def __init__(self, env_var: str) -> None:
        super().__init__(f"{env_var} not found in environment variables.")
        self.env_var = env_var


class AIError(PetCLIError):
    """The AI backend failed to produce a reply."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NetworkError(AIError):
    """Connection failure, dropped connection or timeout."""


class AuthError(AIError):
    """The backend rejected our credentials (HTTP 401/403)."""


class RateLimitError(AIError):
    """The backend is throttling us (HTTP 429)."""
