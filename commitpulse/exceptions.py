"""Custom exceptions for commitpulse."""


class CommitPulseError(Exception):
    """Base exception for all commitpulse errors."""


class RepositoryUnavailableError(CommitPulseError):
    """Raised when the working directory is not a usable git repository and cannot be initialised."""


class InvalidParametersError(CommitPulseError):
    """Raised when pattern parameters violate their invariants."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("Invalid pattern parameters:\n  - " + "\n  - ".join(errors))


class CommandNotAllowedError(CommitPulseError):
    """Raised when a command name is not in the allowed command set."""

    def __init__(self, command: str, allowed: tuple[str, ...]):
        self.command = command
        self.allowed = allowed
        super().__init__(f"Command '{command}' not allowed. Allowed: {', '.join(allowed)}")


class RemoteConfigError(CommitPulseError):
    """Raised when a remote URL is rejected or cannot be configured."""


class CommandTimeoutError(CommitPulseError):
    """Raised when a whole command exceeds its time budget."""
