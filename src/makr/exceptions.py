"""Exceptions raised by makr.

Every error a command can report derives from MakrError; the command layer
prints its message (plus details, if any) and exits with code 1.
"""


class MakrError(Exception):
    """Base class for errors shown to the user.

    Args:
        message: One-line summary for the terminal.
        details: Underlying cause (git stderr, HTTP body, ...), shown indented.
    """

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}\n  Details: {self.details}"
        return self.message


class ConfigurationError(MakrError):
    """Raised when configuration is missing or invalid."""

    pass


class StorageError(MakrError):
    """Raised when the state document cannot be written."""

    pass


class ValidationError(MakrError):
    """Raised when input validation fails."""

    pass


class TemplateNotFoundError(MakrError, ValueError):
    """Raised when a template doesn't exist."""

    pass


class CollectionNotFoundError(MakrError, ValueError):
    """Raised when a collection doesn't exist."""

    pass


class ProjectNotFoundError(MakrError, ValueError):
    """Raised when a recent project doesn't exist."""

    pass


class ProjectTypeNotFoundError(MakrError, ValueError):
    """Raised when a project type doesn't exist."""

    pass


class DuplicateEntityError(MakrError, ValueError):
    """Raised when creating an entity that already exists."""

    pass


class AmbiguousIdentifierError(MakrError, ValueError):
    """Raised when a name-or-id lookup matches more than one template."""

    def __init__(self, identifier: str, matches: list):
        super().__init__(f'Multiple templates match "{identifier}". Use template ID instead.')
        self.identifier = identifier
        self.matches = matches


class ConflictError(MakrError):
    """Raised when a target (directory, name) is already taken."""

    pass


class GitError(MakrError):
    """Raised when a git command fails."""

    pass


class GitHubError(MakrError):
    """Base class for GitHub API errors."""

    pass


class AuthenticationError(GitHubError):
    """Raised when GitHub rejects the configured token."""

    pass


class ForkNotReadyError(GitHubError):
    """Raised when a fork never became reachable within the poll budget."""

    pass


class PromptCancelledError(MakrError):
    """Raised when the user cancels an interactive prompt."""

    def __init__(self, message: str = "Operation cancelled"):
        super().__init__(message)
