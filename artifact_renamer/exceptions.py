"""Exceptions related to artifact-renamer."""

from pathlib import Path

__all__ = [
    "RenamerException",
    "InputException",
    "InvalidVersion",
    "MissingArtifact",
    "IOFailure",
    "ArtifactExists",
    "CommandException",
    "AssemblyException",
    "TaskNotFoundError",
    "TaskFailedError",
    "DependencyFailedError",
]


class RenamerException(Exception):
    """Generic base exception used for this library."""


class InputException(RenamerException):
    """Raised when the input files or values are not formatted as expected."""


class InvalidVersion(InputException):
    """Raised when a version name is empty or unsafe to embed in a file name."""


class MissingArtifact(RenamerException):
    """Raised when the artifact produced by an assembly step does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(
            f"Artifact {path} does not exist; was the assembly step skipped?"
        )
        self.path = path


class IOFailure(RenamerException):
    """Raised when the renamed copy of an artifact could not be written."""


class ArtifactExists(IOFailure):
    """Raised when the target artifact exists and overwriting is disabled."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Artifact {path} already exists")
        self.path = path


class CommandException(RenamerException):
    """Raised when there is a failure running a subcommand."""


class AssemblyException(CommandException):
    """Raised when the external assembly command fails."""


class TaskNotFoundError(RenamerException):
    """Raised when a task is not registered in the task graph."""


class TaskFailedError(RenamerException):
    """Raised when a task has failed and is in a terminal state."""

    def __init__(self, task_name: str, message: str | None) -> None:
        super().__init__(f"Task {task_name} failed: {message or 'Unknown error'}")
        self.task_name = task_name
        self.message = message


class DependencyFailedError(RenamerException):
    """Raised when a task dependency has failed."""

    def __init__(
        self,
        task_name: str,
        dependency_name: str,
        dependency_error: str | None,
    ):
        self.task_name = task_name
        self.dependency_name = dependency_name
        self.dependency_error = dependency_error
        super().__init__(
            f"Task {task_name} dependency {dependency_name} failed: "
            f"{dependency_error or 'Unknown error'}"
        )
