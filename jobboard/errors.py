"""Exception hierarchy for the job posting and application-form pipeline."""

from __future__ import annotations


class JobBoardError(Exception):
    """Base class for every error raised by this package."""


class FormInputError(JobBoardError):
    """A form definition the caller can fix and resubmit.

    ``path`` points at the offending value, e.g. ``fields[2].options``.
    """

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path
        self.message = message


class FormCompilationError(FormInputError):
    """Field configuration that cannot be turned into blocks."""


class FormSchemaError(FormInputError):
    """Compiled blocks the form service is known to reject."""


class JobStoreError(JobBoardError):
    """Job record could not be written or removed."""


class FormServiceError(JobBoardError):
    """The external form service did not create the form."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
