"""Pipeline error kinds.

Stages never catch these; the first one raised ends the whole chain and
surfaces at the outermost driver.

Dependencies: (none, leaf module)
Wired in: pipeline/actions.py, pipeline/driver.py, stages/ls.py, cli.py
"""

from __future__ import annotations


class PipelineError(RuntimeError):
    """Base class for fatal pipeline failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.user_message = message


class PipelineCancelledError(PipelineError):
    """Raised when cooperative cancellation is observed before an upstream pull."""

    def __init__(self, message: str = "Ctrl-C pressed") -> None:
        super().__init__(message)


class SourceError(PipelineError):
    """Raised when filesystem enumeration or a metadata lookup fails."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class UpstreamError(PipelineError):
    """Opaque failure raised by some stage, wrapped by the driver."""
