"""Custom exceptions for Shorts Ranker."""


class RankerError(Exception):
    """Base class for errors surfaced to callers of the pipeline."""

    kind = "internal_error"


class ValidationError(RankerError):
    """Job input is malformed or incomplete; raised before any external call."""

    kind = "validation_error"


class ToolUnavailable(RankerError):
    """A required external media tool (ffmpeg/ffprobe) is not installed."""

    kind = "tool_unavailable"


class MediaToolFailure(RankerError):
    """The media tool ran but exited with an error."""

    kind = "tool_execution_failure"

    def __init__(self, message: str, stderr: str = "", command=None):
        super().__init__(message)
        self.stderr = stderr
        self.command = command


class RemoteServiceFailure(RankerError):
    """A remote text or speech service call failed."""

    kind = "remote_service_failure"


class ResourceCleanupFailure(RankerError):
    """Best-effort removal of a temp or output file failed. Never surfaces to callers."""

    kind = "resource_cleanup_failure"
