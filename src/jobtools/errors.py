"""
Error classes for job-set resolution.

All failures are fatal and propagate to the caller; nothing is retried.

- SchemaError: malformed or contradictory job-set descriptor
- IndexOutOfRange: caller asked for a job that does not exist
- InvalidIndex / InvalidRequest: partitioner / sampler preconditions
- LookupFailure: sequencer or source-file lookups that found nothing
- IncompleteConfiguration: descriptor is valid but cannot answer the query
"""

from __future__ import annotations

from typing import Any


class JobToolsError(Exception):
    """Base exception for jobtools."""
    pass


# ---------------------------------------------------------------------------
# Descriptor / caller errors
# ---------------------------------------------------------------------------

class SchemaError(JobToolsError, ValueError):
    """Job-set descriptor is malformed or contradictory."""
    pass


class IndexOutOfRange(JobToolsError, IndexError):
    """Job index is negative or beyond the end of a finite job set."""

    def __init__(self, index: int, njobs: int = 0):
        self.index = index
        self.njobs = njobs
        if njobs:
            msg = f"job index {index} is out of range [0, {njobs})"
        else:
            msg = f"job index {index} must be non-negative"
        super().__init__(msg)


class InvalidIndex(JobToolsError, ValueError):
    """Partition requested past the end of a file list."""
    pass


class InvalidRequest(JobToolsError, ValueError):
    """Sampler asked for more files than it has."""
    pass


# ---------------------------------------------------------------------------
# Lookup failures (offending input echoed back)
# ---------------------------------------------------------------------------

class LookupFailure(JobToolsError, LookupError):
    """A sequencer or file lookup did not resolve to a job index."""

    def __init__(self, message: str, value: Any):
        self.value = value
        super().__init__(message)


class SequencerNotFound(LookupFailure):
    pass


class MalformedSequencer(LookupFailure):
    pass


class SequencerMismatch(LookupFailure):
    pass


class FileNotAPrimaryInput(LookupFailure):
    pass


# ---------------------------------------------------------------------------
# Descriptor valid, but incomplete for the requested operation
# ---------------------------------------------------------------------------

class IncompleteConfiguration(JobToolsError):
    pass


class MissingRunNumber(IncompleteConfiguration):
    pass


class UnsupportedConfiguration(IncompleteConfiguration):
    pass


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------

class NotFound(JobToolsError, FileNotFoundError):
    """Job-set archive does not exist."""
    pass


class CorruptArchive(JobToolsError):
    """Archive is unreadable or lacks the job parameters member."""
    pass


class MalformedFilename(JobToolsError, ValueError):
    """File basename does not follow the six-field naming convention."""

    def __init__(self, name: str, reason: str = ""):
        self.name = name
        msg = f"malformed file name {name!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class ConfigError(JobToolsError, ValueError):
    """Invalid protocol/location configuration."""
    pass
