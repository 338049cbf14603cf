"""Error taxonomy for the acquisition and extraction pipeline.

These are raised inside the components and absorbed at their boundaries:
the sentiment racer always returns a reading and the parser chain always
returns a list. Only the document fetcher and the file helpers let them
reach the caller.
"""

from __future__ import annotations

from typing import Optional


class PipelineError(Exception):
    """Base class for pipeline failures."""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class SourceUnavailable(PipelineError):
    """Network failure or non-2xx response from a source."""


class SourceTimeout(PipelineError):
    """A source did not answer within its deadline."""


class MalformedPayload(PipelineError):
    """A source answered but the numeric field was missing or not a number."""


class ParseStrategyMiss(PipelineError):
    """An extraction strategy found no usable rows."""


class ValidationRejected(PipelineError):
    """A candidate record failed validation."""
