"""
Error types raised by fbnd.

- FbndError and its subclasses are ordinary, reportable failures
  (bad markup, failed request).
- ResolutionInvariantViolation is NOT a FbndError: it means the upstream site
  no longer behaves the way this package assumes and should crash loudly.
"""

from __future__ import annotations


class FbndError(Exception):
    """
    Base class for all recoverable fbnd errors.

    cycle is set to the SemesterCycle whose catalog could not be fetched,
    when the error happened while fetching one.
    """

    cycle = None


class ParseError(FbndError):
    """The HTML did not have the expected structure."""


class TransportError(FbndError):
    """The request to the timetable server failed."""


class ResolutionInvariantViolation(RuntimeError):
    """A program ID was found in neither the summer nor the winter catalog."""
