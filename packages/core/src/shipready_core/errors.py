"""Error taxonomy shared by every pipeline stage.

Only per-commit ticket lookup failures are recovered locally (see
readiness.py). Everything else propagates to the CLI, which turns it into a
non-zero exit without printing a partial report.
"""

from __future__ import annotations


class ShipreadyError(Exception):
    """Base class for all errors raised by shipready."""


class ConfigError(ShipreadyError):
    """Required configuration is missing or invalid."""


class UnknownProjectError(ShipreadyError):
    def __init__(self, project: str, known: list[str]):
        self.project = project
        super().__init__(f"Project not found: {project!r}. Known projects: {', '.join(sorted(known))}")


class UpstreamError(ShipreadyError):
    """Non-success HTTP status, transport failure or unparsable payload."""


class TimestampParseError(UpstreamError):
    """An upstream commit carried a date that could not be parsed."""


class PathNotFoundError(ShipreadyError):
    def __init__(self, pointer: str, document: str = ""):
        self.pointer = pointer
        self.document = document
        where = f" in {document}" if document else ""
        super().__init__(f"The specified path does not exist{where}: {pointer}")


class ImageTagError(ShipreadyError):
    """The deployed image tag does not have the ``<prefix>-<revision>`` shape."""


class EmptyInputError(ShipreadyError):
    """A caller passed an empty batch where at least one item is required."""
