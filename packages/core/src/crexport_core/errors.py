"""Exceptions raised by the export pipeline.

InputError and ExportWriteError abort the export they occur in. A
ResolutionError only ever costs one comment its code snippet.
"""


class ExportError(Exception):
    """Base class for every failure reported to the caller of an export."""


class InputError(ExportError):
    """The comment table or a custom template is missing or malformed."""


class RangeSelectorError(InputError):
    """A range selector does not follow `startLine:startCol-endLine:endCol`."""


class ResolutionError(ExportError):
    """A range could not be extracted from its source file."""


class ExportWriteError(ExportError):
    """The output file could not be written."""
