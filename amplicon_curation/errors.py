"""
Errors raised while curating an abundance table.

Every error propagates to the caller; the luigi task (or the CLI step) that
hit it fails as a whole.
"""


class CurationError(Exception):
    pass


class MalformedTableError(CurationError):
    """A count, shared or taxonomy file breaks its structural contract."""


class EmptyTableError(CurationError):
    """A table has no sample to work on."""


class InconsistentIdError(CurationError):
    """Identifiers disagree between the table, the FASTA and the taxonomy."""

    def __init__(self, msg, missing=()):
        super().__init__(msg)
        self.missing = list(missing)


class AllSequencesFilteredError(CurationError):
    """Filtering removed every sequence of the table."""
