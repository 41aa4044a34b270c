"""Exception hierarchy shared by the matching engine and its service shell."""


class MatchEngineError(Exception):
    """Base class for all errors raised by this package."""


class InvalidDocumentError(MatchEngineError, TypeError):
    """A CV or job description was not plain text (None, bytes, numbers...)."""


class TaxonomyIntegrityError(MatchEngineError, ValueError):
    """Two skills claim the same name or alias."""


class DocumentParseError(MatchEngineError, ValueError):
    """An uploaded file could not be turned into text."""


class UnsupportedDocumentError(DocumentParseError):
    """An uploaded file is not PDF, DOCX or plain text."""
