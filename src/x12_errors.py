# Error taxonomy shared by the decoder, validator and marshaller.


class X12Error(Exception):
    """Base class for every error raised by the X12 codec."""


class MissingElementError(X12Error):
    """A control segment has fewer elements than its minimum."""


class InvalidFormatError(X12Error):
    """Envelope bracketing or an envelope invariant was violated."""


class InvalidArgumentError(X12Error, ValueError):
    """The caller passed an unusable argument (e.g. no document at all)."""
