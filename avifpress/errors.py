"""
Error taxonomy for the AVIF conversion pipeline.

Every failure raised while handling an upload is a ``ConversionError``
subclass carrying a short ``kind`` string. The API layer logs the kind
and collapses all of them into one generic response.
"""


class ConversionError(Exception):
    """Base class for all conversion pipeline failures"""
    kind = "conversion"


class ValidationError(ConversionError):
    """Compression parameters are out of range or not numeric"""
    kind = "validation"


class NotFoundError(ConversionError):
    """The source artifact does not exist"""
    kind = "not_found"


class CodecError(ConversionError):
    """The AVIF encoder rejected the input or failed"""
    kind = "codec"


class FilesystemError(ConversionError):
    """A directory could not be created or a file could not be written"""
    kind = "filesystem"


class ConversionTimeoutError(ConversionError):
    """The encoder did not finish before the deadline"""
    kind = "timeout"
