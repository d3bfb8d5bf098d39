import logging
from typing import Iterable, Iterator, List, Optional, Union

from pydantic import ValidationError

from x12_config import (
    DEFAULT_ELEMENT_SEPARATOR,
    DEFAULT_SEGMENT_SEPARATOR,
    Delimiters,
)
from x12_errors import InvalidArgumentError, InvalidFormatError

logger = logging.getLogger(__name__)

# Fixed positions inside a well-formed ISA segment.
ISA_LENGTH = 106
ISA_ELEMENT_SEPARATOR_POS = 3
ISA_COMPONENT_SEPARATOR_POS = 104
ISA_SEGMENT_TERMINATOR_POS = 105

Source = Union[bytes, bytearray, str, Iterable[bytes]]


def iter_chunks(source: Source, read_size: int = 4096, encoding: str = "latin-1") -> Iterator[bytes]:
    """
    Normalizes a byte source into a sequence of byte chunks.

    Accepts bytes, str, any object with a ``read(n)`` method (binary or text
    streams) or an iterable of byte chunks. Errors raised by the source
    propagate unchanged.
    """
    if isinstance(source, str):
        if source:
            yield source.encode(encoding)
        return
    if isinstance(source, (bytes, bytearray, memoryview)):
        if source:
            yield bytes(source)
        return
    if hasattr(source, "read"):
        while True:
            chunk = source.read(read_size)
            if not chunk:
                return
            yield chunk.encode(encoding) if isinstance(chunk, str) else bytes(chunk)
    try:
        chunks = iter(source)
    except TypeError:
        raise InvalidArgumentError(f"Unsupported byte source of type {type(source).__name__}.") from None
    for chunk in chunks:
        if chunk:
            yield chunk.encode(encoding) if isinstance(chunk, str) else bytes(chunk)


def scan_segments(
    source: Source,
    separator: str = DEFAULT_SEGMENT_SEPARATOR,
    max_segment_bytes: int = 65536,
    read_size: int = 4096,
    encoding: str = "latin-1",
) -> Iterator[bytes]:
    """
    Splits a byte source into segment tokens, excluding the separator.

    A non-empty unterminated tail is yielded as the final token. Empty input
    yields nothing. No escaping is interpreted.
    """
    separator_bytes = separator.encode(encoding)
    if len(separator_bytes) != 1:
        raise InvalidArgumentError(f"Segment separator must be a single byte, got {separator!r}.")

    buffer = bytearray()
    offset = 0  # stream offset of buffer[0]
    for chunk in iter_chunks(source, read_size, encoding):
        buffer.extend(chunk)
        start = 0
        while True:
            index = buffer.find(separator_bytes, start)
            if index < 0:
                break
            _check_length(index - start, offset + start, max_segment_bytes)
            yield bytes(buffer[start:index])
            start = index + 1
        del buffer[:start]
        offset += start
        _check_length(len(buffer), offset, max_segment_bytes)

    if buffer:
        yield bytes(buffer)


def _check_length(length: int, offset: int, max_segment_bytes: int) -> None:
    if length > max_segment_bytes:
        raise InvalidFormatError(
            f"segment starting at byte {offset} exceeds the maximum of {max_segment_bytes} bytes"
        )


def split_elements(segment: str, separator: str = DEFAULT_ELEMENT_SEPARATOR) -> List[str]:
    """Element zero is the segment id; composites are left unsplit."""
    return segment.split(separator)


def detect_delimiters(data: Union[bytes, str], encoding: str = "latin-1") -> Optional[Delimiters]:
    """Reads the separators from the fixed positions of a leading ISA segment."""
    text = data.decode(encoding, errors="replace") if isinstance(data, (bytes, bytearray)) else data
    clean = text.lstrip()
    if not (clean.startswith("ISA") and len(clean) >= ISA_LENGTH):
        logger.warning("Could not find standard ISA segment. Falling back to configured delimiters.")
        return None
    try:
        delimiters = Delimiters(
            segment=clean[ISA_SEGMENT_TERMINATOR_POS],
            element=clean[ISA_ELEMENT_SEPARATOR_POS],
            sub_element=clean[ISA_COMPONENT_SEPARATOR_POS],
        )
    except ValidationError as e:
        logger.warning(f"ISA segment declares unusable delimiters, falling back to configured ones: {e.errors()[0]['msg']}")
        return None
    logger.debug(f"Delimiters detected: Element='{delimiters.element}', Segment='{delimiters.segment}', Component='{delimiters.sub_element}'")
    return delimiters
