import logging
from typing import List, Optional

from x12_config import (
    DEFAULT_ELEMENT_SEPARATOR,
    DEFAULT_SEGMENT_SEPARATOR,
    DEFAULT_SUB_ELEMENT_SEPARATOR,
)
from x12_document import Element, FunctionGroup, Segment, Transaction, X12Document
from x12_errors import InvalidArgumentError, InvalidFormatError

logger = logging.getLogger(__name__)

class Marshaller:
    """
    Serializes an X12Document back to a delimited byte stream.

    Empty separators fall back to the defaults ('~', '*', ':'). With
    `new_lines`, a line feed follows every segment separator; it is for
    readability only and not part of the wire format.
    """

    def __init__(
        self,
        segment_separator: str = DEFAULT_SEGMENT_SEPARATOR,
        element_separator: str = DEFAULT_ELEMENT_SEPARATOR,
        sub_element_separator: str = DEFAULT_SUB_ELEMENT_SEPARATOR,
        new_lines: bool = False,
        encoding: str = "latin-1",
    ):
        self.segment_separator = segment_separator or DEFAULT_SEGMENT_SEPARATOR
        self.element_separator = element_separator or DEFAULT_ELEMENT_SEPARATOR
        self.sub_element_separator = sub_element_separator or DEFAULT_SUB_ELEMENT_SEPARATOR
        self.new_lines = new_lines
        self.encoding = encoding

    def marshal(self, document: Optional[X12Document]) -> bytes:
        if document is None:
            raise InvalidArgumentError("invalid argument: doc nil")
        if document.interchange is None:
            raise InvalidFormatError("invalid format: cannot marshal a document without an interchange")

        lines: List[str] = []
        if document.envelope_automatically_added:
            self._encode_stripped(document, lines)
        else:
            self._encode_interchange(document, lines)

        logger.info(f"Marshalled {len(lines)} segment(s).")
        try:
            return "".join(lines).encode(self.encoding)
        except UnicodeEncodeError as e:
            raise InvalidFormatError(f"invalid format: cannot encode {e.object[e.start:e.end]!r} as {self.encoding}") from e

    def _terminator(self) -> str:
        return self.segment_separator + "\n" if self.new_lines else self.segment_separator

    def _write(self, elements: List[str], lines: List[str]) -> None:
        lines.append(self.element_separator.join(elements) + self._terminator())

    def _encode_interchange(self, document: X12Document, lines: List[str]) -> None:
        interchange = document.interchange
        self._write(_required(interchange.header, "ISA").to_elements(), lines)
        for group in interchange.function_groups:
            self._encode_function_group(group, lines)
        self._write(_required(interchange.trailer, "IEA").to_elements(), lines)

    def _encode_stripped(self, document: X12Document, lines: List[str]) -> None:
        """Emits only the transaction set that the decoder wrapped in an envelope."""
        groups = document.interchange.function_groups
        if len(groups) != 1 or len(groups[0].transactions) != 1:
            raise InvalidFormatError(
                f"invalid format: an automatically enveloped document must hold exactly one function group "
                f"and one transaction (got {len(groups)} group(s), "
                f"{sum(len(g.transactions) for g in groups)} transaction(s))"
            )
        self._encode_transaction(groups[0].transactions[0], lines)

    def _encode_function_group(self, group: FunctionGroup, lines: List[str]) -> None:
        self._write(_required(group.header, "GS").to_elements(), lines)
        for transaction in group.transactions:
            self._encode_transaction(transaction, lines)
        self._write(_required(group.trailer, "GE").to_elements(), lines)

    def _encode_transaction(self, transaction: Transaction, lines: List[str]) -> None:
        self._write(_required(transaction.header, "ST").to_elements(), lines)
        for segment in transaction.segments:
            self._write(self._segment_elements(segment), lines)
        self._write(_required(transaction.trailer, "SE").to_elements(), lines)

    def _segment_elements(self, segment: Segment) -> List[str]:
        return [segment.id] + [self._encode_element(element) for element in segment.elements]

    def _encode_element(self, element: Element) -> str:
        if element.components is None:
            return element.value
        return self.sub_element_separator.join([element.value] + list(element.components))


def _required(record, segment_id: str):
    if record is None:
        raise InvalidFormatError(f"invalid format: cannot marshal, {segment_id} segment missing")
    return record


def marshal(document: X12Document, **options) -> bytes:
    """Shortcut for Marshaller(**options).marshal(document)."""
    return Marshaller(**options).marshal(document)
