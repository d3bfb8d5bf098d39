import itertools
import logging
from typing import List, Optional

from x12_config import DecoderConfig, Delimiters
from x12_document import (
    GE, GS, IEA, ISA, SE, ST, Element, FunctionGroup, Segment, Transaction, X12Document,
)
from x12_errors import InvalidFormatError, MissingElementError
from x12_scanner import ISA_LENGTH, Source, detect_delimiters, iter_chunks, scan_segments, split_elements

logger = logging.getLogger(__name__)

# Minimum element counts per control segment, the segment id counted as element zero.
MIN_ELEMENTS = {
    "ISA": 17,
    "IEA": 3,
    "GS": 9,
    "GE": 3,
    "ST": 3,
    "SE": 3,
}

AUTO_ENVELOPE_CONTROL_NUMBER = "000000001"

# Bytes pulled from a stream before looking for declared delimiters.
SNIFF_BYTES = 1024

# --- Control-segment parsers ---
def _require(elements: List[str], segment_id: str, maximum: Optional[int] = None) -> None:
    minimum = MIN_ELEMENTS[segment_id]
    if len(elements) < minimum:
        raise MissingElementError(f"{segment_id}: missing element (expected at least {minimum - 1}, got {len(elements) - 1})")
    maximum = maximum or minimum
    if len(elements) > maximum:
        logger.debug(f"{segment_id}: ignoring {len(elements) - maximum} surplus element(s): {elements[maximum:]}")

def parse_isa(elements: List[str]) -> ISA:
    _require(elements, "ISA")
    return ISA(
        authorization_info_qualifier=elements[1],
        authorization_information=elements[2],
        security_info_qualifier=elements[3],
        security_info=elements[4],
        interchange_sender_id_qualifier=elements[5],
        interchange_sender_id=elements[6],
        interchange_receiver_id_qualifier=elements[7],
        interchange_receiver_id=elements[8],
        interchange_date=elements[9],
        interchange_time=elements[10],
        interchange_control_standards_id=elements[11],
        interchange_control_version=elements[12],
        interchange_control_number=elements[13],
        acknowledgment_requested=elements[14],
        usage_indicator=elements[15],
        component_element_separator=elements[16],
    )

def parse_iea(elements: List[str]) -> IEA:
    _require(elements, "IEA")
    return IEA(number_of_included_functional_groups=elements[1], interchange_control_number=elements[2])

def parse_gs(elements: List[str]) -> GS:
    _require(elements, "GS")
    return GS(
        functional_id_code=elements[1],
        application_sender_code=elements[2],
        application_receiver_code=elements[3],
        date=elements[4],
        time=elements[5],
        group_control_number=elements[6],
        responsible_agency_code=elements[7],
        version_release_industry_id=elements[8],
    )

def parse_ge(elements: List[str]) -> GE:
    _require(elements, "GE")
    return GE(number_of_included_transaction_sets=elements[1], group_control_number=elements[2])

def parse_st(elements: List[str]) -> ST:
    _require(elements, "ST", maximum=4)
    header = ST(transaction_set_id_code=elements[1], transaction_set_control_number=elements[2])
    if len(elements) > 3:
        header.implementation_convention_reference = elements[3]
    return header

def parse_se(elements: List[str]) -> SE:
    _require(elements, "SE")
    return SE(number_of_included_segments=elements[1], transaction_set_control_number=elements[2])

# --- Generic-segment parser ---
def parse_elements(values: List[str]) -> List[Element]:
    """Assigns dense, 1-based, two-digit ids; composites stay in the raw value."""
    return [Element(id=f"{i + 1:02d}", value=value) for i, value in enumerate(values)]

# --- Envelope state machine ---
class EnvelopeDecoder:
    """
    Builds an X12Document from segment tokens while tracking the current
    function group and transaction.

    A decoder instance is single use: create one per input. After `decode`,
    `delimiters` holds the separators actually used, including any read from
    the ISA segment.
    """

    def __init__(self, config: Optional[DecoderConfig] = None):
        self.config = config or DecoderConfig()
        self.delimiters: Delimiters = self.config.delimiters
        self.document = X12Document()
        self.line_index = 0
        self.current_group: Optional[FunctionGroup] = None
        self.current_transaction: Optional[Transaction] = None

    def decode(self, source: Source) -> X12Document:
        if self.config.detect_delimiters:
            source = self._sniff_delimiters(source)

        tokens = scan_segments(
            source,
            separator=self.delimiters.segment,
            max_segment_bytes=self.config.max_segment_bytes,
            read_size=self.config.read_size,
            encoding=self.config.encoding,
        )
        for token in tokens:
            self.process_segment(token.decode(self.config.encoding))

        interchange = self.document.interchange
        logger.info(
            f"Decoded {self.line_index} segment token(s): {len(interchange.function_groups)} function group(s), "
            f"{sum(len(g.transactions) for g in interchange.function_groups)} transaction(s)"
            f"{' (envelope automatically added)' if self.document.envelope_automatically_added else ''}."
        )
        return self.document

    def process_segment(self, line: str) -> None:
        self.line_index += 1
        segment = line.strip("\r\n")
        if not segment:
            return

        elements = split_elements(segment, self.delimiters.element)
        segment_id = self._segment_id(elements)
        logger.debug(f"[LINE {self.line_index}] Dispatching '{segment_id}' with {len(elements) - 1} element(s)")
        try:
            self._dispatch(segment_id, elements)
        except MissingElementError as e:
            raise MissingElementError(f"line {self.line_index}: {e}") from None

    def _segment_id(self, elements: List[str]) -> str:
        segment_id = elements[0]
        if self.config.relaxed_segment_id_whitespace:
            segment_id = segment_id.strip()
        return segment_id

    def _dispatch(self, segment_id: str, elements: List[str]) -> None:
        interchange = self.document.interchange
        if segment_id == "ISA":
            interchange.header = parse_isa(elements)
        elif segment_id == "IEA":
            interchange.trailer = parse_iea(elements)
        elif segment_id == "GS":
            self.current_group = FunctionGroup(header=parse_gs(elements))
            interchange.function_groups.append(self.current_group)
        elif segment_id == "GE":
            if self.current_group is None:
                raise self._format_error("GE segment without GS segment")
            self.current_group.trailer = parse_ge(elements)
        elif segment_id == "ST":
            header = parse_st(elements)
            self._consider_automatic_envelope()
            if self.current_group is None:
                raise self._format_error("ST segment without GS segment")
            self.current_transaction = Transaction(header=header)
            self.current_group.transactions.append(self.current_transaction)
        elif segment_id == "SE":
            if self.current_transaction is None:
                raise self._format_error("SE segment without ST segment")
            self.current_transaction.trailer = parse_se(elements)
        else:
            if self.current_transaction is None:
                raise self._format_error(f"'{segment_id}' segment without ST segment")
            self.current_transaction.segments.append(Segment(id=segment_id, elements=parse_elements(elements[1:])))

    def _consider_automatic_envelope(self) -> None:
        """Wraps a bare transaction set in a minimal ISA/GS envelope."""
        if not (self.line_index == 1 and self.current_group is None and self.current_transaction is None):
            return

        logger.info("Input starts with a transaction set. Adding a minimal ISA/GS envelope.")
        self.document.envelope_automatically_added = True
        interchange = self.document.interchange
        interchange.header = ISA(
            interchange_control_number=AUTO_ENVELOPE_CONTROL_NUMBER,
            component_element_separator=self.delimiters.sub_element,
        )
        interchange.trailer = IEA(
            number_of_included_functional_groups="1",
            interchange_control_number=AUTO_ENVELOPE_CONTROL_NUMBER,
        )
        self.current_group = FunctionGroup(
            header=GS(group_control_number=AUTO_ENVELOPE_CONTROL_NUMBER),
            trailer=GE(number_of_included_transaction_sets="1", group_control_number=AUTO_ENVELOPE_CONTROL_NUMBER),
        )
        interchange.function_groups.append(self.current_group)

    def _format_error(self, message: str) -> InvalidFormatError:
        return InvalidFormatError(f"line {self.line_index}: invalid format: {message}")

    def _sniff_delimiters(self, source: Source) -> Source:
        """Switches to the delimiters declared by a leading ISA segment, if any."""
        if isinstance(source, (str, bytes, bytearray, memoryview)):
            head: bytes = bytes(source[:SNIFF_BYTES]) if not isinstance(source, str) else source[:SNIFF_BYTES].encode(self.config.encoding)
            remaining: Source = source
        else:
            chunks = iter_chunks(source, self.config.read_size, self.config.encoding)
            buffer = bytearray()
            for chunk in chunks:
                buffer.extend(chunk)
                if len(buffer.lstrip()) >= ISA_LENGTH:
                    break
            head = bytes(buffer)
            remaining = itertools.chain([head], chunks)

        detected = detect_delimiters(head, self.config.encoding)
        if detected is not None:
            if detected != self.delimiters:
                logger.info(
                    f"Using delimiters declared in ISA: Element='{detected.element}', "
                    f"Segment='{detected.segment}', Component='{detected.sub_element}'"
                )
            self.delimiters = detected
        return remaining


def decode(source: Source, config: Optional[DecoderConfig] = None, **overrides) -> X12Document:
    """
    Decodes an X12 byte stream into an X12Document.

    `source` may be bytes, str, a binary or text stream, or an iterable of
    byte chunks. Keyword overrides are applied onto `config`, e.g.
    ``decode(data, relaxed_segment_id_whitespace=True)``.

    Fails fast: the first structural error is raised and no partial document
    is returned.
    """
    config = (config or DecoderConfig()).with_overrides(**overrides)
    return EnvelopeDecoder(config).decode(source)
