from pydantic import BaseModel, Field
from typing import List, Optional

from x12_codes import describe_isa_code

# In-memory tree of a decoded X12 interchange.
# Ownership is strictly top-down: a document owns its interchange, which owns
# its function groups, which own their transactions, and so on. All values are
# kept as text exactly as they appeared on the wire.

class Element(BaseModel):
    """A positional field of a generic segment ("01", "02", ...)."""
    id: str
    value: str = ""
    components: Optional[List[str]] = None

class Segment(BaseModel):
    """Any segment other than the six control segments."""
    id: str
    elements: List[Element] = Field(default_factory=list)

    def get_element(self, position: int) -> Optional[str]:
        """Retrieves the value of an element by its position (1-based index)."""
        if 1 <= position <= len(self.elements):
            return self.elements[position - 1].value
        return None

class ISA(BaseModel):
    """Interchange Control Header."""
    authorization_info_qualifier: str = ""
    authorization_information: str = ""
    security_info_qualifier: str = ""
    security_info: str = ""
    interchange_sender_id_qualifier: str = ""
    interchange_sender_id: str = ""
    interchange_receiver_id_qualifier: str = ""
    interchange_receiver_id: str = ""
    interchange_date: str = ""
    interchange_time: str = ""
    interchange_control_standards_id: str = ""
    interchange_control_version: str = ""
    interchange_control_number: str = ""
    acknowledgment_requested: str = ""
    usage_indicator: str = ""
    component_element_separator: str = ""

    def to_elements(self) -> List[str]:
        return ["ISA"] + [getattr(self, name) for name in ISA.model_fields]

    def describe(self, element: str) -> Optional[str]:
        """Human readable meaning of a coded ISA element, e.g. describe("ISA05")."""
        names = list(ISA.model_fields)
        suffix = element[3:]
        if not element.startswith("ISA") or not suffix.isdigit() or not 1 <= int(suffix) <= len(names):
            return None
        name = names[int(suffix) - 1]
        return describe_isa_code(element, getattr(self, name))

class IEA(BaseModel):
    """Interchange Control Trailer."""
    number_of_included_functional_groups: str = ""
    interchange_control_number: str = ""

    def to_elements(self) -> List[str]:
        return ["IEA", self.number_of_included_functional_groups, self.interchange_control_number]

class GS(BaseModel):
    """Functional Group Header."""
    functional_id_code: str = ""
    application_sender_code: str = ""
    application_receiver_code: str = ""
    date: str = ""
    time: str = ""
    group_control_number: str = ""
    responsible_agency_code: str = ""
    version_release_industry_id: str = ""

    def to_elements(self) -> List[str]:
        return ["GS"] + [getattr(self, name) for name in GS.model_fields]

class GE(BaseModel):
    """Functional Group Trailer."""
    number_of_included_transaction_sets: str = ""
    group_control_number: str = ""

    def to_elements(self) -> List[str]:
        return ["GE", self.number_of_included_transaction_sets, self.group_control_number]

class ST(BaseModel):
    """Transaction Set Header."""
    transaction_set_id_code: str = ""
    transaction_set_control_number: str = ""
    implementation_convention_reference: str = ""

    def to_elements(self) -> List[str]:
        elements = ["ST", self.transaction_set_id_code, self.transaction_set_control_number]
        if self.implementation_convention_reference:
            elements.append(self.implementation_convention_reference)
        return elements

class SE(BaseModel):
    """Transaction Set Trailer."""
    number_of_included_segments: str = ""
    transaction_set_control_number: str = ""

    def to_elements(self) -> List[str]:
        return ["SE", self.number_of_included_segments, self.transaction_set_control_number]

class Transaction(BaseModel):
    header: Optional[ST] = None
    trailer: Optional[SE] = None
    segments: List[Segment] = Field(default_factory=list)

    def get_segment(self, segment_id: str) -> Optional[Segment]:
        return next((segment for segment in self.segments if segment.id == segment_id), None)

    def get_segments(self, segment_id: str) -> List[Segment]:
        return [segment for segment in self.segments if segment.id == segment_id]

class FunctionGroup(BaseModel):
    header: Optional[GS] = None
    trailer: Optional[GE] = None
    transactions: List[Transaction] = Field(default_factory=list)

class Interchange(BaseModel):
    header: Optional[ISA] = None
    trailer: Optional[IEA] = None
    function_groups: List[FunctionGroup] = Field(default_factory=list)

class X12Document(BaseModel):
    """
    Root of a decoded X12 stream.

    `envelope_automatically_added` is set when the decoder synthesized the
    ISA/GS envelope because the input started directly with a transaction set.
    """
    interchange: Optional[Interchange] = Field(default_factory=Interchange)
    envelope_automatically_added: bool = False

    def validate_envelope(self) -> None:
        """Raises the first envelope violation found, see x12_validator.validate."""
        from x12_validator import validate
        validate(self)

    def to_edi(self, **marshaller_options) -> bytes:
        from x12_marshaller import Marshaller
        return Marshaller(**marshaller_options).marshal(self)
