import logging
from typing import List, Optional

from pydantic import BaseModel

from x12_document import X12Document
from x12_errors import InvalidArgumentError, InvalidFormatError

logger = logging.getLogger(__name__)

class EnvelopeViolation(BaseModel):
    """One envelope-level finding."""
    message: str
    segment_id: Optional[str] = None
    kind: str = "invalid_format"

def validate(document: Optional[X12Document]) -> None:
    """
    Checks envelope presence and control-number equality.

    Read-only. Raises the first violation encountered: InvalidArgumentError for
    a missing document, InvalidFormatError for anything else.
    """
    if document is None:
        raise InvalidArgumentError("invalid argument: doc nil")
    violations = _walk(document, stop_at_first=True)
    if violations:
        raise InvalidFormatError(f"invalid format: {violations[0].message}")

def collect_violations(document: Optional[X12Document], check_counts: bool = False) -> List[EnvelopeViolation]:
    """
    Performs the same checks as `validate` but returns every violation found.

    With `check_counts`, also compares IEA01, GE01 and SE01 with the number of
    groups, transactions and segments actually present.
    """
    if document is None:
        return [EnvelopeViolation(message="doc nil", kind="invalid_argument")]
    violations = _walk(document, stop_at_first=False, check_counts=check_counts)
    for violation in violations:
        logger.warning(f"Envelope violation ({violation.segment_id or 'DOCUMENT'}): {violation.message}")
    return violations

def _walk(document: X12Document, stop_at_first: bool, check_counts: bool = False) -> List[EnvelopeViolation]:
    violations: List[EnvelopeViolation] = []

    def add(message: str, segment_id: Optional[str] = None, kind: str = "invalid_format") -> bool:
        violations.append(EnvelopeViolation(message=message, segment_id=segment_id, kind=kind))
        return stop_at_first

    interchange = document.interchange
    if interchange is None:
        add("missing interchange")
        return violations

    # ISA / IEA
    isa, iea = interchange.header, interchange.trailer
    if isa is None and add("ISA segment missing", "ISA"):
        return violations
    if iea is None and add("IEA segment missing", "IEA"):
        return violations
    if isa is not None and iea is not None:
        if isa.interchange_control_number != iea.interchange_control_number:
            if add(f"ISA and IEA control numbers do not match ({isa.interchange_control_number} != {iea.interchange_control_number})", "IEA"):
                return violations
        if check_counts:
            _check_count(add, iea.number_of_included_functional_groups, len(interchange.function_groups), "IEA", "functional groups")

    # GS / GE
    for group in interchange.function_groups:
        gs, ge = group.header, group.trailer
        if gs is None and add("GS segment missing", "GS"):
            return violations
        if ge is None and add("GE segment missing", "GE"):
            return violations
        if gs is not None and ge is not None:
            if gs.group_control_number != ge.group_control_number:
                if add(f"GS and GE control numbers do not match ({gs.group_control_number} != {ge.group_control_number})", "GE"):
                    return violations
            if check_counts:
                _check_count(add, ge.number_of_included_transaction_sets, len(group.transactions), "GE", "transaction sets")

    # ST / SE
    for group in interchange.function_groups:
        for transaction in group.transactions:
            st, se = transaction.header, transaction.trailer
            if st is None and add("ST segment missing", "ST"):
                return violations
            if se is None and add("SE segment missing", "SE"):
                return violations
            if st is not None and se is not None:
                if st.transaction_set_control_number != se.transaction_set_control_number:
                    if add(f"ST and SE control numbers do not match ({st.transaction_set_control_number} != {se.transaction_set_control_number})", "SE"):
                        return violations
                if check_counts:
                    # SE01 counts ST and SE themselves.
                    _check_count(add, se.number_of_included_segments, len(transaction.segments) + 2, "SE", "segments")

    return violations

def _check_count(add, declared: str, actual: int, segment_id: str, what: str) -> None:
    try:
        matches = int(declared) == actual
    except ValueError:
        add(f"{segment_id} count of {what} is not a number ({declared!r})", segment_id, kind="count")
        return
    if not matches:
        add(f"{segment_id} declares {declared} {what} but {actual} found", segment_id, kind="count")
