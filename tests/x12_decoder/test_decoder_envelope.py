# FILE: tests/x12_decoder/test_decoder_envelope.py
import pytest
from x12_decoder import AUTO_ENVELOPE_CONTROL_NUMBER, EnvelopeDecoder, decode
from x12_errors import InvalidFormatError, MissingElementError

pytestmark = pytest.mark.unit

ISA_SEGMENT = "ISA*00*          *00*          *ZZ*SENDERID       *ZZ*RECEIVERID     *240718*1200*^*00501*000000001*0*P*:~"
GS_SEGMENT = "GS*HC*SENDER*RECEIVER*20240718*1200*1*X*005010X222A1~"

def test_ge_before_gs_is_rejected():
    with pytest.raises(InvalidFormatError, match=r"^line 2: .*GE segment without GS segment"):
        decode(ISA_SEGMENT + "GE*1*1~")

def test_se_before_st_is_rejected():
    with pytest.raises(InvalidFormatError, match=r"^line 3: .*SE segment without ST segment"):
        decode(ISA_SEGMENT + GS_SEGMENT + "SE*1*0001~")

def test_unknown_segment_before_st_is_rejected():
    with pytest.raises(InvalidFormatError, match=r"^line 3: .*'BHT' segment without ST segment"):
        decode(ISA_SEGMENT + GS_SEGMENT + "BHT*0019*00*1234~")

def test_st_without_gs_after_first_line_is_rejected():
    with pytest.raises(InvalidFormatError, match=r"^line 2: .*ST segment without GS segment"):
        decode(ISA_SEGMENT + "ST*837*0001~SE*2*0001~")

def test_isa_with_fifteen_fields_is_missing_an_element():
    short_isa = ISA_SEGMENT.rsplit("*", 1)[0] + "~"
    with pytest.raises(MissingElementError, match=r"^line 1: ISA: missing element"):
        decode(short_isa)

@pytest.mark.parametrize("edi, segment_id", [
    (ISA_SEGMENT + "IEA*1~", "IEA"),
    (ISA_SEGMENT + "GS*HC*SENDER*RECEIVER*20240718*1200*1*X~", "GS"),
    (ISA_SEGMENT + GS_SEGMENT + "GE*1~", "GE"),
    (ISA_SEGMENT + GS_SEGMENT + "ST*837~", "ST"),
    (ISA_SEGMENT + GS_SEGMENT + "ST*837*0001~SE*1~", "SE"),
])
def test_short_control_segments_are_missing_elements(edi: str, segment_id: str):
    with pytest.raises(MissingElementError, match=rf"line \d+: {segment_id}: missing element"):
        decode(edi)

def test_auto_envelope_wraps_bare_transaction(bare_transaction_string: str):
    document = decode(bare_transaction_string)
    interchange = document.interchange

    assert document.envelope_automatically_added is True
    assert interchange.header.interchange_control_number == AUTO_ENVELOPE_CONTROL_NUMBER == "000000001"
    assert interchange.header.component_element_separator == ":"
    assert interchange.trailer.interchange_control_number == "000000001"
    assert interchange.trailer.number_of_included_functional_groups == "1"

    group = interchange.function_groups[0]
    assert group.header.group_control_number == "000000001"
    assert group.trailer.group_control_number == "000000001"
    assert group.trailer.number_of_included_transaction_sets == "1"

    transaction = group.transactions[0]
    assert transaction.header.transaction_set_id_code == "837"
    assert transaction.trailer.transaction_set_control_number == "0001"
    assert [s.id for s in transaction.segments] == ["BHT"]

def test_auto_envelope_only_triggers_without_context(canonical_x12_string: str):
    assert decode(canonical_x12_string).envelope_automatically_added is False

def test_decoder_tracks_current_group_and_transaction():
    decoder = EnvelopeDecoder()
    decoder.process_segment(ISA_SEGMENT.rstrip("~"))
    decoder.process_segment(GS_SEGMENT.rstrip("~"))
    assert decoder.current_group is decoder.document.interchange.function_groups[0]
    assert decoder.current_transaction is None

    decoder.process_segment("ST*837*0001")
    assert decoder.current_transaction is decoder.current_group.transactions[0]

    decoder.process_segment("BHT*0019*00*1234")
    decoder.process_segment("SE*3*0001")
    assert decoder.current_transaction.trailer.transaction_set_control_number == "0001"
    assert decoder.line_index == 5

def test_empty_tokens_are_skipped_but_counted():
    edi = ISA_SEGMENT + "~~" + "GE*1*1~"
    with pytest.raises(InvalidFormatError, match=r"^line 4: "):
        decode(edi)
