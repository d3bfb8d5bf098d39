from typing import Dict, Optional

# Interchange ID qualifiers, shared by the sender (ISA05) and receiver (ISA07) qualifiers.
INTERCHANGE_ID_QUALIFIERS: Dict[str, str] = {
    "01": "Duns (Dun & Bradstreet)",
    "14": "Duns Plus Suffix",
    "20": "Health Industry Number (HIN) CODE SOURCE 121: Health Industry Number",
    "27": "Carrier Identification Number as assigned by Centers for Medicare & Medicaid Services (CMS)",
    "28": "Fiscal Intermediary Identification Number as assigned by Centers for Medicare & Medicaid Services (CMS)",
    "29": "Medicare Provider and Supplier Identification Number as assigned by Centers for Medicare & Medicaid Services (CMS)",
    "30": "U.S. Federal Tax Identification Number",
    "33": "National Association of Insurance Commissioners Company Code (NAIC)",
    "ZZ": "Mutually Defined",
}

ISA_CODE_DESCRIPTIONS: Dict[str, Dict[str, str]] = {
    "ISA01": {
        "00": "No Authorization Information Present (No Meaningful Information in I02)",
        "03": "Additional Data Identification",
    },
    "ISA03": {
        "00": "No Security Information Present (No Meaningful Information in I04)",
        "01": "Password",
    },
    "ISA05": INTERCHANGE_ID_QUALIFIERS,
    "ISA07": INTERCHANGE_ID_QUALIFIERS,
    "ISA14": {
        "0": "No Interchange Acknowledgment Requested",
        "1": "Interchange Acknowledgment Requested (TA1)",
    },
    "ISA15": {
        "I": "Information",
        "P": "Production Data",
        "T": "Test Data",
    },
}


def describe_isa_code(element: str, code: str) -> Optional[str]:
    """
    Looks up the meaning of a coded ISA value.

    `element` is the ISA reference designator (e.g. "ISA05"); the code is
    compared after stripping the padding X12 allows inside fixed-width ISA fields.
    """
    return ISA_CODE_DESCRIPTIONS.get(element, {}).get(code.strip())
