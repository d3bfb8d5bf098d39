# FILE: tests/conftest.py

import pytest
import sys
import os
import logging

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

# ==============================================================================
# PYTEST CONFIGURATION & HOOKS
# ==============================================================================

def pytest_configure(config):
    """Configure pytest settings and markers."""
    config.addinivalue_line("markers", "unit: Pure unit tests with no external dependencies.")
    config.addinivalue_line("markers", "integration: Tests exercising decode, validate and marshal together.")

@pytest.fixture(scope="session", autouse=True)
def setup_test_environment(pytestconfig):
    """Set up test environment with logging configuration."""
    # Use pytest's log_cli_level if available, otherwise default to INFO
    log_level = pytestconfig.getoption("log_cli_level") or "INFO"
    logging.basicConfig(
        level=log_level.upper(),
        format="[%(asctime)s] [%(levelname)s] [%(name)s:%(lineno)d] - %(message)s",
        stream=sys.stdout,
        force=True,
    )
    logging.info(f"Test logging configured with level: {log_level.upper()}")
    yield

# ==============================================================================
# SHARED X12 FIXTURES
# ==============================================================================

CANONICAL_824 = """ISA*00*          *00*          *08*9254110060     *ZZ*123456789      *041216*0805*U*00501*000095071*0*P*>~
GS*AG*5137624388*123456789*20041216*0805*95071*X*005010~
ST*824*021390001*005010X186A1~
BGN*11*FFA.ABCDEF.123456*20020709*0932**123456789**WQ~
N1*41*ABC INSURANCE*46*111111111~
PER*IC*JOHN JOHNSON*TE*8005551212*EX*1439~
N1*40*SMITHCO*46*A1234~
OTI*TA*TN*NA***20020709*0902*2*0001*834*005010X220A1~
SE*7*021390001~
GE*1*95071~
IEA*1*000095071~"""

@pytest.fixture(scope="session")
def canonical_x12_string() -> str:
    """
    The canonical 824 application advice: one interchange, one functional group,
    one transaction set with five body segments. Segments are separated by
    newlines for readability.
    """
    return CANONICAL_824

@pytest.fixture(scope="session")
def bare_transaction_string() -> str:
    """A transaction set without any ISA/GS envelope around it."""
    return "ST*837*0001~BHT*0019*00*1234*20240715*1200*CH~SE*3*0001~"

@pytest.fixture(scope="session")
def multiple_groups_x12_string() -> str:
    """
    Contains:
    - 1 Interchange (ISA-IEA)
    - 2 Functional Groups (GS-GE blocks)
    - Group 1: 2 Transaction Sets, Group 2: 1 Transaction Set
    """
    return """
ISA*00*          *00*          *ZZ*SENDERID       *ZZ*RECEIVERID     *240715*1200*^*00501*000000001*0*P*>~
GS*HC*SENDER*RECEIVER*20240715*1200*1*X*005010X222A1~
ST*837*0001*005010X222A1~
BHT*0019*00*TXN001*20240715*1200*CH~
CLM*TXN001_CLAIM1*300***11>B>1*Y*A*Y*Y~
SE*4*0001~
ST*837*0002*005010X222A1~
BHT*0019*00*TXN002*20240715*1200*CH~
SE*3*0002~
GE*2*1~
GS*HC*SENDER*RECEIVER*20240715*1200*2*X*005010X222A1~
ST*837*0003*005010X222A1~
HI*BK>Z872~
LX*1~
SV1*HC>99213*300*UN*1***1**Y~
SE*5*0003~
GE*1*2~
IEA*2*000000001~
""".strip()
