"""
Shared sample tables for the extraction tests
"""

import pytest

# Header + nine rows, columns separated by four spaces
DIRECTORY_TEXT = """ID    Phone    Company    Address
001    91234567    Acme Pte Ltd    10 Anson Road
002    98765432    Beta Trading Pte Ltd    25 Orchard Road
003    87654321    Gamma Services Pte Ltd    3 Temasek Avenue
004    62345678    Delta Logistics Pte Ltd    8 Marina Boulevard
005    81112222    Epsilon Foods Pte Ltd    77 Robinson Road
006    93334444    Zeta Engineering Pte Ltd    1 Raffles Place
007    65556666    Eta Consulting Pte Ltd    50 Cuppage Road
008    96667777    Theta Marine Pte Ltd    12 Jurong Street
009    88889999    Iota Printing Pte Ltd    9 Tampines Avenue"""

# Same rows, columns separated by two spaces
NARROW_DIRECTORY_TEXT = "\n".join(
    "  ".join(line.split("    ")) for line in DIRECTORY_TEXT.split("\n")
)

NO_PHONE_TEXT = """Name    Notes
Alice Tan    Prefers email contact
Bob Lim    Moved overseas last year"""

PAGED_TEXT = (
    "001    91234567    Acme Pte Ltd\n"
    "002    98765432    Beta Trading Pte Ltd\n"
    "\fPage 2\n"
    "003    87654321    Gamma Services Pte Ltd"
)


@pytest.fixture
def directory_text():
    return DIRECTORY_TEXT


@pytest.fixture
def narrow_directory_text():
    return NARROW_DIRECTORY_TEXT


@pytest.fixture
def no_phone_text():
    return NO_PHONE_TEXT


@pytest.fixture
def paged_text():
    return PAGED_TEXT
