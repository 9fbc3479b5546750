"""
Tests for cell classification and column role inference
"""

import pytest

from phonetable.column_classifier import (
    ColumnRoleClassifier,
    classify_cell,
    is_date,
    is_likely_id,
    is_strong_id_candidate,
)


def test_classify_cell_kinds():
    assert classify_cell("") == 'empty'
    assert classify_cell("9123 4567") == 'phone'
    assert classify_cell("A1023") == 'id'
    assert classify_cell("sales@acme.com.sg") == 'email'
    assert classify_cell("www.acme.com.sg") == 'website'
    assert classify_cell("10 Anson Road") == 'address'
    assert classify_cell("12.50") == 'numeric'
    assert classify_cell("Acme Pte Ltd") == 'text'


def test_id_candidates():
    assert is_likely_id("001")
    assert is_likely_id("EMP-204")
    assert not is_likely_id("91234567")
    assert not is_likely_id("Acme Pte Ltd")
    assert not is_likely_id(None)

    assert is_strong_id_candidate("A1023")
    assert is_strong_id_candidate("00123")
    assert not is_strong_id_candidate("a-b")


def test_is_date_requires_real_calendar_date():
    assert is_date("15/08/2023")
    assert is_date("2023-08-15")
    assert not is_date("45/13/2023")
    assert not is_date("Acme Pte Ltd")


def test_roles_for_directory_rows():
    lines = [
        "001    91234567    Acme Pte Ltd",
        "002    98765432    Beta Trading Pte Ltd",
        "003    87654321    Gamma Services Pte Ltd",
    ]

    roles = ColumnRoleClassifier().classify(lines, r"\s{4,}")

    assert roles.column_count == 3
    assert roles.phone_column_index == 1
    assert roles.id_column_index == 0
    assert [column.index for column in roles.metadata_columns] == [2]
    assert roles.metadata_columns[0].type == 'company'
    assert roles.confidence_bonus == pytest.approx(0.8)


def test_name_split_relationship():
    lines = [
        "John    Tan    91234567",
        "Mary    Lim    98765432",
        "Peter    Goh    87654321",
    ]

    roles = ColumnRoleClassifier().classify(lines, r"\s{4,}")

    kinds = {(r.kind, r.columns) for r in roles.relationships}
    assert ('name-split', (0, 1)) in kinds
    assert roles.phone_column_index == 2


def test_phone_split_relationship():
    lines = [
        "Acme Pte Ltd    912    34567",
        "Beta Trading Pte Ltd    987    65432",
        "Gamma Services Pte Ltd    876    54321",
    ]

    roles = ColumnRoleClassifier().classify(lines, r"\s{4,}")

    relationship = next(r for r in roles.relationships if r.kind == 'phone-split')
    assert relationship.columns == (1, 2)
    assert relationship.confidence == 0.9


def test_address_split_relationship():
    lines = [
        "91234567    10 Anson Road    Singapore",
        "98765432    25 Orchard Road    Singapore",
        "87654321    3 Temasek Avenue    Singapore",
    ]

    roles = ColumnRoleClassifier().classify(lines, r"\s{4,}")

    relationship = next(r for r in roles.relationships if r.kind == 'address-split')
    assert relationship.columns == (1, 2)
    assert relationship.confidence == 0.7
    assert roles.phone_column_index == 0
