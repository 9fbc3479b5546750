"""
Tests for Singapore phone number recognition
"""

from phonetable.models import ColumnRelationship, TableStructure
from phonetable.phone_extractor import (
    PhoneExtractor,
    deduplicate_candidates,
    extract_phone_candidates,
    is_phone_number,
    normalize_phone,
)


def test_surface_forms_normalize_to_same_number():
    """Different surface forms of one number share a canonical form"""
    forms = ["91234567", "+65 9123-4567", "9123 4567", "(65) 9123-4567", "9123.4567",
             "+6591234567", "Tel: 9123 4567", "[9123-4567]"]

    for form in forms:
        candidates = extract_phone_candidates(form)
        assert len(candidates) == 1, f"Expected one candidate for {form!r}, got {candidates}"
        assert candidates[0].normalized == "91234567"


def test_normalize_phone():
    assert normalize_phone("+65 6123 4567") == "61234567"
    assert normalize_phone("Mobile: 8123-4567 ext 12") == "81234567"
    assert normalize_phone("12345678") is None
    assert normalize_phone("9123456") is None
    assert normalize_phone(None) is None


def test_exact_match_scores_highest():
    candidates = extract_phone_candidates("9123-4567", column_index=2)

    assert candidates[0].method == "exact-pattern"
    assert candidates[0].pattern_name == "formatted"
    assert candidates[0].confidence == 0.9
    assert candidates[0].column_index == 2


def test_embedded_number_in_free_text():
    candidates = extract_phone_candidates("Call 9123 4567 after 6pm")

    assert len(candidates) == 1
    assert candidates[0].method == "embedded"
    assert candidates[0].normalized == "91234567"
    assert candidates[0].confidence == 0.7


def test_fuzzy_rejects_numbers_outside_numbering_plan():
    assert extract_phone_candidates("12345678") == []
    assert PhoneExtractor().fuzzy_match("12345678") is None


def test_fuzzy_reconstruction_prefers_international_prefix():
    method, normalized, confidence = PhoneExtractor().fuzzy_match("ref 65 91 234 567")

    assert method == "fuzzy-international"
    assert normalized == "91234567"
    assert confidence == 0.6


def test_two_numbers_in_one_cell():
    candidates = extract_phone_candidates("9123 4567, 8234 5678")

    assert len(candidates) == 2
    assert {c.normalized for c in candidates} == {"91234567", "82345678"}
    assert all(c.confidence >= 0.7 for c in candidates)
    assert {c.total_parts for c in candidates} == {2}


def test_duplicates_in_one_cell_collapse():
    candidates = extract_phone_candidates("9123-4567 / 91234567")

    assert len(candidates) == 1
    assert candidates[0].normalized == "91234567"


def test_deduplicate_keeps_highest_confidence():
    extractor = PhoneExtractor()
    fuzzy = extractor.extract_from_part("x9123y4567z")
    exact = extractor.extract_from_part("91234567")

    kept = deduplicate_candidates(fuzzy + exact)

    assert len(kept) == 1
    assert kept[0].method == "exact-pattern"


def test_is_phone_number():
    assert is_phone_number("+65 9123 4567")
    assert is_phone_number("Office 6123 4567")
    assert not is_phone_number("001")
    assert not is_phone_number("Acme Pte Ltd")
    assert not is_phone_number("")
    assert not is_phone_number(None)


def test_adjacent_columns_combine_into_number():
    candidates = PhoneExtractor().extract_from_row(["A12", "9123", "4567", "Acme Pte Ltd"])

    combined = [c for c in candidates if c.method == "adjacent-column-combination"]
    assert len(combined) == 1
    assert combined[0].normalized == "91234567"
    assert combined[0].combined_from == (1, 2)
    assert combined[0].confidence == 0.6


def test_phone_split_relationship_uses_relationship_confidence():
    structure = TableStructure(
        type="space-separated",
        confidence=0.8,
        column_count=3,
        column_relationships=[ColumnRelationship(kind="phone-split", columns=(0, 1), confidence=0.9)]
    )

    candidates = PhoneExtractor().extract_from_row(["912", "34567", "Acme Pte Ltd"], structure)

    assert candidates[0].method == "relationship-combination"
    assert candidates[0].normalized == "91234567"
    assert candidates[0].confidence == 0.9


def test_declared_phone_column_limits_search():
    structure = TableStructure(type="space-separated", confidence=0.8, column_count=3, phone_column_index=1)

    candidates = PhoneExtractor().extract_from_row(["A1", "91234567", "Fax 62345678"], structure)

    assert [c.normalized for c in candidates] == ["91234567"]
