"""
Tests for business metadata extraction
"""

import pytest

from phonetable.metadata_extractor import MetadataBuilder, MetadataExtractor, normalize_website
from phonetable.models import ColumnRelationship, FieldValue, MetadataColumn, TableStructure


def make_structure(**overrides):
    fields = dict(type='space-separated', confidence=0.9, column_count=4,
                  phone_column_index=1, id_column_index=0)
    fields.update(overrides)
    return TableStructure(**fields)


def test_emails_take_every_embedded_address():
    emails = MetadataExtractor().extract_emails("sales@acme.com.sg; hr@acme.com.sg")

    assert [e.value for e in emails] == ["sales@acme.com.sg", "hr@acme.com.sg"]
    assert all(e.confidence == 0.9 for e in emails)


def test_websites_ignore_email_domains():
    websites = MetadataExtractor().extract_websites("sales@acme.com.sg www.acme.com")

    assert [w.value for w in websites] == ["https://www.acme.com"]


def test_normalize_website():
    assert normalize_website("acme.com.sg") == "https://acme.com.sg"
    assert normalize_website("http://acme.com") == "http://acme.com"


def test_contact_and_business_info():
    extractor = MetadataExtractor()

    contacts = extractor.extract_contact_info("Fax: 6123 4567")
    assert contacts['fax'][0].value.startswith("Fax")

    business = extractor.extract_business_info("UEN: 201912345K")
    assert business[0].kind == 'registration'
    assert business[0].value == "UEN: 201912345K"

    assert extractor.extract_business_info("Company profile") == []


def test_unmatched_value_is_unclassified():
    extracted = MetadataExtractor().extract_from_value("??? !!!")

    assert extracted['additional_data'][0].kind == 'unclassified'
    assert extracted['additional_data'][0].confidence == 0.3


def test_known_columns_fill_fields():
    structure = make_structure(metadata_columns=[
        MetadataColumn(index=2, type='company', confidence=1.0),
        MetadataColumn(index=3, type='email', confidence=1.0),
    ])

    metadata = MetadataExtractor().extract(["001", "91234567", "Acme Pte Ltd", "sales@acme.com"], structure)

    assert metadata.company_name.value == "Acme Pte Ltd"
    assert metadata.company_name.method == 'known-column'
    assert metadata.email.value == "sales@acme.com"
    assert metadata.website is None
    assert set(metadata.trace.column_traces) == {2, 3}


def test_phone_and_id_columns_are_not_metadata():
    structure = make_structure()

    metadata = MetadataExtractor().extract(["A1023", "91234567", "Acme Pte Ltd"], structure)

    values = metadata.field_values()
    assert "91234567" not in values.values()
    assert "A1023" not in values.values()
    assert values['company_name'] == "Acme Pte Ltd"


def test_name_split_relationship_joins_columns():
    structure = make_structure(
        column_count=3,
        phone_column_index=2,
        id_column_index=None,
        column_relationships=[ColumnRelationship(kind='name-split', columns=(0, 1), confidence=0.8)]
    )

    metadata = MetadataExtractor().extract(["John", "Tan", "91234567"], structure)

    assert metadata.contact_person.value == "John Tan"
    assert metadata.contact_person.method == 'relationship-name-split'
    assert metadata.trace.relationships[-1]['applied']


def test_builder_keeps_highest_confidence_and_dedupes_lists():
    builder = MetadataBuilder(3)
    builder.offer('company_name', FieldValue(value='Acme', confidence=0.5, method='pattern'))
    builder.offer('company_name', FieldValue(value='Acme Pte Ltd', confidence=0.8, method='pattern'))
    builder.offer('company_name', FieldValue(value='ACME', confidence=0.6, method='pattern'))
    builder.merge({'additional_data': [FieldValue(value='x', confidence=0.3, method='pattern')] * 2},
                  'pattern-match', 1.0)

    metadata = builder.build()

    assert metadata.company_name.value == 'Acme Pte Ltd'
    assert len(metadata.additional_data) == 1


def test_id_shaped_cells_outside_id_column_are_kept():
    structure = make_structure(column_count=4)

    metadata = MetadataExtractor().extract(["001", "91234567", "Acme", "x_1"], structure)

    assert metadata.company_name.value == "Acme"
    assert [item.value for item in metadata.additional_data] == ["x_1"]
    assert metadata.additional_data[0].kind == 'unclassified'


def test_cell_holding_the_record_id_is_skipped():
    structure = make_structure(column_count=3, phone_column_index=0, id_column_index=None)

    metadata = MetadataExtractor().extract(["91234567", "A1023", "Acme Pte Ltd"], structure, 0, 1)

    assert "A1023" not in metadata.field_values().values()
    assert metadata.additional_data == []
    assert metadata.company_name.value == "Acme Pte Ltd"


def test_known_column_keeps_strongest_variant():
    extractor = MetadataExtractor()

    best = extractor.extract_specific_type("Acme Pte Ltd", 'company')

    assert best.pattern == 'withLtd'
    assert best.confidence == 0.9


def test_proximity_weights_follow_distance():
    structure = make_structure(column_count=5, id_column_index=None)
    cells = ["Acme Pte Ltd", "91234567", "Ops note", "Far note", "Last note"]

    builder = MetadataExtractor().extract_by_proximity(cells, structure, MetadataBuilder(5), 1)

    weights = {r['metadata_index']: r['weight'] for r in builder.relationships}
    assert weights == {0: 0.8, 2: 0.8, 3: 0.6, 4: 0.4}
    assert builder.fields['company_name'].confidence == pytest.approx(0.72)
    assert builder.fields['company_name'].method == 'proximity'


def test_address_split_relationship_joins_columns():
    structure = make_structure(
        column_count=3,
        phone_column_index=0,
        id_column_index=None,
        column_relationships=[ColumnRelationship(kind='address-split', columns=(1, 2), confidence=0.7)]
    )
    cells = ["91234567", "10 Anson Road", "Singapore"]

    builder = MetadataExtractor().extract_from_relationships(cells, structure, MetadataBuilder(3))
    metadata = builder.build()

    assert metadata.address.value == "10 Anson Road, Singapore"
    assert metadata.address.confidence == 0.7
    assert metadata.address.method == 'relationship-address-split'
    assert metadata.trace.relationships[0]['applied']
