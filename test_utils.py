"""
Tests for result export helpers
"""

import pandas as pd

from phonetable.engine import extract_phone_records
from phonetable.utils import load_result_json, records_to_dataframe, save_records_csv, save_result_json


def test_records_to_dataframe(directory_text):
    result = extract_phone_records(directory_text)

    df = records_to_dataframe(result.records)

    assert len(df) == 9
    assert df.loc[0, 'phone_number'] == "91234567"
    assert df.loc[0, 'company_name'] == "Acme Pte Ltd"
    assert pd.isna(df.loc[0, 'email'])


def test_empty_dataframe_keeps_columns():
    df = records_to_dataframe([])

    assert df.empty
    assert 'phone_number' in df.columns
    assert 'company_name' in df.columns


def test_save_records_csv(directory_text, tmp_path):
    result = extract_phone_records(directory_text)

    path = save_records_csv(result.records, tmp_path / "out" / "records.csv")
    df = pd.read_csv(path, dtype=str)

    assert len(df) == 9
    assert list(df['id'][:2]) == ["001", "002"]


def test_save_result_json(directory_text, tmp_path):
    result = extract_phone_records(directory_text, source_file="directory.pdf")

    path = save_result_json(result, tmp_path / "result.json")
    loaded = load_result_json(path)

    assert [r.phone_number for r in loaded.records] == [r.phone_number for r in result.records]
    assert loaded.report.extraction_summary['source_file'] == "directory.pdf"
