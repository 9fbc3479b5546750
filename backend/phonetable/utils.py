"""
Utility functions for exporting extraction results
Helper functions for tabular and JSON output files
"""

import json
import logging
from pathlib import Path
from typing import Sequence, Union

import pandas as pd

from phonetable.models import ExtractionResult, PhoneRecord, SINGLE_VALUE_FIELDS

# Setup logging
logger = logging.getLogger(__name__)

RECORD_COLUMNS = [
    'id', 'phone_number', 'source_file', 'page_number', 'line_number',
    'extraction_method', 'confidence', 'original_text', 'extracted_at',
]


def records_to_dataframe(records: Sequence[PhoneRecord]) -> pd.DataFrame:
    """
    Flatten phone records into one row per record

    Args:
        records: Extracted phone records

    Returns:
        DataFrame with record columns followed by one column per metadata field
    """
    columns = RECORD_COLUMNS + list(SINGLE_VALUE_FIELDS) + ['additional_contacts']
    if not records:
        return pd.DataFrame(columns=columns)

    rows = []
    for record in records:
        row = {name: getattr(record, name) for name in RECORD_COLUMNS}
        row['extracted_at'] = record.extracted_at.isoformat()
        for name in SINGLE_VALUE_FIELDS:
            field = getattr(record.metadata, name)
            row[name] = field.value if field is not None else None
        row['additional_contacts'] = '; '.join(item.value for item in record.metadata.additional_contacts)
        rows.append(row)

    return pd.DataFrame(rows, columns=columns)


def save_records_csv(records: Sequence[PhoneRecord], output_path: Union[str, Path]) -> Path:
    """
    Save phone records to a CSV file

    Args:
        records: Extracted phone records
        output_path: Destination file

    Returns:
        Path of the written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    df = records_to_dataframe(records)
    df.to_csv(output_path, index=False, encoding='utf-8')

    logger.info(f"✅ Saved {len(df)} records to {output_path}")
    return output_path


def save_result_json(result: ExtractionResult, output_path: Union[str, Path]) -> Path:
    """
    Save records and report as one JSON document

    Args:
        result: Extraction result
        output_path: Destination file

    Returns:
        Path of the written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(result.model_dump(mode='json'), f, indent=2, ensure_ascii=False)

    logger.info(f"✅ Saved extraction result to {output_path}")
    return output_path


def load_result_json(input_path: Union[str, Path]) -> ExtractionResult:
    """Load a result saved with save_result_json"""
    with open(input_path, 'r', encoding='utf-8') as f:
        return ExtractionResult.model_validate(json.load(f))
