"""
Tabular export of client records.

Records are turned into a DataFrame validated against ClientRecordSchema,
then written as CSV or JSON.
"""

from collections.abc import Sequence
from pathlib import Path

import pandas as pd

from clientmap.records import ClientRecord
from clientmap.schemas.fields import field_names
from clientmap.schemas.record import ClientRecordSchema
from clientmap.utils.logging import get_logger

log = get_logger(__name__)

EXPORT_COLUMNS: list[str] = ["id", *field_names(), "directions_url"]


def records_to_frame(
    records: Sequence[ClientRecord],
    *,
    validate: bool = True,
) -> pd.DataFrame:
    """
    Convert records to a DataFrame in source order.

    Args:
        records: Client records.
        validate: Whether to validate against ClientRecordSchema.

    Returns:
        DataFrame with one row per record and EXPORT_COLUMNS as columns.
    """
    rows = [
        {**record.model_dump(), "directions_url": record.directions_url}
        for record in records
    ]
    df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)

    if validate:
        df = ClientRecordSchema.validate(df)

    return df


def division_summary(records: Sequence[ClientRecord]) -> pd.DataFrame:
    """
    Count clients per division and store.

    Returns:
        DataFrame with columns division, store, clients, sorted by division.
    """
    df = records_to_frame(records, validate=False)
    if df.empty:
        return pd.DataFrame(columns=["division", "store", "clients"])

    summary = (
        df.groupby(["division", "store"], dropna=False)
        .size()
        .reset_index(name="clients")
        .sort_values(["division", "store"])
        .reset_index(drop=True)
    )
    return summary


def write_records(records: Sequence[ClientRecord], path: Path) -> Path:
    """
    Write records to CSV or JSON, chosen by file extension.

    Args:
        records: Client records.
        path: Output path ending in .csv or .json.

    Returns:
        Path written.

    Raises:
        ValueError: For unsupported extensions.
    """
    suffix = path.suffix.lower()
    if suffix not in {".csv", ".json"}:
        msg = f"Unsupported export format '{suffix}' (use .csv or .json)"
        raise ValueError(msg)

    df = records_to_frame(records)
    path.parent.mkdir(parents=True, exist_ok=True)

    if suffix == ".csv":
        df.to_csv(path, index=False, encoding="utf-8")
    else:
        df.to_json(path, orient="records", force_ascii=False, indent=2)

    log.info("Exported records", path=str(path), rows=len(df))
    return path
