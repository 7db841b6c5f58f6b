"""Tests for the record schema and tabular export."""

import json
from pathlib import Path

import pandas as pd
from pandera.errors import SchemaError
import pytest

from clientmap.etl import division_summary, records_to_frame, write_records
from clientmap.etl.export import EXPORT_COLUMNS
from clientmap.ingestion import ingest_text
from clientmap.records import ClientRecord
from clientmap.schemas import CLIENT_SCHEMA, ClientRecordSchema, field_names


class TestFieldTable:
    """Tests for the logical field table."""

    def test_field_names_unique(self) -> None:
        """Test that every logical field appears once."""
        names = field_names(CLIENT_SCHEMA)
        assert len(names) == len(set(names)) == 14

    def test_every_field_has_synonyms(self) -> None:
        """Test that no field is unreachable."""
        assert all(spec.synonyms for spec in CLIENT_SCHEMA)


class TestClientRecordSchema:
    """Tests for ClientRecordSchema."""

    def test_valid_frame(self, sample_csv: str) -> None:
        """Test that ingested records validate."""
        df = records_to_frame(ingest_text(sample_csv))

        assert list(df.columns) == EXPORT_COLUMNS
        assert len(df) == 9
        assert df["num_delivery_days"].dtype.kind == "i"

    def test_non_finite_latitude(self) -> None:
        """Test that infinite coordinates fail validation."""
        df = records_to_frame(
            [ClientRecord(id="C1", latitude=1.0, longitude=2.0)], validate=False
        )
        df.loc[0, "latitude"] = float("inf")

        with pytest.raises(SchemaError):
            ClientRecordSchema.validate(df)

    def test_empty_id(self) -> None:
        """Test that record ids must be non-empty."""
        df = records_to_frame(
            [ClientRecord(id="C1", latitude=1.0, longitude=2.0)], validate=False
        )
        df.loc[0, "id"] = ""

        with pytest.raises(SchemaError):
            ClientRecordSchema.validate(df)


class TestExport:
    """Tests for DataFrame export helpers."""

    def test_source_order(self, sample_csv: str) -> None:
        """Test that rows keep record order."""
        records = ingest_text(sample_csv)
        df = records_to_frame(records)
        assert df["id"].tolist() == [r.id for r in records]

    def test_directions_column(self) -> None:
        """Test that each row carries its directions link."""
        df = records_to_frame([ClientRecord(id="C1", latitude=36.8, longitude=10.18)])
        assert df.loc[0, "directions_url"].endswith("destination=36.8,10.18")

    def test_empty_records(self) -> None:
        """Test that no records produce an empty frame with all columns."""
        df = records_to_frame([], validate=False)
        assert df.empty
        assert list(df.columns) == EXPORT_COLUMNS

    def test_division_summary(self, sample_csv: str) -> None:
        """Test client counts per division and store."""
        summary = division_summary(ingest_text(sample_csv))

        assert list(summary.columns) == ["division", "store", "clients"]
        counts = {
            (row.division, row.store): row.clients for row in summary.itertuples()
        }
        assert counts == {
            ("O152", "Depot Nord"): 4,
            ("Y150", "Depot Sud"): 2,
            ("Z200", "Depot Est"): 3,
        }

    def test_division_summary_empty(self) -> None:
        """Test summary of no records."""
        summary = division_summary([])
        assert summary.empty
        assert list(summary.columns) == ["division", "store", "clients"]

    def test_write_csv(self, tmp_path: Path, sample_csv: str) -> None:
        """Test CSV export."""
        path = write_records(ingest_text(sample_csv), tmp_path / "out" / "clients.csv")

        df = pd.read_csv(path, dtype=str, keep_default_na=False)
        assert len(df) == 9
        assert df.loc[0, "name"] == "Café du Port"
        assert df.loc[6, "name"] == 'Le "Petit" Marche'

    def test_write_json(self, tmp_path: Path, sample_csv: str) -> None:
        """Test JSON export."""
        path = write_records(ingest_text(sample_csv), tmp_path / "clients.json")

        data = json.loads(path.read_text(encoding="utf-8"))
        assert [row["id"] for row in data][:2] == ["C001", "C002"]
        assert data[0]["delivery_days"] == "Lundi, Jeudi"

    def test_unsupported_format(self, tmp_path: Path) -> None:
        """Test that unknown extensions are rejected."""
        with pytest.raises(ValueError, match="Unsupported export format"):
            write_records([], tmp_path / "clients.xlsx")
