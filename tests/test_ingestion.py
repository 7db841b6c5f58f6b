"""Tests for record construction."""

import pytest

from clientmap.ingestion import DEFAULT_LOGO_OVERRIDES, RecordBuilder, ingest_text
from clientmap.parsing import parse_delimited
from clientmap.records import ClientRecord


class TestRecordBuilder:
    """Tests for RecordBuilder on the sample export."""

    def test_rows_without_coordinates_are_dropped(self, sample_csv: str) -> None:
        """Test ten data rows with one bad latitude yield nine records."""
        records = ingest_text(sample_csv)
        assert len(records) == 9
        assert "C007" not in [r.id for r in records]

    def test_input_order_preserved(self, sample_csv: str) -> None:
        """Test records follow data row order."""
        records = ingest_text(sample_csv)
        assert [r.id for r in records] == [
            "C001",
            "C002",
            "C003",
            "C004",
            "C005",
            "row-6",
            "C008",
            "C009",
            "C010",
        ]

    def test_typed_fields(self, sample_csv: str) -> None:
        """Test coercion of the first record."""
        record = ingest_text(sample_csv)[0]

        assert record.division == "O152"
        assert record.store == "Depot Nord"
        assert record.code == "C001"
        assert record.name == "Café du Port"
        assert record.city == "Tunis"
        assert record.phone == "71000001"
        assert record.delivery_days == "Lundi, Jeudi"
        assert record.num_delivery_days == 2
        assert record.latitude == pytest.approx(36.8065)
        assert record.longitude == pytest.approx(10.1815)
        assert record.avg_monthly_purchase == "1200"
        assert record.avg_delivery_purchase == "600"
        assert record.free_goods_note == "Non"

    def test_positional_id_when_code_empty(self, sample_csv: str) -> None:
        """Test the fallback id uses the 1-based data row position."""
        record = ingest_text(sample_csv)[5]
        assert record.code == ""
        assert record.id == "row-6"

    def test_positional_id_skips_blank_lines(self) -> None:
        """Test blank lines between data rows do not advance row ids."""
        text = "Code,Latitude,Longitude\n,36.8,10.1\n\n\n,36.9,10.2\n"
        assert [r.id for r in ingest_text(text)] == ["row-1", "row-2"]

    def test_invalid_integer_defaults_to_zero(self, sample_csv: str) -> None:
        """Test an unparseable delivery count becomes 0."""
        record = next(r for r in ingest_text(sample_csv) if r.id == "C008")
        assert record.num_delivery_days == 0
        assert record.name == 'Le "Petit" Marche'

    def test_short_row_defaults(self, sample_csv: str) -> None:
        """Test missing trailing fields degrade to empty values."""
        record = ingest_text(sample_csv)[-1]
        assert record.id == "C010"
        assert record.avg_monthly_purchase == ""
        assert record.free_goods_note == ""

    def test_drive_logo_normalized(self, sample_csv: str) -> None:
        """Test Drive view links become thumbnail links."""
        record = next(r for r in ingest_text(sample_csv) if r.id == "C005")
        assert record.logo_url == (
            "https://drive.google.com/thumbnail?id=1LogoFileId_5&sz=w1000"
        )

    def test_division_logo_override(self, sample_csv: str) -> None:
        """Test known divisions get their brand logo."""
        records = {r.id: r for r in ingest_text(sample_csv)}
        assert records["C001"].logo_url == DEFAULT_LOGO_OVERRIDES["O152"]
        assert records["C003"].logo_url == DEFAULT_LOGO_OVERRIDES["Y150"]
        assert records["row-6"].logo_url == ""

    def test_injected_logo_overrides(self, sample_csv: str) -> None:
        """Test the override table can be replaced by the caller."""
        builder = RecordBuilder(logo_overrides={"Z200": "https://cdn.example.com/z.png"})
        records = {r.id: r for r in builder.build(parse_delimited(sample_csv))}

        assert records["C001"].logo_url == ""
        assert records["row-6"].logo_url == "https://cdn.example.com/z.png"
        assert records["C005"].logo_url == "https://cdn.example.com/z.png"

    def test_empty_overrides_disable_brand_logos(self, sample_csv: str) -> None:
        """Test an empty override table disables brand logos."""
        records = RecordBuilder(logo_overrides={}).build(parse_delimited(sample_csv))
        assert records[0].logo_url == ""

    def test_idempotent(self, sample_csv: str) -> None:
        """Test the same text always yields identical records."""
        assert ingest_text(sample_csv) == ingest_text(sample_csv)

    def test_oversized_count_does_not_abort(self) -> None:
        """Test a delivery count too long to convert degrades to zero."""
        text = (
            "Code,Nbr Jours,Latitude,Longitude\n"
            "C1," + "9" * 5000 + ",36.8,10.1\n"
            "C2,2,36.9,10.2\n"
        )
        records = ingest_text(text)

        assert [r.id for r in records] == ["C1", "C2"]
        assert records[0].num_delivery_days == 0
        assert records[1].num_delivery_days == 2


class TestCoordinateGate:
    """Tests for locale handling of coordinates."""

    def test_decimal_comma_included(self, semicolon_csv: str) -> None:
        """Test '48,85' / '2.35' normalizes to (48.85, 2.35)."""
        records = ingest_text(semicolon_csv)

        assert len(records) == 1
        assert records[0].id == "C100"
        assert records[0].latitude == pytest.approx(48.85)
        assert records[0].longitude == pytest.approx(2.35)

    def test_missing_coordinate_columns(self) -> None:
        """Test a header without coordinate columns yields no records."""
        text = "Division,Code Client,Nom\nO152,C1,Client Un\nO152,C2,Client Deux\n"
        assert ingest_text(text) == []

    def test_either_coordinate_missing(self) -> None:
        """Test a row is dropped when only one coordinate is usable."""
        text = "Code,Latitude,Longitude\nC1,36.8,\nC2,,10.1\nC3,36.8,10.1\n"
        assert [r.id for r in ingest_text(text)] == ["C3"]

    def test_empty_table(self) -> None:
        """Test empty input yields no records."""
        assert ingest_text("") == []
        assert ingest_text("Latitude,Longitude\n") == []

    def test_only_coordinates(self) -> None:
        """Test every non-coordinate field defaults when unresolved."""
        records = ingest_text("Lat;Lng\n1,5;2,5\n")

        assert records == [
            ClientRecord(id="row-1", latitude=1.5, longitude=2.5),
        ]


class TestClientRecord:
    """Tests for the record model."""

    def test_frozen(self) -> None:
        """Test records cannot be mutated."""
        record = ClientRecord(id="C1", latitude=1.0, longitude=2.0)
        with pytest.raises(ValueError):
            record.name = "Autre"  # type: ignore[misc]

    def test_rejects_non_finite_coordinates(self) -> None:
        """Test the model itself refuses non-finite coordinates."""
        with pytest.raises(ValueError):
            ClientRecord(id="C1", latitude=float("nan"), longitude=2.0)

    def test_directions_url(self) -> None:
        """Test the directions link points at the coordinates."""
        record = ClientRecord(id="C1", latitude=36.8, longitude=10.18)
        assert record.directions_url == (
            "https://www.google.com/maps/dir/?api=1&destination=36.8,10.18"
        )
