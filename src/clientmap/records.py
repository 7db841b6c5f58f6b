"""
Typed client records and the snapshot that persists them.

Both models are frozen: a new ingestion replaces records, it never
updates them.
"""

from datetime import datetime

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

DIRECTIONS_URL = "https://www.google.com/maps/dir/?api=1&destination={lat},{lng}"


class ClientRecord(BaseModel):
    """One client location with finite coordinates."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Client code, or 'row-<n>' when the code is empty")
    division: str = ""
    store: str = ""
    code: str = ""
    name: str = ""
    city: str = ""
    phone: str = ""
    delivery_days: str = ""
    num_delivery_days: int = 0
    latitude: float = Field(allow_inf_nan=False)
    longitude: float = Field(allow_inf_nan=False)
    avg_monthly_purchase: str = ""
    avg_delivery_purchase: str = ""
    logo_url: str = ""
    free_goods_note: str = ""

    @property
    def directions_url(self) -> str:
        """Google Maps directions link to this client."""
        return DIRECTIONS_URL.format(lat=self.latitude, lng=self.longitude)


class Snapshot(BaseModel):
    """Last successfully ingested record set."""

    model_config = ConfigDict(frozen=True)

    taken_at: AwareDatetime = Field(description="When the records were ingested")
    records: tuple[ClientRecord, ...]

    @property
    def age_label(self) -> str:
        return format_as_of(self.taken_at)


def format_as_of(moment: datetime) -> str:
    """Human-readable 'as of' label in local time, e.g. '19/10/2026 14:05'."""
    return moment.astimezone().strftime("%d/%m/%Y %H:%M")
