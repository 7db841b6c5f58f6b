"""
Pandera schema for the tabular form of client records.

Used when records are exported as a DataFrame.
"""

import numpy as np
import pandera.pandas as pa
from pandera.typing import Series


class ClientRecordSchema(pa.DataFrameModel):
    """
    Schema for exported client records.

    Only coordinate finiteness is enforced; every other column is free text
    or a count that already degraded to a default during ingestion.
    """

    id: Series[str] = pa.Field(
        description="Client code, or positional 'row-<n>' fallback",
        str_length={"min_value": 1},
    )
    division: Series[str] = pa.Field(description="Division code")
    store: Series[str] = pa.Field(description="Store or depot name")
    code: Series[str] = pa.Field(description="Client code as exported")
    name: Series[str] = pa.Field(description="Client name")
    city: Series[str] = pa.Field(description="City")
    phone: Series[str] = pa.Field(description="Phone number as exported")
    delivery_days: Series[str] = pa.Field(description="Delivery weekdays")
    num_delivery_days: Series[int] = pa.Field(description="Deliveries per week")
    latitude: Series[float] = pa.Field(description="WGS84 latitude")
    longitude: Series[float] = pa.Field(description="WGS84 longitude")
    avg_monthly_purchase: Series[str] = pa.Field(description="Average monthly purchase")
    avg_delivery_purchase: Series[str] = pa.Field(
        description="Average purchase per delivery"
    )
    logo_url: Series[str] = pa.Field(description="Normalized logo URL")
    free_goods_note: Series[str] = pa.Field(description="Free goods note")

    @pa.check("latitude", "longitude", name="finite")
    def finite_coordinates(cls, series: Series[float]) -> Series[bool]:
        return np.isfinite(series)

    class Config:
        """Schema configuration."""

        name = "ClientRecordSchema"
        strict = False  # Allow extra columns such as directions_url
        coerce = True
