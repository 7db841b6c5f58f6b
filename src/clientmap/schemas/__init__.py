"""
Schema definitions for client exports.

The logical field table drives header resolution; the Pandera schema
validates records once they are turned into a DataFrame.
"""

from clientmap.schemas.fields import (
    CLIENT_SCHEMA,
    COORDINATE_FIELDS,
    Coercion,
    FieldSpec,
    field_names,
)
from clientmap.schemas.record import ClientRecordSchema

__all__ = [
    "CLIENT_SCHEMA",
    "COORDINATE_FIELDS",
    "ClientRecordSchema",
    "Coercion",
    "FieldSpec",
    "field_names",
]
