"""
Logical field table for client exports.

Each logical field owns an ordered list of header synonyms and a coercion
rule. Header resolution picks the leftmost header cell matching any
synonym, trying exact matches before prefix and substring matches.
"""

from dataclasses import dataclass
from enum import Enum


class Coercion(str, Enum):
    """How a raw cell value becomes a typed record value."""

    TEXT = "text"
    INTEGER = "integer"
    LOCALE_FLOAT = "locale_float"
    URL = "url"


@dataclass(frozen=True)
class FieldSpec:
    """
    One logical field of the client schema.

    Attributes:
        name: Record attribute name.
        synonyms: Candidate header labels, highest priority first.
        coercion: Coercion rule applied to the raw cell.
    """

    name: str
    synonyms: tuple[str, ...]
    coercion: Coercion = Coercion.TEXT


CLIENT_SCHEMA: tuple[FieldSpec, ...] = (
    FieldSpec("division", ("Division", "Div")),
    FieldSpec("store", ("Magasin", "Store", "Depot")),
    FieldSpec("code", ("Code Client", "Code", "Client ID")),
    FieldSpec("name", ("Nom Client", "Nom", "Client")),
    FieldSpec("city", ("Ville", "City", "Commune")),
    FieldSpec("phone", ("Téléphone", "Tel", "Phone", "Mobile")),
    FieldSpec("delivery_days", ("Jours de Livraison", "Jours Liv", "Delivery")),
    FieldSpec(
        "num_delivery_days",
        ("Nbr Jours", "Nb Jours", "Freq"),
        Coercion.INTEGER,
    ),
    FieldSpec("latitude", ("Latitude", "Lat"), Coercion.LOCALE_FLOAT),
    FieldSpec("longitude", ("Longitude", "Long", "Lng"), Coercion.LOCALE_FLOAT),
    FieldSpec(
        "avg_monthly_purchase",
        ("Moy Achat par Mois", "Moy Achat Mois", "Moyenne Achat", "CA Mensuel"),
    ),
    FieldSpec(
        "avg_delivery_purchase",
        ("Moy Achat par Livraison", "Moy Achat Liv", "Moyenne Liv", "Panier Moyen"),
    ),
    FieldSpec(
        "logo_url",
        ("Logo", "Image", "Photo", "Lien Logo", "Url Logo", "Picture"),
        Coercion.URL,
    ),
    FieldSpec("free_goods_note", ("Gratuité", "Gratuite", "Free")),
)

# Fields a record cannot exist without
COORDINATE_FIELDS: tuple[str, str] = ("latitude", "longitude")


def field_names(schema: tuple[FieldSpec, ...] = CLIENT_SCHEMA) -> list[str]:
    """Return logical field names in declaration order."""
    return [spec.name for spec in schema]
