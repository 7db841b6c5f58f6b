"""Pytest configuration and shared fixtures."""

from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
import requests

from clientmap.config.settings import AppConfig, SnapshotConfig, SourceConfig

SOURCE_URL = "https://docs.google.com/spreadsheets/d/e/2PACX-test/pub?output=csv"

FIXED_NOW = datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc)

# Ten data rows; row 7 has no usable latitude
SAMPLE_CSV = (
    "Division,Magasin,Code Client,Nom Client,Ville,Téléphone,Jours de Livraison,"
    "Nbr Jours,Latitude,Longitude,Moy Achat par Mois,Moy Achat par Livraison,Logo,Gratuité\r\n"
    'O152,Depot Nord,C001,Café du Port,Tunis,71000001,"Lundi, Jeudi",2,"36,8065",10.1815,1200,600,,Non\r\n'
    "O152,Depot Nord,C002,Epicerie Centrale,Ariana,71000002,Mardi,1,36.8625,10.1956,800,800,,Oui\r\n"
    'Y150,Depot Sud,C003,"Chez Ali, Fils",Sfax,74000003,"Lundi, Mercredi, Vendredi",3,34.7406,10.7603,2400,800,,Non\r\n'
    "Y150,Depot Sud,C004,Superette Amal,Sfax,74000004,Jeudi,1,34.7500,10.7700,500,500,,Non\r\n"
    "Z200,Depot Est,C005,Kiosque Marsa,La Marsa,71000005,Samedi,1,36.8782,10.3247,300,300,"
    "https://drive.google.com/file/d/1LogoFileId_5/view?usp=sharing,Non\r\n"
    "Z200,Depot Est,,Snack Plage,Hammamet,72000006,Dimanche,1,36.4000,10.6167,450,450,,Non\r\n"
    "Z200,Depot Est,C007,Boutique Fantome,Nabeul,72000007,Lundi,1,N/A,10.7376,0,0,,Non\r\n"
    'Z200,Depot Est,C008,"Le ""Petit"" Marche",Sousse,73000008,Mardi,two,35.8256,10.6084,900,450,,Non\r\n'
    "O152,Depot Nord,C009,Patisserie Nour,Bizerte,72000009,Mercredi,1,37.2744,9.8739,650,650,,Oui\r\n"
    "\r\n"
    "O152,Depot Nord,C010,Cafe Lac,Tunis,71000010,Jeudi,1,36.8320,10.2330\r\n"
)

SAMPLE_SEMICOLON_CSV = (
    "Division;Code Client;Nom;Ville;Latitude;Longitude\n"
    "O152;C100;Client Virgule;Paris;48,85;2.35\n"
    "O152;C101;Client Invalide;Lyon;N/A;4,83\n"
)


@pytest.fixture
def sample_csv() -> str:
    """Comma-delimited export with ten data rows, nine of them usable."""
    return SAMPLE_CSV


@pytest.fixture
def semicolon_csv() -> str:
    """Semicolon-delimited export with decimal commas."""
    return SAMPLE_SEMICOLON_CSV


def make_response(text: str, status_code: int = 200) -> MagicMock:
    """Create a fake requests response."""
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.encoding = "utf-8"
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"HTTP {status_code}")
    return response


@pytest.fixture
def make_session() -> Callable[[dict[str, Any]], MagicMock]:
    """
    Build a fake HTTP session routed by URL prefix.

    Route values may be payload text, a (status_code, text) tuple, or an
    exception instance to raise. Unrouted URLs raise ConnectionError.
    """

    def _make(routes: dict[str, Any]) -> MagicMock:
        def get(url: str, timeout: float | None = None) -> MagicMock:
            for prefix, outcome in routes.items():
                if not url.startswith(prefix):
                    continue
                if isinstance(outcome, Exception):
                    raise outcome
                if isinstance(outcome, tuple):
                    return make_response(outcome[1], status_code=outcome[0])
                return make_response(outcome)
            raise requests.ConnectionError(f"No route to {url}")

        session = MagicMock()
        session.get.side_effect = get
        return session

    return _make


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    """Configuration with a test source and a temporary snapshot directory."""
    return AppConfig(
        source=SourceConfig(reference=SOURCE_URL),
        snapshot=SnapshotConfig(directory=tmp_path / "snapshots", key="clients"),
    )


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW
