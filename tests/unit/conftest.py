"""Shared test fixtures."""

import json
from pathlib import Path

import pytest

from area_authz.models.area import Area

SCENARIO_AREAS = [
    Area(id=1, name="Dirección A", level=1, parent_area_id=None),
    Area(id=2, name="Subdirección B", level=2, parent_area_id=1),
    Area(id=3, name="Gerencia C", level=3, parent_area_id=2),
]

# Two directorates with mixed display_order and accented names
HIERARCHY_AREAS = [
    Area(id="ops", name="Operaciones", code="OPS", level=1, display_order=2, path="ops"),
    Area(id="adm", name="Administración", code="ADM", level=1, display_order=1, path="adm"),
    Area(
        id="sms", name="Seguridad Operacional", code="SMS", level=2,
        parent_area_id="ops", path="ops.sms",
    ),
    Area(
        id="avsec", name="Aviación Civil", code="AVSEC", level=2,
        parent_area_id="ops", path="ops.avsec",
    ),
    Area(
        id="fauna", name="Gerencia de Fauna", code="FAU", level=3,
        parent_area_id="sms", path="ops.sms.fauna",
    ),
    Area(
        id="pci", name="Gerencia PCI", code="PCI", level=3,
        parent_area_id="sms", path="ops.sms.pci",
    ),
    Area(id="fin", name="Finanzas", code="FIN", level=2, parent_area_id="adm", path="adm.fin"),
    Area(
        id="nom", name="Nómina", code="NOM", level=3, parent_area_id="fin", path="adm.fin.nom",
    ),
]

SNAPSHOT_DATA = {
    "areas": [
        {"id": 1, "nombre": "Dirección A", "clave": "dir", "nivel": 1, "path": "1"},
        {"id": 2, "nombre": "Subdirección B", "nivel": 2, "parent_area_id": 1, "path": "1.2"},
        {"id": 3, "nombre": "Gerencia C", "nivel": 3, "parent_area_id": 2, "path": "1.2.3"},
        {"id": 4, "nombre": "Gerencia D", "nivel": 3, "parent_area_id": 2, "path": "1.2.4"},
    ],
    "users": [
        {"id": "admin", "role": "ADMIN", "assignments": []},
        {
            "id": "sub",
            "role": "SUBDIRECTOR",
            "assignments": [
                {"area_id": 2, "puede_editar": True, "puede_capturar": True, "rol": "SUBDIRECTOR"},
            ],
        },
        {
            "id": "cap",
            "role": "CAPTURISTA",
            "assignments": [{"area_id": 3, "puede_capturar": True}],
        },
        {"id": "dir", "role": "DIRECTOR", "assignments": [{"area_id": 1, "puede_editar": True}]},
    ],
}


@pytest.fixture
def scenario_areas() -> list[Area]:
    return list(SCENARIO_AREAS)


@pytest.fixture
def hierarchy_areas() -> list[Area]:
    return list(HIERARCHY_AREAS)


@pytest.fixture
def snapshot_file(tmp_path: Path) -> Path:
    """Write the standard snapshot to disk and return its path."""
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(SNAPSHOT_DATA, ensure_ascii=False), encoding="utf-8")
    return path
