"""Unit tests for spreadsheet record import."""

import pytest

from orgforms.application.services import (
    AuthorizationEngine,
    FormService,
    OrgQueryService,
    RecordImportService,
    RecordService,
)
from orgforms.domain.exceptions import AuthorizationDenied

HEADERS = {"Nome": "Name", "Qtd": "Qty", "Ok?": "Done", "Quando": "Due", "Onde": "Where", "Extra": "Missing"}


@pytest.fixture
def importer(store) -> RecordImportService:
    engine = AuthorizationEngine()
    org_query = OrgQueryService(store)
    store.seed(
        "forms",
        "f1",
        org=["A"],
        fields=[
            {"name": "Name", "type": "text"},
            {"name": "Qty", "type": "number"},
            {"name": "Done", "type": "done"},
            {"name": "Due", "type": "date"},
            {"name": "Where", "type": "map"},
        ],
    )
    return RecordImportService(FormService(store, engine, org_query), RecordService(store, engine, org_query))


@pytest.mark.asyncio
async def test_rows_are_coerced_by_field_type(importer, operator):
    outcome = await importer.import_rows(
        operator,
        "f1",
        [{"Nome": "Valve", "Qtd": "1.234,5", "Ok?": "sim", "Quando": "05/03/2024", "Onde": "1.5, 2.5"}],
        HEADERS,
    )
    assert outcome.errors == []
    assert outcome.skipped_cells == []
    data = outcome.created[0].data["data"]
    assert data["Qty"] == {"type": "number", "value": 1234.5}
    assert data["Done"] == {"type": "done", "value": True}
    assert data["Due"] == {"type": "date", "value": "2024-03-05T00:00:00.000Z"}
    assert data["Where"] == {"type": "map", "value": {"lat": 1.5, "lng": 2.5}}
    assert outcome.created[0].data["formId"] == "f1"


@pytest.mark.asyncio
async def test_bad_cells_are_skipped_and_reported(importer, operator):
    outcome = await importer.import_rows(
        operator,
        "f1",
        [{"Nome": "Pump", "Qtd": "lots", "Onde": "somewhere", "Extra": "?", "Unmapped": "ignored"}],
        HEADERS,
    )
    assert len(outcome.created) == 1
    assert outcome.created[0].data["data"] == {"Name": {"type": "text", "value": "Pump"}}
    assert sorted(p.field for p in outcome.skipped_cells) == ["Missing", "Qty", "Where"]


@pytest.mark.asyncio
async def test_blank_cells_are_omitted_silently(importer, operator):
    outcome = await importer.import_rows(operator, "f1", [{"Nome": "X", "Qtd": "  ", "Quando": ""}], HEADERS)
    assert outcome.skipped_cells == []
    assert set(outcome.created[0].data["data"]) == {"Name"}


@pytest.mark.asyncio
async def test_failing_row_does_not_abort_the_batch(importer, operator):
    outcome = await importer.import_rows(
        operator, "f1", [{"Nome": "first"}, {"Nome": "second"}], HEADERS, org=["Z"],
    )
    assert outcome.created == []
    assert [p.row for p in outcome.errors] == [1, 2]


@pytest.mark.asyncio
async def test_admin_imports_into_form_orgs(importer, admin):
    outcome = await importer.import_rows(admin, "f1", [{"Nome": "x"}], HEADERS)
    assert outcome.created[0].data["org"] == ["A"]


@pytest.mark.asyncio
async def test_form_must_be_visible(store, importer, viewer):
    store.seed("forms", "fz", org=["Z"], fields=[])
    with pytest.raises(AuthorizationDenied):
        await importer.import_rows(viewer, "fz", [{"Nome": "x"}], HEADERS)


CAR = {
    "imageUrl": "https://img/car.png",
    "hotspots": [
        {"x": 0.1, "y": 0.2, "options": ["Door"]},
        {"x": 0.5, "y": 0.5, "options": ["Hood", "Roof"]},
    ],
}


@pytest.fixture
def hotspot_form(store):
    store.seed(
        "forms",
        "f2",
        org=["A"],
        fields=[{"name": "Part", "type": "hotspot", "value": CAR}, {"name": "Qty", "type": "number"}],
    )
    return {"Peça": "Part", "Qtd": "Qty"}


@pytest.mark.asyncio
async def test_malformed_hotspot_cell_is_skipped_and_batch_continues(importer, operator, hotspot_form):
    outcome = await importer.import_rows(
        operator,
        "f2",
        [{"Peça": {"imageUrl": "u", "hotspots": ["bad"]}, "Qtd": "1"}, {"Qtd": "2"}],
        hotspot_form,
    )
    assert outcome.errors == []
    assert len(outcome.created) == 2
    assert [(p.row, p.field) for p in outcome.skipped_cells] == [(1, "Part")]
    assert outcome.created[0].data["data"] == {"Qty": {"type": "number", "value": 1.0}}


@pytest.mark.asyncio
async def test_hotspot_cells_are_checked_against_the_form_image(importer, operator, hotspot_form):
    outcome = await importer.import_rows(
        operator,
        "f2",
        [{"Peça": "Roof"}, {"Peça": "hotspot0:Door"}, {"Peça": "hotspot0:Roof"}],
        hotspot_form,
    )
    parts = [r.data["data"].get("Part") for r in outcome.created]
    assert parts == [
        {"type": "hotspot", "value": "hotspot1:Roof"},
        {"type": "hotspot", "value": "hotspot0:Door"},
        None,
    ]
    assert [(p.row, p.field) for p in outcome.skipped_cells] == [(3, "Part")]
