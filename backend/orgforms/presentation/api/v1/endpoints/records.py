"""Record endpoints: CRUD plus search, bulk import and subrecord counts."""

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status

from orgforms.application.schemas import (
    ImportIssue,
    PageResponse,
    RecordCreate,
    RecordImportRequest,
    RecordImportResult,
    RecordSearchRequest,
    RecordUpdate,
    SubrecordCountsResponse,
)
from orgforms.application.services import AuditRecorder, RecordImportService, RecordService
from orgforms.domain.authorization import AuditAction
from orgforms.domain.entities import Principal
from orgforms.domain.record_search import FieldFilter, SortSpec
from orgforms.infrastructure.dependencies import (
    get_audit_recorder,
    get_record_import_service,
    get_record_service,
)
from orgforms.presentation.api.v1.auditing import schedule_audit
from orgforms.presentation.api.v1.authorization import DOMAIN_ERRORS, get_current_principal, to_http_error
from orgforms.presentation.api.v1.endpoints.resource_routes import add_crud_routes

router = APIRouter(prefix="/records", tags=["Records"])


@router.post("/search", response_model=PageResponse, response_model_by_alias=True)
async def search_records(
    body: RecordSearchRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    principal: Principal = Depends(get_current_principal),
    service: RecordService = Depends(get_record_service),
    recorder: AuditRecorder = Depends(get_audit_recorder),
) -> PageResponse:
    """Filter visible records by typed field values, then sort and paginate."""
    try:
        result = await service.search(
            principal,
            form_id=body.form_id,
            filters=[FieldFilter(f.field, f.value) for f in body.filters],
            sort=SortSpec(body.sort.field, body.sort.descending) if body.sort else None,
            page=body.page,
        )
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)
    schedule_audit(
        background_tasks, recorder, principal, request,
        action=AuditAction.VIEW_LIST, resource_type="records",
        metadata={"formId": body.form_id, "filters": len(body.filters), "page": body.page},
    )
    return PageResponse.from_page(result)


@router.post(
    "/import",
    response_model=RecordImportResult,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
async def import_records(
    body: RecordImportRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    principal: Principal = Depends(get_current_principal),
    service: RecordImportService = Depends(get_record_import_service),
    recorder: AuditRecorder = Depends(get_audit_recorder),
) -> RecordImportResult:
    """Create one record per row; cells that cannot be coerced are reported and left out."""
    try:
        outcome = await service.import_rows(
            principal, body.form_id, body.rows, body.header_map, org=body.org,
        )
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)
    for record in outcome.created:
        schedule_audit(
            background_tasks, recorder, principal, request,
            action=AuditAction.CREATE, resource_type="records", resource_id=record.id,
            metadata={"import": True, "formId": body.form_id},
        )
    return RecordImportResult(
        created=[r.id for r in outcome.created],
        skipped_cells=[ImportIssue(row=p.row, field=p.field, message=p.message) for p in outcome.skipped_cells],
        errors=[ImportIssue(row=p.row, field=p.field, message=p.message) for p in outcome.errors],
    )


@router.get(
    "/{record_id}/subrecord-counts",
    response_model=SubrecordCountsResponse,
    response_model_by_alias=True,
)
async def get_subrecord_counts(
    record_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    principal: Principal = Depends(get_current_principal),
    service: RecordService = Depends(get_record_service),
    recorder: AuditRecorder = Depends(get_audit_recorder),
) -> SubrecordCountsResponse:
    """Number of subrecords per subform, computed on every call."""
    try:
        counts = await service.subrecord_counts(principal, record_id)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)
    schedule_audit(
        background_tasks, recorder, principal, request,
        action=AuditAction.VIEW, resource_type="records", resource_id=record_id,
        metadata={"view": "subrecord-counts"},
    )
    return SubrecordCountsResponse(record_id=record_id, counts=counts)


add_crud_routes(
    router,
    resource_type="records",
    get_service=get_record_service,
    create_schema=RecordCreate,
    update_schema=RecordUpdate,
)
