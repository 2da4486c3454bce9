"""Default application endpoints: submission, review, rebirth and search."""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query

from default_management.application.dto import ApplicationSummary, PaginatedApplications
from default_management.application.services import ApplicationService, QueryService
from default_management.core.dependencies import (
    ApplicantUser,
    ApproverUser,
    CurrentUser,
    get_application_service,
    get_query_service,
)
from default_management.domain.entities import ApplicationStatus
from default_management.domain.interfaces import ApplicationFilter
from default_management.presentation.schemas import (
    ApplicationResponseSchema,
    ApproveRequestSchema,
    CreateApplicationRequestSchema,
    ErrorResponseSchema,
    MessageResponseSchema,
    PaginatedApplicationsResponseSchema,
    RebirthRequestSchema,
    RejectRequestSchema,
)

applications_router = APIRouter(
    prefix="/applications",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
        401: {"model": ErrorResponseSchema, "description": "Missing or invalid token"},
        403: {"model": ErrorResponseSchema, "description": "Role not permitted"},
    },
)

_TRANSITION_RESPONSES = {
    404: {"model": ErrorResponseSchema, "description": "Application not found"},
    409: {"model": ErrorResponseSchema, "description": "Application is in the wrong state"},
}


@applications_router.post(
    "",
    response_model=ApplicationResponseSchema,
    status_code=201,
    summary="Submit Default Application",
    description="""
    Submit a default application for a customer.

    Fails with 404 if the customer does not exist and with 409 if the
    customer is already in default or already has a pending application.
    """,
    responses={
        404: {"model": ErrorResponseSchema, "description": "Customer not found"},
        409: {"model": ErrorResponseSchema, "description": "Already default or duplicate pending"},
    },
)
async def create_application(
    request: CreateApplicationRequestSchema,
    claims: ApplicantUser,
    application_service: Annotated[ApplicationService, Depends(get_application_service)],
) -> ApplicationResponseSchema:
    application = await application_service.create_application(
        customer_name=request.customer_name,
        severity=request.severity,
        reason=request.reason,
        remarks=request.remarks,
        applicant_id=claims.user_id,
    )

    return ApplicationResponseSchema.model_validate(ApplicationSummary.from_entity(application))


@applications_router.get(
    "",
    response_model=PaginatedApplicationsResponseSchema,
    summary="Search Applications",
    description="Filter by customer name (substring, case-insensitive) and status, newest first.",
)
async def find_applications(
    claims: CurrentUser,
    customer_name: Annotated[
        Optional[str],
        Query(max_length=255, description="Part of the customer name"),
    ] = None,
    status: Annotated[
        Optional[ApplicationStatus],
        Query(description="Only applications in this status"),
    ] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=QueryService.MAX_PAGE_SIZE)] = 10,
    query_service: QueryService = Depends(get_query_service),
) -> PaginatedApplicationsResponseSchema:
    params = ApplicationFilter(
        customer_name=customer_name,
        status=status,
        page=page,
        page_size=page_size,
    )
    applications, total = await query_service.find_applications(params)

    result = PaginatedApplications.from_entities(applications, total, page, page_size)
    return PaginatedApplicationsResponseSchema.model_validate(result)


@applications_router.get(
    "/pending",
    response_model=List[ApplicationResponseSchema],
    summary="Pending Review Queue",
)
async def get_pending_applications(
    claims: ApproverUser,
    application_service: Annotated[ApplicationService, Depends(get_application_service)],
) -> List[ApplicationResponseSchema]:
    applications = await application_service.get_pending_applications()

    return [
        ApplicationResponseSchema.model_validate(ApplicationSummary.from_entity(app))
        for app in applications
    ]


@applications_router.post(
    "/review/approve",
    response_model=MessageResponseSchema,
    summary="Approve Application",
    description="Approve a pending application; the customer is marked as in default.",
    responses=_TRANSITION_RESPONSES,
)
async def approve_application(
    request: ApproveRequestSchema,
    claims: ApproverUser,
    application_service: Annotated[ApplicationService, Depends(get_application_service)],
) -> MessageResponseSchema:
    await application_service.approve_application(request.application_id, claims.user_id)
    return MessageResponseSchema(message="Application approved successfully")


@applications_router.post(
    "/review/reject",
    response_model=MessageResponseSchema,
    summary="Reject Application",
    responses=_TRANSITION_RESPONSES,
)
async def reject_application(
    request: RejectRequestSchema,
    claims: ApproverUser,
    application_service: Annotated[ApplicationService, Depends(get_application_service)],
) -> MessageResponseSchema:
    await application_service.reject_application(
        request.application_id,
        claims.user_id,
        request.reason,
    )
    return MessageResponseSchema(message="Application rejected successfully")


@applications_router.post(
    "/rebirth/apply",
    response_model=MessageResponseSchema,
    summary="Apply for Rebirth",
    description="Request reversal of an approved default determination.",
    responses=_TRANSITION_RESPONSES,
)
async def apply_for_rebirth(
    request: RebirthRequestSchema,
    claims: ApplicantUser,
    application_service: Annotated[ApplicationService, Depends(get_application_service)],
) -> MessageResponseSchema:
    await application_service.apply_for_rebirth(
        request.application_id,
        claims.user_id,
        request.rebirth_reason,
    )
    return MessageResponseSchema(message="Rebirth application submitted successfully")


@applications_router.post(
    "/rebirth/approve",
    response_model=MessageResponseSchema,
    summary="Approve Rebirth",
    description="Approve a rebirth request; the customer's default flag is cleared.",
    responses=_TRANSITION_RESPONSES,
)
async def approve_rebirth(
    request: ApproveRequestSchema,
    claims: ApproverUser,
    application_service: Annotated[ApplicationService, Depends(get_application_service)],
) -> MessageResponseSchema:
    await application_service.approve_rebirth(request.application_id, claims.user_id)
    return MessageResponseSchema(message="Rebirth approved successfully")
