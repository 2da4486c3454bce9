"""Year-over-year statistics endpoints."""

from datetime import datetime, timezone
from typing import Annotated, List

from fastapi import APIRouter, Depends, Query

from default_management.application.services import StatisticsService
from default_management.core.config import settings
from default_management.core.dependencies import CurrentUser, get_statistics_service
from default_management.domain.entities import ApplicationStatus, StatisticsDimension
from default_management.domain.exceptions import ValidationException
from default_management.presentation.schemas import ErrorResponseSchema, StatisticResponseSchema

statistics_router = APIRouter(
    prefix="/statistics",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid year"},
        401: {"model": ErrorResponseSchema, "description": "Missing or invalid token"},
    },
)

# Path segment -> counted status
REPORTS = {
    "defaults": ApplicationStatus.APPROVED,
    "rebirths": ApplicationStatus.REBORN,
}


def validate_year(year: int) -> int:
    current_year = datetime.now(timezone.utc).year
    if not settings.statistics_min_year <= year <= current_year:
        raise ValidationException(
            f"Query parameter 'year' must be between "
            f"{settings.statistics_min_year} and {current_year}",
            code="INVALID_YEAR",
        )
    return year


async def _report(
    service: StatisticsService,
    year: int,
    dimension: StatisticsDimension,
    status: ApplicationStatus,
    include_historical: bool,
) -> List[StatisticResponseSchema]:
    stats = await service.get_statistics_by_dimension(
        validate_year(year),
        dimension,
        status,
        include_historical=include_historical,
    )
    return [StatisticResponseSchema.model_validate(s) for s in stats]


YearQuery = Annotated[int, Query(description="Calendar year to report on")]
HistoricalQuery = Annotated[
    bool,
    Query(description="Also list dimensions that only appear in the prior year"),
]


@statistics_router.get(
    "/defaults/by-industry",
    response_model=List[StatisticResponseSchema],
    summary="Defaults by Industry",
)
async def defaults_by_industry(
    claims: CurrentUser,
    year: YearQuery,
    include_historical: HistoricalQuery = False,
    service: StatisticsService = Depends(get_statistics_service),
) -> List[StatisticResponseSchema]:
    return await _report(
        service, year, StatisticsDimension.INDUSTRY, REPORTS["defaults"], include_historical
    )


@statistics_router.get(
    "/defaults/by-region",
    response_model=List[StatisticResponseSchema],
    summary="Defaults by Region",
)
async def defaults_by_region(
    claims: CurrentUser,
    year: YearQuery,
    include_historical: HistoricalQuery = False,
    service: StatisticsService = Depends(get_statistics_service),
) -> List[StatisticResponseSchema]:
    return await _report(
        service, year, StatisticsDimension.REGION, REPORTS["defaults"], include_historical
    )


@statistics_router.get(
    "/rebirths/by-industry",
    response_model=List[StatisticResponseSchema],
    summary="Rebirths by Industry",
)
async def rebirths_by_industry(
    claims: CurrentUser,
    year: YearQuery,
    include_historical: HistoricalQuery = False,
    service: StatisticsService = Depends(get_statistics_service),
) -> List[StatisticResponseSchema]:
    return await _report(
        service, year, StatisticsDimension.INDUSTRY, REPORTS["rebirths"], include_historical
    )


@statistics_router.get(
    "/rebirths/by-region",
    response_model=List[StatisticResponseSchema],
    summary="Rebirths by Region",
)
async def rebirths_by_region(
    claims: CurrentUser,
    year: YearQuery,
    include_historical: HistoricalQuery = False,
    service: StatisticsService = Depends(get_statistics_service),
) -> List[StatisticResponseSchema]:
    return await _report(
        service, year, StatisticsDimension.REGION, REPORTS["rebirths"], include_historical
    )
