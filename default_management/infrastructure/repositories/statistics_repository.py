"""PostgreSQL implementation of StatisticsRepository."""

from typing import List

from sqlalchemy import extract, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from default_management.domain.entities import (
    ApplicationStatus,
    DimensionCount,
    StatisticsDimension,
)
from default_management.domain.interfaces import StatisticsRepository
from default_management.infrastructure.database.models import (
    CustomerModel,
    DefaultApplicationModel,
)


class PostgresStatisticsRepository(StatisticsRepository):
    """Grouped application counts joined against customer attributes."""

    DIMENSION_COLUMNS = {
        StatisticsDimension.INDUSTRY: CustomerModel.industry,
        StatisticsDimension.REGION: CustomerModel.region,
    }

    # Each counted status is dated by the transition that produced it
    STATUS_TIME_COLUMNS = {
        ApplicationStatus.APPROVED: DefaultApplicationModel.approval_time,
        ApplicationStatus.REBORN: DefaultApplicationModel.rebirth_approval_time,
    }

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_counts_by_dimension(
        self,
        year: int,
        dimension: StatisticsDimension,
        status: ApplicationStatus,
    ) -> List[DimensionCount]:
        time_column = self.STATUS_TIME_COLUMNS.get(status)
        if time_column is None:
            return []

        dimension_column = self.DIMENSION_COLUMNS[dimension]
        total = func.count(DefaultApplicationModel.id).label("total")

        stmt = (
            select(dimension_column.label("dimension"), total)
            .select_from(DefaultApplicationModel)
            .join(CustomerModel, CustomerModel.id == DefaultApplicationModel.customer_id)
            .where(
                DefaultApplicationModel.status == status.value,
                extract("year", time_column) == year,
            )
            .group_by(dimension_column)
            .order_by(total.desc())
        )
        result = await self._session.execute(stmt)

        return [
            DimensionCount(dimension=dimension, count=count)
            for dimension, count in result.all()
        ]
