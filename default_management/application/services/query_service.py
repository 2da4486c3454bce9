"""Query service - application search for display."""

from typing import List, Tuple

from default_management.domain.entities import DefaultApplication
from default_management.domain.interfaces import ApplicationFilter, UnitOfWorkFactory


class QueryService:
    """Read-only, paginated application search."""

    MAX_PAGE_SIZE = 100

    def __init__(self, unit_of_work_factory: UnitOfWorkFactory):
        self._uow_factory = unit_of_work_factory

    async def find_applications(
        self,
        params: ApplicationFilter,
    ) -> Tuple[List[DefaultApplication], int]:
        """
        Search applications by customer name and status.

        Returns:
            The requested page, newest first, and the total number of matches
        """
        params = ApplicationFilter(
            customer_name=params.customer_name or None,
            status=params.status,
            page=max(params.page, 1),
            page_size=min(max(params.page_size, 1), self.MAX_PAGE_SIZE),
        )

        async with self._uow_factory() as uow:
            return await uow.applications.find_all(params)
