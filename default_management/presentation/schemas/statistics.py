"""Statistics Pydantic schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class StatisticResponseSchema(BaseModel):
    """One dimension value of a statistics report."""

    model_config = ConfigDict(from_attributes=True)

    dimension: str = Field(..., description="Industry or region name", examples=["Finance"])
    count: int = Field(..., ge=0, description="Count in the requested year")
    percentage: float = Field(
        ...,
        ge=0,
        le=1,
        description="Share of the requested year's total",
        examples=[0.25],
    )
    growth_rate: Optional[float] = Field(
        None,
        description="Year-over-year growth ratio; null when both years are zero",
        examples=[1.0],
    )
