"""
Listing search by extracted criteria.
"""
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carmarket.models.car import Car
from carmarket.schemas.car import ImageAnalysis

YEAR_WINDOW = 2


def similar_cars_query(criteria: ImageAnalysis):
    """
    Build the listing query for the criteria.

    Make and model match as case-insensitive substrings and the year within
    YEAR_WINDOW either way. Missing criteria add no filter.
    """
    query = select(Car)
    if criteria.make:
        query = query.where(Car.make.icontains(criteria.make, autoescape=True))
    if criteria.model:
        query = query.where(Car.model.icontains(criteria.model, autoescape=True))
    if criteria.year:
        query = query.where(Car.year.between(criteria.year - YEAR_WINDOW, criteria.year + YEAR_WINDOW))
    return query.order_by(Car.id)


async def find_similar(db: AsyncSession, criteria: ImageAnalysis) -> List[Car]:
    result = await db.execute(similar_cars_query(criteria))
    return list(result.scalars().all())
