"""
Catalog Service

Menu item queries and admin maintenance. The aggregate rating fields are
owned by the review aggregator and never written here.
"""

import logging
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from bistro.core.exceptions import NotFound, ValidationError
from bistro.models import FoodType, MenuCategory, MenuItem
from bistro.schemas import MenuItemCreate, MenuItemUpdate

logger = logging.getLogger(__name__)


class CatalogService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_items(
        self,
        category: Optional[MenuCategory] = None,
        food_type: Optional[FoodType] = None,
        search: Optional[str] = None,
    ) -> list[MenuItem]:
        """
        List menu items, newest first.

        Args:
            category: Only items in this category
            food_type: Only veg or non-veg items
            search: Case-insensitive substring of name or description
        """
        query = select(MenuItem).order_by(MenuItem.created_at.desc(), MenuItem.id.desc())

        if category:
            query = query.where(MenuItem.category == category)
        if food_type:
            query = query.where(MenuItem.type == food_type)
        if search:
            query = query.where(
                or_(
                    MenuItem.name.icontains(search, autoescape=True),
                    MenuItem.description.icontains(search, autoescape=True),
                )
            )

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_by_type(self, food_type: str) -> list[MenuItem]:
        """Available items of one food type; the type must be veg or non-veg."""
        try:
            food_type_enum = FoodType(food_type)
        except ValueError:
            raise ValidationError('Invalid type. Must be "veg" or "non-veg"')

        result = await self.db.execute(
            select(MenuItem)
            .where(MenuItem.type == food_type_enum, MenuItem.is_available.is_(True))
            .order_by(MenuItem.created_at.desc(), MenuItem.id.desc())
        )
        return list(result.scalars().all())

    async def get_item(self, item_id: int) -> MenuItem:
        item = await self.db.get(MenuItem, item_id)
        if item is None:
            raise NotFound("Menu item not found")
        return item

    async def create_item(self, payload: MenuItemCreate) -> MenuItem:
        item = MenuItem(**payload.model_dump())
        self.db.add(item)
        await self.db.commit()
        await self.db.refresh(item)

        logger.info(f"Menu item #{item.id} created: {item.name}")
        return item

    async def update_item(self, item_id: int, payload: MenuItemUpdate) -> MenuItem:
        item = await self.get_item(item_id)

        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is None:
                # Explicit nulls cannot clear required columns
                continue
            setattr(item, field, value)

        await self.db.commit()
        await self.db.refresh(item)

        logger.info(f"Menu item #{item.id} updated")
        return item

    async def delete_item(self, item_id: int) -> None:
        item = await self.get_item(item_id)
        await self.db.delete(item)
        await self.db.commit()
        logger.info(f"Menu item #{item_id} deleted")

    async def toggle_availability(self, item_id: int) -> MenuItem:
        item = await self.get_item(item_id)
        item.is_available = not item.is_available
        await self.db.commit()
        await self.db.refresh(item)

        logger.info(
            f"Menu item #{item.id} {'enabled' if item.is_available else 'disabled'}"
        )
        return item
