"""
Order Service

Order placement and the order-status state machine.

Lifecycle:
    pending -> confirmed -> preparing -> ready -> delivered
    pending | confirmed -> cancelled

Admins may set any of the six statuses directly. Owners may only cancel,
and only while the order is still pending or confirmed.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bistro.core.exceptions import (
    Forbidden,
    InvalidStatus,
    InvalidTransition,
    ItemUnavailable,
    NotFound,
)
from bistro.models import (
    CANCELLABLE_STATUSES,
    MenuItem,
    Order,
    OrderStatus,
    User,
)
from bistro.schemas import OrderCreate

logger = logging.getLogger(__name__)


def parse_status(value: str) -> OrderStatus:
    """
    Map a raw status string onto OrderStatus.

    Raises:
        InvalidStatus: If the value is not one of the six statuses
    """
    try:
        return OrderStatus(value)
    except ValueError:
        valid = [s.value for s in OrderStatus]
        raise InvalidStatus(f"Invalid status value. Options: {valid}")


def can_cancel(status: OrderStatus) -> bool:
    return status in CANCELLABLE_STATUSES


class OrderService:
    """
    Places orders and moves them through their lifecycle.

    Attributes:
        db: Request-scoped database session
        delivery_offset: Added to creation time for the delivery estimate
    """

    def __init__(self, db: AsyncSession, estimated_delivery_minutes: int = 45):
        self.db = db
        self.delivery_offset = timedelta(minutes=estimated_delivery_minutes)

    # =========================================================================
    # CREATION
    # =========================================================================

    async def create_order(self, user: User, payload: OrderCreate) -> Order:
        """
        Validate every line against the catalog and persist the order.

        Prices are copied from the catalog at this instant and frozen into
        the order. Lookups and the insert share one transaction; if any line
        fails, the transaction is rolled back and nothing is stored.

        Raises:
            NotFound: A line references a missing menu item
            ItemUnavailable: A line references an unavailable menu item
        """
        try:
            total = 0.0
            lines = []

            for requested in payload.items:
                item = await self.db.get(MenuItem, requested.menu_item_id)

                if item is None:
                    raise NotFound(f"Menu item with id {requested.menu_item_id} not found")
                if not item.is_available:
                    raise ItemUnavailable(f"{item.name} is currently not available")

                total += item.price * requested.quantity
                lines.append({
                    "menu_item": item.id,
                    "name": item.name,
                    "quantity": requested.quantity,
                    "price": item.price,
                })

            order = Order(
                user=user,
                items=lines,
                total_amount=round(total, 2),
                status=OrderStatus.PENDING,
                delivery_address=payload.delivery_address,
                contact_number=payload.contact_number,
                payment_method=payload.payment_method,
                special_instructions=payload.special_instructions,
                estimated_delivery_time=datetime.now(timezone.utc) + self.delivery_offset,
            )
            self.db.add(order)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(order)
        logger.info(
            f"Order #{order.id} placed by user #{user.id}: "
            f"{len(lines)} line(s), total {order.total_amount:.2f}"
        )
        return order

    # =========================================================================
    # READS
    # =========================================================================

    async def _get(self, order_id: int) -> Order:
        order = await self.db.get(Order, order_id)
        if order is None:
            raise NotFound("Order not found")
        return order

    async def get_order(self, caller: User, order_id: int) -> Order:
        """Fetch one order; only its owner or an admin may see it."""
        order = await self._get(order_id)
        if order.user_id != caller.id and not caller.is_admin:
            raise Forbidden("Not authorized to view this order")
        return order

    async def list_for_user(self, user: User) -> list[Order]:
        result = await self.db.execute(
            select(Order)
            .where(Order.user_id == user.id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return list(result.scalars().all())

    async def list_all(self, status: Optional[str] = None) -> list[Order]:
        """All orders, newest first, optionally filtered by status."""
        query = select(Order).order_by(Order.created_at.desc(), Order.id.desc())
        if status:
            query = query.where(Order.status == parse_status(status))

        result = await self.db.execute(query)
        return list(result.scalars().all())

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    async def update_status(self, order_id: int, status: str) -> Order:
        """
        Set an order's status directly (admin operation).

        Any of the six statuses is accepted from any current status.

        Raises:
            InvalidStatus: Unknown status value; the order is left unchanged
            NotFound: No such order
        """
        new_status = parse_status(status)
        order = await self._get(order_id)

        previous = order.status
        order.status = new_status
        await self.db.commit()
        await self.db.refresh(order)

        logger.info(f"Order #{order.id} status {previous.value} -> {new_status.value}")
        return order

    async def cancel_order(self, caller: User, order_id: int) -> Order:
        """
        Cancel an order on behalf of its owner or an admin.

        Raises:
            NotFound: No such order
            Forbidden: Caller is neither the owner nor an admin
            InvalidTransition: Order is past the confirmed stage
        """
        order = await self._get(order_id)

        if order.user_id != caller.id and not caller.is_admin:
            raise Forbidden("Not authorized to cancel this order")

        if not can_cancel(order.status):
            logger.warning(
                f"Cancel rejected for order #{order.id} in status {order.status.value}"
            )
            raise InvalidTransition("Order cannot be cancelled at this stage")

        order.status = OrderStatus.CANCELLED
        await self.db.commit()
        await self.db.refresh(order)

        logger.info(f"Order #{order.id} cancelled by user #{caller.id}")
        return order
