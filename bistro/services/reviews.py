"""
Review Service

Review submission, moderation and the menu-item rating aggregate.

A menu item's ``rating``/``num_reviews`` always mirror the mean/count of
its approved reviews. The aggregate is recomputed whenever the approved
set for an item can change: on submission, approval and deletion.
"""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bistro.core.exceptions import NotFound
from bistro.models import MenuItem, Review, User
from bistro.schemas import ReviewCreate

logger = logging.getLogger(__name__)


def mean_rating(total: Optional[float], count: int) -> float:
    """Arithmetic mean of approved ratings; 0.0 when there are none."""
    if not count:
        return 0.0
    return float(total) / count


class ReviewService:

    def __init__(self, db: AsyncSession, approved_feed_limit: int = 10):
        self.db = db
        self.approved_feed_limit = approved_feed_limit

    # =========================================================================
    # AGGREGATE
    # =========================================================================

    async def recompute_rating(self, menu_item_id: int) -> Optional[MenuItem]:
        """
        Rewrite a menu item's aggregate from its approved reviews.

        Runs inside the caller's transaction; the caller commits.

        Returns:
            The updated menu item, or None if it no longer exists
        """
        item = await self.db.get(MenuItem, menu_item_id)
        if item is None:
            return None

        result = await self.db.execute(
            select(func.sum(Review.rating), func.count(Review.id)).where(
                Review.menu_item_id == menu_item_id,
                Review.is_approved.is_(True),
            )
        )
        total, count = result.one()

        item.rating = mean_rating(total, count)
        item.num_reviews = count

        logger.info(
            f"Menu item #{item.id} rating recomputed: {item.rating:.2f} over {count} review(s)"
        )
        return item

    # =========================================================================
    # SUBMISSION
    # =========================================================================

    async def submit_review(self, user: User, payload: ReviewCreate) -> Review:
        """
        Store a new, unapproved review.

        Raises:
            NotFound: The referenced menu item does not exist
        """
        if payload.menu_item_id is not None:
            if await self.db.get(MenuItem, payload.menu_item_id) is None:
                raise NotFound("Menu item not found")

        review = Review(
            user_id=user.id,
            user_name=user.full_name,
            rating=payload.rating,
            comment=payload.comment,
            menu_item_id=payload.menu_item_id,
            is_approved=False,
        )
        self.db.add(review)
        await self.db.flush()

        if review.menu_item_id is not None:
            await self.recompute_rating(review.menu_item_id)

        await self.db.commit()
        await self.db.refresh(review)

        logger.info(f"Review #{review.id} submitted by user #{user.id}")
        return review

    # =========================================================================
    # MODERATION
    # =========================================================================

    async def _get(self, review_id: int) -> Review:
        review = await self.db.get(Review, review_id)
        if review is None:
            raise NotFound("Review not found")
        return review

    async def approve_review(self, review_id: int) -> Review:
        review = await self._get(review_id)
        review.is_approved = True
        await self.db.flush()

        if review.menu_item_id is not None:
            await self.recompute_rating(review.menu_item_id)

        await self.db.commit()
        await self.db.refresh(review)

        logger.info(f"Review #{review.id} approved")
        return review

    async def delete_review(self, review_id: int) -> None:
        review = await self._get(review_id)
        menu_item_id = review.menu_item_id

        await self.db.delete(review)
        await self.db.flush()

        if menu_item_id is not None:
            await self.recompute_rating(menu_item_id)

        await self.db.commit()
        logger.info(f"Review #{review_id} deleted")

    # =========================================================================
    # LISTING
    # =========================================================================

    async def list_reviews(
        self,
        caller: Optional[User] = None,
        menu_item_id: Optional[int] = None,
        approved: Optional[bool] = None,
    ) -> list[Review]:
        """
        List reviews, newest first.

        Anyone but an admin sees approved reviews only, whatever filter
        they pass.
        """
        query = select(Review).order_by(Review.created_at.desc(), Review.id.desc())

        if menu_item_id is not None:
            query = query.where(Review.menu_item_id == menu_item_id)

        if caller is None or not caller.is_admin:
            query = query.where(Review.is_approved.is_(True))
        elif approved is not None:
            query = query.where(Review.is_approved.is_(approved))

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_approved(self) -> list[Review]:
        """Latest approved reviews for the public feed."""
        result = await self.db.execute(
            select(Review)
            .where(Review.is_approved.is_(True))
            .order_by(Review.created_at.desc(), Review.id.desc())
            .limit(self.approved_feed_limit)
        )
        return list(result.scalars().all())
