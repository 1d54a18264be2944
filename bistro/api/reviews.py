"""
Reviews API router
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from bistro.api.deps import (
    get_current_user,
    get_optional_user,
    get_review_service,
    require_admin,
)
from bistro.models import User
from bistro.schemas import (
    MessageResponse,
    ReviewCreate,
    ReviewEnvelope,
    ReviewListResponse,
    ReviewResponse,
)
from bistro.services import ReviewService

router = APIRouter(prefix="/api/reviews", tags=["Reviews"])


def _list_response(reviews) -> ReviewListResponse:
    return ReviewListResponse(
        count=len(reviews),
        data=[ReviewResponse.model_validate(review) for review in reviews],
    )


@router.post("", response_model=ReviewEnvelope, status_code=status.HTTP_201_CREATED)
async def create_review(
    payload: ReviewCreate,
    user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
) -> ReviewEnvelope:
    review = await service.submit_review(user, payload)
    return ReviewEnvelope(
        message="Review submitted successfully",
        data=ReviewResponse.model_validate(review),
    )


@router.get("/approved", response_model=ReviewListResponse)
async def list_approved_reviews(
    service: ReviewService = Depends(get_review_service),
) -> ReviewListResponse:
    """Latest approved reviews for the public feed."""
    reviews = await service.list_approved()
    return _list_response(reviews)


@router.get("", response_model=ReviewListResponse)
async def list_reviews(
    menu_item: Optional[int] = Query(None, alias="menuItem"),
    approved: Optional[bool] = Query(None),
    user: Optional[User] = Depends(get_optional_user),
    service: ReviewService = Depends(get_review_service),
) -> ReviewListResponse:
    """
    List reviews.

    Non-admin callers only ever receive approved reviews; the ``approved``
    filter is honoured for admins only.
    """
    reviews = await service.list_reviews(caller=user, menu_item_id=menu_item, approved=approved)
    return _list_response(reviews)


@router.patch("/{review_id}/approve", response_model=ReviewEnvelope)
async def approve_review(
    review_id: int,
    admin: User = Depends(require_admin),
    service: ReviewService = Depends(get_review_service),
) -> ReviewEnvelope:
    review = await service.approve_review(review_id)
    return ReviewEnvelope(
        message="Review approved successfully",
        data=ReviewResponse.model_validate(review),
    )


@router.delete("/{review_id}", response_model=MessageResponse)
async def delete_review(
    review_id: int,
    admin: User = Depends(require_admin),
    service: ReviewService = Depends(get_review_service),
) -> MessageResponse:
    await service.delete_review(review_id)
    return MessageResponse(message="Review deleted successfully")
