# shop_service/db/reviews.py
import logging

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from shop_service.db.catalog import get_product_or_404
from shop_service.db.database import transaction
from shop_service.db.models import Review
from shop_service.db.schemas import ReviewRequest
from shop_service.db.users import get_user_or_404

logger = logging.getLogger(__name__)


async def create_review(db: AsyncSession, request: ReviewRequest):
    async with transaction(db):
        product = await get_product_or_404(db, request.product_id)
        user = await get_user_or_404(db, request.user_id)
        review = Review(
            product_id=product.id,
            user_id=user.id,
            rating=request.rating,
            comment=request.comment,
        )
        db.add(review)
    logger.debug("User %s rated product %s: %s", user.id, product.id, review.rating)
    return review


async def get_reviews_for_product(db: AsyncSession, product_id: int):
    result = await db.execute(select(Review).filter(Review.product_id == product_id).order_by(Review.id))
    return result.scalars().all()


async def delete_review(db: AsyncSession, review_id: int):
    async with transaction(db):
        result = await db.execute(select(Review).filter(Review.id == review_id))
        review = result.scalar_one_or_none()
        if not review:
            raise HTTPException(status_code=404, detail="Review not found")
        await db.delete(review)
