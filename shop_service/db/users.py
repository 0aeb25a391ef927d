# shop_service/db/users.py
import logging

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from shop_service.db.database import transaction
from shop_service.db.models import User
from shop_service.db.schemas import UserCreate
from shop_service.security import PasswordEncoder

logger = logging.getLogger(__name__)


async def get_user_by_id(db: AsyncSession, user_id: int):
    result = await db.execute(select(User).filter(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str):
    result = await db.execute(select(User).filter(User.email == email))
    return result.scalar_one_or_none()


async def get_user_or_404(db: AsyncSession, user_id: int) -> User:
    user = await get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


async def get_all_users(db: AsyncSession):
    result = await db.execute(select(User).order_by(User.id))
    return result.scalars().all()


async def create_user(db: AsyncSession, user_data: UserCreate, encoder: PasswordEncoder):
    async with transaction(db):
        if await get_user_by_email(db, user_data.email):
            raise HTTPException(status_code=400, detail="Email already exists")

        db_user = User(
            full_name=user_data.full_name,
            email=user_data.email,
            password_hash=encoder.encode(user_data.password),
            phone_number=user_data.phone_number,
            address=user_data.address,
            role=user_data.role,
        )
        db.add(db_user)
    await db.refresh(db_user)
    logger.info("Created user %s (%s)", db_user.id, db_user.role.value)
    return db_user
