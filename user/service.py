from typing import Optional, List

from sqlalchemy import select
from sqlalchemy.orm import Session

from user.models import User
from user.schemas import UserCreate, UserUpdate


def get_users(db: Session) -> List[User]:
    return list(db.scalars(select(User).order_by(User.last_name, User.first_name)))


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def create_user(db: Session, user: UserCreate) -> User:
    db_user = User(
        email=str(user.email).lower(),
        first_name=user.first_name,
        last_name=user.last_name,
        is_manager=user.is_manager,
        is_active=True,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def update_user(db: Session, user_id: int, patch: UserUpdate) -> Optional[User]:
    db_user = db.get(User, user_id)
    if not db_user:
        return None
    data = patch.model_dump(exclude_unset=True, exclude_none=True)
    for k, v in data.items():
        setattr(db_user, k, v)
    db.commit()
    db.refresh(db_user)
    return db_user


def delete_user(db: Session, user_id: int) -> None:
    db_user = db.get(User, user_id)
    if db_user:
        db.delete(db_user)
        db.commit()
    return
