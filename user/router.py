from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from auth.services.auth_service import get_current_active_user
from core.database import get_db
from user.models import User
from authz.deps import require_manager
from user.schemas import UserSchema, UserCreate, UserUpdate
from user import service

user_router = APIRouter(
    prefix='/users',
    tags=['Users']
)

# Get all users
@user_router.get('', response_model=list[UserSchema])
def user_list(db: Session = Depends(get_db), _user = Depends(get_current_active_user)):
    return service.get_users(db)

# Get current user
@user_router.get('/me', response_model=UserSchema)
def user_me(current_user: User = Depends(get_current_active_user)):
    return current_user

# Get user details
@user_router.get('/{user_id}', response_model=UserSchema)
def user_detail(user_id: int, db: Session = Depends(get_db), _user = Depends(get_current_active_user)):
    db_user = service.get_user(db, user_id)
    if db_user is None:
        raise HTTPException(status_code=404, detail="user not found")
    return db_user

# Create a user (manager only)
@user_router.post('', response_model=UserSchema, status_code=status.HTTP_201_CREATED)
def user_post(payload: UserCreate, db: Session = Depends(get_db), _mgr = Depends(require_manager)):
    try:
        return service.create_user(db, payload)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="email already registered")

# Update a user (manager only)
@user_router.patch('/{user_id}', response_model=UserSchema)
def user_patch(user_id: int, payload: UserUpdate, db: Session = Depends(get_db), _mgr = Depends(require_manager)):
    db_user = service.update_user(db, user_id, payload)
    if db_user is None:
        raise HTTPException(status_code=404, detail="user not found")
    return db_user

# Delete a user (manager only)
@user_router.delete('/{user_id}')
def user_delete(user_id: int, db: Session = Depends(get_db), _mgr = Depends(require_manager)):
    if service.get_user(db, user_id) is None:
        raise HTTPException(status_code=404, detail="user not found")
    service.delete_user(db, user_id)
    return {"message": "user deleted"}
