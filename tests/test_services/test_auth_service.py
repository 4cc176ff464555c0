import unittest
from datetime import timedelta

from fastapi import HTTPException
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.database import Base
import models_bootstrap  # noqa: F401

from user.models import User
from user import service as user_service
from user.schemas import UserCreate, UserUpdate
from auth.services.auth_service import create_access_token, get_current_user, get_current_active_user
from authz.deps import require_manager


class AuthServiceTests(unittest.TestCase):
    def setUp(self):
        self.engine = create_engine("sqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        Session = sessionmaker(bind=self.engine, future=True)
        self.db = Session()

        self.mgr = user_service.create_user(
            self.db, UserCreate(email="Boss@Example.com", first_name="Mo", last_name="M", is_manager=True)
        )
        self.staff = user_service.create_user(
            self.db, UserCreate(email="staff@example.com", first_name="Sam", last_name="S")
        )

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def test_token_round_trip(self):
        token = create_access_token(self.mgr.id)
        user = get_current_user(token=token, db=self.db)
        self.assertEqual(user.id, self.mgr.id)
        self.assertEqual(user.email, "boss@example.com")

    def test_expired_or_garbage_token_is_401(self):
        expired = create_access_token(self.mgr.id, expires_delta=timedelta(seconds=-5))
        for token in (expired, "not-a-jwt"):
            with self.subTest(token=token[:10]):
                with self.assertRaises(HTTPException) as cm:
                    get_current_user(token=token, db=self.db)
                self.assertEqual(cm.exception.status_code, 401)

    def test_token_for_missing_user_is_401(self):
        with self.assertRaises(HTTPException) as cm:
            get_current_user(token=create_access_token(999), db=self.db)
        self.assertEqual(cm.exception.status_code, 401)

    def test_inactive_user_is_400(self):
        user_service.update_user(self.db, self.staff.id, UserUpdate(is_active=False))
        with self.assertRaises(HTTPException) as cm:
            get_current_active_user(current_user=self.db.get(User, self.staff.id))
        self.assertEqual(cm.exception.status_code, 400)

    def test_require_manager(self):
        self.assertIs(require_manager(user=self.mgr), self.mgr)
        with self.assertRaises(HTTPException) as cm:
            require_manager(user=self.staff)
        self.assertEqual(cm.exception.status_code, 403)


if __name__ == "__main__":
    unittest.main()
