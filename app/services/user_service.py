"""
app/services/user_service.py

Purpose: User data management

- Look up users by email
- Create users lazily on first OTP request
- Store / clear OTP and mark users verified
- Translates driver failures into PersistenceError
"""

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError
from pydantic import ValidationError as ModelValidationError
from typing import Optional, Dict, Any

from app.core.exceptions import PersistenceError
from app.core.logging import get_logger, LogContext
from app.models.user import User
from utils.time_utils import utcnow

logger = get_logger(__name__)


class UserService:
    """
    Reads and writes user records in the users collection.

    Every mutation is a single-document operation; there are no
    multi-document transactions.
    """

    def __init__(self, collection):
        self.collection = collection

    def _to_user(self, document: Optional[Dict[str, Any]]) -> Optional[User]:
        if document is None:
            return None
        try:
            return User.from_document(document)
        except ModelValidationError as e:
            logger.error(f"Malformed user document {document.get('_id')}: {e}")
            raise PersistenceError("Stored user record is invalid") from e

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """
        Retrieves a user by email.

        Args:
            email: Email address, matched exactly

        Returns:
            User or None if not found
        """
        try:
            document = await self.collection.find_one({"email": email})
        except PyMongoError as e:
            raise PersistenceError("Failed to read user", details=str(e)) from e

        return self._to_user(document)

    async def create_user(self, name: str, email: str, phone: Optional[str], otp: str) -> User:
        """
        Inserts a new user holding its first OTP.

        Returns:
            The created User
        """
        with LogContext(email=email):
            now = utcnow()
            user = User(
                name=name,
                email=email,
                phone=phone,
                otp=otp,
                created_at=now,
                updated_at=now,
            )

            try:
                result = await self.collection.insert_one(user.to_document())
            except PyMongoError as e:
                raise PersistenceError("Failed to create user", details=str(e)) from e

            user.id = str(result.inserted_id)
            logger.info("New user created")
            return user

    async def set_otp(self, user: User, otp: str) -> User:
        """
        Overwrites the outstanding OTP; all other fields are left untouched.
        """
        with LogContext(email=user.email):
            try:
                document = await self.collection.find_one_and_update(
                    {"_id": _object_id(user.id)},
                    {"$set": {"otp": otp, "updatedAt": utcnow()}},
                    return_document=ReturnDocument.AFTER,
                )
            except PyMongoError as e:
                raise PersistenceError("Failed to store OTP", details=str(e)) from e

            if document is None:
                raise PersistenceError("User disappeared while storing OTP")

            logger.debug("OTP replaced")
            return self._to_user(document)

    async def mark_verified(self, user: User, otp: str) -> Optional[User]:
        """
        Sets verified and clears the OTP, but only while the stored OTP is
        still the one that was checked.

        Returns:
            The updated User, or None if the OTP changed in the meantime
        """
        with LogContext(email=user.email):
            try:
                document = await self.collection.find_one_and_update(
                    {"_id": _object_id(user.id), "otp": otp},
                    {"$set": {"verified": True, "otp": None, "updatedAt": utcnow()}},
                    return_document=ReturnDocument.AFTER,
                )
            except PyMongoError as e:
                raise PersistenceError("Failed to update user", details=str(e)) from e

            if document is None:
                logger.warning("OTP changed before verification could be stored")
                return None

            logger.info("User verified")
            return self._to_user(document)


def _object_id(value: Optional[str]):
    """
    Converts a stringified id back to an ObjectId when it is one.
    """
    if value is not None and ObjectId.is_valid(value):
        return ObjectId(value)
    return value
