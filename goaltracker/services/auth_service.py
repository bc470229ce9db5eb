"""Authentication service - registration, login and user lookup."""
import logging
from datetime import datetime

from bson import ObjectId
from bson.errors import InvalidId

from goaltracker.models.user import User
from goaltracker.utils.auth import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    """Service for handling user authentication."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.users = db["users"]

    def _doc_to_user(self, doc: dict) -> User:
        return User(
            _id=str(doc["_id"]),
            email=doc["email"],
            display_name=doc.get("display_name", ""),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    async def register_user(self, email: str, password: str, display_name: str) -> User:
        """
        Register a new user.

        Args:
            email: User email address
            password: Plain text password
            display_name: Name shown in the app

        Returns:
            User object (without password)

        Raises:
            ValueError: If email is already registered
        """
        email = email.lower()
        existing = await self.users.find_one({"email": email})
        if existing:
            raise ValueError("Email already registered")

        now = datetime.utcnow()
        user_doc = {
            "email": email,
            "hashed_password": hash_password(password),
            "display_name": display_name,
            "created_at": now,
            "updated_at": now,
        }

        result = await self.users.insert_one(user_doc)
        user_doc["_id"] = result.inserted_id
        logger.info("Registered user %s", user_doc["_id"])

        return self._doc_to_user(user_doc)

    async def login(self, email: str, password: str) -> str:
        """
        Check credentials and issue a JWT.

        Raises:
            ValueError: If credentials are invalid
        """
        user_doc = await self.users.find_one({"email": email.lower()})
        if not user_doc or not verify_password(password, user_doc["hashed_password"]):
            raise ValueError("Invalid email or password")

        return create_access_token(user_id=str(user_doc["_id"]))

    async def get_user_by_id(self, user_id: str) -> User:
        """
        Get user by ID.

        Raises:
            ValueError: If user not found
        """
        try:
            object_id = ObjectId(user_id)
        except (InvalidId, TypeError):
            raise ValueError("Invalid user ID format")

        user_doc = await self.users.find_one({"_id": object_id})
        if not user_doc:
            raise ValueError("User not found")

        return self._doc_to_user(user_doc)
