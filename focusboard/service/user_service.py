import logging

from werkzeug.exceptions import Conflict
from werkzeug.security import check_password_hash, generate_password_hash

from focusboard.domain import utc_now
from focusboard.errors import DuplicateRecordError


logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, repository, clock=utc_now):
        self.repository = repository
        self.clock = clock

    def create_user(self, name, email, password):
        """Store a new account with a hashed password; the hash is never returned."""
        email = email.strip().lower()
        password_hash = generate_password_hash(password)
        try:
            with self.repository.transaction():
                user_id = self.repository.create_user(
                    name.strip(), email, password_hash, self.clock().isoformat()
                )
        except DuplicateRecordError:
            logger.warning("duplicate registration", extra={"email": email})
            raise Conflict("Email already exists") from None
        return {"id": user_id, "name": name.strip(), "email": email}

    def verify_user(self, email, password):
        row = self.repository.fetch_user_by_email(email.strip().lower())
        if row is None or not check_password_hash(row["password"], password):
            return None
        return {"id": row["id"], "name": row["name"], "email": row["email"]}
