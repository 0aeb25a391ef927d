# shop_service/security.py
import bcrypt

from shop_service.config import settings


class PasswordEncoder:
    """Hashes and checks user passwords with bcrypt."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def encode(self, password: str) -> str:
        """Returns the bcrypt hash of the password."""
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self.rounds)).decode()

    def matches(self, plain_password: str, hashed_password: str) -> bool:
        """Checks a password against a stored hash."""
        return bcrypt.checkpw(plain_password.encode(), hashed_password.encode())


def get_password_encoder() -> PasswordEncoder:
    return PasswordEncoder(rounds=settings.BCRYPT_ROUNDS)
