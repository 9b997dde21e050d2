"""
Password hashing and verification.

bcrypt embeds the salt and work factor in the hash it returns, so a
stored hash is all that verify needs.
"""
import bcrypt

DEFAULT_ROUNDS = 12

# bcrypt only looks at the first 72 bytes; newer releases raise instead of
# truncating, so we truncate ourselves on both sides.
MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:MAX_PASSWORD_BYTES]


class PasswordHasher:
    """bcrypt hasher with an adjustable work factor."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Generate a salted password hash."""
        return bcrypt.hashpw(
            _encode(password),
            bcrypt.gensalt(rounds=self.rounds)
        ).decode("utf-8")

    def verify(self, password: str, hashed_password: str) -> bool:
        """Check if provided password matches the stored hash."""
        if not hashed_password:
            return False
        try:
            return bcrypt.checkpw(_encode(password), hashed_password.encode("utf-8"))
        except (ValueError, TypeError, AttributeError):
            return False


_default_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    return _default_hasher.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    return _default_hasher.verify(password, hashed_password)
