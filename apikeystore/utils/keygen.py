import secrets
import string

API_KEY_PREFIX = "sk_live_"
API_KEY_LENGTH = 32
API_KEY_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
MAX_KEYS_PER_ORDER = 100


def generate_api_key() -> str:
    """Return ``sk_live_`` followed by 32 random alphanumeric characters."""
    body = "".join(secrets.choice(API_KEY_ALPHABET) for _ in range(API_KEY_LENGTH))
    return f"{API_KEY_PREFIX}{body}"
