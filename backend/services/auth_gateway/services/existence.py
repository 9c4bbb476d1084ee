"""
Account existence check.

Supabase exposes no "does this account exist" query to holders of the public
key, so existence is inferred from a registration attempt:

    | Outcome of sign_up(email, random secret)               | Exists? |
    |--------------------------------------------------------|---------|
    | error mentioning "already registered"/"already exists" | True    |
    | any other error                                        | False   |
    | user with non-empty user_metadata or identities        | False   |
    | user with empty user_metadata and empty identities     | True    |

The last row relies on the backend answering a repeated signup for an existing
account with an obfuscated user that carries no metadata and no identities.
This is a best-effort heuristic tied to that undocumented behaviour, not a
guaranteed-correct check.

Every call performs a real registration attempt against the backend, which may
count towards its rate limits or abuse detection. Call it at most once per
logical operation. A genuinely new address ends up with an unconfirmed account
holding a random password nobody knows.

Keep callers on probe_exists() only, so the heuristic can be swapped for a
direct query without touching them.
"""

import secrets
import string
from typing import Any, Protocol

from loguru import logger

from common.exceptions import BackendError

EXISTING_ACCOUNT_MARKERS = ("already registered", "already exists")

PROBE_SECRET_LENGTH = 16
PROBE_SECRET_SYMBOLS = "!@#$%^&*-_=+"


class SignUpBackend(Protocol):
    async def sign_up(
        self, email: str, password: str, data: dict[str, Any] | None = None
    ) -> dict[str, Any]: ...


def generate_probe_secret(length: int = PROBE_SECRET_LENGTH) -> str:
    """
    Generate a random password that satisfies common password policies.

    The result has at least 12 characters and contains at least one lowercase
    letter, one uppercase letter, one digit and one symbol.
    """
    length = max(length, 12)
    required = [
        secrets.choice(string.ascii_lowercase),
        secrets.choice(string.ascii_uppercase),
        secrets.choice(string.digits),
        secrets.choice(PROBE_SECRET_SYMBOLS),
    ]
    alphabet = string.ascii_letters + string.digits + PROBE_SECRET_SYMBOLS
    rest = [secrets.choice(alphabet) for _ in range(length - len(required))]
    chars = required + rest
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)


def _is_existing_account_error(message: str) -> bool:
    lowered = message.lower()
    return any(marker in lowered for marker in EXISTING_ACCOUNT_MARKERS)


def account_exists_from_signup(user: dict[str, Any] | None) -> bool:
    """Apply the success rows of the decision table to a signup's user object."""
    user = user or {}
    has_metadata = bool(user.get("user_metadata"))
    has_identities = bool(user.get("identities"))
    return not has_metadata and not has_identities


async def probe_exists(backend: SignUpBackend, email: str) -> bool:
    """
    Best-effort check whether an account is registered for ``email``.

    Args:
        backend: Anything with an async ``sign_up(email, password)`` raising
            BackendError on backend-reported failures.
        email: Address to check.

    Returns:
        True if the account appears to exist.

    Raises:
        Exception: Transport or unexpected errors from the backend propagate.
    """
    try:
        result = await backend.sign_up(email, generate_probe_secret())
    except BackendError as e:
        exists = _is_existing_account_error(e.message)
        logger.debug(f"Existence probe answered by backend error (exists={exists})")
        return exists

    exists = account_exists_from_signup((result or {}).get("user"))
    logger.debug(f"Existence probe answered by signup response (exists={exists})")
    return exists
