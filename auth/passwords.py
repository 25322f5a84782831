"""
auth/passwords.py -- Argon2id password hashing with timing equalization.

Security design decisions:
  Argon2id (v=19, m=15000 KiB, t=2, p=1) via argon2-cffi. Memory-hard, so
  GPU brute force of a leaked table is expensive. Every hash gets a fresh
  random salt; the PHC string carries algorithm, parameters, salt and digest.

  PLACEHOLDER_HASH is verified whenever the account does not exist, with the
  same parameters as real hashes. An unknown identifier therefore costs the
  same Argon2 computation as a wrong password and response time does not
  reveal whether the account exists. The branch that uses it looks dead in
  practice; it must stay.

  Hashing is slow on purpose. CredentialHasher runs it on its own bounded
  thread pool so a burst of logins cannot starve the event loop. argon2-cffi
  releases the GIL while hashing, so the pool gives real parallelism.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor

from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError, VerificationError

# Fixed parameters. An invalid value here is a programming error, so
# hash_password() does not catch argon2's HashingError.
_HASHER = PasswordHasher(
    time_cost=2,
    memory_cost=15000,
    parallelism=1,
    hash_len=32,
    salt_len=16,
    type=Type.ID,
)

# Argon2id hash of a password nobody knows, same parameters as _HASHER.
PLACEHOLDER_HASH = (
    "$argon2id$v=19$m=15000,t=2,p=1$"
    "gZiV/M1gPc22ElAH/Jh1Hw$"
    "CWOrkoo7oJBQ/iyh7uJ0LO2aLEfrHwTWllSAxT0zRno"
)


def hash_password(plain: str) -> str:
    """Return an Argon2id PHC string for the given plaintext password."""
    return _HASHER.hash(plain)


def verify_password(plain: str, hashed: str | None) -> bool:
    """Return True if the plaintext password matches the hash.

    hashed=None means "no such account": the placeholder is verified instead
    so the same work is done. Never raises -- mismatches, corrupt hashes and
    unsupported parameters all come back as False.
    """
    try:
        return _HASHER.verify(hashed if hashed is not None else PLACEHOLDER_HASH, plain)
    except (VerificationError, InvalidHashError):
        return False


class CredentialHasher:
    """Runs hash_password / verify_password on a dedicated worker pool.

    Usage:
        hasher = CredentialHasher(max_workers=4)
        hashed = await hasher.hash("Secur3!pass")
        ok = await hasher.verify("Secur3!pass", hashed)
        hasher.close()
    """

    def __init__(self, max_workers: int = 4) -> None:
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="argon2")

    async def hash(self, plain: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, hash_password, plain)

    async def verify(self, plain: str, hashed: str | None) -> bool:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, verify_password, plain, hashed)

    def close(self) -> None:
        self._executor.shutdown(wait=True)
