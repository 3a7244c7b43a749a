"""Issuing single-use nonces and checking their validity window."""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from .config import Settings
from .errors import InvalidNonce, NonceFailure

logger = logging.getLogger(__name__)

DEFAULT_NONCE_BYTES = 16


def utc_now() -> datetime:
    """Get the current datetime as UTC timezone."""
    return datetime.now(tz=timezone.utc)


class Nonce(BaseModel):
    """A single-use token bound to a sign-in challenge."""

    model_config = ConfigDict(frozen=True)

    value: str
    """Unpredictable token, lowercase hex when issued by :class:`NonceIssuer`."""
    issued_at: datetime
    """Instant the nonce was created."""
    expiration_time: Optional[datetime] = None
    """If present, the nonce is invalid at or after this instant."""
    not_before: Optional[datetime] = None
    """If present, the nonce is invalid strictly before this instant."""

    @field_validator("issued_at", "expiration_time", "not_before")
    @classmethod
    def naive_datetime_is_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Interpret naive datetimes as UTC."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class NonceIssuer:
    """Generates fresh nonces from the operating system's secure random source.

    Without settings, nonces are 16 bytes and carry no expiration unless a TTL
    is passed to :meth:`issue`.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.nonce_bytes = DEFAULT_NONCE_BYTES
        self.ttl_seconds = None
        if settings is not None:
            self.nonce_bytes = settings.nonce_bytes
            self.ttl_seconds = settings.nonce_ttl_seconds

    def issue(
        self,
        ttl_seconds: Optional[int] = None,
        not_before: Optional[datetime] = None,
    ) -> Nonce:
        """Create a new nonce.

        :param ttl_seconds: Number of seconds the nonce stays valid for. Falls
        back to the configured TTL, if any.
        :param not_before: Instant before which the nonce is not valid yet.
        :return: The issued nonce.
        """
        if ttl_seconds is None:
            ttl_seconds = self.ttl_seconds

        issued_at = utc_now()
        expiration_time = None
        if ttl_seconds is not None:
            expiration_time = issued_at + timedelta(seconds=ttl_seconds)

        nonce = Nonce(
            value=secrets.token_hex(self.nonce_bytes),
            issued_at=issued_at,
            expiration_time=expiration_time,
            not_before=not_before,
        )
        logger.debug(
            "Issued nonce %s (expires %s, not before %s)",
            nonce.value,
            nonce.expiration_time,
            nonce.not_before,
        )
        return nonce


def issue_nonce(
    ttl_seconds: Optional[int] = None, not_before: Optional[datetime] = None
) -> Nonce:
    """Issue a nonce without configured settings."""
    return NonceIssuer().issue(ttl_seconds=ttl_seconds, not_before=not_before)


def validate_nonce(nonce: Nonce, now: Optional[datetime] = None) -> None:
    """Check the nonce's validity window.

    :param nonce: Nonce to check.
    :param now: Instant to check against. Uses the current time by default.
    :return: None if the nonce is valid and raises :class:`InvalidNonce` otherwise
    """
    now = utc_now() if now is None else now
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    if nonce.expiration_time is not None and nonce.expiration_time <= now:
        raise InvalidNonce(
            NonceFailure.EXPIRED,
            f"Nonce is expired: {nonce.expiration_time.isoformat()} <= "
            f"{now.isoformat()}",
        )
    if nonce.not_before is not None and nonce.not_before > now:
        raise InvalidNonce(
            NonceFailure.NOT_YET_VALID,
            f"Nonce is not valid yet: {nonce.not_before.isoformat()} > "
            f"{now.isoformat()}",
        )
