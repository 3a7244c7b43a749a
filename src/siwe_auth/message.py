"""Construction and parsing of EIP-4361 sign-in challenge messages."""

from datetime import datetime, timezone
from typing import List, Optional, Sequence, Union

from pydantic import BaseModel

from .nonce import Nonce
from .parsed import RegExpParsedMessage


def datetime_from_iso8601_string(val: str) -> datetime:
    """Convert an ISO-8601 Datetime string into a valid datetime object."""
    return datetime.fromisoformat(
        val.upper().replace(".000Z", "Z").replace("Z", "+00:00")
    )


class ISO8601Datetime(str):
    """A special string class used to denote ISO-8601 Datetime strings."""

    def __init__(self, val: str):
        """Validate ISO-8601 string."""
        # NOTE: `self` is already this class, we are just running our validation here
        datetime_from_iso8601_string(val)

    @classmethod
    def from_datetime(
        cls, dt: datetime, timespec: str = "milliseconds"
    ) -> "ISO8601Datetime":
        """Create an ISO-8601 formatted string from a datetime object."""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return ISO8601Datetime(
            dt.astimezone(tz=timezone.utc)
            .isoformat(timespec=timespec)
            .replace("+00:00", "Z")
        )

    @property
    def _datetime(self) -> datetime:
        return datetime_from_iso8601_string(self)


def format_message(
    domain: str,
    address: str,
    statement: str,
    uri: str,
    version: Union[int, str],
    nonce: Nonce,
    chain_id: Optional[int] = None,
    request_id: Optional[str] = None,
    resources: Optional[Sequence[str]] = None,
) -> str:
    """Serialize a sign-in request to the EIP-4361 format for signing.

    The output is a pure function of the arguments, so the verifier can rebuild
    the exact text the wallet signed.

    :return: EIP-4361 formatted message, ready for EIP-191 signing.
    """
    header = f"{domain} wants you to sign in with your Ethereum account:"
    prefix = "\n".join([header, address])

    suffix_array = [
        f"URI: {uri}",
        f"Version: {version}",
        f"Nonce: {nonce.value}",
        f"Issued At: {ISO8601Datetime.from_datetime(nonce.issued_at)}",
    ]

    if nonce.expiration_time is not None:
        expiration_time = ISO8601Datetime.from_datetime(nonce.expiration_time)
        suffix_array.append(f"Expiration Time: {expiration_time}")

    if nonce.not_before is not None:
        not_before = ISO8601Datetime.from_datetime(nonce.not_before)
        suffix_array.append(f"Not Before: {not_before}")

    if chain_id is not None:
        suffix_array.append(f"Chain ID: {chain_id}")

    if request_id:
        suffix_array.append(f"Request ID: {request_id}")

    if resources:
        resources_field = "\n".join(
            ["Resources:"] + [f"- {resource}" for resource in resources]
        )
        suffix_array.append(resources_field)

    suffix = "\n".join(suffix_array)

    return "\n\n".join([prefix, statement, suffix])


class SignInRequest(BaseModel):
    """The fields of a Sign-in with Ethereum (EIP-4361) challenge."""

    domain: str
    """RFC 4501 dns authority that is requesting the signing."""
    address: str
    """Ethereum address expected to perform the signing."""
    statement: str
    """Human-readable assertion that the user will sign."""
    uri: str
    """RFC 3986 URI referring to the resource that is the subject of the signing.
    Kept verbatim, URL normalisation would change the signed bytes.
    """
    version: Union[int, str]
    """Version of the message."""
    nonce: Nonce
    """Single-use nonce, see :class:`siwe_auth.nonce.NonceIssuer`."""
    chain_id: Optional[int] = None
    """EIP-155 Chain ID to which the session is bound."""
    request_id: Optional[str] = None
    """System-specific identifier that may be used to uniquely refer to the sign-in
    request.
    """
    resources: Optional[List[str]] = None
    """List of information or references to information the user wishes to have resolved
    as part of authentication by the relying party.
    """

    @classmethod
    def from_message(cls, message: str) -> "SignInRequest":
        """Parse a message in its EIP-4361 format."""
        parsed = RegExpParsedMessage(message)

        nonce = Nonce(
            value=parsed.nonce,
            issued_at=ISO8601Datetime(parsed.issued_at)._datetime,
            expiration_time=(
                ISO8601Datetime(parsed.expiration_time)._datetime
                if parsed.expiration_time
                else None
            ),
            not_before=(
                ISO8601Datetime(parsed.not_before)._datetime
                if parsed.not_before
                else None
            ),
        )
        return cls(
            domain=parsed.domain,
            address=parsed.address,
            statement=parsed.statement,
            uri=parsed.uri,
            version=parsed.version,
            nonce=nonce,
            chain_id=parsed.chain_id,
            request_id=parsed.request_id,
            resources=parsed.resources,
        )

    def prepare_message(self) -> str:
        """Serialize to the EIP-4361 format for signing."""
        return format_message(
            self.domain,
            self.address,
            self.statement,
            self.uri,
            self.version,
            self.nonce,
            chain_id=self.chain_id,
            request_id=self.request_id,
            resources=self.resources,
        )
