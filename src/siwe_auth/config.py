"""Runtime settings, read from the environment."""

from typing import Optional

from pydantic import AliasChoices, Field, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings shared by the nonce issuer and the signature verifier.

    ``nonce_bytes`` and ``nonce_ttl_seconds`` are read from ``SIWE_*`` variables,
    ``provider_uri`` from ``WEB3_HTTP_PROVIDER_URI``. Empty variables keep their
    default.
    """

    model_config = SettingsConfigDict(env_prefix="SIWE_", env_ignore_empty=True)

    nonce_bytes: int = Field(16, ge=16)
    """Number of random bytes behind each nonce, hex encoded."""
    nonce_ttl_seconds: Optional[PositiveInt] = None
    """Lifetime given to nonces issued without an explicit TTL."""
    provider_uri: Optional[str] = Field(
        None, validation_alias=AliasChoices("WEB3_HTTP_PROVIDER_URI", "provider_uri")
    )
    """HTTP endpoint of an Ethereum node, needed for EIP-1271 contract wallets."""
