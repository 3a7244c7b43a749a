"""Verification of signed sign-in challenges."""

import asyncio
import inspect
import logging
from datetime import datetime
from typing import Awaitable, Optional, Sequence, Union

import eth_keys.exceptions
import eth_utils
from eth_account import Account
from eth_account.messages import SignableMessage, _hash_eip191_message, encode_defunct
import requests
from pydantic import BaseModel, ConfigDict, model_validator
from typing_extensions import Protocol
from web3 import HTTPProvider, Web3
from web3.exceptions import BadFunctionCallOutput, ContractLogicError, Web3Exception

from .config import Settings
from .errors import (
    InvalidSignature,
    RecoveryError,
    SignatureFailure,
    VerificationError,
)
from .message import SignInRequest, format_message
from .nonce import Nonce, validate_nonce

logger = logging.getLogger(__name__)

EIP1271_CONTRACT_ABI = [
    {
        "inputs": [
            {"internalType": "bytes32", "name": " _message", "type": "bytes32"},
            {"internalType": "bytes", "name": " _signature", "type": "bytes"},
        ],
        "name": "isValidSignature",
        "outputs": [{"internalType": "bytes4", "name": "", "type": "bytes4"}],
        "stateMutability": "view",
        "type": "function",
    }
]
EIP1271_MAGICVALUE = "1626ba7e"

Signature = Union[str, bytes]


class SignerRecoverer(Protocol):
    """Recovers the address that produced a signature over a message.

    Implementations raise :class:`RecoveryError` when the signature cannot be
    decoded. ``recover_signer`` may be a coroutine function.
    """

    def recover_signer(
        self, message: str, signature: Signature
    ) -> Union[str, Awaitable[str]]: ...


class EIP191Recoverer:
    """Recover the signer of an EIP-191 ``personal_sign`` signature."""

    def recover_signer(self, message: str, signature: Signature) -> str:
        try:
            return Account.recover_message(
                encode_defunct(text=message), signature=signature
            )
        except (
            ValueError,
            TypeError,
            IndexError,
            eth_utils.exceptions.ValidationError,
            eth_keys.exceptions.BadSignature,
            eth_keys.exceptions.ValidationError,
        ) as e:
            raise RecoveryError(str(e)) from e


class VerificationResult(BaseModel):
    """Outcome of a verification, either the signer's address or the failure."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    address: Optional[str] = None
    error: Optional[VerificationError] = None

    @model_validator(mode="after")
    def address_or_error(self) -> "VerificationResult":
        """Exactly one of the address and the error is set."""
        if (self.address is None) == (self.error is None):
            raise ValueError("Result needs either an address or an error")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> str:
        """Return the verified address, raising the failure if there is one."""
        if self.error is not None:
            raise self.error
        return self.address


class SignatureVerifier:
    """Checks that a sign-in challenge was signed by the claimed account.

    The nonce window is checked first, then the canonical message is rebuilt
    from the request fields and the signer is recovered from the signature.
    """

    def __init__(
        self,
        recoverer: Optional[SignerRecoverer] = None,
        provider: Optional[HTTPProvider] = None,
    ):
        """Construct the verifier.

        :param recoverer: Signer recovery capability, EIP-191 by default.
        :param provider: A Web3 provider able to perform a contract check, this is
        required if support for Smart Contract Wallets that implement EIP-1271 is
        needed.
        """
        self.recoverer = recoverer or EIP191Recoverer()
        self.w3 = Web3(provider=provider) if provider is not None else None

    @classmethod
    def from_settings(
        cls, settings: Settings, recoverer: Optional[SignerRecoverer] = None
    ) -> "SignatureVerifier":
        provider = None
        if settings.provider_uri:
            provider = HTTPProvider(endpoint_uri=settings.provider_uri)
        return cls(recoverer=recoverer, provider=provider)

    async def verify(
        self,
        signature: Signature,
        domain: str,
        address: str,
        statement: str,
        uri: str,
        version: Union[int, str],
        nonce: Nonce,
        chain_id: Optional[int] = None,
        request_id: Optional[str] = None,
        resources: Optional[Sequence[str]] = None,
        *,
        now: Optional[datetime] = None,
    ) -> VerificationResult:
        """Verify the validity of the nonce and the signature.

        :param signature: Signature returned by the wallet.
        :param now: Timestamp used to check the nonce window. Uses the current
        time by default.
        :return: The result, carrying the recovered address on success and the
        :class:`VerificationError` otherwise.
        """
        try:
            validate_nonce(nonce, now=now)
            message = format_message(
                domain,
                address,
                statement,
                uri,
                version,
                nonce,
                chain_id=chain_id,
                request_id=request_id,
                resources=resources,
            )
            recovered = await self._recover(message, signature, address)
        except VerificationError as e:
            logger.warning(
                "Sign-in rejected for %s (nonce %s): %s", address, nonce.value, e
            )
            return VerificationResult(error=e)

        logger.info("Sign-in verified for %s", recovered)
        return VerificationResult(address=recovered)

    async def verify_request(
        self,
        signature: Signature,
        request: SignInRequest,
        *,
        now: Optional[datetime] = None,
    ) -> VerificationResult:
        """Verify a signature against a :class:`SignInRequest`."""
        return await self.verify(
            signature,
            request.domain,
            request.address,
            request.statement,
            request.uri,
            request.version,
            request.nonce,
            chain_id=request.chain_id,
            request_id=request.request_id,
            resources=request.resources,
            now=now,
        )

    async def _recover(self, message: str, signature: Signature, address: str) -> str:
        try:
            recovered = self.recoverer.recover_signer(message, signature)
            if inspect.isawaitable(recovered):
                recovered = await recovered
        except Exception as e:
            logger.debug("Signer recovery failed: %s", e, exc_info=True)
            failure = SignatureFailure.MALFORMED
        else:
            if not isinstance(recovered, str):
                logger.debug("Recoverer returned %r instead of an address", recovered)
                failure = SignatureFailure.MALFORMED
            elif recovered.lower() == address.lower():
                return recovered
            else:
                logger.debug("Recovered %s, expected %s", recovered, address)
                failure = SignatureFailure.MISMATCH

        if self.w3 is not None and await asyncio.to_thread(
            check_contract_wallet_signature,
            address=address,
            message=encode_defunct(text=message),
            signature=signature,
            w3=self.w3,
        ):
            return address

        raise InvalidSignature(failure, address=address)


def check_contract_wallet_signature(
    address: str, message: SignableMessage, signature: Signature, w3: Web3
) -> bool:
    """Call the EIP-1271 method for a Smart Contract wallet.

    :param address: The address of the contract
    :param message: The EIP-4361 formatted message
    :param signature: The EIP-1271 signature
    :param w3: A Web3 provider able to perform a contract check.
    :return: True if the signature is valid per EIP-1271.
    """
    try:
        checksum_address = Web3.to_checksum_address(address)
        signature_bytes = (
            eth_utils.to_bytes(hexstr=signature)
            if isinstance(signature, str)
            else bytes(signature)
        )
    except ValueError:
        return False

    contract = w3.eth.contract(address=checksum_address, abi=EIP1271_CONTRACT_ABI)
    hash_ = _hash_eip191_message(message)
    try:
        response = contract.caller.isValidSignature(hash_, signature_bytes)
        return bytes(response).hex() == EIP1271_MAGICVALUE
    except BadFunctionCallOutput:
        return False
    except (ContractLogicError, Web3Exception, requests.RequestException) as e:
        logger.warning("EIP-1271 check for %s failed: %s", checksum_address, e)
        return False


async def verify(
    signature: Signature,
    domain: str,
    address: str,
    statement: str,
    uri: str,
    version: Union[int, str],
    nonce: Nonce,
    chain_id: Optional[int] = None,
    request_id: Optional[str] = None,
    resources: Optional[Sequence[str]] = None,
    *,
    now: Optional[datetime] = None,
    recoverer: Optional[SignerRecoverer] = None,
) -> VerificationResult:
    """Verify a signed challenge with a default :class:`SignatureVerifier`."""
    return await SignatureVerifier(recoverer=recoverer).verify(
        signature,
        domain,
        address,
        statement,
        uri,
        version,
        nonce,
        chain_id=chain_id,
        request_id=request_id,
        resources=resources,
        now=now,
    )
