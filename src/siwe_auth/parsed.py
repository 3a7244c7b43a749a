"""Sign-in message parser."""

import re

from .defs import REGEX_MESSAGE

_EXPR = re.compile(REGEX_MESSAGE)


class RegExpParsedMessage:
    """Regex parsed sign-in message."""

    def __init__(self, message: str):
        """Parse a sign-in message."""
        match = _EXPR.match(message)

        if not match:
            raise ValueError("Message did not match the regular expression.")

        self.match = match
        self.domain = match.group("domain")
        self.address = match.group("address")
        self.statement = match.group("statement")
        self.uri = match.group("uri")
        self.version = match.group("version")
        self.nonce = match.group("nonce")
        self.issued_at = match.group("issuedAt")
        self.expiration_time = match.group("expirationTime")
        self.not_before = match.group("notBefore")
        self.chain_id = match.group("chainId")
        self.request_id = match.group("requestId")
        self.resources = match.group("resources")
        if self.resources:
            self.resources = self.resources.split("\n- ")[1:]
