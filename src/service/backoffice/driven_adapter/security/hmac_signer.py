"""
HMAC-SHA256 signing of ticket payload messages.

Signatures are lowercase hex digests. Verification compares the supplied
signature byte for byte in constant time, so any change to it (case included)
fails.
"""

import hashlib
import hmac

from src.service.backoffice.app.interface.i_signer import ISigner


def sign(message: str, secret: str) -> str:
    return hmac.new(secret.encode(), message.encode(), hashlib.sha256).hexdigest()


def verify(message: str, signature: str, secret: str) -> bool:
    if not signature:
        return False
    return hmac.compare_digest(sign(message, secret).encode(), signature.encode())


class HmacSha256Signer(ISigner):
    def __init__(self, *, secret: str) -> None:
        if not secret:
            raise ValueError('Signing secret must not be empty')
        self._secret = secret

    def sign(self, message: str) -> str:
        return sign(message, self._secret)

    def verify(self, message: str, signature: str) -> bool:
        return verify(message, signature, self._secret)
