"""
URL path signing.

Tokens are keyed by a process-wide secret and depend only on the path, so
the same path always produces the same token and a URL stays valid for as
long as the secret does.
"""

import base64
import hashlib
import hmac
from abc import ABC, abstractmethod

from depot.core.exceptions import ConfigurationError


class Signer(ABC):
    """Abstract base class for URL path signers."""

    @abstractmethod
    def sign(self, path: str) -> str:
        """
        Produce a verification token for a path.

        Args:
            path: URL path to sign.

        Returns:
            A token that is safe to use as a URL path segment.
        """
        ...

    @abstractmethod
    def verify(self, path: str, token: str) -> bool:
        """Check that a token was produced for the given path."""
        ...


class HmacSigner(Signer):
    """Signs paths with an HMAC over a shared secret."""

    def __init__(self, secret_key: str, digest: str = "sha1") -> None:
        """
        Initialize the signer.

        Args:
            secret_key: Shared secret used for every token.
            digest: Name of a hashlib digest, e.g. "sha1" or "sha256".

        Raises:
            ConfigurationError: If the secret is empty or the digest unknown.
        """
        if not secret_key:
            raise ConfigurationError(message="A secret key is required for signing")

        try:
            hashlib.new(digest)
        except ValueError as e:
            raise ConfigurationError(
                message=f"Unsupported signing digest: {digest}",
                details={"digest": digest},
            ) from e

        self._key = secret_key.encode("utf-8")
        self.digest = digest

    def sign(self, path: str) -> str:
        mac = hmac.new(self._key, path.encode("utf-8"), self.digest)
        return base64.urlsafe_b64encode(mac.digest()).decode("ascii")

    def verify(self, path: str, token: str) -> bool:
        expected = self.sign(path).encode("ascii")
        return hmac.compare_digest(expected, token.encode("utf-8"))
