"""
Verification of Copilot agent request signatures.
"""

import base64
import binascii
import secrets
from typing import Optional, Protocol

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec

from wacky_pm.clients.github_client import PublicKey
from wacky_pm.core.config import settings
from wacky_pm.core.exceptions import ExternalApiError, VerificationFailedError
from wacky_pm.core.logging import get_logger

logger = get_logger(__name__)


def generate_request_id() -> str:
    """
    Generate a unique request ID for tracing.

    Returns:
        A random 8-byte hex string prefixed with 'req_'
    """
    return f"req_{secrets.token_hex(8)}"


class PublicKeySource(Protocol):
    async def get_public_keys(self, token: str) -> list[PublicKey]:
        ...


class CopilotRequestVerifier:
    """
    Checks that an agent request was signed by GitHub Copilot.

    Copilot signs the raw request body with ECDSA over SHA-256 and names the
    key in ``X-GitHub-Public-Key-Identifier``. Keys are fetched once and
    fetched again only when an unknown identifier shows up.
    """

    def __init__(self, key_source: PublicKeySource, enabled: Optional[bool] = None) -> None:
        self.key_source = key_source
        self.enabled = settings.github.verify_signatures if enabled is None else enabled
        self._keys: dict[str, str] = {}

    async def verify(
        self,
        body: bytes,
        signature: Optional[str],
        key_id: Optional[str],
        token: str,
    ) -> None:
        """
        Verify the request body against its signature.

        Raises:
            VerificationFailedError: If the signature is missing, unknown or wrong
        """
        if not self.enabled:
            return
        if not signature or not key_id:
            logger.warning("Request without signature headers")
            raise VerificationFailedError()

        public_key = self._load_key(await self._find_key(key_id, token))
        try:
            public_key.verify(base64.b64decode(signature), body, ec.ECDSA(hashes.SHA256()))
        except (InvalidSignature, binascii.Error, ValueError) as e:
            logger.warning("Request signature mismatch", key_id=key_id)
            raise VerificationFailedError() from e

    async def _find_key(self, key_id: str, token: str) -> str:
        if key_id not in self._keys:
            try:
                keys = await self.key_source.get_public_keys(token)
            except ExternalApiError as e:
                logger.error("Could not fetch Copilot public keys", error=e.message)
                raise VerificationFailedError() from e
            self._keys = {key.key_identifier: key.key for key in keys}

        if key_id not in self._keys:
            logger.warning("Unknown signing key", key_id=key_id)
            raise VerificationFailedError()
        return self._keys[key_id]

    @staticmethod
    def _load_key(pem: str) -> ec.EllipticCurvePublicKey:
        try:
            public_key = serialization.load_pem_public_key(pem.encode())
        except ValueError as e:
            raise VerificationFailedError() from e
        if not isinstance(public_key, ec.EllipticCurvePublicKey):
            raise VerificationFailedError()
        return public_key
