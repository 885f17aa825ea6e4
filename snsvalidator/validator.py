"""Validation of SNS message structure and signature."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Optional, Tuple

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .certs import CertificateFetcher
from .contracts import REQUIRED_KEYS, MessageFieldMap, MessageType, has_field
from .errors import ErrorKind, SNSError
from .signable import build_signable_bytes

logger = logging.getLogger(__name__)


class SNSValidator:
    """Validates one SNS message held as a field map.

    The validator never mutates ``message_map``; the same instance can be
    validated repeatedly and from several threads as long as the caller does
    not modify the map meanwhile.
    """

    def __init__(
        self,
        message_map: MessageFieldMap,
        version: int = 1,
        fetcher: Optional[CertificateFetcher] = None,
    ) -> None:
        self.version = version
        self.message_map = message_map
        self.fetcher = fetcher or CertificateFetcher()

    @classmethod
    def new_v1(
        cls, message_map: MessageFieldMap, fetcher: Optional[CertificateFetcher] = None
    ) -> "SNSValidator":
        """Return a version 1 validator over ``message_map``."""
        return cls(message_map, version=1, fetcher=fetcher)

    def has(self, key: str) -> bool:
        return has_field(self.message_map, key)

    def _first_missing(self, keys: Tuple[str, ...]) -> Optional[str]:
        for key in keys:
            if not self.has(key):
                return key
        return None

    @property
    def message_type(self) -> Optional[MessageType]:
        return MessageType.lookup(self.message_map.get("Type"))

    def validate_message(self) -> None:
        """Validate the structure and then the signature of the message.

        Raises:
            SNSError: ``MissingKey`` or ``InvalidType`` for a malformed message,
                ``InvalidCert`` if the signing certificate cannot be obtained,
                ``IncorrectSignature`` if the signature does not match.
        """
        try:
            self.validate_message_structure()
            self.verify_signature()
        except SNSError as exc:
            logger.warning(
                f"Rejected SNS message {self.message_map.get('MessageId')!r}: "
                f"{exc.kind}: {exc.message}"
            )
            raise
        logger.debug(f"Accepted SNS message {self.message_map.get('MessageId')!r}")

    def validate_message_structure(self) -> None:
        """Check required keys and the message type."""
        missing = self._first_missing(REQUIRED_KEYS)
        if missing is not None:
            raise SNSError(ErrorKind.MISSING_KEY, f'"{missing}" is required in SNS message')

        message_type = self.message_type
        if message_type is None:
            raise SNSError(
                ErrorKind.INVALID_TYPE,
                f'Invalid message type "{self.message_map.get("Type")}"',
            )

        missing = self._first_missing(message_type.required_keys)
        if missing is not None:
            raise SNSError(
                ErrorKind.MISSING_KEY, f'"{missing}" is required in Subscription message'
            )

    def build_signable_string(self) -> bytes:
        return build_signable_bytes(self.message_map)

    def verify_signature(self) -> None:
        """Check the signature against the certificate named by the message."""
        certificate = self.fetcher.get_certificate(self.message_map.get("SigningCertURL", ""))

        try:
            signature = base64.b64decode(self.message_map.get("Signature", ""), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise SNSError(
                ErrorKind.INCORRECT_SIGNATURE, "Could not base64 decode the signature"
            ) from exc

        public_key = certificate.public_key()
        if not isinstance(public_key, rsa.RSAPublicKey):
            raise SNSError(
                ErrorKind.INCORRECT_SIGNATURE,
                f"Incorrect signature: expected an RSA public key, got {type(public_key).__name__}",
            )

        # SignatureVersion 1 is SHA1withRSA, PKCS#1 v1.5
        try:
            public_key.verify(
                signature, self.build_signable_string(), padding.PKCS1v15(), hashes.SHA1()
            )
        except InvalidSignature as exc:
            raise SNSError(
                ErrorKind.INCORRECT_SIGNATURE,
                f"Incorrect signature: {str(exc) or 'verification error'}",
            ) from exc


def new_v1(
    message_map: MessageFieldMap, fetcher: Optional[CertificateFetcher] = None
) -> SNSValidator:
    """Return a version 1 :class:`SNSValidator` over ``message_map``."""
    return SNSValidator.new_v1(message_map, fetcher=fetcher)


def validate_message(
    message_map: MessageFieldMap, fetcher: Optional[CertificateFetcher] = None
) -> None:
    """Validate ``message_map`` end to end, raising :class:`SNSError` on rejection."""
    new_v1(message_map, fetcher=fetcher).validate_message()


__all__ = ["SNSValidator", "new_v1", "validate_message"]
