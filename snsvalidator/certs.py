"""Signing certificate retrieval anchored to SNS hosts."""

from __future__ import annotations

import logging
import re
from typing import Optional
from urllib.parse import urlsplit

import requests
from cryptography import x509

from .config import DEFAULT_HOST_PATTERN, ValidatorConfig, load_config
from .errors import ErrorKind, SNSError

logger = logging.getLogger(__name__)

_PEM_BEGIN = b"-----BEGIN"


def _hostname(netloc: str) -> str:
    """Return the host part of ``netloc`` without case folding."""
    host = netloc.rpartition("@")[2]
    if host.startswith("["):
        return host[1:].partition("]")[0]
    return host.partition(":")[0]


def load_certificate(data: bytes) -> x509.Certificate:
    """Parse the PEM encoded certificate in ``data``.

    Raises:
        SNSError: of kind ``InvalidCert`` if ``data`` holds no PEM block or the
            block is not a certificate.
    """
    if _PEM_BEGIN not in data:
        raise SNSError(ErrorKind.INVALID_CERT, "Could not decode the certificate")

    try:
        return x509.load_pem_x509_certificate(data)
    except ValueError as exc:
        raise SNSError(ErrorKind.INVALID_CERT, f"Could not parse the certificate: {exc}") from exc


class CertificateFetcher:
    """Downloads signing certificates from trusted SNS endpoints only.

    Every call performs exactly one GET; nothing is cached and failures are not
    retried. ``timeout`` is handed to ``requests`` unchanged, so ``None`` waits
    indefinitely. A preconfigured :class:`requests.Session` may be supplied to
    control proxies, adapters or TLS settings.
    """

    def __init__(
        self,
        host_pattern: str = DEFAULT_HOST_PATTERN,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.host_pattern = host_pattern
        self.timeout = timeout
        self._host_regexp = re.compile(host_pattern)
        self._session = session

    @classmethod
    def from_config(cls, config: Optional[ValidatorConfig] = None) -> "CertificateFetcher":
        config = config or load_config()
        return cls(
            host_pattern=config.certificates.host_pattern,
            timeout=config.certificates.timeout,
        )

    def check_url(self, url: str) -> None:
        """Reject ``url`` unless it is HTTPS on a trusted host."""
        try:
            parsed = urlsplit(url)
        except ValueError as exc:
            raise SNSError(ErrorKind.INVALID_CERT, str(exc)) from exc

        if parsed.scheme != "https":
            raise SNSError(
                ErrorKind.INVALID_CERT, "The certificate URL is using insecure HTTP scheme"
            )

        if not self._host_regexp.fullmatch(_hostname(parsed.netloc)):
            raise SNSError(
                ErrorKind.INVALID_CERT, "The certificate URL belongs to an untrusted host"
            )

    def fetch(self, url: str) -> bytes:
        """Return the raw certificate body served at ``url``.

        Raises:
            SNSError: of kind ``InvalidCert`` for an untrusted URL, a network
                failure, a non-200 answer or an unreadable body.
        """
        self.check_url(url)

        get = self._session.get if self._session is not None else requests.get
        logger.info(f"Fetching signing certificate from {url}")
        try:
            response = get(url, timeout=self.timeout, allow_redirects=False, stream=True)
        except requests.RequestException as exc:
            raise SNSError(ErrorKind.INVALID_CERT, str(exc)) from exc

        try:
            if response.status_code != 200:
                logger.warning(
                    f"Signing certificate request to {url} answered {response.status_code}"
                )
                raise SNSError(ErrorKind.INVALID_CERT, "Could not retrieve the certificate")
            try:
                return response.content
            except requests.RequestException as exc:
                raise SNSError(ErrorKind.INVALID_CERT, str(exc)) from exc
        finally:
            response.close()

    def get_certificate(self, url: str) -> x509.Certificate:
        """Fetch and parse the certificate served at ``url``."""
        return load_certificate(self.fetch(url))


__all__ = ["CertificateFetcher", "load_certificate"]
