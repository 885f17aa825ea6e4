"""Shared fixtures: signing keys, certificates and a fake certificate host."""

import base64
import datetime as dt
from typing import Dict, List, Optional

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa
from cryptography.x509.oid import NameOID

from snsvalidator.signable import build_signable_bytes

CERT_URL = "https://sns.us-west-2.amazonaws.com/SimpleNotificationService-test.pem"


def generate_certificate(key) -> bytes:
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "sns.amazonaws.com")])
    now = dt.datetime.now(dt.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - dt.timedelta(days=1))
        .not_valid_after(now + dt.timedelta(days=30))
        .sign(key, hashes.SHA256())
    )
    return cert.public_bytes(serialization.Encoding.PEM)


def sign_fields(fields: Dict[str, str], key: rsa.RSAPrivateKey) -> str:
    signature = key.sign(build_signable_bytes(fields), padding.PKCS1v15(), hashes.SHA1())
    return base64.b64encode(signature).decode("ascii")


class FakeResponse:
    def __init__(self, status_code: int = 200, content: bytes = b"") -> None:
        self.status_code = status_code
        self.content = content
        self.closed = False

    def close(self) -> None:
        self.closed = True


class FakeCertificateHost:
    """Stands in for ``requests.get`` and records every request."""

    def __init__(self, content: bytes = b"", status_code: int = 200) -> None:
        self.content = content
        self.status_code = status_code
        self.error: Optional[Exception] = None
        self.calls: List[dict] = []

    def __call__(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return FakeResponse(self.status_code, self.content)


@pytest.fixture(scope="session")
def signing_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def certificate_pem(signing_key) -> bytes:
    return generate_certificate(signing_key)


@pytest.fixture(scope="session")
def ec_certificate_pem() -> bytes:
    return generate_certificate(ec.generate_private_key(ec.SECP256R1()))


@pytest.fixture
def cert_host(monkeypatch, certificate_pem) -> FakeCertificateHost:
    host = FakeCertificateHost(certificate_pem)
    monkeypatch.setattr("requests.get", host)
    return host


@pytest.fixture
def notification_fields() -> Dict[str, str]:
    return {
        "Type": "Notification",
        "MessageId": "165545c9-2a5c-472c-8df2-7ff2be2b3b1b",
        "Token": "",
        "TopicArn": "arn:aws:sns:us-west-2:123456789012:MyTopic",
        "Message": "Test notification",
        "Subject": "Test subject",
        "SubscribeURL": "",
        "Timestamp": "2012-04-26T20:45:04.751Z",
        "SignatureVersion": "1",
        "Signature": "EXAMPLEpH+DcEwjAPg8O9mY8dReBSwksfg2S=",
        "SigningCertURL": CERT_URL,
        "UnsubscribeURL": "https://sns.us-west-2.amazonaws.com/?Action=Unsubscribe",
    }


@pytest.fixture
def subscription_fields() -> Dict[str, str]:
    return {
        "Type": "SubscriptionConfirmation",
        "MessageId": "165545c9-2a5c-472c-8df2-7ff2be2b3b1b",
        "Token": "2336412f37fb687f5d51e6e241d09c805a5a",
        "TopicArn": "arn:aws:sns:us-west-2:123456789012:MyTopic",
        "Message": "You have chosen to subscribe to the topic",
        "Subject": "",
        "SubscribeURL": "https://sns.us-west-2.amazonaws.com/?Action=ConfirmSubscription",
        "Timestamp": "2012-04-26T20:45:04.751Z",
        "SignatureVersion": "1",
        "Signature": "EXAMPLEpH+DcEwjAPg8O9mY8dReBSwksfg2S=",
        "SigningCertURL": CERT_URL,
        "UnsubscribeURL": "",
    }


@pytest.fixture
def sign(signing_key):
    """Return a function that signs a field map the way SNS does."""

    def _sign(fields: Dict[str, str]) -> str:
        return sign_fields(fields, signing_key)

    return _sign
