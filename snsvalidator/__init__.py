"""snsvalidator: validate AWS SNS messages without the AWS SDK."""

from .certs import CertificateFetcher, load_certificate
from .config import ValidatorConfig, load_config
from .contracts import MessageType, SNSMessage
from .errors import ErrorKind, SNSError
from .signable import build_signable_bytes
from .validator import SNSValidator, new_v1, validate_message

__version__ = "0.1.0"
__all__ = [
    "CertificateFetcher",
    "ErrorKind",
    "MessageType",
    "SNSError",
    "SNSMessage",
    "SNSValidator",
    "ValidatorConfig",
    "build_signable_bytes",
    "load_certificate",
    "load_config",
    "new_v1",
    "validate_message",
]
