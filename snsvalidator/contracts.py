"""Message contracts shared by the decoder and the validator.

Field lists are referenced from
https://docs.aws.amazon.com/sns/latest/dg/sns-message-and-json-formats.html
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Tuple, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ErrorKind, SNSError

if TYPE_CHECKING:
    from .certs import CertificateFetcher
    from .validator import SNSValidator

MessageFieldMap = Mapping[str, str]

FIELD_NAMES: Tuple[str, ...] = (
    "Type",
    "MessageId",
    "Token",
    "TopicArn",
    "Message",
    "Subject",
    "SubscribeURL",
    "Timestamp",
    "SignatureVersion",
    "Signature",
    "SigningCertURL",
    "UnsubscribeURL",
)

# Scan order decides which field is reported when several are missing.
REQUIRED_KEYS: Tuple[str, ...] = (
    "Type",
    "MessageId",
    "TopicArn",
    "Message",
    "Timestamp",
    "Signature",
    "SignatureVersion",
    "SigningCertURL",
)

SUBSCRIPTION_REQUIRED_KEYS: Tuple[str, ...] = ("SubscribeURL", "Token")

# Signable key orders are fixed by SNS and must not be reordered.
SUBSCRIPTION_SIGNABLE_KEYS: Tuple[str, ...] = (
    "Message",
    "MessageId",
    # Subject never appears in subscription messages, kept for symmetry
    "Subject",
    "SubscribeURL",
    "Timestamp",
    "Token",
    "TopicArn",
    "Type",
)

NOTIFICATION_SIGNABLE_KEYS: Tuple[str, ...] = (
    "Message",
    "MessageId",
    "Subject",
    "SubscribeURL",
    "Timestamp",
    "TopicArn",
    "Type",
)


def has_field(field_map: MessageFieldMap, key: str) -> bool:
    """Return ``True`` if ``key`` is present with a non-empty value.

    Decoders leave missing keys as empty strings, so an empty value counts as
    absent everywhere in validation and in the signable string.
    """
    return bool(field_map.get(key))


class MessageType(str, Enum):
    """Recognised values of the ``Type`` field."""

    NOTIFICATION = "Notification"
    SUBSCRIPTION_CONFIRMATION = "SubscriptionConfirmation"
    UNSUBSCRIBE_CONFIRMATION = "UnsubscribeConfirmation"

    @classmethod
    def lookup(cls, value: Optional[str]) -> Optional["MessageType"]:
        """Return the member for ``value`` or ``None`` if it is not recognised."""
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def is_subscription(self) -> bool:
        return self is not MessageType.NOTIFICATION

    @property
    def required_keys(self) -> Tuple[str, ...]:
        """Keys required on top of :data:`REQUIRED_KEYS`."""
        return SUBSCRIPTION_REQUIRED_KEYS if self.is_subscription else ()

    @property
    def signable_keys(self) -> Tuple[str, ...]:
        return SUBSCRIPTION_SIGNABLE_KEYS if self.is_subscription else NOTIFICATION_SIGNABLE_KEYS


class SNSMessage(BaseModel):
    """Decoded SNS message.

    Serves both HTTP(S) endpoint deliveries and Lambda event records. Lambda
    spells the URL fields ``...Url`` instead of ``...URL``; both are accepted.
    Fields missing from the payload, or sent as ``null``, become empty strings.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    type: str = Field(default="", validation_alias=AliasChoices("Type", "type"))
    message_id: str = Field(default="", validation_alias=AliasChoices("MessageId", "message_id"))
    token: str = Field(default="", validation_alias=AliasChoices("Token", "token"))
    topic_arn: str = Field(default="", validation_alias=AliasChoices("TopicArn", "topic_arn"))
    message: str = Field(default="", validation_alias=AliasChoices("Message", "message"))
    subject: str = Field(default="", validation_alias=AliasChoices("Subject", "subject"))
    subscribe_url: str = Field(
        default="",
        validation_alias=AliasChoices("SubscribeURL", "SubscribeUrl", "subscribe_url"),
    )
    timestamp: str = Field(default="", validation_alias=AliasChoices("Timestamp", "timestamp"))
    signature_version: str = Field(
        default="", validation_alias=AliasChoices("SignatureVersion", "signature_version")
    )
    signature: str = Field(default="", validation_alias=AliasChoices("Signature", "signature"))
    signing_cert_url: str = Field(
        default="",
        validation_alias=AliasChoices("SigningCertURL", "SigningCertUrl", "signing_cert_url"),
    )
    unsubscribe_url: str = Field(
        default="",
        validation_alias=AliasChoices("UnsubscribeURL", "UnsubscribeUrl", "unsubscribe_url"),
    )

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> "SNSMessage":
        """Decode a JSON-encoded SNS message.

        Raises:
            SNSError: of kind ``MalformedJSON`` if ``data`` is not a JSON object
                whose fields are strings.
        """
        try:
            return cls.model_validate_json(data)
        except ValidationError as exc:
            raise SNSError(ErrorKind.MALFORMED_JSON, str(exc)) from exc

    def to_field_map(self) -> Dict[str, str]:
        """Return the message keyed by SNS field names."""
        return {
            "Type": self.type,
            "MessageId": self.message_id,
            "Token": self.token,
            "TopicArn": self.topic_arn,
            "Message": self.message,
            "Subject": self.subject,
            "SubscribeURL": self.subscribe_url,
            "Timestamp": self.timestamp,
            "SignatureVersion": self.signature_version,
            "Signature": self.signature,
            "SigningCertURL": self.signing_cert_url,
            "UnsubscribeURL": self.unsubscribe_url,
        }

    def get_validator(self, fetcher: Optional["CertificateFetcher"] = None) -> "SNSValidator":
        """Return a version 1 validator bound to this message."""
        from .validator import SNSValidator

        return SNSValidator.new_v1(self.to_field_map(), fetcher=fetcher)


__all__ = [
    "FIELD_NAMES",
    "REQUIRED_KEYS",
    "SUBSCRIPTION_REQUIRED_KEYS",
    "SUBSCRIPTION_SIGNABLE_KEYS",
    "NOTIFICATION_SIGNABLE_KEYS",
    "MessageFieldMap",
    "MessageType",
    "SNSMessage",
    "has_field",
]
