"""Example AWS Lambda handler validating SNS records before processing."""

import json
import logging
from typing import Any, Dict

from snsvalidator import CertificateFetcher, SNSError, SNSMessage

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

# Bound the certificate download so a slow endpoint cannot exhaust the Lambda timeout.
fetcher = CertificateFetcher(timeout=3)


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    accepted, rejected = 0, 0
    for record in event.get("Records", []):
        try:
            message = SNSMessage.from_json(json.dumps(record.get("Sns", {})))
            message.get_validator(fetcher).validate_message()
        except SNSError as exc:
            logger.warning("Rejected SNS record: %s: %s", exc.kind, exc.message)
            rejected += 1
            continue

        logger.info("Accepted SNS message %s from %s", message.message_id, message.topic_arn)
        accepted += 1

    return {"accepted": accepted, "rejected": rejected}


if __name__ == "__main__":
    sample = {"Records": [{"Sns": {"Type": "Notification", "Message": "hello"}}]}
    print(handler(sample, None))
