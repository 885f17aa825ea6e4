from __future__ import annotations

import logging
import os
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Trustable signing certificate hosts:
#   sns.<region>.amazonaws.com          (AWS)
#   sns.us-gov-west-1.amazonaws.com     (AWS GovCloud)
#   sns.cn-north-1.amazonaws.com.cn     (AWS China)
DEFAULT_HOST_PATTERN = r"^sns\.[a-zA-Z0-9\-]{3,}\.amazonaws\.com(\.cn)?$"


class CertificateConfig(BaseModel):
    """Settings for fetching signing certificates."""

    model_config = ConfigDict(validate_assignment=True)

    host_pattern: str = DEFAULT_HOST_PATTERN
    timeout: Optional[float] = None


class ValidatorConfig(BaseModel):
    """Top-level configuration model."""

    model_config = ConfigDict(validate_assignment=True)

    certificates: CertificateConfig = Field(default_factory=CertificateConfig)
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        value = value.upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"unknown log level {value!r}")
        return value


def load_config(path: Optional[str] = None) -> ValidatorConfig:
    """Load validator settings from YAML, then apply environment overrides.

    The file is ``path``, else the one named by SNSVALIDATOR_CONFIG, else
    'snsvalidator.yaml' in the current directory; a missing file yields the
    defaults. SNSVALIDATOR_CERT_TIMEOUT replaces ``certificates.timeout``
    (seconds) and SNSVALIDATOR_LOG_LEVEL replaces ``log_level``.

    Raises:
        ValueError: if the file or an override holds an invalid value.
    """

    config_path = path or os.getenv("SNSVALIDATOR_CONFIG", "snsvalidator.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = ValidatorConfig(**data)
    else:
        config = ValidatorConfig()

    env_timeout = os.getenv("SNSVALIDATOR_CERT_TIMEOUT")
    if env_timeout:
        config.certificates.timeout = env_timeout
    env_log_level = os.getenv("SNSVALIDATOR_LOG_LEVEL")
    if env_log_level:
        config.log_level = env_log_level
    return config
