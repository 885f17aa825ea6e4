"""Tests for the SNS error taxonomy."""

import pytest

from snsvalidator.errors import ErrorKind, SNSError


def test_error_carries_kind_and_message():
    err = SNSError(ErrorKind.MISSING_KEY, '"Message" is required in SNS message')

    assert err.kind is ErrorKind.MISSING_KEY
    assert err.message == '"Message" is required in SNS message'
    assert str(err) == '"Message" is required in SNS message'


def test_error_accepts_kind_name():
    err = SNSError("InvalidCert", "Could not decode the certificate")
    assert err.kind is ErrorKind.INVALID_CERT


def test_unknown_kind_is_rejected():
    with pytest.raises(ValueError):
        SNSError("TestError", "This is a test error")


def test_is_kind():
    err = SNSError(ErrorKind.INVALID_TYPE, 'Invalid message type "Foo"')

    assert err.is_kind(ErrorKind.INVALID_TYPE)
    assert err.is_kind("InvalidType")
    assert not err.is_kind(ErrorKind.MISSING_KEY)
    assert not err.is_kind("CustomError")


def test_error_is_an_exception():
    with pytest.raises(SNSError) as excinfo:
        raise SNSError(ErrorKind.INCORRECT_SIGNATURE, "Incorrect signature")
    assert excinfo.value.kind == "IncorrectSignature"


def test_kind_formats_as_its_value():
    assert f"{ErrorKind.MALFORMED_JSON}" == "MalformedJSON"
    assert str(ErrorKind.MISSING_KEY) == "MissingKey"
