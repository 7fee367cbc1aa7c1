import pytest

from psd_lite.errors import (
    InvalidFieldError,
    MagicMismatchError,
    PSDError,
    SizeInvariantError,
    TruncatedDataError,
    UnimplementedOperationError,
    UnsupportedFeatureError,
)


@pytest.mark.parametrize(
    "kind",
    [
        MagicMismatchError,
        UnsupportedFeatureError,
        SizeInvariantError,
        TruncatedDataError,
        InvalidFieldError,
        UnimplementedOperationError,
    ],
)
def test_error_hierarchy(kind: type) -> None:
    assert issubclass(kind, PSDError)
    assert issubclass(kind, ValueError)


def test_error_builtin_bases() -> None:
    assert issubclass(TruncatedDataError, EOFError)
    assert issubclass(UnimplementedOperationError, NotImplementedError)


@pytest.mark.parametrize(
    "kwargs, expected",
    [
        ({}, "broken"),
        ({"offset": 12}, "broken (offset=12)"),
        ({"stage": "header"}, "broken (stage=header)"),
        ({"offset": 0, "stage": "header"}, "broken (stage=header, offset=0)"),
    ],
)
def test_error_str(kwargs: dict, expected: str) -> None:
    error = PSDError("broken", **kwargs)
    assert str(error) == expected
    assert error.message == "broken"
