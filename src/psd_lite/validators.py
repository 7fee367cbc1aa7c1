"""
Validation functions for attrs.
"""

from typing import Any

from attrs import define

from psd_lite.errors import InvalidFieldError

__all__ = ["in_", "range_"]


@define(repr=False, hash=True)
class _InValidator:
    options: Any

    def __call__(self, inst: Any, attr: Any, value: Any) -> None:
        try:
            in_options = value in self.options
        except TypeError:
            in_options = False

        if not in_options:
            raise InvalidFieldError(
                "'{name}' must be in {options!r} (got {value!r})".format(
                    name=attr.name, options=self.options, value=value
                )
            )

    def __repr__(self) -> str:
        return "<in_ validator with options {options!r}>".format(options=self.options)


@define(repr=False, hash=True)
class _RangeValidator:
    minimum: Any
    maximum: Any

    def __call__(self, inst: Any, attr: Any, value: Any) -> None:
        try:
            in_range = self.minimum <= value and value <= self.maximum
        except TypeError:
            in_range = False

        if not in_range:
            raise InvalidFieldError(
                "'{name}' must be in range [{minimum!r}, {maximum!r}] "
                "(got {value!r})".format(
                    name=attr.name,
                    minimum=self.minimum,
                    maximum=self.maximum,
                    value=value,
                )
            )

    def __repr__(self) -> str:
        return "<range_ validator with [{minimum!r}, {maximum!r}]>".format(
            minimum=self.minimum, maximum=self.maximum
        )


def in_(options: Any) -> _InValidator:
    """
    A validator that raises :py:class:`~psd_lite.errors.InvalidFieldError` if
    the initializer is called with a value that does not belong in the
    options provided. The check is performed using ``value in options``.
    """
    return _InValidator(options)


def range_(minimum: Any, maximum: Any) -> _RangeValidator:
    """
    A validator that raises :py:class:`~psd_lite.errors.InvalidFieldError` if
    the initializer is called with a value that does not belong in the
    [minimum, maximum] range. The check is performed using
    ``minimum <= value and value <= maximum``
    """
    return _RangeValidator(minimum, maximum)
