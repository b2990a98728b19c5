# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""Argument precondition checks shared by the API clients."""

from __future__ import annotations

import math
from typing import Any

from ._error_codes import (
    VALIDATION_EMPTY_ARGUMENT,
    VALIDATION_MISSING_ARGUMENT,
    VALIDATION_NEGATIVE_TIMEOUT,
    VALIDATION_NON_POSITIVE_TIMEOUT,
)
from .errors import ValidationError


def _require_text(**values: Any) -> None:
    """Raise :class:`ValidationError` for the first argument that is ``None`` or an empty string."""
    for name, value in values.items():
        if not isinstance(value, str) or not value:
            raise ValidationError(
                f"{name} must be a non-empty string.",
                subcode=VALIDATION_EMPTY_ARGUMENT,
                details={"argument": name},
            )


def _require_present(**values: Any) -> None:
    for name, value in values.items():
        if value is None:
            raise ValidationError(
                f"{name} is required.",
                subcode=VALIDATION_MISSING_ARGUMENT,
                details={"argument": name},
            )


def _is_finite_number(value: Any) -> bool:
    return not isinstance(value, bool) and isinstance(value, (int, float)) and math.isfinite(value)


def _require_positive_timeout(timeout_millis: Any) -> None:
    if not _is_finite_number(timeout_millis) or timeout_millis <= 0:
        raise ValidationError(
            f"timeout_millis must be a positive finite number, got {timeout_millis!r}.",
            subcode=VALIDATION_NON_POSITIVE_TIMEOUT,
        )


def _require_non_negative_timeout(timeout_millis: Any) -> None:
    if not _is_finite_number(timeout_millis) or timeout_millis < 0:
        raise ValidationError(
            f"timeout_millis must be a finite number that is not negative, got {timeout_millis!r}.",
            subcode=VALIDATION_NEGATIVE_TIMEOUT,
        )
