"""
Typed Exception Hierarchy for the Cashflow Kernel.

Every error has a typed exception class, a machine-readable ``code``
class attribute, and structured attributes carrying its context, so
callers catch by type and read fields instead of parsing messages.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    CashflowError (base)
    |
    +-- FactError
    |   +-- MalformedFactError
    |
    +-- UpstreamError
    |   +-- UpstreamUnavailableError
    |
    +-- ForecastError
    |   +-- InvalidHorizonError
    |
    +-- SettingsError
        +-- InvalidBaselineError
        +-- SettingsNotFoundError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                   | When Raised
----------------|------------------------|------------------------------------
Fact            | MALFORMED_FACT         | Row missing / unparsable field
----------------|------------------------|------------------------------------
Upstream        | UPSTREAM_UNAVAILABLE   | Data store unreachable or erroring
----------------|------------------------|------------------------------------
Forecast        | INVALID_HORIZON        | Horizon negative or above maximum
----------------|------------------------|------------------------------------
Settings        | INVALID_BASELINE       | Starting cash negative / non-finite
                | SETTINGS_NOT_FOUND     | No finance_settings row exists

===============================================================================
HANDLING PATTERNS
===============================================================================

MalformedFactError and UpstreamUnavailableError are raised inside the
read boundary and recovered there: the selector skips the record (or
returns an empty fact set) and logs a warning.  They never reach the
forecast or aging callers.

    try:
        facts.append(coerce_pending_invoice(row))
    except MalformedFactError as e:
        logger.warning("malformed_fact_skipped", extra={"field": e.field})
"""


class CashflowError(Exception):
    """
    Base exception for all cashflow kernel errors.

    All subclasses must have a ``code`` class attribute for
    machine-readable error identification.
    """

    code: str = "CASHFLOW_ERROR"


# Fact-related exceptions


class FactError(CashflowError):
    """Base exception for fact conversion errors."""

    code: str = "FACT_ERROR"


class MalformedFactError(FactError):
    """An upstream row is missing a required field or holds an unusable value."""

    code: str = "MALFORMED_FACT"

    def __init__(self, fact_type: str, field: str, value: object = None):
        self.fact_type = fact_type
        self.field = field
        self.value = value
        super().__init__(
            f"Malformed {fact_type}: field {field!r} has unusable value {value!r}"
        )


# Upstream-related exceptions


class UpstreamError(CashflowError):
    """Base exception for data store errors."""

    code: str = "UPSTREAM_ERROR"


class UpstreamUnavailableError(UpstreamError):
    """The data store could not be reached or returned an error."""

    code: str = "UPSTREAM_UNAVAILABLE"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Upstream source {source} unavailable: {reason}")


# Forecast-related exceptions


class ForecastError(CashflowError):
    """Base exception for forecast errors."""

    code: str = "FORECAST_ERROR"


class InvalidHorizonError(ForecastError):
    """Forecast horizon is negative or exceeds the configured maximum."""

    code: str = "INVALID_HORIZON"

    def __init__(self, horizon_days: int, max_days: int | None = None):
        self.horizon_days = horizon_days
        self.max_days = max_days
        if max_days is not None:
            msg = f"Horizon {horizon_days} outside [0, {max_days}] days"
        else:
            msg = f"Horizon {horizon_days} must be a non-negative integer"
        super().__init__(msg)


# Settings-related exceptions


class SettingsError(CashflowError):
    """Base exception for finance settings errors."""

    code: str = "SETTINGS_ERROR"


class InvalidBaselineError(SettingsError):
    """Starting cash baseline is negative or not a finite number."""

    code: str = "INVALID_BASELINE"

    def __init__(self, value: object, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid starting cash {value!r}: {reason}")


class SettingsNotFoundError(SettingsError):
    """No finance settings row exists to update."""

    code: str = "SETTINGS_NOT_FOUND"

    def __init__(self) -> None:
        super().__init__("No finance settings row found")
