"""
Typed exception hierarchy for the hub kernel and its report modules.

Every error has a typed class, a machine-readable ``code`` class attribute,
and carries its context as attributes rather than only in the message.

    HubKernelError (base)
    |
    +-- ReportError
    |   +-- InvalidReportParametersError
    |   +-- ReportAuthorizationError
    |
    +-- ConfigurationError

Error codes
-----------
INVALID_REPORT_PARAMETERS   start_at after end_at, malformed ids or dates
REPORT_UNAUTHORIZED         requested enterprise outside caller's permissions
CONFIGURATION_ERROR         report configuration failed validation

Report pipelines only raise these before querying orders.  Once the order
set has been loaded, missing reference data degrades to empty fields and
collaborator failures (database unavailable, ...) propagate unmodified.
"""


class HubKernelError(Exception):
    """
    Base exception for all hub kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "HUB_KERNEL_ERROR"


class ReportError(HubKernelError):
    """Base exception for report generation errors."""

    code: str = "REPORT_ERROR"


class InvalidReportParametersError(ReportError):
    """Report parameters failed validation."""

    code: str = "INVALID_REPORT_PARAMETERS"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid report parameter '{field}': {reason}")


class ReportAuthorizationError(ReportError):
    """
    Caller requested enterprises they do not manage.

    The offending ids are kept as strings so the exception serializes
    cleanly into structured logs.
    """

    code: str = "REPORT_UNAUTHORIZED"

    def __init__(self, field: str, unauthorized_ids: list[str]):
        self.field = field
        self.unauthorized_ids = unauthorized_ids
        super().__init__(
            f"Not authorized to report on {field}: {', '.join(unauthorized_ids)}"
        )


class ConfigurationError(HubKernelError):
    """Report configuration is invalid."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, setting: str, reason: str):
        self.setting = setting
        self.reason = reason
        super().__init__(f"Invalid configuration '{setting}': {reason}")
