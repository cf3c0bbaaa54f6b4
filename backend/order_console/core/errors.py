"""Order Console: error taxonomy shared by the client, services and endpoints."""


class OrderConsoleError(Exception):
    """Base class. `message` is always safe to show to the operator."""

    code = "ORDER_CONSOLE_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(OrderConsoleError, ValueError):
    """User input rejected before any network call."""

    code = "VALIDATION_ERROR"


class TransportError(OrderConsoleError):
    """Non-success HTTP status or network failure talking to the DM API."""

    code = "TRANSPORT_ERROR"

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ParseError(OrderConsoleError):
    """Response body could not be decoded into the expected shape."""

    code = "PARSE_ERROR"


class PartialEnrichmentFailure(OrderConsoleError):
    """One row could not be enriched. Never aborts sibling rows."""

    code = "PARTIAL_ENRICHMENT_FAILURE"

    def __init__(self, order_no: str, message: str):
        super().__init__(message)
        self.order_no = order_no


class WorkflowRejection(OrderConsoleError, ValueError):
    """Business-rule refusal, e.g. completing an order in the wrong status."""

    code = "WORKFLOW_REJECTION"
