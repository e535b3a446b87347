"""Failure taxonomy for calls to the planning service.

None of these escape the public planning entry points; they are raised and
caught inside the request orchestrator so that callers always receive a plan.
"""
from __future__ import annotations


class PlannerError(RuntimeError):
    """Base class for recoverable planning failures."""

    kind = "planner_error"


class ServiceInvocationFailure(PlannerError):
    """The reasoning service call errored, timed out, or returned no content."""

    kind = "service_invocation"


class ResponseParseFailure(PlannerError):
    """The service returned a payload that is not well-formed JSON."""

    kind = "response_parse"


class SchemaValidationFailure(PlannerError):
    """The payload parsed but does not conform to the output contract."""

    kind = "schema_validation"
