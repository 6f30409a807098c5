"""Domain errors raised by services and mapped to HTTP responses by the web app."""

from __future__ import annotations


class FleetDeskError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(FleetDeskError):
    """Missing or malformed input, rejected before any write."""

    status_code = 400

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class NotFoundError(FleetDeskError):
    status_code = 404

    def __init__(self, entity: str, key: object = None) -> None:
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.key = key


class BusinessRuleError(FleetDeskError):
    """Input is well-formed but violates a ledger or workflow rule."""

    status_code = 400
