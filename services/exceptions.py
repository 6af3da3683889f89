"""
Error taxonomy for the payment core.

Every error carries a machine-checkable ``kind`` and a human-readable
``message``; nothing else (no stack traces, no internal identifiers) is
meant to leave the API layer.
"""
from typing import Optional


class PaymentServiceError(Exception):
     """Base class for payment core errors."""

     kind = "payment_error"

     def __init__(self, message: str):
          super().__init__(message)
          self.message = message

     def to_dict(self) -> dict:
          return {"kind": self.kind, "message": self.message}


class ValidationError(PaymentServiceError):
     """Caller mistakes. Surfaced immediately, never retried."""

     kind = "validation_error"


class InvalidFrequency(ValidationError):
     kind = "invalid_frequency"


class InvalidRange(ValidationError):
     kind = "invalid_range"


class InvalidAmount(ValidationError):
     kind = "invalid_amount"


class EmptySelection(ValidationError):
     kind = "empty_selection"


class NotFound(PaymentServiceError):
     """A lease, payment or property referenced by the call does not exist."""

     kind = "not_found"


class LeaseNotFound(NotFound):

     def __init__(self, lease_id):
          super().__init__(f"Lease with ID {lease_id} not found")
          self.lease_id = lease_id


class PaymentNotFound(NotFound):

     def __init__(self, payment_id):
          super().__init__(f"Payment with ID {payment_id} not found")
          self.payment_id = payment_id


class PropertyNotFound(NotFound):

     def __init__(self, property_id):
          super().__init__(f"Property with ID {property_id} not found")
          self.property_id = property_id


class PersistenceError(PaymentServiceError):
     """Wraps a failure of the underlying store (original kept as __cause__)."""

     kind = "persistence_error"


class PartialGenerationError(PersistenceError):
     """
     An insert batch failed after earlier batches were written.

     ``created`` holds the rows that were persisted before the failure.
     Re-running the same generation fills the gap, since already-recorded
     due dates are skipped.
     """

     def __init__(self, message: str, created: Optional[list] = None):
          super().__init__(message)
          self.created = list(created or [])

     def to_dict(self) -> dict:
          body = super().to_dict()
          body["created"] = [payment.model_dump(mode="json") for payment in self.created]
          return body
