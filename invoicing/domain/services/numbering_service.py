"""Numbering service for generating sequential invoice numbers."""

from typing import Optional

from invoicing.domain.models.base import ValidationError
from invoicing.domain.models.value_objects import InvoiceNumber


DEFAULT_START_NUMBER = 1000


class NumberingService:
    """
    Domain service for invoice numbering.
    Numbers are per user, in the form INV-<n>, and start at INV-1000.
    """

    def __init__(self, start_number: int = DEFAULT_START_NUMBER):
        if start_number <= 0:
            raise ValidationError("Start number must be positive", "start_number")
        self.start_number = start_number

    def next_invoice_number(self, last_number: Optional[InvoiceNumber]) -> InvoiceNumber:
        """
        Generate the number following the user's highest issued number.
        """
        if last_number is None or last_number.sequence < self.start_number:
            return InvoiceNumber.from_sequence(self.start_number)
        return last_number.next()
