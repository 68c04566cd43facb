"""
External service clients
"""

from .ticket_print_service import PrintOutcome, TicketPrintService, validate_print_data

__all__ = ["PrintOutcome", "TicketPrintService", "validate_print_data"]
