"""
Custom exceptions for the Talya POS engine
"""


class TalyaPosError(Exception):
    """Base exception for the POS engine"""

    def __init__(self, message: str, user_message: str = None, error_code: str = None):
        super().__init__(message)
        self.user_message = user_message or "An error occurred. Please try again."
        self.error_code = error_code or "GENERAL_ERROR"


class DatabaseError(TalyaPosError):
    """Order store unavailable or failing"""

    def __init__(self, message: str, operation: str = None):
        super().__init__(
            message,
            "The order store is unavailable right now. Please try again in a moment.",
            "DATABASE_ERROR",
        )
        self.operation = operation


class ValidationError(TalyaPosError):
    """User-correctable input errors"""

    def __init__(self, message: str, field: str = None):
        super().__init__(
            message, message, "VALIDATION_ERROR"  # Validation errors are user-friendly
        )
        self.field = field


class BusinessLogicError(TalyaPosError):
    """Business rule violations"""

    def __init__(self, message: str, user_message: str = None, error_code: str = None):
        super().__init__(message, user_message or message, error_code or "BUSINESS_ERROR")


class PrintError(TalyaPosError):
    """Ticket printer integration failure"""

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(
            message,
            "The ticket could not be printed.",
            "PRINT_ERROR",
        )
        self.attempts = attempts


class EmptyCartError(ValidationError):
    """Cart is empty when the operation requires items"""

    def __init__(self):
        super().__init__("The cart is empty. Add at least one item first.", "lines")


class MissingDestinationError(ValidationError):
    """Dine-in order without a table, or takeaway order without a client number"""

    def __init__(self, field: str):
        if field == "table_number":
            message = "A table number is required for dine-in orders."
        else:
            message = "A client number is required for takeaway orders."
        super().__init__(message, field)


class WizardStepInvalidError(ValidationError):
    """Current wizard step does not satisfy its cardinality rules"""

    def __init__(self, step_label: str, hint: str = None):
        message = f"Step '{step_label}' is incomplete."
        if hint:
            message = f"{message} {hint}."
        super().__init__(message, "selections")


class PortionNotOfferedError(ValidationError):
    """Portion variant not offered for the item's category"""

    def __init__(self, item_name: str, portion: str):
        super().__init__(
            f"Portion '{portion}' is not offered for {item_name}.", "portion_type"
        )


class InvalidPriceError(ValidationError):
    """Negative unit price on a cart line"""

    def __init__(self, item_name: str, price):
        super().__init__(f"Price {price} for {item_name} cannot be negative.", "unit_price")
        self.price = price


class ComposedMenuRequiresWizardError(BusinessLogicError):
    """Composed menus must be configured through the selection wizard"""

    def __init__(self, item_name: str):
        super().__init__(
            f"Composed menu cannot be added directly: {item_name}",
            f"{item_name} is a composed menu. Please choose its options first.",
            "COMPOSED_MENU",
        )
        self.item_name = item_name


class InvalidStatusTransitionError(BusinessLogicError):
    """Transition outside the lifecycle allow-list"""

    def __init__(self, order_id: str, current_status: str, new_status: str):
        super().__init__(
            f"Invalid status transition for order {order_id}: {current_status} → {new_status}",
            "This status change is not authorized.",
            "INVALID_TRANSITION",
        )
        self.current_status = current_status
        self.new_status = new_status


class CancellationReasonRequiredError(BusinessLogicError):
    """Cancelling an order requires a non-blank reason"""

    def __init__(self, order_id: str):
        super().__init__(
            f"Cancellation reason missing for order {order_id}",
            "Please give a reason for cancelling this order.",
            "CANCELLATION_REASON_REQUIRED",
        )


class OrderNotFoundError(BusinessLogicError):
    """Order not found"""

    def __init__(self, order_id: str):
        super().__init__(
            f"Order not found: {order_id}",
            f"Order {order_id} not found.",
            "ORDER_NOT_FOUND",
        )


class ConcurrentOrderUpdateError(BusinessLogicError):
    """Order changed status between read and write"""

    def __init__(self, order_id: str, expected_status: str):
        super().__init__(
            f"Order {order_id} is no longer {expected_status}",
            "This order was updated by someone else. Please refresh and try again.",
            "CONCURRENT_UPDATE",
        )
        self.expected_status = expected_status


def validate_and_raise(condition: bool, error_class: type, *args, **kwargs):
    """Helper function to validate condition and raise specific error"""
    if not condition:
        raise error_class(*args, **kwargs)
