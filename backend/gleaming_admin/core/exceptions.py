"""
Domain exceptions raised by services and repositories.

Routers translate these into HTTP responses; anything else bubbles up as a 500.
"""


class GleamingAdminError(Exception):
    """Base class for all application errors"""


class NotFoundError(GleamingAdminError):
    """A requested document does not exist"""


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class OrderNotFoundError(NotFoundError):
    def __init__(self, user_id: str, order_id: str):
        self.user_id = user_id
        self.order_id = order_id
        super().__init__("Order does not exist!")


class CustomerNotFoundError(NotFoundError):
    def __init__(self, customer_id: str):
        self.customer_id = customer_id
        super().__init__(f"Customer {customer_id} not found")


class EmptyInvoiceError(GleamingAdminError):
    def __init__(self):
        super().__init__("This order does not have any items to include in the invoice.")


class InvalidUploadError(GleamingAdminError):
    """Bulk upload file could not be read"""


class TransactionConflictError(GleamingAdminError):
    """A transaction kept conflicting with concurrent writers and gave up"""

    def __init__(self, attempts: int, last_error: Exception):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Transaction failed after {attempts} attempts: {last_error}")
