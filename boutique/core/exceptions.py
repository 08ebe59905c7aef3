from decimal import Decimal


class BoutiqueError(Exception):
    """Base class for errors reported back to whoever started the operation."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": type(self).__name__, "message": self.message}


class ProductNotFound(BoutiqueError):
    status_code = 404

    def __init__(self, product: str):
        super().__init__(f"Product '{product}' not found")
        self.product = product


class InsufficientStock(BoutiqueError):
    status_code = 409

    def __init__(self, product_name: str, requested: int, available: int):
        super().__init__(f"Not enough stock! Only {available} left.")
        self.product_name = product_name
        self.requested = requested
        self.available = available

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update(requested=self.requested, available=self.available)
        return data


class InsufficientBalance(BoutiqueError):
    status_code = 409

    def __init__(self, requested: Decimal, available: Decimal):
        super().__init__("Insufficient profit balance!")
        self.requested = requested
        self.available = available

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update(requested=str(self.requested), available=str(self.available))
        return data


class ImportFailed(BoutiqueError):
    status_code = 400

    def __init__(self, reason: str):
        super().__init__("The backup file is corrupted or invalid.")
        self.reason = reason

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["details"] = self.reason
        return data


class StoreUnavailable(BoutiqueError):
    status_code = 503

    def __init__(self, message: str = "Record store is unreachable"):
        super().__init__(message)
