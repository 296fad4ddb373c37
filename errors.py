from typing import Iterable, List, Optional


class ChipApiError(Exception):
    """Base class for every error raised by the lookup core."""

    kind = "ChipApiError"

    @property
    def message(self) -> str:
        return str(self)


class ConfigurationError(ChipApiError):
    kind = "ConfigurationError"


class ApiError(ChipApiError):
    """One or more error objects reported by the API, aggregated."""

    kind = "ApiError"

    def __init__(self, errors: Iterable):
        self.errors: List = list(errors)
        lines = [f"{getattr(e, 'title', '')}: {getattr(e, 'detail', '')}" for e in self.errors]
        super().__init__("\n".join(lines))


class NotFoundError(ChipApiError):
    kind = "NotFoundError"

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"No product identified for code: {code}")


class NoOffersError(ChipApiError):
    kind = "NoOffersError"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"No offers identified for product: {product_id}")


class TransportError(ChipApiError):
    kind = "TransportError"

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
