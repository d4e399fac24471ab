class BrandReviewError(Exception):
    """Base error for the brand review backend."""


class BrandNotFoundError(BrandReviewError):
    def __init__(self, brand_id: str):
        super().__init__(f"Brand rules not found: {brand_id}")
        self.brand_id = brand_id


class FoundryAgentError(BrandReviewError):
    """Raised when the hosted model call fails. The message is user-facing."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
