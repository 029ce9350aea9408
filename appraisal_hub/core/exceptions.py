from typing import Any, Dict, List, Optional

class AppException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)

class AppraisalValidationError(AppException):
    """Blocking user-facing validation failure (bad input, missing required answers)."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=400,
            error_code="VALIDATION_FAILED",
            details=details
        )

class TemplateWeightError(AppException):
    def __init__(self, total: float, expected: float = 100.0):
        difference = round(total - expected, 4)
        if difference < 0:
            message = f"Total weight is {total:.2f}%. It is {abs(difference):.2f}% short of {expected:.0f}%."
        else:
            message = f"Total weight is {total:.2f}%. It exceeds {expected:.0f}% by {difference:.2f}%."
        super().__init__(
            message=message,
            status_code=400,
            error_code="TEMPLATE_WEIGHT_INVALID",
            details={"total_weight": total, "expected": expected, "difference": difference}
        )

class MissingTemplateMappingError(AppException):
    def __init__(self, categories: List[str], labels: Optional[List[str]] = None):
        self.categories = categories
        super().__init__(
            message=f"Select a template for: {', '.join(labels or categories)}",
            status_code=400,
            error_code="TEMPLATE_MAPPING_MISSING",
            details={"categories": categories}
        )

class NotFoundError(AppException):
    def __init__(self, entity: str, entity_id: Any):
        super().__init__(
            message=f"{entity} not found",
            status_code=404,
            error_code="NOT_FOUND",
            details={"entity": entity, "id": entity_id}
        )

class ConflictError(AppException):
    def __init__(self, message: str, error_code: str = "CONFLICT", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=409,
            error_code=error_code,
            details=details
        )

class LinkAlreadyUsedError(ConflictError):
    def __init__(self):
        super().__init__(
            message="This appraisal link has already been used.",
            error_code="LINK_USED"
        )

class LinkExpiredError(AppException):
    def __init__(self):
        super().__init__(
            message="This appraisal link has expired.",
            status_code=410,
            error_code="LINK_EXPIRED"
        )

class FeatureDisabledError(AppException):
    def __init__(self, feature: str):
        super().__init__(
            message=f"{feature} is disabled on this deployment.",
            status_code=503,
            error_code="FEATURE_DISABLED"
        )
