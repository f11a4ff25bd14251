"""Per-record validation rules: hard errors block a record, warnings never do."""

from __future__ import annotations

from ..canonical import ParsedProductRecord
from ..importers.common import is_valid_image_url
from .report import ValidationIssue, ValidationResult

MIN_NAME_LENGTH = 3
MIN_DESCRIPTION_LENGTH = 20
SUGGESTED_PRICE_TOLERANCE = 0.20


def validate_record(
    record: ParsedProductRecord,
    *,
    suggested_price: float | None = None,
) -> ValidationResult:
    issues: list[ValidationIssue] = []

    name = (record.name or "").strip()
    if len(name) < MIN_NAME_LENGTH:
        issues.append(
            ValidationIssue(
                code="invalid_name",
                message=f"Name must be at least {MIN_NAME_LENGTH} characters",
                field="name",
            )
        )

    if not (record.category or "").strip():
        issues.append(ValidationIssue(code="missing_category", message="Category is required", field="category"))

    if not record.price or record.price <= 0:
        issues.append(ValidationIssue(code="invalid_price", message="Invalid price", field="price"))

    if record.stock is not None and record.stock < 0:
        issues.append(ValidationIssue(code="negative_stock", message="Stock cannot be negative", field="stock"))

    description = (record.description or "").strip()
    if len(description) < MIN_DESCRIPTION_LENGTH:
        issues.append(
            ValidationIssue(
                code="short_description",
                message=f"Add a description of at least {MIN_DESCRIPTION_LENGTH} characters",
                severity="warning",
                field="description",
            )
        )

    if not record.primary_image:
        issues.append(
            ValidationIssue(
                code="missing_image",
                message="Add a main image",
                severity="warning",
                field="primary_image",
            )
        )

    for image in [record.primary_image, *(record.secondary_images or [])]:
        if image and not is_valid_image_url(image):
            issues.append(
                ValidationIssue(
                    code="invalid_image_url",
                    message=f"Invalid image URL: {image}",
                    severity="warning",
                    field="images",
                )
            )

    if not record.tags:
        issues.append(
            ValidationIssue(
                code="missing_tags",
                message="Add tags to improve search",
                severity="warning",
                field="tags",
            )
        )

    reference = suggested_price if suggested_price is not None else record.suggested_price
    if reference and reference > 0 and record.price and record.price > 0:
        drift = abs(record.price - reference) / reference
        if drift > SUGGESTED_PRICE_TOLERANCE:
            issues.append(
                ValidationIssue(
                    code="price_drift",
                    message=f"Price differs from the suggested price ({reference:g}) by {drift:.0%}",
                    severity="warning",
                    field="price",
                )
            )

    return ValidationResult(issues=issues)


__all__ = ["validate_record"]
