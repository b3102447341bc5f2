"""
Declarative validation rules for inbound product payloads.

Each rule is a (field, predicate, message) triple evaluated against a parsed
``Product``. All failing rules are reported, not only the first one.
"""

from datetime import datetime
from typing import Callable, Dict, List, NamedTuple, Optional

from ..core.exceptions import ProductValidationError
from ..schemas.product import Product

NAME_MAX_LENGTH = 100
MIN_YEAR = 1900


class ValidationRule(NamedTuple):
    field: str
    predicate: Callable[[Product], bool]
    message: str


class ProductValidator:
    """Validates create/update payloads before any upstream call"""

    def __init__(self, current_year: Optional[Callable[[], int]] = None):
        self._current_year = current_year or (lambda: datetime.now().year)
        self.rules: List[ValidationRule] = [
            ValidationRule(
                "name",
                lambda p: bool(p.name and p.name.strip()),
                "Product name is required",
            ),
            ValidationRule(
                "name",
                lambda p: len(p.name) <= NAME_MAX_LENGTH,
                f"Name cannot exceed {NAME_MAX_LENGTH} characters",
            ),
            ValidationRule(
                "data.year",
                lambda p: p.data.year > MIN_YEAR,
                f"Year must be after {MIN_YEAR}",
            ),
            ValidationRule(
                "data.year",
                lambda p: p.data.year <= self._current_year(),
                "Year cannot be in the future",
            ),
            ValidationRule(
                "data.price",
                lambda p: p.data.price > 0,
                "Price must be greater than 0",
            ),
        ]

    def validate(self, product: Product) -> List[Dict[str, str]]:
        """Return one error entry per failing rule, empty when valid"""
        return [
            {"field": rule.field, "message": rule.message}
            for rule in self.rules
            if not rule.predicate(product)
        ]

    def ensure_valid(self, product: Product) -> None:
        errors = self.validate(product)
        if errors:
            raise ProductValidationError(errors)
