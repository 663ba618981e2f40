from typing import Iterable, TYPE_CHECKING

if TYPE_CHECKING:
    from .validation import Violation

def format_violations(violations: Iterable["Violation"]) -> str:
    lines = []
    for violation in violations:
        for message in violation.messages.values():
            lines.append(f"{message}: but got a {violation.value}")
    return "\n".join(lines)

class ModelValidationError(ValueError):
    """Raised when a constructed model breaks its declared constraints."""

    def __init__(self, model_type: type, violations: list["Violation"]):
        self.model_type = model_type
        self.violations = violations
        super().__init__(f"Model property incomparable: \n{format_violations(violations)}")

    @property
    def fields(self) -> list[str]:
        return [violation.field for violation in self.violations]
