"""
Constraint checking for populated model instances.

The mapping layer only depends on the ``Validator`` contract: given an
instance, return the list of per-field violations. ``PydanticValidator`` is
the default collaborator; it reads the constraints model authors put in their
field annotations, the same metadata pydantic models use:

    class User(Serializable):
        age: Annotated[int, Field(ge=0), Bind(deserializable=True)]

Only fields whose annotation carries constraint metadata are required.
Other annotated fields are type-checked when the instance has a value for
them and skipped when it does not. Annotations that cannot be resolved are
left out of validation with a warning.
"""

import logging
from typing import Any, ClassVar, Optional, Protocol, get_origin, runtime_checkable

from pydantic import BaseModel, ConfigDict, ValidationError, create_model

from .config import ValidatorOptions
from .errors import ModelValidationError
from .fields import has_constraints, own_annotations, resolve_annotation

logger = logging.getLogger(__name__)

class Violation(BaseModel):
    field: str
    value: Any = None
    messages: dict[str, str] = {}

@runtime_checkable
class Validator(Protocol):
    def validate(self, instance: Any, options: ValidatorOptions) -> list[Violation]:
        ...

@runtime_checkable
class AsyncValidator(Protocol):
    async def avalidate(self, instance: Any, options: ValidatorOptions) -> list[Violation]:
        ...

_MISSING = object()

def _constraint_fields(model_type: type) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for klass in reversed(model_type.__mro__):
        for name, annotation in own_annotations(klass).items():
            if name.startswith('_'):
                continue
            fields.pop(name, None)
            try:
                hint = resolve_annotation(klass, name, annotation)
            except (AttributeError, NameError, SyntaxError, TypeError) as e:
                logger.warning(f"Not validating {model_type.__name__}.{name}: cannot resolve its annotation ({e})")
                continue
            if hint is ClassVar or get_origin(hint) is ClassVar:
                continue
            fields[name] = hint
    return fields

def _message_key(error: dict[str, Any]) -> str:
    rest = error['loc'][1:]
    if not rest:
        return error['type']
    return f"{error['type']}[{'.'.join(str(part) for part in rest)}]"

class PydanticValidator:
    """Validate instances against a pydantic model built from their annotations."""

    def __init__(self):
        self._models: dict[type, type[BaseModel]] = {}

    def constraints_model(self, model_type: type) -> type[BaseModel]:
        model = self._models.get(model_type)
        if model is None:
            fields = {
                name: (annotation, ... if has_constraints(annotation) else None)
                for name, annotation in _constraint_fields(model_type).items()
            }
            model = create_model(
                f"{model_type.__name__}Constraints",
                __config__=ConfigDict(arbitrary_types_allowed=True, protected_namespaces=()),
                **fields,
            )
            self._models[model_type] = model
        return model

    def validate(self, instance: Any, options: Optional[ValidatorOptions] = None) -> list[Violation]:
        options = options or ValidatorOptions()
        model = self.constraints_model(type(instance))

        values = {}
        for name in model.model_fields:
            value = getattr(instance, name, _MISSING)
            if value is not _MISSING:
                values[name] = value

        try:
            model.model_validate(values, strict=options.strict)
        except ValidationError as e:
            return self._violations(instance, e, options)
        return []

    def _violations(self, instance: Any, error: ValidationError, options: ValidatorOptions) -> list[Violation]:
        grouped: dict[str, Violation] = {}
        for item in error.errors(include_url=False):
            if not item['loc']:
                continue
            field = str(item['loc'][0])
            value = getattr(instance, field, None)
            if options.skip_missing_properties and (item['type'] == 'missing' or value is None):
                continue
            violation = grouped.setdefault(field, Violation(field=field, value=value, messages={}))
            violation.messages[_message_key(item)] = item['msg']
        logger.debug(f"{type(instance).__name__} failed {len(grouped)} field constraint(s)")
        return list(grouped.values())

default_validator = PydanticValidator()

def validate(instance: Any, options: Optional[ValidatorOptions] = None, validator: Optional[Validator] = None) -> list[Violation]:
    validator = validator or default_validator
    return validator.validate(instance, options or ValidatorOptions())

def check(instance: Any, options: Optional[ValidatorOptions] = None, validator: Optional[Validator] = None) -> Optional[ModelValidationError]:
    """Validate and wrap any violations into a single error, or return None."""
    violations = validate(instance, options, validator)
    if not violations:
        return None
    return ModelValidationError(type(instance), violations)
