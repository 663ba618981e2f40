"""
Explicit construction of models from payloads.

``create_from_payload`` is the hook-free alternative to the ``*_on_init``
decorators: it builds the instance, populates it and validates it, and hands
the outcome back as a tagged result instead of raising from a constructor.
It works for any class, ``Serializable`` or not, as long as the class can be
instantiated without arguments.
"""

import logging
from dataclasses import dataclass
from typing import Any, Generic, Mapping, Optional, TypeVar, Union

from .config import ValidatorOptions
from .errors import ModelValidationError
from .model import Serializable, deserialize
from .validation import AsyncValidator, Validator, default_validator

logger = logging.getLogger(__name__)

_T = TypeVar('_T')

@dataclass
class Ok(Generic[_T]):
    value: _T

    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> _T:
        return self.value

@dataclass
class Err:
    error: ModelValidationError

    def is_ok(self) -> bool:
        return False

    def unwrap(self):
        raise self.error

Result = Union[Ok[_T], Err]

def _build(model_type: type[_T], payload: Optional[Mapping[str, Any]]) -> _T:
    if isinstance(model_type, type) and issubclass(model_type, Serializable):
        instance = model_type.construct()
    else:
        instance = model_type()
    return deserialize(instance, payload)

def _result(instance: _T, violations: list) -> Result[_T]:
    if violations:
        error = ModelValidationError(type(instance), violations)
        logger.info(f"{type(instance).__name__} payload rejected: invalid field(s) {', '.join(error.fields)}")
        return Err(error)
    return Ok(instance)

def create_from_payload(model_type: type[_T], payload: Optional[Mapping[str, Any]], *, validator: Optional[Validator] = None, options: Optional[ValidatorOptions] = None) -> Result[_T]:
    instance = _build(model_type, payload)
    validator = validator or default_validator
    return _result(instance, validator.validate(instance, options or ValidatorOptions()))

async def acreate_from_payload(model_type: type[_T], payload: Optional[Mapping[str, Any]], *, validator: Union[Validator, AsyncValidator, None] = None, options: Optional[ValidatorOptions] = None) -> Result[_T]:
    instance = _build(model_type, payload)
    validator = validator or default_validator
    options = options or ValidatorOptions()
    if isinstance(validator, AsyncValidator):
        violations = await validator.avalidate(instance, options)
    else:
        violations = validator.validate(instance, options)
    return _result(instance, violations)
