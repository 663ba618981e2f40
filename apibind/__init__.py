from .registry import BindingEntry, BindingRegistry, registry, register, lookup_external_key, is_auto_populate, bindings
from .fields import Bind
from .config import SerializableConfig, ValidatorOptions
from .errors import ModelValidationError, format_violations
from .validation import Violation, Validator, AsyncValidator, PydanticValidator, validate
from .model import Serializable, SupportsSerialize, is_serializable, deserialize, serialize, deserialize_on_init, validate_on_init
from .factory import Ok, Err, Result, create_from_payload, acreate_from_payload

__all__ = [
    "BindingEntry",
    "BindingRegistry",
    "registry",
    "register",
    "lookup_external_key",
    "is_auto_populate",
    "bindings",
    "Bind",
    "SerializableConfig",
    "ValidatorOptions",
    "ModelValidationError",
    "format_violations",
    "Violation",
    "Validator",
    "AsyncValidator",
    "PydanticValidator",
    "validate",
    "Serializable",
    "SupportsSerialize",
    "is_serializable",
    "deserialize",
    "serialize",
    "deserialize_on_init",
    "validate_on_init",
    "Ok",
    "Err",
    "Result",
    "create_from_payload",
    "acreate_from_payload",
]
