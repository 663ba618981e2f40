"""
Payload ↔ model mapping.

Model authors mark fields with ``Bind`` instead of writing the field-by-field
copy code by hand:

    @deserialize_on_init
    class User(Serializable):
        full_name: Annotated[str, Bind("full_name", deserializable=True)]
        tags: list[Tag] = []

    user = User({"full_name": "Ada Lovelace", "id": 7})
    user.full_name          # 'Ada Lovelace'
    user.serialize()        # {'full_name': 'Ada Lovelace'}

``deserialize`` only copies fields that are bound with ``deserializable=True``
and present in the payload. ``serialize`` writes every attribute set on the
instance under its bound key (or its own name), flattening nested models.
"""

import logging
from typing import Any, Callable, ClassVar, Mapping, Optional, Protocol, TypeVar, runtime_checkable

from .config import SerializableConfig, ValidatorOptions
from .fields import evaluate_lenient, find_bind, own_annotations
from .registry import registry
from .validation import Validator, check

logger = logging.getLogger(__name__)

_T = TypeVar('_T')

@runtime_checkable
class SupportsSerialize(Protocol):
    def serialize(self) -> Any:
        ...

def is_serializable(value: Any) -> bool:
    return isinstance(value, SupportsSerialize) and not isinstance(value, type)

def _bindable_annotations(cls: type) -> dict[str, Any]:
    annotations = {}
    for name, annotation in own_annotations(cls).items():
        try:
            annotations[name] = evaluate_lenient(annotation, cls)
        except (AttributeError, NameError, SyntaxError, TypeError) as e:
            logger.warning(f"Cannot read the annotation of {cls.__qualname__}.{name} ({e}), use {cls.__name__}.bind('{name}', ...)")
    return annotations

def deserialize(instance: _T, payload: Optional[Mapping[str, Any]]) -> _T:
    """Copy auto-populated bound fields out of ``payload`` onto ``instance``.

    Keys missing from the payload leave the field untouched. Values are
    assigned as-is, nested payloads are not turned into models here.
    """
    if not isinstance(payload, Mapping):
        if payload is not None:
            logger.debug(f"Skipping deserialize of {type(instance).__name__}: payload is a {type(payload).__name__}")
        return instance

    for field_name, entry in registry.bindings(type(instance)).items():
        if entry.auto_populate and entry.external_key in payload:
            setattr(instance, field_name, payload[entry.external_key])
    return instance

def _serialize_item(value: Any) -> Any:
    return value.serialize() if is_serializable(value) else value

def _serialize_value(value: Any) -> Any:
    if isinstance(value, list):
        return [_serialize_item(item) for item in value]
    if isinstance(value, tuple):
        return tuple(_serialize_item(item) for item in value)
    return _serialize_item(value)

def serialize(instance: Any) -> dict[str, Any]:
    """Write the instance's own attributes out as a plain dict keyed by external names."""
    model_type = type(instance)
    result: dict[str, Any] = {}
    for field_name, value in vars(instance).items():
        key = registry.lookup_external_key(model_type, field_name) or field_name
        result[key] = _serialize_value(value)
    return result

class _SerializableMeta(type):
    """Registers Bind metadata at class creation and runs the construction hooks."""

    def __init__(cls, name: str, bases: tuple, namespace: dict, **kwargs: Any):
        super().__init__(name, bases, namespace, **kwargs)
        for field_name, annotation in _bindable_annotations(cls).items():
            bind = find_bind(annotation)
            if bind is not None:
                registry.register(cls, field_name, bind.api_key, bind.deserializable)

    def __call__(cls, *args: Any, **kwargs: Any) -> Any:
        instance = super().__call__(*args, **kwargs)
        config: SerializableConfig = cls.serializable_config

        if config.auto_deserialize:
            payload = args[0] if args else kwargs.get('payload')
            deserialize(instance, payload)

        if config.auto_validate:
            error = check(instance, config.validator_options, config.validator)
            if error is not None:
                logger.warning(f"Rejected {cls.__name__}: invalid field(s) {', '.join(error.fields)}")
                raise error

        return instance

class Serializable(metaclass=_SerializableMeta):
    """Base class for models bound to an external payload shape."""

    serializable_config: ClassVar[SerializableConfig] = SerializableConfig()

    def __init__(self, payload: Optional[Mapping[str, Any]] = None):
        pass

    @classmethod
    def bind(cls, field_name: str, api_key: Optional[str] = None, deserializable: bool = False) -> None:
        registry.register(cls, field_name, api_key, deserializable)

    @classmethod
    def construct(cls, *args: Any, **kwargs: Any):
        """Instantiate without running the construction hooks."""
        return type.__call__(cls, *args, **kwargs)

    def deserialize(self, payload: Optional[Mapping[str, Any]]):
        return deserialize(self, payload)

    def serialize(self) -> dict[str, Any]:
        return serialize(self)

    def __repr__(self) -> str:
        fields = ', '.join(f"{name}={value!r}" for name, value in vars(self).items())
        return f"{type(self).__name__}({fields})"

_S = TypeVar('_S', bound=type[Serializable])

def deserialize_on_init(cls: _S) -> _S:
    """Populate new instances from the first constructor argument."""
    cls.serializable_config = cls.serializable_config.model_copy(update={'auto_deserialize': True})
    return cls

def validate_on_init(options: Optional[ValidatorOptions] = None, validator: Optional[Validator] = None) -> Callable[[_S], _S]:
    """Validate new instances after construction, raising ModelValidationError on violations."""
    def decorator(cls: _S) -> _S:
        update: dict[str, Any] = {'auto_validate': True}
        if options is not None:
            update['validator_options'] = options
        if validator is not None:
            update['validator'] = validator
        cls.serializable_config = cls.serializable_config.model_copy(update=update)
        return cls
    return decorator
