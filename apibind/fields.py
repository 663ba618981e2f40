import builtins
import inspect
import sys
from typing import Any, ForwardRef, Optional, get_args, get_origin, get_type_hints, Annotated

class Bind:
    """ Hold the external key and auto-populate flag of one model field """
    def __init__(self, api_key: Optional[str] = None, deserializable: bool = False):
        self.api_key = api_key
        self.deserializable = deserializable

    def __repr__(self) -> str:
        return f"Bind(api_key={self.api_key!r}, deserializable={self.deserializable!r})"

def find_bind(annotation: Any) -> Optional[Bind]:
    """Return the last Bind in an Annotated[...] annotation, if any."""
    if get_origin(annotation) is not Annotated:
        return None
    found = None
    for meta in get_args(annotation)[1:]:
        if isinstance(meta, Bind):
            found = meta
    return found

def has_constraints(annotation: Any) -> bool:
    """True when an Annotated[...] carries metadata other than Bind."""
    if get_origin(annotation) is not Annotated:
        return False
    return any(not isinstance(meta, Bind) for meta in get_args(annotation)[1:])

if sys.version_info >= (3, 14):
    from annotationlib import Format, get_annotations

    def own_annotations(cls: type) -> dict[str, Any]:
        return dict(get_annotations(cls, format=Format.FORWARDREF))
else:
    def own_annotations(cls: type) -> dict[str, Any]:
        return dict(inspect.get_annotations(cls))

def _module_namespace(owner: type) -> dict[str, Any]:
    return getattr(sys.modules.get(owner.__module__), '__dict__', {})

class _ForwardRefNamespace(dict):
    """ Name lookup that turns names not defined yet into ForwardRefs """
    def __init__(self, globalns: dict[str, Any], localns: dict[str, Any]):
        super().__init__(localns)
        self.globalns = globalns

    def __missing__(self, name: str) -> Any:
        if name in self.globalns:
            return self.globalns[name]
        if hasattr(builtins, name):
            return getattr(builtins, name)
        return ForwardRef(name)

def evaluate_lenient(annotation: Any, owner: type) -> Any:
    """Evaluate a postponed annotation of ``owner``, keeping unknown names as ForwardRefs.

    Enough to read Bind metadata while the class (or a class it refers to)
    is still being defined.
    """
    if not isinstance(annotation, str):
        return annotation
    globalns = _module_namespace(owner)
    return eval(annotation, globalns, _ForwardRefNamespace(globalns, {owner.__name__: owner}))

def resolve_annotation(owner: type, name: str, annotation: Any) -> Any:
    """Fully resolve one field annotation of ``owner``, raising NameError on unknown names."""
    holder = type(owner.__name__, (), {'__annotations__': {name: annotation}, '__module__': owner.__module__})
    return get_type_hints(holder, localns={owner.__name__: owner}, include_extras=True)[name]
