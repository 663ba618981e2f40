import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

class BindingEntry(BaseModel):
    """ Field name → external payload key, plus the auto-populate flag """
    model_config = ConfigDict(frozen=True)

    field_name: str
    external_key: str
    auto_populate: bool = False

class BindingRegistry:
    """Process-wide binding tables keyed by model type.

    Entries are written while model types are being defined and only read
    afterwards. Lookups walk the MRO so subclasses see their ancestors'
    bindings, most-derived type first.
    """

    def __init__(self):
        self._entries: dict[type, dict[str, BindingEntry]] = {}

    def register(self, model_type: type, field_name: str, external_key: Optional[str] = None, auto_populate: bool = False) -> BindingEntry:
        if not field_name:
            raise ValueError(f"Cannot bind an empty field name on {model_type.__name__}")
        entry = BindingEntry(
            field_name=field_name,
            external_key=external_key or field_name,
            auto_populate=auto_populate,
        )
        self._entries.setdefault(model_type, {})[field_name] = entry
        logger.debug(f"Bound {model_type.__qualname__}.{field_name} to '{entry.external_key}' (auto_populate={auto_populate})")
        return entry

    def entry(self, model_type: type, field_name: str) -> Optional[BindingEntry]:
        for klass in model_type.__mro__:
            own = self._entries.get(klass)
            if own is not None and field_name in own:
                return own[field_name]
        return None

    def lookup_external_key(self, model_type: type, field_name: str) -> Optional[str]:
        entry = self.entry(model_type, field_name)
        return entry.external_key if entry is not None else None

    def is_auto_populate(self, model_type: type, field_name: str) -> bool:
        entry = self.entry(model_type, field_name)
        return entry is not None and entry.auto_populate

    def bindings(self, model_type: type) -> dict[str, BindingEntry]:
        merged: dict[str, BindingEntry] = {}
        for klass in reversed(model_type.__mro__):
            merged.update(self._entries.get(klass, {}))
        return merged

    def __contains__(self, model_type: type) -> bool:
        return any(klass in self._entries for klass in model_type.__mro__)

registry = BindingRegistry()

def register(model_type: type, field_name: str, external_key: Optional[str] = None, auto_populate: bool = False) -> BindingEntry:
    return registry.register(model_type, field_name, external_key, auto_populate)

def lookup_external_key(model_type: type, field_name: str) -> Optional[str]:
    return registry.lookup_external_key(model_type, field_name)

def is_auto_populate(model_type: type, field_name: str) -> bool:
    return registry.is_auto_populate(model_type, field_name)

def bindings(model_type: type) -> dict[str, BindingEntry]:
    return registry.bindings(model_type)
