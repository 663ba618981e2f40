from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

class ValidatorOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    strict: bool = False
    skip_missing_properties: bool = False

class SerializableConfig(BaseModel):
    """ Per-model construction behaviour, inherited by subclasses """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    auto_deserialize: bool = False
    auto_validate: bool = False
    validator_options: ValidatorOptions = Field(default_factory=ValidatorOptions)
    # None selects the default PydanticValidator
    validator: Optional[Any] = None
