"""Model override configuration.

The override file is YAML or JSON with camelCase keys. Only the ignore
sets and `modelStringPatternsAreAlternativeList` affect the model built
here; the remaining settings are carried for code emitters.
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field

from api_service_model.entities.model import OperationInputDescription, OperationOutputDescription

logger = logging.getLogger(__name__)


class EnumerationNaming(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # enumerations whose cases are given in upper camel case rather than upper snake case
    using_upper_camel_case: set[str] | None = Field(default=None, alias="usingUpperCamelCase")


class RawTypeOverride(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type_name: str = Field(alias="typeName")
    default_value: str = Field(alias="defaultValue")


class ModelOverride(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    match_case: set[str] | None = Field(default=None, alias="matchCase")
    enumerations: EnumerationNaming | None = None
    field_raw_type_override: dict[str, RawTypeOverride] | None = Field(
        default=None, alias="fieldRawTypeOverride"
    )
    named_field_values_override: dict[str, str] | None = Field(
        default=None, alias="namedFieldValuesOverride"
    )
    operation_input_overrides: dict[str, OperationInputDescription] | None = Field(
        default=None, alias="operationInputOverrides"
    )
    operation_output_overrides: dict[str, OperationOutputDescription] | None = Field(
        default=None, alias="operationOutputOverrides"
    )
    # string patterns of the form "^{option_1}|{option_2}$" are a list of allowed values
    model_string_patterns_are_alternative_list: bool = Field(
        default=False, alias="modelStringPatternsAreAlternativeList"
    )
    coding_key_overrides: dict[str, str] | None = Field(default=None, alias="codingKeyOverrides")
    required_overrides: dict[str, bool] | None = Field(default=None, alias="requiredOverrides")
    additional_errors: set[str] | None = Field(default=None, alias="additionalErrors")
    ignore_operations: set[str] | None = Field(default=None, alias="ignoreOperations")
    ignore_response_headers: set[str] | None = Field(default=None, alias="ignoreResponseHeaders")
    ignore_request_headers: set[str] | None = Field(default=None, alias="ignoreRequestHeaders")
    default_enumeration_value_override: dict[str, str] | None = Field(
        default=None, alias="defaultEnumerationValueOverride"
    )

    def get_coding_key_override(self, attribute_name: str, in_type: str | None = None) -> str | None:
        """Coding key for an attribute, given as "*.{attribute}" or "{type}.{attribute}"."""
        return _lookup_attribute(self.coding_key_overrides, attribute_name, in_type)

    def get_is_required_override(self, attribute_name: str, in_type: str | None = None) -> bool | None:
        """Optionality for an attribute, given as "*.{attribute}" or "{type}.{attribute}"."""
        return _lookup_attribute(self.required_overrides, attribute_name, in_type)


def _lookup_attribute(overrides: dict | None, attribute_name: str, in_type: str | None):
    if not overrides:
        return None
    if f"*.{attribute_name}" in overrides:
        return overrides[f"*.{attribute_name}"]
    if in_type is not None:
        return overrides.get(f"{in_type}.{attribute_name}")
    return None


def load_override(file_path: Path) -> ModelOverride:
    """Read a YAML or JSON override file."""
    text = file_path.read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    override = ModelOverride.model_validate(data)
    logger.debug("Loaded model override from %s", file_path)
    return override
