"""
Dynamic Pydantic model builder for the form preview.
Creates Pydantic models from the structural schema so preview data can be
validated and reported as change-event error records.
"""

from dataclasses import dataclass, field as dataclass_field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple, Type
from pydantic import BaseModel, ConfigDict, Field, ValidationError, create_model
import logging

logger = logging.getLogger(__name__)

# Pydantic error types that correspond to JSON Schema keywords
_KEYWORD_BY_ERROR_TYPE = {
    'missing': 'required',
    'date_from_datetime_parsing': 'format',
    'date_from_datetime_inexact': 'format',
    'date_parsing': 'format',
    'date_type': 'format',
}


@dataclass
class ValidationErrorRecord:
    """
    One validation error reported with a form change event.

    Attributes:
        instance_path: JSON pointer to the offending data location
        message: Human-readable message
        schema_path: JSON pointer to the violated schema keyword
        keyword: Violated JSON Schema keyword
        params: Keyword-specific parameters
    """
    instance_path: str
    message: str
    schema_path: str
    keyword: str
    params: Dict[str, Any] = dataclass_field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'instance_path': self.instance_path,
            'message': self.message,
            'schema_path': self.schema_path,
            'keyword': self.keyword,
            'params': self.params
        }


def _model_config() -> ConfigDict:
    return ConfigDict(extra='ignore', populate_by_name=True)


def get_field_type(prop: Dict[str, Any], model_name: str = "Nested") -> Any:
    """
    Map a structural schema property to a Python/Pydantic type.

    Args:
        prop: Schema fragment for one property
        model_name: Name used for nested models

    Returns:
        Python type for the property
    """
    prop_type = prop.get('type', 'string')

    if prop_type == 'string':
        if prop.get('format') == 'date':
            return date
        return str

    elif prop_type == 'integer':
        return int

    elif prop_type == 'number':
        return float

    elif prop_type == 'boolean':
        return bool

    elif prop_type == 'array':
        items = prop.get('items') or {'type': 'string'}
        item_type = get_field_type(items, f"{model_name}Item")
        return List[item_type]

    elif prop_type == 'object':
        properties = prop.get('properties')
        if isinstance(properties, dict):
            return create_nested_model(properties, prop.get('required', []), model_name)
        return Dict[str, Any]

    else:
        logger.warning(f"Unknown property type '{prop_type}', defaulting to Any")
        return Any


def create_field_definitions(properties: Dict[str, Any], required: List[str],
                             model_name: str) -> Dict[str, Tuple[Any, Any]]:
    """
    Create pydantic field definitions for a properties map.

    Schema keys are not Python identifiers, so each field gets a positional
    name and the key as its alias.
    """
    required_set = set(required or [])
    definitions: Dict[str, Tuple[Any, Any]] = {}

    for index, (key, prop) in enumerate(properties.items()):
        field_type = get_field_type(prop, f"{model_name}_{index}")
        title = prop.get('title')
        if key in required_set:
            definitions[f"field_{index}"] = (field_type, Field(..., alias=key, title=title))
        else:
            definitions[f"field_{index}"] = (Optional[field_type], Field(default=None, alias=key, title=title))

    return definitions


def create_nested_model(properties: Dict[str, Any], required: List[str],
                        model_name: str) -> Type[BaseModel]:
    """Create a nested Pydantic model for an object property."""
    definitions = create_field_definitions(properties, required, model_name)
    return create_model(model_name, __config__=_model_config(), **definitions)


def create_model_from_schema(schema: Dict[str, Any], model_name: str = "FormDataModel") -> Type[BaseModel]:
    """
    Create a Pydantic model from a structural schema.

    Args:
        schema: Structural schema with a top-level ``properties`` map
        model_name: Name for the generated model class

    Returns:
        Pydantic model class
    """
    properties = schema.get('properties')
    if not isinstance(properties, dict):
        raise ValueError("Schema must contain a 'properties' mapping")

    try:
        model = create_nested_model(properties, schema.get('required', []), model_name)
        logger.info(f"Created dynamic model '{model_name}' with {len(properties)} fields")
        return model
    except Exception as e:
        logger.error(f"Failed to create model '{model_name}': {e}")
        raise


def _schema_pointer(loc: Tuple[Any, ...]) -> str:
    """Schema pointer for a data location (list indices step into ``items``)."""
    parts = ['#']
    for segment in loc:
        if isinstance(segment, int):
            parts.append('items')
        else:
            parts.extend(['properties', str(segment)])
    return '/'.join(parts)


def _instance_pointer(loc: Tuple[Any, ...]) -> str:
    return ''.join(f"/{segment}" for segment in loc)


def _expected_type(schema: Dict[str, Any], loc: Tuple[Any, ...]) -> Optional[str]:
    node: Any = schema
    for segment in loc:
        if not isinstance(node, dict):
            return None
        if isinstance(segment, int):
            node = node.get('items')
        else:
            node = (node.get('properties') or {}).get(segment)
    return node.get('type') if isinstance(node, dict) else None


def error_record_from_pydantic(error: Dict[str, Any], schema: Dict[str, Any]) -> ValidationErrorRecord:
    """
    Convert one pydantic error into a change-event error record.

    Missing fields are reported against the parent object with the
    ``required`` keyword; type and parsing failures with ``type`` or
    ``format``.
    """
    loc = tuple(error.get('loc', ()))
    error_type = error.get('type', '')
    keyword = _KEYWORD_BY_ERROR_TYPE.get(error_type)
    if keyword is None:
        keyword = 'type' if error_type.endswith(('_type', '_parsing')) else error_type

    if keyword == 'required' and loc:
        parent, missing = loc[:-1], loc[-1]
        return ValidationErrorRecord(
            instance_path=_instance_pointer(parent),
            message=f"must have required property '{missing}'",
            schema_path=f"{_schema_pointer(parent)}/required",
            keyword='required',
            params={'missingProperty': str(missing)}
        )

    params: Dict[str, Any] = dict(error.get('ctx') or {})
    if keyword == 'type':
        params.setdefault('type', _expected_type(schema, loc))
    elif keyword == 'format':
        params.setdefault('format', 'date')

    return ValidationErrorRecord(
        instance_path=_instance_pointer(loc),
        message=error.get('msg', ''),
        schema_path=f"{_schema_pointer(loc)}/{keyword}",
        keyword=keyword,
        params={key: value if isinstance(value, (str, int, float, bool, type(None))) else str(value)
                for key, value in params.items()}
    )


def validate_form_data(schema: Dict[str, Any], data: Dict[str, Any],
                       model_class: Optional[Type[BaseModel]] = None) -> List[ValidationErrorRecord]:
    """
    Validate preview data against the structural schema.

    Args:
        schema: Structural schema
        data: Form data
        model_class: Previously built model for the schema, if any

    Returns:
        List of error records (empty when the data is valid)
    """
    if model_class is None:
        model_class = create_model_from_schema(schema)

    try:
        model_class.model_validate(data)
        return []
    except ValidationError as e:
        records = [error_record_from_pydantic(err, schema) for err in e.errors()]
        logger.debug(f"Preview data has {len(records)} validation errors")
        return records
