"""
Schema derivation entry point and serialized output for the builder.

Every mutation is followed by a full recompute of both schemas; the
results are exposed as pretty-printed text for copying.
"""

import json
import logging
from typing import Any, Dict, Sequence, Tuple

import yaml

from .form_models import FormNode
from .schema_generator import build_json_schema
from .ui_schema_generator import build_ui_schema

logger = logging.getLogger(__name__)

DEFAULT_INDENT = 2


class _NoAliasDumper(yaml.SafeDumper):
    """Safe dumper that writes repeated fragments out in full instead of as aliases."""

    def ignore_aliases(self, data):
        return True


def build_schema_pair(forms: Sequence[FormNode]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Build the structural schema and the UI schema for the root forms.

    Returns:
        Tuple of (schema, ui_schema)
    """
    schema = build_json_schema(forms)
    ui_schema = build_ui_schema(schema, forms)
    return schema, ui_schema


def schema_to_json_text(schema: Dict[str, Any], indent: int = DEFAULT_INDENT) -> str:
    """Serialize a schema as pretty-printed JSON, keeping property order."""
    return json.dumps(schema, indent=indent, ensure_ascii=False)


def schema_to_yaml_text(schema: Dict[str, Any], indent: int = DEFAULT_INDENT) -> str:
    """Serialize a schema as block-style YAML, keeping property order."""
    return yaml.dump(schema, Dumper=_NoAliasDumper, default_flow_style=False,
                     indent=indent, sort_keys=False, allow_unicode=True)


def serialize_schema(schema: Dict[str, Any], fmt: str = 'json', indent: int = DEFAULT_INDENT) -> str:
    """
    Serialize a schema in the requested format.

    Args:
        schema: Schema dictionary
        fmt: ``json`` or ``yaml``; anything else falls back to JSON
        indent: Indentation width
    """
    if fmt == 'yaml':
        return schema_to_yaml_text(schema, indent)
    if fmt != 'json':
        logger.warning(f"Unknown export format '{fmt}', using json")
    return schema_to_json_text(schema, indent)


def export_schemas(forms: Sequence[FormNode], fmt: str = 'json',
                   indent: int = DEFAULT_INDENT) -> Dict[str, str]:
    """
    Build both schemas and serialize them.

    Returns:
        Dictionary with ``schema`` and ``ui_schema`` text
    """
    schema, ui_schema = build_schema_pair(forms)
    return {
        'schema': serialize_schema(schema, fmt, indent),
        'ui_schema': serialize_schema(ui_schema, fmt, indent)
    }
