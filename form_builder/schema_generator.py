"""
Structural (JSON Schema) generation for the form tree.

Walks forms strictly downward through ``embedded_form`` references; the
weak ``parent`` link is only consulted to decide which forms are roots.
"""

import logging
from typing import Any, Dict, Optional, Sequence

from .form_models import ElementNode, FormKind, FormNode, ValueType
from .identity import PATH_SEPARATOR

logger = logging.getLogger(__name__)

SchemaFragment = Dict[str, Any]


def build_element_schema(element: ElementNode,
                         cache: Optional[Dict[int, SchemaFragment]] = None,
                         _ancestors: Optional[set] = None) -> SchemaFragment:
    """
    Convert one element into a schema fragment.

    ``object`` elements recurse into their embedded form; ``array``
    elements are flat string arrays; ``date`` becomes a string with the
    ``date`` format.
    """
    if element.is_embedding:
        return build_form_schema(element.embedded_form, cache, _ancestors)

    if element.value_type == ValueType.ARRAY:
        return {
            'type': 'array',
            'title': element.label,
            'items': {'type': 'string'}
        }

    if element.value_type == ValueType.DATE:
        return {
            'type': 'string',
            'format': 'date',
            'title': element.label
        }

    if element.value_type == ValueType.OBJECT:
        # object element without a nested form
        return {'type': 'object', 'title': element.label, 'properties': {}}

    return {
        'type': element.value_type,
        'title': element.label
    }


def build_properties(elements: Sequence[ElementNode],
                     cache: Optional[Dict[int, SchemaFragment]] = None,
                     _ancestors: Optional[set] = None) -> Dict[str, SchemaFragment]:
    """Map element keys to their schema fragments, preserving element order."""
    properties: Dict[str, SchemaFragment] = {}
    for element in elements:
        properties[element.key] = build_element_schema(element, cache, _ancestors)
    return properties


def build_form_schema(form: FormNode,
                      cache: Optional[Dict[int, SchemaFragment]] = None,
                      _ancestors: Optional[set] = None) -> SchemaFragment:
    """
    Convert a form and its elements into a schema fragment.

    Args:
        form: Form to convert
        cache: Optional per-build cache of fragments keyed by form identity

    Returns:
        ``{type: object, ...}`` for simple and group forms,
        ``{type: array, items: {type: object, ...}}`` for array forms
    """
    if cache is not None and id(form) in cache:
        return cache[id(form)]

    ancestors = set(_ancestors or ())
    if id(form) in ancestors:
        logger.warning(f"Cycle detected at form '{form.key}', skipping nested schema")
        return {'type': 'object', 'title': form.label, 'properties': {}}
    ancestors.add(id(form))

    properties = build_properties(form.elements, cache, ancestors)
    required = form.required_keys()

    if form.kind in (FormKind.SIMPLE, FormKind.GROUP):
        fragment: SchemaFragment = {
            'type': 'object',
            'title': form.label,
            'properties': properties
        }
        if required:
            fragment['required'] = required
    elif form.kind == FormKind.ARRAY:
        items: SchemaFragment = {
            'type': 'object',
            'properties': properties
        }
        if required:
            items['required'] = required
        fragment = {
            'type': 'array',
            'title': form.label,
            'items': items
        }
    else:
        logger.warning(f"Unknown form kind '{form.kind}' for form '{form.key}'")
        fragment = {'type': 'object', 'properties': {}}

    if cache is not None:
        cache[id(form)] = fragment
    return fragment


def _child_properties(fragment: Optional[SchemaFragment]) -> Optional[Dict[str, SchemaFragment]]:
    """Properties map of an object fragment, or of an array fragment's items."""
    if not fragment:
        return None
    if fragment.get('type') == 'array':
        items = fragment.get('items') or {}
        return items.get('properties')
    return fragment.get('properties')


def insert_at_path(properties: Dict[str, SchemaFragment], parent_path: str,
                   key: str, fragment: SchemaFragment) -> bool:
    """
    Insert a fragment under the form addressed by a dotted ancestor path.

    Args:
        properties: Top-level properties of the schema being built
        parent_path: Dotted keys from the root form down to the parent form
        key: Property name for the fragment
        fragment: Schema fragment to insert

    Returns:
        True if the path resolved and the fragment was inserted
    """
    current = properties
    for part in parent_path.split(PATH_SEPARATOR):
        container = _child_properties(current.get(part))
        if container is None:
            logger.debug(f"Schema path '{parent_path}' did not resolve at '{part}'")
            return False
        current = container
    current[key] = fragment
    return True


def build_json_schema(root_forms: Sequence[FormNode]) -> Dict[str, Any]:
    """
    Build the complete structural schema for the root forms.

    Only parentless forms seed generation. Every reachable form contributes
    exactly once, tracked by a processed set of keys. The root ``required``
    list holds root forms that have at least one required element.

    Args:
        root_forms: Root forms in display order

    Returns:
        ``{type: object, properties, required}``
    """
    schema: Dict[str, Any] = {
        'type': 'object',
        'properties': {},
        'required': []
    }
    processed = set()
    cache: Dict[int, SchemaFragment] = {}

    def process_form(form: FormNode, parent_path: Optional[str] = None) -> None:
        if form.key in processed:
            return
        # nested forms are only handled in their parent's context
        if form.parent is not None and not parent_path:
            return

        fragment = build_form_schema(form, cache)

        if parent_path:
            insert_at_path(schema['properties'], parent_path, form.key, fragment)
        else:
            schema['properties'][form.key] = fragment
            if any(element.required for element in form.elements):
                schema['required'].append(form.key)

        processed.add(form.key)

        child_path = f"{parent_path}{PATH_SEPARATOR}{form.key}" if parent_path else form.key
        for nested in form.nested_forms():
            process_form(nested, child_path)

    for form in root_forms:
        if form.parent is None:
            process_form(form)

    logger.debug(f"Built structural schema with {len(processed)} forms")
    return schema
