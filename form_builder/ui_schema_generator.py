"""
Presentation (JSON Forms UI schema) generation.

Mirrors the already-built structural schema one property at a time. The
container chosen for a nested object or array depends on the kind of the
form that produced it, looked up by key in the form tree:

    simple form   -> one Control whose detail is a vertical list of controls
    group form    -> a labelled Group exposing each sub-property directly
    no form       -> generic Control with a vertical detail layout
    array         -> Control whose detail layout follows the form orientation
    scalar        -> plain Control
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from .form_models import FormKind, FormNode, Orientation

logger = logging.getLogger(__name__)

CONTROL = "Control"
GROUP = "Group"
VERTICAL_LAYOUT = "VerticalLayout"
HORIZONTAL_LAYOUT = "HorizontalLayout"

SCOPE_ROOT = "#"
SCOPE_PREFIX = "#/properties/"

UiElement = Dict[str, Any]


def normalize_scope(scope: str) -> str:
    """
    Collapse a deep scope pointer to its leaf property.

    ``#/properties/a/properties/b`` becomes ``#/properties/b``; scopes that
    already address a single property, or are not property pointers, are
    returned unchanged.
    """
    if not scope.startswith(SCOPE_PREFIX):
        return scope
    parts = scope.split("/")
    if len(parts) > 3:
        return f"{SCOPE_PREFIX}{parts[-1]}"
    return scope


def property_scope(key: str, base: Optional[str] = None) -> str:
    """Scope pointer for a property, optionally below a parent scope."""
    return f"{base or SCOPE_ROOT}/properties/{key}"


def control(scope: str) -> UiElement:
    return {'type': CONTROL, 'scope': normalize_scope(scope)}


def detail_control(scope: str, elements: List[UiElement], layout: str = VERTICAL_LAYOUT) -> UiElement:
    """A control that expands into a nested detail layout."""
    return {
        'type': CONTROL,
        'scope': normalize_scope(scope),
        'options': {
            'detail': {
                'type': layout,
                'elements': elements
            }
        }
    }


def layout_for_orientation(orientation: Optional[str]) -> str:
    if orientation == Orientation.HORIZONTAL:
        return HORIZONTAL_LAYOUT
    return VERTICAL_LAYOUT


class UiSchemaBuilder:
    """
    Builds the UI schema for a structural schema.

    Args:
        forms: Root forms of the tree, used for kind lookups by key
    """

    def __init__(self, forms: Sequence[FormNode]):
        self.forms = list(forms)

    def lookup_form(self, key: str, context: Optional[FormNode] = None) -> Optional[FormNode]:
        """
        Find the form that produced a property.

        Searches the nested forms of the context form, then the roots, then
        the whole tree.
        """
        if context is not None:
            for form in context.nested_forms():
                if form.key == key:
                    return form
        for form in self.forms:
            if form.key == key:
                return form
        for root in self.forms:
            for form in root.iter_descendants():
                if form.key == key:
                    return form
        return None

    def build(self, schema: Dict[str, Any]) -> UiElement:
        """Build the root vertical layout, one entry per top-level property."""
        elements = [
            self.build_property(key, prop)
            for key, prop in (schema.get('properties') or {}).items()
        ]
        return {
            'type': VERTICAL_LAYOUT,
            'elements': elements
        }

    def build_property(self, key: str, prop: Dict[str, Any],
                       context: Optional[FormNode] = None) -> UiElement:
        """
        Build the entry for one property.

        Scopes are relative to the object the entry is rendered against: the
        root schema at the top level, otherwise the object or array item
        that owns the enclosing detail layout.
        """
        scope = property_scope(key)
        form = self.lookup_form(key, context)
        prop_type = prop.get('type')

        if prop_type == 'array':
            item_properties = (prop.get('items') or {}).get('properties')
            if isinstance(item_properties, dict):
                return self.build_array(scope, item_properties, form)
            return control(scope)

        if prop_type == 'object' and isinstance(prop.get('properties'), dict):
            properties = prop['properties']
            if form is not None and form.kind == FormKind.SIMPLE:
                return self.build_simple(scope, properties)
            if form is not None and form.kind == FormKind.GROUP:
                return self.build_group(scope, properties, form)
            return self.build_generic(scope, properties, form)

        return control(scope)

    def build_array(self, scope: str, item_properties: Dict[str, Any],
                    form: Optional[FormNode]) -> UiElement:
        """Array of objects: detail layout oriented like the owning form."""
        elements = [
            self.build_property(item_key, item_prop, form)
            for item_key, item_prop in item_properties.items()
        ]
        orientation = form.orientation if form is not None else None
        return detail_control(scope, elements, layout_for_orientation(orientation))

    def build_simple(self, scope: str, properties: Dict[str, Any]) -> UiElement:
        """Simple form: one clickable control hiding its sub-properties."""
        elements = [control(property_scope(sub_key)) for sub_key in properties]
        return detail_control(scope, elements)

    def build_group(self, scope: str, properties: Dict[str, Any], form: FormNode) -> UiElement:
        """Group form: labelled group exposing each sub-property directly."""
        return {
            'type': GROUP,
            'label': form.label,
            'scope': scope,
            'elements': [
                {'type': CONTROL, 'scope': property_scope(sub_key, scope)}
                for sub_key in properties
            ]
        }

    def build_generic(self, scope: str, properties: Dict[str, Any],
                      form: Optional[FormNode]) -> UiElement:
        """Object without a matching form: generic vertical detail wrapper.

        The detail layout is rendered against this object, so entries are
        scoped relative to it.
        """
        if form is None:
            logger.debug(f"No form found for '{scope}', using generic detail layout")
        elements = [
            self.build_property(sub_key, sub_prop, form)
            for sub_key, sub_prop in properties.items()
        ]
        return detail_control(scope, elements)


def build_ui_schema(schema: Dict[str, Any], forms: Sequence[FormNode]) -> UiElement:
    """
    Build the UI schema for a structural schema.

    Args:
        schema: Structural schema produced by ``build_json_schema``
        forms: Root forms of the tree

    Returns:
        Root ``VerticalLayout`` element
    """
    ui_schema = UiSchemaBuilder(forms).build(schema)
    logger.debug(f"Built UI schema with {len(ui_schema['elements'])} top-level elements")
    return ui_schema
