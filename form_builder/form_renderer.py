"""
Live form preview for the form schema builder.
Renders Streamlit widgets from a structural schema and its UI schema and
reports the edited data together with validation error records.
"""

import copy
import streamlit as st
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple
import logging

from .model_builder import ValidationErrorRecord, create_model_from_schema, validate_form_data
from .ui_schema_generator import CONTROL, GROUP, HORIZONTAL_LAYOUT, VERTICAL_LAYOUT

logger = logging.getLogger(__name__)


@dataclass
class FormChangeEvent:
    """Data and validation errors emitted after rendering the preview."""
    data: Dict[str, Any]
    errors: List[ValidationErrorRecord] = field(default_factory=list)


def _properties_of(node: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if node.get('type') == 'array':
        return (node.get('items') or {}).get('properties')
    return node.get('properties')


def resolve_scope(schema: Dict[str, Any], scope: str) -> Optional[Tuple[List[str], Dict[str, Any]]]:
    """
    Resolve a ``#/properties/...`` scope against a schema context.

    Args:
        schema: Object (or array-of-objects) schema the scope is relative to
        scope: Scope pointer

    Returns:
        Tuple of (property keys along the pointer, schema of the target), or
        None if the pointer does not resolve
    """
    if not scope.startswith('#/'):
        return None
    parts = scope.split('/')[1:]
    if len(parts) % 2 or any(parts[i] != 'properties' for i in range(0, len(parts), 2)):
        return None

    keys = parts[1::2]
    node = schema
    for key in keys:
        properties = _properties_of(node)
        if not properties or key not in properties:
            return None
        node = properties[key]
    return keys, node


class FormRenderer:
    """Renders a schema / UI schema pair as Streamlit widgets."""

    def __init__(self, schema: Dict[str, Any], ui_schema: Dict[str, Any], key_prefix: str = "preview"):
        self.schema = schema
        self.ui_schema = ui_schema
        self.key_prefix = key_prefix

    def render(self, data: Optional[Dict[str, Any]] = None) -> FormChangeEvent:
        """
        Render the preview and validate the resulting data.

        Args:
            data: Current preview data

        Returns:
            FormChangeEvent with the edited data and validation errors
        """
        form_data = copy.deepcopy(data or {})
        self._render_element(self.ui_schema, self.schema, form_data, ())

        try:
            model_class = create_model_from_schema(self.schema)
            errors = validate_form_data(self.schema, form_data, model_class)
        except Exception as e:
            logger.error(f"Failed to validate preview data: {e}")
            errors = []

        return FormChangeEvent(data=form_data, errors=errors)

    def _widget_key(self, path: Tuple[str, ...]) -> str:
        return "__".join((self.key_prefix,) + path)

    def _render_element(self, element: Dict[str, Any], context: Dict[str, Any],
                        data: Dict[str, Any], path: Tuple[str, ...]) -> None:
        element_type = element.get('type')

        if element_type == VERTICAL_LAYOUT:
            for child in element.get('elements', []):
                self._render_element(child, context, data, path)

        elif element_type == HORIZONTAL_LAYOUT:
            children = element.get('elements', [])
            if not children:
                return
            columns = st.columns(len(children))
            for column, child in zip(columns, children):
                with column:
                    self._render_element(child, context, data, path)

        elif element_type == GROUP:
            with st.container(border=True):
                st.markdown(f"**{element.get('label', '')}**")
                for child in element.get('elements', []):
                    self._render_element(child, context, data, path)

        elif element_type == CONTROL:
            self._render_control(element, context, data, path)

        else:
            logger.warning(f"Unsupported UI schema element type: {element_type}")

    def _render_control(self, element: Dict[str, Any], context: Dict[str, Any],
                        data: Dict[str, Any], path: Tuple[str, ...]) -> None:
        scope = element.get('scope', '')
        resolved = resolve_scope(context, scope)
        if resolved is None:
            logger.debug(f"Scope '{scope}' does not resolve in the current context")
            st.caption(f"Unresolved control: {scope}")
            return

        keys, prop = resolved
        holder = data
        for key in keys[:-1]:
            holder = holder.setdefault(key, {})
        key = keys[-1]
        control_path = path + tuple(keys)
        detail = (element.get('options') or {}).get('detail')
        prop_type = prop.get('type')

        if prop_type == 'array' and isinstance((prop.get('items') or {}).get('properties'), dict):
            holder[key] = self._render_object_array(prop, detail, holder.get(key), control_path)

        elif prop_type == 'object':
            current = holder.get(key)
            sub_data = current if isinstance(current, dict) else {}
            if detail is None:
                detail = {
                    'type': VERTICAL_LAYOUT,
                    'elements': [{'type': CONTROL, 'scope': f"#/properties/{sub_key}"}
                                 for sub_key in prop.get('properties', {})]
                }
            with st.expander(prop.get('title', key), expanded=True):
                self._render_element(detail, prop, sub_data, control_path)
            holder[key] = sub_data

        else:
            value = self._render_scalar(prop, holder.get(key), self._widget_key(control_path))
            if value is None or value == "" or value == []:
                holder.pop(key, None)
            else:
                holder[key] = value

    def _render_object_array(self, prop: Dict[str, Any], detail: Optional[Dict[str, Any]],
                             current: Any, path: Tuple[str, ...]) -> List[Dict[str, Any]]:
        """Render each array item with the detail layout, plus add/remove buttons."""
        items_schema = prop.get('items') or {}
        if detail is None:
            detail = {
                'type': VERTICAL_LAYOUT,
                'elements': [{'type': CONTROL, 'scope': f"#/properties/{sub_key}"}
                             for sub_key in items_schema.get('properties', {})]
            }

        existing = [item for item in (current or []) if isinstance(item, dict)]
        count_key = f"{self._widget_key(path)}__count"
        count = st.session_state.get(count_key, len(existing))

        st.markdown(f"**{prop.get('title', path[-1])}**")
        items: List[Dict[str, Any]] = []
        for index in range(count):
            item = existing[index] if index < len(existing) else {}
            with st.container(border=True):
                st.caption(f"Item {index + 1}")
                self._render_element(detail, items_schema, item, path + (str(index),))
            items.append(item)

        add_col, remove_col = st.columns(2)
        with add_col:
            if st.button("➕ Add item", key=f"{count_key}_add"):
                st.session_state[count_key] = count + 1
                st.rerun()
        with remove_col:
            if st.button("➖ Remove last", key=f"{count_key}_remove", disabled=count == 0):
                st.session_state[count_key] = max(0, count - 1)
                st.rerun()

        return items

    @staticmethod
    def _render_scalar(prop: Dict[str, Any], current: Any, widget_key: str) -> Any:
        """Render the widget for a scalar property (or flat string array)."""
        title = prop.get('title', '')
        prop_type = prop.get('type', 'string')

        if prop_type == 'string' and prop.get('format') == 'date':
            value = None
            if isinstance(current, str):
                try:
                    value = date.fromisoformat(current)
                except ValueError:
                    value = None
            selected = st.date_input(title, value=value, key=widget_key)
            return selected.isoformat() if isinstance(selected, date) else None

        if prop_type == 'string':
            return st.text_input(title, value=current if isinstance(current, str) else "", key=widget_key)

        if prop_type in ('number', 'integer'):
            value = current if isinstance(current, (int, float)) and not isinstance(current, bool) else None
            step = 1 if prop_type == 'integer' else None
            return st.number_input(title, value=value, step=step, key=widget_key)

        if prop_type == 'boolean':
            return st.checkbox(title, value=bool(current), key=widget_key)

        if prop_type == 'array':
            lines = "\n".join(str(item) for item in current) if isinstance(current, list) else ""
            raw = st.text_area(f"{title} (one item per line)", value=lines, key=widget_key)
            return [line.strip() for line in raw.splitlines() if line.strip()]

        st.caption(f"{title}: unsupported type '{prop_type}'")
        return current


def render_preview(schema: Dict[str, Any], ui_schema: Dict[str, Any],
                   data: Optional[Dict[str, Any]] = None) -> FormChangeEvent:
    """Render the preview form for a schema pair."""
    return FormRenderer(schema, ui_schema).render(data)
