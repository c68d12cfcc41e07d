"""
Builder view for the form schema builder.
Renders the navigation breadcrumbs, the form cards of the current level and
the inline form / element editors.
"""

import streamlit as st
import logging

from .form_models import ElementNode, FormKind, FormNode, Orientation, ValueType
from .form_tree import FormTree
from .session_manager import SessionManager
from .ui_feedback import Notify

logger = logging.getLogger(__name__)

FORM_KIND_LABELS = {
    FormKind.SIMPLE: "Simple Form",
    FormKind.ARRAY: "Array Form",
    FormKind.GROUP: "Group Form",
}

ELEMENT_TYPE_LABELS = {
    ValueType.STRING: "Text",
    ValueType.NUMBER: "Number",
    ValueType.BOOLEAN: "Checkbox",
    ValueType.DATE: "Date",
    ValueType.OBJECT: "Nested Form",
    ValueType.ARRAY: "List",
}


class BuilderView:
    """Interactive editing panel for the form tree."""

    @staticmethod
    def render() -> None:
        """Render the builder panel for the session's form tree."""
        tree = SessionManager.get_form_tree()

        st.header("Form Builder")
        BuilderView._render_navigation(tree)
        BuilderView._render_add_form(tree)

        forms = tree.current_forms()
        if not forms:
            st.info("No forms at this level yet. Add one above.")
        for form in forms:
            with st.container(border=True):
                BuilderView._render_form_card(tree, form)

    @staticmethod
    def _render_navigation(tree: FormTree) -> None:
        if tree.path.is_root:
            return

        if st.button(f"⬅️ Back to {tree.path.back_label()}", key="nav_back"):
            tree.path.back()
            st.rerun()

        columns = st.columns(len(tree.path) + 1)
        with columns[0]:
            if st.button("Root", key="nav_root"):
                tree.path.reset()
                st.rerun()
        for index, label in enumerate(tree.path.breadcrumbs()):
            with columns[index + 1]:
                if st.button(f"/ {label}", key=f"nav_{index}"):
                    tree.path.jump_to(index)
                    st.rerun()

    @staticmethod
    def _render_add_form(tree: FormTree) -> None:
        tail = tree.path.tail
        if tail is not None and not tail.admits_nested_forms:
            st.caption(f"'{tail.label}' is a simple form; nested forms are shown inside its parent.")
            return

        kinds = list(FormKind.ALL)
        selected = SessionManager.get_selected_form_kind()
        col1, col2 = st.columns([2, 1])
        with col1:
            kind = st.selectbox(
                "Form Type",
                kinds,
                index=kinds.index(selected) if selected in kinds else 0,
                format_func=lambda value: FORM_KIND_LABELS[value],
                key="add_form_kind"
            )
            SessionManager.set_selected_form_kind(kind)
        with col2:
            if st.button("➕ Add Form", type="primary", key="add_form"):
                form = tree.add_form(kind)
                SessionManager.update_activity()
                Notify.success(f"Added {form.label}")
                st.rerun()

    @staticmethod
    def _render_form_card(tree: FormTree, form: FormNode) -> None:
        if tree.is_editing_form(form):
            BuilderView._render_form_editor(tree, tree.editing_form)
            return

        header, actions = st.columns([3, 2])
        with header:
            st.subheader(form.label)
            st.caption(f"{form.kind} · {len(form.elements)} elements · `{form.key}`")
        with actions:
            edit_col, delete_col, open_col = st.columns(3)
            with edit_col:
                if st.button("✏️", key=f"edit_form_{form.key}", help="Edit form"):
                    tree.begin_edit_form(form.key)
                    st.rerun()
            with delete_col:
                if st.button("🗑️", key=f"delete_form_{form.key}", help="Delete form"):
                    tree.delete_form(form.key)
                    Notify.info(f"Deleted {form.label}")
                    st.rerun()
            with open_col:
                if form.admits_nested_forms and st.button("📂", key=f"open_form_{form.key}", help="Open nested forms"):
                    tree.navigate_to(form)
                    st.rerun()

        for element in form.elements:
            BuilderView._render_element_row(tree, form, element)

        types = list(ValueType.ALL)
        selected = SessionManager.get_selected_element_type()
        type_col, add_col = st.columns([2, 1])
        with type_col:
            value_type = st.selectbox(
                "Element Type",
                types,
                index=types.index(selected) if selected in types else 0,
                format_func=lambda value: ELEMENT_TYPE_LABELS[value],
                key=f"element_type_{form.key}"
            )
        with add_col:
            if st.button("➕ Add Element", key=f"add_element_{form.key}"):
                SessionManager.set_selected_element_type(value_type)
                tree.add_element(form, value_type)
                SessionManager.update_activity()
                st.rerun()

    @staticmethod
    def _render_form_editor(tree: FormTree, draft: FormNode) -> None:
        label = st.text_input("Form Label", value=draft.label, key=f"form_label_{draft.key}")
        orientation = draft.orientation
        if draft.kind == FormKind.ARRAY:
            orientations = list(Orientation.ALL)
            orientation = st.selectbox(
                "Layout",
                orientations,
                index=orientations.index(draft.orientation) if draft.orientation in orientations else 0,
                format_func=str.capitalize,
                key=f"form_layout_{draft.key}"
            )

        save_col, cancel_col = st.columns(2)
        with save_col:
            if st.button("💾 Save", type="primary", key=f"save_form_{draft.key}"):
                draft.label = label.strip() or draft.label
                draft.orientation = orientation
                tree.update_form(draft)
                st.rerun()
        with cancel_col:
            if st.button("Cancel", key=f"cancel_form_{draft.key}"):
                tree.cancel_form_edit()
                st.rerun()

    @staticmethod
    def _render_element_row(tree: FormTree, form: FormNode, element: ElementNode) -> None:
        if tree.is_editing_element(element):
            BuilderView._render_element_editor(tree, form, tree.editing_element)
            return

        info_col, edit_col, delete_col = st.columns([4, 1, 1])
        with info_col:
            marker = " *" if element.required else ""
            if element.is_embedding:
                if st.button(f"📁 {element.label}", key=f"enter_{form.key}_{element.key}"):
                    tree.navigate_to(element.embedded_form)
                    st.rerun()
            else:
                st.write(f"{element.label}{marker} · {ELEMENT_TYPE_LABELS.get(element.value_type, element.value_type)}")
        with edit_col:
            if st.button("✏️", key=f"edit_element_{form.key}_{element.key}", help="Edit element"):
                tree.begin_edit_element(form, element.key)
                st.rerun()
        with delete_col:
            if st.button("🗑️", key=f"delete_element_{form.key}_{element.key}", help="Delete element"):
                tree.delete_element(form, element.key)
                st.rerun()

    @staticmethod
    def _render_element_editor(tree: FormTree, form: FormNode, draft: ElementNode) -> None:
        prefix = f"{form.key}_{draft.key}"
        label = st.text_input("Element Label", value=draft.label, key=f"element_label_{prefix}")

        value_type = draft.value_type
        if not draft.is_embedding:
            types = [t for t in ValueType.ALL if t != ValueType.OBJECT]
            value_type = st.selectbox(
                "Type",
                types,
                index=types.index(draft.value_type) if draft.value_type in types else 0,
                format_func=lambda value: ELEMENT_TYPE_LABELS[value],
                key=f"element_type_edit_{prefix}"
            )
        required = st.checkbox("Required", value=draft.required, key=f"element_required_{prefix}")

        save_col, cancel_col = st.columns(2)
        with save_col:
            if st.button("💾 Save", type="primary", key=f"save_element_{prefix}"):
                draft.label = label.strip() or draft.label
                draft.value_type = value_type
                draft.required = required
                tree.update_element(form, draft)
                st.rerun()
        with cancel_col:
            if st.button("Cancel", key=f"cancel_element_{prefix}"):
                tree.cancel_element_edit()
                st.rerun()


def render_builder() -> None:
    """Render the builder panel."""
    BuilderView.render()
