"""
Session state management for the Streamlit form builder.
Owns the form tree and the builder's UI selections for one session.
"""

import streamlit as st
from typing import Dict, Any, Optional
from datetime import datetime
import logging

from .form_models import FormKind, Orientation, ValueType
from .form_tree import FormTree

logger = logging.getLogger(__name__)

# Default values
DEFAULT_FORM_KIND = FormKind.SIMPLE
DEFAULT_ELEMENT_TYPE = ValueType.STRING
DEFAULT_ORIENTATION = Orientation.VERTICAL


class SessionManager:
    """Manages Streamlit session state for the form builder."""

    @staticmethod
    def initialize(default_form_kind: str = DEFAULT_FORM_KIND,
                   default_element_type: str = DEFAULT_ELEMENT_TYPE,
                   default_orientation: str = DEFAULT_ORIENTATION):
        """Initialize all session state variables with default values."""
        defaults = {
            'form_tree': None,
            'selected_form_kind': default_form_kind,
            'selected_element_type': default_element_type,
            'default_orientation': default_orientation,
            'preview_data': {},
            'last_change_event': None,
            'last_activity': datetime.now(),
            'session_id': None,
        }

        for key, default_value in defaults.items():
            if key not in st.session_state:
                st.session_state[key] = default_value

        if st.session_state['form_tree'] is None:
            st.session_state['form_tree'] = SessionManager._new_tree()

        if not st.session_state['session_id']:
            st.session_state['session_id'] = f"session_{datetime.now().strftime('%Y%m%d_%H%M%S')}"

        logger.debug(f"Session initialized: {st.session_state['session_id']}")

    @staticmethod
    def _new_tree() -> FormTree:
        orientation = st.session_state.get('default_orientation', DEFAULT_ORIENTATION)
        if orientation not in Orientation.ALL:
            logger.warning(f"Ignoring unknown default orientation: {orientation}")
            orientation = DEFAULT_ORIENTATION
        return FormTree(default_orientation=orientation)

    @staticmethod
    def get_form_tree() -> FormTree:
        """Get the session's form tree, creating it if needed."""
        tree = st.session_state.get('form_tree')
        if tree is None:
            tree = SessionManager._new_tree()
            st.session_state['form_tree'] = tree
        return tree

    @staticmethod
    def get_selected_form_kind() -> str:
        return st.session_state.get('selected_form_kind', DEFAULT_FORM_KIND)

    @staticmethod
    def set_selected_form_kind(kind: str):
        if kind in FormKind.ALL:
            st.session_state['selected_form_kind'] = kind
        else:
            logger.warning(f"Ignoring unknown form kind selection: {kind}")

    @staticmethod
    def get_selected_element_type() -> str:
        return st.session_state.get('selected_element_type', DEFAULT_ELEMENT_TYPE)

    @staticmethod
    def set_selected_element_type(value_type: str):
        if value_type in ValueType.ALL:
            st.session_state['selected_element_type'] = value_type
        else:
            logger.warning(f"Ignoring unknown element type selection: {value_type}")

    @staticmethod
    def get_preview_data() -> Dict[str, Any]:
        """Get the data entered in the live preview."""
        return st.session_state.get('preview_data', {})

    @staticmethod
    def set_preview_data(data: Dict[str, Any]):
        st.session_state['preview_data'] = data

    @staticmethod
    def record_change_event(event):
        """Store the latest preview change event and its data."""
        st.session_state['last_change_event'] = event
        st.session_state['preview_data'] = event.data
        if event.errors:
            logger.debug(f"Preview change with {len(event.errors)} validation errors")

    @staticmethod
    def get_last_change_event():
        return st.session_state.get('last_change_event')

    @staticmethod
    def update_activity():
        """Update last activity timestamp."""
        st.session_state['last_activity'] = datetime.now()

    @staticmethod
    def get_session_id() -> str:
        return st.session_state.get('session_id', 'unknown')

    @staticmethod
    def reset_session():
        """Discard the form tree and preview state, keeping the selections."""
        logger.info(f"Resetting session: {SessionManager.get_session_id()}")

        form_kind = SessionManager.get_selected_form_kind()
        element_type = SessionManager.get_selected_element_type()
        orientation = st.session_state.get('default_orientation', DEFAULT_ORIENTATION)

        for key in list(st.session_state.keys()):
            del st.session_state[key]

        SessionManager.initialize(form_kind, element_type, orientation)


# Convenience functions for common operations
def get_change_event_errors() -> Optional[list]:
    """Errors of the latest preview change event, if any."""
    event = SessionManager.get_last_change_event()
    return event.errors if event is not None else None
