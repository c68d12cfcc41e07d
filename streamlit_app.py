"""
Main Streamlit application for the JSON Forms schema builder.
Builds forms visually and derives a JSON Schema plus a UI schema from them.
"""

import streamlit as st
import logging

from form_builder.config_loader import get_config_value, get_config, validate_config


def get_logging_level(level_str):
    """Map string logging level to logging constant."""
    level_map = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'ERROR': logging.ERROR,
        'CRITICAL': logging.CRITICAL
    }
    return level_map.get(str(level_str).upper(), logging.INFO)


# Configure logging dynamically from config
try:
    log_level_str = get_config_value('logging', 'level', 'INFO')
    logging.basicConfig(level=get_logging_level(log_level_str))
    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured to level: {log_level_str}")
except Exception as e:
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger(__name__)
    logger.error(f"Failed to configure logging from config: {e}, using INFO level")

page_title = get_config_value('ui', 'page_title', 'Form Builder')

st.set_page_config(
    page_title=page_title,
    page_icon="🧩",
    layout="wide"
)


def main():
    """Main application entry point."""
    from form_builder.builder_view import render_builder
    from form_builder.error_handler import ErrorHandler, ErrorType
    from form_builder.session_manager import SessionManager

    try:
        config = get_config()
        if not validate_config(config):
            st.warning("⚠️ config.yaml has invalid values; some defaults may be used.")

        SessionManager.initialize(
            get_config_value('builder', 'default_form_kind'),
            get_config_value('builder', 'default_element_type'),
            get_config_value('builder', 'default_orientation')
        )
    except Exception as e:
        ErrorHandler.handle_error(
            e,
            "application startup",
            ErrorType.CONFIGURATION,
            recovery_options=ErrorHandler.create_recovery_options("startup")
        )
        return

    builder_col, preview_col = st.columns(2, gap="large")

    with builder_col:
        ErrorHandler.with_error_handling(render_builder, "builder panel", ErrorType.USER_INPUT)

    with preview_col:
        ErrorHandler.with_error_handling(
            render_preview_panel,
            "preview panel",
            ErrorType.PREVIEW,
            recovery_options=ErrorHandler.create_recovery_options("preview")
        )


def render_preview_panel():
    """Render the live form preview and the serialized schema panes."""
    from form_builder.form_renderer import render_preview
    from form_builder.schema_export import build_schema_pair, serialize_schema
    from form_builder.session_manager import SessionManager, get_change_event_errors
    from form_builder.ui_feedback import SchemaPane

    tree = SessionManager.get_form_tree()
    schema, ui_schema = build_schema_pair(tree.forms)

    export_format = get_config_value('export', 'format', 'json')
    indent = int(get_config_value('export', 'indent', 2))

    st.header(get_config_value('ui', 'sidebar_title', 'Schema Preview'))
    form_tab, schema_tab, ui_schema_tab = st.tabs(["Form Preview", "JSON Schema", "UI Schema"])

    with form_tab:
        if not tree.forms:
            st.info("Add a form to see the preview.")
        else:
            event = render_preview(schema, ui_schema, SessionManager.get_preview_data())
            SessionManager.record_change_event(event)
            SchemaPane.show_errors(get_change_event_errors() or [])

    with schema_tab:
        SchemaPane.show("JSON Schema", serialize_schema(schema, export_format, indent), export_format)

    with ui_schema_tab:
        SchemaPane.show("UI Schema", serialize_schema(ui_schema, export_format, indent), export_format)


if __name__ == "__main__":
    main()
