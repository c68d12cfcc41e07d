"""
UI feedback utilities for the form builder.
Provides short-lived notifications and the copyable schema panes.
"""

import streamlit as st
from typing import List
import logging

logger = logging.getLogger(__name__)


class Notify:
    """Toast-style notifications for builder actions."""

    _ICONS = {
        'success': '✅',
        'info': 'ℹ️',
        'warning': '⚠️',
        'error': '❌'
    }

    @staticmethod
    def show(message: str, notification_type: str = "info") -> None:
        """Show a toast notification."""
        icon = Notify._ICONS.get(notification_type, Notify._ICONS['info'])
        st.toast(message, icon=icon)
        logger.debug(f"Notification ({notification_type}): {message}")

    @staticmethod
    def success(message: str) -> None:
        Notify.show(message, "success")

    @staticmethod
    def info(message: str) -> None:
        Notify.show(message, "info")


class SchemaPane:
    """Read-only schema text panes."""

    @staticmethod
    def show(title: str, text: str, language: str = "json") -> None:
        """Show serialized schema text with Streamlit's built-in copy button."""
        st.markdown(f"**{title}**")
        st.code(text, language=language)

    @staticmethod
    def show_errors(errors: List) -> None:
        """Show validation error records from the latest preview change."""
        if not errors:
            st.success("✅ Preview data is valid")
            return
        st.warning(f"⚠️ {len(errors)} validation error(s)")
        for record in errors:
            location = record.instance_path or "/"
            st.write(f"• `{location}` {record.message} ({record.keyword})")
