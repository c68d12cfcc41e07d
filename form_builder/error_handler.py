"""
Error handling utilities for the form builder UI.
Logs failures and shows user-friendly messages with recovery options.
"""

import streamlit as st
import logging
import traceback
from typing import Dict, Any, Optional, Callable, List

from .builder_exceptions import FormBuilderError, ConfigurationLoadError

logger = logging.getLogger(__name__)


class ErrorType:
    """Error type constants."""
    CONFIGURATION = "configuration"
    SCHEMA = "schema"
    PREVIEW = "preview"
    USER_INPUT = "user_input"
    SYSTEM = "system"


class ErrorHandler:
    """Error handling for the form builder UI."""

    @staticmethod
    def handle_error(
        error: Exception,
        context: str,
        error_type: str = ErrorType.SYSTEM,
        user_message: Optional[str] = None,
        recovery_options: Optional[List[Dict[str, Any]]] = None,
        show_details: bool = False
    ) -> None:
        """
        Handle errors with user-friendly messages and recovery options.

        Args:
            error: The exception that occurred
            context: Context where the error occurred
            error_type: Type of error (from ErrorType constants)
            user_message: Custom user-friendly message
            recovery_options: List of recovery actions
            show_details: Whether to show technical details
        """
        logger.error(f"Error in {context}: {str(error)}", exc_info=True)

        if not user_message:
            user_message = ErrorHandler._get_user_friendly_message(error, error_type)

        ErrorHandler._display_error(user_message, error, context, recovery_options, show_details)

    @staticmethod
    def _get_user_friendly_message(error: Exception, error_type: str) -> str:
        """Generate user-friendly error messages based on error type."""
        if isinstance(error, FormBuilderError):
            return f"⚠️ {error.message}"

        error_messages = {
            ErrorType.CONFIGURATION: {
                ConfigurationLoadError: "⚙️ Configuration could not be loaded. Default settings are in use.",
                "default": "⚙️ Configuration error occurred. Please check config.yaml."
            },

            ErrorType.SCHEMA: {
                KeyError: "📋 A form or element referenced by the schema is missing.",
                ValueError: "📋 The schema could not be generated from the current forms.",
                "default": "📋 Schema generation failed. Please review your forms."
            },

            ErrorType.PREVIEW: {
                TypeError: "👁️ Preview data does not match the schema.",
                "default": "👁️ The form preview could not be rendered."
            },

            ErrorType.USER_INPUT: {
                ValueError: "⚠️ Invalid input provided. Please check your data and try again.",
                "default": "⚠️ Input error. Please review your data and try again."
            },

            ErrorType.SYSTEM: {
                MemoryError: "💻 System is running low on memory. Please try again.",
                ImportError: "💻 Required system component is missing.",
                "default": "💻 System error occurred. Please try again."
            }
        }

        error_type_messages = error_messages.get(error_type, error_messages[ErrorType.SYSTEM])

        for exception_type, message in error_type_messages.items():
            if exception_type != "default" and isinstance(error, exception_type):
                return message

        return error_type_messages.get("default", "An unexpected error occurred.")

    @staticmethod
    def _display_error(
        user_message: str,
        error: Exception,
        context: str,
        recovery_options: Optional[List[Dict[str, Any]]] = None,
        show_details: bool = False
    ) -> None:
        """Display error message to user with recovery options."""
        st.error(user_message)

        if recovery_options:
            st.subheader("🔧 Suggested Actions:")

            for i, option in enumerate(recovery_options):
                col1, col2 = st.columns([3, 1])

                with col1:
                    st.write(f"**{option['title']}**")
                    st.write(option['description'])

                with col2:
                    if st.button(option['button_text'], key=f"recovery_{i}"):
                        if 'action' in option and callable(option['action']):
                            try:
                                option['action']()
                            except Exception as e:
                                st.error(f"Recovery action failed: {str(e)}")

        if show_details:
            with st.expander("🔍 Technical Details"):
                st.write(f"**Error Type:** {type(error).__name__}")
                st.write(f"**Context:** {context}")
                st.write(f"**Error Message:** {str(error)}")
                st.code(traceback.format_exc())

    @staticmethod
    def with_error_handling(
        func: Callable,
        context: str,
        error_type: str = ErrorType.SYSTEM,
        user_message: Optional[str] = None,
        recovery_options: Optional[List[Dict[str, Any]]] = None,
        show_details: bool = False,
        default_return: Any = None
    ) -> Any:
        """
        Run an operation, handling any exception it raises.

        Returns:
            Function result or default_return on error
        """
        try:
            return func()
        except Exception as e:
            ErrorHandler.handle_error(
                e, context, error_type, user_message, recovery_options, show_details
            )
            return default_return

    @staticmethod
    def create_recovery_options(context: str) -> List[Dict[str, Any]]:
        """Create context-specific recovery options."""
        from .session_manager import SessionManager

        recovery_options: List[Dict[str, Any]] = []

        if "preview" in context.lower():
            recovery_options.append({
                'title': 'Clear Preview Data',
                'description': 'Discard the data entered in the live preview',
                'button_text': '🧹 Clear',
                'action': lambda: SessionManager.set_preview_data({})
            })

        recovery_options.append({
            'title': 'Start Over',
            'description': 'Discard all forms and start with an empty builder',
            'button_text': '🔄 Restart',
            'action': lambda: SessionManager.reset_session()
        })

        return recovery_options


def handle_error(error: Exception, context: str, error_type: str = ErrorType.SYSTEM) -> None:
    """Convenience function for error handling."""
    ErrorHandler.handle_error(error, context, error_type)


def with_error_handling(func: Callable, context: str, **kwargs) -> Any:
    """Convenience function for error handling wrapper."""
    return ErrorHandler.with_error_handling(func, context, **kwargs)
