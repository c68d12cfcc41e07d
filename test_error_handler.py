"""
Unit tests for error_handler module.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

import form_builder.error_handler as error_handler
import form_builder.session_manager as session_manager
from form_builder.builder_exceptions import ConfigurationLoadError, InvalidFormKindError
from form_builder.error_handler import ErrorHandler, ErrorType, handle_error, with_error_handling
from test_fixtures import DummyContext, FakeSessionState


@pytest.fixture
def st(monkeypatch):
    def _columns(spec, **_kwargs):
        count = spec if isinstance(spec, int) else len(spec)
        return tuple(DummyContext() for _ in range(count))

    fake = SimpleNamespace(
        session_state=FakeSessionState(),
        error=MagicMock(),
        subheader=MagicMock(),
        columns=MagicMock(side_effect=_columns),
        write=MagicMock(),
        button=MagicMock(return_value=False),
        expander=MagicMock(return_value=DummyContext()),
        code=MagicMock(),
    )
    monkeypatch.setattr(error_handler, "st", fake)
    monkeypatch.setattr(session_manager, "st", fake)
    return fake


class TestUserFriendlyMessages:
    """Test class for message selection."""

    def test_builder_errors_use_their_message(self):
        error = InvalidFormKindError("table", ("simple", "array", "group"))
        message = ErrorHandler._get_user_friendly_message(error, ErrorType.USER_INPUT)
        assert "table" in message
        assert "form kind" in message

    def test_configuration_load_error(self):
        error = ConfigurationLoadError("config.yaml", ValueError("bad"))
        message = ErrorHandler._get_user_friendly_message(error, ErrorType.CONFIGURATION)
        assert "config.yaml" in message

    def test_schema_messages(self):
        message = ErrorHandler._get_user_friendly_message(KeyError("x"), ErrorType.SCHEMA)
        assert "missing" in message.lower()
        message = ErrorHandler._get_user_friendly_message(RuntimeError("x"), ErrorType.SCHEMA)
        assert "schema generation failed" in message.lower()

    def test_preview_messages(self):
        message = ErrorHandler._get_user_friendly_message(TypeError("x"), ErrorType.PREVIEW)
        assert "does not match" in message.lower()

    def test_unknown_error_type_uses_system_messages(self):
        message = ErrorHandler._get_user_friendly_message(RuntimeError("x"), "unknown")
        assert "system error" in message.lower()


class TestHandleError:
    """Test class for error display."""

    def test_handle_error_displays_message(self, st):
        handle_error(ValueError("boom"), "testing", ErrorType.USER_INPUT)

        st.error.assert_called_once()
        assert "invalid input" in st.error.call_args[0][0].lower()

    def test_custom_user_message(self, st):
        ErrorHandler.handle_error(ValueError("boom"), "testing", user_message="Custom")
        st.error.assert_called_once_with("Custom")

    def test_recovery_action_runs_on_click(self, st):
        action = MagicMock()
        st.button.return_value = True

        ErrorHandler.handle_error(RuntimeError("boom"), "testing", recovery_options=[{
            'title': 'Retry',
            'description': 'Try again',
            'button_text': 'Retry',
            'action': action
        }])

        action.assert_called_once()

    def test_failed_recovery_action_is_reported(self, st):
        st.button.return_value = True

        ErrorHandler.handle_error(RuntimeError("boom"), "testing", recovery_options=[{
            'title': 'Retry',
            'description': 'Try again',
            'button_text': 'Retry',
            'action': MagicMock(side_effect=RuntimeError("still broken"))
        }])

        messages = [call[0][0] for call in st.error.call_args_list]
        assert any("Recovery action failed" in message for message in messages)

    def test_show_details(self, st):
        ErrorHandler.handle_error(RuntimeError("boom"), "testing", show_details=True)
        st.expander.assert_called_once()
        st.code.assert_called_once()


class TestWithErrorHandling:
    """Test class for the error handling wrapper."""

    def test_returns_function_result(self, st):
        assert with_error_handling(lambda: 42, "testing") == 42
        st.error.assert_not_called()

    def test_returns_default_on_error(self, st):
        def failing():
            raise ValueError("boom")

        result = ErrorHandler.with_error_handling(failing, "testing", default_return="fallback")

        assert result == "fallback"
        st.error.assert_called_once()


class TestRecoveryOptions:
    """Test class for recovery options."""

    def test_preview_context_offers_clear(self, st):
        options = ErrorHandler.create_recovery_options("preview")
        titles = [option['title'] for option in options]
        assert titles == ['Clear Preview Data', 'Start Over']

    def test_other_context_offers_restart_only(self, st):
        options = ErrorHandler.create_recovery_options("startup")
        assert [option['title'] for option in options] == ['Start Over']

    def test_clear_preview_action(self, st):
        st.session_state['preview_data'] = {'a': 1}
        options = ErrorHandler.create_recovery_options("preview")

        options[0]['action']()

        assert st.session_state['preview_data'] == {}

    def test_start_over_action(self, st):
        with patch.object(session_manager.SessionManager, "reset_session") as mock_reset:
            ErrorHandler.create_recovery_options("builder")[0]['action']()
        mock_reset.assert_called_once()
