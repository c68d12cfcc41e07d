"""
Unit tests for name_generator module.
"""

from unittest.mock import patch

from unique_names_generator.data import ADJECTIVES, COLORS

from form_builder.identity import derive_key
from form_builder.name_generator import (
    generate_base_name,
    generate_element_name,
    get_type_label,
)


class TestTypeLabel:
    """Test cases for get_type_label function."""

    def test_form_kinds_share_form_label(self):
        assert get_type_label("simple") == "Form"
        assert get_type_label("array") == "Form"
        assert get_type_label("group") == "Form"

    def test_value_types_are_capitalized(self):
        assert get_type_label("string") == "String"
        assert get_type_label("date") == "Date"
        assert get_type_label("object") == "Object"


class TestGenerateNames:
    """Test cases for name generation."""

    def test_base_name_uses_adjective_and_color_dictionaries(self):
        with patch("form_builder.name_generator.get_random_name", return_value="Brave Amber") as mock_name:
            assert generate_base_name() == "Brave Amber"

        mock_name.assert_called_once_with(combo=[ADJECTIVES, COLORS], separator=" ", style="capital")

    def test_base_name_is_capitalized(self):
        name = generate_base_name()
        assert name
        assert all(word[:1].isupper() for word in name.split(" "))

    def test_generate_element_name_label_and_key(self):
        with patch("form_builder.name_generator.get_random_name", return_value="Brave Amber"):
            label, key = generate_element_name("number")

        assert label == "Brave Amber Number"
        assert key == derive_key(label)

    def test_generate_element_name_for_form(self):
        with patch("form_builder.name_generator.get_random_name", return_value="Quiet Teal"):
            label, key = generate_element_name("array")

        assert label == "Quiet Teal Form"
        assert key.startswith("quiet-teal-form-")

    def test_generated_key_matches_label(self):
        label, key = generate_element_name("string")
        assert label.endswith(" String")
        assert key == derive_key(label)
