"""
Unit tests for ui_schema_generator module.
"""

from deepdiff import DeepDiff

from form_builder.form_models import FormKind, ValueType
from form_builder.identity import derive_key
from form_builder.schema_generator import build_json_schema
from form_builder.ui_schema_generator import (
    UiSchemaBuilder,
    build_ui_schema,
    layout_for_orientation,
    normalize_scope,
    property_scope,
)
from test_fixtures import TreeFixtures


def _ui_for(forms):
    return build_ui_schema(build_json_schema(forms), forms)


class TestScopes:
    """Test cases for scope helpers."""

    def test_property_scope(self):
        assert property_scope("a") == "#/properties/a"
        assert property_scope("b", "#/properties/a") == "#/properties/a/properties/b"

    def test_normalize_scope_collapses_deep_pointers(self):
        assert normalize_scope("#/properties/a/properties/b") == "#/properties/b"
        assert normalize_scope("#/properties/a/properties/b/properties/c") == "#/properties/c"

    def test_normalize_scope_keeps_shallow_and_foreign(self):
        assert normalize_scope("#/properties/a") == "#/properties/a"
        assert normalize_scope("#") == "#"

    def test_layout_for_orientation(self):
        assert layout_for_orientation("horizontal") == "HorizontalLayout"
        assert layout_for_orientation("vertical") == "VerticalLayout"
        assert layout_for_orientation(None) == "VerticalLayout"


class TestBuildUiSchema:
    """Test cases for UI schema generation."""

    def test_empty_schema(self):
        assert _ui_for([]) == {'type': 'VerticalLayout', 'elements': []}

    def test_simple_form_uses_detail_control(self):
        form = TreeFixtures.person_form()

        ui_schema = _ui_for([form])

        assert ui_schema['type'] == 'VerticalLayout'
        assert ui_schema['elements'] == [{
            'type': 'Control',
            'scope': f"#/properties/{form.key}",
            'options': {
                'detail': {
                    'type': 'VerticalLayout',
                    'elements': [
                        {'type': 'Control', 'scope': f"#/properties/{derive_key('Name')}"},
                        {'type': 'Control', 'scope': f"#/properties/{derive_key('Birth')}"},
                    ]
                }
            }
        }]

    def test_group_form_exposes_sub_properties(self):
        form = TreeFixtures.form(FormKind.GROUP, "Contact", [
            TreeFixtures.field(ValueType.STRING, "Email"),
        ])
        scope = f"#/properties/{form.key}"

        ui_schema = _ui_for([form])

        assert ui_schema['elements'] == [{
            'type': 'Group',
            'label': "Contact",
            'scope': scope,
            'elements': [
                {'type': 'Control', 'scope': f"{scope}/properties/{derive_key('Email')}"}
            ]
        }]

    def test_array_form_defaults_to_vertical(self):
        form = TreeFixtures.form(FormKind.ARRAY, "Phones", [TreeFixtures.field(ValueType.STRING, "Number")])

        element = _ui_for([form])['elements'][0]

        assert element['scope'] == f"#/properties/{form.key}"
        assert element['options']['detail']['type'] == 'VerticalLayout'
        assert element['options']['detail']['elements'] == [
            {'type': 'Control', 'scope': f"#/properties/{derive_key('Number')}"}
        ]

    def test_array_form_horizontal_orientation(self):
        form = TreeFixtures.form(FormKind.ARRAY, "Phones", [TreeFixtures.field(ValueType.STRING, "Number")],
                                 orientation="horizontal")

        element = _ui_for([form])['elements'][0]

        assert element['options']['detail']['type'] == 'HorizontalLayout'

    def test_nested_form_inside_array_uses_its_own_kind(self):
        root = TreeFixtures.form(FormKind.ARRAY, "Orders")
        TreeFixtures.nest(root, FormKind.SIMPLE, "Item", [TreeFixtures.field(ValueType.STRING, "Sku")])

        detail = _ui_for([root])['elements'][0]['options']['detail']

        nested = detail['elements'][0]
        assert nested['type'] == 'Control'
        assert nested['scope'] == f"#/properties/{derive_key('Item')}"
        assert nested['options']['detail']['elements'] == [
            {'type': 'Control', 'scope': f"#/properties/{derive_key('Sku')}"}
        ]

    def test_string_array_element_is_plain_control(self):
        form = TreeFixtures.form(FormKind.ARRAY, "Posts", [TreeFixtures.field(ValueType.ARRAY, "Tags")])

        detail = _ui_for([form])['elements'][0]['options']['detail']

        assert detail['elements'] == [{'type': 'Control', 'scope': f"#/properties/{derive_key('Tags')}"}]

    def test_object_without_form_uses_generic_detail(self):
        schema = {
            'type': 'object',
            'properties': {
                'loose': {
                    'type': 'object',
                    'properties': {'inner': {'type': 'string'}}
                }
            }
        }

        ui_schema = build_ui_schema(schema, [])

        assert ui_schema['elements'] == [{
            'type': 'Control',
            'scope': "#/properties/loose",
            'options': {
                'detail': {
                    'type': 'VerticalLayout',
                    'elements': [{'type': 'Control', 'scope': "#/properties/inner"}]
                }
            }
        }]

    def test_group_inside_generic_detail_is_scoped_to_the_object(self):
        group = TreeFixtures.form(FormKind.GROUP, "Contact", [TreeFixtures.field(ValueType.STRING, "Email")])
        schema = {
            'type': 'object',
            'properties': {
                'loose': {
                    'type': 'object',
                    'properties': {group.key: build_json_schema([group])['properties'][group.key]}
                }
            }
        }

        detail = build_ui_schema(schema, [group])['elements'][0]['options']['detail']

        assert detail['elements'] == [{
            'type': 'Group',
            'label': "Contact",
            'scope': f"#/properties/{group.key}",
            'elements': [
                {'type': 'Control', 'scope': f"#/properties/{group.key}/properties/{derive_key('Email')}"}
            ]
        }]

    def test_deleting_element_removes_its_control(self, tree):
        form = tree.add_form(FormKind.SIMPLE)
        tree.add_element(form, ValueType.STRING)
        removed = tree.add_element(form, ValueType.NUMBER)
        before = _ui_for(tree.forms)

        tree.delete_element(form, removed.key)
        after = _ui_for(tree.forms)

        diff = DeepDiff(before, after)
        assert list(diff.keys()) == ['iterable_item_removed']
        assert list(diff['iterable_item_removed'].values()) == [
            {'type': 'Control', 'scope': f"#/properties/{removed.key}"}
        ]


class TestLookupForm:
    """Test cases for form lookups by key."""

    def test_context_is_searched_first(self):
        root = TreeFixtures.form(FormKind.GROUP, "Root")
        nested = TreeFixtures.nest(root, FormKind.ARRAY, "Child")

        builder = UiSchemaBuilder([root])

        assert builder.lookup_form(nested.key, root) is nested
        assert builder.lookup_form(root.key) is root

    def test_deep_forms_found_without_context(self):
        root = TreeFixtures.form(FormKind.GROUP, "Root")
        child = TreeFixtures.nest(root, FormKind.GROUP, "Child")
        grandchild = TreeFixtures.nest(child, FormKind.SIMPLE, "Grandchild")

        builder = UiSchemaBuilder([root])

        assert builder.lookup_form(grandchild.key) is grandchild
        assert builder.lookup_form("missing-000000") is None
