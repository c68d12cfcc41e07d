"""
Unit tests for schema_generator module.
"""

from form_builder.form_models import FormKind, ValueType
from form_builder.identity import derive_key
from form_builder.schema_generator import (
    build_element_schema,
    build_form_schema,
    build_json_schema,
    insert_at_path,
)
from test_fixtures import TreeFixtures, schema_properties


class TestBuildElementSchema:
    """Test cases for element fragments."""

    def test_scalar_types(self):
        for value_type in (ValueType.STRING, ValueType.NUMBER, ValueType.BOOLEAN):
            element = TreeFixtures.field(value_type, "Field")
            assert build_element_schema(element) == {'type': value_type, 'title': "Field"}

    def test_date_is_formatted_string(self):
        element = TreeFixtures.field(ValueType.DATE, "Birth")
        assert build_element_schema(element) == {'type': 'string', 'format': 'date', 'title': "Birth"}

    def test_array_is_string_array(self):
        element = TreeFixtures.field(ValueType.ARRAY, "Tags")
        assert build_element_schema(element) == {
            'type': 'array',
            'title': "Tags",
            'items': {'type': 'string'}
        }

    def test_object_element_without_form(self):
        element = TreeFixtures.field(ValueType.OBJECT, "Loose")
        assert build_element_schema(element) == {'type': 'object', 'title': "Loose", 'properties': {}}


class TestBuildFormSchema:
    """Test cases for form fragments."""

    def test_simple_form(self):
        form = TreeFixtures.person_form()
        name_key = derive_key("Name")
        birth_key = derive_key("Birth")

        assert build_form_schema(form) == {
            'type': 'object',
            'title': "Person",
            'properties': {
                name_key: {'type': 'string', 'title': "Name"},
                birth_key: {'type': 'string', 'format': 'date', 'title': "Birth"},
            },
            'required': [name_key]
        }

    def test_required_omitted_when_empty(self):
        form = TreeFixtures.form(FormKind.GROUP, "Notes", [TreeFixtures.field(ValueType.STRING, "Text")])
        assert 'required' not in build_form_schema(form)

    def test_array_form_wraps_items(self):
        form = TreeFixtures.form(FormKind.ARRAY, "Phones", [
            TreeFixtures.field(ValueType.STRING, "Number", required=True),
        ])
        fragment = build_form_schema(form)

        assert fragment['type'] == 'array'
        assert fragment['title'] == "Phones"
        assert fragment['items']['type'] == 'object'
        assert fragment['items']['required'] == [derive_key("Number")]
        assert list(fragment['items']['properties']) == [derive_key("Number")]

    def test_nested_form_is_embedded(self):
        parent = TreeFixtures.form(FormKind.GROUP, "Customer")
        TreeFixtures.nest(parent, FormKind.SIMPLE, "Address", [TreeFixtures.field(ValueType.STRING, "Street")])

        fragment = build_form_schema(parent)

        address = fragment['properties'][derive_key("Address")]
        assert address['title'] == "Address"
        assert derive_key("Street") in address['properties']

    def test_element_order_is_preserved(self):
        labels = ["Zeta", "Alpha", "Mid"]
        form = TreeFixtures.form(FormKind.SIMPLE, "Ordered",
                                 [TreeFixtures.field(ValueType.STRING, label) for label in labels])
        assert list(build_form_schema(form)['properties']) == [derive_key(label) for label in labels]


class TestInsertAtPath:
    """Test cases for dotted path insertion."""

    def test_insert_into_object(self):
        properties = {'a': {'type': 'object', 'properties': {}}}
        assert insert_at_path(properties, 'a', 'b', {'type': 'string'})
        assert properties['a']['properties']['b'] == {'type': 'string'}

    def test_insert_into_array_items(self):
        properties = {'a': {'type': 'array', 'items': {'type': 'object', 'properties': {}}}}
        assert insert_at_path(properties, 'a', 'b', {'type': 'string'})
        assert properties['a']['items']['properties']['b'] == {'type': 'string'}

    def test_unresolved_path(self):
        properties = {'a': {'type': 'string'}}
        assert not insert_at_path(properties, 'a.missing', 'b', {'type': 'string'})
        assert properties == {'a': {'type': 'string'}}


class TestBuildJsonSchema:
    """Test cases for the complete structural schema."""

    def test_empty_tree(self):
        assert build_json_schema([]) == {'type': 'object', 'properties': {}, 'required': []}

    def test_person_round_trip(self):
        form = TreeFixtures.person_form()
        schema = build_json_schema([form])

        assert schema['type'] == 'object'
        assert list(schema_properties(schema)) == [form.key]
        assert schema['required'] == [form.key]
        assert schema_properties(schema)[form.key] == build_form_schema(form)

    def test_root_required_only_for_forms_with_required_elements(self):
        person = TreeFixtures.person_form()
        notes = TreeFixtures.form(FormKind.SIMPLE, "Notes", [TreeFixtures.field(ValueType.STRING, "Text")])

        schema = build_json_schema([person, notes])

        assert schema['required'] == [person.key]
        assert list(schema_properties(schema)) == [person.key, notes.key]

    def test_nested_forms_appear_once_under_parent(self):
        root = TreeFixtures.form(FormKind.ARRAY, "Orders")
        line = TreeFixtures.nest(root, FormKind.GROUP, "Line", [TreeFixtures.field(ValueType.NUMBER, "Qty")])
        TreeFixtures.nest(line, FormKind.SIMPLE, "Product", [TreeFixtures.field(ValueType.STRING, "Sku")])

        schema = build_json_schema([root])

        assert list(schema_properties(schema)) == [root.key]
        items = schema_properties(schema)[root.key]['items']['properties']
        assert list(items) == [line.key]
        line_props = items[line.key]['properties']
        assert list(line_props) == [derive_key("Qty"), derive_key("Product")]
        assert line_props[derive_key("Product")]['properties'] == {
            derive_key("Sku"): {'type': 'string', 'title': "Sku"}
        }

    def test_nested_form_listed_as_root_is_skipped(self):
        root = TreeFixtures.form(FormKind.GROUP, "Outer")
        nested = TreeFixtures.nest(root, FormKind.SIMPLE, "Inner")

        schema = build_json_schema([root, nested])

        assert list(schema_properties(schema)) == [root.key]

    def test_duplicate_root_keys_processed_once(self):
        first = TreeFixtures.form(FormKind.SIMPLE, "Same", [TreeFixtures.field(ValueType.STRING, "A")])
        second = TreeFixtures.form(FormKind.SIMPLE, "Same", [TreeFixtures.field(ValueType.STRING, "B")])

        schema = build_json_schema([first, second])

        assert list(schema_properties(schema)) == [first.key]
        assert list(schema_properties(schema)[first.key]['properties']) == [derive_key("A")]

    def test_schema_from_built_tree(self, tree):
        form = tree.add_form(FormKind.SIMPLE)
        element = tree.add_element(form, ValueType.STRING)
        draft = tree.editing_element
        draft.label = "Name"
        draft.required = True
        tree.update_element(form, draft)

        schema = build_json_schema(tree.forms)

        assert schema['required'] == [form.key]
        assert schema_properties(schema)[form.key]['required'] == [element.key]
        assert element.key == derive_key("Name")
