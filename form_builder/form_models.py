"""
Data models for the form tree.

A FormNode owns an ordered list of ElementNodes. An element of value type
``object`` owns exactly one nested FormNode through ``embedded_form``; this
is the only nesting mechanism. The ``parent`` of a FormNode is a weak
back-reference used for display and navigation only.
"""

import weakref
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Iterator

from .builder_exceptions import InvalidFormKindError, InvalidValueTypeError, InvalidOrientationError
from .identity import derive_key

logger = logging.getLogger(__name__)


class FormKind:
    """Form kind constants."""
    SIMPLE = "simple"
    ARRAY = "array"
    GROUP = "group"

    ALL = (SIMPLE, ARRAY, GROUP)

    # Kinds whose nested forms are listed when navigated into
    NESTING = (ARRAY, GROUP)


class ValueType:
    """Element value type constants."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    OBJECT = "object"
    ARRAY = "array"

    ALL = (STRING, NUMBER, BOOLEAN, DATE, OBJECT, ARRAY)


class Orientation:
    """Layout orientation constants for array forms."""
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"

    ALL = (VERTICAL, HORIZONTAL)


def validate_form_kind(kind: str) -> str:
    if kind not in FormKind.ALL:
        raise InvalidFormKindError(kind, FormKind.ALL)
    return kind


def validate_value_type(value_type: str) -> str:
    if value_type not in ValueType.ALL:
        raise InvalidValueTypeError(value_type, ValueType.ALL)
    return value_type


def validate_orientation(orientation: str) -> str:
    if orientation not in Orientation.ALL:
        raise InvalidOrientationError(orientation, Orientation.ALL)
    return orientation


@dataclass(eq=False)
class ElementNode:
    """
    A field of a form, or the placeholder that embeds a nested form.

    Attributes:
        value_type: One of the ValueType constants
        label: Display name
        key: Identifier derived from the label
        required: Whether the field is listed in the schema's required set
        embedded_form: Nested form, present only for ``object`` elements
    """
    value_type: str
    label: str
    key: str
    required: bool = False
    embedded_form: Optional['FormNode'] = None

    @classmethod
    def create(cls, value_type: str, label: str, required: bool = False) -> 'ElementNode':
        """Create an element whose key is derived from its label."""
        return cls(
            value_type=validate_value_type(value_type),
            label=label,
            key=derive_key(label),
            required=required
        )

    @classmethod
    def embedding(cls, form: 'FormNode') -> 'ElementNode':
        """Create the ``object`` element that owns a nested form."""
        return cls(
            value_type=ValueType.OBJECT,
            label=form.label,
            key=form.key,
            embedded_form=form
        )

    @property
    def is_embedding(self) -> bool:
        return self.value_type == ValueType.OBJECT and self.embedded_form is not None

    def relabel(self, label: str) -> None:
        """Set a new label and re-derive the key."""
        self.label = label
        self.key = derive_key(label)


@dataclass(eq=False)
class FormNode:
    """
    A form: a container of ordered elements.

    Attributes:
        kind: One of the FormKind constants
        label: Display name
        key: Identifier derived from the label
        elements: Ordered child elements
        orientation: Layout of expanded array items (array forms only)
    """
    kind: str
    label: str
    key: str
    elements: List[ElementNode] = field(default_factory=list)
    orientation: str = Orientation.VERTICAL
    _parent_ref: Optional[weakref.ref] = field(default=None, init=False, repr=False)

    @classmethod
    def create(cls, kind: str, label: str, parent: Optional['FormNode'] = None,
               orientation: str = Orientation.VERTICAL) -> 'FormNode':
        """Create a form whose key is derived from its label."""
        form = cls(
            kind=validate_form_kind(kind),
            label=label,
            key=derive_key(label),
            orientation=validate_orientation(orientation)
        )
        form.parent = parent
        return form

    @property
    def parent(self) -> Optional['FormNode']:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @parent.setter
    def parent(self, value: Optional['FormNode']) -> None:
        self._parent_ref = weakref.ref(value) if value is not None else None

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def admits_nested_forms(self) -> bool:
        return self.kind in FormKind.NESTING

    def relabel(self, label: str) -> None:
        """Set a new label and re-derive the key."""
        self.label = label
        self.key = derive_key(label)

    def nested_forms(self) -> List['FormNode']:
        """Forms embedded by this form's object elements, in element order."""
        return [element.embedded_form for element in self.elements if element.is_embedding]

    def find_element(self, key: str) -> Optional[ElementNode]:
        for element in self.elements:
            if element.key == key:
                return element
        return None

    def find_embedding_element(self, form_key: str) -> Optional[ElementNode]:
        """Find the object element whose embedded form has the given key."""
        for element in self.elements:
            if element.is_embedding and element.embedded_form.key == form_key:
                return element
        return None

    def iter_descendants(self) -> Iterator['FormNode']:
        """Yield nested forms depth-first, in element order."""
        for nested in self.nested_forms():
            yield nested
            yield from nested.iter_descendants()

    def required_keys(self) -> List[str]:
        return [element.key for element in self.elements if element.required]
