"""
Form tree for the form schema builder.

Owns the root forms, the navigation path and the in-progress edit drafts,
and implements add / update / delete operations. Lookups are linear scans
by key within the relevant scope; a miss is a silent no-op.

Keys are only unique among siblings, so anything that must follow one
particular node (navigation entries, the node an edit draft belongs to) is
tracked by identity rather than by key.
"""

import copy
import logging
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple

from .form_models import (
    ElementNode,
    FormKind,
    FormNode,
    Orientation,
    ValueType,
    validate_form_kind,
    validate_orientation,
    validate_value_type,
)
from .name_generator import generate_element_name
from .navigation import NavigationPath

logger = logging.getLogger(__name__)

NameFactory = Callable[[str], Tuple[str, str]]


def _subtree(forms: Iterable[FormNode]) -> List[FormNode]:
    """The given forms plus all of their nested forms."""
    result: List[FormNode] = []
    for form in forms:
        result.append(form)
        result.extend(form.iter_descendants())
    return result


class FormTree:
    """
    In-memory ownership structure of forms and elements.

    Root forms live in ``forms``; every nested form is owned by exactly one
    ``object`` element of its parent form.

    Args:
        name_factory: Callable returning ``(label, key)`` for a node type
        default_orientation: Orientation given to newly created forms
    """

    def __init__(self, name_factory: Optional[NameFactory] = None,
                 default_orientation: str = Orientation.VERTICAL):
        self.forms: List[FormNode] = []
        self.path = NavigationPath()
        self.editing_form: Optional[FormNode] = None
        self.editing_element: Optional[ElementNode] = None
        self.default_orientation = validate_orientation(default_orientation)
        self._name_factory = name_factory or generate_element_name
        self._form_draft_source: Optional[FormNode] = None
        self._element_draft_source: Optional[ElementNode] = None

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _tail(self, path: Optional[Sequence[FormNode]] = None) -> Optional[FormNode]:
        if path is None:
            return self.path.tail
        return path[-1] if len(path) > 0 else None

    def walk_forms(self) -> Iterator[FormNode]:
        """Yield every form depth-first, roots in order."""
        for root in self.forms:
            yield root
            yield from root.iter_descendants()

    def walk_elements(self) -> Iterator[Tuple[FormNode, ElementNode]]:
        """Yield (owning form, element) pairs for every element in the tree."""
        for form in self.walk_forms():
            for element in form.elements:
                yield form, element

    def find_form(self, key: str) -> Optional[FormNode]:
        for form in self.walk_forms():
            if form.key == key:
                return form
        return None

    def current_forms(self, path: Optional[Sequence[FormNode]] = None) -> List[FormNode]:
        """
        Forms shown at the given navigation level.

        Args:
            path: Navigation path (defaults to the tree's own path)

        Returns:
            Root forms for an empty path, otherwise the nested forms of the
            path tail. Empty if the tail kind does not list nested forms.
        """
        tail = self._tail(path)
        if tail is None:
            return list(self.forms)
        if not tail.admits_nested_forms:
            return []
        return tail.nested_forms()

    def path_to(self, form: FormNode) -> List[FormNode]:
        """Ancestor chain of a form, root first, ending with the form itself."""
        chain: List[FormNode] = []
        seen = set()
        node = form
        while node is not None and id(node) not in seen:
            seen.add(id(node))
            chain.append(node)
            node = node.parent
        chain.reverse()
        return chain

    def navigate_to(self, form: FormNode) -> None:
        """Open a form, rebuilding the navigation path from its ancestors."""
        self.path.reset()
        for entry in self.path_to(form):
            self.path.enter(entry)

    def _locate_form(self, key: str, path: Optional[Sequence[FormNode]] = None) -> Optional[FormNode]:
        """Find a form in the current scope first, then anywhere in the tree."""
        for form in self.current_forms(path):
            if form.key == key:
                return form
        return self.find_form(key)

    # ------------------------------------------------------------------
    # Add
    # ------------------------------------------------------------------

    def add_form(self, kind: str, path: Optional[Sequence[FormNode]] = None) -> FormNode:
        """
        Create a form at the given navigation level.

        At the root level the form is appended to ``forms``; otherwise it is
        embedded in a new ``object`` element on the path tail. The new form
        becomes the active edit draft.
        """
        validate_form_kind(kind)
        tail = self._tail(path)
        label, _ = self._name_factory(kind)
        form = FormNode.create(kind, label, parent=tail, orientation=self.default_orientation)

        if tail is None:
            self.forms.append(form)
        else:
            tail.elements.append(ElementNode.embedding(form))

        self._open_form_draft(form)
        logger.info(f"Added {kind} form '{form.key}' under {tail.key if tail else 'root'}")
        return form

    def add_element(self, form: FormNode, value_type: str) -> ElementNode:
        """
        Append an element to a form.

        An ``object`` element embeds a new group form and navigation descends
        into it; any other value type becomes the active element edit draft.
        """
        validate_value_type(value_type)
        label, _ = self._name_factory(value_type)

        if value_type == ValueType.OBJECT:
            nested = FormNode.create(FormKind.GROUP, label, parent=form,
                                     orientation=self.default_orientation)
            element = ElementNode.embedding(nested)
            form.elements.append(element)
            self.navigate_to(nested)
            logger.info(f"Added nested group form '{nested.key}' to '{form.key}'")
            return element

        element = ElementNode.create(value_type, label)
        form.elements.append(element)
        self._open_element_draft(element)
        logger.info(f"Added {value_type} element '{element.key}' to '{form.key}'")
        return element

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_form(self, draft: FormNode, path: Optional[Sequence[FormNode]] = None) -> Optional[FormNode]:
        """
        Apply an edited form draft.

        ``draft.key`` still holds the key the form had when editing began.
        The stored form takes the draft's label, kind and orientation and
        its key is re-derived. Embedding elements are rewritten to the new
        identity; navigation entries hold the stored form itself and follow
        the change in place.

        Returns:
            The updated stored form, or None if no form matched
        """
        old_key = draft.key
        if draft is self.editing_form and self._form_draft_source is not None:
            stored = self._form_draft_source
        else:
            stored = self._locate_form(old_key, path)
        if stored is None:
            logger.debug(f"update_form: no form with key '{old_key}'")
            return None

        stored.kind = validate_form_kind(draft.kind)
        stored.orientation = validate_orientation(draft.orientation)
        stored.relabel(draft.label)

        for _, element in self.walk_elements():
            if element.embedded_form is stored:
                element.label = stored.label
                element.key = stored.key

        if self._form_draft_source is stored:
            self.cancel_form_edit()

        logger.info(f"Updated form '{old_key}' -> '{stored.key}'")
        return stored

    def update_element(self, form: FormNode, draft: ElementNode) -> Optional[ElementNode]:
        """
        Apply an edited element draft to the element with the draft's key.

        The element's key is re-derived from the edited label. For ``object``
        elements the embedded form takes the same label and key. The value
        type of an embedding element cannot change.

        Returns:
            The updated stored element, or None if no element matched
        """
        old_key = draft.key
        source = self._element_draft_source
        if draft is self.editing_element and any(element is source for element in form.elements):
            stored = source
        else:
            stored = form.find_element(old_key)
        if stored is None:
            logger.debug(f"update_element: no element '{old_key}' in form '{form.key}'")
            return None

        stored.required = bool(draft.required)
        if stored.is_embedding:
            nested = stored.embedded_form
            nested.relabel(draft.label)
            stored.label = nested.label
            stored.key = nested.key
        else:
            if draft.value_type != stored.value_type and draft.value_type != ValueType.OBJECT:
                stored.value_type = validate_value_type(draft.value_type)
            stored.relabel(draft.label)

        if self._element_draft_source is stored:
            self.cancel_element_edit()

        logger.info(f"Updated element '{old_key}' -> '{stored.key}' in form '{form.key}'")
        return stored

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_form(self, key: str, path: Optional[Sequence[FormNode]] = None) -> None:
        """Remove a form from the given navigation level. Misses are no-ops."""
        tail = self._tail(path)
        if tail is None:
            removed = [form for form in self.forms if form.key == key]
            self.forms = [form for form in self.forms if form.key != key]
        else:
            removed = [el.embedded_form for el in tail.elements
                       if el.is_embedding and el.embedded_form.key == key]
            tail.elements = [el for el in tail.elements
                             if not (el.is_embedding and el.embedded_form.key == key)]

        if not removed:
            logger.debug(f"delete_form: no form with key '{key}'")
            return

        self._drop_drafts_within(removed)
        for form in removed:
            self.path.truncate_at(form)
        logger.info(f"Deleted form '{key}'")

    def delete_element(self, form: FormNode, key: str) -> None:
        """Remove an element from a form. Misses are no-ops."""
        removed = [element for element in form.elements if element.key == key]
        if not removed:
            logger.debug(f"delete_element: no element '{key}' in form '{form.key}'")
            return

        form.elements = [element for element in form.elements if element.key != key]

        if any(element is self._element_draft_source for element in removed):
            self.cancel_element_edit()
        nested = [element.embedded_form for element in removed if element.is_embedding]
        if nested:
            self._drop_drafts_within(nested)
            for nested_form in nested:
                self.path.truncate_at(nested_form)
        logger.info(f"Deleted element '{key}' from form '{form.key}'")

    def _drop_drafts_within(self, forms: List[FormNode]) -> None:
        """Cancel drafts whose source lives in the subtrees of ``forms``."""
        subtree = _subtree(forms)
        if any(sub is self._form_draft_source for sub in subtree):
            self.cancel_form_edit()
        if self._element_draft_source is not None:
            for sub in subtree:
                if any(element is self._element_draft_source for element in sub.elements):
                    self.cancel_element_edit()
                    return

    # ------------------------------------------------------------------
    # Edit drafts
    # ------------------------------------------------------------------

    def _open_form_draft(self, form: FormNode) -> FormNode:
        self.editing_form = copy.copy(form)
        self._form_draft_source = form
        return self.editing_form

    def _open_element_draft(self, element: ElementNode) -> ElementNode:
        self.editing_element = copy.copy(element)
        self._element_draft_source = element
        return self.editing_element

    def is_editing_form(self, form: FormNode) -> bool:
        """Whether the active form draft was opened for this stored form."""
        return self.editing_form is not None and self._form_draft_source is form

    def is_editing_element(self, element: ElementNode) -> bool:
        """Whether the active element draft was opened for this stored element."""
        return self.editing_element is not None and self._element_draft_source is element

    def begin_edit_form(self, key: str) -> Optional[FormNode]:
        """Start editing a form; returns a draft copy carrying the current key."""
        form = self._locate_form(key)
        if form is None:
            return None
        return self._open_form_draft(form)

    def begin_edit_element(self, form: FormNode, key: str) -> Optional[ElementNode]:
        """Start editing an element; returns a draft copy carrying the current key."""
        element = form.find_element(key)
        if element is None:
            return None
        return self._open_element_draft(element)

    def cancel_form_edit(self) -> None:
        self.editing_form = None
        self._form_draft_source = None

    def cancel_element_edit(self) -> None:
        self.editing_element = None
        self._element_draft_source = None
