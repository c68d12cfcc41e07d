"""
Navigation path (breadcrumb stack) for the nested form tree.
"""

import logging
from typing import List, Optional

from .form_models import FormNode

logger = logging.getLogger(__name__)


class NavigationPath:
    """
    Ordered descent from a root form to the currently open nested form.

    Entries are the stored form objects, matched by identity. Keys are only
    unique among siblings, and relabeling a form updates it in place, so
    entries never need rewriting after an edit. Out-of-range requests are
    clamped or ignored; no operation raises.
    """

    def __init__(self, forms: Optional[List[FormNode]] = None):
        self._forms: List[FormNode] = list(forms or [])

    def __len__(self) -> int:
        return len(self._forms)

    def __bool__(self) -> bool:
        return bool(self._forms)

    @property
    def forms(self) -> List[FormNode]:
        return list(self._forms)

    @property
    def tail(self) -> Optional[FormNode]:
        """The currently open form, or None at the root level."""
        return self._forms[-1] if self._forms else None

    @property
    def is_root(self) -> bool:
        return not self._forms

    def enter(self, form: FormNode) -> None:
        self._forms.append(form)
        logger.debug(f"Entered form '{form.key}' (depth {len(self._forms)})")

    def back(self) -> Optional[FormNode]:
        """Pop the last entry. Popping an empty path is a no-op."""
        if not self._forms:
            return None
        form = self._forms.pop()
        logger.debug(f"Left form '{form.key}' (depth {len(self._forms)})")
        return form

    def jump_to(self, index: int) -> None:
        """
        Truncate the path so that the entry at ``index`` becomes the tail.

        A negative index resets to the root level; an index past the end
        leaves the path unchanged.
        """
        if index < 0:
            self.reset()
            return
        del self._forms[index + 1:]

    def reset(self) -> None:
        self._forms.clear()

    def truncate_at(self, form: FormNode) -> None:
        """Drop the entry holding ``form`` and everything below it."""
        for index, entry in enumerate(self._forms):
            if entry is form:
                del self._forms[index:]
                logger.debug(f"Navigation truncated at removed form '{form.key}'")
                return

    def breadcrumbs(self) -> List[str]:
        """Labels of the path entries, root first."""
        return [form.label for form in self._forms]

    def back_label(self, root_label: str = "Root") -> str:
        """Label of the level that ``back()`` returns to."""
        if len(self._forms) < 2:
            return root_label
        return self._forms[-2].label
