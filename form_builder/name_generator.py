"""
Display name generation for newly created forms and elements.
Produces two-word "Adjective Color" names suffixed with a type label.
"""

import logging
from typing import Tuple

from unique_names_generator import get_random_name
from unique_names_generator.data import ADJECTIVES, COLORS

from .identity import derive_key

logger = logging.getLogger(__name__)

FORM_TYPE_LABEL = "Form"

_FORM_KINDS = {"simple", "array", "group"}


def get_type_label(node_type: str) -> str:
    """
    Get the suffix used in generated labels.

    Form kinds share the ``Form`` suffix; value types use their own name
    capitalized (``string`` -> ``String``).
    """
    if node_type in _FORM_KINDS:
        return FORM_TYPE_LABEL
    return node_type[:1].upper() + node_type[1:]


def generate_base_name() -> str:
    """Generate a capitalized adjective + color name, e.g. ``Brave Amber``."""
    return get_random_name(combo=[ADJECTIVES, COLORS], separator=" ", style="capital")


def generate_element_name(node_type: str) -> Tuple[str, str]:
    """
    Generate a default label and key for a new form or element.

    Args:
        node_type: Form kind or element value type

    Returns:
        Tuple of (label, key)
    """
    label = f"{generate_base_name()} {get_type_label(node_type)}"
    key = derive_key(label)
    logger.debug(f"Generated name '{label}' for {node_type}")
    return label, key
