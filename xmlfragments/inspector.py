from typing import Union
from lxml import etree

from .serializer import serialize_clean
from .xml_utils import (NodeKind, attribute_name, attribute_text, node_kind, node_name, node_value,
                        owner_document, parent_of)

NO_PARENT = '(no parent node)'
ATTACHED_TO_ROOT = '(attached to root)'
NULL = '(null)'


def describe(node) -> str:
    """
    Best readable form of ``node``: its namespace-free markup, or a raw dump
    when that comes out blank.
    """
    if node is None:
        return NULL
    text = serialize_clean(node).strip()
    if text:
        return text
    return dump(node)  # is probably an attribute


def dump(node) -> str:
    """Simple print when the clever one fails."""
    return f'[{node_kind(node).value} {node_name(node)}: {node_value(node)}]'


def print_attributes(node) -> str:
    if node_kind(node) is not NodeKind.ELEMENT:
        return ''
    return ''.join('@' + attribute_text(attribute_name(node, key), value)
                   for key, value in node.attrib.items())


def signature(node) -> str:
    return f'<{node_name(node)} {print_attributes(node)}>'


def parent_signature(node) -> str:
    parent = parent_of(node)
    if parent is None:
        return NO_PARENT

    if owner_document(parent) is None:
        return ATTACHED_TO_ROOT

    return signature(parent)


def attr_to_string(node, name: Union[etree.QName, str, None]) -> str:
    """
    Look up an attribute of ``node`` and render it as ``name="value"``.

    Args:
        node: Element carrying the attribute.
        name: ``QName`` or ``{uri}local`` string for a namespaced attribute,
            plain local name otherwise.

    Returns:
        The attribute text, or ``(null)`` when there is no such attribute.
    """
    if name is None or node_kind(node) is not NodeKind.ELEMENT:
        return NULL
    key = name.text if isinstance(name, etree.QName) else name
    value = node.get(key)
    if value is None:
        return NULL
    return attribute_text(attribute_name(node, key), value)


def attribute_to_string(attr) -> str:
    if attr is None:
        return NULL
    return attribute_text(node_name(attr), str(attr))
