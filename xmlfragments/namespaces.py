import copy
import logging
from typing import Optional
from lxml import etree

from .errors import ConfigurationFailure
from .xml_utils import Document, Node, NodeKind, node_kind, qualified_name

logger = logging.getLogger(__name__)

# delimiter between node name and namespace prefix ("xs:element")
NAMESPACE_PREFIX = ':'


def remove_ns_prefix(node_name: str) -> str:
    """
    Strip the namespace prefix from a qualified name, if any.

    Only the first delimiter counts: ``":element:"`` becomes ``"element:"``.

    Args:
        node_name: Name written as ``prefix:name``.

    Returns:
        The ``name`` part, or the input unchanged when it has no prefix.
    """
    if NAMESPACE_PREFIX in node_name:
        return node_name.split(NAMESPACE_PREFIX, 1)[1]
    return node_name


def import_node(node) -> Document:
    """
    Deep-copy a node into a brand-new document.

    Args:
        node: Element (or document, whose root is copied) to import.

    Returns:
        A new ElementTree owning the copy; the source tree is not touched.

    Raises:
        ConfigurationFailure: The value cannot be hosted as a document root.
    """
    if isinstance(node, Document):
        node = node.getroot()
    if not isinstance(node, Node):
        raise ConfigurationFailure(
            f'cannot import {node_kind(node).value} node {node!r} into a new document')
    return etree.ElementTree(copy.deepcopy(node))


def remove_namespace_recursive(node) -> Optional[Node]:
    """
    Rename every element below and including ``node`` to its unprefixed name.

    Renaming keeps children, attributes, text and position; the element ends
    up with no namespace. Only ever call this on a tree you own.

    Returns:
        ``node`` when it is an element, otherwise None.
    """
    for el in node.iter():
        if node_kind(el) is NodeKind.ELEMENT:
            el.tag = remove_ns_prefix(qualified_name(el))

    if node_kind(node) is NodeKind.ELEMENT:
        return node
    return None


def remove_xmlns_attribute(node: Node) -> Node:
    """
    Drop the default namespace declaration (``xmlns="..."``) from ``node``.

    Only ``node`` itself is looked at; prefixed declarations and declarations
    on descendants stay. lxml namespace declarations cannot be edited in
    place, so the element is rebuilt when one has to go.

    Returns:
        The element now standing where ``node`` was.
    """
    nsmap = node.nsmap
    if None not in nsmap:
        return node
    default_uri = nsmap.pop(None)

    clean = etree.Element(node.tag, attrib=dict(node.attrib), nsmap=nsmap)
    clean.text = node.text
    clean.tail = node.tail
    clean.extend(list(node))

    parent = node.getparent()
    if parent is not None:
        parent.replace(node, clean)
    logger.debug('removed default namespace %s from <%s>', default_uri, clean.tag)
    return clean


def import_without_namespaces(node) -> Document:
    """
    Copy ``node`` into a new document, leaving namespace information behind.

    Raises:
        ConfigurationFailure: ``node`` cannot be imported into a new document.
    """
    doc = import_node(node)
    root = doc.getroot()
    if remove_namespace_recursive(root) is not None:
        root = remove_xmlns_attribute(root)
        doc = etree.ElementTree(root)
    return doc


def strip_namespaces(node):
    """
    Namespace-free copy of ``node``, hosted in its own throwaway document.

    Text has no names to strip and is returned as is.

    Raises:
        ConfigurationFailure: ``node`` cannot be imported into a new document.
    """
    if node_kind(node) is NodeKind.TEXT:
        return node
    return import_without_namespaces(node).getroot()


def set_namespace_recursive(node, namespace: Optional[str]) -> None:
    for el in node.iter():
        if node_kind(el) is NodeKind.ELEMENT:
            localname = etree.QName(el).localname
            el.tag = f'{{{namespace}}}{localname}' if namespace else localname


def import_as_child_node(parent: Node, other) -> Node:
    """
    Append a copy of ``other`` to ``parent``, moving every copied element into
    the parent's namespace so it is written with the parent's prefix.

    Returns:
        The appended copy.
    """
    new_node = import_node(other).getroot()
    parent.append(new_node)
    set_namespace_recursive(new_node, etree.QName(parent).namespace)
    return new_node
