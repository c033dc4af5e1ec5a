"""
Text forms of document fragments.

Every function here returns text, never raises: when a node cannot be
rendered the result is a ``{failed to serialize node ...}`` marker instead.
"""
import logging
from typing import Iterable

from .emitter import new_document_emitter, new_fragment_emitter
from .errors import XmlFragmentError
from .namespaces import strip_namespaces
from .xml_utils import Document, NodeKind, node_kind

logger = logging.getLogger(__name__)


def _failure_text(node, error: Exception) -> str:
    logger.debug('failed to serialize node %s', node, exc_info=error)
    return f'{{failed to serialize node {node}: {type(error).__name__}: {error}}}'


def serialize(node) -> str:
    """Render exactly ``node`` (and its subtree) as a standalone fragment."""
    try:
        return new_fragment_emitter().emit(node)
    except (XmlFragmentError, TypeError, ValueError) as e:
        return _failure_text(node, e)


def serialize_clean(node) -> str:
    """
    Like :func:`serialize`, but strip namespaces (if any) first, because
    prefixes and declarations otherwise tend to look messy.
    """
    if node_kind(node) is NodeKind.ATTRIBUTE:
        return serialize(node)

    try:
        emitter = new_fragment_emitter()
        return emitter.emit(strip_namespaces(node))
    except (XmlFragmentError, TypeError, ValueError) as e:
        return _failure_text(node, e)


def serialize_children(nodes: Iterable) -> str:
    """
    Render a sequence of sibling nodes, e.g. ``children_of(parent)`` to leave
    the parent itself out. Nothing is put between siblings.
    """
    return ''.join(serialize(node) for node in nodes)


def serialize_document(doc: Document) -> str:
    """Render a whole document, XML declaration included."""
    try:
        return new_document_emitter().emit(doc)
    except (XmlFragmentError, TypeError, ValueError) as e:
        return _failure_text(doc, e)


def pretty_print(node, strip_ns: bool = False) -> str:
    if strip_ns:
        return serialize_clean(node)
    return serialize(node)
