from enum import Enum
from typing import Union, List, Optional
from lxml import etree

# Aliases for XML types (protected internals referenced once)
# noinspection PyProtectedMember
Document = etree._ElementTree
# noinspection PyProtectedMember
Node = etree._Element

XML_NS = 'http://www.w3.org/XML/1998/namespace'


class NodeKind(Enum):
    DOCUMENT = 'document'
    ELEMENT = 'element'
    ATTRIBUTE = 'attribute'
    TEXT = 'text'
    OTHER = 'other'


def parse_xml(path) -> tuple[Document, Optional[dict], Optional[str]]:
    """
    Parse an XML file and return an ElementTree for querying.

    Args:
        path: Path to the XML file, or an open file object.

    Returns:
        The parsed document, a prefix to URI mapping usable in XPath queries
        (None when the root declares no default namespace) and the prefix
        assigned to the default namespace.
    """
    parser = etree.XMLParser(remove_blank_text=True)

    # if there is a default namespace, assign a unique prefix for use in XPath queries
    doc = etree.parse(path, parser)
    nsmap = doc.getroot().nsmap
    default_ns_uri = nsmap.get(None)

    if default_ns_uri:
        ns = 'ns'
        while ns in nsmap:
            ns += '_'
        nsmap = {(ns if k is None else k): v for k, v in nsmap.items()}
    else:
        nsmap, ns = None, None

    return doc, nsmap, ns


def apply_xpath(doc: Union[Document, Node], expr: str, namespaces: dict[str, str] = None) -> List[Union[Node, str, float, bool]]:
    """
    Apply an XPath expression against the provided document or element.

    Args:
        doc: An ElementTree or Element to query.
        expr: XPath expression string.
        namespaces: Optional dictionary of namespace prefixes to URIs.

    Returns:
        A list of matched nodes or values.
    """
    return doc.xpath(expr, namespaces=namespaces)


def node_kind(node) -> NodeKind:
    if isinstance(node, Document):
        return NodeKind.DOCUMENT
    if isinstance(node, Node):
        # comments, processing instructions and entities carry a factory as tag
        return NodeKind.ELEMENT if isinstance(node.tag, str) else NodeKind.OTHER
    if getattr(node, 'is_attribute', False):
        return NodeKind.ATTRIBUTE
    if isinstance(node, str):
        return NodeKind.TEXT
    return NodeKind.OTHER


def qualified_name(elem: Node) -> str:
    """Element name as written in markup: ``prefix:local`` or ``local``."""
    localname = etree.QName(elem).localname
    if elem.prefix:
        return f'{elem.prefix}:{localname}'
    return localname


def attribute_name(elem: Node, key: str) -> str:
    """
    Qualified name of an attribute of ``elem`` given its lxml key.

    lxml keys namespaced attributes as ``{uri}local``; the prefix is looked up
    among the namespaces in scope on ``elem``.
    """
    qname = etree.QName(key)
    if qname.namespace is None:
        return qname.localname
    if qname.namespace == XML_NS:
        return f'xml:{qname.localname}'
    for prefix, uri in elem.nsmap.items():
        if prefix and uri == qname.namespace:
            return f'{prefix}:{qname.localname}'
    return qname.localname


def attribute_text(name: str, value: str) -> str:
    return f'{name}="{value}"'


def node_name(node) -> str:
    kind = node_kind(node)
    if kind is NodeKind.DOCUMENT:
        return '#document'
    if kind is NodeKind.ELEMENT:
        return qualified_name(node)
    if kind is NodeKind.ATTRIBUTE:
        parent = node.getparent()
        if parent is None:
            return etree.QName(node.attrname).localname
        return attribute_name(parent, node.attrname)
    if kind is NodeKind.TEXT:
        return '#text'
    if isinstance(node, Node):
        if node.tag is etree.Comment:
            return '#comment'
        if node.tag is etree.ProcessingInstruction:
            return node.target
        if node.tag is etree.Entity:
            return node.name
    return type(node).__name__


def node_value(node) -> Optional[str]:
    kind = node_kind(node)
    if kind is NodeKind.DOCUMENT:
        return None
    if isinstance(node, Node):
        return node.text
    return str(node)


def parent_of(node):
    """
    Parent of ``node`` in its tree, or None.

    Top-level comments and processing instructions live beside the document
    element, so their parent is the document itself. An element without a
    parent element is a fragment root: lxml keeps no separate detached state
    for freshly created or copied elements.
    """
    if isinstance(node, Document):
        return None
    if isinstance(node, Node):
        parent = node.getparent()
        if parent is None:
            doc = node.getroottree()
            root = doc.getroot()
            if root is not None and root is not node:
                return doc
        return parent
    getparent = getattr(node, 'getparent', None)
    if getparent is None:
        return None
    return getparent()


def owner_document(node) -> Optional[Document]:
    if node is None or isinstance(node, Document):
        return None
    if isinstance(node, Node):
        return node.getroottree()
    parent = parent_of(node)
    if parent is None:
        return None
    return owner_document(parent)


def children_of(node) -> list:
    """Child nodes of a document or element, text nodes included, in document order."""
    if isinstance(node, Document):
        return node.xpath('/node()')
    if node_kind(node) is NodeKind.ELEMENT:
        return node.xpath('node()')
    return []
