"""
Namespace-aware XPath lookups.

A :class:`NamespaceQuery` binds one prefix to URI table and can be shared:
it keeps a read-only copy of the table and nothing else.
"""
import logging
from types import MappingProxyType
from typing import Mapping, Optional, Union
from lxml import etree

from .errors import QueryFailure
from .xml_utils import Document, Node, apply_xpath

logger = logging.getLogger(__name__)

XMLSCHEMA_NAMESPACES = MappingProxyType({
    'xs': 'http://www.w3.org/2001/XMLSchema',
    'xsi': 'http://www.w3.org/2001/XMLSchema-instance',
})


class NamespaceQuery:
    def __init__(self, namespaces: Optional[Mapping[str, str]] = None):
        """
        Args:
            namespaces: Prefix to namespace URI table used to resolve prefixes
                in expressions; XML Schema prefixes when omitted.
        """
        if namespaces is None:
            namespaces = XMLSCHEMA_NAMESPACES
        table = {}
        for prefix, uri in namespaces.items():
            if not prefix:
                # XPath 1.0 has no default namespace, only prefixed names resolve
                logger.warning('ignoring default namespace %s, bind it to a prefix to query it', uri)
                continue
            table[prefix] = uri
        self.namespaces = MappingProxyType(table)

    def find_nodes(self, doc: Union[Document, Node], expr: str) -> list:
        """
        All nodes matching ``expr``, in document order.

        Raises:
            QueryFailure: The expression is invalid, fails to evaluate, or does
                not select nodes.
        """
        try:
            result = apply_xpath(doc, expr, dict(self.namespaces))
        except etree.XPathError as e:
            raise QueryFailure(expr, str(e)) from e

        if not isinstance(result, list):
            raise QueryFailure(expr, f'expected a node-set, got {type(result).__name__}')
        return result

    def find_node(self, doc: Union[Document, Node], expr: str):
        """
        First node matching ``expr``, or None when nothing matches.

        Raises:
            QueryFailure: See :meth:`find_nodes`.
        """
        nodes = self.find_nodes(doc, expr)
        if not nodes:
            logger.warning('Failed to get node: [%s] from [%s]', expr, doc)
            return None
        return nodes[0]


def find_node(doc: Union[Document, Node], expr: str, namespaces: Optional[Mapping[str, str]] = None):
    return NamespaceQuery(namespaces).find_node(doc, expr)
