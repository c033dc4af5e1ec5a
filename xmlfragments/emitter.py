import codecs
import copy
import logging
from dataclasses import dataclass
from typing import Optional
from xml.sax.saxutils import escape
from lxml import etree

from .errors import ConfigurationFailure, EmissionFailure
from .xml_utils import Document, Node, NodeKind, node_kind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmissionOptions:
    """Output settings handed to the lxml serializer."""

    encoding: str = 'UTF-8'
    indent: bool = True
    indent_amount: Optional[int] = 4
    omit_declaration: bool = True


# standalone, human-readable fragments
FRAGMENT_OPTIONS = EmissionOptions()
# complete documents, XML declaration included
DOCUMENT_OPTIONS = EmissionOptions(omit_declaration=False)


class TextEmitter:
    """
    Renders one node at a time to text under a fixed set of options.

    Emitting never touches the caller's tree: indentation is applied to a copy.
    """

    def __init__(self, options: EmissionOptions = FRAGMENT_OPTIONS):
        try:
            codecs.lookup(options.encoding)
        except LookupError as e:
            raise ConfigurationFailure(f'unsupported output encoding {options.encoding!r}') from e
        self.options = options

    def _indent(self, target) -> bool:
        """Indent ``target`` in place; False when the indent amount was rejected."""
        if self.options.indent_amount is None:
            return False
        try:
            etree.indent(target, space=' ' * self.options.indent_amount)
        except (AttributeError, TypeError, ValueError) as e:
            # ignore, fall back to the serializer's own pretty printing
            logger.warning('indent-amount not supported: %s', e)
            return False
        return True

    def emit(self, node) -> str:
        """
        Render ``node`` as text.

        Elements, comments and processing instructions come out as markup
        without their tail, text as escaped character data, documents as their
        full tree. Attributes have no standalone markup and give ''.

        Raises:
            EmissionFailure: The value cannot be rendered.
        """
        kind = node_kind(node)
        if kind is NodeKind.ATTRIBUTE:
            return ''
        if kind is NodeKind.TEXT:
            return escape(str(node))
        if not isinstance(node, (Document, Node)):
            raise EmissionFailure(f'cannot emit {type(node).__name__} value {node!r}')

        target = copy.deepcopy(node)
        pretty_print = False
        # comments and processing instructions have nothing to indent
        if self.options.indent and kind in (NodeKind.ELEMENT, NodeKind.DOCUMENT):
            pretty_print = not self._indent(target)

        try:
            data = etree.tostring(target,
                                  encoding=self.options.encoding,
                                  xml_declaration=not self.options.omit_declaration,
                                  pretty_print=pretty_print,
                                  with_tail=False)
        except (TypeError, ValueError, LookupError, etree.LxmlError) as e:
            raise EmissionFailure(str(e)) from e
        return data.decode(self.options.encoding)


def new_fragment_emitter() -> TextEmitter:
    return TextEmitter(FRAGMENT_OPTIONS)


def new_document_emitter() -> TextEmitter:
    return TextEmitter(DOCUMENT_OPTIONS)
