import logging
from pathlib import Path

import pytest
from lxml import etree

from xmlfragments.errors import QueryFailure
from xmlfragments.query import XMLSCHEMA_NAMESPACES, NamespaceQuery, find_node
from xmlfragments.xml_utils import parse_xml

DATA_DIR = Path(__file__).parent / 'data'


class TestFindNode:
    def test_finds_element(self, diff_doc):
        node = find_node(diff_doc, '/diffreport/diff')
        assert node.tag == 'diff'

    def test_first_match_only(self, schema_doc):
        node = find_node(schema_doc, '//xs:element')
        assert node.get('name') == 'book'

    def test_resolves_prefixes_from_mapping(self, schema_doc):
        node = find_node(schema_doc, "//s:element[@name='title']", {'s': 'http://www.w3.org/2001/XMLSchema'})
        assert node.get('type') == 'xs:string'

    def test_attribute_result(self, schema_doc):
        attr = find_node(schema_doc, '//xs:attribute/@name')
        assert attr == 'isbn'
        assert attr.is_attribute

    def test_no_match_is_not_an_error(self, diff_doc, caplog):
        with caplog.at_level(logging.WARNING, logger='xmlfragments.query'):
            assert find_node(diff_doc, '/diffreport/nothing') is None
        assert 'Failed to get node: [/diffreport/nothing]' in caplog.text

    @pytest.mark.parametrize('expr', [
        '/diffreport/[',
        '//undeclared:thing',
        'count(//diff)',
        'string(/diffreport)',
    ])
    def test_invalid_expression(self, diff_doc, expr):
        with pytest.raises(QueryFailure) as excinfo:
            find_node(diff_doc, expr)
        assert excinfo.value.expression == expr
        assert expr in str(excinfo.value)


class TestNamespaceQuery:
    def test_defaults_to_xml_schema(self):
        assert dict(NamespaceQuery().namespaces) == dict(XMLSCHEMA_NAMESPACES)

    def test_mapping_is_copied_and_read_only(self):
        mapping = {'b': 'urn:example:books'}
        query = NamespaceQuery(mapping)
        mapping['b'] = 'urn:changed'

        assert query.namespaces['b'] == 'urn:example:books'
        with pytest.raises(TypeError):
            query.namespaces['c'] = 'urn:c'

    def test_default_namespace_entry_is_ignored(self, caplog):
        with caplog.at_level(logging.WARNING, logger='xmlfragments.query'):
            query = NamespaceQuery({'': 'urn:d', 'd': 'urn:d'})
        assert dict(query.namespaces) == {'d': 'urn:d'}
        assert 'urn:d' in caplog.text

    def test_reusable_across_documents(self, diff_doc):
        query = NamespaceQuery({'d': 'urn:d'})
        other = etree.ElementTree(etree.fromstring('<d:root xmlns:d="urn:d"><d:leaf/></d:root>'))
        assert query.find_node(other, '/d:root/d:leaf') is not None
        assert query.find_node(diff_doc, '/diffreport/diff') is not None

    def test_find_nodes(self, schema_doc):
        names = [el.get('name') for el in NamespaceQuery().find_nodes(schema_doc, '//xs:element')]
        assert names == ['book', 'title', 'author']


class TestParseXml:
    def test_assigns_prefix_to_default_namespace(self):
        doc, nsmap, ns = parse_xml(str(DATA_DIR / 'books.xsd'))
        assert ns == 'ns'
        assert nsmap == {'xs': 'http://www.w3.org/2001/XMLSchema', 'ns': 'urn:example:books'}
        assert NamespaceQuery(nsmap).find_node(doc, '/xs:schema') is doc.getroot()

    def test_prefix_does_not_clash(self, tmp_path):
        path = tmp_path / 'clash.xml'
        path.write_text('<root xmlns="urn:a" xmlns:ns="urn:b"><leaf/></root>', encoding='utf-8')
        doc, nsmap, ns = parse_xml(str(path))
        assert ns == 'ns_'
        assert NamespaceQuery(nsmap).find_node(doc, '/ns_:root/ns_:leaf') is not None

    def test_no_default_namespace(self):
        _, nsmap, ns = parse_xml(str(DATA_DIR / 'diffreport.xml'))
        assert nsmap is None
        assert ns is None
