from pathlib import Path

import pytest
from lxml import etree

from xmlfragments.xml_utils import parse_xml

DATA_DIR = Path(__file__).parent / 'data'


@pytest.fixture
def diff_doc():
    doc, _, _ = parse_xml(str(DATA_DIR / 'diffreport.xml'))
    return doc


@pytest.fixture
def schema_doc():
    doc, _, _ = parse_xml(str(DATA_DIR / 'books.xsd'))
    return doc


@pytest.fixture
def default_ns_root():
    return etree.fromstring('<root xmlns="urn:d" xmlns:x="urn:x"><x:child a="1"><leaf/></x:child></root>')
