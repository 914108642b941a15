import os

import pytest

from xml.etree import ElementTree as et

from sitemap_obj import UrlEntry
from sitemap_xml import load_xml

@pytest.fixture
def read_sitemap():
    """Entries of a gzipped urlset file, in document order."""
    def read(path):
        root = et.fromstring(load_xml(path))
        return [UrlEntry.from_xml_node(node) for node in root]
    return read

@pytest.fixture
def xml_dir(tmp_path):
    folder = tmp_path / "xml"
    folder.mkdir()
    return str(folder)

@pytest.fixture
def files(xml_dir):
    def listing():
        return sorted(os.listdir(xml_dir))
    return listing
