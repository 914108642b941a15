import gzip

from xml.etree import ElementTree as et

from sitemap_obj import SITEMAP_NS, MalformedDocument, WriteFailure

def indent(elem, level=0):
    """
    copy and paste from http://effbot.org/zone/element-lib.htm#pretty#print
    it basically walks your tree and adds spaces and newlines so the tree is
    printed in a nice way
    """
    i = "\n" + level*"  "
    if len(elem):
      if not elem.text or not elem.text.strip():
        elem.text = i + "  "
      if not elem.tail or not elem.tail.strip():
        elem.tail = i
      for elem in elem:
        indent(elem, level+1)
      if not elem.tail or not elem.tail.strip():
        elem.tail = i
    else:
      if level and (not elem.tail or not elem.tail.strip()):
        elem.tail = i

def _document(tag, objlist):
    """Build the UTF-8 encoded document with `objlist` nodes under `tag`

    :param tag: root tag ("urlset" or "sitemapindex")
    :param objlist: objects providing `xml_node()`
    """
    root = et.Element(tag)
    root.attrib["xmlns"] = SITEMAP_NS

    for obj in objlist:
        root.append(obj.xml_node())

    indent(root)
    try:
        return et.tostring(root, encoding="utf-8", xml_declaration=True)
    except (TypeError, ValueError) as e:
        raise MalformedDocument("Can not encode <%s>: %s" % (tag, e))

def create_sitemap_xml(entries):
    """Sitemap `urlset` document bytes for the `UrlEntry` sequence."""
    return _document('urlset', entries)

def create_sitemap_index_xml(index):
    """Sitemap `sitemapindex` document bytes for the `SitemapRef` sequence."""
    return _document('sitemapindex', index)

def save_xml(data, path):
    """Gzip `data` into the file at `path` (created or truncated).

    Both the file and the compressor are closed on every exit path. Half
    written files are left in place on failure.

    :raises WriteFailure: file creation or compressed write failed
    """
    try:
        with open(path, 'wb') as fo, gzip.GzipFile(fileobj=fo, mode='wb') as zf:
            zf.write(data)
    except OSError as e:
        raise WriteFailure(path, e)

def load_xml(path):
    """Decompressed content of a file written by `save_xml`."""
    with gzip.open(path, 'rb') as zf:
        return zf.read()
