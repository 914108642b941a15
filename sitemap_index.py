import os
import logging

from datetime import datetime, timezone

from conf import SITEMAP_SUFFIX
from sitemap_obj import SitemapIndex, SitemapRef
from sitemap_xml import create_sitemap_index_xml, save_xml

logger = logging.getLogger(__name__)

def create_index_by_scan(target_dir, index_file_name, public_url):
    """Index of the sitemap files found in `target_dir`.

    The modification time of every file is used as its `lastmod`. Files
    come in directory listing order. The index itself is skipped when it
    lives in the same directory: a file is left out when `index_file_name`
    ends with its name, so "blog_1.xml.gz" is also dropped for an index
    named "myblog_1.xml.gz".

    :param target_dir: directory with the generated files
    :param index_file_name: name or path of the index file
    :param public_url: prefix of the public file locations
    """
    try:
        with os.scandir(target_dir) as it:
            entries = list(it)
    except OSError as e:
        logger.warning("Can not scan %s: %s", target_dir, e)
        return SitemapIndex()

    sitemaps = []
    for f in entries:
        if f.name.endswith(SITEMAP_SUFFIX) and not index_file_name.endswith(f.name):
            last_mod = datetime.fromtimestamp(f.stat().st_mtime, timezone.utc)
            sitemaps.append(SitemapRef(public_url + f.name, last_mod))

    return SitemapIndex(sitemaps)

def create_index_by_list(names, public_url, now=None):
    """Index of the given file names, in the given order.

    Every entry gets the index build time as `lastmod` unless `now` is set.
    """
    now = now or datetime.now(timezone.utc)
    return SitemapIndex(SitemapRef(public_url + name, now) for name in names)

def create_sitemap_index(index_file_path, index):
    """Write the gzipped index document.

    :raises MalformedDocument: the index can not be encoded
    :raises WriteFailure: the file can not be written
    """
    save_xml(create_sitemap_index_xml(index), index_file_path)
    logger.info("Sitemap Index created on %s", index_file_path)
