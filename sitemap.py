import os
import logging

from flask import Flask, request, jsonify, send_from_directory

from conf import LOG_LEVEL, XML_PATH, XML_URL
from utils import is_url_valid, parse_w3c_datetime, setup_logging, sitemap_number
from sitemap_obj import UrlEntry, SitemapError
from sitemap_group import SavedSitemaps, SitemapGroup
from sitemap_index import create_index_by_scan, create_sitemap_index
from sitemap_ping import ping_search_engines

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["XML_PATH"] = XML_PATH

def _entry(item):
    """`UrlEntry` from a plain location or a {loc, lastmod, changefreq,
    priority} object of the request body.
    """
    if isinstance(item, str):
        return UrlEntry(item)
    if not isinstance(item, dict):
        raise TypeError("URL entry must be a string or an object, got %r" % item)

    lastmod = item.get("lastmod")
    return UrlEntry(item["loc"],
                    last_mod=parse_w3c_datetime(lastmod) if lastmod else None,
                    change_freq=item.get("changefreq"),
                    priority=item.get("priority"))

@app.route('/generate/', methods=['POST'])
def sitemap_gen():
    """Write the posted URLs as a group of sitemap files.

    Body: {"name": "blog", "urls": ["https://...", {"loc": ...}, ...]}
    The group is closed before answering, so all listed files exist.
    """
    body = request.get_json(silent=True) or {}
    name = body.get("name")
    urls = body.get("urls")
    if not name or not isinstance(urls, list):
        return jsonify(status="error", msg="ERROR: Please specify name and urls"), 400

    try:
        entries = [_entry(u) for u in urls]
    except (KeyError, TypeError, ValueError) as e:
        return jsonify(status="error", msg="ERROR: Incorrect URL entry: %s" % e), 400

    saved = SavedSitemaps()
    try:
        with SitemapGroup(app.config["XML_PATH"], name, saved=saved) as group:
            for entry in entries:
                group.add(entry)
    except SitemapError as e:
        logger.error("Sitemap group %s failed: %s", name, e)
        return jsonify(status="error", msg="ERROR: %s" % e), 500

    return jsonify(status="ok", files=sorted(saved.names(), key=sitemap_number))

@app.route('/index/', methods=['POST'])
def sitemap_index():
    """Rebuild the index from the files of the XML directory.

    Body: {"public_url": "https://example.com/xml/", "index": "index.xml.gz",
           "ping": false}
    """
    body = request.get_json(silent=True) or {}
    public_url = body.get("public_url", "")
    index_name = body.get("index", "sitemap_index.xml.gz")

    if not is_url_valid(public_url):
        return jsonify(status="error", msg="ERROR: Incorrect URL specified \"%s\"" % public_url), 400

    folder = app.config["XML_PATH"]
    index = create_index_by_scan(folder, index_name, public_url)
    try:
        create_sitemap_index(os.path.join(folder, index_name), index)
    except SitemapError as e:
        logger.error("Sitemap index %s failed: %s", index_name, e)
        return jsonify(status="error", msg="ERROR: %s" % e), 500

    pings = []
    if body.get("ping"):
        results = ping_search_engines(public_url + index_name)
        pings = [{"url": r.url, "status": r.status, "error": str(r.error) if r.error else None}
                 for r in results]

    return jsonify(status="ok", index=public_url + index_name,
                   sitemaps=index.locations, pings=pings)

@app.route(XML_URL+'<path:path>')
def send_xml(path):
    return send_from_directory(os.path.abspath(app.config["XML_PATH"]), path)

if __name__ == '__main__':
    setup_logging(LOG_LEVEL)
    os.makedirs(XML_PATH, exist_ok=True)
    app.run()
