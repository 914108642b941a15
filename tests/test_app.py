import os
import gzip

from datetime import date
from xml.etree import ElementTree as et

import pytest

import sitemap
from sitemap_obj import SITEMAP_NS, UrlEntry
from sitemap_xml import load_xml

NS = {"sm": SITEMAP_NS}

@pytest.fixture
def client(xml_dir):
    sitemap.app.config["XML_PATH"] = xml_dir
    sitemap.app.config["TESTING"] = True
    with sitemap.app.test_client() as c:
        yield c

def test_generate(client, xml_dir, read_sitemap):
    r = client.post("/generate/", json={
        "name": "blog.xml.gz",
        "urls": ["https://example.com/a",
                 {"loc": "https://example.com/b", "lastmod": "2024-03-01",
                  "changefreq": "weekly", "priority": 0.3}],
    })

    assert r.status_code == 200
    assert r.get_json() == {"status": "ok", "files": ["blog_1.xml.gz"]}
    assert read_sitemap(os.path.join(xml_dir, "blog_1.xml.gz")) == [
        UrlEntry("https://example.com/a"),
        UrlEntry("https://example.com/b", last_mod=date(2024, 3, 1),
                 change_freq="weekly", priority=0.3),
    ]

@pytest.mark.parametrize("body", [
    {},
    {"name": "blog"},
    {"name": "blog", "urls": "https://example.com/"},
])
def test_generate_missing_fields(client, body):
    r = client.post("/generate/", json=body)
    assert r.status_code == 400
    assert r.get_json()["status"] == "error"

def test_generate_bad_entry(client, files):
    r = client.post("/generate/", json={"name": "blog",
                                        "urls": [{"loc": "/a", "priority": 3}]})
    assert r.status_code == 400
    assert files() == []

@pytest.mark.parametrize("item", [5, None, ["/a"]])
def test_generate_entry_of_wrong_type(client, files, item):
    r = client.post("/generate/", json={"name": "site", "urls": [item]})
    assert r.status_code == 400
    assert r.get_json()["msg"].startswith("ERROR: Incorrect URL entry")
    assert files() == []

def test_generate_missing_folder(client, tmp_path):
    sitemap.app.config["XML_PATH"] = str(tmp_path / "missing")
    r = client.post("/generate/", json={"name": "blog", "urls": ["/a"]})
    assert r.status_code == 500
    assert r.get_json()["status"] == "error"

def test_index(client, xml_dir):
    client.post("/generate/", json={"name": "blog", "urls": ["/a", "/b"]})
    client.post("/generate/", json={"name": "news", "urls": ["/c"]})

    r = client.post("/index/", json={"public_url": "https://example.com/xml/",
                                     "index": "index.xml.gz"})

    data = r.get_json()
    assert r.status_code == 200
    assert data["index"] == "https://example.com/xml/index.xml.gz"
    assert sorted(data["sitemaps"]) == ["https://example.com/xml/blog_1.xml.gz",
                                        "https://example.com/xml/news_1.xml.gz"]
    assert data["pings"] == []

    root = et.fromstring(load_xml(os.path.join(xml_dir, "index.xml.gz")))
    assert sorted(loc.text for loc in root.findall("sm:sitemap/sm:loc", NS)) == sorted(data["sitemaps"])

def test_index_rebuild_skips_itself(client):
    client.post("/generate/", json={"name": "blog", "urls": ["/a"]})
    body = {"public_url": "https://example.com/xml/", "index": "index.xml.gz"}
    client.post("/index/", json=body)

    r = client.post("/index/", json=body)
    assert r.get_json()["sitemaps"] == ["https://example.com/xml/blog_1.xml.gz"]

def test_index_with_ping(client, monkeypatch):
    calls = []

    def fake_ping(index_location):
        calls.append(index_location)
        return []

    monkeypatch.setattr(sitemap, "ping_search_engines", fake_ping)
    r = client.post("/index/", json={"public_url": "https://example.com/xml/",
                                     "index": "index.xml.gz", "ping": True})

    assert r.status_code == 200
    assert calls == ["https://example.com/xml/index.xml.gz"]

def test_index_invalid_public_url(client):
    r = client.post("/index/", json={"public_url": "example"})
    assert r.status_code == 400

def test_send_xml(client):
    client.post("/generate/", json={"name": "blog", "urls": ["/a"]})

    r = client.get("/xml/blog_1.xml.gz")
    assert r.status_code == 200
    root = et.fromstring(gzip.decompress(r.data))
    assert root.find("sm:url/sm:loc", NS).text == "/a"
