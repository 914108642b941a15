import re
import enum

from datetime import datetime, timezone
from decimal import Decimal
from xml.etree import ElementTree as et

from utils import parse_w3c_datetime, w3c_datetime

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"

#Characters outside of the XML 1.0 Char production
_xml_invalid = re.compile("[^\x09\x0A\x0D\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")

class SitemapError(Exception):
    def __init__(self, value):
        self.value = value

    def __str__(self):
        return repr(self.value)

class ConfigurationError(SitemapError):
    pass

class MalformedDocument(SitemapError):
    pass

class SitemapGroupClosed(SitemapError):
    pass

class WriteFailure(SitemapError):
    def __init__(self, path, cause):
        super().__init__("File not saved %s: %s" % (path, cause))
        self.path = path
        self.cause = cause

class NetworkError(SitemapError):
    def __init__(self, url, cause):
        super().__init__("Ping %s failed: %s" % (url, cause))
        self.url = url
        self.cause = cause

class ChangeFreq(enum.Enum):
    ALWAYS = "always"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    NEVER = "never"

def _text(tag, value):
    """Create a leaf element, refusing text XML can not carry."""
    if not isinstance(value, str):
        raise MalformedDocument("<%s> expects text, got %r" % (tag, value))
    if _xml_invalid.search(value):
        raise MalformedDocument("<%s> contains characters not allowed in XML: %r" % (tag, value))

    node = et.Element(tag)
    node.text = value
    return node

def _timestamp(tag, value):
    try:
        return _text(tag, w3c_datetime(value))
    except TypeError as e:
        raise MalformedDocument("<%s> %s" % (tag, e))

def _local(tag):
    return tag.rsplit('}', 1)[-1]

class UrlEntry(object):
    """Immutable entry of a Sitemap file.

    Only `loc` is required. The location is not validated, any string is
    written as it is.

    :param loc: page URL
    :param last_mod: `date` or `datetime` of the last page modification
    :param change_freq: `ChangeFreq` member or its string value
    :param priority: float in [0.0, 1.0]
    """

    def __init__(self, loc, last_mod=None, change_freq=None, priority=None):
        if change_freq is not None:
            change_freq = ChangeFreq(change_freq)
        if priority is not None:
            priority = float(priority)
            if not 0.0 <= priority <= 1.0:
                raise ValueError("priority must be within [0.0, 1.0], got %s" % priority)
        if isinstance(last_mod, datetime) and last_mod.tzinfo is None:
            last_mod = last_mod.replace(tzinfo=timezone.utc)

        self.__loc = loc
        self.__last_mod = last_mod
        self.__change_freq = change_freq
        self.__priority = priority

    def __key(self):
        return (self.__loc, self.__last_mod, self.__change_freq, self.__priority)

    def __eq__(self, other):
        if not isinstance(other, UrlEntry):
            return NotImplemented
        return self.__key() == other.__key()

    def __hash__(self):
        return hash(self.__loc)

    def __repr__(self):
        return "UrlEntry(%r)" % self.__loc

    def __str__(self):
        return "%s : %s" % (self.__loc, self.__last_mod)

    @property
    def loc(self):
        return self.__loc

    @property
    def last_mod(self):
        return self.__last_mod

    @property
    def change_freq(self):
        return self.__change_freq

    @property
    def priority(self):
        return self.__priority

    def xml_node(self):
        """Create the XML node object of Sitemap file
        """
        url = et.Element('url')
        url.append(_text('loc', self.__loc))

        if self.__last_mod:
            url.append(_timestamp('lastmod', self.__last_mod))
        if self.__change_freq:
            url.append(_text('changefreq', self.__change_freq.value))
        if self.__priority is not None:
            url.append(_text('priority', format(Decimal(repr(self.__priority)), "f")))

        return url

    @classmethod
    def from_xml_node(cls, node):
        """Rebuild an entry from a parsed `url` element (namespaced or not)."""
        fields = {_local(child.tag): (child.text or "").strip() for child in node}

        last_mod = fields.get('lastmod')
        priority = fields.get('priority')
        return cls(fields.get('loc', ""),
                   last_mod=parse_w3c_datetime(last_mod) if last_mod else None,
                   change_freq=fields.get('changefreq') or None,
                   priority=float(priority) if priority else None)

class SitemapRef(object):
    """Entry of a Sitemap index: public location of a generated file.

    `last_mod` defaults to the current UTC time.
    """

    def __init__(self, loc, last_mod=None):
        self.__loc = loc
        self.__last_mod = last_mod if last_mod is not None else datetime.now(timezone.utc)

    def __eq__(self, other):
        if not isinstance(other, SitemapRef):
            return NotImplemented
        return (self.loc, self.last_mod) == (other.loc, other.last_mod)

    def __hash__(self):
        return hash(self.__loc)

    def __repr__(self):
        return "SitemapRef(%r, %r)" % (self.__loc, self.__last_mod)

    @property
    def loc(self):
        return self.__loc

    @property
    def last_mod(self):
        return self.__last_mod

    def xml_node(self):
        sitemap = et.Element('sitemap')
        sitemap.append(_text('loc', self.__loc))
        sitemap.append(_timestamp('lastmod', self.__last_mod))
        return sitemap

class SitemapIndex(object):
    """Ordered, read-only sequence of `SitemapRef`."""

    def __init__(self, sitemaps=()):
        self.__sitemaps = tuple(sitemaps)

    def __iter__(self):
        return iter(self.__sitemaps)

    def __len__(self):
        return len(self.__sitemaps)

    def __getitem__(self, idx):
        return self.__sitemaps[idx]

    @property
    def sitemaps(self):
        return self.__sitemaps

    @property
    def locations(self):
        return [s.loc for s in self.__sitemaps]
