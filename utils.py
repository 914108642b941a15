import re
import logging

from datetime import date, datetime, timezone

from conf import SITEMAP_SUFFIX

def is_url_valid(url):
    url_validator = re.compile(
        r'^(?:http)s?://' # http:// or https://
        r'(?:(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+(?:[A-Z]{2,6}\.?|[A-Z0-9-]{2,}\.?)|' #domain...
        r'localhost|' #localhost...
        r'\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})' # ...or ip
        r'(?::\d+)?' # optional port
        r'(?:/?|[/?]\S+)$', re.IGNORECASE)

    return url_validator.match(url) != None

def sanitize_name(name):
    """Strip the sitemap suffix from a group name (first occurrence only)."""
    return name.replace(SITEMAP_SUFFIX, "", 1)

def w3c_datetime(value):
    """Format `date`/`datetime` as W3C Datetime used by the sitemaps.org
    protocol, fractional seconds only when set. Naive datetimes are taken
    as UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")

    raise TypeError("Unsupported timestamp type: %r" % type(value).__name__)

def setup_logging(level="INFO"):
    fmt = "%(levelname)s | %(asctime)s | %(name)s | %(message)s"
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO),
                        format=fmt, datefmt="%Y-%m-%d %H:%M:%S")

def sitemap_number(name):
    """Counter of a generated "{name}_{n}.xml.gz" file."""
    return int(name[:-len(SITEMAP_SUFFIX)].rsplit("_", 1)[1])

def parse_w3c_datetime(text):
    """`date` or `datetime` from a W3C Datetime string."""
    if "T" in text:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    return date.fromisoformat(text)
