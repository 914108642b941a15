#Sitemap file entry limit
SITEMAP_SIZE = 50000

#Size of the intake queue of a sitemap group
XML_QUEUE_SIZE = 1024

#Suffix of generated sitemap files
SITEMAP_SUFFIX = ".xml.gz"

#Path to XML directory
XML_PATH = "xml/"
XML_URL = "/xml/"

#Search engines notified when the index changes (index URL goes to `sitemap`)
PING_ENDPOINTS = [
    "http://www.google.com/webmasters/tools/ping",
    "http://www.bing.com/ping",
]

#Ping request timeout (seconds), None waits forever
PING_TIMEOUT = None

LOG_LEVEL = "INFO"
