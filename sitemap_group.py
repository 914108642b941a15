import os
import queue
import logging
import threading

from conf import SITEMAP_SIZE, SITEMAP_SUFFIX, XML_QUEUE_SIZE
from utils import sanitize_name
from sitemap_obj import ConfigurationError, SitemapGroupClosed, UrlEntry
from sitemap_xml import create_sitemap_xml, save_xml

logger = logging.getLogger(__name__)

#Marks the end of the intake queue
_STOP = object()

class SavedSitemaps(object):
    """Thread safe list of the generated sitemap file names.

    Every successful flush appends its file name, so the list could be
    handed to `create_index_by_list` once the groups are closed.
    """

    def __init__(self):
        self.__lock = threading.Lock()
        self.__names = []

    def __len__(self):
        with self.__lock:
            return len(self.__names)

    def append(self, name):
        with self.__lock:
            self.__names.append(name)

    def clear(self):
        """Forget the generated names (files are not deleted)."""
        with self.__lock:
            self.__names = []

    def names(self):
        with self.__lock:
            return list(self.__names)

#Used by the groups created without an explicit `saved` list
saved_sitemaps = SavedSitemaps()

def clear_saved_sitemaps():
    saved_sitemaps.clear()

def get_saved_sitemaps():
    return saved_sitemaps.names()

def needs_flush(length, capacity=SITEMAP_SIZE):
    """True once a buffer of `length` entries is due to be written."""
    return length == capacity

class SitemapGroup(object):
    """Group of sitemap files sharing a common name.

    Entries go through a bounded queue to a single consumer thread that
    owns the buffer and the file counter. Every time the buffer holds
    `capacity` entries it is handed to a new flush thread and replaced by an
    empty one, so writing and accumulation overlap. File names get a numeric
    suffix in the order buffers are handed off:

      - blog_1.xml.gz
      - blog_2.xml.gz

    `close_group` is mandatory: it writes the remaining entries (an empty
    file when nothing is left) and stops the consumer. Background flushes are
    not waited for unless `wait()` (or `close_group(wait=True)`) is used.

    :param folder: existing directory for the generated files
    :param name: common file name, a trailing ".xml.gz" is dropped
    :param capacity: entries per file
    :param saved: `SavedSitemaps` collecting the generated names, the
                  module-level `saved_sitemaps` by default
    """

    def __init__(self, folder, name, capacity=SITEMAP_SIZE, saved=None):
        if capacity < 1:
            raise ValueError("capacity must be positive, got %r" % capacity)
        try:
            os.listdir(folder)
        except OSError as e:
            raise ConfigurationError("Dir not allowed - %s: %s" % (folder, e))

        self.__folder = folder
        self.__name = sanitize_name(name)
        self.__capacity = capacity
        self.__saved = saved if saved is not None else saved_sitemaps

        self.__urls = []
        self.__group_count = 1
        self.__url_queue = queue.Queue(XML_QUEUE_SIZE)
        self.__closed = False
        self.__intake_lock = threading.Lock()

        self.__flushes = []
        self.__errors = []
        self.__flush_lock = threading.Lock()

        self.__consumer = threading.Thread(target=self.__consume,
                                           name="sitemap-group-%s" % self.__name,
                                           daemon=True)
        self.__consumer.start()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        if not self.__closed:
            self.close_group(wait=True)

    @property
    def name(self):
        return self.__name

    @property
    def folder(self):
        return self.__folder

    @property
    def capacity(self):
        return self.__capacity

    @property
    def closed(self):
        return self.__closed

    @property
    def errors(self):
        """Failures of the background flushes so far."""
        with self.__flush_lock:
            return list(self.__errors)

    def add(self, entry):
        """Queue one `UrlEntry`.

        :raises TypeError: `entry` is not a `UrlEntry`
        :raises SitemapGroupClosed: the group was already closed
        """
        if not isinstance(entry, UrlEntry):
            raise TypeError("UrlEntry expected, got %r" % type(entry).__name__)
        with self.__intake_lock:
            if self.__closed:
                raise SitemapGroupClosed("Group %s is closed" % self.__name)
            self.__url_queue.put(entry)

    def close_group(self, wait=False):
        """Write the entries not yet flushed as the last file of the group
        and stop accepting new ones.

        :param wait: also wait for the background flushes (see `wait`)
        :return: name of the last file
        :raises SitemapError: the last file could not be written, or with
                              `wait` a background flush failed
        """
        with self.__intake_lock:
            if self.__closed:
                raise SitemapGroupClosed("Group %s is closed" % self.__name)
            self.__closed = True
            self.__url_queue.put(_STOP)

        #The consumer drains everything queued before the stop mark
        self.__consumer.join()

        urls, self.__urls = self.__urls, []
        sitemap_name = self.__create(self.__next_name(), urls)

        if wait:
            self.wait()
        return sitemap_name

    def wait(self):
        """Block until every background flush of the group is finished.

        :raises Exception: first failure among the background flushes
        """
        while True:
            with self.__flush_lock:
                running = [t for t in self.__flushes if t.is_alive()]
            if not running:
                break
            for t in running:
                t.join()

        with self.__flush_lock:
            if self.__errors:
                raise self.__errors[0]

    def __consume(self):
        while True:
            entry = self.__url_queue.get()
            if entry is _STOP:
                break

            self.__urls.append(entry)

            if needs_flush(len(self.__urls), self.__capacity):
                self.__spawn_flush(self.__urls)
                self.__urls = []

    def __next_name(self):
        sitemap_name = "%s_%d%s" % (self.__name, self.__group_count, SITEMAP_SUFFIX)
        self.__group_count += 1
        return sitemap_name

    def __spawn_flush(self, urls):
        t = threading.Thread(target=self.__background_create,
                             args=(self.__next_name(), urls))
        with self.__flush_lock:
            self.__flushes = [f for f in self.__flushes if f.is_alive()]
            self.__flushes.append(t)
            t.start()

    def __background_create(self, sitemap_name, urls):
        try:
            self.__create(sitemap_name, urls)
        except Exception as e:
            logger.error("Sitemap %s not saved: %s", sitemap_name, e)
            with self.__flush_lock:
                self.__errors.append(e)

    def __create(self, sitemap_name, urls):
        path = os.path.join(self.__folder, sitemap_name)
        save_xml(create_sitemap_xml(urls), path)

        self.__saved.append(sitemap_name)
        logger.info("Sitemap created on %s", path)
        return sitemap_name
