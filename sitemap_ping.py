import asyncio
import logging

import aiohttp

from conf import PING_ENDPOINTS, PING_TIMEOUT
from sitemap_obj import NetworkError

logger = logging.getLogger(__name__)

class PingResult(object):
    """Outcome of one search engine notification: HTTP status, or the
    `NetworkError` when no response was received.
    """

    def __init__(self, url, status=None, reason=None, error=None):
        self.url = url
        self.status = status
        self.reason = reason
        self.error = error

    @property
    def ok(self):
        return self.error is None

    def __repr__(self):
        if self.error:
            return "PingResult(%r, error=%s)" % (self.url, self.error)
        return "PingResult(%r, status=%d)" % (self.url, self.status)

async def _ping(session, endpoint, index_location):
    try:
        async with session.get(endpoint, params={"sitemap": index_location}) as r:
            return PingResult(str(r.url), status=r.status, reason=r.reason)
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        return PingResult(endpoint, error=NetworkError(endpoint, e))

async def ping_all(index_location, endpoints=None):
    """Notify every endpoint concurrently, yielding a `PingResult` as soon as
    each request is over. Requests are not retried.

    :param index_location: public URL of the sitemap index
    :param endpoints: ping URLs, `PING_ENDPOINTS` by default
    """
    if endpoints is None:
        endpoints = PING_ENDPOINTS

    timeout = aiohttp.ClientTimeout(total=PING_TIMEOUT)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        tasks = [asyncio.ensure_future(_ping(session, e, index_location))
                 for e in endpoints]
        for next_done in asyncio.as_completed(tasks):
            yield await next_done

async def _report(index_location, endpoints):
    results = []
    async for result in ping_all(index_location, endpoints):
        if result.ok:
            logger.info("%s status: %d %s", result.url, result.status, result.reason)
        else:
            logger.warning("%s", result.error)
        results.append(result)
    return results

def ping_search_engines(index_location, endpoints=None):
    """Sends a ping to search engines indicating that the index has been
    updated. Failed requests are logged and never raised.

    :return: list of `PingResult` in completion order
    """
    return asyncio.run(_report(index_location, endpoints))
