"""Time-boxed external price quote with stale-on-failure fallback."""

import time
from typing import Callable, Optional
import requests
import structlog

from advc_explorer.models.config import ExplorerConfig
from advc_explorer.models.explorer import PriceCacheEntry
from advc_explorer.utils.metrics import metrics

logger = structlog.get_logger(__name__)

DEFAULT_PRICE = "0.000000"


class PriceFeedError(Exception):
    """External price feed request failed or returned an unusable payload."""
    pass


class PriceCache:
    """Single-slot USD price cache.

    A cached quote is served unchanged while younger than the cache duration.
    Past that a refresh is attempted; if it fails the stale quote is served.
    With nothing cached and a failing feed, ``DEFAULT_PRICE`` is returned.

    The slot is replaced by a single assignment of an immutable entry, so
    concurrent refreshes resolve as last-writer-wins.
    """
    
    def __init__(self, config: ExplorerConfig,
                 session: Optional[requests.Session] = None,
                 clock: Callable[[], float] = time.time):
        self.config = config
        self.cache_duration = config.price_cache_seconds
        self.clock = clock
        self.session = session or requests.Session()
        self.session.headers.update({
            'Accept': 'application/json',
            'User-Agent': 'AdventureCoin-Explorer/1.0'
        })
        self._entry: Optional[PriceCacheEntry] = None
        self.logger = logger.bind(component="price_cache")
    
    @property
    def entry(self) -> Optional[PriceCacheEntry]:
        return self._entry
    
    def fetch_price(self) -> float:
        """Fetch the current USD quote from the ticker endpoint."""
        try:
            response = self.session.get(self.config.price_api_url, timeout=self.config.price_timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise PriceFeedError(f"Price request failed: {e}") from e
        
        try:
            price = data["quotes"]["USD"]["price"]
        except (KeyError, TypeError) as e:
            raise PriceFeedError("Invalid price response format") from e
        
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            raise PriceFeedError("Invalid price response format")
        return float(price)
    
    def get_price(self) -> str:
        """Current USD price as a six-decimal string."""
        entry = self._entry
        now = self.clock()
        
        if entry is not None and entry.age(now) < self.cache_duration:
            metrics.price_cache.labels(result="hit").inc()
            return entry.price
        
        try:
            price = self.fetch_price()
        except PriceFeedError as e:
            if entry is not None:
                self.logger.warning("Price refresh failed, serving stale quote",
                                    error=str(e), age_seconds=round(entry.age(now)))
                metrics.price_cache.labels(result="stale").inc()
                return entry.price
            self.logger.warning("Price fetch failed, serving default", error=str(e))
            metrics.price_cache.labels(result="default").inc()
            return DEFAULT_PRICE
        
        fresh = PriceCacheEntry(price=f"{price:.6f}", timestamp=self.clock())
        self._entry = fresh
        metrics.price_cache.labels(result="refresh").inc()
        self.logger.debug("Price refreshed", price=fresh.price)
        return fresh.price
    
    def close(self):
        self.session.close()


def calculate_usd_value(amount: float, price: str) -> str:
    """USD value of a coin amount, rounded to cents."""
    return f"{amount * float(price):.2f}"
