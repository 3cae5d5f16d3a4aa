"""
Image Cache - Downloads and caches cover art.

Covers are fetched in background threads; until they arrive callers get
None and draw a placeholder.
"""
import time
import logging
import threading
from typing import Optional, Dict, Tuple
from io import BytesIO

import pygame
import requests
from PIL import Image, ImageFilter, ImageOps

from ..config import IMAGE_CACHE_MAX_SIZE, BACKDROP_BLUR_RADIUS

logger = logging.getLogger(__name__)


class ImageCache:
    """Cover art cache keyed by (url, size, variant)."""

    def __init__(self, max_size: int = IMAGE_CACHE_MAX_SIZE):
        self.max_size = max_size
        self.cache: Dict[str, pygame.Surface] = {}
        self._access_times: Dict[str, float] = {}  # Track last access for LRU eviction
        self._images: Dict[str, Image.Image] = {}  # Decoded originals by URL
        self._failed: set = set()
        self.loading: set = set()
        self._loading_lock = threading.Lock()

    def get(self, url: Optional[str], size: int) -> Optional[pygame.Surface]:
        """Square cover scaled to size, or None while missing."""
        return self._variant(url, (size, size), 'cover')

    def get_backdrop(self, url: Optional[str], size: Tuple[int, int]) -> Optional[pygame.Surface]:
        """Blurred grayscale fill for backgrounds, or None while missing."""
        return self._variant(url, size, 'backdrop')

    def _variant(self, url: Optional[str], size: Tuple[int, int], kind: str) -> Optional[pygame.Surface]:
        if not url or not url.startswith('http') or url in self._failed:
            return None

        cache_key = f'{url}_{size[0]}x{size[1]}_{kind}'
        if cache_key in self.cache:
            self._access_times[cache_key] = time.time()
            return self.cache[cache_key]

        image = self._images.get(url)
        if image is None:
            self._request(url)
            return None

        self._evict_if_needed()
        try:
            surface = self._render(image, size, kind)
        except Exception as e:
            logger.warning(f'Could not render {kind} for {url}: {e}')
            self._failed.add(url)
            return None
        self.cache[cache_key] = surface
        self._access_times[cache_key] = time.time()
        return surface

    def _render(self, image: Image.Image, size: Tuple[int, int], kind: str) -> pygame.Surface:
        if kind == 'backdrop':
            img = ImageOps.fit(image, size, Image.Resampling.BILINEAR)
            img = ImageOps.grayscale(img).convert('RGBA')
            img = img.filter(ImageFilter.GaussianBlur(BACKDROP_BLUR_RADIUS))
        else:
            img = image.resize(size, Image.Resampling.LANCZOS)
        return pygame.image.fromstring(img.tobytes(), img.size, 'RGBA').convert_alpha()

    def _request(self, url: str):
        with self._loading_lock:
            if url in self.loading:
                return
            self.loading.add(url)
        threading.Thread(target=self._download, args=(url,), daemon=True).start()

    def _download(self, url: str):
        """Download and decode an image in the background."""
        try:
            resp = requests.get(url, timeout=10)
            resp.raise_for_status()
            img = Image.open(BytesIO(resp.content)).convert('RGBA')
            self._images[url] = img
        except (requests.RequestException, OSError) as e:
            logger.warning(f'Error downloading image {url}: {e}')
            self._failed.add(url)
        finally:
            with self._loading_lock:
                self.loading.discard(url)

    def _evict_if_needed(self):
        """Evict least recently used surfaces if the cache is too large."""
        if len(self.cache) <= self.max_size:
            return
        evictable = sorted(self.cache.keys(), key=lambda key: self._access_times.get(key, 0))
        for key in evictable[:len(self.cache) - self.max_size + 10]:
            del self.cache[key]
            self._access_times.pop(key, None)
        # Originals are small compared to scaled surfaces, but keep them bounded too
        if len(self._images) > self.max_size:
            for url in list(self._images)[:len(self._images) - self.max_size]:
                del self._images[url]
        logger.debug(f'Evicted LRU images, {len(self.cache)} cached')
