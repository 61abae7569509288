"""Post-render media load confirmation.

A static host has no browser to report load events, so it asks a probe
whether each image/media source would load and fires the matching event on
the node. Media players are additionally watched by a timer: if neither a
load nor an error signal arrives within the window, the player is flagged as
timed out.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

import requests
from PIL import Image

from cardviewer.html.block import DEFAULT_MEDIA_TIMEOUT_S
from cardviewer.html.rewrite import IMAGE_EXTENSIONS
from cardviewer.nodes import Node

logger = logging.getLogger(__name__)

LOAD_EVENTS = ("load", "loadeddata")

# Formats Pillow can verify (svg is text, only its existence is checked)
RASTER_EXTENSIONS = {f".{ext}" for ext in IMAGE_EXTENSIONS if ext != "svg"}


class MediaLoadMonitor:
    """Owns the load confirmation timers for media elements.

    Each node settles once: the first of load, error or timeout wins and
    later signals are ignored. Timers and settled nodes are keyed by ``id()``
    and hold a reference to their node so the id cannot be reused while the
    entry exists. ``cancel_all()`` forgets both.
    """

    def __init__(self, timeout_s: float = DEFAULT_MEDIA_TIMEOUT_S):
        self.timeout_s = timeout_s
        self._timers: dict[int, tuple[Node, threading.Timer]] = {}
        self._settled: dict[int, Node] = {}
        self._lock = threading.RLock()

    def watch(self, node: Node, parent: Optional[Node]) -> None:
        """Start the confirmation timer for ``node``."""
        timer = threading.Timer(self.timeout_s, self._expire, args=(node, parent))
        timer.daemon = True
        with self._lock:
            if id(node) in self._settled:
                return
            self._cancel(node)
            self._timers[id(node)] = (node, timer)
        timer.start()

    def loaded(self, node: Node, parent: Optional[Node] = None) -> None:
        with self._lock:
            if not self._settle(node):
                return
            for event in LOAD_EVENTS:
                if node.fire(event, parent) is not None:
                    break

    def failed(self, node: Node, parent: Optional[Node] = None) -> None:
        with self._lock:
            if not self._settle(node):
                return
            logger.debug(f"Media failed to load: {node.attrs.get('src', '')}")
            node.fire("error", parent)

    def pending(self) -> int:
        with self._lock:
            return len(self._timers)

    def join(self) -> None:
        """Block until every outstanding timer has fired or been cancelled."""
        with self._lock:
            timers = [timer for _, timer in self._timers.values()]
        for timer in timers:
            timer.join()

    def cancel_all(self) -> None:
        with self._lock:
            for _, timer in self._timers.values():
                timer.cancel()
            self._timers.clear()
            self._settled.clear()

    def _expire(self, node: Node, parent: Optional[Node]) -> None:
        with self._lock:
            if not self._settle(node):
                return
            if node.attrs.get("data-loaded") == "true":
                return
            logger.warning(f"Media load timed out: {node.attrs.get('src', '')}")
            node.fire("timeout", parent)

    def _settle(self, node: Node) -> bool:
        if id(node) in self._settled:
            return False
        self._settled[id(node)] = node
        self._cancel(node)
        return True

    def _cancel(self, node: Node) -> None:
        entry = self._timers.pop(id(node), None)
        if entry is not None:
            entry[1].cancel()


class MediaProbe:
    """Decides whether a resolved media source would load.

    Args:
        timeout_s: Timeout for remote HEAD requests
        base_dir: Directory relative local paths are taken from
        session: requests session to reuse
    """

    def __init__(
        self,
        timeout_s: float = DEFAULT_MEDIA_TIMEOUT_S,
        base_dir: Optional[Path] = None,
        session: Optional[requests.Session] = None,
    ):
        self.timeout_s = timeout_s
        self.base_dir = base_dir
        self._session = session or requests.Session()

    def __call__(self, src: str) -> bool:
        if not src:
            return False
        lowered = src.lower()
        if lowered.startswith(("data:", "blob:")):
            return True
        if lowered.startswith(("http://", "https://")):
            return self._check_remote(src)
        if src.startswith("//"):
            return self._check_remote(f"https:{src}")
        return self._check_local(self._local_path(src))

    def _check_remote(self, url: str) -> bool:
        try:
            response = self._session.head(url, allow_redirects=True, timeout=self.timeout_s)
        except requests.RequestException as e:
            logger.debug(f"Remote media check failed for {url}: {e}")
            return False
        return response.status_code < 400

    def _local_path(self, src: str) -> Path:
        if src.lower().startswith("file:"):
            return Path(url2pathname(unquote(urlparse(src).path)))
        path = Path(unquote(src.split("?", 1)[0]))
        if not path.is_absolute() and self.base_dir is not None:
            path = self.base_dir / path
        return path

    def _check_local(self, path: Path) -> bool:
        if not path.is_file():
            return False
        if path.suffix.lower() in RASTER_EXTENSIONS:
            try:
                with Image.open(path) as image:
                    image.verify()
            except (OSError, SyntaxError, ValueError) as e:
                logger.debug(f"Image verification failed for {path}: {e}")
                return False
        return True


def check_media(
    root: Node,
    probe: Callable[[str], bool],
    monitor: Optional[MediaLoadMonitor] = None,
    max_workers: int = 4,
) -> dict[str, int]:
    """Probe every media element in ``root`` and fire load/error events.

    Args:
        root: Rendered tree (mutated in place)
        probe: Callable returning True if a source loads
        monitor: Timer owner for media players (a fresh one if omitted)
        max_workers: Parallel probes

    Returns:
        Counts of loaded and failed elements
    """
    monitor = monitor or MediaLoadMonitor()
    targets = []
    for node, parent in root.walk():
        if "timeout" in node.events:
            monitor.watch(node, parent)
        if "error" in node.events and node.attrs.get("src"):
            targets.append((node, parent))

    def run(node: Node, parent: Optional[Node]) -> bool:
        ok = probe(node.attrs["src"])
        if ok:
            monitor.loaded(node, parent)
        else:
            monitor.failed(node, parent)
        return ok

    counts = {"loaded": 0, "failed": 0}
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = [pool.submit(run, node, parent) for node, parent in targets]
        for future in as_completed(futures):
            counts["loaded" if future.result() else "failed"] += 1
    return counts
