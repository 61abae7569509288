"""Processor registry and host lifecycle.

The host owns everything stateful around the pure render core: the settings,
which fence languages have a processor, and the media load timers. Whether
the ``html`` processor is active is read off the registry, never stored
separately.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from cardviewer.assets.resolver import AssetPathResolver
from cardviewer.assets.store import ContentStore
from cardviewer.cards.layout import render_card
from cardviewer.cards.record import CARD_TYPES
from cardviewer.html.block import render_html_block
from cardviewer.html.media import MediaLoadMonitor
from cardviewer.messages import get_messages
from cardviewer.nodes import Node
from cardviewer.plugin.errors import create_error_handler, render_safely, safe_execute
from cardviewer.plugin.settings import Settings, save_settings

logger = logging.getLogger(__name__)

HTML_LANGUAGE = "html"
CARD_LANGUAGE_PREFIX = "card-"

# (source, source_dir) -> rendered block
Processor = Callable[[str, str], Node]
ConfirmFn = Callable[[str, str], bool]


class HostError(Exception):
    """Invalid processor registration."""
    pass


class ProcessorRegistry:
    """Fence language -> processor."""

    def __init__(self):
        self._processors: dict[str, Processor] = {}

    def register(self, language: str, processor: Processor) -> None:
        if language in self._processors:
            raise HostError(f"Processor already registered for '{language}'")
        self._processors[language] = processor

    def get(self, language: str) -> Optional[Processor]:
        return self._processors.get(language)

    def languages(self) -> list[str]:
        return list(self._processors)

    def clear(self) -> None:
        self._processors.clear()

    def __contains__(self, language: str) -> bool:
        return language in self._processors

    def __len__(self) -> int:
        return len(self._processors)


class CardViewerHost:
    """Ties a content store and settings to the block processors.

    Args:
        store: Content store assets are resolved against (None: nothing resolves)
        settings: Active settings (defaults if omitted)
        settings_path: Where settings changes are persisted (not persisted if None)
    """

    def __init__(
        self,
        store: Optional[ContentStore] = None,
        settings: Optional[Settings] = None,
        settings_path: Optional[Path] = None,
    ):
        self.store = store
        self.settings = settings or Settings()
        self.settings_path = settings_path
        self.registry = ProcessorRegistry()
        self.monitor = MediaLoadMonitor(self.settings.media_timeout_s)
        self.error_handler = create_error_handler()
        self.is_loaded = False

    @property
    def messages(self) -> dict[str, str]:
        return get_messages(self.settings.locale)

    @property
    def html_processor_registered(self) -> bool:
        return HTML_LANGUAGE in self.registry

    def resolver_for(self, source_dir: str = "") -> AssetPathResolver:
        return AssetPathResolver(self.store, source_dir)

    def load(self) -> None:
        """Register every processor. A failing group does not stop the others."""
        self.monitor = MediaLoadMonitor(self.settings.media_timeout_s)
        for name, register in (
            ("Card Processors", self._register_card_processors),
            ("HTML Processor", self._register_html_processor),
        ):
            safe_execute(register, self.error_handler, name)
        self.is_loaded = True
        logger.debug(f"Host loaded with processors: {', '.join(self.registry.languages())}")

    def unload(self) -> None:
        self.monitor.cancel_all()
        self.registry.clear()
        self.is_loaded = False

    def restart(self) -> None:
        self.unload()
        self.load()

    def update_html_processor(self) -> None:
        """Register the ``html`` processor if it was enabled since loading.

        A registered processor is only removed by a restart.
        """
        if self.settings.enable_html_parsing and not self.html_processor_registered:
            self._register_html_processor()

    def set_html_parsing(self, enabled: bool, confirm: ConfirmFn) -> bool:
        """Toggle HTML parsing.

        Disabling needs a restart, so it asks first; enabling applies at once.

        Args:
            enabled: New value
            confirm: Called with (title, message); must return True to proceed

        Returns:
            True if the setting changed, False if the user cancelled
        """
        if not enabled and self.settings.enable_html_parsing:
            messages = self.messages
            if not confirm(messages["confirm_disable_title"], messages["confirm_disable_message"]):
                logger.info("Disabling HTML parsing cancelled")
                return False
            self.settings.enable_html_parsing = False
            self.save()
            logger.info("HTML parsing disabled, restarting")
            self.restart()
            return True

        self.settings.enable_html_parsing = enabled
        self.save()
        self.update_html_processor()
        if enabled:
            logger.info("HTML parsing enabled")
        return True

    def save(self) -> None:
        if self.settings_path is not None:
            save_settings(self.settings, self.settings_path)

    def _register_card_processors(self) -> None:
        for card_type in CARD_TYPES:
            self.registry.register(f"{CARD_LANGUAGE_PREFIX}{card_type}", self.card_processor(card_type))

    def _register_html_processor(self) -> None:
        if self.settings.enable_html_parsing and not self.html_processor_registered:
            self.registry.register(HTML_LANGUAGE, self._process_html)

    def card_processor(self, card_type: str) -> Processor:
        def process(source: str, source_dir: str = "") -> Node:
            messages = self.messages
            return render_safely(
                lambda: render_card(card_type, source, self.resolver_for(source_dir), messages),
                messages["card_failed"].format(type=card_type),
            )

        return process

    def _process_html(self, source: str, source_dir: str = "") -> Node:
        messages = self.messages
        return render_safely(
            lambda: render_html_block(
                source, self.resolver_for(source_dir), messages, self.settings.media_timeout_s
            ),
            messages["html_failed"],
        )
