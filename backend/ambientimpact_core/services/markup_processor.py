"""
Markup Processor Service
Flow: Validate → Wrap in root element → Parse → Dispatch → Serialize
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Union

import structlog
from bs4 import BeautifulSoup, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from ambientimpact_core.core.events import MARKUP_PROCESS, EventDispatcher
from ambientimpact_core.core.exceptions import InvalidMarkupError

logger = structlog.get_logger()

ROOT_ID = "ambientimpact-dom-root"


class SourceOrderFormatter(HTMLFormatter):
    """Minimal entity escaping, attributes kept in document order."""

    def __init__(self):
        super().__init__(entity_substitution=EntitySubstitution.substitute_xml)

    def attributes(self, tag):
        if tag.attrs is None:
            return []
        return list(tag.attrs.items())


SOURCE_ORDER = SourceOrderFormatter()


@dataclass(frozen=True)
class TranslatableMarkup:
    """Markup string with its placeholder arguments and options."""
    string: str
    arguments: Dict[str, Any] = field(default_factory=dict)
    options: Dict[str, Any] = field(default_factory=dict)

    def get_untranslated_string(self) -> str:
        return self.string

    def __str__(self) -> str:
        rendered = self.string
        for placeholder, value in self.arguments.items():
            rendered = rendered.replace(placeholder, str(value))
        return rendered


Markup = Union[str, TranslatableMarkup]


@dataclass
class DOMCrawlerEvent:
    """Carries the parsed root element; listeners may alter or replace it."""
    root: Tag

    def get_root(self) -> Tag:
        return self.root

    def set_root(self, root: Tag) -> None:
        self.root = root


class MarkupProcessor:
    """Runs markup through every markup_process listener."""

    def __init__(self, event_dispatcher: EventDispatcher):
        self.event_dispatcher = event_dispatcher

    def process(self, markup: Markup) -> Markup:
        if not isinstance(markup, (str, TranslatableMarkup)):
            raise InvalidMarkupError(markup)

        # Skip parsing entirely when nothing would look at the DOM.
        if not self.event_dispatcher.has_listeners(MARKUP_PROCESS):
            return markup

        if isinstance(markup, TranslatableMarkup):
            source = markup.get_untranslated_string()
        else:
            source = markup

        # The root element keeps top-level text from being wrapped by the
        # parser and gives listeners a single element to work from.
        soup = BeautifulSoup(f'<div id="{ROOT_ID}">{source}</div>', "html.parser")
        event = DOMCrawlerEvent(root=soup.find(id=ROOT_ID))

        event = self.event_dispatcher.dispatch(event, MARKUP_PROCESS)

        html = event.get_root().decode_contents(formatter=SOURCE_ORDER)
        logger.debug("Markup processed", length=len(html))

        if isinstance(markup, TranslatableMarkup):
            return TranslatableMarkup(html, dict(markup.arguments), dict(markup.options))
        return html
