"""
Current-language context
The language is request state, so it lives in a context variable that the
language middleware sets for the duration of each request.
"""

import re
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterable, Iterator, Optional

_current_language: ContextVar[Optional[str]] = ContextVar("current_language", default=None)

_PRIMARY_SUBTAG = re.compile(r"^[a-z]{1,8}$")


class LanguageManager:
    """
    Resolves the language of the current execution context.

    When a list of languages is given, anything outside it resolves to the
    default language. The language is part of permanent cache ids, so the
    service always passes the configured list.
    """

    def __init__(self, default_language: str = "en", languages: Optional[Iterable[str]] = None):
        self.default_language = default_language
        self.languages = None if languages is None else set(languages) | {default_language}

    def get_current_language(self) -> str:
        language = _current_language.get() or self.default_language
        if self.languages is not None and language not in self.languages:
            return self.default_language
        return language

    @contextmanager
    def use_language(self, language: str) -> Iterator[str]:
        """Temporarily switch the current language."""
        token = _current_language.set(language)
        try:
            yield language
        finally:
            _current_language.reset(token)


def set_current_language(language: Optional[str]):
    """Set the current language; returns a token for reset_current_language()."""
    return _current_language.set(language)


def reset_current_language(token) -> None:
    _current_language.reset(token)


def parse_accept_language(header: Optional[str]) -> Optional[str]:
    """Return the primary subtag of the first Accept-Language entry."""
    if not header:
        return None
    first = header.split(",")[0].split(";")[0].strip()
    if not first or first == "*":
        return None
    primary = first.split("-")[0].lower()
    if not _PRIMARY_SUBTAG.match(primary):
        return None
    return primary
