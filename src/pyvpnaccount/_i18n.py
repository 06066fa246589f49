"""Translation catalogs for user-facing strings."""

from __future__ import annotations

import functools
import gettext

from pyvpnaccount._constants import GETTEXT_DOMAIN


@functools.lru_cache(maxsize=16)
def translation_for(locale: str, localedir: str | None = None) -> gettext.NullTranslations:
    """Return the catalog for *locale*, falling back to untranslated strings."""
    languages = [locale] if locale else None
    return gettext.translation(GETTEXT_DOMAIN, localedir=localedir, languages=languages, fallback=True)


def format_remaining_time(seconds: float, translation: gettext.NullTranslations) -> str:
    """Render a remaining duration the way the expiry reminder phrases it.

    Days are used once at least one full day remains, then hours, then
    minutes. Anything under a minute reads as "less than a minute".
    """
    total = int(seconds)
    days, rest = divmod(total, 24 * 3600)
    if days >= 1:
        return translation.ngettext("%(count)d day", "%(count)d days", days) % {"count": days}
    hours = rest // 3600
    if hours >= 1:
        return translation.ngettext("%(count)d hour", "%(count)d hours", hours) % {"count": hours}
    minutes = rest // 60
    if minutes >= 1:
        return translation.ngettext("%(count)d minute", "%(count)d minutes", minutes) % {"count": minutes}
    return translation.gettext("less than a minute")
