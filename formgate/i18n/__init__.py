# SPDX-License-Identifier: Apache-2.0

from babel.core import Locale
from pyramid.i18n import TranslationStringFactory, default_locale_negotiator
from pyramid.threadlocal import get_current_request

# Catalogs are added under formgate/locale/ as they are translated.
KNOWN_LOCALES = {
    identifier: Locale.parse(identifier, sep="_")
    for identifier in [
        "en",  # English
    ]
}

_translation_factory = TranslationStringFactory("formgate")


class LazyString:
    def __init__(self, fn, *args, **kwargs):
        self.fn = fn
        self.args = args
        self.mapping = kwargs.get("mapping", {})
        self.kwargs = kwargs

    def __json__(self, request):
        return str(self)

    def __str__(self):
        return self.fn(*self.args, **self.kwargs)

    def __eq__(self, other):
        return (
            self.args == other.args and self.kwargs == other.kwargs
            if isinstance(other, LazyString)
            else self.args == (other,) and not self.kwargs
        )


def _locale(request):
    """
    Gets a babel.core:Locale() object for this request.
    """
    return KNOWN_LOCALES.get(request.locale_name, KNOWN_LOCALES["en"])


def _negotiate_locale(request):
    locale_name = default_locale_negotiator(request)
    if locale_name in KNOWN_LOCALES:
        return locale_name

    if request.accept_language:
        return request.accept_language.best_match(tuple(KNOWN_LOCALES.keys()))

    return None


def _localize(request, message, **kwargs):
    """
    To be used on the request directly, e.g. `request._(message)`
    """
    tstring = _translation_factory(message, **kwargs)
    if request is None:
        # Outside of a request (the CLI, for instance) there is no localizer,
        # so fall back to the untranslated message.
        return tstring.interpolate()
    return request.localizer.translate(tstring)


def localize(message, **kwargs):
    """
    To be used when we don't have the request context, e.g.
    `from formgate.i18n import localize as _`
    """

    def _lazy_localize(message, **kwargs):
        request = get_current_request()
        return _localize(request, message, **kwargs)

    return LazyString(_lazy_localize, message, **kwargs)


def includeme(config):
    # Add the request attributes
    config.add_request_method(_locale, name="locale", reify=True)
    config.add_request_method(_localize, name="_")

    # Register our translation directory.
    config.add_translation_dirs("formgate:locale/")

    config.set_locale_negotiator(_negotiate_locale)
