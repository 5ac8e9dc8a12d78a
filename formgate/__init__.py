# SPDX-License-Identifier: Apache-2.0

from formgate.__about__ import (  # noqa: F401
    __author__,
    __copyright__,
    __email__,
    __license__,
    __summary__,
    __title__,
    __uri__,
    __version__,
)


def includeme(config):
    # Allow a host Pyramid application to pull in the whole gate with a single
    # ``config.include("formgate")``.
    config.include("pyramid_services")

    # The challenge and the page edit options are rendered with Jinja2.
    config.include("pyramid_jinja2")
    config.add_settings({"jinja2.newstyle": True})
    config.add_settings({"jinja2.i18n.domain": "formgate"})
    config.add_settings({"jinja2.lstrip_blocks": True})
    config.add_settings({"jinja2.trim_blocks": True})
    config.add_jinja2_renderer(".html")
    config.add_jinja2_search_path("formgate:templates", name=".html")

    config.include(".logging")
    config.include(".http")
    config.include(".i18n")
    config.include(".captcha")
    config.include(".subscribe")
