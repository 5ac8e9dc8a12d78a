# SPDX-License-Identifier: Apache-2.0

import enum
import os

from pyramid.config import Configurator
from pyramid.settings import asbool


class Environment(str, enum.Enum):
    production = "production"
    development = "development"


def maybe_set(settings, name, envvar, coercer=None, default=None):
    if envvar in os.environ:
        value = os.environ[envvar]
        if coercer is not None:
            value = coercer(value)
        settings.setdefault(name, value)
    elif default is not None:
        settings.setdefault(name, default)


def configure(settings=None):
    if settings is None:
        settings = {}

    # Allow configuring the log level. See `formgate/logging.py` for more
    maybe_set(settings, "logging.level", "LOG_LEVEL")

    # Set the environment from an environment variable, if one hasn't already
    # been set.
    maybe_set(
        settings,
        "formgate.env",
        "FORMGATE_ENV",
        Environment,
        default=Environment.production,
    )

    maybe_set(settings, "site.hostname", "SITE_HOSTNAME")
    maybe_set(settings, "captcha.backend", "CAPTCHA_BACKEND")
    maybe_set(settings, "captcha.transport", "CAPTCHA_TRANSPORT")
    maybe_set(
        settings,
        "captcha.allow_url_fetch",
        "CAPTCHA_ALLOW_URL_FETCH",
        coercer=asbool,
        default=True,
    )
    maybe_set(settings, "recaptcha.site_key", "RECAPTCHA_SITE_KEY", default="")
    maybe_set(settings, "recaptcha.secret_key", "RECAPTCHA_SECRET_KEY", default="")
    # Kept as a string, it is only parsed and clamped when a service is made.
    maybe_set(settings, "recaptcha.threshold", "RECAPTCHA_THRESHOLD", default="0.5")
    maybe_set(settings, "recaptcha.verify_url", "RECAPTCHA_VERIFY_URL")
    maybe_set(settings, "recaptcha.timeout", "RECAPTCHA_TIMEOUT", coercer=float)
    maybe_set(settings, "http.max_retries", "HTTP_MAX_RETRIES", coercer=int)

    # Tokens are bound to the host name of the site that rendered the form.
    maybe_set(
        settings,
        "recaptcha.expected_hostname",
        "RECAPTCHA_EXPECTED_HOSTNAME",
        default=settings.get("site.hostname"),
    )

    config = Configurator(settings=settings)
    config.include("formgate")

    # Finally, commit all of our changes
    config.commit()

    return config
