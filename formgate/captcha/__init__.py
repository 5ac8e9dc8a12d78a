# SPDX-License-Identifier: Apache-2.0

import structlog

from .interfaces import ICaptchaService

logger = structlog.get_logger(__name__)


class CaptchaError(ValueError):
    pass


def includeme(config):
    # Imported here, the transports module needs CaptchaError from this one.
    from .transports import dependency_check, resolve_transport

    settings = config.registry.settings

    # Pick the delivery mechanism once per configuration load. Without one the
    # service is still registered, every verification it attempts is then
    # rejected with TransportUnavailable.
    transport_class = resolve_transport(settings, maybe_dotted=config.maybe_dotted)
    if transport_class is None:
        logger.error(
            "captcha.transport_unavailable", checks=dependency_check(settings)
        )
    else:
        logger.debug("captcha.transport_selected", transport=transport_class.name)
    config.add_settings({"captcha.transport_class": transport_class})

    # Register our Captcha service
    captcha_class = config.maybe_dotted(
        settings.get("captcha.backend", "formgate.captcha.recaptcha.Service")
    )
    config.register_service_factory(
        captcha_class.create_service,
        ICaptchaService,
        # Service requires a name for lookup in Jinja2 template,
        # where the Interface object is not available.
        name="captcha",
    )
