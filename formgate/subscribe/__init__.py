# SPDX-License-Identifier: Apache-2.0

from formgate.subscribe.interfaces import ISubscribePageHooks
from formgate.subscribe.services import SubscribePageHooks


def includeme(config):
    config.register_service_factory(
        SubscribePageHooks.create_service,
        ISubscribePageHooks,
        name="subscribe_captcha",
    )
