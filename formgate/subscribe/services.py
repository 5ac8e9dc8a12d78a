# SPDX-License-Identifier: Apache-2.0

import structlog

from pyramid.renderers import render
from pyramid.settings import asbool
from webob.multidict import MultiDict
from zope.interface import implementer

from formgate.captcha.challenge import render_html
from formgate.captcha.interfaces import ICaptchaService
from formgate.captcha.recaptcha import EXPECTED_ACTION
from formgate.subscribe.forms import (
    INCLUDE_FLAG,
    NOT_ASUBSCRIBE_FLAG,
    SubscribePageCaptchaForm,
)
from formgate.subscribe.interfaces import ISubscribePageDataStore, ISubscribePageHooks

logger = structlog.get_logger(__name__)

# The route used by subscriptions posted from outside of the subscribe page.
ASUBSCRIBE_PAGE = "asubscribe"


@implementer(ISubscribePageHooks)
class SubscribePageHooks:
    def __init__(self, *, captcha_service, request):
        self.captcha_service = captcha_service
        self.request = request

    @classmethod
    def create_service(cls, context, request):
        return cls(
            captcha_service=request.find_service(ICaptchaService, name="captcha"),
            request=request,
        )

    def display_subscription_choice(self, page_data, user_id=0):
        if not asbool(page_data.get(INCLUDE_FLAG)):
            return ""

        directive = self.captcha_service.challenge(EXPECTED_ACTION)
        if directive is None:
            return ""

        return render_html(directive, request=self.request)

    def validate_subscription_page(self, page_data, submitted, client_ip, page=None):
        # Nothing was posted, so there is nothing to verify.
        if not submitted:
            return ""

        if not asbool(page_data.get(INCLUDE_FLAG)):
            return ""

        if page == ASUBSCRIBE_PAGE and asbool(page_data.get(NOT_ASUBSCRIBE_FLAG)):
            return ""

        # Until both keys are entered verification is off, submissions are
        # accepted unchecked.
        if not self.captcha_service.enabled:
            return ""

        logger.debug("subscribe.submitted", submitted=dict(submitted))

        token = submitted.get("token")
        token = "" if token is None else str(token)

        decision = self.captcha_service.validate(token, remote_ip=client_ip)
        return decision.message

    def display_subscribepage_edit(self, page_data):
        form = SubscribePageCaptchaForm(
            data={
                INCLUDE_FLAG: asbool(page_data.get(INCLUDE_FLAG, False)),
                NOT_ASUBSCRIBE_FLAG: asbool(page_data.get(NOT_ASUBSCRIBE_FLAG, True)),
            }
        )
        return render(
            "subscribe/edit-captcha.html", {"form": form}, request=self.request
        )

    def process_subscribepage_edit(self, page_id, submitted):
        form = SubscribePageCaptchaForm(formdata=MultiDict(submitted))
        store = self.request.find_service(ISubscribePageDataStore)
        for name in (INCLUDE_FLAG, NOT_ASUBSCRIBE_FLAG):
            store.save(page_id, name, "1" if form[name].data else "0")
