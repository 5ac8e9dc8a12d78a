# SPDX-License-Identifier: Apache-2.0

import collections

from zope.interface import Attribute, Interface

Verdict = collections.namedtuple(
    "Verdict",
    ("success", "action", "hostname", "score", "challenge_ts", "error_codes"),
)

Decision = collections.namedtuple("Decision", ("accepted", "message"))


class ITransport(Interface):
    name = Attribute("A short label used in logs and the dependency report.")

    def post(url, body, *, timeout):
        """
        Deliver ``body`` (a mapping) form-encoded to ``url`` and return the raw
        response body as bytes. Raises TransportError on any network failure,
        timeout or non-2xx response.
        """


class ICaptchaService(Interface):
    def create_service(context, request):
        """
        Create the service, given the context and request for which it is being
        created for, passing a name for settings.
        """

    def enabled() -> bool:
        """
        Return whether both the site key and the secret key are configured.
        """

    def csp_policy() -> dict[str, list[str]]:
        """
        Return the CSP policy appropriate for the Captcha service.
        """

    def challenge(action):
        """
        Return the ChallengeDirective a form needs to obtain a token bound to
        ``action``, or None when the service is disabled.
        """

    def verify_response(response, remote_ip=None) -> Verdict:
        """
        Verify the response token with the remote service and return the
        successful Verdict, raising a RecaptchaError otherwise.
        """

    def validate(response, remote_ip=None) -> Decision:
        """
        Verify the response token and reduce the outcome to a Decision. Never
        raises.
        """
