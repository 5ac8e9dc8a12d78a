# SPDX-License-Identifier: Apache-2.0

import collections

from urllib.parse import urlencode

from pyramid.renderers import render

SCRIPT_SRC_URL = "https://www.google.com/recaptcha/api.js"
FORM_SELECTOR = "form[name='subscribeform']"
TOKEN_FIELD = "token"

# Marks the re-submitted form as a real subscription attempt.
SUBMISSION_MARKER = ("subscribe", "1")

ChallengeDirective = collections.namedtuple(
    "ChallengeDirective",
    (
        "script_src",
        "site_key",
        "action",
        "form_selector",
        "token_field",
        "hidden_fields",
    ),
)


def render_challenge(
    site_key, action, *, script_src_url=SCRIPT_SRC_URL, form_selector=FORM_SELECTOR
):
    """
    Describe what the client has to do to attach a token to a submission:
    load the script bound to ``site_key``, intercept the submit of the form
    matched by ``form_selector``, obtain a token bound to ``action``, add it
    together with ``hidden_fields`` and submit the form once more.
    """
    return ChallengeDirective(
        script_src=f"{script_src_url}?{urlencode({'render': site_key})}",
        site_key=site_key,
        action=action,
        form_selector=form_selector,
        token_field=TOKEN_FIELD,
        hidden_fields=(("action", action), SUBMISSION_MARKER),
    )


def render_html(directive, *, request=None):
    return render(
        "captcha/recaptcha-v3.html", {"challenge": directive}, request=request
    )
