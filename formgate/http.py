# SPDX-License-Identifier: Apache-2.0

import threading

import requests

from requests.adapters import HTTPAdapter

from formgate.__about__ import __title__, __version__

USER_AGENT = f"{__title__}/{__version__}"


class ThreadLocalSessionFactory:
    """
    Hands out one pooled ``requests.Session`` per thread, so concurrent
    submissions never share connection state.
    """

    def __init__(self, config=None, max_retries=1):
        self.config = config
        self.max_retries = max_retries
        self._local = threading.local()

    def __call__(self, request):
        try:
            session = self._local.session
            request.log.debug("reusing existing session")
            return session
        except AttributeError:
            request.log.debug("creating new session", max_retries=self.max_retries)

            adapter = HTTPAdapter(max_retries=self.max_retries)

            session = requests.Session()
            session.mount("http://", adapter)
            session.mount("https://", adapter)
            session.headers["User-Agent"] = USER_AGENT

            if self.config is not None:
                for attr, val in self.config.items():
                    assert hasattr(session, attr)
                    setattr(session, attr, val)

            self._local.session = session
            return session


def includeme(config):
    settings = config.registry.settings
    config.add_request_method(
        ThreadLocalSessionFactory(
            settings.get("http"),
            max_retries=int(settings.get("http.max_retries", 1)),
        ),
        name="http",
        reify=True,
    )
