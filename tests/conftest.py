# SPDX-License-Identifier: Apache-2.0

from pathlib import Path

import click.testing
import pretend
import pyramid.testing
import pytest
import requests

from jinja2 import Environment, FileSystemLoader

import formgate

from formgate.captcha import transports

_TEMPLATES = Path(formgate.__file__).parent / "templates"


@pytest.fixture
def recaptcha_settings():
    return {
        "recaptcha.site_key": "site_key_value",
        "recaptcha.secret_key": "secret_key_value",
        "recaptcha.threshold": "0.5",
        "recaptcha.expected_hostname": "lists.example.com",
        "captcha.transport_class": transports.SessionTransport,
    }


@pytest.fixture
def session_resetting_request(recaptcha_settings):
    """A pretend request object with a requests.Session that is reset between tests."""
    return pretend.stub(
        # returning a real requests.Session object because responses is responsible
        # for mocking that out
        http=requests.Session(),
        registry=pretend.stub(settings=recaptcha_settings),
    )


@pytest.fixture
def pyramid_request(recaptcha_settings):
    pyramid.testing.setUp(settings=recaptcha_settings)
    dummy_request = pyramid.testing.DummyRequest()
    dummy_request.http = requests.Session()
    dummy_request.log = pretend.stub(
        bind=pretend.call_recorder(lambda *args, **kwargs: dummy_request.log),
        debug=pretend.call_recorder(lambda *args, **kwargs: None),
        info=pretend.call_recorder(lambda *args, **kwargs: None),
        warning=pretend.call_recorder(lambda *args, **kwargs: None),
        error=pretend.call_recorder(lambda *args, **kwargs: None),
    )

    yield dummy_request

    pyramid.testing.tearDown()


@pytest.fixture
def jinja():
    return Environment(
        loader=FileSystemLoader(str(_TEMPLATES)),
        autoescape=True,
        cache_size=0,
    )


@pytest.fixture
def cli():
    runner = click.testing.CliRunner()
    with runner.isolated_filesystem():
        yield runner
