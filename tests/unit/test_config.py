# SPDX-License-Identifier: Apache-2.0

import os

import pretend
import pytest

from formgate import config


@pytest.mark.parametrize(
    ("environ", "name", "envvar", "coercer", "default", "expected"),
    [
        ({}, "test.foo", "TEST_FOO", None, None, {}),
        ({"TEST_FOO": "bar"}, "test.foo", "TEST_FOO", None, None, {"test.foo": "bar"}),
        ({"TEST_INT": "1"}, "test.int", "TEST_INT", int, None, {"test.int": 1}),
        ({}, "test.foo", "TEST_FOO", None, "lol", {"test.foo": "lol"}),
        ({"TEST_FOO": "bar"}, "test.foo", "TEST_FOO", None, "lol", {"test.foo": "bar"}),
    ],
)
def test_maybe_set(monkeypatch, environ, name, envvar, coercer, default, expected):
    for key, value in environ.items():
        monkeypatch.setenv(key, value)
    settings = {}
    config.maybe_set(settings, name, envvar, coercer=coercer, default=default)
    assert settings == expected


@pytest.fixture
def configurator(monkeypatch):
    configurator_obj = pretend.stub(
        include=pretend.call_recorder(lambda include: None),
        commit=pretend.call_recorder(lambda: None),
    )
    configurator_cls = pretend.call_recorder(lambda settings: configurator_obj)
    monkeypatch.setattr(config, "Configurator", configurator_cls)
    return configurator_cls


@pytest.mark.parametrize(
    ("settings", "environment"),
    [
        (None, config.Environment.production),
        ({}, config.Environment.production),
        ({"my settings": "the settings value"}, config.Environment.production),
        (None, config.Environment.development),
        ({}, config.Environment.development),
        ({"my settings": "the settings value"}, config.Environment.development),
    ],
)
def test_configure(monkeypatch, configurator, settings, environment):
    # Ignore all environment variables in the test environment, except for
    # FORMGATE_ENV
    monkeypatch.setattr(
        os,
        "environ",
        {
            "FORMGATE_ENV": {
                config.Environment.development: "development",
                config.Environment.production: "production",
            }[environment]
        },
    )

    result = config.configure(settings=settings.copy() if settings else None)

    expected_settings = {
        "formgate.env": environment,
        "captcha.allow_url_fetch": True,
        "recaptcha.site_key": "",
        "recaptcha.secret_key": "",
        "recaptcha.threshold": "0.5",
    }
    if settings is not None:
        expected_settings.update(settings)

    assert configurator.calls == [pretend.call(settings=expected_settings)]
    assert result.include.calls == [pretend.call("formgate")]
    assert result.commit.calls == [pretend.call()]


def test_configure_from_environment(monkeypatch, configurator):
    monkeypatch.setattr(
        os,
        "environ",
        {
            "SITE_HOSTNAME": "lists.example.com",
            "RECAPTCHA_SITE_KEY": "site",
            "RECAPTCHA_SECRET_KEY": "secret",
            "RECAPTCHA_THRESHOLD": "0.7",
            "RECAPTCHA_TIMEOUT": "2.5",
            "CAPTCHA_ALLOW_URL_FETCH": "off",
            "CAPTCHA_TRANSPORT": "formgate.captcha.transports.SocketTransport",
        },
    )

    config.configure()

    (call,) = configurator.calls
    settings = call.kwargs["settings"]
    assert settings["recaptcha.site_key"] == "site"
    assert settings["recaptcha.secret_key"] == "secret"
    assert settings["recaptcha.threshold"] == "0.7"
    assert settings["recaptcha.timeout"] == 2.5
    assert settings["recaptcha.expected_hostname"] == "lists.example.com"
    assert settings["captcha.allow_url_fetch"] is False
    assert settings["captcha.transport"] == (
        "formgate.captcha.transports.SocketTransport"
    )


def test_configure_explicit_expected_hostname(monkeypatch, configurator):
    monkeypatch.setattr(
        os,
        "environ",
        {
            "SITE_HOSTNAME": "lists.example.com",
            "RECAPTCHA_EXPECTED_HOSTNAME": "forms.example.com",
        },
    )

    config.configure()

    settings = configurator.calls[0].kwargs["settings"]
    assert settings["recaptcha.expected_hostname"] == "forms.example.com"
