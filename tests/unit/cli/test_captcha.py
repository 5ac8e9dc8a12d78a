# SPDX-License-Identifier: Apache-2.0

import pretend
import pyramid.scripting
import pytest

from formgate.captcha import transports
from formgate.captcha.interfaces import Decision, ICaptchaService
from formgate.cli import captcha


class TestCheck:
    def test_available(self, monkeypatch, cli):
        checks = {
            "URL fetch permitted": False,
            "pooled session available": True,
            "ssl module available": True,
            transports.TRANSPORT_CHECK: True,
        }
        dependency_check = pretend.call_recorder(lambda settings: checks)
        monkeypatch.setattr(transports, "dependency_check", dependency_check)
        config = pretend.stub(registry=pretend.stub(settings={"a": "b"}))

        result = cli.invoke(captcha.check, obj=config)

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            " missing  URL fetch permitted",
            "      ok  pooled session available",
            "      ok  ssl module available",
            f"      ok  {transports.TRANSPORT_CHECK}",
        ]
        assert dependency_check.calls == [pretend.call({"a": "b"})]

    def test_unavailable(self, monkeypatch, cli):
        monkeypatch.setattr(
            transports,
            "dependency_check",
            lambda settings: {transports.TRANSPORT_CHECK: False},
        )
        config = pretend.stub(registry=pretend.stub(settings={}))

        result = cli.invoke(captcha.check, obj=config)

        assert result.exit_code == 1
        assert "reCAPTCHA verification cannot run." in result.output


class TestVerify:
    @pytest.fixture
    def environment(self, monkeypatch):
        def _environment(service):
            request = pretend.stub(
                find_service=pretend.call_recorder(lambda iface, name: service)
            )
            env = {
                "request": request,
                "closer": pretend.call_recorder(lambda: None),
            }
            prepare = pretend.call_recorder(lambda registry: env)
            monkeypatch.setattr(pyramid.scripting, "prepare", prepare)
            return env, prepare

        return _environment

    def test_accepted(self, cli, environment):
        service = pretend.stub(
            enabled=True,
            validate=pretend.call_recorder(
                lambda token, remote_ip: Decision(True, "")
            ),
        )
        env, prepare = environment(service)
        config = pretend.stub(registry=pretend.stub())

        result = cli.invoke(
            captcha.verify, ["the-token", "--remote-ip", "1.2.3.4"], obj=config
        )

        assert result.exit_code == 0
        assert result.output == "accepted\n"
        assert prepare.calls == [pretend.call(registry=config.registry)]
        assert env["request"].find_service.calls == [
            pretend.call(ICaptchaService, name="captcha")
        ]
        assert service.validate.calls == [
            pretend.call("the-token", remote_ip="1.2.3.4")
        ]
        assert env["closer"].calls == [pretend.call()]

    def test_rejected(self, cli, environment):
        service = pretend.stub(
            enabled=True,
            validate=lambda token, remote_ip: Decision(False, "invalid-input-response"),
        )
        env, _ = environment(service)

        result = cli.invoke(
            captcha.verify, ["the-token"], obj=pretend.stub(registry=pretend.stub())
        )

        assert result.exit_code == 1
        assert result.output == "rejected: invalid-input-response\n"
        assert env["closer"].calls == [pretend.call()]

    def test_disabled(self, cli, environment):
        env, _ = environment(pretend.stub(enabled=False))

        result = cli.invoke(
            captcha.verify, ["the-token"], obj=pretend.stub(registry=pretend.stub())
        )

        assert result.exit_code == 1
        assert "recaptcha.site_key" in result.output
        assert env["closer"].calls == [pretend.call()]
