# SPDX-License-Identifier: Apache-2.0

import click

from formgate.cli import formgate


@formgate.group()
def captcha():
    """
    Inspect and exercise the reCAPTCHA verification.
    """


@captcha.command()
@click.pass_obj
def check(config):
    """
    Report whether verification requests can be delivered.
    """

    from formgate.captcha.transports import TRANSPORT_CHECK, dependency_check

    checks = dependency_check(config.registry.settings)
    for label, ok in checks.items():
        click.echo(f"{'ok' if ok else 'missing':>8}  {label}")

    if not checks[TRANSPORT_CHECK]:
        raise click.ClickException("reCAPTCHA verification cannot run.")


@captcha.command()
@click.argument("token")
@click.option("--remote-ip", default=None, help="The IP address of the client.")
@click.pass_obj
def verify(config, token, remote_ip):
    """
    Verify TOKEN with the configured keys and print the decision.
    """

    # Imported here because we don't want to trigger an import from anything
    # but formgate.cli at the module scope.
    from pyramid.scripting import prepare

    from formgate.captcha.interfaces import ICaptchaService

    env = prepare(registry=config.registry)
    try:
        service = env["request"].find_service(ICaptchaService, name="captcha")
        if not service.enabled:
            raise click.ClickException(
                "Both recaptcha.site_key and recaptcha.secret_key must be set."
            )
        decision = service.validate(token, remote_ip=remote_ip)
    finally:
        env["closer"]()

    if decision.accepted:
        click.echo("accepted")
    else:
        click.echo(f"rejected: {decision.message}")
        raise SystemExit(1)
