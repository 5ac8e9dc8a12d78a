# SPDX-License-Identifier: Apache-2.0

import importlib
import pkgutil

import click

from formgate.__about__ import __version__


class LazyConfig:
    """
    Stands in for the Configurator until a command reads from it.

    Configuring formgate sets up logging and probes the available transports,
    none of which ``--help`` or ``--version`` need.
    """

    def __init__(self, settings=None):
        self._settings = settings
        self._config = None

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        if self._config is None:
            from formgate.config import configure

            self._config = configure(settings=self._settings)
        return getattr(self._config, name)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="formgate")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Overrides LOG_LEVEL for this invocation.",
)
@click.pass_context
def formgate(ctx, log_level):
    settings = {}
    if log_level is not None:
        settings["logging.level"] = log_level.upper()
    ctx.obj = LazyConfig(settings=settings)


def _load_commands():
    # Every formgate.cli.* module registers its commands on import.
    for module in pkgutil.iter_modules(__path__, prefix=f"{__name__}."):
        importlib.import_module(module.name)


_load_commands()
