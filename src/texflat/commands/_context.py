"""AppContext — per-invocation state shared by every texflat command.

The root group builds one from the merged settings and stores it as
``ctx.obj``; commands receive it through ``@click.pass_obj``. It owns
logging/telemetry setup and the mapping from ServiceResult to streams
and exit codes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from texflat.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from texflat.config.settings import TexflatSettings
    from texflat.services.result import ServiceResult


class AppContext:
    """Settings plus output routing for one CLI invocation."""

    def __init__(self, settings: TexflatSettings) -> None:
        self.settings = settings

        from texflat.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from texflat.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and translate failure into exit status 1.

        Successful output goes to stdout with any warnings on stderr as
        ``WARNING:`` lines (JSON output already carries them). Failures
        are printed to stderr.
        """
        settings = self.output_settings
        output = format_result(result, settings=settings)
        if not result.ok:
            click.echo(output, err=True)
            raise SystemExit(1)

        click.echo(output)
        if not settings.json_output:
            self._warn(result.warnings)

    def emit_content(self, result: ServiceResult, key: str) -> None:
        """Write ``result.data[key]`` verbatim to stdout.

        Used by commands whose useful output is a document. JSON mode and
        failures fall back to :meth:`emit`.
        """
        if not result.ok or self.settings.json_output:
            self.emit(result)
            return
        click.echo(result.data[key], nl=False)
        self._warn(result.warnings)

    @staticmethod
    def _warn(warnings: list[str]) -> None:
        for warning in warnings:
            click.echo(f"WARNING: {warning}", err=True)
