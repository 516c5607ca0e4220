#!/usr/bin/env python3
import logging
import pathlib

import click

from vuln_report import build_report, load_results, load_settings
from vuln_report.exceptions import ConfigError, ResultsLoadError
from vuln_report.render import RENDERERS

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _configure_logging(level: str, verbose: bool):
    logging.basicConfig(level=logging.DEBUG if verbose else getattr(logging, level, logging.WARNING),
                        format=LOG_FORMAT)


# --- CLI Definition ---
@click.group(context_settings=dict(help_option_names=['-h', '--help']))
def cli():
    """Aggregate vulnerability scan results into a report."""
    pass


@cli.command("build")
@click.argument("results_path", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.option("--format", "output_format", type=click.Choice(list(RENDERERS), case_sensitive=False), help="Output format. Defaults to the configured format, then text.")
@click.option("--output-file", "output_file", type=click.Path(resolve_path=True, dir_okay=False), help="Write the report here instead of stdout.")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="YAML configuration file.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def build(results_path, output_format, output_file, config_path, verbose):
    """Build a report from osv-scanner style JSON RESULTS_PATH."""
    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        raise SystemExit(1)
    _configure_logging(settings.log_level, verbose)

    try:
        vuln_results = load_results(results_path)
    except ResultsLoadError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        raise SystemExit(1)

    report = build_report(vuln_results, settings)
    rendered = RENDERERS[(output_format or settings.format).lower()](report)

    output_file = output_file or settings.output_file
    if output_file:
        path = pathlib.Path(output_file)
        try:
            path.write_text(rendered, encoding='utf-8')
        except OSError as e:
            click.secho(f"Error writing report to {path}: {e}", fg="red", err=True)
            raise SystemExit(1)
        click.secho(f"Report saved to: {path.resolve()}", fg="green", err=True)
    else:
        click.echo(rendered, nl=False)


if __name__ == "__main__":
    cli()
