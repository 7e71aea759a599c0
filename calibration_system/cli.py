"""sensor-calibrate: calibrated sensor outputs with uncertainty."""
import logging

import click

from . import __version__
from . import constants as C
from .inputs import default_inputs, override_inputs, parse_interval
from .propagation import CalibrationConfig, run
from .report import (
    CalibrationReport, benchmark_line, save_monte_carlo_samples, to_json, write_outputs_csv,
)
from .sensor import OutputSelect

logger = logging.getLogger(__name__)


def _parse_overrides(values) -> dict:
    overrides = {}
    for item in values:
        name, sep, interval = item.partition("=")
        if not sep:
            raise click.BadParameter(f"expected NAME=LOW,HIGH, got '{item}'", param_hint="--input")
        try:
            overrides[name.strip()] = parse_interval(interval)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--input")
    return overrides


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__)
@click.option('-S', '--select', 'output_select', type=click.IntRange(0, int(OutputSelect.ALL)),
              default=int(OutputSelect.ALL), show_default=True,
              help='Output: 0 mass flow, 1 differential pressure, 2 all')
@click.option('-M', '--monte-carlo', 'iterations', type=int, default=None,
              help='Run in Monte Carlo mode with this many iterations')
@click.option('-T', '--timing', is_flag=True, help='Print the CPU time of the computation')
@click.option('-b', '--benchmark', is_flag=True,
              help='Print only "<value> <cpu microseconds>"')
@click.option('-j', '--json', 'as_json', is_flag=True, help='JSON output')
@click.option('-o', '--output', 'output_path', type=click.Path(dir_okay=False), default=None,
              help='Also write the outputs as CSV')
@click.option('--samples-file', type=click.Path(dir_okay=False), default=C.DEFAULT_SAMPLES_FILE,
              show_default=True, help='Where Monte Carlo samples are saved')
@click.option('--seed', type=int, default=None, help='Seed for Monte Carlo sampling')
@click.option('--input', 'input_overrides', multiple=True, metavar='NAME=LOW,HIGH',
              help='Override an input interval, e.g. T0=273,274 (repeatable)')
@click.option('-v', '--verbose', is_flag=True, help='Debug logging')
def calibrate(output_select, iterations, timing, benchmark, as_json, output_path,
              samples_file, seed, input_overrides, verbose):
    """Compute calibrated mass flow and differential pressure."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format="[%(levelname)s] %(message)s")

    overrides = _parse_overrides(input_overrides)
    try:
        config = CalibrationConfig(
            output_select=OutputSelect(output_select),
            monte_carlo=iterations is not None,
            iterations=iterations if iterations is not None else C.DEFAULT_MONTE_CARLO_ITERATIONS,
            inputs=override_inputs(default_inputs(), overrides),
            seed=seed,
        )
        result = run(config)
    except ValueError as e:
        logger.debug("invalid configuration", exc_info=True)
        raise click.ClickException(str(e))

    try:
        if benchmark:
            click.echo(benchmark_line(result))
        else:
            click.echo(to_json(result) if as_json else CalibrationReport.generate(result))
            if timing:
                click.echo("\n" + CalibrationReport.timing(result))
            if output_path:
                write_outputs_csv(output_path, result)

        if config.monte_carlo:
            save_monte_carlo_samples(samples_file, result.tracked_samples, result.cpu_time_us)
    except OSError as e:
        raise click.ClickException(f"cannot write output: {e}")


def main():
    calibrate(prog_name="sensor-calibrate")


if __name__ == "__main__":
    main()
