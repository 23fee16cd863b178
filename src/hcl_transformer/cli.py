"""Command-line interface for the HCL Transformer."""

import logging
import sys
import click
from . import __version__
from .hcl_transformer import HCLTransformer
from .types import ConversionError, ConversionOptions, Dialect


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        stream=sys.stderr,
        force=True
    )


def _fail(errors) -> None:
    for error in errors or ["unknown error"]:
        click.echo(f"Error: {error}", err=True)
    sys.exit(1)


def _emit(text: str, output: str) -> None:
    with click.open_file(output, 'w', encoding='utf-8') as f:
        f.write(text)


@click.group()
@click.version_option(version=__version__)
def main():
    """HCL Transformer - Convert between JSON and native HCL configuration."""
    pass


@main.command(name="to-hcl")
@click.argument('input_file', type=click.File('r', encoding='utf-8'), default='-')
@click.option('--output', '-o', default='-', help='Output file (default: stdout)')
@click.option('--treat-arrays-as-blocks', is_flag=True,
              help='Convert variable arrays to blocks (module file style)')
@click.option('--keep-arrays-nested', is_flag=True,
              help='Keep arrays as nested attributes (tfvars style)')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
def to_hcl(input_file, output: str, treat_arrays_as_blocks: bool,
           keep_arrays_nested: bool, verbose: bool):
    """Convert a JSON document read from INPUT_FILE (default stdin) to HCL."""
    _configure_logging(verbose)

    try:
        dialect = Dialect.from_flags(
            treat_arrays_as_blocks,
            keep_arrays_nested,
            output if output != '-' else None
        )
    except ConversionError as e:
        _fail([str(e)])

    transformer = HCLTransformer(ConversionOptions(dialect=dialect))
    result = transformer.to_hcl(input_file.read())
    if not result.success:
        _fail([f"unable to convert to native HCL: {error}" for error in result.errors or []])

    _emit(result.hcl_string, output)
    if verbose:
        summary = transformer.profiler.get_performance_summary()
        logging.getLogger(__name__).debug(f"Performance: {summary}")


@main.command(name="to-json")
@click.argument('input_file', type=click.File('r', encoding='utf-8'), default='-')
@click.option('--output', '-o', default='-', help='Output file (default: stdout)')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
def to_json(input_file, output: str, verbose: bool):
    """Convert HCL read from INPUT_FILE (default stdin) to JSON."""
    _configure_logging(verbose)

    transformer = HCLTransformer()
    filename = getattr(input_file, 'name', '<stdin>')
    result = transformer.to_json(input_file.read(), filename=filename)
    if not result.success:
        _fail([f"unable to convert HCL to JSON: {error}" for error in result.errors or []])

    _emit(result.json_string + "\n", output)
    if verbose:
        summary = transformer.profiler.get_performance_summary()
        logging.getLogger(__name__).debug(f"Performance: {summary}")


if __name__ == '__main__':
    main()
