import json
import logging
from pathlib import Path

import click

from .pipeline import CodeGenerationError, CodeGenerator, CodeGeneratorConfig, TargetLanguage
from .pipeline.schema_ast import load_schema


@click.command()
@click.option("--language", "-l", default="kotlin", type=click.Choice([language.value for language in TargetLanguage]))
@click.option("--package", "-p", default=None, type=str, help="Package / namespace of the generated classes")
@click.option(
    "--definitions",
    "-d",
    default=None,
    type=str,
    help="Pointer to a definitions container, e.g. '#/definitions'; one class per member",
)
@click.option("--include", "-i", multiple=True, help="Only write these definitions (repeatable)")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--dry-run", is_flag=True, default=False, help="Print the target files instead of writing them")
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("path", type=click.Path(exists=True, resolve_path=True))
@click.argument("output", type=click.Path(file_okay=False, resolve_path=True))
def json_schema_codegen(language, package, definitions, include, config, dry_run, verbose, path, output):
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if config is not None:
        with open(config) as f:
            config = CodeGeneratorConfig.from_dict(json.load(f))
    else:
        config = CodeGeneratorConfig()

    # CLI options override the config file
    if package is not None:
        config.base_package = package
    config.base_directory = output

    name_filter = None
    if include:
        included = set(include)
        name_filter = included.__contains__

    try:
        schema = load_schema(path)
        codegen = CodeGenerator(language, config)
        if definitions is not None:
            rendered = codegen.render_all(schema, definitions, name_filter)
        else:
            rendered = codegen.render(schema, Path(path).stem.split(".")[0])

        if dry_run:
            for target in rendered:
                click.echo(str(target))
            return
        for target in codegen.write(rendered):
            click.echo(f"Generated {target}")
    except CodeGenerationError as e:
        raise click.ClickException(str(e)) from e
