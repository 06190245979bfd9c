"""Command-line interface for infobox-stats."""

import resource
import sys
from pathlib import Path

import click

from infobox_stats.config import StatsConfig
from infobox_stats.mapping_stats import MappingStatsBuilder
from infobox_stats.quads import open_lines
from infobox_stats.stats_generator import StatsGenerator, stats_file_name


def _get_rss_gb() -> float:
    """Get peak RSS in GB."""
    usage = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    if sys.platform == "darwin":
        return usage / (1024**3)  # macOS: bytes
    return usage / (1024**2)  # Linux: KB


_input_file = click.Path(exists=True, dir_okay=False, path_type=Path)


@click.command()
@click.argument("redirects_file", type=_input_file)
@click.argument("article_templates_file", type=_input_file)
@click.argument("template_parameters_file", type=_input_file)
@click.argument("infobox_test_file", type=_input_file)
@click.argument("infobox_properties_file", type=_input_file)
@click.option("-l", "--language", required=True, help="Wiki language code, e.g. en or de")
@click.option(
    "--template-namespace",
    default=None,
    help="Template namespace prefix of template names [default: localized 'Template:']",
)
@click.option(
    "--resource-uri-prefix",
    default=None,
    help="URI prefix of pages and templates [default: DBpedia resource namespace]",
)
@click.option(
    "--property-uri-prefix",
    default=None,
    help="URI prefix of infobox properties [default: DBpedia property namespace]",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file path for the statistics [default: mappingstats_<language>.ttl]",
)
@click.option(
    "--format",
    "output_format",
    default="turtle",
    show_default=True,
    help="RDF serialization format of the output",
)
@click.option(
    "--pretty",
    is_flag=True,
    default=False,
    help="Overwrite the running line count in place instead of printing a line each time",
)
def main(
    redirects_file: Path,
    article_templates_file: Path,
    template_parameters_file: Path,
    infobox_test_file: Path,
    infobox_properties_file: Path,
    language: str,
    template_namespace: str | None,
    resource_uri_prefix: str | None,
    property_uri_prefix: str | None,
    output: Path | None,
    output_format: str,
    pretty: bool,
) -> None:
    """Count how Wikipedia infobox templates and their properties are used.

    Reads DBpedia extraction dumps (N-Triples, optionally .gz or .bz2
    compressed, or HDT) and writes the statistics of every template where
    some property occurs in at least 10% of the template's instances.

    \b
    REDIRECTS_FILE: Template redirects
    ARTICLE_TEMPLATES_FILE: Page -> template usage
    TEMPLATE_PARAMETERS_FILE: Template -> property definitions
    INFOBOX_TEST_FILE: Property occurrences per template
    INFOBOX_PROPERTIES_FILE: Page -> property statements, read only if no template qualifies
    """
    try:
        config = StatsConfig.for_language(language, template_namespace).with_overrides(
            resource_uri_prefix=resource_uri_prefix,
            property_uri_prefix=property_uri_prefix,
        )
        if output is None:
            output = Path(stats_file_name(language))

        def _progress(msg: str) -> None:
            if msg.endswith("\r"):
                click.echo(msg, nl=False)
            else:
                click.echo(f"{msg}  [RSS: {_get_rss_gb():.1f} GB]")

        builder = MappingStatsBuilder(config, progress_fn=_progress, pretty=pretty)

        click.echo(f"Redirects: {redirects_file}")
        click.echo(f"Article templates: {article_templates_file}")
        click.echo(f"Template parameters: {template_parameters_file}")
        click.echo(f"Infobox test: {infobox_test_file}")
        click.echo(f"Infobox properties: {infobox_properties_file}")

        stats = builder.build_stats(
            open_lines(redirects_file),
            open_lines(article_templates_file),
            open_lines(template_parameters_file),
            open_lines(infobox_test_file),
            open_lines(infobox_properties_file),
        )

        click.echo(f"  Redirects: {len(stats.redirects)}")
        click.echo(f"  Templates used: {len(builder.templates)}")
        click.echo(f"  Qualifying templates: {len(stats.templates)}")

        generator = StatsGenerator()
        generator.add_stats(stats)

        click.echo(f"Writing {config.language} statistics to: {output}")
        generator.save(str(output), format=output_format)

        click.echo("Done!")

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
