"""Command-line interface for repofit."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from repofit import __version__
from repofit.config import (
    EngineConfig,
    find_project_root,
    get_config_value,
    load_config,
    save_config,
    set_config_value,
)
from repofit.context.engine import ContentExtractor
from repofit.context.models import Strategy
from repofit.exceptions import ConfigError, TokenLimitExceeded
from repofit.search.keywords import extract_keywords
from repofit.tokens.estimator import TokenEstimator
from repofit.tokens.trimmer import TrimOptions, trim_to_budget
from repofit.ui.console import Console

console = Console()

_input_arg = click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
_output_opt = click.option(
    "--output", "-o", type=click.File("w", encoding="utf-8"), default="-",
    help="Where to write the result (default: stdout).",
)
_model_opt = click.option("--model", "-m", default=None, help="Model id used to pick a token ratio.")
_budget_opt = click.option("--max-tokens", "-b", type=int, default=None, help="Token budget.")
_path_opt = click.option("--path", "-p", default=None, help="Project root holding .repofit/.")


def _project_root(path: str | None) -> Path | None:
    if path:
        root = Path(path).resolve()
        if not root.exists():
            console.error(f"Path does not exist: {path}")
            sys.exit(1)
        return root
    return find_project_root()


def _load_engine_config(path: str | None) -> EngineConfig:
    try:
        return load_config(_project_root(path))
    except ConfigError as e:
        console.error(str(e))
        sys.exit(1)


def _budget(config: EngineConfig, max_tokens: int | None) -> int:
    return config.selection.default_max_tokens if max_tokens is None else max_tokens


@click.group()
@click.version_option(version=__version__, prog_name="repofit")
@click.option("--verbose", "-v", is_flag=True, help="Log token accounting to stderr.")
def main(verbose: bool):
    """repofit - fit packaged repository text into a model's token budget."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


@main.command()
@_input_arg
@_model_opt
@_path_opt
@click.option("--response", type=click.File("r", encoding="utf-8"), default=None,
              help="Response text to include in the usage estimate.")
@click.option("--table", is_flag=True, help="Show a usage table on stderr.")
def estimate(source, model: str | None, path: str | None, response, table: bool):
    """Estimate the token count of SOURCE (default: stdin)."""
    config = _load_engine_config(path)
    estimator = TokenEstimator(config.tokens)
    text = source.read()
    usage = estimator.usage(text, response.read() if response else "", model, config.limits)
    click.echo(usage.prompt_tokens)
    if table:
        console.show_usage(usage, model)


@main.command()
@_input_arg
@_model_opt
@_path_opt
@click.option("--max-tokens", "-b", type=int, required=True, help="Hard token limit.")
def validate(source, model: str | None, path: str | None, max_tokens: int):
    """Fail if SOURCE is estimated over --max-tokens."""
    config = _load_engine_config(path)
    estimator = TokenEstimator(config.tokens)
    try:
        estimator.validate(source.read(), max_tokens, model)
    except TokenLimitExceeded as e:
        console.error(e.user_message())
        sys.exit(1)
    console.success(f"Within the {max_tokens:,} token limit")


@main.command()
@_input_arg
@_output_opt
@_model_opt
@_path_opt
@click.option("--max-tokens", "-b", type=int, required=True, help="Token budget.")
@click.option("--preserve-start", is_flag=True, help="Keep the beginning of the text.")
@click.option("--preserve-end", is_flag=True, help="Keep the end of the text.")
@click.option("--ellipsis", "add_ellipsis", is_flag=True, help="Mark the cut with '...'.")
@click.option("--message", default=None, help="Custom removal marker.")
def trim(source, output, model, path, max_tokens, preserve_start, preserve_end,
         add_ellipsis, message):
    """Trim plain text to fit --max-tokens, keeping its head and/or tail."""
    config = _load_engine_config(path)
    result = trim_to_budget(
        source.read(),
        max_tokens,
        TrimOptions(
            preserve_start=preserve_start,
            preserve_end=preserve_end,
            model_id=model,
            add_ellipsis=add_ellipsis,
            insert_message=message,
        ),
        estimator=TokenEstimator(config.tokens),
    )
    output.write(result)


@main.command("smart-trim")
@_input_arg
@_output_opt
@_model_opt
@_budget_opt
@_path_opt
@click.option("--include", "-i", multiple=True, help="Path fragments to keep first.")
@click.option("--exclude", "-x", multiple=True, help="Path fragments to drop first.")
@click.option("--prefer-complete", is_flag=True, help="Never cut a file in half.")
@click.option("--report", is_flag=True, help="Show what was kept on stderr.")
def smart_trim_cmd(source, output, model, max_tokens, path, include, exclude,
                   prefer_complete, report):
    """Trim a repository dump by file priority, without a query."""
    config = _load_engine_config(path)
    extractor = ContentExtractor(config)
    result = extractor.smart_trim(
        source.read(),
        _budget(config, max_tokens),
        model,
        include=list(include),
        exclude=list(exclude),
        prefer_complete=prefer_complete or None,
    )
    output.write(result.content)
    if report:
        console.show_report(result)


@main.command()
@_input_arg
@_output_opt
@_model_opt
@_budget_opt
@_path_opt
@click.option("--query", "-q", required=True, help="What the content should be relevant to.")
@click.option("--include", "-i", multiple=True, help="Path fragments to boost.")
@click.option("--exclude", "-x", multiple=True, help="Path fragments to penalize.")
@click.option("--report", is_flag=True, help="Show what was kept on stderr.")
def extract(source, output, model, max_tokens, path, query, include, exclude, report):
    """Keep the parts of a repository dump most relevant to --query.

    Examples:

        repofit extract dump.xml -q "how does parseConfig work" -b 30000

        cat dump.txt | repofit extract -q "session expiry handling" --report
    """
    config = _load_engine_config(path)
    extractor = ContentExtractor(config)
    result = extractor.extract(
        source.read(),
        query,
        _budget(config, max_tokens),
        model,
        include=list(include),
        exclude=list(exclude),
    )
    output.write(result.content)
    if result.strategy == Strategy.PASSTHROUGH and not result.within_budget:
        console.info(
            f"No relevance signal for the query; content returned unchanged "
            f"({result.original_tokens:,} tokens, budget {result.token_budget:,})"
        )
    if report:
        console.show_report(result)


@main.command()
@click.argument("query")
@_path_opt
def keywords(query: str, path: str | None):
    """Show the keywords extracted from QUERY."""
    config = _load_engine_config(path)
    kw = config.keywords
    terms = extract_keywords(
        query,
        min_word_length=kw.min_word_length,
        max_keywords=kw.max_keywords,
        filter_common_terms=kw.filter_common_terms,
    )
    if not terms:
        console.warning("No significant keywords found")
        return
    for term in terms:
        click.echo(term)


# =========================================================================
# Config Management
# =========================================================================

@main.command("config")
@click.argument("action", type=click.Choice(["set", "get", "show"]))
@click.argument("key", required=False)
@click.argument("value", required=False)
@_path_opt
def config_cmd(action: str, key: str | None, value: str | None, path: str | None):
    """Manage repofit configuration (.repofit/config.json)."""
    root = _project_root(path) or Path.cwd()
    config = _load_engine_config(str(root))

    if action == "show":
        click.echo(json.dumps(config.model_dump(), indent=2))
    elif action == "get":
        if not key:
            console.error("Usage: repofit config get <key>")
            sys.exit(1)
        try:
            click.echo(f"{key} = {get_config_value(config, key)}")
        except KeyError:
            console.error(f"Unknown key: {key}")
            sys.exit(1)
    elif action == "set":
        if not key or value is None:
            console.error("Usage: repofit config set <key> <value>")
            sys.exit(1)
        try:
            # Try to parse as JSON for non-string values
            try:
                parsed_value = json.loads(value)
            except json.JSONDecodeError:
                parsed_value = value

            config = set_config_value(config, key, parsed_value)
            written = save_config(root, config)
            console.success(f"Set {key} = {parsed_value} ({written})")
        except KeyError:
            console.error(f"Unknown config key: {key}")
            sys.exit(1)
        except ValueError as e:
            console.error(f"Invalid value for {key}: {e}")
            sys.exit(1)


if __name__ == "__main__":
    main()
