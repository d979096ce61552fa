"""Command-line interface for pimdedupe.

Provides CLI commands for deduplicating and matching record files.
"""

import importlib.metadata
import sys
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import click

from pimdedupe.audit import AuditLogger, generate_run_id, get_package_version

__all__ = ["cli"]

try:
    __version__ = importlib.metadata.version("pimdedupe")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"  # Fallback for development

KINDS = ("contact", "task", "event")


def config_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the record-kind and duplicate-config options to a command."""
    options = [
        click.option(
            "--kind",
            type=click.Choice(KINDS),
            default="contact",
            show_default=True,
            help="Record kind in the input file(s)",
        ),
        click.option("--use-uid/--no-use-uid", default=True, help="Match by uid when both sides have one"),
        click.option("--use-name/--no-use-name", default=True, help="[contact] Compare display names"),
        click.option("--use-email/--no-use-email", default=True, help="[contact] Compare emails"),
        click.option("--use-phone/--no-use-phone", default=False, help="[contact] Compare phone numbers"),
        click.option("--use-title/--no-use-title", default=True, help="[task, event] Compare titles"),
        click.option(
            "--use-location/--no-use-location", default=False, help="[event] Compare locations"
        ),
        click.option(
            "--date-tolerance",
            type=click.FloatRange(min=0, min_open=True),
            default=60.0,
            show_default=True,
            help="[task, event] Date tolerance in seconds",
        ),
        click.option(
            "--audit-log",
            type=click.Path(dir_okay=False),
            default=None,
            help="Append JSONL audit events to this file",
        ),
        click.option("--verbose", "-v", is_flag=True, help="Enable verbose output"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _overrides(kind: str, params: dict[str, Any]) -> dict[str, Any]:
    """Select the config overrides relevant to *kind*."""
    if kind == "task":
        return {
            "use_uid": params["use_uid"],
            "use_title": params["use_title"],
            "date_tolerance": params["date_tolerance"],
        }
    if kind == "event":
        return {
            "use_uid": params["use_uid"],
            "use_title": params["use_title"],
            "use_location": params["use_location"],
            "date_tolerance": params["date_tolerance"],
        }
    return {
        "use_uid": params["use_uid"],
        "use_name": params["use_name"],
        "use_email": params["use_email"],
        "use_phone": params["use_phone"],
    }


@contextmanager
def _audit(audit_log: str | None, parameters: dict[str, Any]) -> Iterator[AuditLogger | None]:
    """Open an audit logger for the command run, or yield None."""
    if audit_log is None:
        yield None
        return

    start = time.perf_counter()
    with AuditLogger(run_id=generate_run_id(), log_path=Path(audit_log)) as logger:
        logger.run_started(
            command=sys.argv,
            parameters={**parameters, "package_version": get_package_version()},
        )
        try:
            yield logger
        except Exception as e:
            logger.error(exception_class=type(e).__name__, message=str(e))
            logger.run_finished(status="failed", duration_seconds=time.perf_counter() - start)
            raise
        logger.run_finished(status="success", duration_seconds=time.perf_counter() - start)


def _fail(error: Exception, verbose: bool) -> None:
    click.secho(f"Error: {error}", fg="red", err=True)
    if verbose:
        import traceback

        click.echo(traceback.format_exc(), err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="pimdedupe")
def cli() -> None:
    """Deterministic duplicate detection for contacts, tasks and calendar events.

    Use 'pimdedupe COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), required=True, help="Output JSONL file for unique records")
@click.option(
    "--duplicates-output",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also write duplicate records to this JSONL file",
)
@config_options
def dedupe(input_path: str, output: str, duplicates_output: str | None, **params: Any) -> None:
    """Remove duplicates from INPUT_PATH, keeping first occurrences.

    INPUT_PATH is a JSON array or JSONL file of records.

    Examples
    --------
        pimdedupe dedupe contacts.jsonl -o unique.jsonl
        pimdedupe dedupe contacts.json -o unique.jsonl --use-phone
        pimdedupe dedupe tasks.jsonl -o unique.jsonl --kind task --date-tolerance 300
        pimdedupe dedupe calendar.jsonl -o unique.jsonl --kind event --use-location
    """
    from pimdedupe.api import load_records, write_jsonl
    from pimdedupe.engine import create_policy, deduplicate

    kind = params["kind"]
    verbose = params["verbose"]

    try:
        overrides = _overrides(kind, params)
        policy = create_policy(kind, overrides)
        records = load_records(input_path, kind)

        if verbose:
            click.echo(f"Loaded {len(records)} {kind} records from {input_path}", err=True)
            click.echo(f"Config: {policy.config.to_dict()}", err=True)

        with _audit(params["audit_log"], {"kind": kind, **policy.config.to_dict()}) as logger:
            result = deduplicate(records, policy, logger=logger)

        write_jsonl(result.unique, output)
        if duplicates_output:
            write_jsonl(result.duplicates, duplicates_output)

        click.secho(
            f"✓ Kept {len(result.unique)} of {len(records)} records "
            f"({len(result.duplicates)} duplicates removed)",
            fg="green",
        )

    except Exception as e:
        _fail(e, verbose)


@cli.command()
@click.argument("new_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("existing_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), required=True, help="Output JSONL file for new records to import")
@click.option(
    "--duplicates-output",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also write skipped records to this JSONL file",
)
@config_options
def match(
    new_path: str,
    existing_path: str,
    output: str,
    duplicates_output: str | None,
    **params: Any,
) -> None:
    """Find records of NEW_PATH that already exist in EXISTING_PATH.

    Records of NEW_PATH are not deduplicated among themselves.

    Examples
    --------
        pimdedupe match import.jsonl addressbook.jsonl -o to_import.jsonl
    """
    from pimdedupe.api import load_records, write_jsonl
    from pimdedupe.engine import create_policy, find_duplicates_against_existing

    kind = params["kind"]
    verbose = params["verbose"]

    try:
        policy = create_policy(kind, _overrides(kind, params))
        new_records = load_records(new_path, kind)
        existing_records = load_records(existing_path, kind)

        if verbose:
            click.echo(
                f"Matching {len(new_records)} new against {len(existing_records)} existing records",
                err=True,
            )

        with _audit(params["audit_log"], {"kind": kind, **policy.config.to_dict()}) as logger:
            result = find_duplicates_against_existing(
                new_records, existing_records, policy, logger=logger
            )

        write_jsonl(result.unique, output)
        if duplicates_output:
            write_jsonl(result.duplicates, duplicates_output)

        click.secho(
            f"✓ {len(result.unique)} new records, {len(result.duplicates)} already present",
            fg="green",
        )

    except Exception as e:
        _fail(e, verbose)


@cli.command("duplicate-ids")
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@config_options
def duplicate_ids(input_path: str, **params: Any) -> None:
    """Print the ids of duplicate records in INPUT_PATH, one per line.

    The first occurrence of each duplicate group is not printed, so the
    output can feed a bulk delete directly.
    """
    from pimdedupe.api import load_records
    from pimdedupe.engine import create_policy, get_duplicate_ids

    kind = params["kind"]

    try:
        policy = create_policy(kind, _overrides(kind, params))
        records = load_records(input_path, kind)

        with _audit(params["audit_log"], {"kind": kind, **policy.config.to_dict()}) as logger:
            ids = get_duplicate_ids(records, policy, logger=logger)

        for record_id in ids:
            click.echo(record_id)

    except Exception as e:
        _fail(e, params["verbose"])


@cli.command()
@click.argument("input_paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), required=True, help="Output JSONL file for the merged collection")
@click.option("--remove-duplicates", is_flag=True, help="Drop duplicates while merging")
@config_options
def merge(input_paths: tuple[str, ...], output: str, remove_duplicates: bool, **params: Any) -> None:
    """Merge INPUT_PATHS into a single collection.

    Files are concatenated in the order given; with --remove-duplicates
    the copy from the earliest file wins.

    Examples
    --------
        pimdedupe merge work.jsonl home.jsonl -o all.jsonl --remove-duplicates
    """
    from pimdedupe.api import load_records, write_jsonl
    from pimdedupe.engine import create_policy
    from pimdedupe.merge import merge_collections

    kind = params["kind"]
    verbose = params["verbose"]

    try:
        policy = create_policy(kind, _overrides(kind, params))
        collections = [load_records(path, kind) for path in input_paths]

        if verbose:
            for path, records in zip(input_paths, collections, strict=True):
                click.echo(f"  {path}: {len(records)} records", err=True)

        with _audit(params["audit_log"], {"kind": kind, **policy.config.to_dict()}) as logger:
            outcome = merge_collections(
                collections, policy, remove_duplicates=remove_duplicates, logger=logger
            )

        write_jsonl(outcome.records, output)

        click.secho(
            f"✓ Merged {outcome.merged_count} records "
            f"({outcome.removed_duplicates} duplicates removed)",
            fg="green",
        )

    except Exception as e:
        _fail(e, verbose)


if __name__ == "__main__":
    cli()
