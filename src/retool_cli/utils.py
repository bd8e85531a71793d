"""CLI utility functions."""

import click


def merge_variadic(
    values: tuple[str, ...],
    extra: tuple[str, ...],
    flag: str,
) -> tuple[str, ...]:
    """Attach trailing arguments to a list-valued option.

    click options take one value per occurrence, so ``-c id name`` parses as
    ``-c id`` plus a stray ``name``. Commands collect the strays with a
    ``nargs=-1`` argument and hand them back to the option here.

    Args:
        values: Values given with the option
        extra: Trailing positional arguments
        flag: Option name for the error message (e.g. "-c/--columns")

    Returns:
        Option values followed by the trailing arguments

    Raises:
        click.UsageError: If there are trailing arguments but the option is absent
    """
    if extra and not values:
        raise click.UsageError(
            f"Got unexpected extra arguments ({' '.join(extra)}). "
            f"List them after {flag}."
        )
    return tuple(values) + tuple(extra)
