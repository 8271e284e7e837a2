"""Invariant markers for varnet."""

from __future__ import annotations

from typing import NoReturn

from varnet.exceptions import NeverThrown


def never(reason: str = "", **env: object) -> NoReturn:
    """Mark a code path as intentionally unreachable.

    The keyword arguments are attached to the raised exception as context and
    are never evaluated further.
    """
    raise NeverThrown(reason or "never() marker reached", env=env)
