#!/usr/bin/env python3
"""A CLI for the maxcube library."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime as dt, timedelta as td
from typing import Any, Final, TypeVar

import click
from colorama import Fore, Style, init as colorama_init

from maxcube import VERSION, Client, exceptions as exc
from maxcube_tx import discover as discover_cubes, parse_duration
from maxcube_tx.const import DEFAULT_DISCOVERY_TIMEOUT
from maxcube_tx.logger import DEFAULT_DATEFMT, DEFAULT_FMT

from .render import render_gateway

_T = TypeVar("_T")

# this is called after import colorlog to ensure its handlers wrap the correct streams
logging.basicConfig(level=logging.WARNING, format=DEFAULT_FMT, datefmt=DEFAULT_DATEFMT)


SZ_DEBUG: Final = "debug"
HOST_ENVVARS: Final = ("MAXCUBE_HOST", "EQ3_HOST")

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


class DurationParamType(click.ParamType):
    name = "duration"

    def convert(self, value: Any, param, ctx) -> td:
        if isinstance(value, td):
            return value
        try:
            return parse_duration(value)
        except ValueError as err:
            self.fail(str(err), param, ctx)


def _run(ctx: click.Context, func: Callable[[], Awaitable[_T]]) -> _T:
    """Run a coroutine, and print (rather than raise) any error unless debugging."""

    try:
        return asyncio.run(func())
    except exc.MaxCubeException as err:
        if ctx.obj[SZ_DEBUG]:
            raise
        click.echo(f"{Fore.RED}Error: {err}", err=True)
        ctx.exit(1)


def _report(accepted: bool, action: str) -> None:
    if accepted:
        click.echo(f"{Fore.GREEN}{action}: accepted by the cube")
    else:
        click.echo(f"{Style.BRIGHT}{Fore.RED}{action}: NOT accepted by the cube")


host_argument = click.argument("host", envvar=list(HOST_ENVVARS), required=True)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("-z", "--debug", is_flag=True, help="debug logging (and tracebacks)")
@click.pass_context
def cli(ctx: click.Context, debug: bool = False) -> None:
    """A CLI to manage eQ-3 MAX! Cubes (the host can be set via MAXCUBE_HOST)."""

    if debug:  # Do first
        logging.getLogger().setLevel(logging.DEBUG)

    ctx.obj = {SZ_DEBUG: debug}


#
# 1/5: INFO (the cube's details, and the state of its rooms)
@click.command()
@host_argument
@click.pass_context
def info(ctx: click.Context, host: str) -> None:
    """Show the cube's details, and the state of each room."""

    async def _info() -> str:
        async with Client(host, cc_console=ctx.obj[SZ_DEBUG]) as client:
            return render_gateway(client.gateway)

    click.echo(_run(ctx, _info))


#
# 2/5: BOOST (a room)
@click.command()
@host_argument
@click.option("-r", "--room", required=True, help="the name (or id) of the room")
@click.pass_context
def boost(ctx: click.Context, host: str, room: str) -> None:
    """Boost a room."""

    async def _boost() -> bool:
        async with Client(host, cc_console=ctx.obj[SZ_DEBUG]) as client:
            return await client.boost(int(room) if room.isdigit() else room)

    _report(_run(ctx, _boost), f"Boost of {room}")


#
# 3/5: HOLIDAY (set a room to a temperature, for a duration)
@click.command()
@host_argument
@click.option("-r", "--room", required=True, help="the name (or id) of the room")
@click.option(
    "-d", "--duration", type=DurationParamType(), required=True, help="e.g. 90m, 3d"
)
@click.option("-t", "--temperature", type=float, required=True, help="in °C")
@click.pass_context
def holiday(
    ctx: click.Context, host: str, room: str, duration: td, temperature: float
) -> None:
    """Set a room to a temperature until the end of a duration (i.e. holiday mode)."""

    until = dt.now() + duration

    async def _holiday() -> bool:
        async with Client(host, cc_console=ctx.obj[SZ_DEBUG]) as client:
            return await client.holiday(
                int(room) if room.isdigit() else room, until, temperature
            )

    _report(_run(ctx, _holiday), f"Holiday of {room} ({temperature} °C)")


#
# 4/5: DISCOVER (cubes on the local network)
@click.command()
@click.option(
    "-t",
    "--timeout",
    type=click.FloatRange(min=0.1),
    default=DEFAULT_DISCOVERY_TIMEOUT,
    show_default=True,
    help="seconds to wait for replies",
)
@click.option("-l", "--local-addr", default="0.0.0.0", help="the interface to use")
@click.pass_context
def discover(ctx: click.Context, timeout: float, local_addr: str) -> None:
    """Discover the cubes on the local network."""

    cubes = _run(ctx, lambda: discover_cubes(timeout, local_addr=local_addr))

    if not cubes:
        click.echo(f"{Fore.YELLOW}No cubes found (waited {timeout} seconds)")
    for cube in cubes:
        click.echo(f"{cube.id}   {cube.host}")


#
# 5/5: VERSION
@click.command()
def version() -> None:
    """Show the version of the library."""
    click.echo(f"maxcube {VERSION}")


cli.add_command(info)
cli.add_command(boost)
cli.add_command(holiday)
cli.add_command(discover)
cli.add_command(version)


def main() -> None:
    colorama_init(autoreset=True)
    cli(prog_name="maxcube")


if __name__ == "__main__":
    main()
