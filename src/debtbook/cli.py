import tomllib
from decimal import Decimal, InvalidOperation, localcontext
from pathlib import Path
from typing import Any

import click
import tomlkit
from eth_typing import ChecksumAddress
from pydantic import TypeAdapter

from debtbook.cache import get_checksum_address
from debtbook.config import CONFIG_FILE, Settings, save_config_to_file, settings
from debtbook.discount import StakedBalances
from debtbook.engine import DebtEngine
from debtbook.exceptions import DebtbookError
from debtbook.libraries.math_utils import calculate_compounded_interest, calculate_linear_interest
from debtbook.libraries.wad_ray_math import RAY
from debtbook.scaled_ledger import REPAY_ALL
from debtbook.store import InMemoryLedgerStore
from debtbook.version import __version__

DEFAULT_ASSET = "0x000000000000000000000000000000000000dEaD"
DECIMAL_PRECISION = 100


def _to_fixed(value: Any, unit: int) -> int:
    """
    Convert a decimal string or integer in whole units to a fixed-point integer.
    """

    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        try:
            scaled = Decimal(str(value)) * unit
        except InvalidOperation:
            msg = f"{value!r} is not a decimal number"
            raise click.BadParameter(msg) from None
        if scaled != scaled.to_integral_value():
            msg = f"{value!r} has more precision than the unit allows"
            raise click.BadParameter(msg)
        return int(scaled)


def _from_fixed(value: int, unit: int) -> str:
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return str(Decimal(value) / Decimal(unit))


def _to_address(value: Any, location: str) -> ChecksumAddress:
    try:
        return get_checksum_address(value)
    except (TypeError, ValueError):
        msg = f"{location} has an invalid address {value!r}"
        raise click.UsageError(msg) from None


@click.group()
@click.version_option(version=__version__)
def cli() -> None: ...


@cli.group()
def config() -> None:
    """
    Configuration commands
    """


@config.command("show")
@click.option(
    "--json",
    "output_format",
    flag_value="json",
    type=str,
    help="Show configuration in JSON format",
)
@click.option(
    "--toml",
    "output_format",
    flag_value="toml",
    type=str,
    help="Show configuration in TOML format (default)",
    default=True,
)
def config_show(output_format: str) -> None:
    """
    Display the current configuration in JSON or TOML (default) format.
    """

    match output_format:
        case "json":
            click.echo(
                TypeAdapter(dict).dump_json(
                    settings.model_dump(),
                    indent=2,
                ),
            )
        case "toml":
            click.echo(
                tomlkit.dumps(
                    settings.model_dump(),
                ),
            )
        case _:
            ...


@config.command("init")
@click.option(
    "--path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=CONFIG_FILE,
    show_default=True,
    help="Location of the configuration file",
)
def config_init(path: Path) -> None:
    """
    Write a configuration file with default values.
    """

    if path.exists() and not click.confirm(
        f"A configuration file already exists at {path}. Overwrite it?",
        default=False,
    ):
        raise click.Abort
    save_config_to_file(Settings(), path)
    click.echo(f"Wrote default configuration to {path}")


@cli.command("simulate")
@click.argument(
    "scenario_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
def simulate(scenario_file: Path) -> None:
    """
    Replay the borrow and repay steps of a TOML scenario against a fresh reserve.

    Amounts and rates are given in whole units as decimal strings, e.g. rate = "0.05" for 5% and
    amount = "1000" for 1000 tokens. A repay amount of "max" clears the account's debt.
    """

    scenario = tomllib.loads(scenario_file.read_text())

    reserve_config = scenario.get("reserve", {})
    unit = 10 ** int(reserve_config.get("decimals", 18))
    asset = _to_address(reserve_config.get("asset", DEFAULT_ASSET), "[reserve]")
    start = int(reserve_config.get("start", 0))

    staked_balances = StakedBalances(
        {
            _to_address(account, "[staked]"): _to_fixed(balance, unit)
            for account, balance in scenario.get("staked", {}).items()
        }
    )
    engine = DebtEngine.from_settings(
        store=InMemoryLedgerStore(),
        staked_balances=staked_balances,
        settings=settings,
    )
    engine.init_reserve(asset, _to_fixed(reserve_config.get("rate", 0), RAY), start)

    now = start
    for step_number, step in enumerate(scenario.get("steps", []), start=1):
        if "time" in step:
            now = int(step["time"])
        else:
            now += int(step.get("elapsed", 0))

        action = step.get("action")
        location = f"Step {step_number} ({action})"
        try:
            match action:
                case "borrow":
                    result = engine.borrow(
                        asset,
                        _to_address(step["account"], location),
                        _to_fixed(step["amount"], unit),
                        now,
                    )
                    click.echo(
                        f"[{step_number}] t={now} BORROW {step['account']}: "
                        f"balance {_from_fixed(result.balance, unit)}"
                    )
                case "repay":
                    amount = (
                        REPAY_ALL
                        if str(step["amount"]).lower() == "max"
                        else _to_fixed(step["amount"], unit)
                    )
                    repay_result = engine.repay(
                        asset, _to_address(step["account"], location), amount, now
                    )
                    click.echo(
                        f"[{step_number}] t={now} REPAY {step['account']}: "
                        f"repaid {_from_fixed(repay_result.amount_repaid, unit)} "
                        f"(interest {_from_fixed(repay_result.interest_repaid, unit)}), "
                        f"balance {_from_fixed(repay_result.balance, unit)}"
                    )
                case "balance":
                    balance = engine.balance_of(
                        asset, _to_address(step["account"], location), now
                    )
                    click.echo(
                        f"[{step_number}] t={now} BALANCE {step['account']}: "
                        f"{_from_fixed(balance, unit)}"
                    )
                case "stake":
                    staked_balances.set_balance(
                        _to_address(step["account"], location), _to_fixed(step["amount"], unit)
                    )
                    click.echo(
                        f"[{step_number}] t={now} STAKE {step['account']}: {step['amount']}"
                    )
                case "rate":
                    engine.set_reserve_rate(asset, _to_fixed(step["rate"], RAY), now)
                    click.echo(f"[{step_number}] t={now} RATE {step['rate']}")
                case _:
                    msg = f"Step {step_number} has an unknown action {action!r}"
                    raise click.UsageError(msg)
        except KeyError as exc:
            msg = f"{location} is missing the {exc.args[0]!r} field"
            raise click.UsageError(msg) from None
        except DebtbookError as exc:
            msg = f"{location} failed: {exc.message}"
            raise click.ClickException(msg) from None

    reserve = engine.get_reserve(asset)
    click.echo(f"Borrow index: {_from_fixed(reserve.variable_borrow_index, RAY)}")
    click.echo(f"Interest repaid to treasury: {_from_fixed(reserve.accrued_to_treasury, unit)}")
    click.echo(
        "Growth at the current rate over the simulated period: "
        f"compounded {_from_fixed(calculate_compounded_interest(reserve.annual_rate, start, now), RAY)}, "  # noqa: E501
        f"linear {_from_fixed(calculate_linear_interest(reserve.annual_rate, start, now), RAY)}"
    )
