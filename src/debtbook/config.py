import tomllib
from pathlib import Path

import tomlkit
from pydantic import BaseModel, NonNegativeInt, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from debtbook.discount import DEFAULT_DISCOUNT_RATE
from debtbook.libraries.wad_ray_math import WAD
from debtbook.logging import logger

CONFIG_DIR = Path.home() / ".config" / "debtbook"
CONFIG_FILE = CONFIG_DIR / "config.toml"


class DiscountSettings(BaseModel):
    # Minimum staked balance for an account to receive the discount
    threshold: NonNegativeInt = WAD
    # Fraction of accrued interest waived for eligible accounts, in wad
    rate: NonNegativeInt = DEFAULT_DISCOUNT_RATE

    @field_validator("rate", mode="after")
    def validate_rate(cls, rate: int) -> int:  # noqa: N805
        if rate > WAD:
            msg = f"Discount rate {rate} exceeds 100% ({WAD})"
            raise ValueError(msg)
        return rate


class LedgerSettings(BaseModel):
    # Reject repayments above the outstanding balance instead of capping them
    strict_repay: bool = False


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DEBTBOOK_",
        env_nested_delimiter="__",
    )

    discount: DiscountSettings = DiscountSettings()
    ledger: LedgerSettings = LedgerSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """
        Environment variables take priority over values passed to the constructor, which include
        those read from the configuration file.
        """

        return env_settings, init_settings, dotenv_settings, file_secret_settings


def load_config_from_file(config_path: Path) -> Settings:
    return Settings(
        **tomllib.loads(
            config_path.read_text(),
        ),
    )


def save_config_to_file(config: Settings, config_path: Path = CONFIG_FILE) -> None:
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(
        tomlkit.dumps(
            config.model_dump(),
        ),
    )
    logger.info(f"Saved configuration to {config_path}.")


if CONFIG_FILE.exists():
    settings = load_config_from_file(CONFIG_FILE)
else:
    settings = Settings()
