import random
from pathlib import Path

import orjson
from pydantic import ValidationError
from ruamel.yaml import YAML

from config.settings import shuffle_flag
from src.exceptions.custom_exceptions import ConfigurationError
from src.models import Config, WalletData


yaml = YAML(typ='safe')


def load_wallets(path: str | Path) -> list[WalletData]:
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f'Wallets file not found: {path}')

    try:
        raw_data = orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError as error:
        raise ConfigurationError(f'Invalid JSON in wallets file {path}: {error}') from error

    if not isinstance(raw_data, list):
        raise ConfigurationError('Invalid wallets format, expected JSON array')
    if not raw_data:
        raise ConfigurationError(f'No wallets found in {path}')

    wallets: list[WalletData] = []
    for index, item in enumerate(raw_data, 1):
        try:
            wallets.append(WalletData.model_validate(item))
        except ValidationError as error:
            raise ConfigurationError(f'Invalid wallet #{index}: {error}') from error

    addresses = [wallet.address.lower() for wallet in wallets]
    duplicates = {address for address in addresses if addresses.count(address) > 1}
    if duplicates:
        raise ConfigurationError(f'Duplicate wallet addresses: {", ".join(sorted(duplicates))}')

    return wallets


class ConfigLoader:
    def __init__(self, base_path: str | Path | None = None) -> None:
        self.base_path = Path(base_path or Path(__file__).parent.parent.parent)
        self.config_path = self.base_path / 'config'
        self.settings_path = self.config_path / "settings.yaml"

    def _load_yaml(self) -> dict:
        settings_path = self.settings_path
        if not settings_path.exists():
            raise ConfigurationError(f'Settings file not found: {settings_path}')

        try:
            with open(settings_path, 'r', encoding='utf-8') as file:
                config = yaml.load(file)
        except Exception as error:
            raise ConfigurationError(
                f'Error loading configuration: {error}'
            ) from error

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ConfigurationError('Configuration must be a dictionary')
        return config

    def resolve_path(self, filename: str | Path) -> Path:
        path = Path(filename)
        if path.is_absolute() or path.exists():
            return path
        return self.base_path / path

    def load(self, wallets_file: str | Path | None = None) -> Config:
        """
        Load settings.yaml and, when a wallets file is given, the wallets.

        The interactive console asks for the wallets file after start-up, so
        the config may be created without wallets and filled in later.
        """
        params = self._load_yaml()
        try:
            config = Config(**params)
        except ValidationError as error:
            raise ConfigurationError(f'Configuration error: {error}') from error

        if wallets_file is None:
            return config

        wallets = load_wallets(self.resolve_path(wallets_file))
        if shuffle_flag:
            random.shuffle(wallets)
        return config.with_wallets(wallets)


def load_config(wallets_file: str | Path | None = None) -> Config:
    return ConfigLoader().load(wallets_file)
