import orjson
import pytest
from pydantic import ValidationError

from src.exceptions import ConfigurationError
from src.models import TaskOptions
from src.utils import ConfigLoader, load_wallets

PRIVATE_KEY = "0x" + "11" * 32


def wallet_entry(address: str, **extra) -> dict:
    return {"address": address, "privateKey": PRIVATE_KEY, **extra}


def write_json(path, data) -> None:
    path.write_bytes(orjson.dumps(data))


@pytest.fixture
def base_path(tmp_path):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "settings.yaml").write_text(
        "rpc_rate_limit_interval: 0.5\nunits_in_flight: 3\n", encoding="utf-8"
    )
    return tmp_path


def test_load_wallets(tmp_path):
    path = tmp_path / "wallets.json"
    write_json(path, [
        wallet_entry("0x" + "a" * 40, name="main"),
        wallet_entry("0x" + "b" * 40),
    ])

    wallets = load_wallets(path)

    assert [wallet.name for wallet in wallets] == ["main", None]
    assert wallets[0].private_key == PRIVATE_KEY
    assert PRIVATE_KEY not in repr(wallets[0])


def test_load_wallets_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        load_wallets(tmp_path / "missing.json")


def test_load_wallets_invalid_json(tmp_path):
    path = tmp_path / "wallets.json"
    path.write_text("[{", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Invalid JSON"):
        load_wallets(path)


def test_load_wallets_requires_array(tmp_path):
    path = tmp_path / "wallets.json"
    write_json(path, wallet_entry("0x" + "a" * 40))

    with pytest.raises(ConfigurationError, match="expected JSON array"):
        load_wallets(path)


def test_load_wallets_empty(tmp_path):
    path = tmp_path / "wallets.json"
    write_json(path, [])

    with pytest.raises(ConfigurationError, match="No wallets"):
        load_wallets(path)


def test_load_wallets_missing_private_key(tmp_path):
    path = tmp_path / "wallets.json"
    write_json(path, [wallet_entry("0x" + "a" * 40), {"address": "0x" + "b" * 40}])

    with pytest.raises(ConfigurationError, match="#2"):
        load_wallets(path)


def test_load_wallets_rejects_blank_address(tmp_path):
    path = tmp_path / "wallets.json"
    write_json(path, [wallet_entry("   ")])

    with pytest.raises(ConfigurationError):
        load_wallets(path)


def test_load_wallets_duplicates(tmp_path):
    path = tmp_path / "wallets.json"
    write_json(path, [wallet_entry("0x" + "a" * 40), wallet_entry("0x" + "A" * 40)])

    with pytest.raises(ConfigurationError, match="Duplicate"):
        load_wallets(path)


def test_config_loader_reads_settings(base_path):
    config = ConfigLoader(base_path).load()

    assert config.rpc_rate_limit_interval == 0.5
    assert config.units_in_flight == 3
    assert config.start_stagger == 1.0
    assert config.wallets == []


def test_config_loader_resolves_wallets_relative_to_base(base_path):
    write_json(base_path / "my_wallets.json", [wallet_entry("0x" + "a" * 40)])

    config = ConfigLoader(base_path).load("my_wallets.json")

    assert len(config.wallets) == 1


def test_config_loader_rejects_unknown_keys(base_path):
    (base_path / "config" / "settings.yaml").write_text("rpc_interval: 3\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        ConfigLoader(base_path).load()


def test_config_loader_rejects_negative_interval(base_path):
    (base_path / "config" / "settings.yaml").write_text(
        "rpc_rate_limit_interval: -1\n", encoding="utf-8"
    )

    with pytest.raises(ConfigurationError):
        ConfigLoader(base_path).load()


def test_config_loader_empty_settings(base_path):
    (base_path / "config" / "settings.yaml").write_text("", encoding="utf-8")

    config = ConfigLoader(base_path).load()

    assert config.rpc_rate_limit_interval == 3.0


def test_config_loader_missing_settings(tmp_path):
    with pytest.raises(ConfigurationError, match="Settings file not found"):
        ConfigLoader(tmp_path).load()


@pytest.mark.parametrize("units, gas", [(0, "0.23"), (74, "0"), (1, "1.5")])
def test_task_options_valid(units, gas):
    options = TaskOptions(number_of_units=units, gas_price_gwei=gas)

    assert options.number_of_units == units


@pytest.mark.parametrize("units, gas", [(-1, "0.23"), (1, "abc"), (1, "-0.1"), (1, "NaN"), (1, "inf")])
def test_task_options_invalid(units, gas):
    with pytest.raises(ValidationError):
        TaskOptions(number_of_units=units, gas_price_gwei=gas)
