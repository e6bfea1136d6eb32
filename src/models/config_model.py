from decimal import Decimal, InvalidOperation
from typing import Self

from better_proxy import Proxy
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
)


class WalletData(BaseModel):
    name: str | None = None
    address: str
    private_key: str = Field(alias="privateKey")
    proxy: Proxy | None = None

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    @field_validator("address", "private_key")
    @classmethod
    def validate_not_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("proxy", mode="before")
    @classmethod
    def parse_proxy(cls, value: str | Proxy | None) -> Proxy | None:
        if value is None or isinstance(value, Proxy):
            return value
        return Proxy.from_str(str(value).strip())

    def __repr__(self) -> str:
        return f"WalletData(name={self.name!r}, address={self.address!r})"


class TaskOptions(BaseModel):
    number_of_units: int = Field(ge=0)
    gas_price_gwei: str

    model_config = ConfigDict(frozen=True)

    @field_validator("gas_price_gwei")
    @classmethod
    def validate_gas_price(cls, value: str) -> str:
        try:
            gas = Decimal(value.strip())
        except InvalidOperation as error:
            raise ValueError(f"Invalid gas price: {value}") from error
        if not gas.is_finite() or gas < 0:
            raise ValueError(f"Invalid gas price: {value}")
        return value.strip()


class DelayRange(BaseModel):
    min: float
    max: float

    @field_validator('max')
    @classmethod
    def validate_max(cls, value: float, info: ValidationInfo) -> float:
        if value < info.data['min']:
            raise ValueError('max must be greater than or equal to min')
        return value

    model_config = ConfigDict(frozen=True)


class Config(BaseModel):
    wallets: list[WalletData] = Field(default_factory=list)
    wallets_file: str = "wallets.json"
    rpc_url: str = "https://rpc.mainnet.taiko.xyz"
    explorer_url: str = "https://taikoscan.io"
    trailblazers_api_url: str = "https://trailblazer.mainnet.taiko.xyz"
    rpc_rate_limit_interval: float = Field(default=3.0, ge=0)
    start_stagger: float = Field(default=1.0, ge=0)
    units_in_flight: int = Field(default=0, ge=0)
    receipt_timeout: float = Field(default=120.0, gt=0)
    gas_limit_multiplier: int = Field(default=4, ge=1)
    default_gas_price_gwei: str = "0.23"
    max_daily_points: int = Field(default=74_000, ge=1)
    points_per_vote: int = Field(default=1_000, ge=1)
    delay_between_requests: DelayRange = Field(
        default_factory=lambda: DelayRange(min=0.25, max=0.25)
    )

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        extra='forbid',
    )

    def with_wallets(self, wallets: list[WalletData]) -> Self:
        return self.model_copy(update={"wallets": wallets})
