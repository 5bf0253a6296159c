from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DirectoryModel(BaseModel):
    model_config = ConfigDict(extra='ignore')

    @model_validator(mode='before')
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        # Directory entries leave optional members null; they fall back to the field default.
        if not isinstance(data, dict):
            return data
        cleaned: dict[str, Any] = {}
        for key, value in data.items():
            if value is None:
                continue
            if isinstance(value, list):
                value = [item for item in value if item is not None]
            cleaned[key] = value
        return cleaned


class DenomUnit(DirectoryModel):
    denom: str = ''
    exponent: int = 0


class AssetDefinition(DirectoryModel):
    denom: str = ''
    denom_units: list[DenomUnit] = Field(default_factory=list)
    coingecko_id: str | None = None
    decimals: int | str | None = None


class FeeToken(DirectoryModel):
    denom: str = ''
    low_gas_price: float | str | None = None
    average_gas_price: float | str | None = None
    high_gas_price: float | str | None = None


class FeeConfig(DirectoryModel):
    fee_tokens: list[FeeToken] | None = None


class Endpoint(DirectoryModel):
    address: str | None = None
    provider: str | None = None


class ChainApis(DirectoryModel):
    rest: list[Endpoint] = Field(default_factory=list)
    rpc: list[Endpoint] = Field(default_factory=list)


class NetworkSummary(DirectoryModel):
    path: str = ''
    name: str = ''
    chain_id: str = ''


class NetworkDescriptor(DirectoryModel):
    path: str
    name: str = ''
    chain_name: str = ''
    pretty_name: str | None = None
    chain_id: str = ''
    bech32_prefix: str = ''
    slip44: int | None = None
    assets: list[AssetDefinition] | None = None
    fees: FeeConfig | None = None
    apis: ChainApis | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.chain_name or self.path


class WalletModel(BaseModel):
    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class Currency(WalletModel):
    coin_denom: str = Field(serialization_alias='coinDenom')
    coin_minimal_denom: str = Field(serialization_alias='coinMinimalDenom')
    coin_decimals: int = Field(serialization_alias='coinDecimals')
    coin_gecko_id: str | None = Field(default=None, serialization_alias='coinGeckoId')


class GasPriceStep(WalletModel):
    low: float
    average: float
    high: float


class FeeCurrency(Currency):
    gas_price_step: GasPriceStep | None = Field(default=None, serialization_alias='gasPriceStep')


class Bech32Config(WalletModel):
    bech32_prefix_acc_addr: str = Field(serialization_alias='bech32PrefixAccAddr')
    bech32_prefix_acc_pub: str = Field(serialization_alias='bech32PrefixAccPub')
    bech32_prefix_val_addr: str = Field(serialization_alias='bech32PrefixValAddr')
    bech32_prefix_val_pub: str = Field(serialization_alias='bech32PrefixValPub')
    bech32_prefix_cons_addr: str = Field(serialization_alias='bech32PrefixConsAddr')
    bech32_prefix_cons_pub: str = Field(serialization_alias='bech32PrefixConsPub')


class Bip44(WalletModel):
    coin_type: int = Field(default=0, serialization_alias='coinType')


class ChainRecord(WalletModel):
    chain_id: str = Field(serialization_alias='chainId')
    currencies: list[Currency]
    rest: str
    rpc: str
    bech32_config: Bech32Config = Field(serialization_alias='bech32Config')
    chain_name: str = Field(serialization_alias='chainName')
    fee_currencies: list[FeeCurrency] = Field(serialization_alias='feeCurrencies')
    stake_currency: Currency = Field(serialization_alias='stakeCurrency')
    bip44: Bip44


class ResultEnvelope(WalletModel):
    mainnet: dict[str, ChainRecord] = Field(default_factory=dict)
    testnet: dict[str, ChainRecord] = Field(default_factory=dict)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)
