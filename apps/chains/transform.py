from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .models import (
    AssetDefinition,
    Bech32Config,
    Bip44,
    ChainRecord,
    Currency,
    FeeCurrency,
    FeeToken,
    GasPriceStep,
    NetworkDescriptor
)

SKIP_NO_ENDPOINTS = 'no-endpoints'
SKIP_NO_ASSETS = 'no-assets'
SKIP_MALFORMED_ASSET = 'malformed-asset'
SKIP_NO_FEE_CURRENCIES = 'no-fee-currencies'


@dataclass(frozen=True)
class TransformOutcome:
    path: str
    name: str
    record: ChainRecord | None = None
    reason: str | None = None
    detail: str = ''

    @property
    def ok(self) -> bool:
        return self.record is not None


def _skip(descriptor: NetworkDescriptor, reason: str, detail: str) -> TransformOutcome:
    return TransformOutcome(
        path=descriptor.path,
        name=descriptor.display_name,
        reason=reason,
        detail=f'{descriptor.display_name} {detail}, skipping'
    )


def default_bech32_config(
    prefix: str,
    validator_prefix: str = 'val',
    consensus_prefix: str = 'cons',
    public_prefix: str = 'pub',
    operator_prefix: str = 'oper'
) -> Bech32Config:
    return Bech32Config(
        bech32_prefix_acc_addr=prefix,
        bech32_prefix_acc_pub=prefix + public_prefix,
        bech32_prefix_val_addr=prefix + validator_prefix + operator_prefix,
        bech32_prefix_val_pub=prefix + validator_prefix + operator_prefix + public_prefix,
        bech32_prefix_cons_addr=prefix + validator_prefix + consensus_prefix,
        bech32_prefix_cons_pub=prefix + validator_prefix + consensus_prefix + public_prefix
    )


def currency_from_asset(asset: AssetDefinition) -> Currency:
    display_unit = asset.denom_units[-1]
    return Currency(
        coin_denom=display_unit.denom,
        coin_minimal_denom=asset.denom_units[0].denom,
        coin_decimals=display_unit.exponent,
        coin_gecko_id=asset.coingecko_id
    )


def _find_asset(assets: list[AssetDefinition], denom: str) -> AssetDefinition | None:
    for asset in assets:
        if asset.denom == denom:
            return asset
    return None


def _resolve_coin_denom(asset: AssetDefinition | None, fallback: str) -> str:
    # matched display unit -> raw fee token denom
    if asset is not None and asset.denom_units and asset.denom_units[-1].denom:
        return asset.denom_units[-1].denom
    return fallback


def _resolve_minimal_denom(asset: AssetDefinition | None, fallback: str) -> str:
    # matched base unit -> raw fee token denom
    if asset is not None and asset.denom_units and asset.denom_units[0].denom:
        return asset.denom_units[0].denom
    return fallback


def _resolve_decimals(asset: AssetDefinition | None) -> int:
    # decimals override -> display unit exponent -> 0
    if asset is None:
        return 0
    if asset.decimals is not None:
        try:
            return int(asset.decimals)
        except (TypeError, ValueError):
            return 0
    if asset.denom_units:
        return asset.denom_units[-1].exponent
    return 0


def _resolve_gecko_id(asset: AssetDefinition | None) -> str:
    if asset is None:
        return ''
    return asset.coingecko_id or ''


def _is_set(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ''
    return value != 0


def gas_price_step(token: FeeToken) -> GasPriceStep | None:
    values = (token.low_gas_price, token.average_gas_price, token.high_gas_price)
    if not all(_is_set(value) for value in values):
        return None
    try:
        low, average, high = (float(value) for value in values)
    except (TypeError, ValueError):
        return None
    return GasPriceStep(low=low, average=average, high=high)


def resolve_fee_currency(token: FeeToken, assets: list[AssetDefinition]) -> FeeCurrency:
    asset = _find_asset(assets, token.denom)
    return FeeCurrency(
        coin_denom=_resolve_coin_denom(asset, token.denom),
        coin_minimal_denom=_resolve_minimal_denom(asset, token.denom),
        coin_decimals=_resolve_decimals(asset),
        coin_gecko_id=_resolve_gecko_id(asset),
        gas_price_step=gas_price_step(token)
    )


def transform_network(descriptor: NetworkDescriptor) -> TransformOutcome:
    apis = descriptor.apis
    if apis is None or not apis.rest or not apis.rpc:
        return _skip(descriptor, SKIP_NO_ENDPOINTS, 'has no REST/RPC endpoints')

    assets = descriptor.assets
    if not assets:
        return _skip(descriptor, SKIP_NO_ASSETS, 'has no assets')

    for asset in assets:
        if not asset.denom_units:
            return _skip(descriptor, SKIP_MALFORMED_ASSET, f'has asset {asset.denom} without denom units')

    stake_currency = currency_from_asset(assets[0])
    currencies = [currency_from_asset(asset) for asset in assets]

    fee_tokens = descriptor.fees.fee_tokens if descriptor.fees is not None else None
    if fee_tokens is None:
        return _skip(descriptor, SKIP_NO_FEE_CURRENCIES, 'has no fee currencies')
    fee_currencies = [resolve_fee_currency(token, assets) for token in fee_tokens]

    record = ChainRecord(
        chain_id=descriptor.chain_id,
        currencies=currencies,
        rest=apis.rest[0].address or '',
        rpc=apis.rpc[0].address or '',
        bech32_config=default_bech32_config(descriptor.bech32_prefix),
        chain_name=descriptor.chain_name,
        fee_currencies=fee_currencies,
        stake_currency=stake_currency,
        bip44=Bip44(coin_type=descriptor.slip44 if descriptor.slip44 is not None else 0)
    )
    return TransformOutcome(path=descriptor.path, name=descriptor.display_name, record=record)
