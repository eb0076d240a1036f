from __future__ import annotations

from domain.pricing import Coin, ProviderVariant

from .errors import UnsupportedCoinError, UnsupportedProviderError

# Kraken names bitcoin XBT in its pair symbols.
KRAKEN_BTC = "XBT"


class PathResolver:
    """Maps a coin to the pair symbols bridging it to a provider's quotable base.

    Kraken bridges to the configured fiat, Binance to BTC.
    """

    def __init__(self, fiat_coin: Coin) -> None:
        self.fiat_coin = fiat_coin

    def path_to_base(self, coin: Coin, variant: ProviderVariant) -> tuple[str, ...]:
        if variant in (ProviderVariant.UNSPECIFIED, ProviderVariant.KRAKEN):
            return self.kraken_path(coin)
        if variant == ProviderVariant.BINANCE:
            return self.binance_path(coin)
        raise UnsupportedProviderError(f"Unsupported provider {variant!r}", stage="path", coin=str(coin))

    def kraken_path(self, coin: Coin) -> tuple[str, ...]:
        if coin == self.fiat_coin:
            return ()
        # EOS is priced through the XBT pair as well; only these two are bridged.
        if coin in (Coin.BTC, Coin.EOS):
            return (f"{KRAKEN_BTC}{self.fiat_coin.value}",)
        raise UnsupportedCoinError(
            f"No Kraken path from {coin} to {self.fiat_coin}", stage="path", coin=str(coin)
        )

    @staticmethod
    def binance_path(coin: Coin) -> tuple[str, ...]:
        if coin == Coin.BTC:
            return ()
        return (f"{coin.value}{Coin.BTC.value}",)


__all__ = ["KRAKEN_BTC", "PathResolver"]
