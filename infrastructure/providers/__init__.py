from .currencyapi import CurrencyAPIProvider

__all__ = ['CurrencyAPIProvider']
