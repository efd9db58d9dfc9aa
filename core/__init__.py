"""
Core Package

The shared exchange-abstraction runtime every venue adapter builds on:
- ExchangeInterface: Abstract capability surface + shared cross-venue policy
- ExchangeManager: Registry of venue instances sharing one ExchangeContext
- TradeablePairFilter / ReferenceData: Pair admission from fees and confirmation times
- NonceRegistry: Per-venue strictly increasing nonces
- PublicQueryClient: Retrying client for public endpoints
- Schemas: Pydantic models for pairs, fees, orderbooks and tickers
"""
