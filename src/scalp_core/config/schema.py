"""Configuration schema — Pydantic models for config.yaml."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ExchangeConfig(BaseModel):
    base_url: str = "https://api.gateio.ws/api/v4"
    settle: str = "usdt"
    contract: str = "ETH_USDT"
    reference_contract: str = "BTC_USDT"
    interval: str = "1m"
    htf_interval: str = "15m"
    candle_limit: int = 100
    daily_limit: int = 60
    poll_interval_s: int = 60
    api_key: str | None = None
    api_secret: str | None = None


class SentimentConfig(BaseModel):
    base_url: str = "https://api.alternative.me"


class DatabaseConfig(BaseModel):
    url: str = "sqlite:///signals.db"


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "json"


class ThresholdsConfig(BaseModel):
    """Decision thresholds. ``trend_relaxation`` lowers the open bar when BTC agrees."""

    open_threshold: int = 7
    strong_close_threshold: int = 7
    hold_risk_threshold: int = 5
    trend_relaxation: int = 1
    fng_greed: int = 75
    fng_fear: int = 25


class AppConfig(BaseModel):
    exchange: ExchangeConfig = Field(default_factory=ExchangeConfig)
    sentiment: SentimentConfig = Field(default_factory=SentimentConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    thresholds: ThresholdsConfig = Field(default_factory=ThresholdsConfig)
