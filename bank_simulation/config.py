"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class SimulationConfig(BaseSettings):
    """Bank simulation configuration"""

    model_config = SettingsConfigDict(
        env_prefix="BANKSIM_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Demo client
    client_name: str = "John Doe"
    client_id: str = "CLIENT123"

    # Seed accounts (decimal values as strings)
    saving_account_id: str = "SAVING789"
    saving_balance: str = "2000000"
    saving_monthly_rate: str = "0.006"  # 0.6% per month

    checking_account_id: str = "CHECKING321"
    checking_balance: str = "1500000"

    cdt_id: str = "CDT001"
    cdt_term_months: int = 12
    cdt_principal: str = "1000000"
    cdt_annual_rate: str = "0.05"

    # Business rules for opening a CDT
    cdt_min_term_months: int = 1
    cdt_max_term_months: int = 60
    cdt_max_annual_rate: str = "0.20"

    # Projections
    max_projection_months: int = 120

    # API configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8090

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text


# Global configuration instance
config = SimulationConfig()


def get_config() -> SimulationConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> SimulationConfig:
    """Reload configuration from environment"""
    global config
    config = SimulationConfig()
    return config
