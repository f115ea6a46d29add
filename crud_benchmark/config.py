"""
Configuration settings for the CRUD benchmark.

Uses Pydantic Settings to load environment variables for the database
connection, the dataset location, sampler timing, and the metrics endpoint.
"""
from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    db_hosts: str = Field("localhost", alias="DB_HOSTS")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("my_database", alias="DB_NAME")
    table_name: str = Field("nearest_objects", alias="BENCHMARK_TABLE")
    database_replicas: str = Field("", alias="DATABASE_REPLICAS")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    json_logs: bool = Field(False, alias="JSON_LOGS")

    # Benchmark defaults
    dataset_path: str = Field("./dataset/neo.csv", alias="DATASET_PATH")
    benchmark_iterations: int = Field(30, alias="BENCHMARK_ITERATIONS")
    sample_interval_ms: int = Field(100, alias="SAMPLE_INTERVAL_MS")
    sample_wait_seconds: float = Field(5.0, alias="SAMPLE_WAIT_SECONDS")

    # Metrics endpoint
    metrics_port: int = Field(2112, alias="METRICS_PORT")
    metrics_addr: str = Field("0.0.0.0", alias="METRICS_ADDR")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def hosts(self) -> List[str]:
        return [host.strip() for host in self.db_hosts.split(",") if host.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
