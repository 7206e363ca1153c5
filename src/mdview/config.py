"""Configuration system using pydantic-settings with environment variable loading."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class LoaderSettings(BaseSettings):
    """Input format selection and decoding parameters."""

    model_config = SettingsConfigDict(env_prefix="LOADER_")

    hdf5_time_tick_ms: int = 1  # sampling granularity of HDF5 day datasets
    flat_extensions: list[str] = [".bin", ".dat", ".mdv"]
    hdf5_extensions: list[str] = [".h5", ".hdf5"]
    default_format: Literal["flat", "hdf5"] = "flat"  # used for unknown extensions


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"
    loader: LoaderSettings = LoaderSettings()
