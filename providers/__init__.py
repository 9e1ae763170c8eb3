"""
Providers domain package.

Public API:
- Domain model: ServiceProvider
- Directory: ProviderDirectory, StaticProviderDirectory,
  default_provider_directory, load_providers_csv
"""
from .models import ServiceProvider
from .directory import (
    ProviderDirectory,
    StaticProviderDirectory,
    default_provider_directory,
    load_providers_csv,
)

__all__ = ["ServiceProvider",
           "ProviderDirectory",
             "StaticProviderDirectory",
               "default_provider_directory",
               "load_providers_csv",
               ]
