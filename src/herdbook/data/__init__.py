"""Data module - animal directory and registry cache."""

from herdbook.data.directory import (
    AnimalDirectory,
    AnimalNotFoundError,
    AnimalRef,
    ApiDirectory,
    InMemoryDirectory,
    Sex,
    animal_from_record,
)

__all__ = [
    "AnimalDirectory",
    "AnimalNotFoundError",
    "AnimalRef",
    "ApiDirectory",
    "InMemoryDirectory",
    "Sex",
    "animal_from_record",
]
