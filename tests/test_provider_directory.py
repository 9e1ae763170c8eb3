import pandas as pd
import pytest

from dispatch.matcher import match_provider
from providers.directory import (
    PROVIDER_CSV_COLUMNS,
    StaticProviderDirectory,
    default_provider_directory,
    load_providers_csv,
)
from providers.models import ServiceProvider


def test_default_directory_has_stock_trucks():
    directory = default_provider_directory()
    available = directory.list_available()

    assert [p.id for p in available] == ["1", "3"]
    assert available[0].name == "Leandro Silva"
    assert available[0].eta_minutes == 8
    assert available[1].distance_km == 3.1


def test_list_available_filters_and_keeps_order():
    directory = StaticProviderDirectory([
        ServiceProvider.new("a", "A", "AAA-1111", 4.0, 1.0, 5, False),
        ServiceProvider.new("b", "B", "BBB-2222", 4.0, 2.0, 6, True),
        ServiceProvider.new("c", "C", "CCC-3333", 4.0, 0.5, 3, True),
    ])

    assert [p.id for p in directory.list_available()] == ["b", "c"]
    assert len(directory) == 3


def test_load_providers_csv(tmp_path):
    path = tmp_path / "providers.csv"
    pd.DataFrame([
        {"provider_id": "TOW-001", "name": "Ana Lima", "plate": "XYZ-1000", "rating": 4.9,
         "distance_km": 7.5, "eta_minutes": 25, "available": True},
        {"provider_id": "TOW-002", "name": "Paulo Costa", "plate": "QWE-2000", "rating": 4.1,
         "distance_km": 1.2, "eta_minutes": 6, "available": False},
    ], columns=PROVIDER_CSV_COLUMNS).to_csv(path, index=False)

    directory = load_providers_csv(path)

    assert len(directory) == 2
    available = directory.list_available()
    assert [p.id for p in available] == ["TOW-001"]
    assert available[0].eta_minutes == 25
    assert isinstance(available[0].eta_minutes, int)
    assert available[0].available is True


def test_load_providers_csv_missing_columns(tmp_path):
    path = tmp_path / "broken.csv"
    pd.DataFrame([{"provider_id": "x", "name": "X"}]).to_csv(path, index=False)

    with pytest.raises(ValueError, match="missing columns"):
        load_providers_csv(path)


@pytest.mark.parametrize("field, value", [("rating", 5.1), ("distance_km", -0.1), ("eta_minutes", -1)])
def test_provider_rejects_out_of_range_values(field, value):
    kwargs = dict(id="x", name="X", plate="AAA-0000", rating=4.0, distance_km=1.0, eta_minutes=3)
    kwargs[field] = value

    with pytest.raises(ValueError):
        ServiceProvider(**kwargs)


def test_new_coerces_string_fields():
    provider = ServiceProvider.new(7, "X", "AAA-0000", "4.5", "2.0", "9", "false")

    assert provider.id == "7"
    assert provider.rating == 4.5
    assert provider.eta_minutes == 9
    assert provider.available is False


def test_blank_availability_counts_as_unavailable(tmp_path):
    path = tmp_path / "providers.csv"
    path.write_text(
        "provider_id,name,plate,rating,distance_km,eta_minutes,available\n"
        "A,Off Duty,AAA-1111,4.5,0.5,3,\n"
        "B,On Duty,BBB-2222,4.5,5.0,9,True\n"
    )

    directory = load_providers_csv(path)

    assert [p.id for p in directory.list_available()] == ["B"]
    assert match_provider(directory.list_available()).id == "B"
