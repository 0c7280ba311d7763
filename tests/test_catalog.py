"""
DP Travels Backend - Destination Catalog Tests
"""

import pytest
from httpx import AsyncClient

from app.services.catalog_service import catalog_service, cab_option_label, format_inr


class TestFormatInr:

    @pytest.mark.parametrize(
        "amount,expected",
        [
            (500, "₹500"),
            (5000, "₹5,000"),
            (12000, "₹12,000"),
            (100000, "₹1,00,000"),
            (2850000, "₹28,50,000"),
            (12345678, "₹1,23,45,678"),
        ],
    )
    def test_indian_grouping(self, amount, expected):
        assert format_inr(amount) == expected

    def test_option_label(self):
        assert cab_option_label("Innova", 28000) == "Innova - ₹28,000"


class TestCatalogLookup:

    def test_known_destination(self):
        entry = catalog_service.lookup("Namchi")
        assert entry is not None
        assert entry.cab_prices == {"WagonR": 5000, "Innova": 8000}
        assert "tea gardens" in entry.description

    def test_unknown_destination(self):
        assert catalog_service.lookup("Atlantis") is None

    def test_lookup_is_exact(self):
        assert catalog_service.lookup("namchi") is None

    def test_all_destinations_listed(self):
        names = [entry.name for entry in catalog_service.list_destinations()]
        assert names == ["Tsomo Lake", "Namchi", "Guru Dongmar Lake", "Nathu La", "Gangtok", "Pelling"]

    def test_all_prices_positive(self):
        for entry in catalog_service.list_destinations():
            assert all(price > 0 for price in entry.cab_prices.values())

    def test_cab_price(self):
        assert catalog_service.cab_price("Gangtok", "Innova") == 10000
        assert catalog_service.cab_price("Gangtok", "Bus") is None
        assert catalog_service.cab_price("Atlantis", "Innova") is None


@pytest.mark.anyio
async def test_list_destinations_endpoint(client: AsyncClient):
    response = await client.get("/destinations")
    assert response.status_code == 200
    destinations = response.json()["destinations"]
    assert len(destinations) == 6
    guru = next(item for item in destinations if item["name"] == "Guru Dongmar Lake")
    assert guru["cabPrices"]["Innova"] == 28000
    assert guru["cabs"][0]["optionLabel"] == "WagonR - ₹20,000"


@pytest.mark.anyio
async def test_get_destination_endpoint(client: AsyncClient):
    response = await client.get("/destinations/Tsomo Lake")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Tsomo Lake"
    assert data["cabs"][1]["priceLabel"] == "₹12,000"


@pytest.mark.anyio
async def test_get_unknown_destination(client: AsyncClient):
    response = await client.get("/destinations/Atlantis")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Destination not found"}
