"""
DP Travels Backend - Destination Catalog
Static destination descriptions and cab prices (INR)
"""

from typing import Optional, List

from app.models import CabOption, DestinationEntry, DestinationResponse


DESTINATIONS = {
    "Tsomo Lake": {
        "description": "A serene high-altitude lake surrounded by snow-clad mountains.",
        "cabs": {"WagonR": 8000, "Innova": 12000},
    },
    "Namchi": {
        "description": "Home to the famous Char Dham and lush tea gardens.",
        "cabs": {"WagonR": 5000, "Innova": 8000},
    },
    "Guru Dongmar Lake": {
        "description": "A sacred and breathtaking lake at one of the world's highest altitudes.",
        "cabs": {"WagonR": 20000, "Innova": 28000},
    },
    "Nathu La": {
        "description": "A mountain pass on the Indo-China border offering stunning views.",
        "cabs": {"WagonR": 9000, "Innova": 15000},
    },
    "Gangtok": {
        "description": "The vibrant capital city of Sikkim, known for monasteries and mountain views.",
        "cabs": {"WagonR": 8000, "Innova": 10000},
    },
    "Pelling": {
        "description": "Picturesque hill town with monasteries, waterfalls, and the Sky Walk.",
        "cabs": {"WagonR": 6000, "Innova": 9000},
    },
}


def format_inr(amount: int) -> str:
    """
    Format a rupee amount with Indian digit grouping.

    The last three digits form one group, everything before it is grouped
    in pairs: 8000 -> "₹8,000", 100000 -> "₹1,00,000".
    """
    digits = str(abs(int(amount)))
    sign = "-" if amount < 0 else ""
    if len(digits) <= 3:
        return f"{sign}₹{digits}"

    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return f"{sign}₹{','.join(pairs)},{tail}"


def cab_option_label(cab: str, price: int) -> str:
    return f"{cab} - {format_inr(price)}"


class CatalogService:
    """Read-only access to the destination catalog."""

    def __init__(self, destinations: Optional[dict] = None):
        source = DESTINATIONS if destinations is None else destinations
        self._entries = {
            name: DestinationEntry(
                name=name,
                description=data["description"],
                cabPrices=dict(data["cabs"]),
            )
            for name, data in source.items()
        }

    def lookup(self, destination_name: str) -> Optional[DestinationEntry]:
        """Exact-name lookup; None when the destination is not sold."""
        return self._entries.get(destination_name)

    def list_destinations(self) -> List[DestinationEntry]:
        return list(self._entries.values())

    def cab_price(self, destination_name: str, cab: str) -> Optional[int]:
        entry = self.lookup(destination_name)
        if entry is None:
            return None
        return entry.cab_prices.get(cab)

    @staticmethod
    def to_response(entry: DestinationEntry) -> DestinationResponse:
        return DestinationResponse(
            name=entry.name,
            description=entry.description,
            cabPrices=dict(entry.cab_prices),
            cabs=[
                CabOption(
                    cab=cab,
                    price=price,
                    priceLabel=format_inr(price),
                    optionLabel=cab_option_label(cab, price),
                )
                for cab, price in entry.cab_prices.items()
            ],
        )


# Singleton instance
catalog_service = CatalogService()
