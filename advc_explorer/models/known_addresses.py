"""Known address labels consulted by presentation layers."""

from typing import Dict, List, Optional, Any
from dataclasses import dataclass
from enum import Enum


class AddressCategory(str, Enum):
    DEV = "dev"
    POOL = "pool"
    EXCHANGE = "exchange"
    SERVICE = "service"
    TEAM = "team"
    OTHER = "other"


@dataclass(frozen=True)
class KnownAddress:
    address: str
    tag: str
    category: AddressCategory
    description: Optional[str] = None
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "tag": self.tag,
            "description": self.description,
            "url": self.url,
            "category": self.category.value,
        }


_NESTEX = "https://trade.nestex.one"

KNOWN_ADDRESSES: List[KnownAddress] = [
    KnownAddress("AeD4pPi3D5kB9aMEgH3eRHoD6XMKbrpRAW", "Dev Fund (Master Wallet)", AddressCategory.DEV,
                 description="AdventureCoin Development Fund (Master Wallet)"),
    KnownAddress("AKUg58E171GVJNw2RQzooQnuHs1zns2ecD", "Development Wallet", AddressCategory.TEAM,
                 description="Team wallet"),
    KnownAddress("AJzNjXgPYUGe9cmWz2ND7hrEYA1AiwpggX", "Community Wallet", AddressCategory.TEAM,
                 description="Team wallet"),
    KnownAddress("Ac2DHE6freiBENuzZ3VTfY8zwwKc2oX2Fw", "Charity Wallet", AddressCategory.TEAM,
                 description="Team wallet"),
    KnownAddress("AMmKZs3GTWQnGdk3WjR9Q35cizHDVtHjie", "Staff Payment Wallet", AddressCategory.TEAM,
                 description="Team wallet"),
    KnownAddress("AREstbeSFzzbMGToUF6E2i3DbPa5nJB4Lz", "NovaGrid", AddressCategory.POOL,
                 description="Mining Pool", url="https://novagrid.online/"),
    KnownAddress("Ae5vqtfRFKWYVfgCzyR4iat8FuKfLH4jve", "Coin Miners", AddressCategory.POOL,
                 description="Mining Pool", url="https://pool.coin-miners.info/"),
    KnownAddress("AXRdunEc71n9oKLyLabAzV9eATRgkmGzMd", "RPlant", AddressCategory.POOL,
                 description="Mining Pool", url="https://pool.rplant.xyz"),
    KnownAddress("AKeNU8umLeCy4ZDJP5fkqM69VQEg4ydhka", "Eve Pool", AddressCategory.POOL,
                 description="Mining Pool", url="https://mine.evepool.pw"),
    KnownAddress("AVayH8jK94vSHoden4UFjwnWqPGSEQvYpf", "Zerg Pool", AddressCategory.POOL,
                 description="Mining Pool", url="https://zergpool.com"),
    KnownAddress("AQz6FkTNb3V5eMR42ui1YMge7vWMbgPNQq", "NestEx", AddressCategory.EXCHANGE,
                 description="Exchange", url=_NESTEX),
    KnownAddress("AWxxu9EGYB6yjzaFuYBrW5UQ7LBTfdhbXf", "NestEx", AddressCategory.EXCHANGE,
                 description="Exchange", url=_NESTEX),
    KnownAddress("AbsPyiG15Xn9ppKmCMNDmTBw41mJA963gC", "NestEx", AddressCategory.EXCHANGE,
                 description="Exchange", url=_NESTEX),
    KnownAddress("AGiTbrSMmEMdqqp28T2V1iwFkmjUzDSguP", "NestEx", AddressCategory.EXCHANGE,
                 description="Exchange", url=_NESTEX),
    KnownAddress("ASjX2TfboXYayMFc21K1DGvMsW9GT1kJKe", "NestEx", AddressCategory.EXCHANGE,
                 description="Exchange", url=_NESTEX),
]

_BY_ADDRESS: Dict[str, KnownAddress] = {entry.address: entry for entry in KNOWN_ADDRESSES}


def get_known_address(address: str) -> Optional[KnownAddress]:
    """Return the label record for an address, or None if unlabelled."""
    return _BY_ADDRESS.get(address)


def get_address_tag(address: str) -> Optional[str]:
    known = _BY_ADDRESS.get(address)
    return known.tag if known else None


def get_addresses_by_category(category: AddressCategory) -> List[KnownAddress]:
    return [entry for entry in KNOWN_ADDRESSES if entry.category == category]
