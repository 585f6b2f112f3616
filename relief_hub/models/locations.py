"""Sri Lanka provinces and districts, used to bucket help requests by area."""

from enum import IntEnum


class Province(IntEnum):
    WESTERN = 1
    CENTRAL = 2
    SOUTHERN = 3
    NORTHERN = 4
    EASTERN = 5
    NORTH_WESTERN = 6
    NORTH_CENTRAL = 7
    UVA = 8
    SABARAGAMUWA = 9


class District(IntEnum):
    COLOMBO = 1
    GAMPAHA = 2
    KALUTARA = 3
    KANDY = 4
    MATALE = 5
    NUWARA_ELIYA = 6
    GALLE = 7
    MATARA = 8
    HAMBANTOTA = 9
    JAFFNA = 10
    KILINOCHCHI = 11
    MANNAR = 12
    MULLAITIVU = 13
    VAVUNIYA = 14
    BATTICALOA = 15
    AMPARA = 16
    TRINCOMALEE = 17
    KURUNEGALA = 18
    PUTTALAM = 19
    ANURADHAPURA = 20
    POLONNARUWA = 21
    BADULLA = 22
    MONARAGALA = 23
    RATNAPURA = 24
    KEGALLE = 25


PROVINCE_NAMES: dict[Province, str] = {
    Province.WESTERN: "Western Province",
    Province.CENTRAL: "Central Province",
    Province.SOUTHERN: "Southern Province",
    Province.NORTHERN: "Northern Province",
    Province.EASTERN: "Eastern Province",
    Province.NORTH_WESTERN: "North Western Province",
    Province.NORTH_CENTRAL: "North Central Province",
    Province.UVA: "Uva Province",
    Province.SABARAGAMUWA: "Sabaragamuwa Province",
}

DISTRICT_NAMES: dict[District, str] = {
    District.COLOMBO: "Colombo",
    District.GAMPAHA: "Gampaha",
    District.KALUTARA: "Kalutara",
    District.KANDY: "Kandy",
    District.MATALE: "Matale",
    District.NUWARA_ELIYA: "Nuwara Eliya",
    District.GALLE: "Galle",
    District.MATARA: "Matara",
    District.HAMBANTOTA: "Hambantota",
    District.JAFFNA: "Jaffna",
    District.KILINOCHCHI: "Kilinochchi",
    District.MANNAR: "Mannar",
    District.MULLAITIVU: "Mullaitivu",
    District.VAVUNIYA: "Vavuniya",
    District.BATTICALOA: "Batticaloa",
    District.AMPARA: "Ampara",
    District.TRINCOMALEE: "Trincomalee",
    District.KURUNEGALA: "Kurunegala",
    District.PUTTALAM: "Puttalam",
    District.ANURADHAPURA: "Anuradhapura",
    District.POLONNARUWA: "Polonnaruwa",
    District.BADULLA: "Badulla",
    District.MONARAGALA: "Monaragala",
    District.RATNAPURA: "Ratnapura",
    District.KEGALLE: "Kegalle",
}

PROVINCE_DISTRICTS: dict[Province, list[District]] = {
    Province.WESTERN: [District.COLOMBO, District.GAMPAHA, District.KALUTARA],
    Province.CENTRAL: [District.KANDY, District.MATALE, District.NUWARA_ELIYA],
    Province.SOUTHERN: [District.GALLE, District.MATARA, District.HAMBANTOTA],
    Province.NORTHERN: [
        District.JAFFNA,
        District.KILINOCHCHI,
        District.MANNAR,
        District.MULLAITIVU,
        District.VAVUNIYA,
    ],
    Province.EASTERN: [District.BATTICALOA, District.AMPARA, District.TRINCOMALEE],
    Province.NORTH_WESTERN: [District.KURUNEGALA, District.PUTTALAM],
    Province.NORTH_CENTRAL: [District.ANURADHAPURA, District.POLONNARUWA],
    Province.UVA: [District.BADULLA, District.MONARAGALA],
    Province.SABARAGAMUWA: [District.RATNAPURA, District.KEGALLE],
}


def province_of(district: District) -> Province:
    for province, districts in PROVINCE_DISTRICTS.items():
        if district in districts:
            return province
    raise ValueError(f"District {district!r} has no province")


def district_for_area(area: str | None) -> str | None:
    """Return the district name mentioned in a free-text area, or None.

    Longest names are tried first so "Nuwara Eliya" wins over shorter overlaps.
    """
    if not area:
        return None
    text = area.lower()
    for name in sorted(DISTRICT_NAMES.values(), key=len, reverse=True):
        if name.lower() in text:
            return name
    return None
