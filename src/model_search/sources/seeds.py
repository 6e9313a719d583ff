"""Curated popular-model lists for sources behind bot mitigation.

Thumbnails are CDN URLs; clients route them through the image proxy.
"""

from __future__ import annotations

from model_search.models import ModelRecord, SourceId

_THINGIVERSE = [
    ("Flexi Rex (T-Rex)", "DrLex", "https://cdn.thingiverse.com/renders/9e/f5/92/56/d5/5e04faf6b1ebee0735ffb82771ca9051_preview_featured.jpg", "https://www.thingiverse.com/thing:2738211", 45000, 890000),
    ("Low Poly Pikachu", "FLOWALISTIK", "https://cdn.thingiverse.com/renders/60/5d/6d/72/c4/pikachu_low_poly_pokemon_flowalistik_preview_featured.jpg", "https://www.thingiverse.com/thing:376601", 22000, 410000),
    ("Phone Stand", "WilliamAAdams", "https://cdn.thingiverse.com/renders/37/83/e7/42/ac/841e55362ab601e2ed4c2de08074e8b2_preview_featured.jpg", "https://www.thingiverse.com/thing:2194278", 32000, 650000),
    ("Modular Hex Drawers", "O3D", "https://cdn.thingiverse.com/renders/8f/98/c7/7a/98/60acf4823a53e317955cdddbf12ddd12_preview_featured.jpg", "https://www.thingiverse.com/thing:2425429", 20000, 380000),
    ("Articulated Slug", "Fizz Creations", "https://cdn.thingiverse.com/assets/d6/82/8f/11/12/featured_preview_CoverPhoto.jpg", "https://www.thingiverse.com/thing:4727448", 15000, 280000),
    ("Raspberry Pi 4 Case", "Malolo", "https://cdn.thingiverse.com/assets/21/f7/ca/64/68/featured_preview_Logo_MM3.jpg", "https://www.thingiverse.com/thing:3723561", 18000, 350000),
    ("Cable Management Clips", "Filar3D", "https://cdn.thingiverse.com/assets/f3/ba/2e/d3/d0/featured_preview_IMG_20170804_104455.jpg", "https://www.thingiverse.com/thing:2466594", 25000, 480000),
    ("3DBenchy", "CreativeTools", "", "https://www.thingiverse.com/thing:763622", 17000, 340000),
    ("Articulated Dragon", "McGybeer", "", "https://www.thingiverse.com/thing:4817953", 28000, 520000),
    ("Flexi Shark", "McGybeer", "", "https://www.thingiverse.com/thing:4846879", 12000, 220000),
]

_THANGS = [
    ("Articulated Axolotl", "Printed Obsession", "", "https://thangs.com/designer/PrintedObsession/3d-model/Articulated%20Axolotl-799498", 31000, 620000),
    ("Baby Groot Planter", "Fotis Mint", "", "https://thangs.com/designer/Fotis%20Mint/3d-model/Baby%20Groot%20Flower%20Pot-38826", 26000, 510000),
    ("Flexi Octopus", "McGybeer", "", "https://thangs.com/designer/McGybeer/3d-model/Cute%20Flexi%20Print-in-Place%20Octopus-798703", 23000, 440000),
    ("Mandalorian Helmet", "Galactic Armory", "", "https://thangs.com/designer/Galactic%20Armory/3d-model/The%20Mandalorian%20Helmet-45873", 20000, 390000),
    ("Articulated Dragon", "McGybeer", "", "https://thangs.com/designer/McGybeer/3d-model/Articulated%20Dragon-798707", 18000, 350000),
    ("Headphone Stand", "Various", "", "https://thangs.com/search/headphone%20stand", 16000, 310000),
    ("Dice Tower", "Various", "", "https://thangs.com/search/dice%20tower", 15000, 290000),
    ("Cable Organizer", "Various", "", "https://thangs.com/search/cable%20organizer", 14000, 270000),
    ("Phone Stand", "Various", "", "https://thangs.com/search/phone%20stand", 13000, 250000),
    ("Geometric Vase", "Various", "", "https://thangs.com/search/geometric%20vase", 12000, 230000),
]

_MYMINIFACTORY = [
    ("The Dragon", "Fotis Mint", "", "https://www.myminifactory.com/object/3d-print-the-dragon-100769", 42000, 810000),
    ("Cthulhu", "Fotis Mint", "", "https://www.myminifactory.com/object/3d-print-cthulhu-30203", 35000, 680000),
    ("Dice Guardian", "mz4250", "", "https://www.myminifactory.com/object/3d-print-dice-guardian-12345", 28000, 540000),
    ("Mind Flayer", "mz4250", "", "https://www.myminifactory.com/object/3d-print-mind-flayer-32001", 25000, 480000),
    ("Articulated Knight", "Printed Obsession", "", "https://www.myminifactory.com/object/3d-print-articulated-knight-56789", 22000, 420000),
    ("Baby Yoda", "Fotis Mint", "", "https://www.myminifactory.com/object/3d-print-baby-yoda-117365", 20000, 380000),
    ("Greek Statue Collection", "Scan The World", "", "https://www.myminifactory.com/users/Scan%20The%20World", 18000, 350000),
    ("Terrain Set", "Printable Scenery", "", "https://www.myminifactory.com/users/Printable%20Scenery", 16000, 310000),
    ("Beholder", "mz4250", "", "https://www.myminifactory.com/object/3d-print-beholder-28947", 15000, 290000),
    ("Dragon Bust", "Fotis Mint", "", "https://www.myminifactory.com/object/3d-print-dragon-bust-100770", 14000, 270000),
]

_SEEDS: dict[SourceId, list[tuple[str, str, str, str, int, int]]] = {
    SourceId.THINGIVERSE: _THINGIVERSE,
    SourceId.THANGS: _THANGS,
    SourceId.MYMINIFACTORY: _MYMINIFACTORY,
}


def seed_records(source: SourceId, limit: int) -> list[ModelRecord]:
    """Return up to ``limit`` curated records for ``source`` (empty if none)."""
    return [
        ModelRecord(
            title=title,
            creator=creator,
            thumbnail=thumbnail,
            url=url,
            likes=likes,
            downloads=downloads,
            source=source,
        )
        for title, creator, thumbnail, url, likes, downloads in _SEEDS.get(source, [])[:limit]
    ]
