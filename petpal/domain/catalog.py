"""
Static item catalogs: food, toys, vet options, species and cosmetics.

Items are tagged by kind so special behavior (mystery snack roll,
full-treatment bonus) branches on an enum, not on an id string.
"""

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

# Mystery snack restores one of these with equal probability
MYSTERY_SNACK_OUTCOMES = (5, 25)


class FoodKind(str, Enum):
    STANDARD = "standard"
    MYSTERY = "mystery"


class VetKind(str, Enum):
    CHECKUP = "checkup"
    FULL_TREATMENT = "full_treatment"


class CatalogItem(BaseModel, frozen=True):
    id: str
    name: str
    cost: int = Field(gt=0)
    emoji: str = ""


class FoodItem(CatalogItem):
    kind: FoodKind = FoodKind.STANDARD
    hunger_restore: int = Field(ge=0)
    happiness_bonus: int = Field(default=0, ge=0)


class ToyItem(CatalogItem):
    happiness_restore: int = Field(ge=0)
    energy_cost: int = Field(ge=0)


class VetOption(CatalogItem):
    kind: VetKind = VetKind.CHECKUP
    health_restore: int = Field(ge=0)

    @property
    def is_emergency(self) -> bool:
        """Full treatment counts as reactive spending, everything else preventive."""
        return self.kind is VetKind.FULL_TREATMENT


class Species(BaseModel, frozen=True):
    id: str
    name: str
    description: str = ""


class CosmeticOption(BaseModel, frozen=True):
    id: str
    label: str


FOOD_ITEMS: List[FoodItem] = [
    FoodItem(id="basic_kibble", name="Basic Kibble", cost=2, hunger_restore=15, emoji="🥣"),
    FoodItem(id="premium_meal", name="Premium Meal", cost=6, hunger_restore=30, happiness_bonus=5, emoji="🍲"),
    FoodItem(id="gourmet_feast", name="Gourmet Feast", cost=12, hunger_restore=50, happiness_bonus=15, emoji="🍱"),
    FoodItem(id="mystery_snack", name="Mystery Snack", cost=1, kind=FoodKind.MYSTERY, hunger_restore=5, emoji="🎁"),
]

TOY_ITEMS: List[ToyItem] = [
    ToyItem(id="yarn_ball", name="Yarn Ball", cost=3, happiness_restore=20, energy_cost=10, emoji="🧶"),
    ToyItem(id="puzzle_toy", name="Puzzle Toy", cost=8, happiness_restore=35, energy_cost=15, emoji="🧩"),
    ToyItem(id="luxury_playset", name="Luxury Playset", cost=15, happiness_restore=50, energy_cost=20, emoji="🎠"),
]

VET_OPTIONS: List[VetOption] = [
    VetOption(id="checkup", name="Checkup", cost=10, health_restore=20, emoji="🩺"),
    VetOption(id="full_treatment", name="Full Treatment", cost=25, kind=VetKind.FULL_TREATMENT,
              health_restore=50, emoji="🏥"),
]

SPECIES: List[Species] = [
    Species(id="dog", name="Dog", description="Loyal and eager to learn, always ready for a new trick."),
    Species(id="cat", name="Cat", description="Independent and clever, a master of relaxed confidence."),
    Species(id="rabbit", name="Rabbit", description="Quick, curious, and surprisingly bold for a small friend."),
    Species(id="hamster", name="Hamster", description="Tiny entrepreneur with big energy and endless hustle."),
    Species(id="dragon", name="Dragon", description="A legendary companion that rewards smart long-term planning."),
    Species(id="axolotl", name="Axolotl", description="Chill, resilient, and a reminder to pace yourself."),
]

ANIMAL_COLORS: List[CosmeticOption] = [
    CosmeticOption(id="golden", label="Golden"),
    CosmeticOption(id="snow", label="Snow"),
    CosmeticOption(id="midnight", label="Midnight"),
    CosmeticOption(id="crimson", label="Crimson"),
    CosmeticOption(id="jade", label="Jade"),
    CosmeticOption(id="violet", label="Violet"),
]

ACCESSORIES: List[CosmeticOption] = [
    CosmeticOption(id="bandana", label="Bandana"),
    CosmeticOption(id="bow", label="Bow"),
    CosmeticOption(id="glasses", label="Glasses"),
    CosmeticOption(id="crown", label="Crown"),
]

DEFAULT_CUSTOMIZATION = {
    "animal_color": ANIMAL_COLORS[0].id,
    "accessory": ACCESSORIES[0].id,
}


def _by_id(items, item_id: str):
    for item in items:
        if item.id == item_id:
            return item
    return None


def get_food(item_id: str) -> Optional[FoodItem]:
    return _by_id(FOOD_ITEMS, item_id)


def get_toy(item_id: str) -> Optional[ToyItem]:
    return _by_id(TOY_ITEMS, item_id)


def get_vet_option(item_id: str) -> Optional[VetOption]:
    return _by_id(VET_OPTIONS, item_id)


def get_species(species_id: str) -> Optional[Species]:
    return _by_id(SPECIES, species_id)


def normalize_customization(customization: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Resolve cosmetic choices against the catalog.

    Known keys with unknown ids fall back to defaults; any other keys
    (personality and the like) pass through untouched.
    """
    source = dict(customization) if isinstance(customization, Mapping) else {}
    normalized = dict(source)
    color = source.get("animal_color")
    accessory = source.get("accessory")
    normalized["animal_color"] = color if _by_id(ANIMAL_COLORS, color) else DEFAULT_CUSTOMIZATION["animal_color"]
    normalized["accessory"] = accessory if _by_id(ACCESSORIES, accessory) else DEFAULT_CUSTOMIZATION["accessory"]
    return normalized
