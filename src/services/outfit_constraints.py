"""Body-area occupancy constraints for assembled outfits.

Every product occupies zero or more (body area, layer) slots. Each slot has
a cap, e.g. one hat, one pair of shoes, one torso underwear + main + outer
layer. On top of the slot caps an outfit must hold between MIN_PIECES and
MAX_PIECES products.

Everything here is pure: functions take products and return new values,
nothing touches a store.

Classification order for a product:
1. Explicit ``body_area`` / ``layer`` fields on the record.
2. Garment keywords in ``category``.
3. Garment keywords in ``title``.
Products that match nothing occupy no slot and are never trimmed for
occupancy reasons.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import (
    TYPE_CHECKING,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
)

from config.constants import DEFAULT_OUTFIT_CONFIG

if TYPE_CHECKING:
    from services.models import Product


MIN_PIECES: int = DEFAULT_OUTFIT_CONFIG.MIN_PIECES
MAX_PIECES: int = DEFAULT_OUTFIT_CONFIG.MAX_PIECES


class BodyArea(str, Enum):
    HEAD = "head"
    EYES = "eyes"
    NECK = "neck"
    TORSO = "torso"
    ARMS = "arms"
    WAIST = "waist"
    LEGS = "legs"
    FEET = "feet"
    FINGERS = "fingers"
    EARS = "ears"


class Layer(str, Enum):
    UNDERWEAR = "underwear"
    MAIN = "main"
    OUTER = "outer"
    HOSIERY = "hosiery"


Slot = Tuple[BodyArea, Layer]


# ============================================================================
# Slot caps
# ============================================================================

SLOT_CAPS: Mapping[Slot, int] = MappingProxyType({
    (BodyArea.HEAD, Layer.MAIN): 1,
    (BodyArea.EYES, Layer.MAIN): 1,
    (BodyArea.NECK, Layer.MAIN): 1,
    (BodyArea.TORSO, Layer.UNDERWEAR): 1,
    (BodyArea.TORSO, Layer.MAIN): 1,
    (BodyArea.TORSO, Layer.OUTER): 1,
    (BodyArea.ARMS, Layer.MAIN): 1,
    (BodyArea.WAIST, Layer.MAIN): 1,
    (BodyArea.LEGS, Layer.UNDERWEAR): 1,
    (BodyArea.LEGS, Layer.MAIN): 1,
    (BodyArea.LEGS, Layer.HOSIERY): 1,
    (BodyArea.FEET, Layer.HOSIERY): 1,
    (BodyArea.FEET, Layer.MAIN): 1,
    (BodyArea.FINGERS, Layer.MAIN): 1,
    (BodyArea.EARS, Layer.MAIN): 1,
})

# Explicitly tagged slots outside the table (e.g. head/outer)
DEFAULT_SLOT_CAP: int = 1


def slot_cap(slot: Slot) -> int:
    return SLOT_CAPS.get(slot, DEFAULT_SLOT_CAP)


def describe_slot(slot: Slot) -> str:
    area, layer = slot
    return f"{area.value}/{layer.value}"


# ============================================================================
# Classification
# ============================================================================

_AREA_ALIASES: Dict[str, BodyArea] = {
    **{area.value: area for area in BodyArea},
    "hat": BodyArea.HEAD,
    "eye": BodyArea.EYES,
    "face": BodyArea.EYES,
    "torso_upper": BodyArea.TORSO,
    "upper_body": BodyArea.TORSO,
    "body": BodyArea.TORSO,
    "arm": BodyArea.ARMS,
    "wrist": BodyArea.ARMS,
    "wrists": BodyArea.ARMS,
    "leg": BodyArea.LEGS,
    "lower_body": BodyArea.LEGS,
    "foot": BodyArea.FEET,
    "finger": BodyArea.FINGERS,
    "hands": BodyArea.FINGERS,
    "ear": BodyArea.EARS,
}

_LAYER_ALIASES: Dict[str, Layer] = {
    **{layer.value: layer for layer in Layer},
    "under": Layer.UNDERWEAR,
    "base": Layer.MAIN,
    "outerwear": Layer.OUTER,
    "socks": Layer.HOSIERY,
}

_HEAD = ((BodyArea.HEAD, Layer.MAIN),)
_EYES = ((BodyArea.EYES, Layer.MAIN),)
_NECK = ((BodyArea.NECK, Layer.MAIN),)
_TORSO_UNDER = ((BodyArea.TORSO, Layer.UNDERWEAR),)
_TORSO_MAIN = ((BodyArea.TORSO, Layer.MAIN),)
_TORSO_OUTER = ((BodyArea.TORSO, Layer.OUTER),)
_ARMS = ((BodyArea.ARMS, Layer.MAIN),)
_WAIST = ((BodyArea.WAIST, Layer.MAIN),)
_LEGS_UNDER = ((BodyArea.LEGS, Layer.UNDERWEAR),)
_LEGS_MAIN = ((BodyArea.LEGS, Layer.MAIN),)
_LEGS_HOSIERY = ((BodyArea.LEGS, Layer.HOSIERY),)
_FEET_HOSIERY = ((BodyArea.FEET, Layer.HOSIERY),)
_FEET_MAIN = ((BodyArea.FEET, Layer.MAIN),)
_FINGERS = ((BodyArea.FINGERS, Layer.MAIN),)
_EARS = ((BodyArea.EARS, Layer.MAIN),)
_ONE_PIECE = _TORSO_MAIN + _LEGS_MAIN

# Singular garment keyword -> slots. Matched as whole words, plural allowed.
_GARMENT_SLOTS: Dict[str, Tuple[Slot, ...]] = {
    # head
    "hat": _HEAD, "bucket hat": _HEAD, "cap": _HEAD, "beanie": _HEAD,
    "beret": _HEAD, "fedora": _HEAD, "headband": _HEAD, "balaclava": _HEAD,
    # eyes
    "sunglasses": _EYES, "glasses": _EYES, "eyewear": _EYES,
    # neck
    "scarf": _NECK, "scarves": _NECK, "necklace": _NECK, "tie": _NECK,
    "bow tie": _NECK, "choker": _NECK, "pendant": _NECK, "bandana": _NECK,
    # torso
    "bra": _TORSO_UNDER, "bralette": _TORSO_UNDER, "sports bra": _TORSO_UNDER,
    "undershirt": _TORSO_UNDER,
    "top": _TORSO_MAIN, "tank top": _TORSO_MAIN, "crop top": _TORSO_MAIN,
    "t-shirt": _TORSO_MAIN, "tee": _TORSO_MAIN, "shirt": _TORSO_MAIN,
    "blouse": _TORSO_MAIN, "polo": _TORSO_MAIN, "sweater": _TORSO_MAIN,
    "jumper": _TORSO_MAIN, "hoodie": _TORSO_MAIN, "sweatshirt": _TORSO_MAIN,
    "bodysuit": _TORSO_MAIN, "tunic": _TORSO_MAIN, "camisole": _TORSO_MAIN,
    "jacket": _TORSO_OUTER, "coat": _TORSO_OUTER, "trench coat": _TORSO_OUTER,
    "blazer": _TORSO_OUTER, "parka": _TORSO_OUTER, "puffer": _TORSO_OUTER,
    "cardigan": _TORSO_OUTER, "gilet": _TORSO_OUTER, "windbreaker": _TORSO_OUTER,
    "raincoat": _TORSO_OUTER, "anorak": _TORSO_OUTER, "bomber": _TORSO_OUTER,
    # one-piece garments cover torso and legs
    "dress": _ONE_PIECE, "jumpsuit": _ONE_PIECE, "romper": _ONE_PIECE,
    "playsuit": _ONE_PIECE, "overalls": _ONE_PIECE, "dungarees": _ONE_PIECE,
    # arms / wrist
    "watch": _ARMS, "bracelet": _ARMS, "bangle": _ARMS, "cuff": _ARMS,
    # waist
    "belt": _WAIST,
    # legs
    "briefs": _LEGS_UNDER, "boxers": _LEGS_UNDER, "panties": _LEGS_UNDER,
    "underwear": _LEGS_UNDER, "thong": _LEGS_UNDER, "knickers": _LEGS_UNDER,
    "jeans": _LEGS_MAIN, "trousers": _LEGS_MAIN, "pants": _LEGS_MAIN,
    "chinos": _LEGS_MAIN, "shorts": _LEGS_MAIN, "skirt": _LEGS_MAIN,
    "leggings": _LEGS_MAIN, "joggers": _LEGS_MAIN, "sweatpants": _LEGS_MAIN,
    "tights": _LEGS_HOSIERY, "stockings": _LEGS_HOSIERY, "pantyhose": _LEGS_HOSIERY,
    # feet
    "sock": _FEET_HOSIERY,
    "shoe": _FEET_MAIN, "sneaker": _FEET_MAIN, "trainer": _FEET_MAIN,
    "boot": _FEET_MAIN, "sandal": _FEET_MAIN, "heel": _FEET_MAIN,
    "loafer": _FEET_MAIN, "flats": _FEET_MAIN, "pump": _FEET_MAIN,
    "slipper": _FEET_MAIN, "mule": _FEET_MAIN, "espadrille": _FEET_MAIN,
    # fingers / ears
    "ring": _FINGERS,
    "earring": _EARS, "ear cuff": _EARS, "hoop earring": _EARS,
}

# The head noun comes last in garment names, so the match ending furthest
# right wins ("dress shoes" are shoes). Ties go to the longer keyword, so
# "bow tie" beats "tie". Hyphenated words are atomic: "tie-dye" is not a tie.
_GARMENT_PATTERNS: List[Tuple[re.Pattern, int, Tuple[Slot, ...]]] = [
    (re.compile(rf"(?<![\w-]){re.escape(keyword)}(?:s|es)?(?![\w-])"), len(keyword), slots)
    for keyword, slots in sorted(_GARMENT_SLOTS.items())
]

_NON_WORD_RE = re.compile(r"[^a-z0-9\-]+")


def _normalize(text: str) -> str:
    return _NON_WORD_RE.sub(" ", text.lower().replace("_", " ")).strip()


def _lookup_alias(value: Optional[str], aliases: Dict[str, Enum]) -> Optional[Enum]:
    if not value:
        return None
    key = str(value).lower().strip().replace(" ", "_").replace("-", "_")
    return aliases.get(key)


def classify_text(text: Optional[str]) -> FrozenSet[Slot]:
    """Slots implied by a garment description, e.g. 'Denim Jeans'."""
    if not text:
        return frozenset()
    normalized = _normalize(text)
    best: Optional[Tuple[int, int]] = None
    best_slots: Tuple[Slot, ...] = ()
    for pattern, length, slots in _GARMENT_PATTERNS:
        for match in pattern.finditer(normalized):
            rank = (match.end(), length)
            if best is None or rank > best:
                best, best_slots = rank, slots
    return frozenset(best_slots)


def slots_for(product: "Product") -> FrozenSet[Slot]:
    """Slots a product occupies."""
    area = _lookup_alias(getattr(product, "body_area", None), _AREA_ALIASES)
    if area is not None:
        layer = _lookup_alias(getattr(product, "layer", None), _LAYER_ALIASES) or Layer.MAIN
        return frozenset({(area, layer)})

    slots = classify_text(getattr(product, "category", None))
    if slots:
        return slots
    return classify_text(getattr(product, "title", None))


def occupancy(products: Iterable["Product"]) -> Counter:
    """Count of products per slot."""
    counts: Counter = Counter()
    for product in products:
        counts.update(slots_for(product))
    return counts


# ============================================================================
# Violations
# ============================================================================

class ViolationKind(str, Enum):
    TOO_FEW_PIECES = "too_few_pieces"
    TOO_MANY_PIECES = "too_many_pieces"
    SLOT_OVER_CAPACITY = "slot_over_capacity"


@dataclass(frozen=True)
class ConstraintViolation:
    kind: ViolationKind
    message: str
    slot: Optional[Slot] = None
    product_ids: Tuple[str, ...] = ()


def _slot_order(slot: Slot) -> Tuple[int, int]:
    area, layer = slot
    return list(BodyArea).index(area), list(Layer).index(layer)


def slot_violations(products: Sequence["Product"]) -> List[ConstraintViolation]:
    """Every over-capacity slot, in body order (head to ears)."""
    members: Dict[Slot, List[str]] = {}
    for product in products:
        for slot in slots_for(product):
            members.setdefault(slot, []).append(product.product_id)

    violations = []
    for slot in sorted(members, key=_slot_order):
        ids = members[slot]
        cap = slot_cap(slot)
        if len(ids) > cap:
            violations.append(ConstraintViolation(
                kind=ViolationKind.SLOT_OVER_CAPACITY,
                message=f"{describe_slot(slot)} holds {len(ids)} items (max {cap})",
                slot=slot,
                product_ids=tuple(ids),
            ))
    return violations


def find_violation(
    products: Sequence["Product"],
    min_pieces: int = MIN_PIECES,
    max_pieces: int = MAX_PIECES,
) -> Optional[ConstraintViolation]:
    """First constraint the candidate set breaks, or None if it is valid.

    Piece-count bounds are checked before slot caps.
    """
    count = len(products)
    if count < min_pieces:
        return ConstraintViolation(
            kind=ViolationKind.TOO_FEW_PIECES,
            message=f"Outfit has {count} pieces (min {min_pieces})",
        )
    if count > max_pieces:
        return ConstraintViolation(
            kind=ViolationKind.TOO_MANY_PIECES,
            message=f"Outfit has {count} pieces (max {max_pieces})",
        )
    violations = slot_violations(products)
    return violations[0] if violations else None


# ============================================================================
# Trimming
# ============================================================================

# Lower value = kept first
_REASON_PRIORITY: Dict[str, int] = {
    "input": 0,
    "essential": 1,
    "layering": 2,
    "complementary": 3,
}


def _keep_priority(product: "Product") -> int:
    reason = getattr(product, "match_reason", None)
    reason = getattr(reason, "value", reason)
    return _REASON_PRIORITY.get(reason, len(_REASON_PRIORITY))


def trim_to_constraints(
    products: Sequence["Product"],
    max_pieces: int = MAX_PIECES,
) -> List["Product"]:
    """Drop products until every slot fits its cap and the count fits max_pieces.

    Caller-supplied products are kept ahead of sampled ones; within the same
    match reason the earlier product wins. The result keeps input order.
    """
    if max_pieces <= 0:
        return []

    ranked = sorted(range(len(products)), key=lambda i: (_keep_priority(products[i]), i))
    used: Counter = Counter()
    kept = set()
    for i in ranked:
        if len(kept) >= max_pieces:
            break
        slots = slots_for(products[i])
        if all(used[slot] < slot_cap(slot) for slot in slots):
            used.update(slots)
            kept.add(i)

    return [product for i, product in enumerate(products) if i in kept]
