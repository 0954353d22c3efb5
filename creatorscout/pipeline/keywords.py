"""
CreatorScout - Keyword Tables
===============================
The single source of keyword evidence for category fallback, sub-category
breakdown and call-to-action detection. Bump KEYWORD_TABLE_VERSION whenever
a list changes so stored bundles can be traced back to the table that
produced them.

Matching is case-insensitive. Latin-script keywords must stand as whole
words (plural endings allowed), so "basket" does not fire on "basketball".
Chinese and Thai are written without spaces, so their keywords are matched
as substrings; keep those entries long enough to be unambiguous.
"""

import re
from functools import lru_cache
from typing import Dict, Iterable, List, Optional

KEYWORD_TABLE_VERSION = "2025.4"

_LATIN_KEYWORD = re.compile(r"^[a-z0-9#@&'\s.-]+$")

CATEGORY_KEYWORDS: Dict[str, List[str]] = {
    "beauty/skincare": [
        # English
        "skincare", "skin care", "makeup", "make up", "beauty", "serum", "toner",
        "moisturizer", "moisturiser", "sunscreen", "spf", "cleanser", "foundation",
        "concealer", "lipstick", "lip tint", "mascara", "eyeliner", "cushion",
        "facial", "acne", "whitening", "cosmetic", "perfume", "shampoo",
        "#grwm", "#beauty", "#skincare", "#makeup",
        # Chinese
        "护肤", "美妆", "化妆", "彩妆", "口红", "面膜", "精华", "防晒", "粉底", "洗面奶",
        # Thai
        "สกินแคร์", "แต่งหน้า", "ครีม", "เซรั่ม", "กันแดด", "ลิปสติก", "รองพื้น", "สิว",
    ],
}

SUBCATEGORY_GROUPS: Dict[str, List[str]] = {
    "skincare": [
        "skincare", "skin care", "serum", "toner", "moisturizer", "sunscreen", "spf",
        "cleanser", "acne", "护肤", "精华", "面膜", "防晒", "สกินแคร์", "เซรั่ม", "กันแดด", "สิว",
    ],
    "makeup": [
        "makeup", "make up", "foundation", "concealer", "lipstick", "lip tint", "mascara",
        "eyeliner", "cushion", "#grwm", "彩妆", "化妆", "口红", "粉底", "แต่งหน้า", "ลิปสติก", "รองพื้น",
    ],
    "haircare": [
        "shampoo", "conditioner", "hair", "haircare", "hairstyle", "洗发", "护发", "头发",
        "แชมพู", "ยาสระผม", "ทรงผม", "ผมสวย", "ผมร่วง", "ทำสีผม",
    ],
    "body & fragrance": [
        "perfume", "fragrance", "body lotion", "body wash", "deodorant",
        "香水", "身体乳", "น้ำหอม", "โลชั่น",
    ],
}

CTA_KEYWORDS: List[str] = [
    "link in bio", "shop now", "buy now", "order now", "add to cart", "yellow basket",
    "discount", "promo", "use code", "sale", "limited offer",
    "free shipping", "#ad",
    "下单", "购买", "链接", "优惠", "折扣", "抢购",
    "ตะกร้าสินค้า", "กดตะกร้า", "กดสั่ง", "สั่งซื้อ", "ลดราคา", "โปรโมชั่น", "ส่งฟรี",
]


def keywords_for(category: str) -> List[str]:
    """Fallback keyword list for a target category; empty for unknown ones."""
    return CATEGORY_KEYWORDS.get((category or "").strip().lower(), [])


@lru_cache(maxsize=1024)
def _keyword_pattern(keyword: str):
    """Whole-word pattern for Latin-script keywords; None for substring matching."""
    kw = keyword.lower()
    if not _LATIN_KEYWORD.match(kw):
        return None
    # plural forms count; letters on either side do not ("basketball", "decode")
    return re.compile(r"(?<![a-z])" + re.escape(kw) + r"(?:s|es)?(?![a-z])")


def matched_keyword(text: str, keywords: Iterable[str]) -> Optional[str]:
    """First keyword found in text (case-insensitive), or None."""
    if not text:
        return None
    lowered = text.lower()
    for kw in keywords:
        pattern = _keyword_pattern(kw)
        if pattern is None:
            if kw.lower() in lowered:
                return kw
        elif pattern.search(lowered):
            return kw
    return None
