from types import SimpleNamespace

from budgetsync.categorization.rules import (
    build_search_text,
    categorize,
    match_by_provider_category,
    merge_keywords,
    suggested_keywords,
)


def _category(name: str, keywords: list[str]):
    return SimpleNamespace(name=name, keywords=keywords)


def _txn(name: str, merchant_name: str | None = None, provider_category: str | None = None):
    return SimpleNamespace(
        name=name, merchant_name=merchant_name, provider_category=provider_category
    )


def test_first_match_wins_in_category_order() -> None:
    a = _category("A", ["foo"])
    b = _category("B", ["foo", "bar"])
    assert categorize(_txn("foobar"), [a, b]) is a


def test_keyword_order_inside_category_does_not_matter_across_categories() -> None:
    a = _category("A", ["zzz", "bar"])
    b = _category("B", ["foo"])
    assert categorize(_txn("foobar"), [a, b]) is a


def test_match_is_case_insensitive() -> None:
    coffee = _category("Coffee", ["Starbucks"])
    assert categorize(_txn("STARBUCKS STORE 1458"), [coffee]) is coffee


def test_merchant_name_is_searched() -> None:
    food = _category("Food", ["chipotle"])
    assert categorize(_txn("POS DEBIT 4411", merchant_name="Chipotle"), [food]) is food


def test_empty_keywords_never_match() -> None:
    blank = _category("Blank", [""])
    real = _category("Real", ["uber"])
    assert categorize(_txn("Uber 063015 SF"), [blank, real]) is real


def test_provider_category_fallback() -> None:
    dining = _category("Dining Out", ["restaurant"])
    txn = _txn("TST* 5 GUYS", provider_category="FOOD_AND_DRINK")
    assert categorize(txn, [dining]) is dining


def test_keyword_match_beats_provider_category() -> None:
    dining = _category("Dining Out", ["restaurant"])
    rides = _category("Rides", ["5 guys"])
    txn = _txn("TST* 5 GUYS", provider_category="FOOD_AND_DRINK")
    assert categorize(txn, [dining, rides]) is rides


def test_no_match_returns_none() -> None:
    dining = _category("Dining Out", ["restaurant"])
    assert categorize(_txn("Wire transfer", provider_category="TRANSFER_OUT"), [dining]) is None


def test_no_categories_returns_none() -> None:
    assert categorize(_txn("Anything", provider_category="FOOD_AND_DRINK"), []) is None


def test_provider_category_requires_generic_word_in_keyword() -> None:
    gym = _category("Gym", ["fitness"])
    assert match_by_provider_category("FOOD_AND_DRINK", [gym]) is None


def test_provider_category_first_bucket_then_category_order() -> None:
    shopping = _category("Shopping", ["amazon"])
    travel = _category("Travel", ["hotel"])
    assert match_by_provider_category("TRAVEL", [shopping, travel]) is travel
    assert match_by_provider_category("GENERAL_MERCHANDISE", [shopping, travel]) is None


def test_provider_category_generic_word_inside_longer_keyword() -> None:
    bills = _category("Bills", ["cell phone plan"])
    assert match_by_provider_category("BILLS_AND_UTILITIES", [bills]) is bills


def test_build_search_text() -> None:
    assert build_search_text("Uber", None) == "uber "
    assert build_search_text(None, "Lyft") == " lyft"


def test_suggested_keywords_drops_short_values() -> None:
    assert suggested_keywords("Uber 063015 SF", "Uber") == ["uber 063015 sf", "uber"]
    assert suggested_keywords("KFC", "BP") == ["kfc"]
    assert suggested_keywords("", None) == []


def test_merge_keywords_keeps_order_and_dedupes() -> None:
    assert merge_keywords(["coffee", "cafe"], ["cafe", "starbucks", "starbucks"]) == [
        "coffee",
        "cafe",
        "starbucks",
    ]
    assert merge_keywords(None, ["a"]) == ["a"]
