from reputation_monitor.mappers.name_matching import (
    clean_name,
    match_confidence,
    names_contain,
    shares_significant_token,
    significant_tokens,
)
from reputation_monitor.schemas.channels import Confidence


def test_clean_name_removes_codes():
    assert clean_name("Hotel Plaza [C81] (old)") == "Hotel Plaza"


def test_significant_tokens_drop_stopwords_and_short_words():
    assert significant_tokens("The Grand Plaza Hotel") == {"grand", "plaza"}


def test_significant_tokens_strip_accents():
    assert significant_tokens("Hôtel Café Müller") == {"cafe", "muller"}


def test_significant_tokens_drop_city_words():
    assert significant_tokens("San Diego Beach Resort") == {"diego"}


def test_shares_token_accepts_overlap():
    assert shares_significant_token("The Grand Plaza Hotel", "Cozy Studio near Grand Plaza")


def test_shares_token_rejects_unrelated():
    assert not shares_significant_token("The Grand Plaza Hotel", "Downtown Loft")


def test_shares_token_rejects_stopword_only_overlap():
    assert not shares_significant_token("The Downtown Hotel", "Downtown Hotel Suites")


def test_names_contain_either_direction():
    assert names_contain("Grand Plaza", "The Grand Plaza Hotel")
    assert names_contain("The Grand Plaza Hotel", "grand plaza")
    assert not names_contain("Grand Plaza", "Plaza Grand")
    assert not names_contain("", "Plaza")


def test_match_confidence_tiers():
    assert match_confidence("Grand Plaza", "The Grand Plaza Hotel", 10) == Confidence.high
    assert match_confidence("Grand Plaza", "Plaza Inn", 2) == Confidence.medium
    assert match_confidence("Grand Plaza", "Plaza Inn", 8) == Confidence.low


def test_match_confidence_custom_threshold():
    assert match_confidence("Grand Plaza", "Plaza Inn", 2, few_candidates=1) == Confidence.low
