"""
TESTES - CONSTRUTOR DE FILTROS
==============================
"""

from deal_tracker.domain.services.query_builder import SearchCriteria, build

OWNER_PREDICATE = "LOWER(owner) LIKE ? ESCAPE '\\'"


def test_no_criteria_matches_everything():
    result = build(SearchCriteria())
    assert result.where_clause == ""
    assert result.params == []
    assert build(None).where_clause == ""


def test_status_and_owner_joined_with_and():
    result = build(SearchCriteria(status="open", owner="bob"))

    assert result.where_clause == f"WHERE status = ? AND {OWNER_PREDICATE}"
    assert result.params == ["open", "%bob%"]


def test_owner_is_lowercased_for_case_insensitive_match():
    result = build(SearchCriteria(owner="  Bob "))
    assert result.params == ["%bob%"]


def test_invalid_enum_values_are_ignored():
    assert build(SearchCriteria(stage="not-a-real-stage")).where_clause == ""
    assert build(SearchCriteria(status="closed; DROP TABLE opportunities")).params == []
    assert build(SearchCriteria(deal_type="anything")).where_clause == ""


def test_enum_values_are_normalized():
    result = build(SearchCriteria(stage="QUOTED"))
    assert result.where_clause == "WHERE stage = ?"
    assert result.params == ["quoted"]


def test_free_text_expands_to_one_disjunction():
    result = build(SearchCriteria(q="Steel"))

    assert result.where_clause.startswith("WHERE (")
    assert result.where_clause.endswith(")")
    assert result.where_clause.count(" OR ") == 6
    for column in ("supplier", "product", "customer", "notes", "euc_text", "next_action", "deal_contacts"):
        assert f"LOWER({column}) LIKE ?" in result.where_clause
    assert result.params == ["%steel%"] * 7


def test_fixed_predicate_order():
    result = build(SearchCriteria(
        owner="ana",
        deal_type="matched_deal",
        status="won",
        stage="won",
        q="x",
    ))

    clause = result.where_clause
    assert clause.index("LOWER(supplier)") < clause.index("stage = ?")
    assert clause.index("stage = ?") < clause.index("status = ?")
    assert clause.index("status = ?") < clause.index("deal_type = ?")
    assert clause.index("deal_type = ?") < clause.index("LOWER(owner)")
    assert result.params == ["%x%"] * 7 + ["won", "won", "matched_deal", "%ana%"]
    assert clause.count("?") == len(result.params)


def test_like_wildcards_are_escaped():
    result = build(SearchCriteria(q="50%_off\\"))
    assert result.params[0] == "%50\\%\\_off\\\\%"


def test_blank_text_criteria_are_ignored():
    result = build(SearchCriteria(q="   ", owner=""))
    assert result.where_clause == ""
