from freelance_api.repositories.search_repo import (
    FreelancerSearchQuery, PAGE_SIZE, page_offset, page_count, split_terms
)
from freelance_api.utils.visibility import public_profile_conditions


BASE_CONDITIONS = len(public_profile_conditions()) + 1  # + free-text condition


def test_pagination_math():
    assert PAGE_SIZE == 20
    assert page_offset(1) == 0
    assert page_offset(3) == 40
    assert page_count(0) == 0
    assert page_count(1) == 1
    assert page_count(20) == 1
    assert page_count(21) == 2


def test_split_terms_lowercases_and_dedupes():
    assert split_terms("  Python  django PYTHON ") == ["python", "django"]
    assert split_terms("   ") == []


def test_only_mandatory_conditions_without_facets():
    query = (
        FreelancerSearchQuery("dev")
        .with_locations(None)
        .with_hourly_rate(None, None)
        .with_languages([])
    )
    assert len(query.conditions) == BASE_CONDITIONS


def test_each_facet_adds_one_condition():
    query = FreelancerSearchQuery("dev").with_locations(["FR", "BE"])
    assert len(query.conditions) == BASE_CONDITIONS + 1
    assert "location_country_code IN" in str(query.conditions[-1])

    query = FreelancerSearchQuery("dev").with_languages(["fr"])
    assert len(query.conditions) == BASE_CONDITIONS + 1
    assert "EXISTS" in str(query.conditions[-1])


def test_hourly_rate_bounds_combine_into_one_range():
    query = FreelancerSearchQuery("dev").with_hourly_rate(10, 50)
    assert len(query.conditions) == BASE_CONDITIONS + 1
    assert "BETWEEN" in str(query.conditions[-1])

    query = FreelancerSearchQuery("dev").with_hourly_rate(10, None)
    assert ">=" in str(query.conditions[-1])

    query = FreelancerSearchQuery("dev").with_hourly_rate(None, 50)
    assert "<=" in str(query.conditions[-1])


def test_zero_is_a_valid_bound():
    query = FreelancerSearchQuery("dev").with_hourly_rate(0, None)
    assert len(query.conditions) == BASE_CONDITIONS + 1


def test_visibility_predicate_is_always_applied():
    sql = str(FreelancerSearchQuery("dev").count_statement())
    assert "freelancers.location_town IS NOT NULL" in sql
    assert "freelancers.hourly_rate IS NOT NULL" in sql
    assert "freelancers.contact_email" in sql
    assert "freelancers.contact_phone" in sql
    # unconfirmed accounts are excluded
    assert "NOT" in sql and "EXISTS" in sql


def test_page_statement_is_paginated_and_ordered():
    statement = FreelancerSearchQuery("dev").page_statement(2)
    sql = str(statement)
    order_by = sql.split("ORDER BY")[1]
    assert order_by.index("relevance DESC") < order_by.index("freelancers.created_at DESC")
    assert order_by.index("freelancers.created_at DESC") < order_by.index("freelancers.freelancer_id ASC")
    assert statement._limit_clause is not None
    assert statement._offset_clause is not None


def test_projection_hides_private_columns():
    sql = str(FreelancerSearchQuery("dev").page_statement(1)).split("FROM")[0]
    assert "password_hash" not in sql
    assert "contact_email" not in sql
    assert "email" not in sql.replace("contact_email", "")
