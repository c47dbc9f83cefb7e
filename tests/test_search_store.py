import asyncio
from decimal import Decimal

import pytest
from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from freelance_api.core.database import Base
from freelance_api.models.language import FreelancerLanguage, LanguageLevelEnum
from freelance_api.models.token import TokenTypeEnum
from freelance_api.repositories.freelancer_repo import FreelancerRepository
from freelance_api.repositories.search_repo import FreelancerSearchQuery, SearchRepository, PAGE_SIZE
from freelance_api.services.freelancer_service import FreelancerService
from freelance_api.utils.visibility import is_freelancer_public, is_freelancer_confirmed
from conftest import make_freelancer, make_token


def make_profile_row(freelancer_id, **overrides):
    return make_freelancer(freelancer_id=freelancer_id, email=f"{freelancer_id}@ex.com", **overrides)


def run_against_store(tmp_path, freelancers, work):
    """Store the freelancers in a fresh SQLite file, then run work(session)."""

    async def scenario():
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        session_factory = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
        try:
            async with session_factory() as session:
                session.add_all(freelancers)
                await session.commit()
            async with session_factory() as session:
                return await work(session)
        finally:
            await engine.dispose()

    return asyncio.run(scenario())


def unconfirmed_token():
    token = make_token(TokenTypeEnum.register_confirm)
    token.token_id = "token-unconfirmed"
    return token


def mixed_profiles():
    # every profile mentions "python" in its skills
    return [
        make_profile_row("complete"),
        make_profile_row("phone-only", contact_email=None, contact_phone="0102030405"),
        make_profile_row("no-town", location_town=None),
        make_profile_row("blank-town", location_town="   "),
        make_profile_row("no-country", location_country_code=None),
        make_profile_row("no-rate", hourly_rate=None),
        make_profile_row("zero-rate", hourly_rate=Decimal("0")),
        make_profile_row("no-title", title=None),
        make_profile_row("blank-title", title="   "),
        make_profile_row("empty-title", title=""),
        make_profile_row("blank-presentation", presentation_text="  "),
        make_profile_row("no-contact", contact_email=None, contact_phone=None),
        make_profile_row("blank-contact", contact_email="", contact_phone="   "),
        make_profile_row("unconfirmed", tokens=[unconfirmed_token()]),
    ]


def test_search_returns_exactly_the_visible_profiles(tmp_path):
    freelancers = mixed_profiles()
    expected = {
        f.freelancer_id for f in freelancers
        if is_freelancer_public(f) and is_freelancer_confirmed(f)
    }
    assert expected == {"complete", "phone-only"}

    async def work(session):
        return await SearchRepository(session).search_freelancers(FreelancerSearchQuery("python"), 1)

    rows, total = run_against_store(tmp_path, freelancers, work)

    assert total == len(expected)
    assert {row["freelancer_id"] for row in rows} == expected


def test_public_lookup_agrees_with_the_evaluator(tmp_path):
    freelancers = mixed_profiles()
    expected = {
        f.freelancer_id: is_freelancer_public(f) and is_freelancer_confirmed(f)
        for f in freelancers
    }

    async def work(session):
        repo = FreelancerRepository(session)
        return {
            freelancer_id: (await repo.get_public_freelancer_by_id(freelancer_id)) is not None
            for freelancer_id in expected
        }

    assert run_against_store(tmp_path, freelancers, work) == expected


def test_unconfirmed_profile_is_not_found(tmp_path):
    async def work(session):
        with pytest.raises(HTTPException) as exc_info:
            await FreelancerService(session).get_public_freelancer("unconfirmed")
        return exc_info.value.status_code

    assert run_against_store(tmp_path, mixed_profiles(), work) == 404


def test_pages_hold_at_most_twenty_items(tmp_path):
    freelancers = [make_profile_row(f"f-{index:02d}") for index in range(27)]

    async def work(session):
        repo = SearchRepository(session)
        pages = []
        for page in (1, 2):
            pages.append(await repo.search_freelancers(FreelancerSearchQuery("python"), page))
        return pages

    (first_rows, total), (second_rows, _) = run_against_store(tmp_path, freelancers, work)

    assert total == 27
    assert len(first_rows) == PAGE_SIZE
    assert len(second_rows) == 7
    # stable order: no profile appears on both pages
    seen = [row["freelancer_id"] for row in first_rows] + [row["freelancer_id"] for row in second_rows]
    assert sorted(seen) == sorted(f.freelancer_id for f in freelancers)


def test_more_hits_rank_first(tmp_path):
    freelancers = [
        make_profile_row("skills-only", title="Developer"),
        make_profile_row("title-and-skills", title="Python developer"),
    ]

    async def work(session):
        return await SearchRepository(session).search_freelancers(FreelancerSearchQuery("python"), 1)

    rows, _ = run_against_store(tmp_path, freelancers, work)
    assert [row["freelancer_id"] for row in rows] == ["title-and-skills", "skills-only"]


def test_language_and_rate_facets(tmp_path):
    freelancers = [
        make_profile_row("fr-30", hourly_rate=Decimal("30"), languages=[
            FreelancerLanguage(freelancer_language_id="l-1", code="fr", level=LanguageLevelEnum.native_bilingual),
        ]),
        make_profile_row("fr-80", hourly_rate=Decimal("80"), languages=[
            FreelancerLanguage(freelancer_language_id="l-2", code="fr", level=LanguageLevelEnum.fluent),
        ]),
        make_profile_row("en-30", hourly_rate=Decimal("30"), languages=[
            FreelancerLanguage(freelancer_language_id="l-3", code="en", level=LanguageLevelEnum.fluent),
        ]),
    ]

    async def work(session):
        query = FreelancerSearchQuery("python").with_languages(["fr"]).with_hourly_rate(20, 50)
        return await SearchRepository(session).search_freelancers(query, 1)

    rows, total = run_against_store(tmp_path, freelancers, work)
    assert total == 1
    assert [row["freelancer_id"] for row in rows] == ["fr-30"]
