import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from freelance_api.services.token_sweeper import TokenSweeper, run_token_sweeper


def make_sweeper(deleted_freelancers, pulled_tokens):
    sweeper = TokenSweeper(MagicMock())
    sweeper.repo = MagicMock()
    sweeper.repo.delete_expired_unconfirmed_freelancers = AsyncMock(side_effect=deleted_freelancers)
    sweeper.repo.delete_expired_password_reset_tokens = AsyncMock(side_effect=pulled_tokens)
    return sweeper


def test_both_passes_run():
    sweeper = make_sweeper([2], [3])
    assert asyncio.run(sweeper.sweep()) == {"deleted_freelancers": 2, "pulled_tokens": 3}
    sweeper.repo.delete_expired_unconfirmed_freelancers.assert_awaited_once()
    sweeper.repo.delete_expired_password_reset_tokens.assert_awaited_once()


def test_second_pass_runs_even_when_first_has_nothing_to_do():
    sweeper = make_sweeper([0], [4])
    assert asyncio.run(sweeper.sweep()) == {"deleted_freelancers": 0, "pulled_tokens": 4}


def test_repeated_sweeps_are_no_ops():
    sweeper = make_sweeper([1, 0], [1, 0])
    asyncio.run(sweeper.sweep())
    assert asyncio.run(sweeper.sweep()) == {"deleted_freelancers": 0, "pulled_tokens": 0}


def test_passes_share_the_same_clock():
    sweeper = make_sweeper([0], [0])
    asyncio.run(sweeper.sweep())
    first_now = sweeper.repo.delete_expired_unconfirmed_freelancers.call_args.args[0]
    second_now = sweeper.repo.delete_expired_password_reset_tokens.call_args.args[0]
    assert first_now == second_now


class StopLoop(Exception):
    pass


class BrokenSession:
    async def __aenter__(self):
        raise RuntimeError("database unreachable")

    async def __aexit__(self, *exc):
        return False


def test_loop_survives_a_failed_sweep(monkeypatch):
    sleeps = []

    async def fake_sleep(seconds):
        sleeps.append(seconds)
        if len(sleeps) == 2:
            raise StopLoop()

    monkeypatch.setattr("freelance_api.services.token_sweeper.asyncio.sleep", fake_sleep)

    with pytest.raises(StopLoop):
        asyncio.run(run_token_sweeper(60, session_factory=BrokenSession))

    # the failure is logged and the loop keeps its schedule
    assert sleeps == [60, 60]
