"""Unit tests for AdminService invariant checks and round stats."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.lr_admin.application.service import AdminService
from src.lr_betting.domain.service import place_bet
from src.lr_common.errors import RoundNotFoundError, UnauthorizedError
from tests.factories import ADMIN, make_config, make_round


def _result(rows=None, scalar=None, one=None) -> MagicMock:
    result = MagicMock()
    result.fetchall.return_value = rows or []
    result.scalar_one.return_value = scalar
    result.fetchone.return_value = one
    return result


def _played():
    config = make_config()
    round_ = make_round()
    bets = [
        place_bet(round_, config, 0, 1000, "a", None, 0).bet,
        place_bet(round_, config, 1, 500, "b", None, 0).bet,
    ]
    return config, round_, bets


def _service(config, round_, bets):
    config_repo = AsyncMock()
    config_repo.get_config.return_value = config
    round_repo = AsyncMock()
    round_repo.list_all_rounds.return_value = [round_]
    round_repo.get_round.return_value = round_
    bet_repo = AsyncMock()
    bet_repo.list_all_round_bets.return_value = bets
    return AdminService(config_repo=config_repo, round_repo=round_repo, bet_repo=bet_repo)


class TestVerifyAll:
    async def test_clean_state(self) -> None:
        config, round_, bets = _played()
        svc = _service(config, round_, bets)
        db = AsyncMock()
        db.execute.side_effect = [
            _result(rows=[SimpleNamespace(round_id=0, pool=1463, paid=0, vault=1463)]),
            _result(scalar=10_000),
            _result(scalar=10_000),
        ]

        report = await svc.verify_all_invariants(db, ADMIN)

        assert report == {"ok": True, "rounds_checked": 1, "violations": []}

    async def test_reports_vault_and_global_drift(self) -> None:
        config, round_, bets = _played()
        svc = _service(config, round_, bets)
        db = AsyncMock()
        db.execute.side_effect = [
            _result(rows=[SimpleNamespace(round_id=0, pool=1463, paid=0, vault=1400)]),
            _result(scalar=9_999),
            _result(scalar=10_000),
        ]

        report = await svc.verify_all_invariants(db, ADMIN)

        assert report["ok"] is False
        assert [v[:5] for v in report["violations"]] == ["INV-V", "INV-G"]

    async def test_round_level_violation_included(self) -> None:
        config, round_, bets = _played()
        round_.bet_count = 3
        svc = _service(config, round_, bets)
        db = AsyncMock()
        db.execute.side_effect = [_result(), _result(scalar=0), _result(scalar=0)]

        report = await svc.verify_all_invariants(db, ADMIN)

        assert any(v.startswith("INV-R3") for v in report["violations"])

    async def test_admin_only(self) -> None:
        config, round_, bets = _played()
        svc = _service(config, round_, bets)
        with pytest.raises(UnauthorizedError):
            await svc.verify_all_invariants(AsyncMock(), "a")


class TestRoundStats:
    async def test_stats(self) -> None:
        config, round_, bets = _played()
        svc = _service(config, round_, bets)
        db = AsyncMock()
        db.execute.return_value = _result(one=SimpleNamespace(
            bets=2, unique_bettors=2, left_bets=1, right_bets=1,
            gross_volume=1500, fees=37, paid=0,
        ))

        stats = await svc.get_round_stats(db, ADMIN, 0)

        assert stats["bets"] == 2
        assert stats["fees_collected"] == 37
        assert stats["total_pool"] == round_.total_pool
        assert stats["payouts_pending"] == 2

    async def test_unknown_round(self) -> None:
        config, round_, bets = _played()
        svc = _service(config, round_, bets)
        svc._round_repo.get_round.return_value = None
        with pytest.raises(RoundNotFoundError):
            await svc.get_round_stats(AsyncMock(), ADMIN, 9)
