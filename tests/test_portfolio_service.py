from datetime import date

import pytest
from pydantic import ValidationError as SchemaValidationError

from phoenixapi.config import settings
from phoenixapi.core.exceptions import NotFoundError, PermissionDeniedError
from phoenixapi.schemas.portfolio import GoalSchema, TradeCreate, TradeType, TradeUpdate
from phoenixapi.services.portfolio_service import PortfolioService, goal_progress_pct


@pytest.fixture
def service(db):
    return PortfolioService(db, settings)


def _stock(user_id, **overrides):
    data = {
        "user_id": user_id,
        "symbol": " aapl ",
        "company_name": "Apple",
        "quantity": "10",
        "cost_basis": "150",
        "current_price": "200",
    }
    data.update(overrides)
    return TradeCreate(**data)


def _option(user_id, **overrides):
    data = {
        "user_id": user_id,
        "trade_type": "option",
        "symbol": "TSLA",
        "company_name": "Tesla",
        "quantity": "2",
        "cost_basis": "3",
        "current_price": "5",
        "option_expiration": "2025-06-20",
        "option_type": "call",
        "strike_price": "250",
        "break_even_price": "253",
    }
    data.update(overrides)
    return TradeCreate(**data)


class TestTradeValidation:
    def test_symbol_is_normalized(self, alice):
        assert _stock(alice.id).symbol == "AAPL"

    def test_option_requires_contract_fields(self, alice):
        with pytest.raises(SchemaValidationError):
            _option(alice.id, strike_price=None)

    def test_quantity_must_be_positive(self, alice):
        with pytest.raises(SchemaValidationError):
            _stock(alice.id, quantity="0")


class TestAdminTrades:
    def test_add_and_list(self, service, admin, alice):
        trade = service.add_trade(_stock(alice.id), admin)

        assert trade.added_by == admin.id
        assert [t.id for t in service.list_trades(admin, user_id=alice.id)] == [trade.id]
        assert [t.id for t in service.my_trades(alice.id)] == [trade.id]

    def test_stock_trade_drops_option_fields(self, service, admin, alice):
        trade = service.add_trade(_stock(alice.id, strike_price="10"), admin)

        assert trade.trade_type == TradeType.STOCK
        assert trade.strike_price is None

    def test_non_admin_rejected(self, service, alice):
        with pytest.raises(PermissionDeniedError):
            service.add_trade(_stock(alice.id), alice)
        with pytest.raises(PermissionDeniedError):
            service.list_trades(alice)

    def test_trade_for_unknown_user(self, service, admin):
        with pytest.raises(NotFoundError):
            service.add_trade(_stock(9999), admin)

    def test_update_and_delete(self, service, admin, alice):
        trade = service.add_trade(_stock(alice.id), admin)

        updated = service.update_trade(trade.id, TradeUpdate(current_price="210"), admin)
        assert float(updated.current_price) == 210.0

        service.delete_trade(trade.id, admin)
        assert service.my_trades(alice.id) == []
        with pytest.raises(NotFoundError):
            service.delete_trade(trade.id, admin)


class TestSummary:
    def test_empty_portfolio(self, service, alice):
        summary = service.portfolio_summary(alice.id)

        assert summary.total_value == 0
        assert summary.total_gain_pct == 0
        assert summary.position_count == 0

    def test_options_use_contract_multiplier(self, service, admin, alice):
        service.add_trade(_stock(alice.id), admin)
        service.add_trade(_option(alice.id), admin)

        summary = service.portfolio_summary(alice.id)

        # 10 * 200 + 2 * 5 * 100
        assert summary.total_value == 3000.0
        # 10 * 150 + 2 * 3 * 100
        assert summary.total_cost == 2100.0
        assert summary.total_gain == 900.0
        assert summary.total_gain_pct == 42.86
        assert summary.position_count == 2


class TestGoal:
    def test_default_goal_created_once(self, service, alice):
        first = service.get_goal(alice.id)
        second = service.get_goal(alice.id)

        assert first.id == second.id
        assert float(first.starting_amount) == settings.DEFAULT_GOAL_STARTING_AMOUNT
        assert float(first.target_amount) == settings.DEFAULT_GOAL_TARGET_AMOUNT
        assert first.target_date == date.fromisoformat(settings.DEFAULT_GOAL_TARGET_DATE)

    @pytest.mark.parametrize(
        "current, expected",
        [(57500, 50.0), (15000, 0.0), (1000, 0.0), (250000, 100.0)],
    )
    def test_progress_is_clamped(self, current, expected):
        goal = GoalSchema(
            id=1,
            user_id=1,
            starting_amount=15000,
            target_amount=100000,
            target_date=date(2026, 12, 31),
        )

        assert goal_progress_pct(goal, current) == expected

    def test_goal_progress_uses_portfolio_value(self, service, admin, alice):
        service.add_trade(_stock(alice.id, quantity="100", current_price="400"), admin)

        progress = service.goal_progress(alice.id)

        assert progress.current_value == 40000.0
        assert progress.progress_pct == pytest.approx(29.41)
