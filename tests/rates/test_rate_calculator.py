from decimal import Decimal

from src.payroll_ledger.payroll_ledger.core.enums import PaymentType
from src.payroll_ledger.payroll_ledger.rates.calculator import calculate_salary_breakdown
from src.payroll_ledger.payroll_ledger.workers.model import WorkerPayConfig


def test_monthly_breakdown():
    b = calculate_salary_breakdown("Monthly", 26000, 26, 8)
    assert b.monthly_rate == Decimal("26000.00")
    assert b.daily_rate == Decimal("1000.00")
    assert b.hourly_rate == Decimal("125.00")
    assert b.overtime_rate == Decimal("187.50")


def test_daily_breakdown_derives_monthly():
    b = calculate_salary_breakdown(PaymentType.DAILY, "900", 26, 8)
    assert b.daily_rate == Decimal("900.00")
    assert b.monthly_rate == Decimal("23400.00")
    assert b.hourly_rate == Decimal("112.50")
    assert b.overtime_rate == Decimal("168.75")


def test_rounds_from_unrounded_intermediates():
    # 10000 / 26 = 384.615..., hourly = 48.0769..., overtime = 72.115...
    b = calculate_salary_breakdown("Monthly", 10000, 26, 8)
    assert b.daily_rate == Decimal("384.62")
    assert b.hourly_rate == Decimal("48.08")
    assert b.overtime_rate == Decimal("72.12")


def test_bad_input_is_zero_and_never_raises():
    b = calculate_salary_breakdown("Monthly", "abc", None, "x")
    assert (b.daily_rate, b.monthly_rate, b.hourly_rate, b.overtime_rate) == (0, 0, 0, 0)

    b = calculate_salary_breakdown("Daily", 500, 26, 0)
    assert b.daily_rate == Decimal("500.00")
    assert b.hourly_rate == Decimal("0.00")


def test_pay_config_recomputes_from_inputs():
    cfg = WorkerPayConfig(payment_type=PaymentType.MONTHLY, base_salary=Decimal("26000"), working_days_per_month=20)
    assert cfg.daily_rate == Decimal("1300.00")
    assert cfg.overtime_rate == Decimal("243.75")
