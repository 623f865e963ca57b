import os
import unittest

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from schemas.holding import Category, Holding
from services.portfolio.valuation import holding_loss, per_holding, summarize


def _holding(hid, category, quantity, buy, current=None, name=None):
    return Holding(
        id=hid,
        name=name or f"Asset {hid}",
        category=category,
        quantity=quantity,
        buy_price=buy,
        current_price=current,
    )


class TestValuation(unittest.TestCase):
    def test_empty_portfolio_is_all_zeros(self):
        s = summarize([])
        self.assertEqual(s.invested_total, 0)
        self.assertEqual(s.current_total, 0)
        self.assertEqual(s.profit_loss, 0)
        self.assertEqual(s.profit_loss_percent, 0)

    def test_single_flat_stock(self):
        s = summarize([_holding("a", Category.STOCK, 10, 100, 100)])
        self.assertEqual(s.invested_total, 1000)
        self.assertEqual(s.current_total, 1000)
        self.assertEqual(s.profit_loss, 0)
        self.assertEqual(s.profit_loss_percent, 0)

    def test_gain_and_loss_net_out(self):
        holdings = [
            _holding("a", Category.STOCK, 10, 100, 120),  # +200
            _holding("b", Category.GOLD, 5, 200, 150),  # -250
        ]
        s = summarize(holdings)
        self.assertAlmostEqual(s.invested_total, 2000)
        self.assertAlmostEqual(s.current_total, 1950)
        self.assertAlmostEqual(s.profit_loss, -50)
        self.assertAlmostEqual(s.profit_loss_percent, -2.5)

    def test_zero_current_price_is_total_loss(self):
        h = _holding("z", Category.CRYPTO, 2, 50, 0)
        v = per_holding(h)
        self.assertEqual(v.value, 0)
        self.assertEqual(v.invested, 100)
        self.assertEqual(v.pl, -100)
        self.assertEqual(v.pl_percent, -100)
        self.assertEqual(holding_loss(h), 100)

    def test_holding_loss_is_zero_for_gains(self):
        self.assertEqual(holding_loss(_holding("g", Category.STOCK, 1, 10, 12)), 0)

    def test_per_holding_carries_id(self):
        self.assertEqual(per_holding(_holding("x1", Category.GOLD, 1, 10)).holding_id, "x1")


if __name__ == "__main__":
    unittest.main()
