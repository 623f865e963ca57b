import os
import unittest

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from schemas.holding import Category, Holding
from services.portfolio.insight_engine import evaluate_insights


def _holding(hid, category, quantity, buy, current=None, name=None):
    return Holding(
        id=hid,
        name=name or f"Asset {hid}",
        category=category,
        quantity=quantity,
        buy_price=buy,
        current_price=current,
    )


class TestInsightEngine(unittest.TestCase):
    def test_three_base_insights_without_losses(self):
        insights = evaluate_insights([_holding("a", Category.STOCK, 10, 100, 100)])
        self.assertEqual(
            [i.kind for i in insights],
            ["Diversification", "CryptoExposure", "SectorConcentration"],
        )
        self.assertEqual(insights[0].severity, "warning")
        self.assertEqual(insights[0].holding_count, 1)
        self.assertEqual(insights[1].severity, "info")
        self.assertEqual(
            insights[1].message,
            "No cryptocurrency exposure. Consider small allocation for growth potential.",
        )
        self.assertEqual(insights[2].severity, "warning")
        self.assertIn("100.0%", insights[2].message)

    def test_diversification_threshold_is_five(self):
        four = [_holding(str(i), Category.MUTUAL_FUND, 1, 10) for i in range(4)]
        five = four + [_holding("4", Category.GOLD, 1, 10)]
        self.assertEqual(evaluate_insights(four)[0].severity, "warning")
        self.assertEqual(evaluate_insights(five)[0].severity, "success")
        self.assertTrue(evaluate_insights(five)[0].message.startswith("Good diversification"))

    def test_crypto_exposure_ladder(self):
        def crypto_insight(crypto_value):
            holdings = [
                _holding("c", Category.CRYPTO, 1, crypto_value),
                _holding("g", Category.GOLD, 1, 100 - crypto_value),
            ]
            return evaluate_insights(holdings)[1]

        high = crypto_insight(40)
        self.assertEqual(high.severity, "critical")
        self.assertEqual(
            high.message,
            "High crypto exposure at 40.0%. Consider reducing to below 20% for better risk management.",
        )
        self.assertEqual(crypto_insight(20).severity, "warning")
        self.assertEqual(
            crypto_insight(20).message,
            "Moderate crypto exposure at 20.0%. Monitor volatility closely.",
        )
        low = crypto_insight(5)
        self.assertEqual(low.severity, "info")
        self.assertEqual(low.message, "Crypto exposure at 5.0% is within recommended limits.")

    def test_crypto_percent_text_rounds_ties_up(self):
        holdings = [
            _holding("c", Category.CRYPTO, 1, 1),
            _holding("g", Category.GOLD, 1, 15),
        ]
        self.assertEqual(
            evaluate_insights(holdings)[1].message,
            "Crypto exposure at 6.3% is within recommended limits.",
        )

    def test_sector_concentration_balanced(self):
        holdings = [
            _holding("s", Category.STOCK, 1, 50),
            _holding("g", Category.GOLD, 1, 50),
        ]
        sector = evaluate_insights(holdings)[2]
        self.assertEqual(sector.severity, "success")
        self.assertEqual(
            sector.message,
            "Stock allocation appears balanced. Maintain diversification across sectors.",
        )

    def test_exit_alert_single_loser(self):
        insights = evaluate_insights([_holding("g", Category.GOLD, 5, 200, 150, name="Gold ETF")])
        self.assertEqual(len(insights), 4)
        exit_alert = insights[3]
        self.assertEqual(exit_alert.kind, "ExitAlert")
        self.assertEqual(exit_alert.severity, "critical")
        self.assertEqual(exit_alert.holding_id, "g")
        self.assertAlmostEqual(exit_alert.contribution_percent, 100.0)
        self.assertEqual(
            exit_alert.message,
            '"Gold ETF" contributes 100.0% of your total loss. Consider reviewing this position.',
        )

    def test_exit_alert_picks_largest_loss(self):
        holdings = [
            _holding("a", Category.STOCK, 1, 100, 75),  # loss 25
            _holding("b", Category.CRYPTO, 3, 100, 75),  # loss 75
            _holding("c", Category.GOLD, 1, 100, 120),  # gain
        ]
        exit_alert = evaluate_insights(holdings)[-1]
        self.assertEqual(exit_alert.holding_id, "b")
        self.assertAlmostEqual(exit_alert.loss_amount, 75)
        self.assertAlmostEqual(exit_alert.contribution_percent, 75.0)

    def test_exit_alert_tie_keeps_input_order(self):
        holdings = [
            _holding("first", Category.STOCK, 1, 100, 50),
            _holding("second", Category.GOLD, 1, 100, 50),
        ]
        exit_alert = evaluate_insights(holdings)[-1]
        self.assertEqual(exit_alert.holding_id, "first")
        self.assertAlmostEqual(exit_alert.contribution_percent, 50.0)

    def test_input_is_not_reordered(self):
        holdings = [
            _holding("a", Category.STOCK, 1, 100, 90),
            _holding("b", Category.STOCK, 1, 100, 10),
        ]
        evaluate_insights(holdings)
        self.assertEqual([h.id for h in holdings], ["a", "b"])

    def test_repeated_evaluation_is_identical(self):
        holdings = [_holding("g", Category.GOLD, 5, 200, 150)]
        self.assertEqual(evaluate_insights(holdings), evaluate_insights(holdings))


if __name__ == "__main__":
    unittest.main()
