"""
Price Verdict Classifier
ratio = subject price / analog median
  ratio < 0.9  -> cheap
  ratio > 1.1  -> expensive
  otherwise    -> in_market   (0.9 and 1.1 themselves are in market)
No analog data (median 0) is always in_market; a missing subject price
counts as 0 and so reads as cheap.
"""
from typing import Optional

from valuation.schemas.valuation import PriceStatistics, PriceVerdict

CHEAP_THRESHOLD = 0.9
EXPENSIVE_THRESHOLD = 1.1


class PriceVerdictClassifier:
    def classify(self, subject_price: Optional[float], stats: PriceStatistics) -> PriceVerdict:
        if not stats.median:
            return PriceVerdict.IN_MARKET

        ratio = (subject_price or 0) / stats.median
        if ratio < CHEAP_THRESHOLD:
            return PriceVerdict.CHEAP
        if ratio > EXPENSIVE_THRESHOLD:
            return PriceVerdict.EXPENSIVE
        return PriceVerdict.IN_MARKET

    def explain(self, verdict: PriceVerdict, subject_price: Optional[float], stats: PriceStatistics) -> str:
        """Human-readable (Ukrainian) deviation from the median."""
        if not stats.median:
            return "Недостатньо даних для порівняння з ринком"
        if not subject_price:
            return "Ціна об'єкта не вказана"

        percent = abs((subject_price - stats.median) / stats.median) * 100
        if verdict == PriceVerdict.CHEAP:
            return f"Ціна на {percent:.1f}% нижче медіанної ринкової ціни"
        if verdict == PriceVerdict.EXPENSIVE:
            return f"Ціна на {percent:.1f}% вище медіанної ринкової ціни"
        return f"Ціна відповідає ринковій (±{percent:.1f}% від медіани)"
