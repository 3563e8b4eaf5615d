"""Repository queries for promotions."""

from pricing.domain import pricing
from pricing.promotion.promotion import Promotion


@pricing.repository(part_of=Promotion)
class PromotionRepository:
    def all_promotions(self) -> list[Promotion]:
        return self._dao.query.all().items

    def active_promotions(self) -> list[Promotion]:
        """Promotions flagged active; dates and usage caps are checked by the matcher."""
        return self._dao.query.filter(is_active=True).all().items

    def remove(self, promotion: Promotion) -> None:
        self._dao.delete(promotion)
