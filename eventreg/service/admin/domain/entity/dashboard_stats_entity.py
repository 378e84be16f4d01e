from decimal import Decimal

import attrs

from eventreg.service.event.domain.money import to_money


@attrs.define(frozen=True)
class DashboardStats:
    total_events: int = 0
    total_users: int = 0
    total_tickets: int = 0
    total_revenue: Decimal = attrs.field(default=Decimal('0.00'), converter=to_money)

    def after_event_removed(self) -> 'DashboardStats':
        return attrs.evolve(self, total_events=max(self.total_events - 1, 0))

    def after_event_restored(self) -> 'DashboardStats':
        return attrs.evolve(self, total_events=self.total_events + 1)
