from decimal import Decimal
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from eventreg.service.admin.domain.entity.dashboard_stats_entity import DashboardStats


class DashboardStatsResponse(BaseModel):
    model_config = ConfigDict(
        extra='ignore',
        json_schema_extra={
            'example': {
                'totalEvents': 12,
                'totalUsers': 340,
                'totalTickets': 1024,
                'totalRevenue': 25600.5,
            }
        },
    )

    total_events: int = Field(default=0, validation_alias=AliasChoices('totalEvents', 'total_events'))
    total_users: int = Field(default=0, validation_alias=AliasChoices('totalUsers', 'total_users'))
    total_tickets: int = Field(
        default=0, validation_alias=AliasChoices('totalTickets', 'total_tickets')
    )
    total_revenue: Decimal = Field(
        default=Decimal('0'), validation_alias=AliasChoices('totalRevenue', 'total_revenue')
    )

    @field_validator('total_revenue', mode='before')
    @classmethod
    def parse_revenue(cls, v: Any) -> Any:
        if v is None:
            return Decimal('0')
        return str(v) if isinstance(v, float) else v

    def to_entity(self) -> DashboardStats:
        return DashboardStats(
            total_events=self.total_events,
            total_users=self.total_users,
            total_tickets=self.total_tickets,
            total_revenue=self.total_revenue,
        )
