from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import date
from decimal import Decimal


class MonthlySalesResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    month_name: str
    sales_amount: float
    month: int


class BusinessMetricUpsert(BaseModel):
    metric_date: date = Field(..., description="Snapshot date; one row per user per date")
    total_sales: Decimal = Field(Decimal("0"))
    total_expenses: Decimal = Field(Decimal("0"))
    net_profit: Decimal = Field(Decimal("0"))

    @field_validator('total_sales', 'total_expenses', 'net_profit')
    @classmethod
    def round_money(cls, v: Decimal) -> Decimal:
        return round(v, 2)


class BusinessMetricResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    metric_id: int
    user_id: int
    metric_date: date
    total_sales: float
    total_expenses: float
    net_profit: float
