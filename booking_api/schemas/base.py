"""
Base schemas with standardized field types for consistent API responses.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic_core import core_schema


class StandardizedModel(BaseModel):
    """Base model for responses; reads ORM objects and labelled rows."""

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True, from_attributes=True)


class RequestModel(BaseModel):
    """Request DTO base that forbids unexpected fields."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class SuccessResponse(StandardizedModel):
    success: bool = True


class MessageResponse(SuccessResponse):
    message: str


# Matches the NUMERIC(10, 2) price columns
MONEY_PLACES = 2
MONEY_MAX = Decimal(10) ** (10 - MONEY_PLACES)


class Money(Decimal):
    """Money field that always serializes as float"""

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        def validate_money(value: Any) -> Decimal:
            if isinstance(value, Decimal):
                amount = value
            elif isinstance(value, (int, float, str)):
                try:
                    amount = Decimal(str(value).strip())
                except InvalidOperation as e:
                    raise ValueError(f"Invalid money amount: {value!r}") from e
            else:
                raise ValueError(f"Cannot convert {type(value)} to Money")

            if not amount.is_finite():
                raise ValueError("Money amount must be a finite number")
            if amount.normalize().as_tuple().exponent < -MONEY_PLACES:
                raise ValueError(f"Money amount allows at most {MONEY_PLACES} decimal places")
            if abs(amount) >= MONEY_MAX:
                raise ValueError(f"Money amount must be below {MONEY_MAX}")
            return amount

        return core_schema.no_info_after_validator_function(
            validate_money,
            core_schema.union_schema(
                [
                    core_schema.is_instance_schema(Decimal),
                    core_schema.int_schema(),
                    core_schema.float_schema(),
                    core_schema.str_schema(),
                ]
            ),
            serialization=core_schema.plain_serializer_function_ser_schema(
                float,
                info_arg=False,
                return_schema=core_schema.float_schema(),
            ),
        )
