from pydantic import BaseModel, Field
from typing import List
from enum import Enum
from datetime import datetime
from uuid import UUID

class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

class OrderCreate(BaseModel):
    customer_name: str
    items: List[str]
    total_amount: float = Field(allow_inf_nan=False)

class OrderStatusUpdate(BaseModel):
    status: OrderStatus

class Order(BaseModel):
    id: UUID
    customer_name: str
    items: List[str]
    total_amount: float
    status: OrderStatus
    created_at: datetime
    updated_at: datetime

class ErrorResponse(BaseModel):
    error: str
