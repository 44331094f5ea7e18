"""
Order Model - Customer orders and the batches built from them

This module defines the Order and Part records supplied by the caller and the
Batch / BatchConfiguration results produced by the batch optimizer.

Key Attributes:
    - Part: material, thickness, quantity, per-unit processing time
    - Order: parts, due date, numeric priority, customer type
    - Batch: orders sharing one material and thickness
"""

from datetime import datetime
from typing import List, Dict, Any, Tuple
from dataclasses import dataclass, field

from optimizers.errors import InvalidInputError


CUSTOMER_TYPES = ("standard", "premium", "strategic")


@dataclass
class Part:
    """A part line of an order."""
    material_type: str
    thickness: float             # mm
    quantity: int
    processing_time: float       # Minutes per unit

    def __post_init__(self):
        if self.quantity < 0:
            raise InvalidInputError(f"Quantity cannot be negative, got: {self.quantity}")
        if self.processing_time < 0:
            raise InvalidInputError(f"Processing time cannot be negative, got: {self.processing_time}")

    @property
    def material_key(self) -> Tuple[str, float]:
        return (self.material_type, self.thickness)


@dataclass
class Order:
    """
    A customer order made of one or more parts.

    Example:
        >>> order = Order(
        ...     order_id="O001",
        ...     parts=[Part("steel", 3.0, 120, 0.5)],
        ...     due_date=datetime(2026, 3, 10),
        ...     priority=2,
        ... )
    """

    order_id: str
    parts: List[Part]
    due_date: datetime
    priority: int = 1                # Higher is more important
    customer_type: str = "standard"

    def __post_init__(self):
        if self.customer_type not in CUSTOMER_TYPES:
            raise InvalidInputError(
                f"Customer type must be one of {CUSTOMER_TYPES}, got: {self.customer_type}"
            )

    @property
    def total_quantity(self) -> int:
        return sum(part.quantity for part in self.parts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order_id": self.order_id,
            "parts": [
                {
                    "material_type": part.material_type,
                    "thickness": part.thickness,
                    "quantity": part.quantity,
                    "processing_time": part.processing_time,
                }
                for part in self.parts
            ],
            "due_date": self.due_date.isoformat(),
            "priority": self.priority,
            "customer_type": self.customer_type,
        }


@dataclass
class Batch:
    """One machine run of a single material and thickness."""
    batch_id: str
    orders: List[Order]
    material_type: str
    thickness: float
    total_quantity: int
    estimated_time: float        # Minutes, setup included
    efficiency: float            # Processing share of estimated time, 0-100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "batch_id": self.batch_id,
            "order_ids": [order.order_id for order in self.orders],
            "material_type": self.material_type,
            "thickness": self.thickness,
            "total_quantity": self.total_quantity,
            "estimated_time": round(self.estimated_time, 2),
            "efficiency": self.efficiency,
        }


@dataclass
class BatchRecommendation:
    """Suggestion for improving batch composition."""
    type: str                    # "size", "timing", "material" or "sequence"
    description: str
    benefit: str
    implementation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "description": self.description,
            "benefit": self.benefit,
            "implementation": self.implementation,
        }


@dataclass
class BatchConfiguration:
    """Result of batch optimization."""

    batches: List[Batch] = field(default_factory=list)
    total_batches: int = 0
    utilization_rate: float = 0.0        # Percent, 0-100
    time_reduction: float = 0.0          # Setup minutes saved
    recommendations: List[BatchRecommendation] = field(default_factory=list)
    recommended_batch_sizes: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "batches": [batch.to_dict() for batch in self.batches],
            "total_batches": self.total_batches,
            "utilization_rate": self.utilization_rate,
            "time_reduction": round(self.time_reduction, 2),
            "recommendations": [rec.to_dict() for rec in self.recommendations],
            "recommended_batch_sizes": self.recommended_batch_sizes,
        }

    def __str__(self) -> str:
        return (f"BatchConfiguration({self.total_batches} batches, "
                f"utilization {self.utilization_rate}%, "
                f"saves {self.time_reduction:.0f}min)")
