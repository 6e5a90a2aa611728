"""Data transformation package."""

from src.transformers.event_transformer import EventTransformer
from src.transformers.hotel_transformer import HotelTransformer
from src.transformers.hydration_transformer import HydratedState, HydrationTransformer
from src.transformers.policy_transformer import PolicyTransformer
from src.transformers.room_transformer import RoomTransformer

__all__ = [
    "EventTransformer",
    "HotelTransformer",
    "HydratedState",
    "HydrationTransformer",
    "PolicyTransformer",
    "RoomTransformer",
]
