"""Step handlers, one per wizard step."""

from .event_spaces_step import EventSpacesStep
from .events_info_step import EventsInfoStep
from .food_beverage_step import FoodBeverageStep
from .hotel_step import HotelStep
from .information_policies_step import InformationPoliciesStep
from .room_categories_step import RoomCategoriesStep
from .room_handling_step import RoomHandlingStep
from .room_info_step import RoomInfoStep

__all__ = [
    "HotelStep",
    "RoomInfoStep",
    "RoomCategoriesStep",
    "RoomHandlingStep",
    "EventsInfoStep",
    "EventSpacesStep",
    "FoodBeverageStep",
    "InformationPoliciesStep",
]
