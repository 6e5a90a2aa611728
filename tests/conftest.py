import json
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from src.clients import HotelCMSClient
from src.models.cms import (
    AssignFilesResult,
    CategoriesResult,
    EventCreateResult,
    HotelCreateResult,
    RoomConfigData,
    RoomConfigResult,
)
from src.models.wizard import WizardMode, WizardSession
from src.services import HotelOnboardingService
from src.services.wizard import WizardDispatcher

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def full_hotel_details():
    """Load the hotel aggregate (data of GET /hotels/{id}/full) from fixture."""
    with open(FIXTURES_DIR / "full_hotel_details.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def cms_client():
    """Hotel CMS client double with successful default responses."""
    client = AsyncMock(spec=HotelCMSClient)
    client.create_hotel.return_value = HotelCreateResult(hotel_id=42, name="Hotel Atlântico")
    client.update_hotel.return_value = {"success": True}
    client.get_hotel_by_id.return_value = {"id": 42, "name": "Hotel Atlântico"}
    client.assign_temporary_files.return_value = AssignFilesResult(updated_count=0)
    client.create_room.return_value = RoomConfigResult(data=RoomConfigData(room_id=7))
    client.add_categories_to_room.return_value = CategoriesResult(
        room_id=7, created_categories=[{"id": 1}]
    )
    client.get_room_categories.return_value = []
    client.create_event.return_value = EventCreateResult(event_id=11)
    return client


@pytest.fixture
def dispatcher(cms_client):
    return WizardDispatcher(cms_client)


@pytest.fixture
def service(cms_client):
    return HotelOnboardingService(client=cms_client)


@pytest.fixture
def add_session():
    return WizardSession(mode=WizardMode.ADD)


@pytest.fixture
def edit_session():
    """Edit session for hotel 42 with room config 7 and event 11 already known."""
    session = WizardSession(mode=WizardMode.EDIT, permissions=["edit_all"])
    session.ids.hotel_id = 42
    session.ids.room_config_id = 7
    session.ids.event_id = 11
    return session


@pytest.fixture
def hotel_form():
    return {
        "systemHotelId": "HB4I2",
        "name": "Hotel Atlântico",
        "street": "Rua do Mar 12",
        "postalCode": "1200-001",
        "city": "Lisbon",
        "country": "Portugal",
        "email": "info@atlantico.example",
        "website": "",
        "totalRooms": 120,
        "additionalLinks": [
            {"name": "Brochure", "link": "https://atlantico.example/brochure.pdf"},
            {"name": "", "link": ""},
        ],
    }
