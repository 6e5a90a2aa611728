"""Tests for the wizard dispatcher and the per-step handlers."""

import pytest

from src.clients import HotelCMSClientError, HotelCMSServerError
from src.models.cms import AssignFilesResult, RoomConfigResult
from src.models.wizard import NoticeLevel, WizardMode, WizardSession, WizardStep
from src.services.wizard import default_dispatch_table


class TestDispatchTable:
    """Tests for the handler table."""

    def test_every_step_has_a_handler(self):
        table = default_dispatch_table()
        assert set(table) == set(WizardStep)
        for step, handler in table.items():
            assert handler.step == step

    def test_only_events_info_is_non_blocking(self):
        table = default_dispatch_table()
        non_blocking = [step for step, handler in table.items() if not handler.blocking]
        assert non_blocking == [WizardStep.EVENTS_INFO]

    def test_parent_ids(self):
        table = default_dispatch_table()
        assert table[WizardStep.HOTEL].parent_id is None
        assert table[WizardStep.ROOM_INFO].parent_id == "hotel_id"
        assert table[WizardStep.ROOM_CATEGORIES].parent_id == "room_config_id"
        assert table[WizardStep.ROOM_HANDLING].parent_id == "room_config_id"
        assert table[WizardStep.EVENTS_INFO].parent_id == "hotel_id"
        assert table[WizardStep.EVENT_SPACES].parent_id == "event_id"
        assert table[WizardStep.FOOD_BEVERAGE].parent_id == "hotel_id"


class TestPreconditions:
    """Steps whose parent id is missing must not touch the API."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "step, data",
        [
            (WizardStep.ROOM_INFO, {"main_contact_name_room": "Jane"}),
            (WizardStep.ROOM_CATEGORIES, [{"category_name": "Double", "num_rooms": "10"}]),
            (WizardStep.ROOM_HANDLING, {"demand_calendar": True}),
            (WizardStep.EVENTS_INFO, {"contact": {"contact_name": "Ana"}}),
            (WizardStep.EVENT_SPACES, [{"name": "Sala Tejo"}]),
            (WizardStep.FOOD_BEVERAGE, {"fnb_contact_name": "Rui"}),
            (WizardStep.INFORMATION_POLICIES, [{"type": "general_policies", "items": []}]),
        ],
    )
    async def test_missing_parent_id_makes_no_call(self, service, cms_client, step, data):
        session = WizardSession(active_step=step)

        result = await service.next(session, step, data)

        assert cms_client.mock_calls == []
        assert result.success is False
        assert result.advanced is False
        assert session.active_step == step
        assert session.completion.is_complete(step) is False
        assert len(result.messages(NoticeLevel.ERROR)) == 1

    @pytest.mark.asyncio
    async def test_room_categories_without_room_config(self, service, cms_client):
        """Test that roomCategories aborts before addCategoriesToRoom when roomInfo never succeeded."""
        session = WizardSession(active_step=WizardStep.ROOM_CATEGORIES)
        session.ids.hotel_id = 42

        result = await service.next(
            session, WizardStep.ROOM_CATEGORIES, [{"category_name": "Double"}]
        )

        cms_client.add_categories_to_room.assert_not_awaited()
        assert "Room Info step" in result.messages(NoticeLevel.ERROR)[0]
        assert session.active_step == WizardStep.ROOM_CATEGORIES

    @pytest.mark.asyncio
    async def test_hotel_name_required(self, service, cms_client, add_session):
        result = await service.next(add_session, WizardStep.HOTEL, {"city": "Lisbon"})

        cms_client.create_hotel.assert_not_awaited()
        assert result.messages(NoticeLevel.ERROR) == ["Hotel name is required."]
        assert add_session.completion.is_complete(WizardStep.HOTEL) is False


class TestHotelStep:
    """Tests for the hotel step."""

    @pytest.mark.asyncio
    async def test_create_reads_back_hotel_id(self, service, cms_client, add_session, hotel_form):
        result = await service.next(add_session, WizardStep.HOTEL, hotel_form)

        assert result.success is True
        assert add_session.ids.hotel_id == 42
        assert add_session.data.committed(WizardStep.HOTEL)["id"] == 42
        assert add_session.data.live(WizardStep.HOTEL)["id"] == 42
        assert add_session.active_step == WizardStep.ROOM_INFO
        assert add_session.completion.is_complete(WizardStep.HOTEL)

        payload = cms_client.create_hotel.await_args.args[0]
        assert payload["system_hotel_id"] == "HB4I2"
        assert payload["postal_code"] == "1200-001"
        assert "website" not in payload
        assert payload["additional_links"] == [
            {"name": "Brochure", "link": "https://atlantico.example/brochure.pdf"}
        ]
        cms_client.assign_temporary_files.assert_awaited_once_with("hotels", 42)

    @pytest.mark.asyncio
    async def test_create_failure_blocks(self, service, cms_client, add_session, hotel_form):
        cms_client.create_hotel.side_effect = HotelCMSClientError("Hotel name already exists", 400)

        result = await service.next(add_session, WizardStep.HOTEL, hotel_form)

        assert result.success is False
        assert add_session.ids.hotel_id is None
        assert add_session.active_step == WizardStep.HOTEL
        assert add_session.completion.is_complete(WizardStep.HOTEL) is False
        assert result.messages(NoticeLevel.ERROR) == [
            "Failed to create hotel: Hotel name already exists"
        ]
        cms_client.assign_temporary_files.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_file_assignment_failure_is_a_warning(
        self, service, cms_client, add_session, hotel_form
    ):
        cms_client.assign_temporary_files.side_effect = HotelCMSServerError("disk full", 500)

        result = await service.next(add_session, WizardStep.HOTEL, hotel_form)

        assert result.success is True
        assert add_session.ids.hotel_id == 42
        assert add_session.active_step == WizardStep.ROOM_INFO
        assert len(result.messages(NoticeLevel.WARNING)) == 1

    @pytest.mark.asyncio
    async def test_assigned_files_are_reported(self, service, cms_client, add_session, hotel_form):
        cms_client.assign_temporary_files.return_value = AssignFilesResult(updated_count=3)

        result = await service.next(add_session, WizardStep.HOTEL, hotel_form)

        assert "Assigned 3 temporary files to hotel." in result.messages(NoticeLevel.INFO)

    @pytest.mark.asyncio
    async def test_update_existing_hotel(self, service, cms_client, edit_session, hotel_form):
        result = await service.next(edit_session, WizardStep.HOTEL, hotel_form)

        assert result.success is True
        cms_client.create_hotel.assert_not_awaited()
        cms_client.update_hotel.assert_awaited_once()
        assert cms_client.update_hotel.await_args.args[0] == 42
        cms_client.submit_changes.assert_not_awaited()
        cms_client.assign_temporary_files.assert_awaited_once_with("hotels", 42)

    @pytest.mark.asyncio
    async def test_restricted_editor_submits_for_approval(
        self, service, cms_client, edit_session, hotel_form
    ):
        edit_session.permissions = ["edit_with_approval"]

        result = await service.next(edit_session, WizardStep.HOTEL, hotel_form)

        assert result.success is True
        cms_client.update_hotel.assert_not_awaited()
        cms_client.get_hotel_by_id.assert_awaited_once_with(42)
        entry_id, entry_type, change_data, original = cms_client.submit_changes.await_args.args
        assert (entry_id, entry_type) == (42, "hotel")
        assert change_data["name"] == "Hotel Atlântico"
        assert original == {"id": 42, "name": "Hotel Atlântico"}
        assert result.messages(NoticeLevel.SUCCESS) == ["Update request submitted for approval."]


class TestRoomSteps:
    """Tests for roomInfo, roomCategories and roomHandling."""

    @pytest.mark.asyncio
    async def test_example_scenario(self, service, cms_client, add_session, hotel_form):
        """Test hotel 42 followed by roomInfo yielding room config 7."""
        await service.next(add_session, WizardStep.HOTEL, hotel_form)
        assert add_session.ids.hotel_id == 42

        result = await service.next(
            add_session, WizardStep.ROOM_INFO, {"main_contact_name_room": "Jane"}
        )

        payload = cms_client.create_room.await_args.args[0]
        assert payload["hotel_id"] == 42
        assert payload["main_contact_name"] == "Jane"
        assert add_session.ids.room_config_id == 7
        assert add_session.active_step == WizardStep.ROOM_CATEGORIES
        assert result.next_step == WizardStep.ROOM_CATEGORIES

    @pytest.mark.asyncio
    async def test_room_info_without_room_id_blocks(self, service, cms_client, edit_session):
        edit_session.ids.room_config_id = None
        cms_client.create_room.return_value = RoomConfigResult(success=True, data=None)

        result = await service.next(edit_session, WizardStep.ROOM_INFO, {"reception_hours": "24h"})

        assert result.success is False
        assert edit_session.ids.room_config_id is None
        assert edit_session.active_step == WizardStep.HOTEL
        assert "No Room ID returned" in result.messages(NoticeLevel.ERROR)[0]

    @pytest.mark.asyncio
    async def test_room_info_empty_is_skipped(self, service, cms_client, edit_session):
        result = await service.next(edit_session, WizardStep.ROOM_INFO, {})

        cms_client.create_room.assert_not_awaited()
        assert result.success is True
        assert result.next_step == WizardStep.ROOM_CATEGORIES

    @pytest.mark.asyncio
    async def test_add_new_categories(self, service, cms_client, edit_session):
        edit_session.mode = WizardMode.ADD

        await service.next(
            edit_session,
            WizardStep.ROOM_CATEGORIES,
            [{"category_name": "Double", "num_rooms": "10", "extra_bed_surcharge": "12.5", "size": ""}],
        )

        room_id, categories = cms_client.add_categories_to_room.await_args.args
        assert room_id == 7
        assert categories == [
            {"category_name": "Double", "num_rooms": 10, "extra_bed_surcharge": 12.5}
        ]
        cms_client.get_room_categories.assert_not_awaited()
        assert edit_session.active_step == WizardStep.ROOM_HANDLING

    @pytest.mark.asyncio
    async def test_edit_syncs_existing_categories(self, service, cms_client, edit_session):
        cms_client.get_room_categories.return_value = [
            {"id": 301, "category_name": "Superior Double"},
            {"id": 302, "category_name": "Suite"},
        ]

        result = await service.next(
            edit_session,
            WizardStep.ROOM_CATEGORIES,
            [
                {"id": 301, "category_name": "Superior Double", "num_rooms": 38},
                {"category_name": "Family", "num_rooms": "4"},
            ],
        )

        assert result.success is True
        cms_client.delete_room_category.assert_awaited_once_with(302)
        cms_client.update_room_category.assert_awaited_once_with(
            301, {"category_name": "Superior Double", "num_rooms": 38}
        )
        _, new_categories = cms_client.add_categories_to_room.await_args.args
        assert new_categories == [{"category_name": "Family", "num_rooms": 4}]

    @pytest.mark.asyncio
    async def test_category_failure_blocks(self, service, cms_client, edit_session):
        edit_session.mode = WizardMode.ADD
        cms_client.add_categories_to_room.side_effect = HotelCMSClientError("invalid bed type", 422)

        result = await service.next(
            edit_session, WizardStep.ROOM_CATEGORIES, [{"category_name": "Double"}]
        )

        assert result.success is False
        assert edit_session.active_step == WizardStep.HOTEL
        assert edit_session.completion.is_complete(WizardStep.ROOM_CATEGORIES) is False

    @pytest.mark.asyncio
    async def test_room_handling_upsert(self, service, cms_client, edit_session):
        await service.next(
            edit_session,
            WizardStep.ROOM_HANDLING,
            {"demand_calendar": True, "revenue_manager_name": "Carlos", "notes": ""},
        )

        cms_client.create_or_update_room_operational_handling.assert_awaited_once_with(
            7, {"demand_calendar": True, "revenue_manager_name": "Carlos"}
        )
        assert edit_session.active_step == WizardStep.EVENTS_INFO


class TestEventSteps:
    """Tests for eventsInfo and eventSpaces."""

    @pytest.fixture
    def events_info(self):
        return {
            "contact": {"contact_name": "Ana", "contact_email": "events@atlantico.example"},
            "booking": {"has_options": True},
            "operations": {"sold_with_rooms_only": False},
            "financials": {"requires_deposit": True},
            "equipment": [{"name": "Projector", "quantity": 2, "price_per_unit": 50}],
            "technical": {"beamer_lumens": 4000},
        }

    @pytest.mark.asyncio
    async def test_creates_event_and_sub_records(self, service, cms_client, events_info):
        session = WizardSession()
        session.ids.hotel_id = 42

        result = await service.next(session, WizardStep.EVENTS_INFO, events_info)

        assert result.success is True
        assert session.ids.event_id == 11
        assert cms_client.create_event.await_args.args[0] == {
            "hotel_id": 42,
            "contact_name": "Ana",
            "contact_phone": "",
            "contact_email": "events@atlantico.example",
            "contact_position": "",
        }
        cms_client.upsert_booking.assert_awaited_once_with(11, {"has_options": True})
        cms_client.upsert_equipment.assert_awaited_once_with(
            11, [{"equipment_name": "Projector", "quantity": 2, "price": 50}]
        )
        cms_client.create_or_update_event_technical_info.assert_awaited_once_with(
            11, {"beamer_lumens": 4000}
        )
        assert session.active_step == WizardStep.EVENT_SPACES

    @pytest.mark.asyncio
    async def test_sub_record_failure_still_advances(
        self, service, cms_client, edit_session, events_info
    ):
        """Test that a rejected equipment upsert is a warning and the wizard moves on."""
        cms_client.upsert_equipment.side_effect = HotelCMSServerError("equipment table locked", 500)

        result = await service.next(edit_session, WizardStep.EVENTS_INFO, events_info)

        cms_client.update_event.assert_awaited_once()
        cms_client.upsert_booking.assert_awaited_once()
        assert result.success is True
        assert result.advanced is True
        assert edit_session.active_step == WizardStep.EVENT_SPACES
        assert result.messages(NoticeLevel.WARNING) == [
            "Failed to save equipment data but proceeding."
        ]

    @pytest.mark.asyncio
    async def test_event_failure_is_non_blocking(self, service, cms_client, events_info):
        session = WizardSession()
        session.ids.hotel_id = 42
        cms_client.create_event.side_effect = HotelCMSServerError("boom", 500)

        result = await service.next(session, WizardStep.EVENTS_INFO, events_info)

        assert result.success is False
        assert result.advanced is True
        assert session.active_step == WizardStep.EVENT_SPACES
        assert session.completion.is_complete(WizardStep.EVENTS_INFO) is False
        cms_client.upsert_booking.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_add_mode_strips_space_ids(self, service, cms_client, edit_session):
        edit_session.mode = WizardMode.ADD
        spaces = [{"id": "tmp-1", "name": "Sala Tejo"}, {"id": 901, "name": "Sala Douro"}]

        await service.next(edit_session, WizardStep.EVENT_SPACES, spaces)

        cms_client.upsert_spaces.assert_awaited_once_with(
            11, [{"name": "Sala Tejo"}, {"name": "Sala Douro"}]
        )

    @pytest.mark.asyncio
    async def test_edit_mode_keeps_stored_space_ids(self, service, cms_client, edit_session):
        spaces = [{"id": "tmp-1", "name": "Sala Tejo"}, {"id": 901, "name": "Sala Douro"}]

        result = await service.next(edit_session, WizardStep.EVENT_SPACES, spaces)

        cms_client.upsert_spaces.assert_awaited_once_with(
            11, [{"name": "Sala Tejo"}, {"id": 901, "name": "Sala Douro"}]
        )
        assert result.next_step == WizardStep.FOOD_BEVERAGE


class TestFinalSteps:
    """Tests for foodBeverage and informationPolicies."""

    @pytest.mark.asyncio
    async def test_food_beverage_finishes_add_mode(self, service, cms_client):
        session = WizardSession()
        session.ids.hotel_id = 42
        session.data.set_step_data(WizardStep.HOTEL, {"name": "Hotel Atlântico", "id": 42})

        result = await service.next(session, WizardStep.FOOD_BEVERAGE, {"fnb_contact_name": "Rui"})

        cms_client.upsert_food_beverage_details.assert_awaited_once_with(
            42, {"fnb_contact_name": "Rui"}
        )
        assert result.finished is True
        assert result.redirect_to == "/view/hotel/42"
        assert result.hotel_id == 42
        assert session.finished is True
        assert session.active_step == WizardStep.HOTEL
        assert session.ids.hotel_id is None
        assert session.data.committed(WizardStep.HOTEL) == {}

    @pytest.mark.asyncio
    async def test_empty_food_beverage_holds_add_mode(self, service, cms_client):
        session = WizardSession()
        session.ids.hotel_id = 42
        session.active_step = WizardStep.FOOD_BEVERAGE

        result = await service.next(session, WizardStep.FOOD_BEVERAGE, {})

        cms_client.upsert_food_beverage_details.assert_not_awaited()
        assert result.success is True
        assert result.advanced is False
        assert result.finished is False
        assert result.messages(NoticeLevel.INFO) == ["Skipping F&B (no data)."]
        assert session.active_step == WizardStep.FOOD_BEVERAGE
        assert session.finished is False
        assert session.ids.hotel_id == 42

    @pytest.mark.asyncio
    async def test_empty_food_beverage_advances_in_edit_mode(self, service, cms_client, edit_session):
        result = await service.next(edit_session, WizardStep.FOOD_BEVERAGE, {})

        assert result.advanced is True
        assert edit_session.active_step == WizardStep.INFORMATION_POLICIES

    @pytest.mark.asyncio
    async def test_food_beverage_advances_in_edit_mode(self, service, cms_client, edit_session):
        result = await service.next(
            edit_session, WizardStep.FOOD_BEVERAGE, {"fnb_contact_name": "Rui"}
        )

        assert result.finished is False
        assert result.redirect_to is None
        assert edit_session.active_step == WizardStep.INFORMATION_POLICIES

    @pytest.mark.asyncio
    async def test_food_beverage_failure_blocks(self, service, cms_client, edit_session):
        cms_client.upsert_food_beverage_details.side_effect = HotelCMSClientError("bad", 400)

        result = await service.next(edit_session, WizardStep.FOOD_BEVERAGE, {"x": 1})

        assert result.success is False
        assert result.messages(NoticeLevel.ERROR) == ["Failed to save F&B details: bad"]
        assert edit_session.completion.is_complete(WizardStep.FOOD_BEVERAGE) is False

    @pytest.mark.asyncio
    async def test_information_policies_created_individually(
        self, service, cms_client, edit_session
    ):
        edit_session.active_step = WizardStep.INFORMATION_POLICIES
        edit_session.data.set_step_data(WizardStep.HOTEL, {"name": "Hotel", "systemHotelId": "HB4I2"})
        policies = [
            {"type": "room_information", "items": [{"title": "Towels"}]},
            {"type": "general_policies", "items": []},
        ]

        result = await service.next(edit_session, WizardStep.INFORMATION_POLICIES, policies)

        assert cms_client.create_information_policy.await_count == 2
        first = cms_client.create_information_policy.await_args_list[0].args[0]
        assert first == {
            "system_hotel_id": "HB4I2",
            "type": "room_information",
            "items": [{"title": "Towels"}],
        }
        assert result.finished is True
        assert edit_session.finished is True
        assert edit_session.active_step == WizardStep.INFORMATION_POLICIES
        assert edit_session.ids.hotel_id == 42

    @pytest.mark.asyncio
    async def test_policy_form_supplies_system_hotel_id(self, service, cms_client):
        session = WizardSession()

        await service.next(
            session,
            WizardStep.INFORMATION_POLICIES,
            {"system_hotel_id": "57392", "type": "service_information", "items": []},
        )

        cms_client.create_information_policy.assert_awaited_once_with(
            {"system_hotel_id": "57392", "type": "service_information", "items": []}
        )

    @pytest.mark.asyncio
    async def test_existing_policy_update_failure(self, service, cms_client, edit_session):
        edit_session.data.set_step_data(WizardStep.HOTEL, {"name": "Hotel", "systemHotelId": "HB4I2"})
        cms_client.update_information_policy.side_effect = HotelCMSClientError("Policy not found", 404)

        result = await service.next(
            edit_session,
            WizardStep.INFORMATION_POLICIES,
            [{"id": 5, "type": "general_policies", "items": []}, {"type": "room_information"}],
        )

        assert result.success is False
        assert result.messages(NoticeLevel.ERROR) == [
            "Failed to save information policy 1 of 2: Policy not found"
        ]
        cms_client.create_information_policy.assert_not_awaited()
