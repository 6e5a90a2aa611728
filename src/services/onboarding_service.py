"""Hotel onboarding service: the entry point for driving the wizard."""

import asyncio
from typing import Any, Optional

from structlog import get_logger

from src.clients import HotelCMSClient
from src.models.cms import FullHotelDetails
from src.models.wizard import (
    STEP_SEQUENCE,
    DispatchResult,
    Notice,
    NoticeLevel,
    WizardMode,
    WizardSession,
    WizardStep,
)
from src.services.wizard import StepSequencer, WizardDispatcher
from src.transformers import EventTransformer, HydrationTransformer

logger = get_logger(__name__)


class OnboardingError(Exception):
    """Raised when a wizard session cannot be started or loaded."""

    pass


class HotelOnboardingService:
    """Starts wizard sessions and submits steps through the dispatcher.

    Sessions are plain objects owned by the caller; the service keeps no
    per-session state and only one step of a session should be in flight.
    """

    def __init__(
        self,
        client: Optional[HotelCMSClient] = None,
        dispatcher: Optional[WizardDispatcher] = None,
    ):
        """Initialize the service.

        Args:
            client: Hotel CMS API client; built from settings when omitted
            dispatcher: Step dispatcher; built around `client` when omitted
        """
        self.client = client or HotelCMSClient()
        self.dispatcher = dispatcher or WizardDispatcher(self.client)
        self.sequencer: StepSequencer = self.dispatcher.sequencer

    def start_add(self, permissions: Optional[list[str]] = None) -> WizardSession:
        """New session for onboarding a hotel, positioned on the first step."""
        logger.info("Starting add session")
        return WizardSession(mode=WizardMode.ADD, permissions=list(permissions or []))

    async def load_for_edit(
        self,
        hotel_id: int,
        permissions: Optional[list[str]] = None,
    ) -> WizardSession:
        """Build an edit session hydrated from everything stored for a hotel.

        Args:
            hotel_id: CMS hotel id
            permissions: Caller permission codes; fetched from /auth/me when omitted

        Returns:
            Edit-mode session with step data, completion and ids filled in

        Raises:
            OnboardingError: If no hotel id is given or the hotel cannot be fetched
        """
        if not hotel_id:
            raise OnboardingError("A hotel id is required to edit a hotel")

        logger.info("Loading hotel for edit", hotel_id=hotel_id)

        if permissions is None:
            permissions = await self._fetch_permissions(hotel_id)

        try:
            hotel = await self.client.get_hotel_by_id(hotel_id)
        except Exception as e:
            logger.error("Failed to fetch hotel data", hotel_id=hotel_id, error=str(e))
            raise OnboardingError(f"Failed to fetch hotel data: {str(e)}") from e

        try:
            full_details = await self.client.get_full_hotel_details(hotel_id)
        except Exception as e:
            logger.warning("Full hotel details unavailable", hotel_id=hotel_id, error=str(e))
            full_details = {}

        aggregate = FullHotelDetails.model_validate(full_details)
        aggregate.hotel = hotel

        try:
            aggregate.events = await self.client.get_events_by_hotel_id(hotel_id)
        except Exception as e:
            logger.warning("Events unavailable", hotel_id=hotel_id, error=str(e))
            aggregate.events = []

        first_event_id = aggregate.events[0].get("id") if aggregate.events else None
        if first_event_id is not None:
            aggregate.events_info = await self._load_event_details(first_event_id)
            if not aggregate.event_spaces:
                aggregate.event_spaces = aggregate.events_info.get("spaces") or []

        system_hotel_id = (aggregate.hotel or {}).get("system_hotel_id")
        if system_hotel_id and not aggregate.information_policies:
            try:
                aggregate.information_policies = (
                    await self.client.get_information_policies_by_hotel(system_hotel_id)
                )
            except Exception as e:
                logger.warning("Information policies unavailable", hotel_id=hotel_id, error=str(e))

        hydrated = HydrationTransformer.from_aggregate(aggregate)

        session = WizardSession(mode=WizardMode.EDIT, permissions=list(permissions))
        session.ids.hotel_id = hotel_id
        session.ids.room_config_id = hydrated.room_config_id
        session.ids.event_id = hydrated.event_id
        for step in STEP_SEQUENCE:
            session.data.set_step_data(step, hydrated.step_data[step.value])
        session.completion.steps.update(hydrated.completion)

        logger.info(
            "Hotel loaded for edit",
            hotel_id=hotel_id,
            room_config_id=session.ids.room_config_id,
            event_id=session.ids.event_id,
        )
        return session

    async def next(self, session: WizardSession, step: WizardStep, data: Any) -> DispatchResult:
        """Commit a step's data, persist it, and advance on success.

        The step is marked complete before the API calls run and reverted
        if they fail.

        Args:
            session: Wizard session
            step: Step being submitted
            data: Full value of the step as submitted by its form

        Returns:
            DispatchResult for the submission
        """
        step = WizardStep(step)
        if data is None:
            notice = Notice(level=NoticeLevel.ERROR, step=step, message="Invalid form data received")
            logger.error(notice.message, step=step.value, hotel_id=session.ids.hotel_id)
            return DispatchResult(step=step, notices=[notice], hotel_id=session.ids.hotel_id)

        session.data.set_step_data(step, data)
        session.completion.mark_complete(step)
        return await self.dispatcher.dispatch(session, step)

    def previous(self, session: WizardSession, step: WizardStep, data: Any) -> WizardStep:
        """Save a step's data without any API call and go back one step."""
        step = WizardStep(step)
        session.data.set_step_data(step, data)
        session.active_step = self.sequencer.retreat(step)
        return session.active_step

    def jump_to(self, session: WizardSession, step: WizardStep) -> WizardSession:
        return self.sequencer.jump_to(session, step)

    def update_live(self, session: WizardSession, step: WizardStep, data: Any) -> None:
        """Field-level change: only the live preview copy is replaced."""
        session.data.set_step_data(step, data, live_only=True)

    async def run_steps(
        self, session: WizardSession, payloads: dict[str, Any]
    ) -> list[DispatchResult]:
        """Submit the given step payloads in sequence order.

        Stops at the first submission that neither advances nor finishes the
        wizard, and after the run finishes.

        Args:
            session: Wizard session
            payloads: Step name to submitted value; unknown names are ignored

        Returns:
            One DispatchResult per submitted step
        """
        unknown = sorted(set(payloads) - {step.value for step in STEP_SEQUENCE})
        if unknown:
            logger.warning("Ignoring unknown steps", steps=unknown)

        results: list[DispatchResult] = []
        for step in STEP_SEQUENCE:
            if step.value not in payloads:
                continue
            self.jump_to(session, step)
            result = await self.next(session, step, payloads[step.value])
            results.append(result)
            if result.finished or not result.advanced:
                break
        return results

    async def close(self) -> None:
        await self.client.close()

    async def _fetch_permissions(self, hotel_id: int) -> list[str]:
        try:
            current_user = await self.client.get_current_user()
        except Exception as e:
            logger.warning(
                "Could not fetch permissions, assuming none", hotel_id=hotel_id, error=str(e)
            )
            return []
        return list(current_user.permissions)

    async def _load_event_details(self, event_id: int) -> dict[str, Any]:
        """Fetch every section of an event concurrently; failed sections come back empty."""
        fetchers = {
            "contact": self.client.get_event_by_id,
            "booking": self.client.get_event_booking,
            "operations": self.client.get_event_operations,
            "financials": self.client.get_event_financials,
            "equipment": self.client.get_event_equipment,
            "technical": self.client.get_event_technical_info,
            "contracting": self.client.get_event_contracting_info,
            "spaces": self.client.get_event_spaces,
        }
        names = list(fetchers)
        results = await asyncio.gather(
            *(fetchers[name](event_id) for name in names),
            return_exceptions=True,
        )
        return EventTransformer.events_info_from_api(dict(zip(names, results)))
