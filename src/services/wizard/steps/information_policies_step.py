"""Step: information policies."""

from typing import Optional

from src.models.wizard import WizardSession, WizardStep
from src.services.wizard.base_handler import StepHandler
from src.services.wizard.context import DispatchContext
from src.transformers import PolicyTransformer


class InformationPoliciesStep(StepHandler):
    """Saves each policy individually under the hotel's external system id.

    Policies loaded for edit carry their backend id and are updated in place;
    the others are created. Policies are keyed by `system_hotel_id`, not by
    the CMS hotel id, so the precondition is on that value. Policies created before a failure stay.
    """

    step = WizardStep.INFORMATION_POLICIES

    def precondition_error(self, session: WizardSession) -> Optional[str]:
        if self._system_hotel_id(session) is None:
            return "System Hotel ID not found. Please set it on the Hotel step first."
        return None

    async def execute(self, context: DispatchContext) -> bool:
        policies = PolicyTransformer.as_list(context.data)
        if not policies:
            context.info("No information policies to save.")
            return True

        system_hotel_id = self._system_hotel_id(context.session)
        for position, policy in enumerate(policies, start=1):
            policy_id = PolicyTransformer.existing_id(policy)
            try:
                if policy_id is None:
                    await context.client.create_information_policy(
                        PolicyTransformer.to_api(policy, system_hotel_id)
                    )
                else:
                    await context.client.update_information_policy(
                        policy_id, PolicyTransformer.to_update_api(policy)
                    )
            except Exception as e:
                context.error(
                    f"Failed to save information policy {position} of {len(policies)}: {str(e)}"
                )
                return False

        context.success(f"{len(policies)} information policies saved.")
        return True

    def _system_hotel_id(self, session: WizardSession) -> Optional[str]:
        return PolicyTransformer.system_hotel_id(
            PolicyTransformer.as_list(session.data.committed(self.step)),
            session.data.committed(WizardStep.HOTEL) or {},
        )
