"""Celery tasks for agreements."""
import logging

from celery import shared_task

logger = logging.getLogger("portal")


@shared_task(name="agreements.tasks.expire_overdue_agreements")
def expire_overdue_agreements():
    from agreements.services import expire_overdue_agreements as _expire

    return _expire()


@shared_task(name="agreements.tasks.generate_agreements_for_proposal")
def generate_agreements_for_proposal(proposal_id: str):
    """Create the follow-up agreements of an accepted proposal."""
    from agreements.services import generate_agreements_for_proposal as _generate
    from proposals.models import Proposal

    proposal = Proposal.objects.select_related("company").filter(pk=proposal_id).first()
    if proposal is None:
        logger.warning("generate_agreements_for_proposal: proposal %s not found", proposal_id)
        return []
    agreements = _generate(proposal)
    return [str(a.pk) for a in agreements]
