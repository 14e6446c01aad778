"""Unauthenticated proposal and agreement pages, looked up by token."""
import logging

from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from agreements.services import sign_agreement, view_agreement_by_token
from core.http import client_ip, user_agent
from proposals.services import accept_proposal, decline_proposal, view_proposal_by_token

logger = logging.getLogger("portal")


def proposal_page(request, token):
    proposal = view_proposal_by_token(token)
    return render(
        request,
        "public/proposal.html",
        {"proposal": proposal, "error": ""},
    )


@require_POST
def proposal_accept(request, token):
    try:
        accept_proposal(
            token,
            request.POST.get("email", ""),
            ip=client_ip(request),
            user_agent=user_agent(request),
        )
    except ValueError as exc:
        return _proposal_error(request, token, exc)
    return redirect("public:proposal", token=token)


@require_POST
def proposal_decline(request, token):
    try:
        decline_proposal(token, ip=client_ip(request), user_agent=user_agent(request))
    except ValueError as exc:
        return _proposal_error(request, token, exc)
    return redirect("public:proposal", token=token)


def _proposal_error(request, token, exc):
    from proposals.models import Proposal

    proposal = get_object_or_404(
        Proposal.objects.select_related("company").prefetch_related("items"),
        token=str(token),
    )
    return render(request, "public/proposal.html", {"proposal": proposal, "error": str(exc)}, status=400)


def agreement_page(request, token):
    agreement = view_agreement_by_token(token)
    return render(request, "public/agreement.html", {"agreement": agreement, "error": ""})


@require_POST
def agreement_sign(request, token):
    try:
        sign_agreement(
            token,
            request.POST.get("name", ""),
            request.POST.get("email", ""),
            ip=client_ip(request),
            user_agent=user_agent(request),
        )
    except ValueError as exc:
        from agreements.models import Agreement

        agreement = get_object_or_404(Agreement.objects.select_related("company"), token=str(token))
        return render(request, "public/agreement.html", {"agreement": agreement, "error": str(exc)}, status=400)
    return redirect("public:agreement", token=token)
