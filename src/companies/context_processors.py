"""Template context processors for the companies app."""
from companies.services import user_companies


def current_company(request):
    """Expose ``current_company`` and ``user_companies`` to templates."""
    if not hasattr(request, "user") or not request.user.is_authenticated:
        return {"current_company": None, "user_companies": []}

    return {
        "current_company": getattr(request, "current_company", None),
        "user_companies": user_companies(request.user),
    }
