"""Middleware resolving the company the user is currently viewing."""
from companies.services import resolve_current_company


class CurrentCompanyMiddleware:
    """Set ``request.current_company`` from the ``current_client_id`` cookie.

    Only session-authenticated requests are resolved here; API requests
    authenticated by JWT resolve it in the view layer once DRF has
    authenticated the user.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        user = getattr(request, "user", None)
        request.current_company = resolve_current_company(request, user)
        return self.get_response(request)
