"""Authentication for the portal API: bearer header first, then the access cookie."""
from django.conf import settings
from django.middleware.csrf import CsrfViewMiddleware
from rest_framework import exceptions
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError


def _csrf_failure_reason(django_request):
    check = CsrfViewMiddleware(lambda req: None)
    check.process_request(django_request)
    return check.process_view(django_request, None, (), {})


class CookieJWTAuthentication(JWTAuthentication):
    """Accept a JWT from the ``Authorization`` header or the portal's HttpOnly cookie.

    A bad header token fails the request with 401. A bad or stale cookie
    token is ignored so public endpoints and token refresh keep working.
    Cookie-authenticated requests must pass the CSRF check.
    """

    def authenticate(self, request):
        header = self.get_header(request)
        raw_token = self.get_raw_token(header) if header is not None else None
        if raw_token is not None:
            validated_token = self.get_validated_token(raw_token)
            return self.get_user(validated_token), validated_token
        return self._authenticate_cookie(request)

    def _authenticate_cookie(self, request):
        raw_token = request.COOKIES.get(getattr(settings, "JWT_AUTH_COOKIE", "access_token"))
        if not raw_token:
            return None
        try:
            validated_token = self.get_validated_token(raw_token)
        except (InvalidToken, TokenError):
            return None

        reason = _csrf_failure_reason(request._request)
        if reason:
            raise exceptions.PermissionDenied(f"CSRF Failed: {reason}")
        return self.get_user(validated_token), validated_token
