"""Authentication API views with HttpOnly JWT cookies."""

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.tokens import default_token_generator
from django.core.exceptions import ImproperlyConfigured
from django.core.exceptions import ValidationError as DjangoValidationError
from django.middleware import csrf
from django.views.decorators.csrf import ensure_csrf_cookie
from django.utils.decorators import method_decorator
from django.utils.encoding import force_str
from django.utils.http import urlsafe_base64_decode
from rest_framework import permissions, status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from accounts.services import build_password_set_url, record_login
from api.v1.serializers import CustomTokenObtainPairSerializer
from companies.services import clear_current_company_cookie
from core.email import send_branded_email
from core.http import client_ip

logger = logging.getLogger("portal")


class SafeScopedRateThrottle(ScopedRateThrottle):
    """Scoped throttle that falls back to a strict default if scope config is missing."""

    def get_rate(self):
        try:
            return super().get_rate()
        except ImproperlyConfigured:
            logger.warning("Throttle scope '%s' not configured, applying strict default 5/min.", self.scope)
            return "5/min"


def _cookie_names() -> tuple[str, str]:
    return (
        getattr(settings, "JWT_AUTH_COOKIE", "access_token"),
        getattr(settings, "JWT_AUTH_REFRESH_COOKIE", "refresh_token"),
    )


def _cookie_scope() -> dict:
    return {
        "path": getattr(settings, "JWT_AUTH_COOKIE_PATH", "/"),
        "domain": getattr(settings, "JWT_AUTH_COOKIE_DOMAIN", None),
    }


def _set_auth_cookies(response: Response, *, access: str, refresh: str | None) -> None:
    """Store the token pair in HttpOnly cookies scoped like the portal session."""
    access_name, refresh_name = _cookie_names()
    options = {
        "httponly": True,
        "secure": getattr(settings, "JWT_AUTH_COOKIE_SECURE", not settings.DEBUG),
        "samesite": getattr(settings, "JWT_AUTH_COOKIE_SAMESITE", "Lax"),
        **_cookie_scope(),
    }
    lifetimes = settings.SIMPLE_JWT
    response.set_cookie(
        access_name,
        access,
        max_age=int(lifetimes["ACCESS_TOKEN_LIFETIME"].total_seconds()),
        **options,
    )
    if refresh:
        response.set_cookie(
            refresh_name,
            refresh,
            max_age=int(lifetimes["REFRESH_TOKEN_LIFETIME"].total_seconds()),
            **options,
        )


def _clear_auth_cookies(response: Response) -> None:
    for name in _cookie_names():
        response.delete_cookie(name, **_cookie_scope())


def _token_payload(access: str, refresh: str | None) -> dict:
    if getattr(settings, "JWT_RETURN_TOKENS_IN_BODY", False):
        return {"access": access, "refresh": refresh}
    return {}


class CookieTokenObtainPairView(TokenObtainPairView):
    """Sign a portal user in and set the JWT cookies."""

    serializer_class = CustomTokenObtainPairSerializer
    throttle_classes = [SafeScopedRateThrottle]
    throttle_scope = "auth_burst"
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        record_login(serializer.user, client_ip(request))
        logger.info("API login for %s", serializer.user.email)

        response = Response(
            {"user": data["user"], **_token_payload(data["access"], data["refresh"])},
            status=status.HTTP_200_OK,
        )
        _set_auth_cookies(response, access=data["access"], refresh=data["refresh"])
        return response


class CookieTokenRefreshView(TokenRefreshView):
    """Rotate the token pair, reading the refresh token from the body or its cookie."""

    throttle_classes = [SafeScopedRateThrottle]
    throttle_scope = "auth_sustained"
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        payload = request.data.copy() if hasattr(request.data, "get") else {}
        payload.setdefault("refresh", "")
        if not payload["refresh"]:
            payload["refresh"] = request.COOKIES.get(_cookie_names()[1], "")

        serializer = self.get_serializer(data=payload)
        try:
            serializer.is_valid(raise_exception=True)
        except TokenError as e:
            raise InvalidToken(e.args[0])
        access = serializer.validated_data["access"]
        refresh = serializer.validated_data.get("refresh", payload["refresh"])

        response = Response(
            {"detail": "Token refreshed.", **_token_payload(access, refresh)},
            status=status.HTTP_200_OK,
        )
        _set_auth_cookies(response, access=access, refresh=refresh)
        return response


class LogoutAPIView(APIView):
    """Blacklist the refresh token when present and drop every portal cookie."""

    permission_classes = [permissions.AllowAny]

    def post(self, request):
        raw_refresh = request.data.get("refresh") or request.COOKIES.get(_cookie_names()[1])
        if raw_refresh:
            try:
                RefreshToken(raw_refresh).blacklist()
            except TokenError:
                logger.info("Logout with an invalid refresh token")

        response = Response(status=status.HTTP_204_NO_CONTENT)
        _clear_auth_cookies(response)
        clear_current_company_cookie(response)
        return response


@method_decorator(ensure_csrf_cookie, name="dispatch")
class CSRFTokenAPIView(APIView):
    """Return a CSRF token and ensure CSRF cookie is set."""

    permission_classes = [permissions.AllowAny]

    def get(self, request):
        token = csrf.get_token(request)
        return Response({"csrfToken": token}, status=status.HTTP_200_OK)


class PasswordResetRequestAPIView(APIView):
    """Request a password reset email for an account (idempotent)."""

    permission_classes = [permissions.AllowAny]
    throttle_classes = [SafeScopedRateThrottle]
    throttle_scope = "auth_burst"

    def post(self, request):
        email = (request.data.get("email") or "").strip()
        if not email:
            raise ValidationError({"email": "This field is required."})

        User = get_user_model()
        user = User.objects.filter(email__iexact=email, is_active=True).first()
        reset_url = None

        if user:
            reset_url = build_password_set_url(user)

            greeting = user.get_full_name() or user.email
            try:
                send_branded_email(
                    subject=f"Reset your {settings.AGENCY_NAME} portal password",
                    template_name="emails/password_reset",
                    context={"greeting": greeting, "reset_url": reset_url},
                    recipient_list=[user.email],
                    fail_silently=False,
                )
            except Exception:
                # Do not leak whether the account exists.
                logger.exception("Password reset email failed for %s", email)

        payload = {"detail": "If an account matches this email, a reset link has been sent."}
        if reset_url:
            logger.debug("Password reset URL generated for %s", email)
        return Response(payload, status=status.HTTP_200_OK)


class PasswordResetConfirmAPIView(APIView):
    """Confirm password reset using uid/token and set a new password."""

    permission_classes = [permissions.AllowAny]
    throttle_classes = [SafeScopedRateThrottle]
    throttle_scope = "auth_burst"

    def post(self, request):
        uid = (request.data.get("uid") or "").strip()
        token = (request.data.get("token") or "").strip()
        pw1 = request.data.get("new_password1") or ""
        pw2 = request.data.get("new_password2") or ""

        if not uid:
            raise ValidationError({"uid": "This field is required."})
        if not token:
            raise ValidationError({"token": "This field is required."})
        if not pw1 or not pw2:
            raise ValidationError({"new_password1": "Password is required.", "new_password2": "Password is required."})
        if pw1 != pw2:
            raise ValidationError({"new_password2": "Passwords do not match."})

        User = get_user_model()
        try:
            user_id = force_str(urlsafe_base64_decode(uid))
            user = User.objects.filter(pk=user_id, is_active=True).first()
        except (ValueError, TypeError, OverflowError, DjangoValidationError):
            user = None

        if not user or not default_token_generator.check_token(user, token):
            raise ValidationError({"detail": "Invalid or expired link."})

        from django.contrib.auth.password_validation import validate_password
        try:
            validate_password(pw1, user=user)
        except DjangoValidationError as exc:
            raise ValidationError({"new_password1": list(exc.messages)})

        user.set_password(pw1)
        user.save(update_fields=["password"])
        logger.info("Password reset completed for %s", user.email)
        return Response({"detail": "Password updated. You can now sign in."}, status=status.HTTP_200_OK)
