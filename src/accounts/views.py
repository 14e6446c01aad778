import logging

from django.contrib import messages
from django.contrib.auth import login, logout
from django.contrib.auth.mixins import LoginRequiredMixin
from django.contrib.auth.tokens import default_token_generator
from django.core.exceptions import ValidationError
from django.shortcuts import redirect, render
from django.utils.encoding import force_str
from django.utils.http import url_has_allowed_host_and_scheme, urlsafe_base64_decode
from django.views import View

from companies.services import clear_current_company_cookie
from core.http import client_ip

from .forms import ChoosePasswordForm, LoginForm
from .models import User
from .services import record_login

logger = logging.getLogger("portal")


class CustomLoginView(View):
    """Login view that records login metadata and honours ``?next=``."""

    template_name = "accounts/login.html"

    def get(self, request):
        if request.user.is_authenticated:
            return redirect("dashboard:index")
        form = LoginForm()
        return render(request, self.template_name, self._context(form, request))

    def post(self, request):
        form = LoginForm(request, data=request.POST)
        if form.is_valid():
            user = form.get_user()
            login(request, user)
            record_login(user, client_ip(request))

            next_url = request.GET.get("next") or request.POST.get("next")
            if next_url and url_has_allowed_host_and_scheme(
                next_url,
                allowed_hosts={request.get_host()},
                require_https=request.is_secure(),
            ):
                return redirect(next_url)
            return redirect("dashboard:index")
        return render(request, self.template_name, self._context(form, request))

    @staticmethod
    def _context(form, request):
        return {
            "form": form,
            "next_url": request.GET.get("next") or request.POST.get("next") or "",
        }


class CustomLogoutView(LoginRequiredMixin, View):
    """Log the user out and redirect to the login page."""

    def post(self, request):
        logout(request)
        messages.info(request, "You have been signed out.")
        response = redirect("accounts:login")
        clear_current_company_cookie(response)
        return response


class ChoosePasswordView(View):
    """Landing page of invitation and password reset links."""

    template_name = "accounts/choose_password.html"

    def _get_user(self, request):
        uid = request.GET.get("uid") or request.POST.get("uid") or ""
        token = request.GET.get("token") or request.POST.get("token") or ""
        try:
            user_id = force_str(urlsafe_base64_decode(uid))
            user = User.objects.filter(pk=user_id, is_active=True).first()
        except (ValueError, TypeError, OverflowError, ValidationError):
            user = None
        if user is None or not default_token_generator.check_token(user, token):
            return None, uid, token
        return user, uid, token

    def get(self, request):
        user, uid, token = self._get_user(request)
        if user is None:
            return render(request, self.template_name, {"invalid_link": True}, status=400)
        form = ChoosePasswordForm(user)
        return render(request, self.template_name, {"form": form, "uid": uid, "token": token})

    def post(self, request):
        user, uid, token = self._get_user(request)
        if user is None:
            return render(request, self.template_name, {"invalid_link": True}, status=400)
        form = ChoosePasswordForm(user, data=request.POST)
        if form.is_valid():
            form.save()
            logger.info("Password set for %s", user.email)
            messages.success(request, "Your password has been set. You can now sign in.")
            return redirect("accounts:login")
        return render(request, self.template_name, {"form": form, "uid": uid, "token": token})
