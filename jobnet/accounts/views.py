import logging

from django.conf import settings
from django.contrib.auth import authenticate, login, logout, get_user_model
from django.forms.models import model_to_dict
from django.http import JsonResponse
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_GET, require_POST, require_http_methods

from jobnet.errors import AuthenticationError, NotFoundError, ValidationError
from jobnet.http import form_errors, int_param, json_body

from . import services
from .decorators import get_actor, login_required_json
from .forms import AvatarForm, LoginForm, ProfileForm, RegistrationForm
from .models import Notification
from .serializers import serialize_notification, serialize_user

logger = logging.getLogger(__name__)
User = get_user_model()


# -----------------------------
# Registration / session login
# -----------------------------
@require_POST
def register(request):
    form = RegistrationForm(json_body(request))
    if not form.is_valid():
        logger.warning("Registration failed: errors=%s", form.errors.as_json())
        raise ValidationError("Registration failed", detail=form_errors(form))

    user = form.save()
    login(request, user)
    request.session.set_expiry(getattr(settings, "SESSION_COOKIE_AGE", 3600))
    logger.info("User registered: username=%s account_type=%s", user.username, user.account_type)
    return JsonResponse({"message": "User registered successfully", "user": serialize_user(user, private=True)}, status=201)


@require_POST
def user_login(request):
    form = LoginForm(json_body(request))
    if not form.is_valid():
        raise ValidationError("Username and password are required", detail=form_errors(form))

    username = form.cleaned_data["username"]
    user = authenticate(request, username=username, password=form.cleaned_data["password"])
    if user is None:
        logger.info("Login failed: username=%s", username)
        raise AuthenticationError("Invalid username or password")

    login(request, user)
    # Session management: explicit expiry (1 hour by default)
    request.session.set_expiry(getattr(settings, "SESSION_COOKIE_AGE", 3600))
    logger.info("Login success: username=%s account_type=%s", user.username, user.account_type)
    return JsonResponse({"message": "Logged in successfully", "user": serialize_user(user, private=True)})


@require_POST
def user_logout(request):
    username = request.user.username if request.user.is_authenticated else None
    logout(request)
    if username:
        logger.info("Logout: username=%s", username)
    return JsonResponse({"message": "Logged out successfully"})


@require_GET
@login_required_json
def me(request):
    return JsonResponse({"user": serialize_user(request.user, private=True)})


@require_GET
@ensure_csrf_cookie
def csrf(request):
    return JsonResponse({"message": "CSRF cookie set"})


# -----------------------------
# Profiles
# -----------------------------
@require_GET
def user_detail(request, user_id):
    user = User.objects.filter(id=user_id).first()
    if user is None:
        raise NotFoundError("User not found")
    return JsonResponse({"user": serialize_user(user)})


@require_http_methods(["PATCH"])
def update_profile(request):
    user = get_actor(request)
    data = model_to_dict(user, fields=ProfileForm.Meta.fields)
    data.update({k: v for k, v in json_body(request).items() if k in ProfileForm.Meta.fields})
    form = ProfileForm(data, instance=user)
    if not form.is_valid():
        raise ValidationError("Profile update failed", detail=form_errors(form))
    form.save()
    logger.info("Profile updated: username=%s", user.username)
    return JsonResponse({"message": "Profile updated successfully", "user": serialize_user(user, private=True)})


@require_GET
def user_search(request):
    page = int_param(request.GET.get("page"), name="page", default=1)
    limit = int_param(
        request.GET.get("limit"),
        name="limit",
        default=settings.JOBNET_FEED_DEFAULT_LIMIT,
        maximum=settings.JOBNET_FEED_MAX_LIMIT,
    )
    result = services.search_users(
        search=(request.GET.get("search") or "").strip() or None,
        account_type=(request.GET.get("type") or "").strip() or None,
        page=page,
        limit=limit,
    )
    return JsonResponse(
        {
            "users": [serialize_user(u) for u in result.users],
            "page": result.page,
            "limit": result.limit,
            "total": result.total,
            "has_next": result.has_next,
        }
    )


@require_POST
@login_required_json
def upload_avatar(request):
    if "avatar" not in request.FILES:
        raise ValidationError("No file uploaded")
    form = AvatarForm(files={"avatar": request.FILES["avatar"]})
    if not form.is_valid():
        logger.warning("Avatar upload failed: username=%s errors=%s", request.user.username, form.errors.as_json())
        raise ValidationError("Avatar upload failed", detail=form_errors(form))
    user = services.set_avatar(request.user, form.cleaned_data["avatar"])
    return JsonResponse({"message": "Avatar updated successfully", "avatar_url": user.avatar.url})


# -----------------------------
# Notifications
# -----------------------------
@require_GET
@login_required_json
def notifications_list(request):
    qs = Notification.objects.filter(user=request.user)
    unread = qs.filter(is_read=False).count()
    return JsonResponse({"notifications": [serialize_notification(n) for n in qs[:100]], "unread": unread})


@require_POST
@login_required_json
def notification_mark_read(request, notification_id):
    notif = Notification.objects.filter(id=notification_id, user=request.user).first()
    if notif is None:
        raise NotFoundError("Notification not found")
    notif.is_read = True
    notif.save(update_fields=["is_read"])
    return JsonResponse({"notification": serialize_notification(notif)})


@require_POST
@login_required_json
def notifications_mark_all_read(request):
    updated = Notification.objects.filter(user=request.user, is_read=False).update(is_read=True)
    return JsonResponse({"updated": updated})
