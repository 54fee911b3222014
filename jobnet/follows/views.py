from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_http_methods

from accounts.decorators import get_actor, login_required_json
from . import services


def _edge_user(user, followed_at) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "full_name": user.full_name,
        "account_type": user.account_type,
        "bio": user.bio,
        "followed_at": followed_at.isoformat(),
    }


def _followers_payload(user_id):
    return [_edge_user(e.follower, e.created_at) for e in services.followers(user_id)]


def _following_payload(user_id):
    return [_edge_user(e.following, e.created_at) for e in services.following(user_id)]


@require_http_methods(["POST", "DELETE"])
def follow_user(request, user_id):
    actor = get_actor(request)
    if request.method == "POST":
        services.follow(actor, user_id)
        return JsonResponse({"message": "Successfully followed user"}, status=201)
    services.unfollow(actor, user_id)
    return JsonResponse({"message": "Successfully unfollowed user"})


@require_GET
@login_required_json
def my_followers(request):
    return JsonResponse({"followers": _followers_payload(request.user.id)})


@require_GET
@login_required_json
def my_following(request):
    return JsonResponse({"following": _following_payload(request.user.id)})


@require_GET
@login_required_json
def user_followers(request, user_id):
    return JsonResponse({"followers": _followers_payload(user_id)})


@require_GET
@login_required_json
def user_following(request, user_id):
    return JsonResponse({"following": _following_payload(user_id)})


@require_GET
@login_required_json
def follow_status(request, user_id):
    return JsonResponse({"is_following": services.is_following(request.user, user_id)})


@require_GET
def follow_counts(request, user_id):
    return JsonResponse(services.counts(user_id))
