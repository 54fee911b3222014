from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_http_methods

from accounts.decorators import get_actor, get_viewer
from jobnet.http import id_field, int_param, json_body

from . import services
from .serializers import serialize_entry


# -----------------------------
# Feed + create
# -----------------------------
@require_http_methods(["GET", "POST"])
def posts_collection(request):
    if request.method == "POST":
        return _create_post(request)

    page = int_param(request.GET.get("page"), name="page", default=1)
    limit = int_param(
        request.GET.get("limit"),
        name="limit",
        default=settings.JOBNET_FEED_DEFAULT_LIMIT,
        maximum=settings.JOBNET_FEED_MAX_LIMIT,
    )
    post_type = (request.GET.get("type") or "").strip() or None

    result = services.feed(get_viewer(request), post_type=post_type, page=page, limit=limit)
    return JsonResponse(
        {
            "posts": [serialize_entry(e) for e in result.entries],
            "page": result.page,
            "limit": result.limit,
            "total": result.total,
            "has_next": result.has_next,
        }
    )


def _create_post(request):
    actor = get_actor(request)
    data = json_body(request)
    post = services.create_post(
        actor,
        post_type=data.get("post_type"),
        title=data.get("title"),
        description=data.get("description"),
        cv_id=id_field(data, "attached_cv_id", required=False),
    )
    entry = services.get_post(post.id, actor)
    return JsonResponse({"post": serialize_entry(entry)}, status=201)


@require_GET
def user_posts(request, user_id):
    post_type = (request.GET.get("type") or "").strip() or None
    entries = services.user_posts(user_id, get_viewer(request), post_type=post_type)
    return JsonResponse({"posts": [serialize_entry(e) for e in entries]})


# -----------------------------
# Single post
# -----------------------------
@require_http_methods(["GET", "PUT", "DELETE"])
def post_detail(request, post_id):
    if request.method == "GET":
        entry = services.get_post(post_id, get_viewer(request))
        return JsonResponse({"post": serialize_entry(entry)})

    actor = get_actor(request)
    if request.method == "DELETE":
        services.delete_post(post_id, actor)
        return JsonResponse({"message": "Post deleted successfully"})

    data = json_body(request)
    fields = {k: data[k] for k in ("title", "description") if k in data}
    if "attached_cv_id" in data:
        fields["attached_cv_id"] = id_field(data, "attached_cv_id", required=False)
    post = services.update_post(post_id, actor, fields)
    return JsonResponse({"post": serialize_entry(services.get_post(post.id, actor))})
