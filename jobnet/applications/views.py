from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST, require_http_methods

from accounts.decorators import company_required, get_actor, login_required_json
from jobnet.http import id_field, json_body

from . import services
from .serializers import serialize_application, serialize_event


@require_POST
def apply(request):
    actor = get_actor(request)
    data = json_body(request)
    application = services.apply(
        actor,
        id_field(data, "post_id", required=False),
        id_field(data, "cv_id", required=False),
    )
    return JsonResponse(
        {
            "message": "Application submitted successfully",
            "application": serialize_application(application),
        },
        status=201,
    )


@require_GET
@login_required_json
def my_applications(request):
    apps = services.list_mine(request.user)
    return JsonResponse({"applications": [serialize_application(a) for a in apps]})


@require_GET
@company_required
def received_applications(request):
    apps = services.list_received(request.user)
    return JsonResponse({"applications": [serialize_application(a, for_company=True) for a in apps]})


@require_GET
@login_required_json
def post_applications(request, post_id):
    apps = services.list_for_post(post_id, request.user)
    return JsonResponse({"applications": [serialize_application(a, for_company=True) for a in apps]})


@require_GET
@login_required_json
def application_detail(request, application_id):
    application = services.get_application(application_id, request.user)
    is_owner = application.post.author_id == request.user.id
    payload = serialize_application(application, for_company=is_owner)
    payload["events"] = [serialize_event(e) for e in application.events.all()]
    return JsonResponse({"application": payload})


@require_http_methods(["PATCH"])
def update_status(request, application_id):
    actor = get_actor(request)
    status = json_body(request).get("status")
    application = services.update_status(application_id, actor, status)
    return JsonResponse(
        {
            "message": "Application status updated",
            "application": serialize_application(application, for_company=True),
        }
    )
