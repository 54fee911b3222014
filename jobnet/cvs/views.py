import logging

from django.http import FileResponse, JsonResponse
from django.views.decorators.http import require_GET, require_POST, require_http_methods

from accounts.decorators import candidate_required, get_actor, get_viewer, login_required_json
from jobnet.errors import NotFoundError, ValidationError
from jobnet.http import form_errors, json_body

from . import services
from .forms import CVRenameForm, CVUploadForm
from .models import CV

logger = logging.getLogger(__name__)


def serialize_cv(cv: CV) -> dict:
    return {
        "id": cv.id,
        "user_id": cv.owner_id,
        "name": cv.display_name(),
        "file_url": cv.file.url if cv.file else None,
        "is_active": cv.is_active,
        "created_at": cv.created_at.isoformat(),
    }


@require_GET
@login_required_json
def cv_list(request):
    cvs = CV.objects.for_owner(request.user).recent()
    return JsonResponse({"cvs": [serialize_cv(cv) for cv in cvs]})


@require_POST
@candidate_required
def cv_upload(request):
    if "cv" not in request.FILES:
        raise ValidationError("No file uploaded")
    form = CVUploadForm(request.POST, {"file": request.FILES["cv"]})
    if not form.is_valid():
        logger.warning("CV upload failed: user=%s errors=%s", request.user.username, form.errors.as_json())
        raise ValidationError("CV upload failed", detail=form_errors(form))
    cv = services.upload(request.user, form)
    return JsonResponse({"message": "CV uploaded successfully", "cv": serialize_cv(cv)}, status=201)


@require_http_methods(["PATCH"])
def cv_toggle(request, cv_id):
    cv = services.toggle(cv_id, get_actor(request))
    return JsonResponse({"cv": serialize_cv(cv)})


@require_http_methods(["PATCH"])
def cv_rename(request, cv_id):
    actor = get_actor(request)
    form = CVRenameForm(json_body(request))
    if not form.is_valid():
        raise ValidationError("Invalid CV name", detail=form_errors(form))
    cv = services.rename(cv_id, actor, form.cleaned_data["name"])
    return JsonResponse({"message": "CV renamed successfully", "cv": serialize_cv(cv)})


@require_http_methods(["DELETE"])
def cv_delete(request, cv_id):
    services.delete(cv_id, get_actor(request))
    return JsonResponse({"message": "CV deleted successfully"})


@require_GET
def cv_file(request, cv_id):
    cv = CV.objects.filter(id=cv_id).first()
    if cv is None or not services.can_view_file(cv, get_viewer(request)):
        raise NotFoundError("CV not found")
    if not cv.file or not cv.file.storage.exists(cv.file.name):
        raise NotFoundError("File not found")
    return FileResponse(cv.file.open("rb"), content_type="application/pdf")
