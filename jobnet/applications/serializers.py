def serialize_application(application, *, for_company: bool = False) -> dict:
    post = application.post
    cv = application.cv
    data = {
        "id": application.id,
        "post_id": application.post_id,
        "applicant_id": application.applicant_id,
        "cv_id": application.cv_id,
        "status": application.status,
        "is_terminal": application.is_terminal,
        "created_at": application.created_at.isoformat(),
        "updated_at": application.updated_at.isoformat(),
        "post_title": post.title,
        "post_description": post.description,
        "cv_file_url": cv.file.url if cv.file else None,
    }
    if for_company:
        applicant = application.applicant
        data.update(
            {
                "applicant_name": applicant.display_name(),
                "applicant_email": applicant.email,
                "applicant_bio": applicant.bio,
            }
        )
    else:
        data["company_name"] = post.author.display_name()
    return data


def serialize_event(event) -> dict:
    return {
        "status": event.status,
        "note": event.note,
        "actor_id": event.actor_id,
        "created_at": event.created_at.isoformat(),
    }
