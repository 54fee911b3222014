from django import forms
from django.conf import settings
from django.core.validators import FileExtensionValidator

from .models import CV


class CVUploadForm(forms.ModelForm):
    file = forms.FileField(validators=[FileExtensionValidator(["pdf"])])

    class Meta:
        model = CV
        fields = ["file", "name"]

    def clean_file(self):
        f = self.cleaned_data["file"]
        content_type = getattr(f, "content_type", None)
        if content_type and content_type != "application/pdf":
            raise forms.ValidationError("Only PDF files are allowed.")
        limit = settings.JOBNET_CV_MAX_UPLOAD_BYTES
        if f.size > limit:
            raise forms.ValidationError(f"File too large (max {limit // (1024 * 1024)}MB).")
        return f

    def clean_name(self):
        return (self.cleaned_data.get("name") or "").strip()


class CVRenameForm(forms.Form):
    name = forms.CharField(max_length=150)

    def clean_name(self):
        name = (self.cleaned_data.get("name") or "").strip()
        if not name:
            raise forms.ValidationError("Name is required.")
        return name
