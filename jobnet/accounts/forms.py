from django import forms
from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.validators import FileExtensionValidator

User = get_user_model()


class RegistrationForm(forms.ModelForm):
    password = forms.CharField(widget=forms.PasswordInput)

    class Meta:
        model = User
        fields = ["username", "email", "full_name", "account_type", "bio"]

    def clean_password(self):
        password = self.cleaned_data["password"]
        validate_password(password)
        return password

    def save(self, commit=True):
        user = super().save(commit=False)
        user.set_password(self.cleaned_data["password"])
        if commit:
            user.save()
        return user


class LoginForm(forms.Form):
    username = forms.CharField()
    password = forms.CharField(widget=forms.PasswordInput)


class ProfileForm(forms.ModelForm):
    # account_type is fixed at registration.
    class Meta:
        model = User
        fields = ["full_name", "bio"]


class AvatarForm(forms.Form):
    avatar = forms.FileField(validators=[FileExtensionValidator(["jpg", "jpeg", "png", "gif", "webp"])])

    def clean_avatar(self):
        f = self.cleaned_data["avatar"]
        content_type = getattr(f, "content_type", None) or ""
        if not content_type.startswith("image/"):
            raise forms.ValidationError("Only image files are allowed.")
        limit = settings.JOBNET_AVATAR_MAX_UPLOAD_BYTES
        if f.size > limit:
            raise forms.ValidationError(f"File too large (max {limit // (1024 * 1024)}MB).")
        return f
