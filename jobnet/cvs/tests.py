from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from django.urls import reverse

from accounts.models import User
from applications.models import Application
from posts.models import Post
from . import services
from .models import CV

PDF_BYTES = b"%PDF-1.4\n1 0 obj<<>>endobj\ntrailer<<>>\n%%EOF\n"


class CVUploadTests(TestCase):
    def setUp(self):
        self.cand = User.objects.create_user(username="cand", password="pass", email="c@example.com", account_type="candidate")
        self.co = User.objects.create_user(username="co", password="pass", email="co@example.com", account_type="company")

    def test_candidate_uploads_pdf(self):
        self.client.login(username="cand", password="pass")
        upload = SimpleUploadedFile("resume.pdf", PDF_BYTES, content_type="application/pdf")
        resp = self.client.post(reverse("cv_upload"), {"cv": upload, "name": "  Main CV  "})
        self.assertEqual(resp.status_code, 201)
        cv = CV.objects.get(owner=self.cand)
        self.assertEqual(cv.name, "Main CV")
        self.assertTrue(cv.is_active)
        self.assertEqual(resp.json()["cv"]["id"], cv.id)

        listing = self.client.get(reverse("cv_list")).json()["cvs"]
        self.assertEqual([c["id"] for c in listing], [cv.id])

    def test_non_pdf_is_rejected(self):
        self.client.login(username="cand", password="pass")
        upload = SimpleUploadedFile("resume.txt", b"hello", content_type="text/plain")
        resp = self.client.post(reverse("cv_upload"), {"cv": upload})
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(CV.objects.exists())

    def test_missing_file(self):
        self.client.login(username="cand", password="pass")
        resp = self.client.post(reverse("cv_upload"), {})
        self.assertEqual(resp.status_code, 400)

    def test_company_cannot_upload(self):
        self.client.login(username="co", password="pass")
        upload = SimpleUploadedFile("resume.pdf", PDF_BYTES, content_type="application/pdf")
        resp = self.client.post(reverse("cv_upload"), {"cv": upload})
        self.assertEqual(resp.status_code, 403)
        self.assertFalse(CV.objects.exists())


class CVManagementTests(TestCase):
    def setUp(self):
        self.cand = User.objects.create_user(username="cand", password="pass", email="c@example.com", account_type="candidate")
        self.other = User.objects.create_user(username="cand2", password="pass", email="c2@example.com", account_type="candidate")
        self.co = User.objects.create_user(username="co", password="pass", email="co@example.com", account_type="company")
        self.cv = CV.objects.create(owner=self.cand, file="cvs/test.pdf", name="Main")
        self.client.login(username="cand", password="pass")

    def test_toggle_flips_active_flag(self):
        resp = self.client.patch(reverse("cv_toggle", args=[self.cv.id]))
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.json()["cv"]["is_active"])
        self.assertFalse(services.is_usable(self.cv.id, self.cand))

        self.client.patch(reverse("cv_toggle", args=[self.cv.id]))
        self.assertTrue(services.is_usable(self.cv.id, self.cand))

    def test_usable_only_by_owner(self):
        self.assertTrue(services.is_usable(self.cv.id, self.cand))
        self.assertFalse(services.is_usable(self.cv.id, self.other))
        self.assertFalse(services.is_usable(None, self.cand))
        self.assertFalse(services.is_usable(9999, self.cand))

    def test_toggle_someone_elses_cv(self):
        self.client.login(username="cand2", password="pass")
        resp = self.client.patch(reverse("cv_toggle", args=[self.cv.id]))
        self.assertEqual(resp.status_code, 404)

    def test_rename(self):
        resp = self.client.patch(reverse("cv_rename", args=[self.cv.id]), {"name": "Backend CV"}, content_type="application/json")
        self.assertEqual(resp.status_code, 200)
        self.cv.refresh_from_db()
        self.assertEqual(self.cv.name, "Backend CV")

    def test_rename_requires_a_name(self):
        resp = self.client.patch(reverse("cv_rename", args=[self.cv.id]), {"name": "   "}, content_type="application/json")
        self.assertEqual(resp.status_code, 400)
        self.cv.refresh_from_db()
        self.assertEqual(self.cv.name, "Main")

    def test_delete_unused_cv(self):
        resp = self.client.delete(reverse("cv_delete", args=[self.cv.id]))
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(CV.objects.exists())

    def test_delete_blocked_while_attached_to_post(self):
        Post.objects.create(author=self.cand, post_type="find_job", title="Open to work", attached_cv=self.cv)
        resp = self.client.delete(reverse("cv_delete", args=[self.cv.id]))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "CV_IN_USE")
        self.assertTrue(CV.objects.filter(id=self.cv.id).exists())

    def test_delete_blocked_while_used_by_application(self):
        post = Post.objects.create(author=self.co, post_type="find_candidate", title="Backend Dev")
        Application.objects.create(post=post, applicant=self.cand, cv=self.cv)
        resp = self.client.delete(reverse("cv_delete", args=[self.cv.id]))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "CV_IN_USE")

    def test_deleting_the_account_removes_referenced_cvs(self):
        post = Post.objects.create(author=self.co, post_type="find_candidate", title="Backend Dev")
        Application.objects.create(post=post, applicant=self.cand, cv=self.cv)
        Post.objects.create(author=self.cand, post_type="find_job", title="Open to work", attached_cv=self.cv)
        self.cand.delete()
        self.assertFalse(CV.objects.exists())
        self.assertFalse(Application.objects.exists())
        self.assertEqual(list(Post.objects.values_list("id", flat=True)), [post.id])

    def test_file_hidden_from_strangers(self):
        self.client.logout()
        resp = self.client.get(reverse("cv_file", args=[self.cv.id]))
        self.assertEqual(resp.status_code, 404)

    def test_file_visible_to_company_that_received_it(self):
        post = Post.objects.create(author=self.co, post_type="find_candidate", title="Backend Dev")
        Application.objects.create(post=post, applicant=self.cand, cv=self.cv)
        self.assertTrue(services.can_view_file(self.cv, self.co))
        self.assertFalse(services.can_view_file(self.cv, self.other))
