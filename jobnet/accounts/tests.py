from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from django.urls import reverse

from .models import User, Notification


class RegistrationTests(TestCase):
    def test_register_logs_user_in(self):
        resp = self.client.post(
            reverse("register"),
            {
                "username": "cand",
                "email": "cand@example.com",
                "password": "S3cure-Passw0rd!",
                "full_name": "Candidate One",
                "account_type": "candidate",
            },
            content_type="application/json",
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["user"]["account_type"], "candidate")
        self.assertIn("_auth_user_id", self.client.session)

        me = self.client.get(reverse("me"))
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()["user"]["username"], "cand")

    def test_register_rejects_unknown_account_type(self):
        resp = self.client.post(
            reverse("register"),
            {
                "username": "x",
                "email": "x@example.com",
                "password": "S3cure-Passw0rd!",
                "account_type": "admin",
            },
            content_type="application/json",
        )
        self.assertEqual(resp.status_code, 400)
        self.assertIn("account_type", resp.json()["errors"])
        self.assertFalse(User.objects.filter(username="x").exists())

    def test_malformed_json_is_a_validation_error(self):
        resp = self.client.post(reverse("register"), "{not json", content_type="application/json")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "VALIDATION_ERROR")


class LoginTests(TestCase):
    def setUp(self):
        User.objects.create_user(username="co", password="pass", email="co@example.com", account_type="company")

    def test_login_success(self):
        resp = self.client.post(reverse("login"), {"username": "co", "password": "pass"}, content_type="application/json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["account_type"], "company")

    def test_login_bad_password(self):
        resp = self.client.post(reverse("login"), {"username": "co", "password": "nope"}, content_type="application/json")
        self.assertEqual(resp.status_code, 401)

    def test_me_requires_authentication(self):
        resp = self.client.get(reverse("me"))
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["code"], "UNAUTHENTICATED")

    def test_logout(self):
        self.client.login(username="co", password="pass")
        resp = self.client.post(reverse("logout"))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get(reverse("me")).status_code, 401)


class ProfileTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="cand", password="pass", email="cand@example.com", account_type="candidate", full_name="Old Name"
        )

    def test_public_profile_hides_email(self):
        resp = self.client.get(reverse("user_detail", args=[self.user.id]))
        self.assertEqual(resp.status_code, 200)
        self.assertNotIn("email", resp.json()["user"])

    def test_unknown_user_is_404(self):
        resp = self.client.get(reverse("user_detail", args=[9999]))
        self.assertEqual(resp.status_code, 404)

    def test_profile_update_keeps_account_type(self):
        self.client.login(username="cand", password="pass")
        resp = self.client.patch(
            reverse("update_profile"),
            {"bio": "Python developer", "account_type": "company"},
            content_type="application/json",
        )
        self.assertEqual(resp.status_code, 200)
        self.user.refresh_from_db()
        self.assertEqual(self.user.bio, "Python developer")
        self.assertEqual(self.user.full_name, "Old Name")
        self.assertEqual(self.user.account_type, "candidate")


class NotificationTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="u1", password="pass", email="u1@example.com", account_type="candidate")
        self.other = User.objects.create_user(username="u2", password="pass", email="u2@example.com", account_type="company")
        self.n1 = Notification.objects.create(user=self.user, title="First")
        Notification.objects.create(user=self.user, title="Second")
        self.foreign = Notification.objects.create(user=self.other, title="Not yours")

    def test_list_and_mark_read(self):
        self.client.login(username="u1", password="pass")
        resp = self.client.get(reverse("notifications_list"))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["unread"], 2)

        resp = self.client.post(reverse("notification_mark_read", args=[self.n1.id]))
        self.assertEqual(resp.status_code, 200)
        self.n1.refresh_from_db()
        self.assertTrue(self.n1.is_read)

        resp = self.client.post(reverse("notifications_mark_all_read"))
        self.assertEqual(resp.json()["updated"], 1)

    def test_cannot_mark_someone_elses_notification(self):
        self.client.login(username="u1", password="pass")
        resp = self.client.post(reverse("notification_mark_read", args=[self.foreign.id]))
        self.assertEqual(resp.status_code, 404)
        self.foreign.refresh_from_db()
        self.assertFalse(self.foreign.is_read)


class UserSearchTests(TestCase):
    def setUp(self):
        self.alice = User.objects.create_user(
            username="alice", password="pass", email="alice@example.com", account_type="candidate", full_name="Alice Smith"
        )
        self.bob = User.objects.create_user(
            username="bob", password="pass", email="bob@acme.io", account_type="company", full_name="Acme Hiring"
        )
        self.carol = User.objects.create_user(
            username="carol", password="pass", email="carol@example.com", account_type="candidate", full_name="Carol Jones"
        )

    def _search(self, **params):
        resp = self.client.get(reverse("user_search"), params)
        self.assertEqual(resp.status_code, 200)
        return resp.json()

    def test_lists_everyone_ordered_by_full_name(self):
        body = self._search()
        self.assertEqual([u["id"] for u in body["users"]], [self.bob.id, self.alice.id, self.carol.id])
        self.assertEqual(body["total"], 3)
        self.assertNotIn("email", body["users"][0])

    def test_search_matches_name_or_email_case_insensitively(self):
        self.assertEqual([u["id"] for u in self._search(search="SMITH")["users"]], [self.alice.id])
        self.assertEqual([u["id"] for u in self._search(search="acme.IO")["users"]], [self.bob.id])
        self.assertEqual(self._search(search="nobody")["users"], [])

    def test_type_filter(self):
        body = self._search(type="candidate")
        self.assertEqual([u["id"] for u in body["users"]], [self.alice.id, self.carol.id])
        self.assertEqual(body["total"], 2)

    def test_pagination(self):
        first = self._search(page=1, limit=2)
        second = self._search(page=2, limit=2)
        self.assertTrue(first["has_next"])
        self.assertFalse(second["has_next"])
        self.assertEqual(first["total"], 3)
        self.assertEqual([u["id"] for u in first["users"] + second["users"]], [self.bob.id, self.alice.id, self.carol.id])

    def test_bad_parameters(self):
        self.assertEqual(self.client.get(reverse("user_search"), {"type": "admin"}).status_code, 400)
        self.assertEqual(self.client.get(reverse("user_search"), {"page": "0"}).status_code, 400)


class AvatarTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="cand", password="pass", email="c@example.com", account_type="candidate")

    def _upload(self, name="me.png", content=b"\x89PNG\r\n\x1a\n0000", content_type="image/png"):
        return self.client.post(reverse("upload_avatar"), {"avatar": SimpleUploadedFile(name, content, content_type=content_type)})

    def test_upload_sets_avatar(self):
        self.client.login(username="cand", password="pass")
        resp = self._upload()
        self.assertEqual(resp.status_code, 200)
        self.user.refresh_from_db()
        self.assertTrue(self.user.avatar.name.startswith("avatars/"))
        self.assertEqual(resp.json()["avatar_url"], self.user.avatar.url)

        profile = self.client.get(reverse("user_detail", args=[self.user.id])).json()["user"]
        self.assertEqual(profile["avatar_url"], self.user.avatar.url)

    def test_replacing_avatar_removes_old_file(self):
        self.client.login(username="cand", password="pass")
        self._upload()
        self.user.refresh_from_db()
        old_name = self.user.avatar.name
        self._upload(name="new.png")
        self.user.refresh_from_db()
        self.assertNotEqual(self.user.avatar.name, old_name)
        self.assertFalse(default_storage.exists(old_name))
        self.assertTrue(default_storage.exists(self.user.avatar.name))

    def test_rejects_non_images(self):
        self.client.login(username="cand", password="pass")
        resp = self._upload(name="cv.pdf", content=b"%PDF-1.4", content_type="application/pdf")
        self.assertEqual(resp.status_code, 400)
        self.user.refresh_from_db()
        self.assertFalse(self.user.avatar)

    @override_settings(JOBNET_AVATAR_MAX_UPLOAD_BYTES=4)
    def test_rejects_large_files(self):
        self.client.login(username="cand", password="pass")
        self.assertEqual(self._upload().status_code, 400)

    def test_missing_file(self):
        self.client.login(username="cand", password="pass")
        self.assertEqual(self.client.post(reverse("upload_avatar"), {}).status_code, 400)

    def test_requires_authentication(self):
        self.assertEqual(self._upload().status_code, 401)
