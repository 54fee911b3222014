from datetime import timedelta
from unittest import mock

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from accounts.models import Notification, User
from cvs.models import CV
from jobnet.errors import DuplicateApplicationError, ExpiredPostError, InvalidStatusError
from posts.models import Post
from . import services
from .models import TRANSITIONS, Application, ApplicationEvent, ApplicationStatus, can_transition


class ApplicationFixtureMixin:
    def setUp(self):
        self.cand = User.objects.create_user(username="cand", password="pass", email="c@example.com", account_type="candidate")
        self.cand2 = User.objects.create_user(username="cand2", password="pass", email="c2@example.com", account_type="candidate")
        self.co = User.objects.create_user(username="co", password="pass", email="co@example.com", account_type="company")
        self.co2 = User.objects.create_user(username="co2", password="pass", email="co2@example.com", account_type="company")
        self.cv = CV.objects.create(owner=self.cand, file="cvs/cand.pdf", name="Main")
        self.cv2 = CV.objects.create(owner=self.cand2, file="cvs/cand2.pdf")
        self.job = Post.objects.create(author=self.co, post_type="find_candidate", title="Backend Dev")
        self.seek = Post.objects.create(author=self.cand, post_type="find_job", title="Open to work", attached_cv=self.cv)

    def _apply(self, post_id, cv_id, username="cand"):
        self.client.login(username=username, password="pass")
        return self.client.post(reverse("apply"), {"post_id": post_id, "cv_id": cv_id}, content_type="application/json")


class ApplyTests(ApplicationFixtureMixin, TestCase):
    def test_apply_creates_pending_application(self):
        resp = self._apply(self.job.id, self.cv.id)
        self.assertEqual(resp.status_code, 201)
        body = resp.json()["application"]
        self.assertEqual(body["status"], "pending")
        self.assertEqual(body["company_name"], self.co.display_name())

        app = Application.objects.get()
        self.assertEqual(app.cv_id, self.cv.id)
        self.assertEqual(list(app.events.values_list("status", flat=True)), ["pending"])
        self.assertEqual(Notification.objects.filter(user=self.co).count(), 1)

    def test_second_apply_is_rejected(self):
        self._apply(self.job.id, self.cv.id)
        resp = self._apply(self.job.id, self.cv.id)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "DUPLICATE_APPLICATION")
        self.assertEqual(Application.objects.count(), 1)

    def test_racing_duplicate_hits_unique_constraint(self):
        services.apply(self.cand, self.job.id, self.cv.id)
        with mock.patch("applications.services._already_applied", return_value=False):
            with self.assertRaises(DuplicateApplicationError):
                services.apply(self.cand, self.job.id, self.cv.id)
        self.assertEqual(Application.objects.count(), 1)
        self.assertEqual(ApplicationEvent.objects.count(), 1)

    def test_company_cannot_apply(self):
        resp = self.client.post(reverse("apply"), {}, content_type="application/json")
        self.assertEqual(resp.status_code, 401)

        resp = self._apply(self.job.id, None, username="co2")
        self.assertEqual(resp.status_code, 403)

    def test_cannot_apply_to_find_job_post(self):
        resp = self._apply(self.seek.id, self.cv.id, username="cand2")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "INVALID_POST_TYPE")

    def test_unknown_post(self):
        resp = self._apply(9999, self.cv.id)
        self.assertEqual(resp.status_code, 404)

    def test_expired_post_rejects_applications(self):
        Post.objects.filter(pk=self.job.pk).update(created_at=timezone.now() - timedelta(days=11))
        resp = self._apply(self.job.id, self.cv.id)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "POST_EXPIRED")
        self.assertFalse(Application.objects.exists())

    def test_expiry_boundary(self):
        created = self.job.created_at
        services.apply(self.cand2, self.job.id, self.cv2.id, now=created + timedelta(days=9, hours=23))
        with self.assertRaises(ExpiredPostError):
            services.apply(self.cand, self.job.id, self.cv.id, now=created + timedelta(days=10))

    def test_cv_must_be_active_and_owned(self):
        resp = self._apply(self.job.id, self.cv2.id)
        self.assertEqual(resp.json()["code"], "INVALID_CV")

        CV.objects.filter(pk=self.cv.pk).update(is_active=False)
        resp = self._apply(self.job.id, self.cv.id)
        self.assertEqual(resp.json()["code"], "INVALID_CV")

        resp = self._apply(self.job.id, None)
        self.assertEqual(resp.json()["code"], "INVALID_CV")
        self.assertFalse(Application.objects.exists())

    def test_non_integer_ids(self):
        resp = self._apply("abc", self.cv.id)
        self.assertEqual(resp.status_code, 400)

    def test_missing_post_id_is_a_validation_error(self):
        resp = self._apply(None, self.cv.id)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "VALIDATION_ERROR")
        self.assertIn("post_id", resp.json()["errors"])

        # Role is checked before the body.
        self.assertEqual(self._apply(None, None, username="co").status_code, 403)


class StatusTransitionTests(ApplicationFixtureMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.app = services.apply(self.cand, self.job.id, self.cv.id)

    def _set_status(self, status, username="co"):
        self.client.login(username=username, password="pass")
        return self.client.patch(
            reverse("update_application_status", args=[self.app.id]),
            {"status": status},
            content_type="application/json",
        )

    def test_transition_table(self):
        for current in ApplicationStatus.values:
            for new in ApplicationStatus.values:
                with self.subTest(current=current, new=new):
                    self.assertEqual(can_transition(current, new), new in TRANSITIONS[current])
        self.assertFalse(can_transition("pending", "pending"))
        self.assertFalse(can_transition("accepted", "reviewed"))

    def test_pending_to_reviewed_to_accepted(self):
        resp = self._set_status("reviewed")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["application"]["status"], "reviewed")

        resp = self._set_status("accepted")
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["application"]["is_terminal"])

        self.app.refresh_from_db()
        self.assertEqual(self.app.status, "accepted")
        self.assertEqual(
            list(self.app.events.values_list("status", flat=True)),
            ["pending", "reviewed", "accepted"],
        )
        self.assertEqual(Notification.objects.filter(user=self.cand).count(), 2)

    def test_pending_to_rejected(self):
        self.assertEqual(self._set_status("rejected").status_code, 200)

    def test_accepted_cannot_go_back_to_reviewed(self):
        self._set_status("accepted")
        resp = self._set_status("reviewed")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "INVALID_STATUS")
        self.app.refresh_from_db()
        self.assertEqual(self.app.status, "accepted")

    def test_rejected_is_terminal(self):
        self._set_status("rejected")
        for status in ("pending", "reviewed", "accepted"):
            with self.subTest(status=status):
                self.assertEqual(self._set_status(status).status_code, 400)

    def test_same_status_is_rejected(self):
        resp = self._set_status("pending")
        self.assertEqual(resp.json()["code"], "INVALID_STATUS")
        self.assertEqual(self.app.events.count(), 1)

    def test_unknown_status(self):
        resp = self._set_status("hired")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "INVALID_STATUS")

    def test_only_post_owner_can_change_status(self):
        self.assertEqual(self._set_status("accepted", username="co2").status_code, 404)
        self.assertEqual(self._set_status("accepted", username="cand").status_code, 404)
        self.app.refresh_from_db()
        self.assertEqual(self.app.status, "pending")

    def test_status_moved_by_another_request(self):
        def moved_meanwhile(current, new):
            Application.objects.filter(pk=self.app.pk).update(status=ApplicationStatus.REJECTED)
            return can_transition(current, new)

        with mock.patch("applications.services.can_transition", side_effect=moved_meanwhile):
            with self.assertRaises(InvalidStatusError):
                services.update_status(self.app.id, self.co, "accepted")

        self.app.refresh_from_db()
        self.assertEqual(self.app.status, "rejected")
        self.assertEqual(self.app.events.count(), 1)
        self.assertFalse(Notification.objects.filter(user=self.cand).exists())

    def test_anonymous(self):
        resp = self.client.patch(
            reverse("update_application_status", args=[self.app.id]),
            {"status": "accepted"},
            content_type="application/json",
        )
        self.assertEqual(resp.status_code, 401)


class ApplicationListingTests(ApplicationFixtureMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.app = services.apply(self.cand, self.job.id, self.cv.id)

    def test_my_applications(self):
        self.client.login(username="cand", password="pass")
        apps = self.client.get(reverse("my_applications")).json()["applications"]
        self.assertEqual([a["id"] for a in apps], [self.app.id])
        self.assertNotIn("applicant_email", apps[0])

    def test_received_applications(self):
        self.client.login(username="co", password="pass")
        apps = self.client.get(reverse("received_applications")).json()["applications"]
        self.assertEqual(apps[0]["applicant_email"], "c@example.com")

        self.client.login(username="co2", password="pass")
        self.assertEqual(self.client.get(reverse("received_applications")).json()["applications"], [])

    def test_received_is_company_only(self):
        self.client.login(username="cand", password="pass")
        self.assertEqual(self.client.get(reverse("received_applications")).status_code, 403)

    def test_post_applications_owner_only(self):
        self.client.login(username="co", password="pass")
        resp = self.client.get(reverse("post_applications", args=[self.job.id]))
        self.assertEqual(len(resp.json()["applications"]), 1)

        self.client.login(username="co2", password="pass")
        self.assertEqual(self.client.get(reverse("post_applications", args=[self.job.id])).status_code, 404)

    def test_detail_visible_to_both_parties(self):
        for username in ("cand", "co"):
            with self.subTest(username=username):
                self.client.login(username=username, password="pass")
                resp = self.client.get(reverse("application_detail", args=[self.app.id]))
                self.assertEqual(resp.status_code, 200)
                self.assertEqual([e["status"] for e in resp.json()["application"]["events"]], ["pending"])

        self.client.login(username="cand2", password="pass")
        self.assertEqual(self.client.get(reverse("application_detail", args=[self.app.id])).status_code, 404)

    def test_listings_are_newest_first_with_id_tie_break(self):
        job2 = Post.objects.create(author=self.co, post_type="find_candidate", title="Frontend Dev")
        second = services.apply(self.cand2, self.job.id, self.cv2.id)
        third = services.apply(self.cand, job2.id, self.cv.id)
        base = timezone.now() - timedelta(hours=2)
        Application.objects.filter(pk__in=[second.pk, third.pk]).update(created_at=base)
        Application.objects.filter(pk=self.app.pk).update(created_at=base + timedelta(hours=1))

        self.assertEqual([a.id for a in services.list_received(self.co)], [self.app.id, third.id, second.id])
        self.assertEqual([a.id for a in services.list_for_post(self.job.id, self.co)], [self.app.id, second.id])
        self.assertEqual([a.id for a in services.list_mine(self.cand)], [self.app.id, third.id])

        self.client.login(username="co", password="pass")
        apps = self.client.get(reverse("received_applications")).json()["applications"]
        self.assertEqual([a["id"] for a in apps], [self.app.id, third.id, second.id])
