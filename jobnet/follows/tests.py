from datetime import timedelta
from unittest import mock

from django.db import IntegrityError, transaction
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from accounts.models import User
from jobnet.errors import AlreadyFollowingError
from . import services
from .models import Follow


class FollowTests(TestCase):
    def setUp(self):
        self.cand = User.objects.create_user(username="c1", password="pass", email="c1@example.com", account_type="candidate")
        self.co = User.objects.create_user(username="co1", password="pass", email="co1@example.com", account_type="company")
        self.co2 = User.objects.create_user(username="co2", password="pass", email="co2@example.com", account_type="company")

    def test_follow_and_unfollow(self):
        self.client.login(username="c1", password="pass")
        resp = self.client.post(reverse("follow_user", args=[self.co.id]))
        self.assertEqual(resp.status_code, 201)
        self.assertTrue(services.is_following(self.cand, self.co.id))

        resp = self.client.get(reverse("follow_status", args=[self.co.id]))
        self.assertTrue(resp.json()["is_following"])

        resp = self.client.delete(reverse("follow_user", args=[self.co.id]))
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(Follow.objects.exists())

        resp = self.client.delete(reverse("follow_user", args=[self.co.id]))
        self.assertEqual(resp.status_code, 404)

    def test_cannot_follow_self(self):
        self.client.login(username="c1", password="pass")
        resp = self.client.post(reverse("follow_user", args=[self.cand.id]))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "SELF_FOLLOW")

    def test_follow_unknown_user(self):
        self.client.login(username="c1", password="pass")
        resp = self.client.post(reverse("follow_user", args=[9999]))
        self.assertEqual(resp.status_code, 404)

    def test_duplicate_follow_is_rejected(self):
        self.client.login(username="c1", password="pass")
        self.client.post(reverse("follow_user", args=[self.co.id]))
        resp = self.client.post(reverse("follow_user", args=[self.co.id]))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "ALREADY_FOLLOWING")
        self.assertEqual(Follow.objects.count(), 1)

    def test_racing_duplicate_hits_unique_constraint(self):
        services.follow(self.cand, self.co.id)
        with mock.patch("follows.services.is_following", return_value=False):
            with self.assertRaises(AlreadyFollowingError):
                services.follow(self.cand, self.co.id)
        self.assertEqual(Follow.objects.count(), 1)

    def test_self_follow_blocked_by_database(self):
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Follow.objects.create(follower=self.cand, following=self.cand)

    def test_follow_requires_authentication(self):
        resp = self.client.post(reverse("follow_user", args=[self.co.id]))
        self.assertEqual(resp.status_code, 401)

    def test_listings_are_most_recent_first(self):
        old = Follow.objects.create(follower=self.cand, following=self.co)
        Follow.objects.filter(pk=old.pk).update(created_at=timezone.now() - timedelta(days=3))
        Follow.objects.create(follower=self.cand, following=self.co2)
        Follow.objects.create(follower=self.co2, following=self.cand)

        self.client.login(username="c1", password="pass")
        following = self.client.get(reverse("my_following")).json()["following"]
        self.assertEqual([u["id"] for u in following], [self.co2.id, self.co.id])

        followers = self.client.get(reverse("user_followers", args=[self.co.id])).json()["followers"]
        self.assertEqual([u["id"] for u in followers], [self.cand.id])

        mine = self.client.get(reverse("my_followers")).json()["followers"]
        self.assertEqual([u["id"] for u in mine], [self.co2.id])

    def test_counts_are_public(self):
        Follow.objects.create(follower=self.cand, following=self.co)
        Follow.objects.create(follower=self.co2, following=self.co)
        resp = self.client.get(reverse("follow_counts", args=[self.co.id]))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"followers": 2, "following": 0})

    def test_following_ids_snapshot(self):
        Follow.objects.create(follower=self.cand, following=self.co)
        self.assertEqual(services.following_ids(self.cand), frozenset({self.co.id}))
        self.assertEqual(services.following_ids(None), frozenset())
