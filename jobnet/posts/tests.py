from datetime import datetime, timedelta, timezone as dt_timezone
from io import StringIO

from django.core.management import call_command
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from django.utils import timezone

from accounts.models import User
from applications.models import Application, ApplicationEvent
from cvs.models import CV
from follows.models import Follow
from . import ranking, services
from .models import Post, PostType

NOW = datetime(2025, 3, 20, 12, 0, tzinfo=dt_timezone.utc)


def _post(pk, author_id, post_type=PostType.FIND_CANDIDATE, age=timedelta(0)):
    return Post(id=pk, author_id=author_id, post_type=post_type, title=f"post {pk}", created_at=NOW - age)


@override_settings(JOBNET_POST_EXPIRATION_DAYS=10)
class RankingTests(SimpleTestCase):
    def test_expiration_boundary(self):
        window = timedelta(days=10)
        self.assertTrue(ranking.is_expired(PostType.FIND_CANDIDATE, NOW - window, NOW))
        self.assertFalse(ranking.is_expired(PostType.FIND_CANDIDATE, NOW - window + timedelta(seconds=1), NOW))
        self.assertTrue(ranking.is_expired(PostType.FIND_CANDIDATE, NOW - timedelta(days=11), NOW))

    def test_find_job_posts_never_expire(self):
        self.assertFalse(ranking.is_expired(PostType.FIND_JOB, NOW - timedelta(days=365), NOW))

    def test_bucket_order(self):
        posts = [
            _post(1, author_id=10, age=timedelta(days=11)),  # followed, expired
            _post(2, author_id=20, age=timedelta(days=5)),  # not followed, live
            _post(3, author_id=10, age=timedelta(days=1)),  # followed, live
            _post(4, author_id=20, age=timedelta(days=12)),  # not followed, expired
            _post(5, author_id=20, post_type=PostType.FIND_JOB, age=timedelta(days=30)),
        ]
        entries = ranking.rank(posts, following_ids=frozenset({10}), now=NOW)
        self.assertEqual([e.post.id for e in entries], [3, 2, 5, 1, 4])
        self.assertEqual([e.is_expired for e in entries], [False, False, False, True, True])

    def test_equal_timestamps_break_ties_by_id(self):
        posts = [_post(pk, author_id=1) for pk in (4, 9, 2, 7)]
        entries = ranking.rank(posts, following_ids=frozenset(), now=NOW)
        self.assertEqual([e.post.id for e in entries], [9, 7, 4, 2])

    def test_adjacent_entries_respect_sort_key(self):
        posts = [
            _post(pk, author_id=pk % 3, post_type=PostType.FIND_CANDIDATE if pk % 2 else PostType.FIND_JOB, age=timedelta(days=pk))
            for pk in range(1, 25)
        ]
        entries = ranking.rank(posts, following_ids=frozenset({1}), now=NOW)

        def key(e):
            return (e.expiration_bucket, e.follow_bucket, -e.post.created_at.timestamp(), -e.post.id)

        for a, b in zip(entries, entries[1:]):
            self.assertLessEqual(key(a), key(b))


class PostCreationTests(TestCase):
    def setUp(self):
        self.cand = User.objects.create_user(username="cand", password="pass", email="c@example.com", account_type="candidate")
        self.other = User.objects.create_user(username="cand2", password="pass", email="c2@example.com", account_type="candidate")
        self.co = User.objects.create_user(username="co", password="pass", email="co@example.com", account_type="company")
        self.cv = CV.objects.create(owner=self.cand, file="cvs/test.pdf", name="Main")
        self.other_cv = CV.objects.create(owner=self.other, file="cvs/other.pdf")

    def _create(self, username, **payload):
        self.client.login(username=username, password="pass")
        return self.client.post(reverse("posts"), payload, content_type="application/json")

    def test_candidate_find_job_with_cv(self):
        resp = self._create("cand", post_type="find_job", title="Open to work", attached_cv_id=self.cv.id)
        self.assertEqual(resp.status_code, 201)
        body = resp.json()["post"]
        self.assertEqual(body["attached_cv_id"], self.cv.id)
        self.assertFalse(body["is_expired"])

    def test_company_find_candidate(self):
        resp = self._create("co", post_type="find_candidate", title="Backend Dev", description="Django")
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["post"]["author_type"], "company")

    def test_company_cannot_post_find_job(self):
        resp = self._create("co", post_type="find_job", title="x", attached_cv_id=self.cv.id)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "INVALID_POST_TYPE")

    def test_candidate_cannot_post_find_candidate(self):
        resp = self._create("cand", post_type="find_candidate", title="x")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "INVALID_POST_TYPE")
        self.assertFalse(Post.objects.exists())

    def test_find_job_requires_cv(self):
        resp = self._create("cand", post_type="find_job", title="Open to work")
        self.assertEqual(resp.json()["code"], "MISSING_CV")

    def test_find_job_rejects_foreign_cv(self):
        resp = self._create("cand", post_type="find_job", title="Open to work", attached_cv_id=self.other_cv.id)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "INVALID_CV")

    def test_find_candidate_cannot_attach_cv(self):
        resp = self._create("co", post_type="find_candidate", title="Backend Dev", attached_cv_id=self.cv.id)
        self.assertEqual(resp.status_code, 400)

    def test_title_required(self):
        resp = self._create("co", post_type="find_candidate", title="   ")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("title", resp.json()["errors"])

    def test_anonymous_cannot_post(self):
        resp = self.client.post(reverse("posts"), {"post_type": "find_candidate", "title": "x"}, content_type="application/json")
        self.assertEqual(resp.status_code, 401)


class PostOwnershipTests(TestCase):
    def setUp(self):
        self.cand = User.objects.create_user(username="cand", password="pass", email="c@example.com", account_type="candidate")
        self.co = User.objects.create_user(username="co", password="pass", email="co@example.com", account_type="company")
        self.co2 = User.objects.create_user(username="co2", password="pass", email="co2@example.com", account_type="company")
        self.cv = CV.objects.create(owner=self.cand, file="cvs/test.pdf")
        self.job = Post.objects.create(author=self.co, post_type="find_candidate", title="Backend Dev", description="Django")
        self.seek = Post.objects.create(author=self.cand, post_type="find_job", title="Open", attached_cv=self.cv)

    def test_partial_update_keeps_other_fields(self):
        self.client.login(username="co", password="pass")
        resp = self.client.put(reverse("post_detail", args=[self.job.id]), {"title": "Senior Backend Dev"}, content_type="application/json")
        self.assertEqual(resp.status_code, 200)
        self.job.refresh_from_db()
        self.assertEqual(self.job.title, "Senior Backend Dev")
        self.assertEqual(self.job.description, "Django")
        self.assertEqual(self.job.post_type, "find_candidate")

    def test_update_by_non_owner_is_404(self):
        self.client.login(username="co2", password="pass")
        resp = self.client.put(reverse("post_detail", args=[self.job.id]), {"title": "Hijack"}, content_type="application/json")
        self.assertEqual(resp.status_code, 404)
        self.job.refresh_from_db()
        self.assertEqual(self.job.title, "Backend Dev")

    def test_find_job_cannot_drop_its_cv(self):
        self.client.login(username="cand", password="pass")
        resp = self.client.put(reverse("post_detail", args=[self.seek.id]), {"attached_cv_id": None}, content_type="application/json")
        self.assertEqual(resp.json()["code"], "MISSING_CV")

    def test_delete_by_non_owner_is_404(self):
        self.client.login(username="co2", password="pass")
        resp = self.client.delete(reverse("post_detail", args=[self.job.id]))
        self.assertEqual(resp.status_code, 404)
        self.assertTrue(Post.objects.filter(id=self.job.id).exists())

    def test_delete_removes_applications(self):
        app = Application.objects.create(post=self.job, applicant=self.cand, cv=self.cv)
        ApplicationEvent.objects.create(application=app, status="pending")
        self.client.login(username="co", password="pass")
        resp = self.client.delete(reverse("post_detail", args=[self.job.id]))
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(Application.objects.exists())
        self.assertFalse(ApplicationEvent.objects.exists())

    def test_detail_is_public(self):
        resp = self.client.get(reverse("post_detail", args=[self.job.id]))
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.json()["post"]["is_following_author"])

    def test_detail_missing_post(self):
        resp = self.client.get(reverse("post_detail", args=[9999]))
        self.assertEqual(resp.status_code, 404)


class FeedTests(TestCase):
    def setUp(self):
        self.cand = User.objects.create_user(username="cand", password="pass", email="c@example.com", account_type="candidate")
        self.co1 = User.objects.create_user(username="co1", password="pass", email="co1@example.com", account_type="company")
        self.co2 = User.objects.create_user(username="co2", password="pass", email="co2@example.com", account_type="company")
        Follow.objects.create(follower=self.cand, following=self.co1)

    def _backdate(self, post, days):
        Post.objects.filter(pk=post.pk).update(created_at=timezone.now() - timedelta(days=days))

    def test_expired_followed_post_sinks_below_live_posts(self):
        p1 = Post.objects.create(author=self.co1, post_type="find_candidate", title="Old job")
        self._backdate(p1, 11)
        p2 = Post.objects.create(author=self.co2, post_type="find_candidate", title="Fresh job")
        p3 = Post.objects.create(author=self.co1, post_type="find_candidate", title="Followed job")

        self.client.login(username="cand", password="pass")
        posts = self.client.get(reverse("posts")).json()["posts"]
        self.assertEqual([p["id"] for p in posts], [p3.id, p2.id, p1.id])
        self.assertTrue(posts[-1]["is_expired"])
        self.assertTrue(posts[0]["is_following_author"])
        self.assertFalse(posts[1]["is_following_author"])

    def test_anonymous_feed_has_no_follow_bucket(self):
        old = Post.objects.create(author=self.co1, post_type="find_candidate", title="Followed job")
        self._backdate(old, 2)
        new = Post.objects.create(author=self.co2, post_type="find_candidate", title="Other job")
        posts = self.client.get(reverse("posts")).json()["posts"]
        self.assertEqual([p["id"] for p in posts], [new.id, old.id])
        self.assertFalse(any(p["is_following_author"] for p in posts))

    def test_pages_partition_the_feed(self):
        # Equal timestamps force the id tie-break.
        created = timezone.now() - timedelta(hours=1)
        ids = []
        for i in range(7):
            post = services.create_post(
                self.co2 if i % 2 else self.co1,
                post_type="find_candidate",
                title=f"Job {i}",
                description="",
                now=created,
            )
            ids.append(post.id)

        self.client.login(username="cand", password="pass")
        seen = []
        page = 1
        while True:
            body = self.client.get(reverse("posts"), {"page": page, "limit": 3}).json()
            self.assertEqual(body["total"], 7)
            seen.extend(p["id"] for p in body["posts"])
            if not body["has_next"]:
                break
            page += 1

        self.assertEqual(page, 3)
        self.assertEqual(len(seen), len(set(seen)))
        self.assertEqual(set(seen), set(ids))
        full = [e.post.id for e in services.feed(self.cand, limit=50).entries]
        self.assertEqual(seen, full)

    def test_page_past_the_end_is_empty(self):
        Post.objects.create(author=self.co1, post_type="find_candidate", title="Only job")
        body = self.client.get(reverse("posts"), {"page": 5}).json()
        self.assertEqual(body["posts"], [])
        self.assertFalse(body["has_next"])

    def test_type_filter(self):
        cv = CV.objects.create(owner=self.cand, file="cvs/test.pdf")
        Post.objects.create(author=self.cand, post_type="find_job", title="Open", attached_cv=cv)
        Post.objects.create(author=self.co1, post_type="find_candidate", title="Job")
        posts = self.client.get(reverse("posts"), {"type": "find_job"}).json()["posts"]
        self.assertEqual([p["post_type"] for p in posts], ["find_job"])

    def test_bad_query_params(self):
        self.assertEqual(self.client.get(reverse("posts"), {"type": "gig"}).status_code, 400)
        self.assertEqual(self.client.get(reverse("posts"), {"page": "0"}).status_code, 400)
        self.assertEqual(self.client.get(reverse("posts"), {"limit": "abc"}).status_code, 400)
        self.assertEqual(self.client.get(reverse("posts"), {"limit": "500"}).status_code, 400)

    def test_user_posts(self):
        older = Post.objects.create(author=self.co1, post_type="find_candidate", title="First")
        self._backdate(older, 3)
        newer = Post.objects.create(author=self.co1, post_type="find_candidate", title="Second")
        Post.objects.create(author=self.co2, post_type="find_candidate", title="Elsewhere")

        posts = self.client.get(reverse("user_posts", args=[self.co1.id])).json()["posts"]
        self.assertEqual([p["id"] for p in posts], [newer.id, older.id])
        self.assertEqual(self.client.get(reverse("user_posts", args=[9999])).status_code, 404)


class SeedDemoDataTests(TestCase):
    def test_seed_creates_a_consistent_dataset(self):
        out = StringIO()
        call_command("seed_demo_data", companies=2, candidates=3, posts_per_company=2, stdout=out)
        self.assertIn("Seeded 2 companies, 3 candidates", out.getvalue())
        self.assertEqual(User.objects.filter(username__startswith="demo_").count(), 5)
        self.assertEqual(CV.objects.count(), 3)
        self.assertEqual(Post.objects.filter(post_type="find_job").count(), 3)
        self.assertEqual(Post.objects.filter(post_type="find_candidate").count(), 4)
        for app in Application.objects.select_related("post", "cv"):
            self.assertEqual(app.post.post_type, "find_candidate")
            self.assertEqual(app.cv.owner_id, app.applicant_id)

    def test_wipe_and_reseed(self):
        call_command("seed_demo_data", companies=1, candidates=2, stdout=StringIO())
        call_command("seed_demo_data", companies=1, candidates=2, wipe=True, stdout=StringIO())
        self.assertEqual(User.objects.filter(username__startswith="demo_").count(), 3)
        self.assertEqual(CV.objects.count(), 2)
