import random
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.files.base import ContentFile
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from applications import services as application_services
from applications.models import Application
from cvs.models import CV
from follows.models import Follow
from jobnet.errors import JobnetError
from posts import services as post_services
from posts.models import Post, PostType

User = get_user_model()

# Smallest file that most PDF viewers will open.
_DEMO_PDF = b"%PDF-1.4\n1 0 obj<<>>endobj\ntrailer<<>>\n%%EOF\n"

_ROLES = [
    "Backend Developer",
    "Frontend Engineer",
    "Data Analyst",
    "DevOps Engineer",
    "QA Engineer",
    "Product Designer",
    "Mobile Developer",
    "Machine Learning Engineer",
]


class Command(BaseCommand):
    help = "Seed demo data (companies, candidates, CVs, posts, follows, applications)."

    def add_arguments(self, parser):
        parser.add_argument("--prefix", type=str, default="demo")
        parser.add_argument("--companies", type=int, default=4)
        parser.add_argument("--candidates", type=int, default=8)
        parser.add_argument("--posts-per-company", type=int, default=3)
        parser.add_argument("--applications-per-candidate", type=int, default=2)
        parser.add_argument("--password", type=str, default="DemoPass123!")
        parser.add_argument("--seed", type=int, default=42)
        parser.add_argument("--wipe", action="store_true", help="Delete existing users starting with prefix before seeding.")

    def _make_user(self, username, account_type, full_name, password):
        user, _ = User.objects.get_or_create(
            username=username,
            defaults={
                "email": f"{username}@example.com",
                "account_type": account_type,
                "full_name": full_name,
            },
        )
        # Keep demo credentials predictable.
        user.full_name = full_name
        user.set_password(password)
        user.save()
        return user

    @transaction.atomic
    def handle(self, *args, **opts):
        rnd = random.Random(opts["seed"])
        prefix = (opts["prefix"] or "demo").strip().lower()
        companies_n = max(1, int(opts["companies"]))
        candidates_n = max(1, int(opts["candidates"]))
        posts_per_company = max(1, int(opts["posts_per_company"]))
        apps_per_candidate = max(0, int(opts["applications_per_candidate"]))
        now = timezone.now()

        if opts["wipe"]:
            # CVs are protected by applications and posts, so those go first.
            users = User.objects.filter(username__startswith=f"{prefix}_")
            Application.objects.filter(applicant__in=users).delete()
            Post.objects.filter(author__in=users).delete()
            CV.objects.filter(owner__in=users).delete()
            deleted, _ = users.delete()
            self.stdout.write(f"Wiped {deleted} rows for prefix '{prefix}'.")

        companies = [
            self._make_user(f"{prefix}_company{i}", User.AccountType.COMPANY, f"Company {i}", opts["password"])
            for i in range(1, companies_n + 1)
        ]
        candidates = [
            self._make_user(f"{prefix}_candidate{i}", User.AccountType.CANDIDATE, f"Candidate {i}", opts["password"])
            for i in range(1, candidates_n + 1)
        ]

        cvs = {}
        for candidate in candidates:
            cv = CV.objects.for_owner(candidate).first()
            if cv is None:
                cv = CV(owner=candidate, name=f"{candidate.full_name} CV")
                cv.file.save(f"{candidate.username}.pdf", ContentFile(_DEMO_PDF), save=True)
            cvs[candidate.id] = cv
            post_services.create_post(
                candidate,
                post_type=PostType.FIND_JOB,
                title=f"{candidate.full_name} is open to work",
                description=f"Looking for a {rnd.choice(_ROLES)} role.",
                cv_id=cv.id,
                now=now - timedelta(days=rnd.randint(0, 20)),
            )

        open_posts = []
        for company in companies:
            for _ in range(posts_per_company):
                # Some posts land past the expiration window on purpose.
                post = post_services.create_post(
                    company,
                    post_type=PostType.FIND_CANDIDATE,
                    title=f"{company.full_name} is hiring: {rnd.choice(_ROLES)}",
                    description="Join our team.",
                    now=now - timedelta(days=rnd.randint(0, 14), hours=rnd.randint(0, 23)),
                )
                if not post.is_expired(now):
                    open_posts.append(post)

        follows_created = 0
        for candidate in candidates:
            for company in rnd.sample(companies, k=min(2, len(companies))):
                _, created = Follow.objects.get_or_create(follower=candidate, following=company)
                follows_created += int(created)

        applications_created = 0
        for candidate in candidates:
            for post in rnd.sample(open_posts, k=min(apps_per_candidate, len(open_posts))):
                try:
                    application_services.apply(candidate, post.id, cvs[candidate.id].id, now=now)
                except JobnetError as exc:
                    self.stdout.write(f"Skipped application {candidate.username} -> {post.id}: {exc.message}")
                    continue
                applications_created += 1

        self.stdout.write(
            self.style.SUCCESS(
                f"Seeded {len(companies)} companies, {len(candidates)} candidates, "
                f"{len(open_posts)} open job posts, {follows_created} follows, "
                f"{applications_created} applications."
            )
        )
