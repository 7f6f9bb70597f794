from django.conf import settings

pytest_plugins = ["mail_tracking.plugin"]


def pytest_configure():
    settings.configure(
        DEBUG=False,
        TESTING=True,
        SECRET_KEY="mail-tracking-tests",
        DATABASES={
            "default": {
                "ENGINE": "django.db.backends.sqlite3",
                "NAME": ":memory:",
            }
        },
        INSTALLED_APPS=[],
        # Real backend, nothing should ever reach it while tracking.
        EMAIL_BACKEND="django.core.mail.backends.smtp.EmailBackend",
        EMAIL_HOST="smtp.invalid",
        DEFAULT_FROM_EMAIL="Example Site <noreply@example.com>",
        ADMINS=[("Admin", "admin@example.com")],
        MANAGERS=[("Manager", "manager@example.com")],
        SERVER_EMAIL="server@example.com",
    )
