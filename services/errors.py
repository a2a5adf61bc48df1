"""Domain errors raised by the blog content manager.

Each error carries the HTTP status the API maps it to and a short ``kind`` tag
that clients can switch on (e.g. redirect to login on ``unauthenticated``).
"""


class BlogError(Exception):
    status_code = 500
    kind = "blog_error"
    default_detail = "Blog operation failed"

    def __init__(self, detail: str = ""):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthenticated(BlogError):
    status_code = 401
    kind = "unauthenticated"
    default_detail = "Not authenticated"


class Unauthorized(BlogError):
    status_code = 403
    kind = "unauthorized"
    default_detail = "Admin access required"


class ConfigurationError(BlogError):
    status_code = 500
    kind = "configuration_error"
    default_detail = "Server misconfigured: ADMIN_EMAIL is not set"


class NotFound(BlogError):
    status_code = 404
    kind = "not_found"
    default_detail = "Blog post not found"


class SlugGenerationFailed(BlogError):
    status_code = 409
    kind = "slug_generation_failed"
    default_detail = "Failed to generate a unique slug"


class InvalidInput(BlogError):
    status_code = 422
    kind = "invalid_input"
    default_detail = "Invalid blog post"
