# Import models here so Alembic can discover metadata.
from app.models.user import User  # noqa: F401
from app.models.invite import Invite  # noqa: F401

# Sites, memberships, features
from app.models.site import Site  # noqa: F401
from app.models.site_membership import SiteMembership  # noqa: F401
from app.models.site_feature import SiteFeature  # noqa: F401

# Site-owned content
from app.models.page import Page  # noqa: F401
from app.models.blog_post import BlogPost  # noqa: F401
from app.models.media_file import MediaFile  # noqa: F401
from app.models.sponsor import Sponsor  # noqa: F401
from app.models.contact_form import ContactForm, ContactFormField  # noqa: F401
from app.models.contact_submission import ContactSubmission, ContactSubmissionData  # noqa: F401
from app.models.company import Company  # noqa: F401
from app.models.job_listing import JobListing  # noqa: F401
from app.models.social_media import SocialMediaChannel, SocialMediaChannelStat  # noqa: F401
