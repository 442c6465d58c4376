# backend/app/core/features.py
"""
Feature catalogue for sites and the default resources some features seed.
"""

from __future__ import annotations

import enum
import json
from typing import Any


class SiteFeatureName(str, enum.Enum):
    PAGES = "PAGES"
    BLOG_POSTS = "BLOG_POSTS"
    MEDIA_FILES = "MEDIA_FILES"
    EMAIL_MANAGEMENT = "EMAIL_MANAGEMENT"
    CONTACT_MANAGEMENT = "CONTACT_MANAGEMENT"
    SPONSORS = "SPONSORS"
    ONLINE_STORE = "ONLINE_STORE"
    NEWSLETTER = "NEWSLETTER"
    ANALYTICS = "ANALYTICS"
    SEO_TOOLS = "SEO_TOOLS"
    SOCIAL_MEDIA_INTEGRATION = "SOCIAL_MEDIA_INTEGRATION"
    MULTI_LANGUAGE = "MULTI_LANGUAGE"
    CUSTOM_FORMS = "CUSTOM_FORMS"
    MEMBER_AREA = "MEMBER_AREA"
    EVENT_MANAGEMENT = "EVENT_MANAGEMENT"
    JOB_BOARD = "JOB_BOARD"


# value -> (label, description)
FEATURE_DEFINITIONS: dict[SiteFeatureName, tuple[str, str]] = {
    SiteFeatureName.PAGES: ("Pages", "Create and manage static pages"),
    SiteFeatureName.BLOG_POSTS: ("Blog Posts", "Publish and manage blog content"),
    SiteFeatureName.MEDIA_FILES: ("Media Files", "Upload and manage media files"),
    SiteFeatureName.EMAIL_MANAGEMENT: ("Email Management", "Manage email campaigns and templates"),
    SiteFeatureName.CONTACT_MANAGEMENT: ("Contact Management", "Manage contact forms and inquiries"),
    SiteFeatureName.SPONSORS: ("Sponsors", "Manage sponsor relationships and content"),
    SiteFeatureName.ONLINE_STORE: ("Online Store", "E-commerce functionality"),
    SiteFeatureName.NEWSLETTER: ("Newsletter", "Newsletter subscription and management"),
    SiteFeatureName.ANALYTICS: ("Analytics", "Site analytics and reporting"),
    SiteFeatureName.SEO_TOOLS: ("SEO Tools", "Search engine optimization tools"),
    SiteFeatureName.SOCIAL_MEDIA_INTEGRATION: ("Social Media Integration", "Connect with social media platforms"),
    SiteFeatureName.MULTI_LANGUAGE: ("Multi Language", "Multi-language content support"),
    SiteFeatureName.CUSTOM_FORMS: ("Custom Forms", "Create custom forms and surveys"),
    SiteFeatureName.MEMBER_AREA: ("Member Area", "Member-only content and features"),
    SiteFeatureName.EVENT_MANAGEMENT: ("Event Management", "Manage events and registrations"),
    SiteFeatureName.JOB_BOARD: ("Job Board", "Post and manage job listings"),
}


def parse_feature_name(value: str | None) -> SiteFeatureName | None:
    try:
        return SiteFeatureName((value or "").strip().upper())
    except ValueError:
        return None


def feature_label(feature: SiteFeatureName) -> str:
    return FEATURE_DEFINITIONS[feature][0]


def feature_description(feature: SiteFeatureName) -> str:
    return FEATURE_DEFINITIONS[feature][1]


# -----------------------------
# CONTACT_MANAGEMENT seed
# -----------------------------
DEFAULT_CONTACT_FORM_NAME = "Contact Form"
DEFAULT_CONTACT_FORM_DESCRIPTION = "Default contact form for your website"

REASON_FOR_CONTACT_OPTIONS = [
    "General Inquiry",
    "Support Request",
    "Business Partnership",
    "Feedback",
    "Other",
]

DEFAULT_CONTACT_FIELDS: list[dict[str, Any]] = [
    {
        "field_name": "firstName",
        "field_label": "First Name",
        "field_type": "TEXT",
        "is_required": True,
        "placeholder": "Enter your first name",
        "sort_order": 1,
    },
    {
        "field_name": "lastName",
        "field_label": "Last Name",
        "field_type": "TEXT",
        "is_required": True,
        "placeholder": "Enter your last name",
        "sort_order": 2,
    },
    {
        "field_name": "email",
        "field_label": "Email Address",
        "field_type": "EMAIL",
        "is_required": False,
        "placeholder": "Enter your email address",
        "sort_order": 3,
    },
    {
        "field_name": "companyName",
        "field_label": "Company Name",
        "field_type": "TEXT",
        "is_required": False,
        "placeholder": "Enter your company name",
        "sort_order": 4,
    },
    {
        "field_name": "phoneNumber",
        "field_label": "Phone Number",
        "field_type": "PHONE",
        "is_required": False,
        "placeholder": "Enter your phone number",
        "sort_order": 5,
    },
    {
        "field_name": "reasonForContact",
        "field_label": "Reason for Contact",
        "field_type": "SELECT",
        "is_required": True,
        "options": json.dumps(REASON_FOR_CONTACT_OPTIONS),
        "sort_order": 6,
    },
    {
        "field_name": "message",
        "field_label": "Message",
        "field_type": "TEXTAREA",
        "is_required": True,
        "placeholder": "Enter your message",
        "help_text": "Please provide details about your inquiry",
        "sort_order": 7,
    },
]
