from datetime import datetime, timezone
from email.utils import format_datetime
from html import escape

from flask import current_app, has_request_context, request

from app.repositories import post_repository
from app.repositories.profile_repository import get_by_user_ids


FEED_SIZE = 50


def _base_url():
    base_url = current_app.config.get("APP_PUBLIC_BASE_URL", "").rstrip("/")
    if not base_url and has_request_context():
        base_url = request.url_root.rstrip("/")
    return base_url


def _rfc2822(value):
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value, usegmt=True)


def _cdata(text):
    return "<![CDATA[" + (text or "").replace("]]>", "]]]]><![CDATA[>") + "]]>"


def _item(post, author_name, site_name, base_url):
    link = f"{base_url}/p/{post.slug}"
    description = post.excerpt or f"Read {post.title} on {site_name}"
    categories = "".join(
        f"\n      <category>{escape(tag.name)}</category>" for tag in post.tags
    )
    enclosure = ""
    if post.cover_image:
        enclosure = f'\n      <enclosure url="{escape(post.cover_image)}" type="image/jpeg" length="0" />'

    return f"""
    <item>
      <title>{_cdata(post.title)}</title>
      <link>{escape(link)}</link>
      <description>{_cdata(description)}</description>
      <dc:creator>{_cdata(author_name)}</dc:creator>
      <pubDate>{_rfc2822(post.published_at or post.created_at)}</pubDate>
      <guid isPermaLink="true">{escape(link)}</guid>{categories}{enclosure}
    </item>"""


def build_rss_feed(now=None):
    """Render the newest published posts as an RSS 2.0 document."""
    posts = post_repository.published_posts_query().limit(FEED_SIZE).all()
    profiles = {
        profile.user_id: profile
        for profile in get_by_user_ids({post.author_id for post in posts})
    }

    site_name = current_app.config["SITE_NAME"]
    base_url = _base_url()
    build_date = _rfc2822(now or datetime.now(timezone.utc))

    items = []
    for post in posts:
        profile = profiles.get(post.author_id)
        author_name = profile.display_name if profile and profile.display_name else post.author.username
        items.append(_item(post, author_name, site_name, base_url))

    return f"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:atom="http://www.w3.org/2005/Atom"
     xmlns:dc="http://purl.org/dc/elements/1.1/">
  <channel>
    <title>{escape(site_name)}</title>
    <link>{escape(base_url or "/")}</link>
    <description>{escape(current_app.config["SITE_DESCRIPTION"])}</description>
    <language>en-us</language>
    <lastBuildDate>{build_date}</lastBuildDate>
    <docs>https://www.rssboard.org/rss-specification</docs>
    <ttl>60</ttl>
    <atom:link href="{escape(base_url)}/api/feed.xml" rel="self" type="application/rss+xml" />{"".join(items)}
  </channel>
</rss>
"""
