"""
Sendwize Compliance Engine - Content Rules

Deterministic deliverability and compliance checks for one email.
NO LLMs used here - pure pattern matching only.

Rule Groups:
1. Critical - PECR Reg 22/23 requirements (unsubscribe, sender address)
2. Subject - spam triggers, shouting, punctuation, length
3. Body - image ratio, links, hidden text, scripts and forms
4. Compliance - ASA CAP Code claims (free, urgency, stock)
5. Best practice - preheader, viewport, size, leftover placeholders

Every rule reads the same EmailSnapshot and returns at most one Finding.
No rule sees another rule's outcome.
"""
from __future__ import annotations
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from bs4 import BeautifulSoup

from ... import config
from ...models.ssot import CheckEntry, CheckStatus, EmailDocument


class RuleGroup(str, Enum):
    CRITICAL = "critical"
    SUBJECT = "subject"
    BODY = "body"
    COMPLIANCE = "compliance"
    BEST_PRACTICE = "best_practice"


# =============================================================================
# PATTERNS
# =============================================================================

UNSUBSCRIBE_TEXT = re.compile(r"unsubscribe|opt-out|opt out", re.IGNORECASE)

UK_POSTCODE = re.compile(r"[A-Z]{1,2}\d{1,2}\s?\d[A-Z]{2}", re.IGNORECASE)
ADDRESS_TEXT = re.compile(r"address|registered office", re.IGNORECASE)
PRIVACY_TEXT = re.compile(r"privacy|data protection|gdpr", re.IGNORECASE)
HTML_TAG = re.compile(r"<html", re.IGNORECASE)
BODY_TAG = re.compile(r"<body", re.IGNORECASE)

SPAM_WORDS = (
    "free", "winner", "claim", "act now", "urgent", "limited time", "click here",
    "buy now", "guarantee", "cash", "$$$", "100%", "risk-free", "no obligation",
    "order now",
)
SPAM_WORD_PATTERNS = tuple(
    (word, re.compile(r"(?<!\w)" + re.escape(word) + r"(?!\w)", re.IGNORECASE))
    for word in SPAM_WORDS
)
UPPERCASE = re.compile(r"[A-Z]")
WHITESPACE = re.compile(r"\s")
REPEATED_PUNCTUATION = re.compile(r"[!?]{2,}")

URL_SHORTENER = re.compile(r"bit\.ly|tinyurl|t\.co", re.IGNORECASE)
HIDDEN_TEXT = re.compile(r"display:\s*none|visibility:\s*hidden|font-size:\s*0", re.IGNORECASE)
SCRIPT_TAG = re.compile(r"<script", re.IGNORECASE)
FORM_TAG = re.compile(r"<form", re.IGNORECASE)

NON_VISIBLE_TAGS = ["style", "script", "noscript", "title"]

FREE_WORD = re.compile(r"\bfree\b", re.IGNORECASE)
TERMS_TEXT = re.compile(r"terms|conditions|t&c", re.IGNORECASE)
URGENCY_TEXT = re.compile(r"limited time|ends soon|last chance|today only", re.IGNORECASE)
EXPLICIT_DATE = re.compile(
    r"\d{1,2}/\d{1,2}/\d{4}|\d{1,2}\s(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)",
    re.IGNORECASE,
)
LIMITED_STOCK = re.compile(r"limited stock|while supplies last|only \d+ left", re.IGNORECASE)

PREHEADER = re.compile(
    r"""<div[^>]*style=["'][^"']*display:\s*none[^"']*["'][^>]*>[^<]{20,}""",
    re.IGNORECASE,
)
VIEWPORT_META = re.compile(r"<meta[^>]*viewport", re.IGNORECASE)
PLACEHOLDER = re.compile(r"\{\{|\[\[|lorem ipsum|todo", re.IGNORECASE)

MAX_SUBJECT_LENGTH = 70
MIN_SUBJECT_LENGTH = 20
MIN_TEXT_LENGTH = 100
CHARS_PER_IMAGE = 50
MAX_LINKS = 15


# =============================================================================
# SNAPSHOT
# =============================================================================

@dataclass(frozen=True)
class Link:
    href: str
    text: str


@dataclass(frozen=True)
class EmailSnapshot:
    """Derived facts about one EmailDocument, computed once per audit."""
    subject: str
    html: str
    text: str
    image_count: int
    images_missing_alt: int
    links: Tuple[Link, ...]

    @classmethod
    def build(cls, document: EmailDocument) -> "EmailSnapshot":
        html = document.html or ""
        soup = BeautifulSoup(html, "html.parser")

        links = tuple(
            Link(href=anchor["href"], text=anchor.get_text(" ", strip=True))
            for anchor in soup.find_all("a", href=True)
        )
        images = soup.find_all("img")

        # Stylesheets and scripts are markup, not copy the reader sees
        for element in soup.find_all(NON_VISIBLE_TAGS):
            element.decompose()
        text = " ".join(soup.get_text(" ", strip=True).split())

        return cls(
            subject=document.subject or "",
            html=html,
            text=text,
            image_count=len(images),
            images_missing_alt=sum(1 for img in images if not img.has_attr("alt")),
            links=links,
        )

    @property
    def size_bytes(self) -> int:
        return len(self.html.encode("utf-8"))


@dataclass(frozen=True)
class Finding:
    entry: CheckEntry
    penalty: int = 0


def _fail(title: str, description: str, penalty: int) -> Finding:
    return Finding(CheckEntry(CheckStatus.FAIL, title, description), penalty)


def _warn(title: str, description: str, penalty: int) -> Finding:
    return Finding(CheckEntry(CheckStatus.WARNING, title, description), penalty)


def _pass(title: str, description: str) -> Finding:
    return Finding(CheckEntry(CheckStatus.PASS, title, description), 0)


# =============================================================================
# CRITICAL RULES
# =============================================================================

def _is_dead_href(href: str) -> bool:
    href = href.strip().lower()
    return href == "#" or href.startswith("javascript:void")


def has_broken_unsubscribe(snapshot: EmailSnapshot) -> bool:
    """An anchor that mentions unsubscribing but links nowhere."""
    for link in snapshot.links:
        if not (UNSUBSCRIBE_TEXT.search(link.text) or UNSUBSCRIBE_TEXT.search(link.href)):
            continue
        if _is_dead_href(link.href):
            return True
    return False


def check_unsubscribe(snapshot: EmailSnapshot) -> Finding:
    if not UNSUBSCRIBE_TEXT.search(snapshot.html):
        return _fail(
            "No Unsubscribe Link",
            "PECR Regulation 22 requires clear unsubscribe mechanism. Add unsubscribe link immediately.",
            10,
        )
    if has_broken_unsubscribe(snapshot):
        return _fail(
            "Broken Unsubscribe Link",
            "Unsubscribe link goes nowhere. This violates PECR and traps users.",
            10,
        )
    return _pass("Unsubscribe Link Present", "Valid unsubscribe mechanism found.")


def check_postal_address(snapshot: EmailSnapshot) -> Finding:
    if not UK_POSTCODE.search(snapshot.html) and not ADDRESS_TEXT.search(snapshot.html):
        return _fail(
            "No Postal Address in Footer",
            "PECR requires company postal address. This is a legal violation - add your registered address.",
            10,
        )
    return _pass("Postal Address Found", "Company address included in email.")


def check_privacy_link(snapshot: EmailSnapshot) -> Finding:
    if not PRIVACY_TEXT.search(snapshot.html):
        return _warn(
            "No Privacy Policy Link",
            "Best practice: Link to privacy policy to show transparency.",
            5,
        )
    return _pass("Privacy Policy Linked", "Privacy information provided.")


def check_html_structure(snapshot: EmailSnapshot) -> Finding:
    if not HTML_TAG.search(snapshot.html) or not BODY_TAG.search(snapshot.html):
        return _fail(
            "Invalid HTML Structure",
            "Missing basic HTML tags. Email may not render correctly.",
            10,
        )
    return _pass("Valid HTML Structure", "Proper HTML document structure.")


# =============================================================================
# SUBJECT RULES
# =============================================================================

def find_spam_words(subject: str) -> List[str]:
    return [word for word, pattern in SPAM_WORD_PATTERNS if pattern.search(subject)]


def check_spam_words(snapshot: EmailSnapshot) -> Finding:
    found = find_spam_words(snapshot.subject)
    if len(found) > 2:
        return _fail(
            "High Spam Score in Subject",
            f"Found {len(found)} spam trigger words: {', '.join(found)}. "
            f"Remove these to improve deliverability.",
            10,
        )
    if found:
        return _warn(
            "Spam Words in Subject",
            f"Found: {', '.join(found)}. Consider rewording.",
            5,
        )
    return _pass("Clean Subject Line", "No obvious spam trigger words detected.")


def caps_ratio(subject: str) -> Optional[float]:
    visible = len(WHITESPACE.sub("", subject))
    if not visible:
        return None
    return len(UPPERCASE.findall(subject)) / visible


def check_all_caps(snapshot: EmailSnapshot) -> Optional[Finding]:
    ratio = caps_ratio(snapshot.subject)
    if ratio is not None and ratio > 0.5:
        return _warn(
            "Excessive Caps in Subject",
            "More than 50% uppercase. Looks like shouting and triggers spam filters.",
            5,
        )
    return None


def check_punctuation(snapshot: EmailSnapshot) -> Optional[Finding]:
    if REPEATED_PUNCTUATION.search(snapshot.subject):
        return _warn(
            "Excessive Punctuation",
            "Multiple exclamation or question marks look unprofessional and spammy.",
            3,
        )
    return None


def check_subject_length(snapshot: EmailSnapshot) -> Optional[Finding]:
    length = len(snapshot.subject)
    if length > MAX_SUBJECT_LENGTH:
        return _warn(
            "Subject Line Too Long",
            f"{length} characters. Mobile devices truncate at ~40 chars. "
            f"Shorten for better open rates.",
            3,
        )
    if length < MIN_SUBJECT_LENGTH:
        return _warn(
            "Subject Line Too Short",
            "Very short subjects often underperform. Aim for 40-50 characters.",
            2,
        )
    return None


# =============================================================================
# BODY RULES
# =============================================================================

def check_text_image_ratio(snapshot: EmailSnapshot) -> Optional[Finding]:
    text_length = len(snapshot.text)
    if snapshot.image_count > 0 and text_length < MIN_TEXT_LENGTH:
        return _fail(
            "Image-Only Email",
            "Less than 100 chars of text. Spam filters block image-only emails. Add more text content.",
            10,
        )
    if snapshot.image_count > text_length / CHARS_PER_IMAGE:
        return _warn(
            "Low Text-to-Image Ratio",
            "Too many images vs text. Aim for 60% text, 40% images.",
            5,
        )
    return None


def check_alt_text(snapshot: EmailSnapshot) -> Optional[Finding]:
    missing = snapshot.images_missing_alt
    if missing:
        return _warn(
            "Missing Alt Text on Images",
            f"{missing} images missing alt text. Required for accessibility and helps deliverability.",
            5,
        )
    return None


def check_insecure_links(snapshot: EmailSnapshot) -> Optional[Finding]:
    insecure = [link for link in snapshot.links if link.href.lower().startswith("http:")]
    if insecure:
        return _warn(
            "Insecure HTTP Links",
            f"{len(insecure)} links use HTTP instead of HTTPS. Modern email clients may block these.",
            5,
        )
    return None


def check_url_shorteners(snapshot: EmailSnapshot) -> Optional[Finding]:
    if any(URL_SHORTENER.search(link.href) for link in snapshot.links):
        return _warn(
            "URL Shorteners Detected",
            "Shortened URLs (bit.ly, etc) trigger spam filters. Use full URLs.",
            3,
        )
    return None


def check_link_count(snapshot: EmailSnapshot) -> Optional[Finding]:
    count = len(snapshot.links)
    if count > MAX_LINKS:
        return _warn(
            "Too Many Links",
            f"{count} links found. More than 15 looks spammy. Focus on 1-3 main CTAs.",
            5,
        )
    return None


def check_hidden_text(snapshot: EmailSnapshot) -> Optional[Finding]:
    if HIDDEN_TEXT.search(snapshot.html):
        return _fail(
            "Hidden Text Detected",
            "CSS hiding text is a spam technique. Remove display:none, visibility:hidden, or font-size:0.",
            10,
        )
    return None


def check_script_tag(snapshot: EmailSnapshot) -> Optional[Finding]:
    if SCRIPT_TAG.search(snapshot.html):
        return _fail(
            "JavaScript in Email",
            "Email clients block JavaScript. Remove all <script> tags - they will not work.",
            10,
        )
    return None


def check_form_tag(snapshot: EmailSnapshot) -> Optional[Finding]:
    if FORM_TAG.search(snapshot.html):
        return _warn(
            "Form in Email",
            "Most email clients do not support forms. Link to a landing page instead.",
            5,
        )
    return None


# =============================================================================
# COMPLIANCE RULES (ASA CAP Code)
# =============================================================================

def check_free_claim(snapshot: EmailSnapshot) -> Optional[Finding]:
    if FREE_WORD.search(snapshot.subject) and not TERMS_TEXT.search(snapshot.html):
        return _warn(
            '"Free" Claim Without T&Cs',
            'ASA CAP Code requires terms when claiming "free". Add link to terms & conditions.',
            5,
        )
    return None


def check_time_limit(snapshot: EmailSnapshot) -> Optional[Finding]:
    if URGENCY_TEXT.search(snapshot.html) and not EXPLICIT_DATE.search(snapshot.html):
        return _warn(
            "Vague Time Limit",
            'Claims like "limited time" must specify exact end date/time (CAP Code 3.7).',
            5,
        )
    return None


def check_limited_stock(snapshot: EmailSnapshot) -> Optional[Finding]:
    if LIMITED_STOCK.search(snapshot.html):
        return _warn(
            "Limited Stock Claim",
            "Must be able to prove stock levels if challenged. Ensure this is accurate.",
            3,
        )
    return None


# =============================================================================
# BEST PRACTICE RULES
# =============================================================================

def check_preheader(snapshot: EmailSnapshot) -> Optional[Finding]:
    if not PREHEADER.search(snapshot.html):
        return _warn(
            "No Preheader Text",
            "Add hidden preheader text for better inbox preview.",
            2,
        )
    return None


def check_viewport(snapshot: EmailSnapshot) -> Optional[Finding]:
    if not VIEWPORT_META.search(snapshot.html):
        return _warn(
            "Not Mobile Optimized",
            "Missing viewport meta tag. 60%+ of emails are opened on mobile.",
            3,
        )
    return None


def check_email_size(snapshot: EmailSnapshot) -> Optional[Finding]:
    size = snapshot.size_bytes
    if size > config.CONTENT_MAX_BYTES:
        return _warn(
            "Email Too Large",
            f"{round(size / 1000)}KB. Gmail clips emails over 102KB. Optimize images and reduce HTML.",
            5,
        )
    return None


def check_placeholders(snapshot: EmailSnapshot) -> Optional[Finding]:
    if PLACEHOLDER.search(snapshot.html):
        return _fail(
            "Template Placeholders Found",
            "Unfinished template detected. Replace all {{placeholders}}, Lorem ipsum, or TODO items.",
            10,
        )
    return None


# =============================================================================
# RULE TABLE
# =============================================================================

@dataclass(frozen=True)
class ContentRule:
    name: str
    group: RuleGroup
    check: Callable[[EmailSnapshot], Optional[Finding]]


CONTENT_RULES: Tuple[ContentRule, ...] = (
    ContentRule("unsubscribe", RuleGroup.CRITICAL, check_unsubscribe),
    ContentRule("postal_address", RuleGroup.CRITICAL, check_postal_address),
    ContentRule("privacy_link", RuleGroup.COMPLIANCE, check_privacy_link),
    ContentRule("html_structure", RuleGroup.CRITICAL, check_html_structure),
    ContentRule("spam_words", RuleGroup.SUBJECT, check_spam_words),
    ContentRule("all_caps", RuleGroup.SUBJECT, check_all_caps),
    ContentRule("punctuation", RuleGroup.SUBJECT, check_punctuation),
    ContentRule("subject_length", RuleGroup.SUBJECT, check_subject_length),
    ContentRule("text_image_ratio", RuleGroup.BODY, check_text_image_ratio),
    ContentRule("alt_text", RuleGroup.BODY, check_alt_text),
    ContentRule("insecure_links", RuleGroup.BODY, check_insecure_links),
    ContentRule("url_shorteners", RuleGroup.BODY, check_url_shorteners),
    ContentRule("link_count", RuleGroup.BODY, check_link_count),
    ContentRule("hidden_text", RuleGroup.BODY, check_hidden_text),
    ContentRule("script_tag", RuleGroup.BODY, check_script_tag),
    ContentRule("form_tag", RuleGroup.BODY, check_form_tag),
    ContentRule("free_claim", RuleGroup.COMPLIANCE, check_free_claim),
    ContentRule("time_limit", RuleGroup.COMPLIANCE, check_time_limit),
    ContentRule("limited_stock", RuleGroup.COMPLIANCE, check_limited_stock),
    ContentRule("preheader", RuleGroup.BEST_PRACTICE, check_preheader),
    ContentRule("viewport", RuleGroup.BEST_PRACTICE, check_viewport),
    ContentRule("email_size", RuleGroup.BEST_PRACTICE, check_email_size),
    ContentRule("placeholders", RuleGroup.BEST_PRACTICE, check_placeholders),
)
