"""Core constants used across fedstore modules.

This module centralizes vocabulary names and default settings.
Keeping values here avoids magic literals in store and query logic.
"""

from __future__ import annotations

PUBLIC_NS = "https://www.w3.org/ns/activitystreams#Public"
DEFAULT_BASE_IRI = "https://example.com"

OBJECT_TYPE = "Object"
NOTE_TYPE = "Note"
ARTICLE_TYPE = "Article"
DOCUMENT_TYPE = "Document"
IMAGE_TYPE = "Image"
AUDIO_TYPE = "Audio"
VIDEO_TYPE = "Video"
PAGE_TYPE = "Page"
EVENT_TYPE = "Event"
PLACE_TYPE = "Place"
PROFILE_TYPE = "Profile"
TOMBSTONE_TYPE = "Tombstone"
OBJECT_TYPES = (
    OBJECT_TYPE,
    NOTE_TYPE,
    ARTICLE_TYPE,
    DOCUMENT_TYPE,
    IMAGE_TYPE,
    AUDIO_TYPE,
    VIDEO_TYPE,
    PAGE_TYPE,
    EVENT_TYPE,
    PLACE_TYPE,
    PROFILE_TYPE,
    TOMBSTONE_TYPE,
)

PERSON_TYPE = "Person"
ACTOR_TYPES = ("Application", "Group", "Organization", PERSON_TYPE, "Service")

ACTIVITY_TYPES = (
    "Accept",
    "Add",
    "Announce",
    "Block",
    "Create",
    "Delete",
    "Dislike",
    "Flag",
    "Follow",
    "Ignore",
    "Invite",
    "Join",
    "Leave",
    "Like",
    "Listen",
    "Move",
    "Offer",
    "Read",
    "Reject",
    "Remove",
    "TentativeAccept",
    "TentativeReject",
    "Undo",
    "Update",
    "View",
)
INTRANSITIVE_ACTIVITY_TYPES = ("Arrive", "Question", "Travel")

LINK_TYPE = "Link"
MENTION_TYPE = "Mention"
LINK_TYPES = (LINK_TYPE, MENTION_TYPE)

COLLECTION_TYPE = "Collection"
COLLECTION_PAGE_TYPE = "CollectionPage"
ORDERED_COLLECTION_TYPE = "OrderedCollection"
ORDERED_COLLECTION_PAGE_TYPE = "OrderedCollectionPage"
ORDERED_COLLECTION_TYPES = (ORDERED_COLLECTION_TYPE, ORDERED_COLLECTION_PAGE_TYPE)
COLLECTION_TYPES = (
    COLLECTION_TYPE,
    COLLECTION_PAGE_TYPE,
    ORDERED_COLLECTION_TYPE,
    ORDERED_COLLECTION_PAGE_TYPE,
)

INBOX_PATH = "inbox"
OUTBOX_PATH = "outbox"
FOLLOWERS_PATH = "followers"
FOLLOWING_PATH = "following"
LIKED_PATH = "liked"
LIKES_PATH = "likes"
SHARES_PATH = "shares"
REPLIES_PATH = "replies"
BLOCKED_PATH = "blocked"
IGNORED_PATH = "ignored"
ACTOR_COLLECTION_FIELDS = ("inbox", "outbox", "followers", "following", "liked")
OBJECT_COLLECTION_FIELDS = ("replies", "likes", "shares")

PRIVATE_KEY_PATH = "privateKey"
PASSWORD_PATH = "__password"
METADATA_PATH = "__meta"
OAUTH_CLIENTS_PREFIX = "oauth/clients"
OAUTH_AUTHORIZE_PREFIX = "oauth/authorize"
OAUTH_ACCESS_PREFIX = "oauth/access"
OAUTH_REFRESH_PREFIX = "oauth/refresh"

STORE_KEYS = "keys"
STORE_PASSWORDS = "passwords"
STORE_METADATA = "metadata"
STORE_OAUTH = "oauth"
SUPPORTED_AUXILIARY_STORES = (STORE_KEYS, STORE_PASSWORDS, STORE_METADATA, STORE_OAUTH)

DEFAULT_SHARD_COUNT = 16
DEFAULT_HIDDEN_COLLECTIONS = (BLOCKED_PATH, IGNORED_PATH)
DEFAULT_RANDOM_SEED = 42
DEFAULT_LOG_LEVEL = "INFO"
SUPPORTED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
BCRYPT_ROUNDS = 4

QUERY_TYPE = "type"
QUERY_ID = "id"
QUERY_ATTRIBUTED_TO = "attributedTo"
QUERY_OBJECT = "object"
QUERY_ANY = "any"
QUERY_ALL = "all"
QUERY_MAX_ITEMS = "maxItems"
QUERY_AFTER = "after"
QUERY_BEFORE = "before"
