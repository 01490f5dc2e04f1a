# --------------------------------------------------
# CONNECTION REQUESTS
# --------------------------------------------------

# A rejected pair/scope may not be re-requested until this long after the rejection
REJECTION_COOLDOWN_DAYS = 30

# --------------------------------------------------
# MATCH SCORING
# --------------------------------------------------

INTEREST_POINTS = 10
INTEREST_POINTS_CAP = 40

LOOKING_FOR_POINTS = 30
LOOKING_FOR_POINTS_CAP = 60

# How many #tags are spelled out in the interests reason
REASON_TAG_PREVIEW = 3
MAX_REASONS = 2

# --------------------------------------------------
# SUGGESTED CONNECTIONS
# --------------------------------------------------

DEFAULT_SUGGESTION_LIMIT = 10
MAX_SUGGESTION_LIMIT = 20

# Number of ranked suggestions computed and cached per (event, wallet)
SUGGESTION_POOL_SIZE = 20
SUGGESTION_CACHE_TTL_SECONDS = 60 * 60

# Persona visibilities that show up as suggestion candidates
SUGGESTABLE_VISIBILITIES = ("public", "attendees")

# --------------------------------------------------
# PERSONA WRITE LIMITS
# --------------------------------------------------

RATE_LIMIT_WINDOW_SECONDS = 60 * 60
PERSONA_WRITE_LIMIT_PER_WINDOW = 30
PERSONA_DELETE_LIMIT_PER_WINDOW = 20

PERSONA_MAX_TAGS = 10
PERSONA_MAX_TAG_LENGTH = 50
PERSONA_MAX_DISPLAY_NAME = 50
PERSONA_MIN_BIO = 50
PERSONA_MAX_BIO = 300
