"""
Central configuration for the front-matter translation tool.

Language codes are the short tags used in file names (page.en.md → "en").
LANGUAGE_NAMES only makes prompts read better; unknown codes are sent as-is.

Secrets are never stored here: OPENAI_API_KEY (and optionally OPENAI_BASE_URL)
are read from the environment or a .env file.
"""

# ── Model ──────────────────────────────────────────────────────────────────────
MODEL = "gpt-4o-mini"          # change to "gpt-4o", "gpt-4.1", etc.
TEMPERATURE = 0.2              # lower = more consistent/literal translations

# Seconds before a single API call is abandoned (the call is then retried).
REQUEST_TIMEOUT = 120.0

# ── Processing ─────────────────────────────────────────────────────────────────
# How many target languages are translated at the same time.
MAX_WORKERS = 4

# ── Key selection ──────────────────────────────────────────────────────────────
# Manifest file written next to the input when no --output is given.
MANIFEST_SUFFIX = ".keys"

# None → ask interactively; an int → keep the N best-ranked fields.
SELECT_TOP: int | None = None

# ── Languages ──────────────────────────────────────────────────────────────────
LANGUAGE_NAMES: dict[str, str] = {
    "ar": "Arabic",
    "de": "German",
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "hi": "Hindi",
    "it": "Italian",
    "ja": "Japanese",
    "ko": "Korean",
    "nl": "Dutch",
    "pl": "Polish",
    "pt": "Portuguese",
    "ru": "Russian",
    "sv": "Swedish",
    "tr": "Turkish",
    "uk": "Ukrainian",
    "zh": "Chinese",
}
