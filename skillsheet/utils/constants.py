# Experience accrual
EXP_PER_HOUR = 55.0
STREAK_MAX_DAILY_BONUS = 0.5  # multiplier on a prior day's earned EXP at a 0 day gap
MAX_BONUS_DAYS = 5

DEFAULT_SKILL_NAME = 'new skill'
DEFAULT_PLAYER_NAME = 'New Player Name'

# Discord embed field limits
MAX_EMBED_FIELDS = 25
MAX_AUTOCOMPLETE_CHOICES = 25
